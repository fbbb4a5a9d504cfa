"""Region table loader. Reads the static AWS region list shipped with the package."""

from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

REGIONS_DIR = Path(__file__).parent
REGIONS_FILE = REGIONS_DIR / "regions.yaml"


class Region(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    region_id: str = Field(alias="regionId")
    region_label: str = Field(alias="regionLabel")


@lru_cache(maxsize=None)
def load_regions(path: Path = REGIONS_FILE) -> tuple[Region, ...]:
    """Load the region table once per path, keeping file order."""
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or []
    return tuple(Region.model_validate(item) for item in data)
