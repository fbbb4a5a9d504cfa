"""Data models shared by the coercion and autocomplete engines.

The method catalog, the raw values received from the host and the
autocomplete items sent back are all described here as pydantic models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from aws_plugin_kit.consts import (
    DEFAULT_ACCESS_KEY_LABEL,
    DEFAULT_REGION_LABEL,
    DEFAULT_SECRET_KEY_LABEL,
)


class ParamDefinition(BaseModel):
    """A single configurable input of a plugin method."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    type: str = "string"  # parser type tag
    required: bool = False
    default: Any = None
    parser_type: str | None = Field(default=None, alias="parserType")

    @property
    def effective_type(self) -> str:
        return self.parser_type or self.type


class MethodDefinition(BaseModel):
    """A plugin method and the parameters it declares."""

    model_config = ConfigDict(extra="ignore")

    name: str
    operation: str | None = None  # boto3 client method, defaults to name
    params: list[ParamDefinition] = []

    @property
    def operation_name(self) -> str:
        return self.operation or self.name

    def find_param(self, name: str) -> ParamDefinition | None:
        return next((p for p in self.params if p.name == name), None)


class AutocompleteDefinition(BaseModel):
    """An autocomplete field filled by projecting a listing call."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    operation: str
    array_path: str = Field(default="", alias="arrayPath")
    value_path: str = Field(default="", alias="valuePath")


class PluginCatalog(BaseModel):
    """Everything a plugin declares: its AWS service, methods and autocompletes."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    service: str = ""
    methods: list[MethodDefinition] = []
    autocompletes: list[AutocompleteDefinition] = []

    def find_method(self, name: str) -> MethodDefinition | None:
        return next((m for m in self.methods if m.name == name), None)


class RawParameter(BaseModel):
    """One value as the host sends it to autocomplete functions."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    value: Any = None
    type: str | None = None
    value_type: str | None = Field(default=None, alias="valueType")

    @property
    def declared_type(self) -> str | None:
        return self.type or self.value_type


class AutocompleteItem(BaseModel):
    """A candidate shown in a host dropdown. ``value`` is the visible label."""

    model_config = ConfigDict(extra="forbid")

    id: Any
    value: str

    @field_validator("value")
    @classmethod
    def _label_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("autocomplete item label cannot be empty")
        return v


class CredentialLabels(BaseModel):
    """Parameter names under which credentials are looked up."""

    model_config = ConfigDict(frozen=True)

    access_key: str = DEFAULT_ACCESS_KEY_LABEL
    secret_key: str = DEFAULT_SECRET_KEY_LABEL
    region: str = DEFAULT_REGION_LABEL

    def as_tuple(self) -> tuple[str, str, str]:
        return (self.access_key, self.secret_key, self.region)


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    access_key_id: str
    secret_access_key: SecretStr
    region: str


def values_to_mapping(values: Any) -> Any:
    """Turn ``[{"name": ..., "value": ...}]`` into ``{name: value}``; mappings pass through."""
    if values is None:
        return {}
    if isinstance(values, list):
        return {
            item["name"]: item.get("value")
            for item in values
            if isinstance(item, dict) and "name" in item
        }
    return values


class MethodRef(BaseModel):
    name: str


class Action(BaseModel):
    """An action invocation received from the host."""

    model_config = ConfigDict(extra="allow")

    method: MethodRef
    params: dict[str, Any] = {}

    @field_validator("params", mode="before")
    @classmethod
    def _params_to_mapping(cls, v: Any) -> Any:
        return values_to_mapping(v)


DEFAULT_CREDENTIAL_LABELS = CredentialLabels()
