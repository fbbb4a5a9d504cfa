"""AWS service client wrapper around boto3.

Exposes only what the plugin kit needs from a client: checking that an
operation exists and awaiting a call to it.
"""

import asyncio
import logging
from functools import partial
from typing import Any

import boto3

from aws_plugin_kit.errors import UnknownMethodError
from aws_plugin_kit.parser.base import Credentials

logger = logging.getLogger(__name__)


class ServiceClient:
    """Wrapper for calls to one AWS service via boto3."""

    def __init__(self, service: str, credentials: Credentials, session: boto3.Session | None = None):
        self.service = service
        self.region = credentials.region
        if session is None:
            session = boto3.Session(
                aws_access_key_id=credentials.access_key_id,
                aws_secret_access_key=credentials.secret_access_key.get_secret_value(),
                region_name=credentials.region,
            )
        self._client = session.client(service, region_name=credentials.region)

    def has_method(self, name: str) -> bool:
        """True if ``name`` is an API operation of the underlying client."""
        return name in self._client.meta.method_to_api_mapping

    async def call(self, name: str, payload: dict | None = None) -> Any:
        """Invoke operation ``name`` with ``payload`` as keyword arguments.

        The blocking boto3 call runs in a worker thread. ``ResponseMetadata``
        is dropped so that operations without output return an empty dict.
        """
        if not self.has_method(name):
            raise UnknownMethodError(name)

        logger.debug("Calling %s.%s in %s", self.service, name, self.region)
        response = await asyncio.to_thread(getattr(self._client, name), **(payload or {}))
        if isinstance(response, dict):
            response = {k: v for k, v in response.items() if k != "ResponseMetadata"}
        return response


def boto_service(service: str):
    """Return a factory building a ``ServiceClient`` for ``service`` from credentials."""
    return partial(ServiceClient, service)
