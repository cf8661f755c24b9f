"""
Provider

Holds the provider-level configuration (the API key), builds the shared
SyntheticsClient from it and hands out resource reconcilers by name.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from nrs.config import NRSSettings
from nrs.provider.alert_condition import AlertConditionResource
from nrs.provider.base import Resource
from nrs.provider.errors import ProviderNotConfiguredError, UnknownResourceError
from nrs.provider.monitor import MonitorResource
from nrs.provider.schema import Attribute, AttributeType, validate_schema, validate_values
from nrs.synthetics.client import SyntheticsClient
from nrs.synthetics.config import ClientConfig
from nrs.synthetics.errors import InvalidArgumentError

logger = structlog.get_logger(__name__)


PROVIDER_SCHEMA: dict[str, Attribute] = {
    "new_relic_api_key": Attribute(
        AttributeType.STRING,
        required=True,
        sensitive=True,
        description="The New Relic account API key",
    ),
}

RESOURCES: dict[str, type[Resource]] = {
    MonitorResource.name: MonitorResource,
    AlertConditionResource.name: AlertConditionResource,
}


class Provider:
    """
    Entry point for a declarative engine.

    Usage:
        provider = Provider()
        provider.configure({"new_relic_api_key": "..."})
        monitors = provider.resource("nrs_monitor")
        data = monitors.new_data(desired={...})
        await monitors.create(data)
        await provider.aclose()
    """

    schema = PROVIDER_SCHEMA

    def __init__(
        self,
        base_config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize an unconfigured provider.

        Args:
            base_config: Defaults for everything but the API key (URLs, retries)
            transport: Transport handed to the client, mainly for tests
        """
        self._base_config = base_config or ClientConfig(api_key="")
        self._transport = transport
        self._client: SyntheticsClient | None = None
        self._resources: dict[str, Resource] = {}

    @property
    def resources(self) -> dict[str, type[Resource]]:
        return dict(RESOURCES)

    @property
    def client(self) -> SyntheticsClient:
        if self._client is None:
            raise ProviderNotConfiguredError("provider has not been configured")
        return self._client

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def configure(self, values: Mapping[str, Any]) -> SyntheticsClient:
        """
        Build the client from provider values.

        Raises:
            InvalidArgumentError: If the values do not match the provider schema
            MissingCredentialError: If the API key is empty
        """
        problems = validate_values(self.schema, values)
        if problems:
            raise InvalidArgumentError("; ".join(problems), operation="configure")

        config = dataclasses.replace(self._base_config, api_key=values["new_relic_api_key"])
        return self._set_client(SyntheticsClient(config, transport=self._transport))

    def configure_from_settings(self, settings: NRSSettings | None = None) -> SyntheticsClient:
        """Build the client from environment settings."""
        settings = settings or NRSSettings()
        client = SyntheticsClient(settings.to_client_config(), transport=self._transport)
        return self._set_client(client)

    def _set_client(self, client: SyntheticsClient) -> SyntheticsClient:
        if self._client is not None:
            logger.warning("Provider reconfigured; previous client is dropped")
        self._client = client
        self._resources = {}
        logger.debug("Provider configured", synthetics_url=client.config.synthetics_url)
        return client

    def resource(self, name: str) -> Resource:
        """
        Get the reconciler for a resource name.

        Raises:
            UnknownResourceError: If no resource has that name
            ProviderNotConfiguredError: If configure has not been called
        """
        if name not in RESOURCES:
            raise UnknownResourceError(f"unknown resource '{name}'", identifier=name)
        if name not in self._resources:
            self._resources[name] = RESOURCES[name](self.client)
        return self._resources[name]

    def validate(self) -> list[str]:
        """Check the provider schema and every resource schema."""
        problems = [f"provider.{p}" for p in validate_schema(self.schema)]
        for name, resource_class in RESOURCES.items():
            problems.extend(f"{name}.{p}" for p in validate_schema(resource_class.schema))
        return problems

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            self._resources = {}
