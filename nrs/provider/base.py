"""
Resource Abstract Base Class

Defines the lifecycle contract every reconciler implements. The declarative
engine calls these hooks; a reconciler maps each one onto API client calls
and writes the results back into the ResourceData it was given.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

import structlog

from nrs.provider.errors import ResourceError
from nrs.provider.resource_data import ResourceData
from nrs.provider.schema import Schema, validate_values
from nrs.synthetics.client import SyntheticsClient

logger = structlog.get_logger(__name__)


class Resource(ABC):
    """
    Abstract base class for resource reconcilers.

    Reconcilers hold no state between calls beyond the client.

    Example implementation:
        class ThingResource(Resource):
            name = "nrs_thing"
            description = "A thing"
            schema = {"name": Attribute(AttributeType.STRING, required=True)}

            async def create(self, data):
                thing = await self.client.create_thing(data.get("name"))
                data.set_id(thing.id)
            ...
    """

    name: str
    description: str
    schema: Schema

    def __init__(self, client: SyntheticsClient) -> None:
        self.client = client

    def new_data(
        self,
        resource_id: str = "",
        desired: Mapping[str, Any] | None = None,
        prior: Mapping[str, Any] | None = None,
    ) -> ResourceData:
        """Build a ResourceData bound to this resource's schema."""
        return ResourceData(self.schema, resource_id, desired=desired, prior=prior)

    def validate(self, desired: Mapping[str, Any]) -> list[str]:
        """Check desired values against the schema."""
        return validate_values(self.schema, desired)

    def _error(self, operation: str, data: ResourceData, message: str) -> ResourceError:
        logger.debug("Resource operation failed", resource=self.name, operation=operation, id=data.id)
        return ResourceError(message, resource=self.name, operation=operation, resource_id=data.id)

    @abstractmethod
    async def create(self, data: ResourceData) -> None:
        """Create the remote entity and record its id."""
        ...

    @abstractmethod
    async def read(self, data: ResourceData) -> None:
        """Refresh ``data`` from the remote entity."""
        ...

    @abstractmethod
    async def update(self, data: ResourceData) -> None:
        """Send the changed attributes to the remote entity."""
        ...

    @abstractmethod
    async def delete(self, data: ResourceData) -> None:
        """Delete the remote entity."""
        ...

    @abstractmethod
    async def exists(self, data: ResourceData) -> bool:
        """Whether the remote entity exists. Absence is not an error."""
        ...

    async def import_state(self, data: ResourceData) -> list[ResourceData]:
        """Turn an externally supplied id into resource records. Default: as is."""
        return [data]

    def get_info(self) -> dict[str, Any]:
        """Get resource information as a dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "attributes": {
                key: {
                    "type": attr.type.value,
                    "required": attr.required,
                    "computed": attr.computed,
                    "force_new": attr.force_new,
                }
                for key, attr in self.schema.items()
            },
        }

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.name!r})>"
