"""
Alert Condition Resource

Reconciles ``nrs_alert_condition`` records. The service scopes condition
lookups by policy, so every operation after create needs the compound key
(policy_id, id).
"""

from __future__ import annotations

import structlog

from nrs.provider.base import Resource
from nrs.provider.errors import InvalidImportIDError
from nrs.provider.resource_data import ResourceData
from nrs.provider.schema import Attribute, AttributeType
from nrs.synthetics.errors import AlertConditionNotFoundError, InvalidArgumentError, NRSError
from nrs.synthetics.models import CreateAlertConditionArgs, UpdateAlertConditionArgs

logger = structlog.get_logger(__name__)


ALERT_CONDITION_SCHEMA: dict[str, Attribute] = {
    "name": Attribute(
        AttributeType.STRING, required=True, description="The name of the alert condition"
    ),
    "monitor_id": Attribute(
        AttributeType.STRING,
        required=True,
        force_new=True,
        description="The ID of the monitor",
    ),
    "runbook_url": Attribute(
        AttributeType.STRING,
        optional=True,
        description="The URL to a runbook for addressing the alert",
    ),
    "enabled": Attribute(
        AttributeType.BOOL,
        required=True,
        description="Whether the alert condition is enabled",
    ),
    "policy_id": Attribute(
        AttributeType.INT,
        required=True,
        force_new=True,
        description="The ID of the policy to attach the alert condition to",
    ),
}


def parse_import_id(import_id: str) -> tuple[int, str]:
    """
    Split an import id of the form ``policy_id:condition_id``.

    A policy id that is not numeric becomes 0; the read that follows an
    import then fails on its own.

    Raises:
        InvalidImportIDError: Unless the id has exactly two non-empty parts
    """
    parts = import_id.split(":")
    if len(parts) != 2 or not all(parts):
        raise InvalidImportIDError(
            "import id should consist of policy_id:condition_id",
            operation="import",
            identifier=import_id,
        )

    policy_part, condition_id = parts
    try:
        policy_id = int(policy_part)
    except ValueError:
        logger.warning("Non-numeric policy id in import id", import_id=import_id)
        policy_id = 0
    return policy_id, condition_id


class AlertConditionResource(Resource):
    """Synthetics alert condition resource."""

    name = "nrs_alert_condition"
    description = "A New Relic Synthetics alert condition"
    schema = ALERT_CONDITION_SCHEMA

    def _condition_id(self, data: ResourceData, operation: str) -> int:
        try:
            return int(data.id)
        except ValueError:
            cause = InvalidArgumentError(
                f"could not convert id {data.id!r} to int",
                operation=operation,
                identifier=data.id,
            )
        raise self._error(operation, data, "could not determine alert condition id") from cause

    @staticmethod
    def _policy_id(data: ResourceData) -> int:
        return int(data.get("policy_id") or 0)

    async def create(self, data: ResourceData) -> None:
        args = CreateAlertConditionArgs(
            name=data.get("name"),
            monitor_id=data.get("monitor_id"),
            enabled=bool(data.get("enabled")),
            runbook_url=data.get("runbook_url") or None,
        )

        try:
            condition = await self.client.create_alert_condition(self._policy_id(data), args)
        except NRSError as e:
            raise self._error("create", data, "could not create alert condition") from e

        data.set_id(str(condition.id))

    async def import_state(self, data: ResourceData) -> list[ResourceData]:
        policy_id, condition_id = parse_import_id(data.id)
        data.set_id(condition_id)
        data.set("policy_id", policy_id)
        return [data]

    async def read(self, data: ResourceData) -> None:
        condition_id = self._condition_id(data, "read")
        try:
            condition = await self.client.get_alert_condition(self._policy_id(data), condition_id)
        except NRSError as e:
            raise self._error("read", data, "could not find alert condition") from e

        data.set("name", condition.name)
        data.set("monitor_id", condition.monitor_id)
        data.set("runbook_url", condition.runbook_url)
        data.set("enabled", condition.enabled)

    async def update(self, data: ResourceData) -> None:
        condition_id = self._condition_id(data, "update")
        args = UpdateAlertConditionArgs(
            id=condition_id,
            name=data.get("name"),
            monitor_id=data.get("monitor_id"),
            enabled=bool(data.get("enabled")),
        )
        if data.has_change("runbook_url"):
            args.runbook_url = data.get("runbook_url")

        try:
            await self.client.update_alert_condition(self._policy_id(data), args)
        except NRSError as e:
            raise self._error("update", data, "could not update alert condition") from e

    async def delete(self, data: ResourceData) -> None:
        condition_id = self._condition_id(data, "delete")
        try:
            await self.client.delete_alert_condition(condition_id)
        except NRSError as e:
            raise self._error("delete", data, "could not delete alert condition") from e

    async def exists(self, data: ResourceData) -> bool:
        condition_id = self._condition_id(data, "exists")
        try:
            await self.client.get_alert_condition(self._policy_id(data), condition_id)
        except AlertConditionNotFoundError:
            return False
        except NRSError as e:
            raise self._error("exists", data, "could not find alert condition") from e
        return True
