"""
Monitor Resource

Reconciles ``nrs_monitor`` records against synthetics monitors and, for
scripted monitor types, their scripts.
"""

from __future__ import annotations

import hashlib
from typing import Any

import structlog

from nrs.provider.base import Resource
from nrs.provider.errors import ScriptAttachError
from nrs.provider.resource_data import ResourceData
from nrs.provider.schema import Attribute, AttributeType
from nrs.synthetics.constants import (
    FREQUENCIES,
    MonitorStatus,
    MonitorType,
    is_script_type,
)
from nrs.synthetics.errors import MonitorNotFoundError, NRSError, ScriptNotFoundError
from nrs.synthetics.models import (
    CreateMonitorArgs,
    ScriptLocation,
    UpdateMonitorArgs,
    UpdateMonitorScriptArgs,
)
from nrs.synthetics.options import OPTION_FIELDS, legal_options

logger = structlog.get_logger(__name__)


def script_fingerprint(script: str) -> str:
    """SHA-256 hex digest of a script. Only this is ever stored, never the text."""
    return hashlib.sha256(script.encode("utf-8")).hexdigest()


MONITOR_SCHEMA: dict[str, Attribute] = {
    "name": Attribute(AttributeType.STRING, required=True),
    "type": Attribute(
        AttributeType.STRING,
        required=True,
        force_new=True,
        allowed=tuple(t.value for t in MonitorType),
        description="The type of monitor (one of SIMPLE, BROWSER, SCRIPT_API, SCRIPT_BROWSER)",
    ),
    "frequency": Attribute(
        AttributeType.INT,
        required=True,
        allowed=FREQUENCIES,
        description="The monitor's checking frequency in minutes",
    ),
    "uri": Attribute(AttributeType.STRING, optional=True, description="The URL to monitor"),
    "locations": Attribute(
        AttributeType.SET, required=True, description="The locations to check from"
    ),
    "status": Attribute(
        AttributeType.STRING,
        required=True,
        allowed=tuple(s.value for s in MonitorStatus),
        description="The monitor's status (one of ENABLED, MUTED, DISABLED)",
    ),
    "sla_threshold": Attribute(
        AttributeType.FLOAT,
        optional=True,
        computed=True,
        description="The monitor's SLA threshold",
    ),
    "validation_string": Attribute(AttributeType.STRING, optional=True),
    "verify_ssl": Attribute(AttributeType.BOOL, optional=True),
    "bypass_head_request": Attribute(AttributeType.BOOL, optional=True),
    "treat_redirect_as_failure": Attribute(AttributeType.BOOL, optional=True),
    "script": Attribute(
        AttributeType.STRING,
        optional=True,
        sensitive=True,
        state_func=script_fingerprint,
        description="The script to execute",
    ),
    "script_locations": Attribute(
        AttributeType.LIST,
        optional=True,
        description="The private locations to execute the script from (name, hmac)",
    ),
}


class MonitorResource(Resource):
    """
    Synthetics monitor resource.

    The script of a SCRIPT_API/SCRIPT_BROWSER monitor is a separate remote
    entity; it is attached after the monitor is created and read back as a
    fingerprint only.
    """

    name = "nrs_monitor"
    description = "A New Relic Synthetics monitor"
    schema = MONITOR_SCHEMA

    @staticmethod
    def _script_args(data: ResourceData, script: str) -> UpdateMonitorScriptArgs:
        locations: list[dict[str, Any]] = data.get("script_locations") or []
        return UpdateMonitorScriptArgs(
            script_text=script,
            script_locations=[
                ScriptLocation(name=loc.get("name", ""), hmac=loc.get("hmac", ""))
                for loc in locations
            ],
        )

    async def create(self, data: ResourceData) -> None:
        monitor_type = MonitorType(data.get("type"))
        args = CreateMonitorArgs(
            name=data.get("name"),
            type=monitor_type,
            frequency=data.get("frequency"),
            uri=data.get("uri") or "",
            locations=sorted(data.get("locations") or []),
            status=MonitorStatus(data.get("status")),
            sla_threshold=data.get("sla_threshold") or 0.0,
            **{field: data.get(field) for field in OPTION_FIELDS},
        )

        try:
            monitor = await self.client.create_monitor(args)
        except NRSError as e:
            raise self._error("create", data, "could not create monitor") from e

        data.set_id(monitor.id)
        data.set("sla_threshold", monitor.sla_threshold)
        logger.info("Monitor created", id=monitor.id, name=monitor.name)

        script = data.get("script")
        if not script:
            return
        if not is_script_type(monitor_type):
            logger.warning(
                "Ignoring script for non-scripted monitor",
                id=monitor.id,
                type=monitor_type.value,
            )
            return

        try:
            await self.client.update_monitor_script(monitor.id, self._script_args(data, script))
        except NRSError as e:
            # Recorded state must not claim a script the service never stored
            data.set("script", None)
            raise ScriptAttachError(
                "monitor created but its script could not be attached",
                resource=self.name,
                monitor_id=monitor.id,
            ) from e
        data.set("script", script_fingerprint(script))

    async def read(self, data: ResourceData) -> None:
        try:
            monitor = await self.client.get_monitor(data.id)
        except NRSError as e:
            raise self._error("read", data, "could not get monitor") from e

        if is_script_type(monitor.type):
            try:
                script = await self.client.get_monitor_script(data.id)
            except ScriptNotFoundError:
                data.set("script", None)
                data.set("script_locations", None)
            except NRSError as e:
                raise self._error("read", data, "could not get monitor script") from e
            else:
                data.set("script", script_fingerprint(script))

        data.set("name", monitor.name)
        data.set("type", monitor.type.value)
        data.set("frequency", monitor.frequency)
        data.set("uri", monitor.uri)
        data.set("locations", sorted(monitor.locations))
        data.set("status", monitor.status.value)
        data.set("sla_threshold", monitor.sla_threshold)
        for field in OPTION_FIELDS:
            data.set(field, getattr(monitor, field))

    def _update_args(self, data: ResourceData) -> UpdateMonitorArgs:
        """Whole-document fields always, everything else only when changed."""
        status = data.get("status")
        fields: dict[str, Any] = {
            "name": data.get("name") or "",
            "frequency": data.get("frequency") or 0,
            "uri": data.get("uri") or "",
            "status": MonitorStatus(status) if status else None,
        }

        if data.has_change("locations"):
            fields["locations"] = sorted(data.get("locations") or [])
        if data.has_change("sla_threshold"):
            fields["sla_threshold"] = data.get("sla_threshold") or 0.0

        # The service cannot unset an option through PATCH, so only set values go out
        legal = legal_options(data.get("type"))
        for field in OPTION_FIELDS:
            if field not in legal or not data.has_change(field):
                continue
            value = data.get(field)
            if value is None or value == "":
                continue
            fields[field] = value

        return UpdateMonitorArgs(**fields)

    async def update(self, data: ResourceData) -> None:
        try:
            monitor = await self.client.update_monitor(data.id, self._update_args(data))
        except NRSError as e:
            raise self._error("update", data, "could not update monitor") from e

        data.set("sla_threshold", monitor.sla_threshold)

        if not (data.has_change("script") or data.has_change("script_locations")):
            return
        script = data.get("script")
        if not script:
            logger.warning("Script removed from configuration; remote script left as is", id=data.id)
            return
        if not is_script_type(data.get("type")):
            logger.warning(
                "Ignoring script for non-scripted monitor",
                id=data.id,
                type=data.get("type"),
            )
            return

        try:
            await self.client.update_monitor_script(data.id, self._script_args(data, script))
        except NRSError as e:
            raise self._error("update", data, "could not update monitor script") from e
        data.set("script", script_fingerprint(script))

    async def delete(self, data: ResourceData) -> None:
        try:
            await self.client.delete_monitor(data.id)
        except NRSError as e:
            raise self._error("delete", data, "could not delete monitor") from e

    async def exists(self, data: ResourceData) -> bool:
        try:
            await self.client.get_monitor(data.id)
        except MonitorNotFoundError:
            return False
        except NRSError as e:
            raise self._error("exists", data, "could not get monitor") from e
        return True
