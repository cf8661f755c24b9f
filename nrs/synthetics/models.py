"""
Synthetics Models

Wire documents returned by the service and the argument types the client
renders into request payloads.
"""

from __future__ import annotations

import base64
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from nrs.synthetics.constants import (
    TIMESTAMP_FORMAT,
    TIMESTAMP_PATTERN,
    MonitorStatus,
    MonitorType,
)
from nrs.synthetics.errors import TimestampParseError
from nrs.synthetics.options import OPTION_FIELDS, decode_options, encode_options


class Monitor(BaseModel):
    """
    A synthetic check as reported by the service.

    The type-conditional settings arrive nested in ``options`` and are
    lifted to flat fields; a field the service did not report stays None.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = ""
    name: str
    type: MonitorType
    frequency: int
    uri: str | None = None
    locations: list[str] = Field(default_factory=list)
    status: MonitorStatus
    sla_threshold: float = Field(default=0.0, alias="slaThreshold")
    user_id: int | None = Field(default=None, alias="userId")
    api_version: str | None = Field(default=None, alias="apiVersion")
    options: dict[str, Any] = Field(default_factory=dict)

    # Lifted from options
    validation_string: str | None = None
    verify_ssl: bool | None = None
    bypass_head_request: bool | None = None
    treat_redirect_as_failure: bool | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_options(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("options"), dict):
            data = {**decode_options(data["options"]), **data}
        return data

    @field_validator("options", mode="before")
    @classmethod
    def _null_options(cls, value: Any) -> Any:
        return value or {}

    @property
    def is_created(self) -> bool:
        """Whether the service has assigned an id."""
        return bool(self.id)


class ExtendedMonitor(Monitor):
    """Monitor record as returned by the list endpoint, with timestamps."""

    created_at_raw: str = Field(default="", alias="createdAt")
    modified_at_raw: str = Field(default="", alias="modifiedAt")
    created_at: datetime | None = None
    modified_at: datetime | None = None

    def parse_timestamps(self) -> None:
        """Parse createdAt/modifiedAt; raises TimestampParseError on mismatch."""
        self.modified_at = _parse_timestamp(self.id, self.modified_at_raw)
        self.created_at = _parse_timestamp(self.id, self.created_at_raw)


def _parse_timestamp(monitor_id: str, value: str) -> datetime:
    match = TIMESTAMP_PATTERN.fullmatch(value or "")
    if match is None:
        raise TimestampParseError(
            f"could not parse timestamp {value!r}",
            monitor_id=monitor_id,
            value=value,
            operation="get_all_monitors",
        )

    # strptime takes at most microseconds, so pad or truncate to six digits
    fraction = (match["fraction"] or "")[:6].ljust(6, "0")
    normalized = f"{match['seconds']}.{fraction}{match['offset']}"
    try:
        return datetime.strptime(normalized, TIMESTAMP_FORMAT)
    except ValueError as e:
        raise TimestampParseError(
            f"could not parse timestamp {value!r}: {e}",
            monitor_id=monitor_id,
            value=value,
            operation="get_all_monitors",
        ) from e


class MonitorList(BaseModel):
    """Envelope returned by the monitor list endpoint."""

    monitors: list[ExtendedMonitor] = Field(default_factory=list)
    count: int = 0


class CreateMonitorArgs(BaseModel):
    """Arguments to SyntheticsClient.create_monitor."""

    name: str
    type: MonitorType
    frequency: int
    uri: str = ""
    locations: list[str] = Field(default_factory=list)
    status: MonitorStatus = MonitorStatus.ENABLED
    sla_threshold: float = 0.0

    validation_string: str | None = None
    verify_ssl: bool | None = None
    bypass_head_request: bool | None = None
    treat_redirect_as_failure: bool | None = None

    def option_fields(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in OPTION_FIELDS}

    def to_payload(self) -> dict[str, Any]:
        """Render the create document. Options not legal for the type are dropped."""
        payload: dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "frequency": self.frequency,
            "locations": list(self.locations),
            "status": self.status.value,
        }
        if self.uri:
            payload["uri"] = self.uri
        if self.sla_threshold:
            payload["slaThreshold"] = self.sla_threshold

        options = encode_options(self.option_fields(), self.type)
        if options:
            payload["options"] = options
        return payload


class UpdateMonitorArgs(BaseModel):
    """
    Arguments to SyntheticsClient.update_monitor.

    Zero values (empty name, 0 frequency, empty uri/locations, no status,
    0 SLA threshold) are left out of the PATCH document, so only populate
    what changed.
    """

    name: str = ""
    frequency: int = 0
    uri: str = ""
    locations: list[str] = Field(default_factory=list)
    status: MonitorStatus | None = None
    sla_threshold: float = 0.0

    validation_string: str | None = None
    verify_ssl: bool | None = None
    bypass_head_request: bool | None = None
    treat_redirect_as_failure: bool | None = None

    def option_fields(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in OPTION_FIELDS}

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.name:
            payload["name"] = self.name
        if self.frequency:
            payload["frequency"] = self.frequency
        if self.uri:
            payload["uri"] = self.uri
        if self.locations:
            payload["locations"] = list(self.locations)
        if self.status is not None:
            payload["status"] = self.status.value
        if self.sla_threshold:
            payload["slaThreshold"] = self.sla_threshold

        options = encode_options(self.option_fields())
        if options:
            payload["options"] = options
        return payload


class ScriptLocation(BaseModel):
    """A private location a script runs from."""

    name: str
    hmac: str


class UpdateMonitorScriptArgs(BaseModel):
    """Arguments to SyntheticsClient.update_monitor_script."""

    script_text: str
    script_locations: list[ScriptLocation] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "scriptText": base64.b64encode(self.script_text.encode("utf-8")).decode("ascii"),
        }
        if self.script_locations:
            payload["scriptLocations"] = [loc.model_dump() for loc in self.script_locations]
        return payload


class MonitorScript(BaseModel):
    """Script document; the text is base64 encoded on the wire."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    script_text: str = Field(alias="scriptText")


class AlertCondition(BaseModel):
    """A synthetics alert condition, scoped to a policy."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    monitor_id: str
    enabled: bool = True
    runbook_url: str | None = None


class AlertConditionEnvelope(BaseModel):
    synthetics_condition: AlertCondition


class AlertConditionList(BaseModel):
    synthetics_conditions: list[AlertCondition] = Field(default_factory=list)


class CreateAlertConditionArgs(BaseModel):
    """Arguments to SyntheticsClient.create_alert_condition."""

    name: str
    monitor_id: str
    enabled: bool = True
    runbook_url: str | None = None

    def _condition(self) -> dict[str, Any]:
        condition: dict[str, Any] = {
            "name": self.name,
            "monitor_id": self.monitor_id,
            "enabled": self.enabled,
        }
        if self.runbook_url is not None:
            condition["runbook_url"] = self.runbook_url
        return condition

    def to_payload(self) -> dict[str, Any]:
        return {"synthetics_condition": self._condition()}


class UpdateAlertConditionArgs(CreateAlertConditionArgs):
    """Arguments to SyntheticsClient.update_alert_condition."""

    id: int

    def to_payload(self) -> dict[str, Any]:
        return {"synthetics_condition": {"id": self.id, **self._condition()}}
