"""Synthetics API client - monitors, monitor scripts and alert conditions."""

from nrs.synthetics.client import SyntheticsClient
from nrs.synthetics.config import ClientConfig
from nrs.synthetics.constants import MonitorStatus, MonitorType
from nrs.synthetics.errors import (
    AlertConditionNotFoundError,
    DecodeError,
    IDExtractionError,
    InvalidArgumentError,
    MissingCredentialError,
    MonitorNotFoundError,
    NotFoundError,
    NRSError,
    ScriptNotFoundError,
    TimestampParseError,
    TransportError,
    UnexpectedStatusError,
)
from nrs.synthetics.models import (
    AlertCondition,
    CreateAlertConditionArgs,
    CreateMonitorArgs,
    ExtendedMonitor,
    Monitor,
    MonitorList,
    ScriptLocation,
    UpdateAlertConditionArgs,
    UpdateMonitorArgs,
    UpdateMonitorScriptArgs,
)
from nrs.synthetics.transport import RetryingTransport

__all__ = [
    # Client
    "SyntheticsClient",
    "ClientConfig",
    "RetryingTransport",
    # Constants
    "MonitorType",
    "MonitorStatus",
    # Models
    "Monitor",
    "ExtendedMonitor",
    "MonitorList",
    "CreateMonitorArgs",
    "UpdateMonitorArgs",
    "ScriptLocation",
    "UpdateMonitorScriptArgs",
    "AlertCondition",
    "CreateAlertConditionArgs",
    "UpdateAlertConditionArgs",
    # Errors
    "NRSError",
    "InvalidArgumentError",
    "MissingCredentialError",
    "TransportError",
    "UnexpectedStatusError",
    "NotFoundError",
    "MonitorNotFoundError",
    "ScriptNotFoundError",
    "AlertConditionNotFoundError",
    "DecodeError",
    "IDExtractionError",
    "TimestampParseError",
]
