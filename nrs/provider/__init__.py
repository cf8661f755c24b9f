"""Declarative resources backed by the synthetics client."""

from nrs.provider.alert_condition import (
    ALERT_CONDITION_SCHEMA,
    AlertConditionResource,
    parse_import_id,
)
from nrs.provider.base import Resource
from nrs.provider.errors import (
    InvalidImportIDError,
    ProviderNotConfiguredError,
    ResourceError,
    ScriptAttachError,
    UnknownResourceError,
)
from nrs.provider.monitor import MONITOR_SCHEMA, MonitorResource, script_fingerprint
from nrs.provider.provider import PROVIDER_SCHEMA, RESOURCES, Provider
from nrs.provider.resource_data import ResourceData
from nrs.provider.schema import Attribute, AttributeType, validate_schema, validate_values

__all__ = [
    "Provider",
    "PROVIDER_SCHEMA",
    "RESOURCES",
    # Resources
    "Resource",
    "MonitorResource",
    "MONITOR_SCHEMA",
    "script_fingerprint",
    "AlertConditionResource",
    "ALERT_CONDITION_SCHEMA",
    "parse_import_id",
    # Records and schemas
    "ResourceData",
    "Attribute",
    "AttributeType",
    "validate_schema",
    "validate_values",
    # Errors
    "ResourceError",
    "ScriptAttachError",
    "InvalidImportIDError",
    "UnknownResourceError",
    "ProviderNotConfiguredError",
]
