"""
Monitor Options Encoding

Translates the flat, type-conditional monitor fields to and from the
nested ``options`` document used on the wire.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from nrs.synthetics.constants import MonitorType

# Flat field name -> key inside the wire "options" object
OPTION_KEYS: dict[str, str] = {
    "validation_string": "validationString",
    "verify_ssl": "verifySSL",
    "bypass_head_request": "bypassHEADRequest",
    "treat_redirect_as_failure": "treatRedirectAsFailure",
}

OPTION_FIELDS = tuple(OPTION_KEYS)

LEGAL_OPTIONS: dict[MonitorType, frozenset[str]] = {
    MonitorType.SIMPLE: frozenset(OPTION_FIELDS),
    MonitorType.BROWSER: frozenset({"validation_string", "verify_ssl"}),
    MonitorType.SCRIPT_API: frozenset(),
    MonitorType.SCRIPT_BROWSER: frozenset(),
}


def legal_options(monitor_type: MonitorType | str) -> frozenset[str]:
    """Return the optional fields the service honours for a monitor type."""
    return LEGAL_OPTIONS.get(MonitorType(monitor_type), frozenset())


def encode_options(
    fields: Mapping[str, Any],
    monitor_type: MonitorType | str | None = None,
) -> dict[str, Any]:
    """
    Build the wire ``options`` mapping from flat optional fields.

    Unset (None) fields are left out. When a monitor type is given, fields
    that type does not support are dropped as well, the same way the
    service ignores them.

    Args:
        fields: Flat field name -> value (None meaning unset)
        monitor_type: Type used to filter fields, or None to keep every set field

    Returns:
        The options mapping, empty when nothing is left to send
    """
    allowed = legal_options(monitor_type) if monitor_type is not None else frozenset(OPTION_FIELDS)

    options: dict[str, Any] = {}
    for name in OPTION_FIELDS:
        value = fields.get(name)
        if value is None or name not in allowed:
            continue
        options[OPTION_KEYS[name]] = value
    return options


def decode_options(options: Mapping[str, Any] | None) -> dict[str, Any]:
    """Map a wire ``options`` object back to flat fields (None when absent)."""
    options = options or {}
    return {name: options.get(key) for name, key in OPTION_KEYS.items()}
