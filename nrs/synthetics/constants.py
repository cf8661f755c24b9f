"""Constants shared by the synthetics client and the reconcilers."""

import re
from enum import Enum


class MonitorType(str, Enum):
    """Kinds of synthetic monitor. Immutable once a monitor is created."""

    SIMPLE = "SIMPLE"  # Ping
    BROWSER = "BROWSER"  # Single page load
    SCRIPT_API = "SCRIPT_API"
    SCRIPT_BROWSER = "SCRIPT_BROWSER"


class MonitorStatus(str, Enum):
    """Monitor status."""

    ENABLED = "ENABLED"
    MUTED = "MUTED"
    DISABLED = "DISABLED"


SCRIPT_TYPES = frozenset({MonitorType.SCRIPT_API, MonitorType.SCRIPT_BROWSER})

# Check frequencies accepted by the service, in minutes
FREQUENCIES = (1, 5, 10, 15, 30, 60, 360, 720, 1440)

DEFAULT_SYNTHETICS_URL = "https://synthetics.newrelic.com/synthetics/api/v3"
DEFAULT_ALERTS_URL = "https://api.newrelic.com/v2"

API_KEY_HEADER = "X-Api-Key"

# createdAt/modifiedAt in monitor list records, e.g. 2016-06-13T20:13:31.000+0000.
# The fraction is optional and may carry up to nanosecond precision.
TIMESTAMP_PATTERN = re.compile(
    r"(?P<seconds>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?"
    r"(?P<offset>[+-]\d{4})"
)
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"


def is_script_type(monitor_type: MonitorType | str) -> bool:
    """Check whether a monitor type is backed by a script."""
    try:
        return MonitorType(monitor_type) in SCRIPT_TYPES
    except ValueError:
        return False
