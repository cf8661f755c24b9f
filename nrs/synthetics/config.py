"""Client configuration."""

from __future__ import annotations

from dataclasses import dataclass

from nrs.synthetics.constants import DEFAULT_ALERTS_URL, DEFAULT_SYNTHETICS_URL
from nrs.synthetics.transport import DEFAULT_BACKOFF_SECONDS, DEFAULT_RETRIES


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for a SyntheticsClient. ``api_key`` must be non-empty."""

    api_key: str
    synthetics_url: str = DEFAULT_SYNTHETICS_URL
    alerts_url: str = DEFAULT_ALERTS_URL
    retries: int = DEFAULT_RETRIES
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS
    timeout_seconds: float = 30.0
