"""Environment settings."""

from pydantic_settings import BaseSettings

from nrs.synthetics.config import ClientConfig
from nrs.synthetics.constants import DEFAULT_ALERTS_URL, DEFAULT_SYNTHETICS_URL
from nrs.synthetics.transport import DEFAULT_BACKOFF_SECONDS, DEFAULT_RETRIES


class NRSSettings(BaseSettings):
    """Settings read from the environment (NRS_API_KEY, NRS_RETRIES, ...)."""

    api_key: str = ""
    synthetics_url: str = DEFAULT_SYNTHETICS_URL
    alerts_url: str = DEFAULT_ALERTS_URL

    # Rate limit handling
    retries: int = DEFAULT_RETRIES
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS

    timeout_seconds: float = 30.0
    log_level: str = "WARNING"

    class Config:
        env_prefix = "NRS_"

    def to_client_config(self) -> ClientConfig:
        return ClientConfig(
            api_key=self.api_key,
            synthetics_url=self.synthetics_url.rstrip("/"),
            alerts_url=self.alerts_url.rstrip("/"),
            retries=self.retries,
            backoff_seconds=self.backoff_seconds,
            timeout_seconds=self.timeout_seconds,
        )


def load_settings() -> NRSSettings:
    """Read settings from the environment."""
    return NRSSettings()
