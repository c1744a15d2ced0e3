"""Environment-driven client settings.

All values are read from ``ARTEMIS_*`` environment variables (or a local
``.env`` file). The API base URL and the identity-provider publishable key
are required at boot; a client is never started without them.
"""

from functools import lru_cache
from pathlib import Path

import structlog
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from artemis_client.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

ENV_PREFIX = "ARTEMIS_"


class ClientSettings(BaseSettings):
    """Settings for the Artemis client loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Required at boot
    api_url: str
    identity_publishable_key: str

    environment: str = "development"

    # REST
    request_timeout: float = Field(default=30.0, gt=0)
    notification_page_size: int = Field(default=20, ge=1, le=100)

    # Real-time channel
    socket_connect_timeout: float = Field(default=20.0, gt=0)
    socket_reconnection_attempts: int = Field(default=10, ge=0)
    socket_reconnection_delay: float = Field(default=2.0, ge=0)
    socket_reconnection_delay_max: float = Field(default=30.0, ge=0)
    socket_randomization_factor: float = Field(default=0.5, ge=0, le=1)

    # Client-local storage (sound preference)
    storage_path: Path = Path("~/.artemis/storage.json")

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value.rstrip("/")

    @field_validator("identity_publishable_key")
    @classmethod
    def _check_publishable_key(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("pk_"):
            raise ValueError("Invalid publishable key format. Must start with pk_")
        return value


def _env_name(loc: tuple) -> str:
    return f"{ENV_PREFIX}{str(loc[0]).upper()}" if loc else ENV_PREFIX.rstrip("_")


def validate_environment(**overrides) -> ClientSettings:
    """Load and validate settings, failing loudly on bad boot configuration.

    Args:
        **overrides: Explicit values that take precedence over the environment

    Returns:
        Validated ClientSettings

    Raises:
        ConfigurationError: If a required variable is missing or invalid
    """
    try:
        settings = ClientSettings(**overrides)
    except ValidationError as e:
        missing = []
        invalid = []
        for error in e.errors():
            name = _env_name(error.get("loc", ()))
            if error.get("type") == "missing":
                missing.append(name)
            else:
                invalid.append(f"{name} ({error.get('msg')})")

        parts = []
        if missing:
            parts.append(f"Missing required environment variables: {', '.join(missing)}")
        if invalid:
            parts.append(f"Invalid environment variables: {', '.join(invalid)}")
        message = "; ".join(parts)

        logger.error("Environment validation failed", missing=missing, invalid=invalid)
        raise ConfigurationError(message, variables=missing + invalid) from e

    logger.info(
        "Environment validation successful",
        api_url=settings.api_url,
        environment=settings.environment,
    )
    return settings


@lru_cache()
def get_settings() -> ClientSettings:
    """Get cached, validated settings instance."""
    return validate_environment()
