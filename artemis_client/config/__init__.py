"""Client configuration."""

from artemis_client.config.settings import (
    ClientSettings,
    get_settings,
    validate_environment,
)

__all__ = ["ClientSettings", "get_settings", "validate_environment"]
