"""Logging utilities for the Artemis client."""

from artemis_client.logging.config import setup_logging
from artemis_client.logging.context import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from artemis_client.logging.filters import CorrelationIDFilter

__all__ = [
    "CorrelationIDFilter",
    "clear_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
    "setup_logging",
]
