"""Stdlib logging filter carrying the correlation ID."""

import logging

from artemis_client.logging.context import get_correlation_id


class CorrelationIDFilter(logging.Filter):
    """Stamp ``correlation_id`` on records from requests, socketio and friends."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "N/A"
        return True
