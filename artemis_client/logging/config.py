"""Structlog configuration for dual output: JSON files and colored console."""

import logging
import logging.handlers
import os
from pathlib import Path

import structlog

from artemis_client.logging.filters import CorrelationIDFilter
from artemis_client.logging.processors import (
    add_process_info,
    add_request_context,
    add_service_context,
    console_renderer,
)

DEFAULT_LOG_FILE = "./logs/artemis-client.log"


def setup_logging(log_file_path: str | None = None, log_level: str | None = None) -> None:
    """Configure structlog with JSON file logs and colored console logs.

    File Output:
    - JSON formatted with all metadata
    - Rotating file handler (10MB per file, 5 backups)

    Console Output:
    - Format: [LEVEL] timestamp | correlation_id | logger_name | message

    Environment Variables:
    - LOG_FILE_PATH: Path to log file (default: ./logs/artemis-client.log)
    - LOG_LEVEL: Logging level (default: INFO)
    - SERVICE_NAME: Service name for metadata (default: artemis-client)
    - ENVIRONMENT: Deployment environment (default: development)

    Args:
        log_file_path: Overrides LOG_FILE_PATH
        log_level: Overrides LOG_LEVEL
    """
    log_file_path = log_file_path or os.getenv("LOG_FILE_PATH", DEFAULT_LOG_FILE)
    log_level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, log_level, logging.INFO)

    Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            add_request_context,
            add_service_context,
            add_process_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    file_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=[
                # For logs from libraries that don't use structlog
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
                add_request_context,
                add_service_context,
                add_process_info,
            ],
        )
    )
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=console_renderer,
            foreign_pre_chain=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
                add_request_context,
            ],
        )
    )

    correlation_filter = CorrelationIDFilter()
    file_handler.addFilter(correlation_filter)
    console_handler.addFilter(correlation_filter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # socketio/engineio are chatty at INFO
    logging.getLogger("socketio").setLevel(max(level, logging.WARNING))
    logging.getLogger("engineio").setLevel(max(level, logging.WARNING))

    logger = structlog.get_logger(__name__)
    logger.info("Logging configured", log_file=log_file_path, log_level=log_level)
