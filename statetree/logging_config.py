"""
Structured logging configuration for statetree tools.

Provides JSON-formatted logs with a store_id field for correlating the output
of several stores living in one process.

Environment Variables:
    STATETREE_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    STATETREE_LOG_FORMAT: Log format (json, text) - default: json

Usage:
    from statetree.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, store_id="todos")
    logger.info("Replaying log", extra={"path": "events.log"})

Library modules only create loggers; setup_logging() is called by the CLI.
"""

import logging
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

from .config import Settings


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure root logger with structured logging.

    Reads configuration from Settings.from_env() unless settings are given:
    - log_level: DEBUG, INFO, WARNING, ERROR (default: INFO)
    - log_format: json, text (default: json)

    Logs go to stderr so that --json command output on stdout stays parseable.
    """
    settings = settings or Settings.from_env()

    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    level = level_map.get(settings.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(StoreIdFilter())

    if settings.log_format == "json":
        formatter = JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(store_id)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [store_id=%(store_id)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def get_logger(name: str, store_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger with optional store_id for correlation.

    Args:
        name: Logger name (typically __name__)
        store_id: Identifier of the store the records belong to

    Example:
        logger = get_logger(__name__, store_id="todos")
        logger.debug("Dispatched event")
        # Output (JSON): {"timestamp": "...", "level": "DEBUG", "message": "Dispatched event", "store_id": "todos"}
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"store_id": store_id or "N/A"})


class StoreIdFilter(logging.Filter):
    """
    Logging filter that adds store_id to all log records.

    Ensures formatters can reference %(store_id)s even for records logged
    through a plain logger.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "store_id"):
            record.store_id = "N/A"  # type: ignore
        return True
