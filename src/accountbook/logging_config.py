"""Logging configuration for the accountbook CLI.

Environment variables:
- ACCOUNTBOOK_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: WARNING)

Logs go to stderr so command output on stdout stays machine-readable.
"""

import logging
import logging.config
import os
from typing import Optional

DEFAULT_LEVEL = "WARNING"
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_logging_config(level: Optional[str] = None) -> dict:
    """Build a dictConfig for the accountbook loggers.

    Args:
        level: Log level name. None reads ACCOUNTBOOK_LOG_LEVEL.
    """
    level = (level or os.environ.get("ACCOUNTBOOK_LOG_LEVEL") or DEFAULT_LEVEL).upper()
    if level not in LEVELS:
        raise ValueError(f"Unknown log level '{level}'. Choose from: {', '.join(LEVELS)}")

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "verbose": {
                "format": "[{asctime}] {levelname} {name} {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "verbose",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "accountbook": {
                "handlers": ["console"],
                "level": level,
            },
        },
    }


def configure_logging(level: Optional[str] = None) -> None:
    """Apply the accountbook logging configuration."""
    logging.config.dictConfig(get_logging_config(level))
