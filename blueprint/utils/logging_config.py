"""Structured synthesis logging (AWS Lambda Powertools)."""

import os

from aws_lambda_powertools import Logger

from ..errors import ConfigurationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Read log level from environment (default to INFO)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# One JSON logger for the whole run; node paths, aspects and rule ids go in ``extra``
logger = Logger(
    service="blueprint-synth",
    level=LOG_LEVEL,
)


def get_logger():
    """Get the configured logger instance."""
    return logger


def set_log_level(level: str) -> None:
    """Change the level of the shared logger (e.g. from ``--log-level``)."""
    level = level.upper()
    if level not in LOG_LEVELS:
        raise ConfigurationError(
            f"Log level must be one of {', '.join(LOG_LEVELS)}", {"level": level}
        )
    logger.setLevel(level)
