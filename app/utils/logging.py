"""
Logging setup.

Configures loguru sinks with file rotation and retention policies.
"""

import sys

from loguru import logger

from app.config.settings import Settings, settings as default_settings


def setup_logging(config: Settings | None = None) -> None:
    """
    Configure logger with stderr and a rotated log file.

    Args:
        config: Settings to read level and file path from
            (defaults to the global settings)
    """
    config = config or default_settings

    logger.remove()
    logger.add(sys.stderr, level=config.log_level)
    logger.add(
        config.log_file,
        rotation="1 day",
        retention="7 days",
        level=config.log_level,
        encoding="utf-8",
    )

    logger.info(
        "Logging configured",
        extra={"environment": config.environment, "level": config.log_level},
    )
