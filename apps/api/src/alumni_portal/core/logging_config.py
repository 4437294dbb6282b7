"""
Logging Configuration

Configures stdlib logging for the API process. Modules log through
``logging.getLogger(__name__)``; this only sets handlers and levels.
"""

import logging.config

from alumni_portal.core.config import settings


def setup_logging() -> None:
    """Install the console handler and per-library levels."""
    level = settings.log_level.upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"handlers": ["console"], "level": level},
            "loggers": {
                "sqlalchemy.engine": {
                    "level": "INFO" if settings.database_echo else "WARNING",
                },
                "httpx": {"level": "WARNING"},
                "uvicorn.access": {"level": "INFO"},
            },
        }
    )
