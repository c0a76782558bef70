"""Process-wide logging setup for the gallery service and the uvicorn server running it."""

import logging
import sys
from logging import config as logging_config

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("botocore", "boto3", "aiobotocore", "s3transfer", "urllib3", "httpx", "httpcore", "sqlalchemy.engine")

LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
ACCESS_FORMAT = "%(asctime)s %(levelname)-5s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Colors the level name; gallery events (the `lightbox.events` logger) are dimmed as a whole."""

    LEVEL_COLORS = {
        "DEBUG": "\x1b[36m",
        "INFO": "\x1b[32m",
        "WARNING": "\x1b[33m",
        "ERROR": "\x1b[31m",
        "CRITICAL": "\x1b[41m",
    }
    EVENT_COLOR = "\x1b[2m"
    RESET = "\x1b[0m"

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        record.levelname = f"{self.LEVEL_COLORS.get(levelname, '')}{levelname}{self.RESET}"
        try:
            line = super().format(record)
        finally:
            record.levelname = levelname
        if record.name.startswith("lightbox.events"):
            return f"{self.EVENT_COLOR}{line}{self.RESET}"
        return line


def _formatter(fmt: str, color: bool) -> dict:
    formatter = {"format": fmt, "datefmt": DATE_FORMAT}
    if color:
        formatter["()"] = "lightbox.logging_config.ColoredFormatter"
    return formatter


def configure_logging(level: str = "INFO", color: bool | None = None) -> None:
    """Send gallery and uvicorn logs to stdout.

    Args:
        level: Level for the gallery, uvicorn and the root logger
        color: ANSI colors; None colors only when stdout is a terminal
    """
    if color is None:
        color = sys.stdout.isatty()

    logging_config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": _formatter(LOG_FORMAT, color),
                "access": _formatter(ACCESS_FORMAT, color),
            },
            "handlers": {
                "default": {"class": "logging.StreamHandler", "formatter": "default", "stream": "ext://sys.stdout"},
                "access": {"class": "logging.StreamHandler", "formatter": "access", "stream": "ext://sys.stdout"},
            },
            "loggers": {
                "lightbox": {"level": level},
                "uvicorn": {"handlers": ["default"], "level": level, "propagate": False},
                "uvicorn.error": {"handlers": ["default"], "level": level, "propagate": False},
                "uvicorn.access": {"handlers": ["access"], "level": level, "propagate": False},
            },
            "root": {"handlers": ["default"], "level": level},
        }
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["configure_logging", "ColoredFormatter"]
