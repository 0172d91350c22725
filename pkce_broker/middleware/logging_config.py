"""
Logging configuration for the application.
"""
import logging
import sys
from typing import Optional

from ..config.settings import settings

LOGGER_ROOT = "pkce_broker"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure application logging."""
    level_name = (level or settings.log_level).upper()

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level_name))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.getLogger(LOGGER_ROOT).setLevel(getattr(logging, level_name))


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(f"{LOGGER_ROOT}.{name}")


def state_prefix(state: str) -> str:
    """Shorten a state token for log lines."""
    return f"{state[:8]}..."


class LoggerMixin:
    """Mixin to add logging capability to classes."""

    @property
    def logger(self) -> logging.Logger:
        """Get logger for this class."""
        return get_logger(self.__class__.__name__)
