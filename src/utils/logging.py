"""Centralized logging configuration for the Reelbox application."""

import logging
import sys
from typing import Literal

from src.config import get_settings


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] | None = None
) -> None:
    """Configure logging for the application.

    Args:
        level: Override log level (default: INFO for production, DEBUG otherwise)
    """
    settings = get_settings()

    if level is None:
        level = "INFO" if settings.is_production else "DEBUG"

    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


class LogContext:
    """Prefix log messages with structured context.

    Example:
        log = LogContext(logger, profile="64f1...")
        log.info("Strategy: genres")  # -> "[profile=64f1...] Strategy: genres"
    """

    def __init__(self, logger: logging.Logger, **context: object) -> None:
        self.logger = logger
        self.context = context
        self.prefix = " ".join(f"[{k}={v}]" for k, v in context.items())

    def debug(self, msg: str, *args, **kwargs) -> None:
        self.logger.debug(f"{self.prefix} {msg}", *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self.logger.info(f"{self.prefix} {msg}", *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self.logger.warning(f"{self.prefix} {msg}", *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self.logger.error(f"{self.prefix} {msg}", *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs) -> None:
        self.logger.exception(f"{self.prefix} {msg}", *args, **kwargs)
