"""Centralized logging configuration for the docx-to-pdf converter."""

import os
import sys
import logging
from typing import Optional

ROOT_LOGGER = "docx-to-pdf"

# Level names accepted from the environment, mapped onto stdlib levels.
LEVEL_ALIASES = {
    "WARN": "WARNING",
    "FATAL": "CRITICAL",
}


def resolve_level(level: Optional[str]) -> int:
    """Translate a level name such as ``warn`` or ``DEBUG`` into a logging level."""
    if not level:
        return logging.INFO
    name = level.strip().upper()
    name = LEVEL_ALIASES.get(name, name)
    return getattr(logging, name, logging.INFO)


def setup_logger(
    name: str = ROOT_LOGGER,
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Setup centralized logging with environment variable configuration.

    Args:
        name: Logger name (defaults to "docx-to-pdf")
        level: Log level override (defaults to env var or INFO)
        format_type: Logging format ("structured" or "simple")

    Returns:
        Configured logger instance

    Environment Variables:
        LOG_LEVEL: Set logging level (debug, info, warn, error)
        LOG_FORMAT: Set format type ("structured" or "simple")
    """
    logger = logging.getLogger(name)

    if level:
        log_level = resolve_level(level)
    else:
        log_level = resolve_level(os.getenv("LOG_LEVEL", "INFO"))

    logger.setLevel(log_level)

    # Avoid duplicate handlers
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)

        env_format = os.getenv("LOG_FORMAT", format_type).lower()

        if env_format == "structured":
            formatter = logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)-8s | "
                "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )

        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """
    Get a logger instance with consistent configuration.

    Component names (``"converter"``, ``"blob-store"``...) become children of
    the ``docx-to-pdf`` logger. They carry no handler or level of their own,
    so ``setup_logger(level=...)`` on the package logger applies to all of them.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        setup_logger(ROOT_LOGGER)
    if name == ROOT_LOGGER:
        return root
    if name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
