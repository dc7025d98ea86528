"""Core models, configuration and shared utilities for the docx-to-pdf converter."""

from .config import EnvironmentConfig, load_config
from .exceptions import (
    ConfigurationError,
    ConversionError,
    DocxToPdfError,
    DownloadError,
    PersistenceError,
)
from .logging_config import get_logger, setup_logger
from .models import (
    ConversionRequest,
    ConversionResult,
    FailurePolicy,
    ItemOutcome,
    PersistedObject,
    PersistenceMode,
)
from .naming import new_prefix, output_filename

__all__ = [
    "EnvironmentConfig",
    "load_config",
    "DocxToPdfError",
    "DownloadError",
    "ConversionError",
    "PersistenceError",
    "ConfigurationError",
    "get_logger",
    "setup_logger",
    "ConversionRequest",
    "ConversionResult",
    "FailurePolicy",
    "ItemOutcome",
    "PersistedObject",
    "PersistenceMode",
    "new_prefix",
    "output_filename",
]
