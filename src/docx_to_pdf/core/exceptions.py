"""Custom exceptions for the docx-to-pdf converter."""

from typing import Any, Optional


class DocxToPdfError(Exception):
    """Base exception for all conversion pipeline errors."""

    #: Position of the failing request inside its batch, set by the orchestrator.
    request_index: Optional[int] = None
    #: Caller supplied id of the failing request, if any.
    request_id: Any = None


class DownloadError(DocxToPdfError):
    """Source object is missing or the store could not be reached."""


class ConversionError(DocxToPdfError):
    """The conversion engine failed on the first attempt and on the retry."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class PersistenceError(DocxToPdfError):
    """Upload or local write of the converted document failed."""


class ConfigurationError(DocxToPdfError):
    """Error raised for invalid configuration or an unusable engine runtime."""
