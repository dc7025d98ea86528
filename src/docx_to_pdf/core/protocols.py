"""Protocol definitions for dependency injection and testability."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from .models import ConversionRequest, ConversionResult, PersistedObject
from .observability import LogContext


class BlobStoreProtocol(Protocol):
    """Protocol for object storage operations."""

    async def get(self, bucket: str, key: str) -> bytes:
        """Fetch an object's bytes."""
        ...

    async def put(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_disposition: str,
        acl: str = "private",
        server_side_encryption: str = "AES256",
        content_type: str = "application/pdf",
    ) -> None:
        """Store an object's bytes."""
        ...


class AsyncS3ClientProtocol(Protocol):
    """Subset of the aioboto3 S3 client used by the blob store."""

    async def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        ...

    async def put_object(self, **kwargs: Any) -> Dict[str, Any]:
        ...


class ConverterProtocol(Protocol):
    """Protocol for document conversion engines."""

    async def convert(self, input_path: Path, target_format: str = "pdf") -> Path:
        """Convert ``input_path`` and return the path of the produced file."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Optional[Any] = None, **kwargs: Any) -> None:
        ...

    def info(self, message: str, context: Optional[Any] = None, **kwargs: Any) -> None:
        ...

    def warning(self, message: str, context: Optional[Any] = None, **kwargs: Any) -> None:
        ...

    def error(self, message: str, context: Optional[Any] = None, **kwargs: Any) -> None:
        ...


class Persister(ABC):
    """Abstract destination for converted documents."""

    @abstractmethod
    async def save(self, base_name: str, payload: bytes) -> PersistedObject:
        """Store ``payload`` as ``<base_name>.pdf`` under a fresh unique prefix."""
        ...


class PipelineService(ABC):
    """Abstract per-request conversion pipeline."""

    @abstractmethod
    async def run(
        self, request: ConversionRequest, context: Optional[LogContext] = None
    ) -> ConversionResult:
        """Download, convert and persist a single document."""
        ...


class BatchRunner(ABC):
    """Abstract batch runner."""

    @abstractmethod
    async def run(self, requests: List[ConversionRequest]) -> List[ConversionResult]:
        """Convert a batch of documents."""
        ...
