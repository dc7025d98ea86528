"""Object storage and local temporary storage."""

from .blob_store import S3BlobStore
from .temp import TemporaryStorage

__all__ = ["S3BlobStore", "TemporaryStorage"]
