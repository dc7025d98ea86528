"""Testing utilities and fakes for the docx-to-pdf converter."""

from .fakes import (
    FakeBlobStore,
    FakeConverter,
    FakeLogger,
    FakeS3Client,
    StoredObject,
    setup_test_blob_store,
)

__all__ = [
    "FakeBlobStore",
    "FakeConverter",
    "FakeLogger",
    "FakeS3Client",
    "StoredObject",
    "setup_test_blob_store",
]
