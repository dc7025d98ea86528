"""Dual-mode persistence of converted documents: S3 or local temp files."""

from typing import Callable, Optional

from ..storage.temp import TemporaryStorage
from .config import EnvironmentConfig
from .error_handling import with_error_handling
from .exceptions import PersistenceError
from .logging_config import get_logger
from .models import PersistedObject, PersistenceMode
from .naming import new_prefix
from .protocols import BlobStoreProtocol, Persister

PDF_CONTENT_TYPE = "application/pdf"


class S3Persister(Persister):
    """Uploads converted documents to the upload bucket."""

    def __init__(
        self,
        blob_store: BlobStoreProtocol,
        bucket: str,
        namer: Callable[[], str] = new_prefix,
    ):
        self._blob_store = blob_store
        self._bucket = bucket
        self._namer = namer
        self._logger = get_logger("persistence")

    async def save(self, base_name: str, payload: bytes) -> PersistedObject:
        name = f"{base_name}.pdf"
        prefix = self._namer()
        key = f"{prefix}/{name}"
        self._logger.debug(f"Storing to S3: {self._bucket}/{key}")
        await self._blob_store.put(
            self._bucket,
            key,
            payload,
            content_disposition=f"attachment; filename={name}",
            acl="private",
            server_side_encryption="AES256",
            content_type=PDF_CONTENT_TYPE,
        )
        return PersistedObject(destination_prefix=prefix, destination_key=name)


class LocalPersister(Persister):
    """Writes converted documents to caller-owned temp files."""

    def __init__(
        self,
        storage: Optional[TemporaryStorage] = None,
        namer: Callable[[], str] = new_prefix,
    ):
        self._storage = storage or TemporaryStorage()
        self._namer = namer
        self._logger = get_logger("persistence")

    @with_error_handling(PersistenceError)
    async def save(self, base_name: str, payload: bytes) -> PersistedObject:
        name = f"{base_name}.pdf"
        prefix = self._namer()
        path = await self._storage.write_output(payload, suffix=".pdf")
        self._logger.debug(f"Stored {name} to local storage at {path}")
        return PersistedObject(
            destination_prefix=prefix, destination_key=name, local_path=str(path)
        )


def create_persister(
    config: EnvironmentConfig, blob_store: Optional[BlobStoreProtocol] = None
) -> Persister:
    """Pick the persister for the configured persistence mode."""
    if config.persistence_mode is PersistenceMode.REMOTE:
        if blob_store is None:
            raise ValueError("A blob store is required for remote persistence")
        return S3Persister(blob_store, config.upload_bucket_name)
    return LocalPersister(TemporaryStorage(config.local_output_dir))
