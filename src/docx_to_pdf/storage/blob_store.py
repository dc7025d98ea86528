"""S3 blob store built on a shared aioboto3 client."""

from typing import Any, Optional

import aioboto3

from ..core.error_handling import client_error_code, with_error_handling
from ..core.exceptions import DownloadError, PersistenceError
from ..core.logging_config import get_logger
from ..core.protocols import AsyncS3ClientProtocol

MISSING_OBJECT_CODES = ("NoSuchKey", "NoSuchBucket", "404")


class S3BlobStore:
    """
    Fetch and store objects in S3.

    Use as an async context manager so every pipeline of a batch shares one
    client connection pool::

        async with S3BlobStore() as store:
            body = await store.get("bucket", "docs/a.docx")

    A ready client may also be injected, in which case entering the context
    is optional.
    """

    def __init__(
        self,
        client: Optional[AsyncS3ClientProtocol] = None,
        session: Optional[Any] = None,
        **client_kwargs: Any,
    ):
        self._client = client
        self._session = session
        self._client_kwargs = client_kwargs
        self._client_cm = None
        self._logger = get_logger("blob-store")

    async def __aenter__(self) -> "S3BlobStore":
        if self._client is None:
            session = self._session or aioboto3.Session()
            self._client_cm = session.client("s3", **self._client_kwargs)
            self._client = await self._client_cm.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client_cm is not None:
            await self._client_cm.__aexit__(exc_type, exc_val, exc_tb)
            self._client_cm = None
            self._client = None

    def _require_client(self) -> AsyncS3ClientProtocol:
        if self._client is None:
            raise RuntimeError("S3BlobStore used outside of 'async with'")
        return self._client

    @with_error_handling(DownloadError)
    async def get(self, bucket: str, key: str) -> bytes:
        """Fetch the bytes of ``s3://bucket/key``."""
        client = self._require_client()
        self._logger.debug(f"Downloading s3://{bucket}/{key}")
        try:
            response = await client.get_object(Bucket=bucket, Key=key)
        except Exception as e:
            if client_error_code(e) in MISSING_OBJECT_CODES:
                raise DownloadError(f"Object s3://{bucket}/{key} not found") from e
            raise

        async with response["Body"] as stream:
            return await stream.read()

    @with_error_handling(PersistenceError)
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
        """Store ``body`` at ``s3://bucket/key``."""
        client = self._require_client()
        self._logger.debug(f"Uploading {len(body)} bytes to s3://{bucket}/{key}")
        await client.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentDisposition=content_disposition,
            ContentType=content_type,
            ACL=acl,
            ServerSideEncryption=server_side_encryption,
        )
