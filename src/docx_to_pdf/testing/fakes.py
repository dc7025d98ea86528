"""Fake implementations for testing purposes."""

import asyncio
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

from botocore.exceptions import ClientError

from ..core.exceptions import ConversionError, DownloadError, PersistenceError


@dataclass
class StoredObject:
    """Fake stored object for testing."""

    key: str
    body: bytes
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.body)


class FakeBlobStore:
    """In-memory blob store implementing ``BlobStoreProtocol``."""

    def __init__(self):
        self.buckets: Dict[str, Dict[str, StoredObject]] = {}
        self.get_calls: List[Tuple[str, str]] = []
        self.put_calls: List[Tuple[str, str]] = []
        self.failing_keys: Set[str] = set()
        self.fail_puts = False
        self.delays: Dict[str, float] = {}

    def create_bucket(self, name: str) -> Dict[str, StoredObject]:
        return self.buckets.setdefault(name, {})

    def add_object(self, bucket: str, key: str, body: bytes) -> None:
        self.create_bucket(bucket)[key] = StoredObject(key=key, body=body)

    def get_object(self, bucket: str, key: str) -> Optional[StoredObject]:
        return self.buckets.get(bucket, {}).get(key)

    def fail_download(self, key: str) -> None:
        """Make ``get`` fail for ``key`` as if the store were unreachable."""
        self.failing_keys.add(key)

    def set_delay(self, key: str, seconds: float) -> None:
        self.delays[key] = seconds

    async def get(self, bucket: str, key: str) -> bytes:
        self.get_calls.append((bucket, key))
        await asyncio.sleep(self.delays.get(key, 0))
        if key in self.failing_keys:
            raise DownloadError(f"Simulated download failure for {key}")
        obj = self.get_object(bucket, key)
        if obj is None:
            raise DownloadError(f"Object s3://{bucket}/{key} not found")
        return obj.body

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
        self.put_calls.append((bucket, key))
        await asyncio.sleep(0)
        if self.fail_puts:
            raise PersistenceError(f"Simulated upload failure for {key}")
        self.create_bucket(bucket)[key] = StoredObject(
            key=key,
            body=body,
            metadata={
                "ContentDisposition": content_disposition,
                "ACL": acl,
                "ServerSideEncryption": server_side_encryption,
                "ContentType": content_type,
            },
        )


class FakeConverter:
    """
    Converter double that writes ``<stem>.<format>`` next to the input.

    Every call either succeeds or raises ``ConversionError``; retries belong to
    the real converter and are exercised through :class:`ScriptedEngine`.
    """

    def __init__(
        self,
        always_fail: bool = False,
        output: Optional[bytes] = None,
        delay: float = 0.0,
    ):
        self.always_fail = always_fail
        self.output = output
        self.delay = delay
        self.inputs: List[Path] = []

    @property
    def convert_calls(self) -> int:
        return len(self.inputs)

    async def convert(self, input_path: Path, target_format: str = "pdf") -> Path:
        input_path = Path(input_path)
        self.inputs.append(input_path)
        await asyncio.sleep(self.delay)
        if self.always_fail:
            raise ConversionError(f"Simulated conversion failure for {input_path.name}")
        body = self.output if self.output is not None else b"%PDF-1.4 " + input_path.read_bytes()
        output_path = input_path.parent / f"{input_path.stem}.{target_format}"
        output_path.write_bytes(body)
        return output_path


class FakeProcess:
    """Stands in for ``asyncio.subprocess.Process``."""

    def __init__(self, returncode: int, stderr: bytes = b"", hang: bool = False):
        self.returncode = returncode
        self._stderr = stderr
        self._hang = hang
        self.killed = False

    async def communicate(self) -> Tuple[bytes, bytes]:
        if self._hang:
            await asyncio.sleep(10)
        return b"", self._stderr

    def kill(self) -> None:
        self.killed = True

    async def wait(self) -> int:
        return self.returncode


class ScriptedEngine:
    """
    Replacement for ``asyncio.create_subprocess_exec`` running a fake soffice.

    The first ``failures`` runs exit with status 1; later runs write a PDF into
    the ``--outdir`` given on the command line.
    """

    def __init__(self, failures: int = 0, always_fail: bool = False, output: bytes = b"%PDF-1.7 converted"):
        self.failures = failures
        self.always_fail = always_fail
        self.output = output
        self.calls: List[Tuple[Tuple[str, ...], Dict[str, Any]]] = []

    async def __call__(self, *command: str, **kwargs: Any) -> FakeProcess:
        self.calls.append((command, kwargs))
        if self.always_fail or len(self.calls) <= self.failures:
            return FakeProcess(returncode=1, stderr=b"javaldx: Could not find a Java Runtime")
        input_path = Path(command[-1])
        outdir = Path(command[command.index("--outdir") + 1])
        (outdir / f"{input_path.stem}.pdf").write_bytes(self.output)
        return FakeProcess(returncode=0)


class FakeStreamingBody:
    """Async body mimicking aiobotocore's ``StreamingBody``."""

    def __init__(self, data: bytes):
        self._data = data
        self.closed = False

    async def read(self) -> bytes:
        return self._data

    async def __aenter__(self) -> "FakeStreamingBody":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.closed = True


class FakeS3Client:
    """Fake aioboto3 S3 client for testing ``S3BlobStore``."""

    def __init__(self):
        self.objects: Dict[Tuple[str, str], bytes] = {}
        self.put_requests: List[Dict[str, Any]] = []
        self.operation_count = 0
        self.error_code: Optional[str] = None

    def add_object(self, bucket: str, key: str, body: bytes) -> None:
        self.objects[(bucket, key)] = body

    def set_failure_mode(self, error_code: Optional[str]) -> None:
        """Raise a ``ClientError`` with ``error_code`` on every call; ``None`` resets."""
        self.error_code = error_code

    def _client_error(self, operation: str, code: str, message: str) -> ClientError:
        return ClientError({"Error": {"Code": code, "Message": message}}, operation)

    async def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        self.operation_count += 1
        if self.error_code:
            raise self._client_error("GetObject", self.error_code, "Simulated failure")
        if (Bucket, Key) not in self.objects:
            raise self._client_error("GetObject", "NoSuchKey", "The specified key does not exist.")
        body = self.objects[(Bucket, Key)]
        return {"Body": FakeStreamingBody(body), "ContentLength": len(body)}

    async def put_object(self, **kwargs: Any) -> Dict[str, Any]:
        self.operation_count += 1
        if self.error_code:
            raise self._client_error("PutObject", self.error_code, "Simulated failure")
        self.put_requests.append(kwargs)
        self.objects[(kwargs["Bucket"], kwargs["Key"])] = kwargs["Body"]
        return {"ETag": f'"fake-etag-{kwargs["Key"]}"', "ResponseMetadata": {"HTTPStatusCode": 200}}


class FakeLogger:
    """Fake logger for testing with support for LogContext."""

    def __init__(self, name: str = "test_logger"):
        self.name = name
        self.logs: List[Dict[str, Any]] = []

    def _log(self, level: str, message: str, context: Any = None, **kwargs: Any) -> None:
        log_entry = {
            "level": level,
            "message": message,
            "timestamp": time.time(),
            **kwargs,
        }
        if context is not None:
            log_entry["correlation_id"] = getattr(context, "correlation_id", None)
            log_entry["operation"] = getattr(context, "operation", "")
            log_entry.update(getattr(context, "metadata", {}))
        self.logs.append(log_entry)

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        self._log("DEBUG", message, context, **kwargs)

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        self._log("INFO", message, context, **kwargs)

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        self._log("WARNING", message, context, **kwargs)

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        self._log("ERROR", message, context, **kwargs)

    def get_logs(self, level: Optional[str] = None) -> List[Dict[str, Any]]:
        if level:
            return [log for log in self.logs if log["level"] == level]
        return self.logs.copy()


def setup_test_blob_store() -> FakeBlobStore:
    """Set up a fake store with a few source documents."""
    store = FakeBlobStore()
    store.add_object("test-source", "docs/a.docx", b"document a")
    store.add_object("test-source", "docs/report.docx", b"report from docs")
    store.add_object("test-source", "archive/report.docx", b"report from archive, longer")
    store.add_object("in", "docs/a.docx", b"document a in custom bucket")
    store.create_bucket("test-dest")
    return store
