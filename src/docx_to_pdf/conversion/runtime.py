"""Process-wide preparation of the conversion engine's runtime files."""

import asyncio
import tarfile
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from ..core.exceptions import ConfigurationError
from ..core.logging_config import get_logger

# Directory the LibreOffice archive unpacks to.
INSTALL_SUBDIR = "instdir"


class RuntimeState(Enum):
    UNINITIALIZED = "uninitialized"
    PREPARING = "preparing"
    READY = "ready"


class EngineRuntime:
    """
    Unpacks the engine archive once before the first conversion.

    Concurrent callers of :meth:`ensure_ready` wait on the same lock, so the
    archive is extracted at most once per process. Without an archive the
    engine is assumed to be installed on the system already.
    """

    def __init__(self, archive_path: Optional[Path] = None, install_dir: Path = Path("/tmp")):
        self.archive_path = Path(archive_path) if archive_path else None
        self.install_dir = Path(install_dir)
        self.state = RuntimeState.UNINITIALIZED
        self.unpack_count = 0
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None
        self._logger = get_logger("engine-runtime")

    @property
    def program_dir(self) -> Path:
        return self.install_dir / INSTALL_SUBDIR / "program"

    def is_unpacked(self) -> bool:
        return (self.install_dir / INSTALL_SUBDIR).is_dir()

    async def ensure_ready(self) -> None:
        if self.state is RuntimeState.READY:
            return
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            # An asyncio lock only works inside the loop it was first used in.
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        async with self._lock:
            if self.state is RuntimeState.READY:
                return
            self.state = RuntimeState.PREPARING
            try:
                await self._prepare()
            except BaseException:
                self.state = RuntimeState.UNINITIALIZED
                raise
            self.state = RuntimeState.READY

    async def _prepare(self) -> None:
        if self.archive_path is None:
            self._logger.debug("No engine archive configured, using system installation")
            return
        if self.is_unpacked():
            self._logger.debug(f"Engine already unpacked in {self.install_dir}")
            return

        self._logger.info(f"Unpacking {self.archive_path} into {self.install_dir}")
        try:
            await asyncio.to_thread(self._extract)
        except (OSError, tarfile.TarError) as e:
            raise ConfigurationError(
                f"Could not unpack engine archive {self.archive_path}: {e}"
            ) from e
        self.unpack_count += 1

    def _extract(self) -> None:
        self.install_dir.mkdir(parents=True, exist_ok=True)
        with tarfile.open(self.archive_path, "r:*") as archive:
            try:
                archive.extractall(self.install_dir, filter="data")
            except TypeError as e:
                # Interpreters without tar extraction filters reject ``filter``.
                raise tarfile.TarError(f"extraction filters unavailable: {e}") from e


@lru_cache(maxsize=None)
def get_runtime(archive_path: Optional[Path] = None, install_dir: Path = Path("/tmp")) -> EngineRuntime:
    """Return the shared runtime for this archive and install directory."""
    return EngineRuntime(archive_path, install_dir)
