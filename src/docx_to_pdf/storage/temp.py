"""Scoped local storage for intermediate and output files."""

import asyncio
import os
import shutil
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional, Union

from ..core.logging_config import get_logger

PathLike = Union[str, Path]


class TemporaryStorage:
    """
    Allocates local filesystem locations.

    Workspaces are removed when their scope exits. Output files are owned by
    the caller and are left in place.
    """

    def __init__(self, base_dir: Optional[PathLike] = None):
        self._base_dir = str(base_dir) if base_dir is not None else None
        self._logger = get_logger("temp-storage")

    @asynccontextmanager
    async def workspace(self, prefix: str = "docx-to-pdf-") -> AsyncIterator[Path]:
        """Yield a fresh private directory, deleting it afterwards."""
        path = Path(
            await asyncio.to_thread(tempfile.mkdtemp, prefix=prefix, dir=self._base_dir)
        )
        self._logger.debug(f"Created workspace {path}")
        try:
            yield path
        finally:
            await asyncio.to_thread(shutil.rmtree, path, True)
            self._logger.debug(f"Removed workspace {path}")

    async def write_output(self, payload: bytes, suffix: str = ".pdf") -> Path:
        """Write ``payload`` to a new file that outlives this call and return its path."""
        return await asyncio.to_thread(self._write_output, payload, suffix)

    def _write_output(self, payload: bytes, suffix: str) -> Path:
        if self._base_dir is not None:
            os.makedirs(self._base_dir, exist_ok=True)
        fd, name = tempfile.mkstemp(suffix=suffix, dir=self._base_dir)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(payload)
        except BaseException:
            os.unlink(name)
            raise
        return Path(name)


async def write_bytes(path: Path, payload: bytes) -> None:
    await asyncio.to_thread(path.write_bytes, payload)


async def read_bytes(path: Path) -> bytes:
    return await asyncio.to_thread(path.read_bytes)
