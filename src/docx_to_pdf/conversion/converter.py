"""LibreOffice headless converter with a single retry for the first-run failure."""

import asyncio
import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..core.exceptions import ConversionError
from ..core.logging_config import get_logger
from .runtime import EngineRuntime

# LibreOffice export filters for target formats that need an explicit one.
EXPORT_FILTERS: Dict[str, str] = {
    "pdf": "pdf:writer_pdf_Export",
}

HEADLESS_FLAGS = (
    "--headless",
    "--norestore",
    "--invisible",
    "--nodefault",
    "--nofirststartwizard",
    "--nolockcheck",
    "--nologo",
)

# Two attempts: a fresh engine fails its first conversion in a new process.
MAX_ATTEMPTS = 2

STDERR_TAIL = 2000


class LibreOfficeConverter:
    """Runs ``soffice --convert-to`` on local files."""

    def __init__(
        self,
        binary: str = "soffice",
        runtime: Optional[EngineRuntime] = None,
        timeout: float = 120.0,
    ):
        self._binary = binary
        self._runtime = runtime or EngineRuntime()
        self._timeout = timeout
        self._logger = get_logger("converter")

    def build_command(self, input_path: Path, target_format: str = "pdf") -> List[str]:
        export_filter = EXPORT_FILTERS.get(target_format, target_format)
        return [
            self._binary,
            *HEADLESS_FLAGS,
            "--convert-to",
            export_filter,
            "--outdir",
            str(input_path.parent),
            str(input_path),
        ]

    @staticmethod
    def output_path(input_path: Path, target_format: str = "pdf") -> Path:
        return input_path.parent / f"{input_path.stem}.{target_format}"

    async def convert(self, input_path: Path, target_format: str = "pdf") -> Path:
        """
        Convert ``input_path`` and return the produced file.

        The engine is invoked once and, if that fails, exactly once more with
        identical arguments.

        Raises:
            ConversionError: If both attempts fail.
        """
        input_path = Path(input_path)
        await self._runtime.ensure_ready()

        command = self.build_command(input_path, target_format)
        expected = self.output_path(input_path, target_format)

        returncode: Optional[int] = None
        stderr = ""
        reason = ""
        for attempt in range(1, MAX_ATTEMPTS + 1):
            returncode, stderr = await self._run_once(command, input_path.parent)
            if returncode == 0 and expected.exists():
                self._logger.debug(f"Converted {input_path.name} on attempt {attempt}")
                return expected

            reason = (
                f"exit status {returncode}" if returncode != 0 else f"no output at {expected}"
            )
            if attempt < MAX_ATTEMPTS:
                self._logger.warning(
                    f"Conversion of {input_path.name} failed ({reason}), retrying once"
                )

        self._logger.error(
            f"Conversion of {input_path.name} failed after {MAX_ATTEMPTS} attempts ({reason})"
        )
        raise ConversionError(
            f"Conversion of {input_path.name} to {target_format} failed: {reason}",
            returncode=returncode,
            stderr=stderr,
        )

    async def _run_once(self, command: List[str], workdir: Path) -> Tuple[Optional[int], str]:
        env = dict(os.environ, HOME=str(workdir))
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=str(workdir),
                env=env,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return -1, str(e)

        try:
            _, stderr = await asyncio.wait_for(process.communicate(), timeout=self._timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            return -1, f"timed out after {self._timeout}s"

        return process.returncode, stderr.decode("utf-8", "replace")[-STDERR_TAIL:]
