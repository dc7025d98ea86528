"""LibreOffice conversion engine wrapper."""

from .converter import LibreOfficeConverter
from .runtime import EngineRuntime, RuntimeState, get_runtime

__all__ = ["LibreOfficeConverter", "EngineRuntime", "RuntimeState", "get_runtime"]
