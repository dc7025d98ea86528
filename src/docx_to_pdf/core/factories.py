"""Factory functions for creating configured service instances."""

from typing import Optional

from ..conversion.converter import LibreOfficeConverter
from ..conversion.runtime import get_runtime
from .config import EnvironmentConfig
from .observability import StructuredLogger
from .persistence import create_persister
from .protocols import BlobStoreProtocol, ConverterProtocol, LoggerProtocol
from .services import BatchOrchestrator, ConversionPipeline


class ConverterFactory:
    """Factory for creating the conversion engine wrapper."""

    @staticmethod
    def create_converter(config: EnvironmentConfig) -> LibreOfficeConverter:
        runtime = get_runtime(config.engine_archive_path, config.engine_install_dir)
        binary = config.soffice_path
        if config.engine_archive_path is not None:
            # The unpacked archive ships its own binary.
            binary = str(runtime.program_dir / "soffice.bin")
        return LibreOfficeConverter(
            binary=binary, runtime=runtime, timeout=config.conversion_timeout
        )


class BatchPipelineFactory:
    """Factory for creating the complete batch pipeline."""

    @staticmethod
    def create_orchestrator(
        config: EnvironmentConfig,
        blob_store: BlobStoreProtocol,
        converter: Optional[ConverterProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        max_concurrency: Optional[int] = None,
    ) -> BatchOrchestrator:
        """Wire blob store, converter and persister into a ready orchestrator."""
        if converter is None:
            converter = ConverterFactory.create_converter(config)
        if logger is None:
            logger = StructuredLogger("docx-to-pdf", level=config.log_level)

        pipeline = ConversionPipeline(
            blob_store=blob_store,
            converter=converter,
            persister=create_persister(config, blob_store),
            download_bucket=config.download_bucket_name,
            logger=logger,
        )
        return BatchOrchestrator(
            pipeline,
            logger,
            max_concurrency=max_concurrency or config.max_concurrency,
        )
