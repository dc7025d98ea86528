"""Per-request conversion pipeline and the batch orchestrator."""

import asyncio
import time
from contextlib import AsyncExitStack
from pathlib import Path, PurePosixPath
from typing import List, Optional, Sequence

from ..storage.temp import TemporaryStorage, read_bytes, write_bytes
from .error_handling import BatchOperationContextManager
from .exceptions import ConversionError
from .models import (
    ConversionRequest,
    ConversionResult,
    ItemOutcome,
)
from .naming import base_name
from .observability import LogContext
from .protocols import (
    BatchRunner,
    BlobStoreProtocol,
    ConverterProtocol,
    LoggerProtocol,
    Persister,
    PipelineService,
)


class ConversionPipeline(PipelineService):
    """Download -> convert -> persist for a single request."""

    def __init__(
        self,
        blob_store: BlobStoreProtocol,
        converter: ConverterProtocol,
        persister: Persister,
        download_bucket: str,
        logger: LoggerProtocol,
        temp_storage: Optional[TemporaryStorage] = None,
        target_format: str = "pdf",
    ):
        self._blob_store = blob_store
        self._converter = converter
        self._persister = persister
        self._download_bucket = download_bucket
        self._logger = logger
        self._temp_storage = temp_storage or TemporaryStorage()
        self._target_format = target_format

    async def run(
        self, request: ConversionRequest, context: Optional[LogContext] = None
    ) -> ConversionResult:
        """Run every stage for ``request``; any stage error propagates unchanged."""
        context = (context or LogContext(component="conversion_pipeline")).with_metadata(
            key=request.source_object_key
        )
        start_time = time.time()
        bucket = request.bucket or self._download_bucket

        self._logger.debug("Downloading source", context.with_operation("download"), bucket=bucket)
        body = await self._blob_store.get(bucket, request.source_object_key)

        async with self._temp_storage.workspace() as workspace:
            input_path = workspace / PurePosixPath(request.source_key).name
            try:
                await write_bytes(input_path, body)
            except OSError as e:
                raise ConversionError(f"Could not stage {input_path.name}: {e}") from e

            self._logger.debug("Converting", context.with_operation("convert"))
            output_path: Path = await self._converter.convert(input_path, self._target_format)

            try:
                payload = await read_bytes(output_path)
            except OSError as e:
                raise ConversionError(f"Could not read converted {output_path.name}: {e}") from e

        self._logger.debug("Persisting", context.with_operation("persist"), size=len(payload))
        persisted = await self._persister.save(base_name(request.source_key), payload)

        result = ConversionResult(
            id=request.id,
            destination_prefix=persisted.destination_prefix,
            destination_key=persisted.destination_key,
            byte_size=len(payload),
            local_path=persisted.local_path,
        )
        self._logger.info(
            "Converted document",
            context,
            destination=f"{result.destination_prefix}/{result.destination_key}",
            processing_time_ms=round((time.time() - start_time) * 1000, 1),
        )
        return result


class BatchOrchestrator(BatchRunner):
    """
    Runs one pipeline per request, all of them concurrently.

    Every pipeline is awaited before the batch resolves; siblings are never
    cancelled when one fails. :meth:`run` is all-or-nothing: the first failure
    (in completion order) is re-raised after the batch settles. Partial
    results are only available through :meth:`run_outcomes`.
    """

    def __init__(
        self,
        pipeline: PipelineService,
        logger: LoggerProtocol,
        max_concurrency: Optional[int] = None,
    ):
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be a positive integer")
        self._pipeline = pipeline
        self._logger = logger
        self._max_concurrency = max_concurrency

    async def run(self, requests: Sequence[ConversionRequest]) -> List[ConversionResult]:
        outcomes, failure_order = await self._run_all(requests)

        if failure_order:
            first = outcomes[failure_order[0]]
            raise first.error  # type: ignore[misc]

        return [outcome.result for outcome in outcomes]  # type: ignore[misc]

    async def run_outcomes(self, requests: Sequence[ConversionRequest]) -> List[ItemOutcome]:
        """Like :meth:`run` but returns every per-request outcome instead of raising."""
        outcomes, _ = await self._run_all(requests)
        return outcomes

    async def _run_all(self, requests: Sequence[ConversionRequest]):
        requests = list(requests)
        if not requests:
            return [], []

        semaphore = (
            asyncio.Semaphore(self._max_concurrency) if self._max_concurrency else None
        )
        # Indices of failed requests in the order their failures happened.
        failure_order: List[int] = []

        async def run_one(index: int, request: ConversionRequest) -> ItemOutcome:
            context = LogContext(component="batch_orchestrator").with_metadata(
                index=index, request_id=request.id
            )
            async with AsyncExitStack() as stack:
                if semaphore is not None:
                    await stack.enter_async_context(semaphore)
                try:
                    result = await self._pipeline.run(request, context)
                except Exception as e:
                    e.request_index = index  # type: ignore[attr-defined]
                    e.request_id = request.id  # type: ignore[attr-defined]
                    failure_order.append(index)
                    return ItemOutcome(index=index, request=request, error=e)
            return ItemOutcome(index=index, request=request, result=result)

        self._logger.info(f"Converting {len(requests)} document(s)")
        with BatchOperationContextManager("Document batch conversion") as batch:
            outcomes = await asyncio.gather(
                *(run_one(i, request) for i, request in enumerate(requests))
            )
            for outcome in outcomes:
                if outcome.ok:
                    batch.add_success()
                else:
                    batch.add_error(
                        f"{outcome.error_type}: {outcome.error}",
                        item_identifier=f"#{outcome.index} {outcome.request.source_object_key}",
                    )

        return list(outcomes), failure_order
