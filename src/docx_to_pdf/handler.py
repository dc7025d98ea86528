"""Invocation entry point: convert one batch of requests and return the results."""

import asyncio
from contextlib import AsyncExitStack
from typing import Any, Dict, List, Optional, Sequence, Union

from .core import ConversionRequest, EnvironmentConfig, ItemOutcome, ConversionResult, load_config
from .core.factories import BatchPipelineFactory
from .core.models import FailurePolicy
from .core.protocols import BlobStoreProtocol, ConverterProtocol
from .storage.blob_store import S3BlobStore

Event = Union[Sequence[Dict[str, Any]], Dict[str, Any], None]


def parse_requests(event: Event) -> List[ConversionRequest]:
    """Accept a list of request dicts, or a dict holding one under ``requests``."""
    if event is None:
        return []
    if isinstance(event, dict):
        event = event.get("requests", [])
    if not isinstance(event, (list, tuple)):
        raise ValueError(
            f"Expected a list of requests or an object with a 'requests' list, got {type(event).__name__}"
        )
    return [ConversionRequest.model_validate(item) for item in event]


async def convert_batch(
    requests: Sequence[ConversionRequest],
    config: Optional[EnvironmentConfig] = None,
    blob_store: Optional[BlobStoreProtocol] = None,
    converter: Optional[ConverterProtocol] = None,
    collect_failures: Optional[bool] = None,
) -> Union[List[ConversionResult], List[ItemOutcome]]:
    """
    Convert ``requests`` and return their results in input order.

    With ``collect_failures`` (or ``FAILURE_POLICY=collect``) every request gets
    an :class:`ItemOutcome` and failures are not raised.
    """
    config = config or load_config()
    if collect_failures is None:
        collect_failures = config.failure_policy is FailurePolicy.COLLECT

    async with AsyncExitStack() as stack:
        if blob_store is None:
            blob_store = await stack.enter_async_context(S3BlobStore())
        orchestrator = BatchPipelineFactory.create_orchestrator(
            config, blob_store, converter=converter
        )
        if collect_failures:
            return await orchestrator.run_outcomes(requests)
        return await orchestrator.run(requests)


def handler(event: Event = None, context: Any = None) -> List[Dict[str, Any]]:
    """Serverless-style handler returning JSON-ready result dicts."""
    requests = parse_requests(event)
    items = asyncio.run(convert_batch(requests))
    return [item.to_payload() for item in items]
