# src/docx_to_pdf/core/error_handling.py

import functools
import logging
from typing import Any, Awaitable, Callable, Dict, List, Type, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import DocxToPdfError

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

# Errors raised by the store client or the filesystem that map onto a stage error.
TRANSLATED_ERRORS = (ClientError, BotoCoreError, OSError)


def client_error_code(error: BaseException) -> str:
    """Return the AWS error code carried by a botocore ``ClientError``, if any."""
    if isinstance(error, ClientError):
        return str(error.response.get("Error", {}).get("Code", ""))
    return ""


def with_error_handling(error_cls: Type[DocxToPdfError]) -> Callable[[F], F]:
    """
    Wrap a coroutine function so store and filesystem failures surface as ``error_cls``.

    Pipeline errors pass through untouched, anything else propagates as is.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            logger = logging.getLogger(func.__module__ + "." + func.__name__)
            try:
                return await func(*args, **kwargs)
            except DocxToPdfError:
                raise
            except TRANSLATED_ERRORS as e:
                logger.error(f"Error in '{func.__name__}': {e}", exc_info=True)
                raise error_cls(f"{func.__name__} failed: {e}") from e

        return wrapper  # type: ignore[return-value]

    return decorator


class BatchOperationContextManager:
    """
    Context manager for batch operations to collect and summarize errors.
    """

    def __init__(self, operation_name: str = "Batch Operation"):
        self.operation_name = operation_name
        self.errors: List[Dict[str, str]] = []
        self.succeeded = 0
        self.logger = logging.getLogger(
            self.__class__.__module__ + "." + self.__class__.__name__
        )

    def __enter__(self) -> "BatchOperationContextManager":
        self.logger.info(f"Starting {self.operation_name}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if self.errors:
            self.logger.warning(
                f"{self.operation_name} completed with {len(self.errors)} error(s) "
                f"and {self.succeeded} success(es)."
            )
            for i, error_detail in enumerate(self.errors):
                self.logger.error(
                    f"  Error {i + 1}/{len(self.errors)} for item "
                    f"'{error_detail['item']}': {error_detail['error']}"
                )
        elif exc_type:
            self.logger.error(
                f"{self.operation_name} failed due to an unhandled exception: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb),
            )
        else:
            self.logger.info(
                f"{self.operation_name} completed successfully "
                f"({self.succeeded} item(s))."
            )
        return False

    def add_success(self) -> None:
        self.succeeded += 1

    def add_error(self, error_message: str, item_identifier: str = "Unknown item") -> None:
        """
        Report an error for a specific item.

        Args:
            error_message: The error message or exception string.
            item_identifier: A string identifying the item that failed.
        """
        self.errors.append({"item": item_identifier, "error": str(error_message)})
        self.logger.debug(
            f"Error added for item '{item_identifier}' in {self.operation_name}: {error_message}"
        )
