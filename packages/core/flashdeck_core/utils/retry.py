"""Retry utilities for model calls."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from flashdeck_core.errors import ProcessingError, TransientGenerationError
from flashdeck_core.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Default retry configuration
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_INITIAL_DELAY = 1.0  # seconds

# Exceptions that should trigger a retry
RETRYABLE_EXCEPTIONS = (
    TransientGenerationError,
    ConnectionError,
    TimeoutError,
    asyncio.TimeoutError,
)


def get_async_retry(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    sleep: Callable[[float], Awaitable[None]] | None = None,
) -> AsyncRetrying:
    """Create an async retry context manager.

    The wait before retry n (0-based) is ``initial_delay * 2**n`` with no
    jitter and no upper bound.

    Args:
        max_attempts: Maximum number of attempts, including the first
        initial_delay: Wait after the first failure in seconds
        sleep: Optional sleep coroutine, defaults to asyncio.sleep

    Returns:
        AsyncRetrying context manager
    """
    options: dict[str, Any] = {}
    if sleep is not None:
        options["sleep"] = sleep
    return AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=initial_delay, exp_base=2, min=0),
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        reraise=True,
        **options,
    )


def _format_exception(e: BaseException) -> str:
    """Format exception for logging, handling nested/empty exceptions."""
    msg = str(e).strip()

    if not msg:
        msg = type(e).__name__

    # Check for nested exceptions (common in API clients)
    if e.__cause__ is not None:
        cause_msg = str(e.__cause__).strip()
        if cause_msg and cause_msg not in msg:
            msg = f"{msg} (caused by: {cause_msg})"

    # Check for HTTP status codes
    if hasattr(e, "status_code"):
        msg = f"HTTP {e.status_code}: {msg}"
    elif hasattr(e, "code") and isinstance(getattr(e, "code"), int):
        msg = f"Error {e.code}: {msg}"

    return msg or "Unknown error"


async def with_retry(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    operation_name: str = "operation",
    sleep: Callable[[float], Awaitable[None]] | None = None,
    **kwargs: Any,
) -> T:
    """Execute an async function with bounded exponential-backoff retry.

    Transient failures are retried until max_attempts is reached. Permanent
    failures stop immediately. Either way the caller sees a ProcessingError
    carrying the message of the last underlying failure.

    Args:
        func: Async function to execute
        *args: Positional arguments for the function
        max_attempts: Maximum number of attempts
        initial_delay: Wait after the first failure in seconds
        operation_name: Name for logging purposes
        sleep: Optional sleep coroutine used between attempts
        **kwargs: Keyword arguments for the function

    Returns:
        Result of the function

    Raises:
        ProcessingError: If every attempt failed or a failure was not retryable
    """
    attempt = 0

    try:
        async for attempt_ctx in get_async_retry(
            max_attempts=max_attempts, initial_delay=initial_delay, sleep=sleep
        ):
            with attempt_ctx:
                attempt += 1
                if attempt > 1:
                    logger.info(
                        f"Retrying {operation_name} (attempt {attempt}/{max_attempts})"
                    )
                try:
                    return await func(*args, **kwargs)
                except RETRYABLE_EXCEPTIONS as e:
                    logger.warning(
                        f"{operation_name} failed (attempt {attempt}/{max_attempts}): "
                        f"{_format_exception(e)}"
                    )
                    raise  # Let tenacity handle the retry
                except Exception as e:
                    logger.error(
                        f"{operation_name} failed with non-retryable error: "
                        f"{_format_exception(e)}"
                    )
                    raise
    except ProcessingError:
        raise
    except Exception as e:
        if isinstance(e, RETRYABLE_EXCEPTIONS):
            logger.error(
                f"{operation_name} exhausted {attempt}/{max_attempts} attempts"
            )
        message = str(e).strip() or type(e).__name__
        raise ProcessingError(message, status=500, attempts=attempt) from e

    raise ProcessingError(
        f"{operation_name} failed after {max_attempts} attempts", attempts=attempt
    )
