# chess_tracker/utils/retry.py
"""
Provides an asynchronous retry decorator for transient database errors.

The record store wraps its raw reads and writes with it so that SQLite
"database is locked" contention is ridden out with an exponential backoff
instead of failing the command.
"""
import asyncio
import functools
import random
from typing import Any, Callable, Coroutine, Tuple, Type

import structlog

from chess_tracker.utils import metrics

logger = structlog.get_logger(__name__)


def retry_with_backoff(
    exceptions_to_catch: Tuple[Type[Exception], ...],
    db_type: str,
    attempts: int = 3,
    initial_backoff_s: float = 0.5,
    max_backoff_s: float = 5.0,
    jitter_factor: float = 0.2,
) -> Callable[[Callable[..., Coroutine]], Callable[..., Coroutine]]:
    """
    An async decorator to retry a store operation with exponential backoff and jitter.

    Args:
        exceptions_to_catch: The exception classes treated as transient.
        db_type: Label for the transient-error metric.
        attempts: The maximum number of tries, including the first one.
        initial_backoff_s: The delay in seconds before the first retry.
        max_backoff_s: The cap on any single delay.
        jitter_factor: Fraction of the current delay added or subtracted at random.

    Returns:
        A decorated asynchronous function. The last transient error is
        re-raised once the attempts are used up.
    """
    def decorator(func: Callable[..., Coroutine]) -> Callable[..., Coroutine]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_backoff_s
            for attempt in range(1, attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions_to_catch as e:
                    metrics.DB_TRANSIENT_ERRORS_TOTAL.labels(db_type=db_type).inc()
                    if attempt == attempts:
                        logger.error(
                            "Store operation failed after max attempts.",
                            operation=func.__name__,
                            attempts=attempts,
                            error=str(e),
                            exc_info=True,
                        )
                        raise

                    jitter = random.uniform(-delay * jitter_factor, delay * jitter_factor)
                    wait_s = min(max_backoff_s, max(0.0, delay + jitter))
                    logger.warning(
                        "Transient store error, retrying.",
                        operation=func.__name__,
                        attempt=attempt,
                        wait_seconds=round(wait_s, 2),
                        error=str(e),
                    )
                    await asyncio.sleep(wait_s)
                    delay *= 2
        return wrapper
    return decorator
