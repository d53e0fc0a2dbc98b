"""
Retry decorators with exponential backoff.
"""
import time
import logging
from functools import wraps
from typing import Any, Callable, Optional, Type, TypeVar
import config
from utils.errors import DatabaseError, MillionaireError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def retry_with_backoff(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    exceptions: tuple = (Exception,),
    wrap_as: Optional[Type[MillionaireError]] = None
):
    """
    Decorator for retrying function calls with exponential backoff.

    Only exceptions listed in ``exceptions`` are retried; anything else
    propagates on the first attempt.

    Args:
        max_attempts: Maximum number of attempts
        base_delay: Initial delay in seconds
        max_delay: Maximum delay in seconds
        exponential_base: Base for exponential backoff
        exceptions: Tuple of exceptions to catch and retry
        wrap_as: Error class raised (chained) once every attempt has failed;
            the last exception is re-raised as is when omitted
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            delay = base_delay
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_attempts:
                        logger.error(
                            f"Function {func.__name__} failed after {max_attempts} attempts: {e}"
                        )
                        if wrap_as is None:
                            raise
                        raise wrap_as(
                            f"{func.__name__} failed after {max_attempts} attempts: {e}",
                            details={"function": func.__name__, "attempts": max_attempts}
                        ) from e
                    logger.warning(
                        f"Function {func.__name__} failed (attempt {attempt}/{max_attempts}): {e}. "
                        f"Retrying in {min(delay, max_delay):.2f}s..."
                    )
                    time.sleep(min(delay, max_delay))
                    delay *= exponential_base
            raise RuntimeError(f"Function {func.__name__} called with max_attempts={max_attempts}")

        return wrapper
    return decorator


def database_retry(func: Callable[..., T]) -> Callable[..., T]:
    """
    Retry decorator for transient database failures.
    Integrity violations are not transient and are never retried.
    Once the attempts run out the failure surfaces as DatabaseError.
    Uses configuration from config.py.
    """
    from sqlalchemy.exc import OperationalError, DisconnectionError

    return retry_with_backoff(
        max_attempts=config.config.DATABASE_RETRY_ATTEMPTS,
        base_delay=config.config.DATABASE_RETRY_DELAY,
        exceptions=(OperationalError, DisconnectionError, ConnectionError),
        wrap_as=DatabaseError
    )(func)
