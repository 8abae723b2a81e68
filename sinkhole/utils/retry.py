"""Retry utilities with exponential backoff."""

import logging
import time
from functools import wraps
from typing import Any, Callable, TypeVar

import requests


logger = logging.getLogger(__name__)

# Type variable for generic function signatures
F = TypeVar("F", bound=Callable[..., Any])

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


def is_transient_error(error: requests.RequestException) -> bool:
    """Decide whether a failed HTTP request is worth repeating.

    Args:
        error: Exception raised by requests.

    Returns:
        bool: True for connection errors, timeouts, rate limits and 5xx gateways.
    """
    if isinstance(error, (requests.ConnectionError, requests.Timeout)):
        return True
    if isinstance(error, requests.HTTPError) and error.response is not None:
        return error.response.status_code in RETRYABLE_STATUS_CODES
    return False


def exponential_backoff_retry(
    max_retries: int = 2,
    delays: list[int] | None = None,
) -> Callable[[F], F]:
    """Decorator for exponential backoff retry (1s, 2s).

    Retries on transient HTTP failures: connection errors, timeouts,
    rate limits (429) and server errors (5xx).

    Args:
        max_retries: Maximum number of retry attempts (default: 2).
        delays: List of delay seconds between retries (default: [1, 2]).

    Returns:
        Callable: Decorated function with retry logic.

    Examples:
        >>> @exponential_backoff_retry()
        ... def download_list(url):
        ...     # requests call here
        ...     pass
    """
    if delays is None:
        delays = [1, 2]

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except requests.RequestException as e:
                    if is_transient_error(e) and attempt < max_retries:
                        delay = delays[min(attempt, len(delays) - 1)]
                        logger.warning(
                            f"{func.__name__} failed ({type(e).__name__}), retrying in {delay}s"
                        )
                        time.sleep(delay)
                        continue
                    # Non-retryable error or retries exhausted
                    raise
            raise RuntimeError(
                f"Max retries ({max_retries}) exhausted for {func.__name__}"
            )

        return wrapper  # type: ignore

    return decorator
