import random
import threading
import time
from functools import wraps
from typing import Any, Callable, Type, TypeVar

R = TypeVar("R")


class RetryCancelled(Exception):
    """Raised instead of the next attempt once the cancel event is set."""

    pass


def exponential_backoff(
    max_retries: int = 3,
    initial_delay_seconds: float = 0.1,
    max_delay_seconds: float = 15.0,
    jitter_range: tuple[float, float] = (0.5, 1.0),
    retryable_exceptions: tuple[Type[BaseException], ...] = (Exception,),
    is_retryable: Callable[[BaseException], bool] = lambda e: True,
    on_retry: Callable[[BaseException, float, int], None] | None = None,
    cancel_event: threading.Event | None = None,
) -> Callable[[Callable[..., R]], Callable[..., R]]:
    """
    Decorator that implements exponential backoff retry logic.

    Args:
        max_retries: Maximum number of retry attempts, the first call not included.
        initial_delay_seconds: Initial delay in seconds between retries.
        max_delay_seconds: Maximum delay in seconds between retries.
        jitter_range: Tuple of (min, max) multipliers for jitter to randomize the delay.
        retryable_exceptions: Tuple of exception types that should trigger a retry,
                              any Exception subclass by default.
        is_retryable: Optional callable that determines if an exception is retryable.
        on_retry: Optional callback function called before each retry
                  with (exception, sleep_time, retry_count).
        cancel_event: Optional event. Once set, no further attempt is made and
                      RetryCancelled is raised, interrupting a pending backoff sleep.

    Returns:
        Wrapped function that implements retry logic.

    Example:
        ```
        @exponential_backoff(retryable_exceptions=(httpx.TransportError,))
        def fetch() -> httpx.Response:
            return client.get(url)
        ```
    """

    def calculate_sleep_time(retries: int) -> float:
        base_delay = initial_delay_seconds * (2 ** (retries - 1))
        sleep_time = min(base_delay, max_delay_seconds)
        jitter = random.uniform(*jitter_range)
        return sleep_time * jitter

    def check_cancelled() -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise RetryCancelled()

    def sleep(sleep_time: float) -> None:
        if cancel_event is None:
            time.sleep(sleep_time)
        elif cancel_event.wait(sleep_time):
            raise RetryCancelled()

    def decorator(func: Callable[..., R]) -> Callable[..., R]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> R:
            retries: int = 0

            while True:
                check_cancelled()
                try:
                    return func(*args, **kwargs)
                except retryable_exceptions as e:
                    if not is_retryable(e):
                        raise

                    retries += 1
                    if retries > max_retries:
                        raise

                    sleep_time: float = calculate_sleep_time(retries)
                    if on_retry:
                        on_retry(e, sleep_time, retries)
                    sleep(sleep_time)

        return wrapper

    return decorator
