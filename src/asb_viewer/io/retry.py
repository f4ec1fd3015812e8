from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from asb_viewer.errors import IOFailure

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay(attempt: int, base_delay_seconds: float = 1.0) -> float:
    """Delay after a failed ``attempt`` (1-based): 1s, 2s, 4s, ..."""
    return base_delay_seconds * (2 ** (attempt - 1))


def read_with_retry(
    operation: Callable[[], T],
    *,
    max_attempts: int = 3,
    base_delay_seconds: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``operation``, retrying OSError with exponential backoff.

    Other exceptions (parse failures included) propagate on the first attempt.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    for attempt in range(1, max_attempts + 1):
        try:
            return operation()
        except OSError as exc:
            if attempt == max_attempts:
                raise IOFailure(f"Giving up after {max_attempts} attempts: {exc}") from exc
            delay = backoff_delay(attempt, base_delay_seconds)
            LOGGER.warning(
                "Attempt %s/%s failed (%s); retrying in %.1fs",
                attempt,
                max_attempts,
                exc,
                delay,
            )
            sleep(delay)
    raise AssertionError("unreachable")  # pragma: no cover
