"""Retry helper for provider calls."""

from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable

from language_tool_python.utils import LanguageToolError

from .base import ProviderConnectionError

LOGGER = logging.getLogger(__name__)

# Failures worth another attempt; rate limits and rejected requests are not
TRANSIENT_ERRORS = (
    ProviderConnectionError,
    ConnectionError,
    TimeoutError,
    # language_tool_python wraps connection-level errors of the local server
    # in LanguageToolError
    LanguageToolError,
)


def backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    """Seconds to wait after the zero-based ``attempt`` failed.

    Doubles per attempt with +/-25% jitter, capped at ``max_delay``.
    """
    delay = base_delay * (2**attempt) * random.uniform(0.75, 1.25)
    return min(delay, max_delay)


def retry_with_backoff(
    func: Callable[[Any], Any],
    func_arg: Any,
    max_retries: int = 3,
    base_delay: float = 2.0,
    max_delay: float = 30.0,
) -> Any:
    """Call ``func(func_arg)``, retrying transient provider failures.

    Args:
            func: The function to call (e.g., provider.check)
            func_arg: The argument to pass to func (e.g., the text)
            max_retries: Retries after the first attempt
            base_delay: Delay before the first retry, in seconds
            max_delay: Upper bound for any single delay, in seconds

    Raises:
            The last transient error once the retries are used up; any other
            error straight away
    """
    attempt = 0
    while True:
        try:
            return func(func_arg)
        except TRANSIENT_ERRORS as exc:
            if attempt >= max_retries:
                LOGGER.error(
                    "Language check failed after %d attempt(s): %s",
                    attempt + 1,
                    exc,
                )
                raise
            delay = backoff_delay(attempt, base_delay, max_delay)
            LOGGER.warning(
                "Language check attempt %d failed (%s); retrying in %.1f second(s)",
                attempt + 1,
                type(exc).__name__,
                delay,
            )
            time.sleep(delay)
            attempt += 1
