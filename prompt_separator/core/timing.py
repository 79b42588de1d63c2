"""
Timing utilities for debugging.

Functions wrapped with ``timer`` log their execution time at DEBUG level
when the PS_DEBUG environment variable is set to 1.
"""

import functools
import logging
import os
import time
from typing import Callable, ParamSpec, TypeVar

P = ParamSpec("P")
R = TypeVar("R")

logger = logging.getLogger(__name__)


def timer(func: Callable[P, R]) -> Callable[P, R]:
    """
    Decorator that logs execution time when PS_DEBUG=1.

    The flag is read on each call so it can be switched on from the CLI.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        if os.getenv("PS_DEBUG") != "1":
            return func(*args, **kwargs)

        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(f"[PS_DEBUG] {func.__qualname__}: {elapsed_ms:.2f}ms")
        return result

    return wrapper
