"""
Timing decorator for grouping and bundling entry points.
"""

import time
import functools
from typing import Callable, Any
from contextbundle.logging_config import logger


def _describe(result: Any) -> str:
    if isinstance(result, (list, dict, set, tuple)):
        return f"{len(result)} items"
    return type(result).__name__


def trace(func: Callable) -> Callable:
    """
    Decorator that logs entry, exit, result size and elapsed time at debug level.

    Usage:
        @trace
        def build_groups(graph, package):
            ...

    Failures are logged with their duration and re-raised unchanged; callers
    decide how loudly to report them.
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        func_name = func.__qualname__
        trace_log = logger.bind(function=func_name)

        trace_log.debug(f"TRACE_ENTER: {func_name}")
        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            duration = time.perf_counter() - start_time
            trace_log.debug(
                f"TRACE_EXIT: {func_name} raised {type(e).__name__} after {duration:.4f}s: {e}"
            )
            raise

        duration = time.perf_counter() - start_time
        trace_log.debug(f"TRACE_EXIT: {func_name} returned {_describe(result)} in {duration:.4f}s")
        return result

    return wrapper
