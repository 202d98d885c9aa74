"""Decorators and a small handler class for consistent, logged error recovery."""
from __future__ import annotations

import functools
import time
from typing import Any, Callable, Optional, TypeVar

from loguru import logger

from core.result import Success, Failure, Result

T = TypeVar('T')


def as_result(func: Callable[..., T]) -> Callable[..., Result[T, Exception]]:
    """Wrap the return value in ``Success`` and any exception in ``Failure``."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Result[T, Exception]:
        try:
            return Success(func(*args, **kwargs))
        except Exception as e:
            return Failure(e)
    return wrapper


def log_execution_time(logger_instance=logger, level: str = "DEBUG"):
    """Log how long the decorated function took.

    Args:
        logger_instance: Logger to use
        level: Log level name (DEBUG, INFO, ...)
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed = time.perf_counter() - start_time
                log_func = getattr(logger_instance, level.lower(), logger_instance.debug)
                log_func(f"{func.__name__} executed in {elapsed:.3f}s")
        return wrapper
    return decorator


class ErrorHandler:
    """Logs recoverable errors so batch loops can continue."""

    def __init__(self, logger_instance=logger):
        self.logger = logger_instance

    def handle(self, error: Exception, context: str = "") -> None:
        """Log ``error`` with optional context."""
        message = f"Error in {context}: {error}" if context else str(error)
        self.logger.error(message)

    def safe_execute(
        self,
        func: Callable[..., T],
        *args: Any,
        default: Optional[T] = None,
        context: str = "",
        **kwargs: Any,
    ) -> Optional[T]:
        """Call ``func`` and return ``default`` (after logging) if it raises.

        Args:
            func: Function to execute
            *args: Positional arguments for the function
            default: Value returned on error
            context: Context information for the log line
            **kwargs: Keyword arguments for the function
        """
        try:
            return func(*args, **kwargs)
        except Exception as e:
            self.handle(e, context=context or getattr(func, "__name__", repr(func)))
            return default
