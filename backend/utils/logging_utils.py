"""
Structured Logging Utilities

Provides utilities for adding structured context to log messages,
improving observability and debugging of repository operations.
"""

import inspect
import logging
import sys
from contextvars import ContextVar
from functools import wraps
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional


# Context variable for operation-scoped logging context
_logging_context: ContextVar[Dict[str, Any]] = ContextVar('logging_context', default={})

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Keyword arguments whose values are copied into the operation log context
CONTEXT_KEYS = ("test_id", "entity_id", "key", "actor_id", "creator_id", "updater_id")


class StructuredLogger:
    """
    Wrapper around standard logger that adds structured context.

    Usage:
        logger = StructuredLogger(__name__)
        logger.info("Test created", extra={
            "test_id": test.id,
            "operation": "create",
        })
    """

    def __init__(self, name: str):
        """
        Initialize structured logger.

        Args:
            name: Logger name (typically __name__)
        """
        self.logger = logging.getLogger(name)

    def _add_context(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Add context from ContextVar to extra dict.

        Args:
            extra: Additional context dict

        Returns:
            Merged context dict
        """
        context = _logging_context.get().copy()
        if extra:
            context.update(extra)
        return context

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log debug message with structured context."""
        self.logger.debug(message, extra=self._add_context(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log info message with structured context."""
        self.logger.info(message, extra=self._add_context(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log warning message with structured context."""
        self.logger.warning(message, extra=self._add_context(extra))

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False):
        """Log error message with structured context."""
        self.logger.error(message, extra=self._add_context(extra), exc_info=exc_info)


def set_logging_context(**kwargs):
    """
    Set logging context for the current operation.

    This context will be automatically included in all log messages
    emitted through StructuredLogger within the current context
    (typically one unit of work).

    Args:
        **kwargs: Key-value pairs to add to context

    Example:
        set_logging_context(actor_id=user_id, operation="test_import")
    """
    context = _logging_context.get().copy()
    context.update(kwargs)
    _logging_context.set(context)


def get_logging_context() -> Dict[str, Any]:
    """Return a copy of the current logging context."""
    return _logging_context.get().copy()


def clear_logging_context():
    """Clear the logging context."""
    _logging_context.set({})


def log_operation(operation_name: str):
    """
    Decorator to log operation start/end with structured context.

    Only coroutine functions are supported; every repository operation
    is async.

    Args:
        operation_name: Name of the operation

    Example:
        @log_operation("update_test")
        async def update(self, request, updater_id=None):
            ...
    """
    def decorator(func):
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"log_operation requires a coroutine function, got {func.__name__}")

        @wraps(func)
        async def wrapper(*args, **kwargs):
            logger = StructuredLogger(func.__module__)

            context = {"operation": operation_name}
            for key in CONTEXT_KEYS:
                if kwargs.get(key) is not None:
                    context[key] = kwargs[key]

            logger.debug(f"Starting {operation_name}", extra=context)

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                context["error"] = str(e)
                context["error_type"] = type(e).__name__
                logger.error(f"Failed {operation_name}", extra=context, exc_info=True)
                raise

            logger.debug(f"Completed {operation_name}", extra=context)
            return result

        return wrapper

    return decorator


def configure_logging(level: int = logging.INFO, log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure the root logger with a console handler and an optional
    rotating file handler (10MB per file, 5 backups).

    Calling this more than once replaces the handlers it installed before.

    Args:
        level: Root log level
        log_file: Optional path of the log file

    Returns:
        The configured root logger
    """
    formatter = logging.Formatter(LOG_FORMAT)
    root_logger = logging.getLogger()

    for handler in list(root_logger.handlers):
        if getattr(handler, '_assessment_store', False):
            root_logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    console_handler._assessment_store = True
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        file_handler._assessment_store = True
        root_logger.addHandler(file_handler)

    root_logger.setLevel(level)

    # Driver loggers are noisy at DEBUG
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    return root_logger
