"""
Utility functions and decorators.
"""

from .logging_utils import StructuredLogger, configure_logging, log_operation
from .uuid_helper import generate_uuid

__all__ = ["StructuredLogger", "configure_logging", "log_operation", "generate_uuid"]
