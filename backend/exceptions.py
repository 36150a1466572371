"""
Custom exception classes for the application.

This module defines domain-specific exceptions that provide better error handling
and clearer error messages throughout the application.

"Record not found" is absent: repositories report absence with
None / False results. Storage faults raised by SQLAlchemy are propagated
unchanged and are not wrapped here.
"""


class ApplicationError(Exception):
    """Base exception for all application errors"""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(ApplicationError):
    """Raised when there's a configuration issue"""

    def __init__(self, message: str, missing_keys: list[str] | None = None):
        details = {"missing_keys": missing_keys} if missing_keys else {}
        super().__init__(message, details)


class TransactionStateError(ApplicationError):
    """Raised when a unit of work is used outside its active lifetime"""

    def __init__(self, state: str, operation: str):
        details = {"state": state, "operation": operation}
        msg = f"Cannot {operation}: unit of work is {state}"
        super().__init__(msg, details)
