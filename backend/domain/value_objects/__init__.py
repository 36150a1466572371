"""
Domain Value Objects

Value objects are immutable types that represent descriptive aspects of the domain.
They have no conceptual identity and are compared by their values, not by ID.

Examples:
- RecordState: Lifecycle state of a persisted entity
"""

from .record_state import RecordState

__all__ = ["RecordState"]
