"""
RecordState Value Object

Lifecycle of a persisted entity as seen through the repositories.
"""

from enum import Enum
from typing import Optional


class RecordState(str, Enum):
    """
    Immutable record state enum.

    nonexistent -> live (create) -> live (update) -> gone (hard delete).
    Soft delete moves live -> soft_deleted; only hard delete leaves it.
    """

    NONEXISTENT = "nonexistent"
    LIVE = "live"
    SOFT_DELETED = "soft_deleted"
    GONE = "gone"

    def is_terminal(self) -> bool:
        """Check if this state is terminal (no further transitions)."""
        return self is RecordState.GONE

    def is_visible(self) -> bool:
        """Check if records in this state are returned by normal reads."""
        return self is RecordState.LIVE

    def can_transition_to(self, new_state: "RecordState") -> bool:
        """
        Check if transition to new state is valid.

        Args:
            new_state: Target state

        Returns:
            True if transition is allowed
        """
        valid_transitions = {
            RecordState.NONEXISTENT: {RecordState.LIVE},
            RecordState.LIVE: {RecordState.LIVE, RecordState.SOFT_DELETED, RecordState.GONE},
            # Restoring to LIVE is an administrative path outside the repositories
            RecordState.SOFT_DELETED: {RecordState.GONE},
            RecordState.GONE: set(),  # Terminal state
        }

        return new_state in valid_transitions.get(self, set())

    @classmethod
    def of(cls, entity: Optional[object]) -> "RecordState":
        """
        Derive the state of a loaded entity.

        Args:
            entity: Entity instance, or None when no row was found

        Returns:
            NONEXISTENT for None, SOFT_DELETED when deleted_at is set, LIVE otherwise
        """
        if entity is None:
            return cls.NONEXISTENT
        if getattr(entity, 'deleted_at', None) is not None:
            return cls.SOFT_DELETED
        return cls.LIVE
