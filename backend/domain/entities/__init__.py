"""
Domain Entities

Entities are business objects with identity and lifecycle.
They are mutable and have a unique identifier that persists through their lifetime.

The generic repository does not require a shared base class. An entity type is
usable with it when it exposes the capabilities described here:
- Identifiable: has an immutable string ``id``
- SoftDeletable: carries ``deleted_at`` / ``deleted_by`` columns
"""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class Identifiable(Protocol):
    """Anything with an opaque, immutable identifier."""

    id: str


@runtime_checkable
class SoftDeletable(Protocol):
    """Entities that can be logically removed without physical erasure."""

    deleted_at: Optional[datetime]
    deleted_by: Optional[str]


def supports_soft_delete(model: type) -> bool:
    """
    Check whether an entity class carries the soft-delete columns.

    Works on classes as well as instances, unlike isinstance() on the protocol.
    """
    return hasattr(model, 'deleted_at') and hasattr(model, 'deleted_by')


__all__ = ["Identifiable", "SoftDeletable", "supports_soft_delete"]
