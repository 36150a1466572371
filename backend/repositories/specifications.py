"""
Specification Pattern Implementation

Encapsulates query criteria in reusable, composable specifications.
A specification can be checked against an in-memory entity or turned into a
SQLAlchemy filter expression for the generic CrudRepository.

Composition:
- spec_a & spec_b  -> AND
- spec_a | spec_b  -> OR
- ~spec            -> NOT
- all_of(filters)  -> AND over an ordered collection (empty = no restriction)
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, Optional, Sequence, Type, TypeVar

from sqlalchemy import and_, not_, or_, true


T = TypeVar('T')


class Specification(ABC, Generic[T]):
    """
    Abstract base class for specifications.

    A specification encapsulates a single selection criterion.
    """

    @abstractmethod
    def is_satisfied_by(self, candidate: T) -> bool:
        """
        Check if a candidate object satisfies this specification.

        Args:
            candidate: Object to check

        Returns:
            True if candidate satisfies specification
        """

    @abstractmethod
    def to_sql_filter(self):
        """
        Convert specification to SQLAlchemy filter expression.

        Returns:
            SQLAlchemy filter expression
        """

    def __and__(self, other: "Specification[T]") -> "AndSpecification[T]":
        """Combine specifications with AND."""
        return AndSpecification(self, other)

    def __or__(self, other: "Specification[T]") -> "OrSpecification[T]":
        """Combine specifications with OR."""
        return OrSpecification(self, other)

    def __invert__(self) -> "NotSpecification[T]":
        """Negate specification with NOT."""
        return NotSpecification(self)


class AndSpecification(Specification[T]):
    """Specification that combines two specifications with AND."""

    def __init__(self, left: Specification[T], right: Specification[T]):
        self.left = left
        self.right = right

    def is_satisfied_by(self, candidate: T) -> bool:
        return self.left.is_satisfied_by(candidate) and self.right.is_satisfied_by(candidate)

    def to_sql_filter(self):
        return and_(self.left.to_sql_filter(), self.right.to_sql_filter())


class OrSpecification(Specification[T]):
    """Specification that combines two specifications with OR."""

    def __init__(self, left: Specification[T], right: Specification[T]):
        self.left = left
        self.right = right

    def is_satisfied_by(self, candidate: T) -> bool:
        return self.left.is_satisfied_by(candidate) or self.right.is_satisfied_by(candidate)

    def to_sql_filter(self):
        return or_(self.left.to_sql_filter(), self.right.to_sql_filter())


class NotSpecification(Specification[T]):
    """Specification that negates another specification."""

    def __init__(self, spec: Specification[T]):
        self.spec = spec

    def is_satisfied_by(self, candidate: T) -> bool:
        return not self.spec.is_satisfied_by(candidate)

    def to_sql_filter(self):
        return not_(self.spec.to_sql_filter())


class AlwaysSpecification(Specification[T]):
    """Matches everything; the neutral element of AND."""

    def is_satisfied_by(self, candidate: T) -> bool:
        return True

    def to_sql_filter(self):
        return true()


class FieldEquals(Specification[T]):
    """
    Specification for entities whose column equals a value.

    Works with any mapped model; the field name is resolved on the class
    so a typo fails fast instead of silently matching nothing.
    """

    def __init__(self, model: Type[T], field: str, value: Any):
        """
        Initialize specification.

        Args:
            model: Mapped entity class
            field: Column attribute name
            value: Value to compare against (None compiles to IS NULL)

        Raises:
            AttributeError: If the model has no such field
        """
        if not hasattr(model, field):
            raise AttributeError(f"{model.__name__} has no field '{field}'")
        self.model = model
        self.field = field
        self.value = value

    def is_satisfied_by(self, candidate: T) -> bool:
        return getattr(candidate, self.field) == self.value

    def to_sql_filter(self):
        column = getattr(self.model, self.field)
        if self.value is None:
            return column.is_(None)
        return column == self.value

    def __repr__(self) -> str:
        return f"FieldEquals({self.model.__name__}.{self.field} == {self.value!r})"


class IdEquals(FieldEquals[T]):
    """Identity-equality specification, the usual single-record lookup."""

    def __init__(self, model: Type[T], entity_id: str):
        super().__init__(model, 'id', entity_id)


class IsLive(Specification[T]):
    """Specification for records that have not been soft-deleted."""

    def __init__(self, model: Type[T]):
        self.model = model

    def is_satisfied_by(self, candidate: T) -> bool:
        return getattr(candidate, 'deleted_at', None) is None

    def to_sql_filter(self):
        return self.model.deleted_at.is_(None)


def all_of(filters: Optional[Iterable[Specification[T]]]) -> Specification[T]:
    """
    Combine an ordered collection of specifications conjunctively.

    Args:
        filters: Specifications to AND together, in order; None or empty
            means no restriction

    Returns:
        A single specification
    """
    specs: Sequence[Specification[T]] = list(filters or [])
    if not specs:
        return AlwaysSpecification()

    combined = specs[0]
    for spec in specs[1:]:
        combined = combined & spec
    return combined
