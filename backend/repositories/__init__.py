"""
Repository layer for data access abstraction.

This package contains the generic CrudRepository, the specifications used to
filter it, and the aggregate repositories built on top of it.
"""

from .crud_repository import CrudRepository
from .assessment_repository import TestRepository
from .specifications import Specification, FieldEquals, IdEquals, IsLive, all_of

__all__ = [
    "CrudRepository",
    "TestRepository",
    "Specification",
    "FieldEquals",
    "IdEquals",
    "IsLive",
    "all_of",
]
