"""Exceptions for the SQLAlchemy persistence layer."""

from __future__ import annotations

from aninexus_specifications.exceptions import SpecificationError


class SQLAlchemyPersistenceError(SpecificationError):
    """Base exception for all SQLAlchemy-specific persistence errors."""


class IncludePathError(SQLAlchemyPersistenceError):
    """Raised when an include path cannot be turned into a loader option."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load include path '{path}': {reason}")


__all__: list[str] = [
    "IncludePathError",
    "SQLAlchemyPersistenceError",
]
