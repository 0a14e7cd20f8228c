"""SQLAlchemy persistence adapter for query specifications."""

from __future__ import annotations

from .exceptions import IncludePathError, SQLAlchemyPersistenceError
from .source import SQLAlchemyQuerySource
from .specifications import (
    DEFAULT_SQLA_REGISTRY,
    LoaderStrategy,
    SQLAlchemyOperator,
    SQLAlchemyOperatorRegistry,
    build_loader_option,
    build_sqla_filter,
    compile_predicate,
)

__all__ = [
    "SQLAlchemyQuerySource",
    "build_sqla_filter",
    "compile_predicate",
    "build_loader_option",
    "LoaderStrategy",
    "DEFAULT_SQLA_REGISTRY",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    "IncludePathError",
    "SQLAlchemyPersistenceError",
]
