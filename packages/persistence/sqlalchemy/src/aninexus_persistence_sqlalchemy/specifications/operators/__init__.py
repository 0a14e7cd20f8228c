"""
Built-in SQL translations and the registry the compiler uses by default.

::

    expr = DEFAULT_SQLA_REGISTRY.apply(SpecificationOperator.EQ, User.name, "a")
"""

from __future__ import annotations

from itertools import chain

from ..strategy import SQLAlchemyOperator, SQLAlchemyOperatorRegistry
from . import comparison, fts, null, text

BUILTIN_OPERATORS: tuple[type[SQLAlchemyOperator], ...] = tuple(
    chain(comparison.OPERATORS, text.OPERATORS, null.OPERATORS, fts.OPERATORS)
)


def build_default_sqla_registry() -> SQLAlchemyOperatorRegistry:
    """Return a new registry with every built-in translation, full-text included."""
    return SQLAlchemyOperatorRegistry(cls() for cls in BUILTIN_OPERATORS)


DEFAULT_SQLA_REGISTRY: SQLAlchemyOperatorRegistry = build_default_sqla_registry()

__all__ = [
    "BUILTIN_OPERATORS",
    "DEFAULT_SQLA_REGISTRY",
    "SQLAlchemyOperatorRegistry",
    "build_default_sqla_registry",
]
