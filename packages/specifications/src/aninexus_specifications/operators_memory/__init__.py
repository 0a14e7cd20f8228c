"""
Built-in in-memory operators.

Every comparison, text and null check has a strategy here.  Full-text
search has none: only a backing store can rank documents, so predicates
using it cannot be evaluated in memory.

::

    registry = build_default_registry()
    registry.evaluate(SpecificationOperator.ICONTAINS, "Hello", "ELL")
"""

from __future__ import annotations

from itertools import chain

from ..evaluator import MemoryOperator, MemoryOperatorRegistry
from aninexus_specifications.operators_memory import null, set, standard, string

BUILTIN_OPERATORS: tuple[type[MemoryOperator], ...] = tuple(
    chain(standard.OPERATORS, set.OPERATORS, string.OPERATORS, null.OPERATORS)
)


def build_default_registry() -> MemoryOperatorRegistry:
    """Return a new registry holding one instance of every built-in operator."""
    return MemoryOperatorRegistry(cls() for cls in BUILTIN_OPERATORS)


DEFAULT_MEMORY_REGISTRY: MemoryOperatorRegistry = build_default_registry()

__all__ = [
    "BUILTIN_OPERATORS",
    "DEFAULT_MEMORY_REGISTRY",
    "MemoryOperatorRegistry",
    "build_default_registry",
]
