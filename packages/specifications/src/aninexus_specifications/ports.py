"""
Ports the specification engine talks to.

The engine only ever calls the five operations of :class:`QueryableSource`;
it never inspects a source's internal representation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from .ast import Predicate
    from .builder import IncludeDirective

M = TypeVar("M")


@runtime_checkable
class QueryableSource(Protocol[M]):
    """
    A store-backed query that specifications can be applied to.

    Every operation returns a new source and leaves the receiver untouched.
    ``to_list`` is the only suspension point; it may be cancelled like any
    other awaitable and its failures surface to the caller unchanged.
    """

    def include(self, directive: IncludeDirective) -> QueryableSource[M]:
        """Eager-load a typed, single-hop navigation member."""
        ...

    def include_path(self, path: str) -> QueryableSource[M]:
        """Eager-load a dotted multi-hop navigation path."""
        ...

    def ignore_default_filters(self) -> QueryableSource[M]:
        """Suppress standing filters such as soft-delete exclusion."""
        ...

    def where(self, predicate: Predicate[M]) -> QueryableSource[M]:
        """Restrict results to instances satisfying *predicate*."""
        ...

    async def to_list(self) -> list[M]:
        """Materialise the query."""
        ...
