"""
In-memory :class:`~aninexus_specifications.ports.QueryableSource`.

Filters a fixed collection of objects with the memory operator registry.
Useful for tests and for evaluating specifications over data that has
already been loaded.  Include directives are recorded, not executed,
since in-memory objects are already fully loaded.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ..operators_memory import DEFAULT_MEMORY_REGISTRY

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from ..ast import Predicate
    from ..builder import IncludeDirective
    from ..evaluator import MemoryOperatorRegistry

logger = logging.getLogger("aninexus.specifications")

M = TypeVar("M")


class InMemoryQuerySource(Generic[M]):
    """
    Immutable query over an in-memory collection.

    Args:
        items: The objects to query.
        default_filters: Standing predicates applied unless
            :meth:`ignore_default_filters` is called (e.g. soft-delete).
        registry: Operator registry used for evaluation.  Defaults to
            ``DEFAULT_MEMORY_REGISTRY``.
    """

    def __init__(
        self,
        items: Iterable[M],
        *,
        default_filters: Sequence[Predicate[M]] = (),
        registry: MemoryOperatorRegistry | None = None,
    ) -> None:
        self._items: tuple[M, ...] = tuple(items)
        self._default_filters: tuple[Predicate[M], ...] = tuple(default_filters)
        self._registry = registry if registry is not None else DEFAULT_MEMORY_REGISTRY
        self._filters: tuple[Predicate[M], ...] = ()
        self._includes: tuple[IncludeDirective, ...] = ()
        self._include_paths: tuple[str, ...] = ()
        self._defaults_ignored = False

    def _evolve(self, **changes: Any) -> InMemoryQuerySource[M]:
        clone = copy.copy(self)
        for name, value in changes.items():
            setattr(clone, name, value)
        return clone

    # -- QueryableSource ------------------------------------------------------

    def include(self, directive: IncludeDirective) -> InMemoryQuerySource[M]:
        return self._evolve(_includes=(*self._includes, directive))

    def include_path(self, path: str) -> InMemoryQuerySource[M]:
        return self._evolve(_include_paths=(*self._include_paths, path))

    def ignore_default_filters(self) -> InMemoryQuerySource[M]:
        return self._evolve(_defaults_ignored=True)

    def where(self, predicate: Predicate[M]) -> InMemoryQuerySource[M]:
        return self._evolve(_filters=(*self._filters, predicate))

    async def to_list(self) -> list[M]:
        """
        Evaluate every active filter against every item.

        Raises:
            EvaluationError: If a filter cannot be evaluated in memory.
        """
        await asyncio.sleep(0)
        active = self._filters
        if not self._defaults_ignored:
            active = self._default_filters + active
        checks = [predicate.compile(self._registry) for predicate in active]
        results = [item for item in self._items if all(c(item) for c in checks)]
        logger.debug(
            "In-memory query matched %d of %d items", len(results), len(self._items)
        )
        return results

    # -- inspection -----------------------------------------------------------

    @property
    def items(self) -> tuple[M, ...]:
        return self._items

    @property
    def includes(self) -> tuple[IncludeDirective, ...]:
        return self._includes

    @property
    def include_paths(self) -> tuple[str, ...]:
        return self._include_paths

    @property
    def filters(self) -> tuple[Predicate[M], ...]:
        return self._filters

    @property
    def default_filters_ignored(self) -> bool:
        return self._defaults_ignored
