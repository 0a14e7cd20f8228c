"""
SQLAlchemy-backed :class:`~aninexus_specifications.ports.QueryableSource`.

Each operation returns a new, immutable source; nothing touches the
database until :meth:`SQLAlchemyQuerySource.to_list` is awaited::

    source = SQLAlchemyQuerySource(session, User, default_filters=[not_deleted])
    users = await to_list(source, UserIdentitySpecification("alice"))
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import select

from .specifications.compiler import compile_predicate
from .specifications.loading import (
    LoaderStrategy,
    build_loader_option,
    check_loader_strategy,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from aninexus_specifications.ast import Predicate
    from aninexus_specifications.base import QuerySpecification
    from aninexus_specifications.builder import IncludeDirective

    from .specifications.strategy import SQLAlchemyOperatorRegistry

logger = logging.getLogger("aninexus.persistence.sqlalchemy")

M = TypeVar("M")


class SQLAlchemyQuerySource(Generic[M]):
    """
    Immutable ``SELECT`` over one mapped model.

    Args:
        session: The async session used to execute the statement.
        model: The mapped model class.
        default_filters: Standing predicates (e.g. soft-delete) applied
            unless :meth:`ignore_default_filters` is called.
        loader_strategy: ``"joined"`` loads includes in the same query,
            ``"selectin"`` issues one extra query per relationship.
        registry: Optional custom operator registry.
    """

    def __init__(
        self,
        session: AsyncSession,
        model: type[M],
        *,
        default_filters: Sequence[Predicate[M]] = (),
        loader_strategy: LoaderStrategy = "joined",
        registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        self._session = session
        self._model = model
        self._default_filters = tuple(default_filters)
        self._loader_strategy = check_loader_strategy(loader_strategy)
        self._registry = registry
        self._options: tuple[Any, ...] = ()
        self._criteria: tuple[ColumnElement[bool], ...] = ()
        self._defaults_ignored = False

    @classmethod
    def for_specification(
        cls,
        session: AsyncSession,
        specification: QuerySpecification[M],
        *,
        default_filters: Sequence[Predicate[M]] = (),
        registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> SQLAlchemyQuerySource[M]:
        """
        Create a source suited to *specification*'s execution flags.

        ``split_execution`` selects ``selectin`` loading so every included
        collection is fetched by its own query instead of one wide join.
        """
        strategy: LoaderStrategy = (
            "selectin" if specification.split_execution else "joined"
        )
        return cls(
            session,
            specification.model,
            default_filters=default_filters,
            loader_strategy=strategy,
            registry=registry,
        )

    def _evolve(self, **changes: Any) -> SQLAlchemyQuerySource[M]:
        clone = copy.copy(self)
        for name, value in changes.items():
            setattr(clone, name, value)
        return clone

    # -- QueryableSource ------------------------------------------------------

    def include(self, directive: IncludeDirective) -> SQLAlchemyQuerySource[M]:
        return self.include_path(directive.name)

    def include_path(self, path: str) -> SQLAlchemyQuerySource[M]:
        """
        Raises:
            IncludePathError: If *path* is malformed.
            FieldNotFoundError: If a segment is not mapped.
            RelationshipTraversalError: If a segment is a column.
        """
        option = build_loader_option(self._model, path, self._loader_strategy)
        return self._evolve(_options=(*self._options, option))

    def ignore_default_filters(self) -> SQLAlchemyQuerySource[M]:
        return self._evolve(_defaults_ignored=True)

    def where(self, predicate: Predicate[M]) -> SQLAlchemyQuerySource[M]:
        clause = compile_predicate(self._model, predicate, registry=self._registry)
        return self._evolve(_criteria=(*self._criteria, clause))

    async def to_list(self) -> list[M]:
        """Execute the statement; joined duplicates are collapsed."""
        stmt = self.statement()
        logger.debug("Executing %s query: %s", self._model.__name__, stmt)
        result = await self._session.scalars(stmt)
        return list(result.unique().all())

    # -- inspection -----------------------------------------------------------

    @property
    def model(self) -> type[M]:
        return self._model

    @property
    def loader_strategy(self) -> LoaderStrategy:
        return self._loader_strategy

    @property
    def default_filters_ignored(self) -> bool:
        return self._defaults_ignored

    def statement(self) -> Select[Any]:
        """The composed ``SELECT`` this source would execute."""
        stmt = select(self._model)
        if self._options:
            stmt = stmt.options(*self._options)
        criteria = list(self._criteria)
        if not self._defaults_ignored:
            criteria[:0] = [
                compile_predicate(self._model, p, registry=self._registry)
                for p in self._default_filters
            ]
        if criteria:
            stmt = stmt.where(*criteria)
        return stmt
