"""
Per-operator SQL translation.

Each :class:`SpecificationOperator` that a relational store can answer is
compiled by one :class:`SQLAlchemyOperator`.  The compiler only ever
talks to a :class:`SQLAlchemyOperatorRegistry`, so applications swap or
add translations (a trigram similarity, say) without touching it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy import ColumnElement

    from aninexus_specifications.operators import SpecificationOperator


class SQLAlchemyOperator(ABC):
    """
    Turns ``column <operator> value`` into a boolean clause.

    Set ``operator`` on the class, or override :attr:`name`.
    """

    operator: ClassVar[SpecificationOperator]

    @property
    def name(self) -> SpecificationOperator:
        return type(self).operator

    @abstractmethod
    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        """
        *column* is an instrumented attribute of the mapped class; *value*
        is the captured operand, ``None`` for the null and empty checks.
        """


class SQLAlchemyOperatorRegistry:
    """
    Translations available to :func:`~.compiler.build_sqla_filter`.

    ::

        registry = DEFAULT_SQLA_REGISTRY.copy()
        registry.register(TrigramSimilarityOperator())
        SQLAlchemyQuerySource(session, User, registry=registry)
    """

    def __init__(self, operators: Iterable[SQLAlchemyOperator] = ()) -> None:
        self._operators = {operator.name: operator for operator in operators}

    def register(self, operator: SQLAlchemyOperator) -> None:
        self._operators[operator.name] = operator

    def register_all(self, *operators: SQLAlchemyOperator) -> None:
        self._operators.update((operator.name, operator) for operator in operators)

    def unregister(self, name: SpecificationOperator) -> None:
        self._operators.pop(name, None)

    def copy(self) -> SQLAlchemyOperatorRegistry:
        return SQLAlchemyOperatorRegistry(self._operators.values())

    def has(self, name: SpecificationOperator) -> bool:
        return name in self._operators

    @property
    def supported_operators(self) -> set[SpecificationOperator]:
        return set(self._operators)

    def apply(
        self,
        name: SpecificationOperator,
        column: Any,
        value: Any,
    ) -> ColumnElement[bool]:
        """
        Raises:
            ValueError: If no translation is registered under *name*.
        """
        try:
            operator = self._operators[name]
        except KeyError:
            raise ValueError(
                f"Operator '{name.value}' has no SQLAlchemy translation"
            ) from None
        return operator.apply(column, value)
