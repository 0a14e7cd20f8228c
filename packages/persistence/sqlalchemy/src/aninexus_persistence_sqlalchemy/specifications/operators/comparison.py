"""Comparison and set operators: =, !=, >, <, >=, <=, in, between."""

from __future__ import annotations

import operator as op_module
from typing import TYPE_CHECKING, Any, ClassVar, cast

from sqlalchemy import false

from aninexus_specifications.operators import SpecificationOperator

from ..strategy import SQLAlchemyOperator

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.sql.elements import ColumnElement


class _BinaryOperator(SQLAlchemyOperator):
    """``column <python operator> value``, left to SQLAlchemy's overloads."""

    compare: Callable[[Any, Any], Any]

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", self.compare(column, value))


class EqualOperator(_BinaryOperator):
    operator = SpecificationOperator.EQ
    compare = staticmethod(op_module.eq)


class NotEqualOperator(_BinaryOperator):
    operator = SpecificationOperator.NE
    compare = staticmethod(op_module.ne)


class GreaterThanOperator(_BinaryOperator):
    operator = SpecificationOperator.GT
    compare = staticmethod(op_module.gt)


class LessThanOperator(_BinaryOperator):
    operator = SpecificationOperator.LT
    compare = staticmethod(op_module.lt)


class GreaterEqualOperator(_BinaryOperator):
    operator = SpecificationOperator.GE
    compare = staticmethod(op_module.ge)


class LessEqualOperator(_BinaryOperator):
    operator = SpecificationOperator.LE
    compare = staticmethod(op_module.le)


class InOperator(SQLAlchemyOperator):
    """``IN ()`` is rendered as ``false`` rather than an empty list."""

    operator = SpecificationOperator.IN

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        values = list(value)
        if not values:
            return false()
        return cast("ColumnElement[bool]", column.in_(values))


class NotInOperator(SQLAlchemyOperator):
    """Rows whose column is NULL never match, even against ``()``."""

    operator = SpecificationOperator.NOT_IN

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        values = list(value)
        if not values:
            return cast("ColumnElement[bool]", column.is_not(None))
        return cast("ColumnElement[bool]", column.not_in(values))


class _RangeOperator(SQLAlchemyOperator):
    negated: ClassVar[bool] = False

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        low, high = value
        clause = column.between(low, high)
        return cast("ColumnElement[bool]", ~clause if self.negated else clause)


class BetweenOperator(_RangeOperator):
    operator = SpecificationOperator.BETWEEN


class NotBetweenOperator(_RangeOperator):
    operator = SpecificationOperator.NOT_BETWEEN
    negated = True


OPERATORS: tuple[type[SQLAlchemyOperator], ...] = (
    EqualOperator,
    NotEqualOperator,
    GreaterThanOperator,
    LessThanOperator,
    GreaterEqualOperator,
    LessEqualOperator,
    InOperator,
    NotInOperator,
    BetweenOperator,
    NotBetweenOperator,
)
