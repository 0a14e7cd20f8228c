"""Equality and ordering: =, !=, >, <, >=, <=."""

from __future__ import annotations

import operator as op_module
from typing import TYPE_CHECKING, Any

from ..evaluator import MemoryOperator
from ..operators import SpecificationOperator

if TYPE_CHECKING:
    from collections.abc import Callable


class _Comparison(MemoryOperator):
    """
    ``field <compare> value`` with SQL's view of ``None``.

    No comparison holds when either side is ``None``, except that
    comparing against ``None`` itself is a null check: ``== None`` and
    ``!= None`` behave like ``IS NULL`` and ``IS NOT NULL``.  Incomparable
    types raise ``TypeError``, which the compiled predicate reports as an
    evaluation failure.
    """

    compare: Callable[[Any, Any], Any]

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None or condition_value is None:
            return self.on_none(field_value, condition_value)
        return bool(self.compare(field_value, condition_value))

    def on_none(self, field_value: Any, condition_value: Any) -> bool:
        return False


class EqualOperator(_Comparison):
    operator = SpecificationOperator.EQ
    compare = staticmethod(op_module.eq)

    def on_none(self, field_value: Any, condition_value: Any) -> bool:
        return field_value is condition_value


class NotEqualOperator(_Comparison):
    operator = SpecificationOperator.NE
    compare = staticmethod(op_module.ne)

    def on_none(self, field_value: Any, condition_value: Any) -> bool:
        return condition_value is None and field_value is not None


class GreaterThanOperator(_Comparison):
    operator = SpecificationOperator.GT
    compare = staticmethod(op_module.gt)


class LessThanOperator(_Comparison):
    operator = SpecificationOperator.LT
    compare = staticmethod(op_module.lt)


class GreaterEqualOperator(_Comparison):
    operator = SpecificationOperator.GE
    compare = staticmethod(op_module.ge)


class LessEqualOperator(_Comparison):
    operator = SpecificationOperator.LE
    compare = staticmethod(op_module.le)


OPERATORS: tuple[type[MemoryOperator], ...] = (
    EqualOperator,
    NotEqualOperator,
    GreaterThanOperator,
    LessThanOperator,
    GreaterEqualOperator,
    LessEqualOperator,
)
