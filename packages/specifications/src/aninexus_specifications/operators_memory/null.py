"""
Value-less checks: is_null, is_not_null, is_empty, is_not_empty.

"Empty" is ``None`` or anything sized with length zero (``""``, ``[]``,
``{}``).  Numbers are never empty, so ``0`` and ``False`` are not.
"""

from __future__ import annotations

from collections.abc import Sized
from typing import Any, ClassVar

from ..evaluator import MemoryOperator
from ..operators import SpecificationOperator


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, Sized) and len(value) == 0


class _Absence(MemoryOperator):
    negated: ClassVar[bool] = False

    def evaluate(self, field_value: Any, condition_value: Any = None) -> bool:
        return self.absent(field_value) is not self.negated

    def absent(self, value: Any) -> bool:
        return value is None


class IsNullOperator(_Absence):
    operator = SpecificationOperator.IS_NULL


class IsNotNullOperator(_Absence):
    operator = SpecificationOperator.IS_NOT_NULL
    negated = True


class IsEmptyOperator(_Absence):
    operator = SpecificationOperator.IS_EMPTY

    def absent(self, value: Any) -> bool:
        return is_empty(value)


class IsNotEmptyOperator(IsEmptyOperator):
    operator = SpecificationOperator.IS_NOT_EMPTY
    negated = True


OPERATORS: tuple[type[MemoryOperator], ...] = (
    IsNullOperator,
    IsNotNullOperator,
    IsEmptyOperator,
    IsNotEmptyOperator,
)
