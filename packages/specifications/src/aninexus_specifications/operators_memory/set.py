"""Membership and ranges: in, not_in, between, not_between."""

from __future__ import annotations

from typing import Any, ClassVar

from ..evaluator import MemoryOperator
from ..operators import SpecificationOperator


class _Membership(MemoryOperator):
    """A ``None`` field is never in, nor outside, any collection."""

    negated: ClassVar[bool] = False

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return (field_value in condition_value) is not self.negated


class _Range(MemoryOperator):
    """Inclusive on both ends; the value is a ``(low, high)`` pair."""

    negated: ClassVar[bool] = False

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        low, high = condition_value
        return bool(low <= field_value <= high) is not self.negated


class InOperator(_Membership):
    operator = SpecificationOperator.IN


class NotInOperator(_Membership):
    operator = SpecificationOperator.NOT_IN
    negated = True


class BetweenOperator(_Range):
    operator = SpecificationOperator.BETWEEN


class NotBetweenOperator(_Range):
    operator = SpecificationOperator.NOT_BETWEEN
    negated = True


OPERATORS: tuple[type[MemoryOperator], ...] = (
    InOperator,
    NotInOperator,
    BetweenOperator,
    NotBetweenOperator,
)
