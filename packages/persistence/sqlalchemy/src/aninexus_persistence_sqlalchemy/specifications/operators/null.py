"""
Null and empty checks on columns.

A column is empty when it is NULL or holds the empty string, as in the
in-memory evaluator.  Emptiness of a relationship is not handled here:
the compiler turns it into an ``EXISTS`` clause.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, cast

from sqlalchemy import or_

from aninexus_specifications.operators import SpecificationOperator

from ..strategy import SQLAlchemyOperator

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement


class _AbsenceOperator(SQLAlchemyOperator):
    negated: ClassVar[bool] = False

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        clause = self.absent(column)
        return cast("ColumnElement[bool]", ~clause if self.negated else clause)

    def absent(self, column: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.is_(None))


class IsNullOperator(_AbsenceOperator):
    operator = SpecificationOperator.IS_NULL


class IsNotNullOperator(_AbsenceOperator):
    operator = SpecificationOperator.IS_NOT_NULL
    negated = True


class IsEmptyOperator(_AbsenceOperator):
    operator = SpecificationOperator.IS_EMPTY

    def absent(self, column: Any) -> ColumnElement[bool]:
        return or_(column.is_(None), column == "")


class IsNotEmptyOperator(IsEmptyOperator):
    operator = SpecificationOperator.IS_NOT_EMPTY
    negated = True


OPERATORS: tuple[type[SQLAlchemyOperator], ...] = (
    IsNullOperator,
    IsNotNullOperator,
    IsEmptyOperator,
    IsNotEmptyOperator,
)
