"""
String operators for SQLAlchemy.

``contains`` / ``startswith`` / ``endswith`` and their case-insensitive
forms treat the value literally: ``%`` and ``_`` are escaped, matching
the in-memory evaluator.  ``like`` / ``ilike`` pass patterns through.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, cast

from aninexus_specifications.operators import SpecificationOperator

from ..strategy import SQLAlchemyOperator

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement


class _ColumnMethodOperator(SQLAlchemyOperator):
    """Calls ``getattr(column, method)(value, **options)``."""

    method: ClassVar[str]
    options: ClassVar[dict[str, Any]] = {}

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        clause = getattr(column, self.method)(str(value), **self.options)
        return cast("ColumnElement[bool]", clause)


class _LiteralOperator(_ColumnMethodOperator):
    options = {"autoescape": True}


class ContainsOperator(_LiteralOperator):
    operator = SpecificationOperator.CONTAINS
    method = "contains"


class IContainsOperator(_LiteralOperator):
    operator = SpecificationOperator.ICONTAINS
    method = "icontains"


class StartsWithOperator(_LiteralOperator):
    operator = SpecificationOperator.STARTSWITH
    method = "startswith"


class IStartsWithOperator(_LiteralOperator):
    operator = SpecificationOperator.ISTARTSWITH
    method = "istartswith"


class EndsWithOperator(_LiteralOperator):
    operator = SpecificationOperator.ENDSWITH
    method = "endswith"


class IEndsWithOperator(_LiteralOperator):
    operator = SpecificationOperator.IENDSWITH
    method = "iendswith"


class LikeOperator(_ColumnMethodOperator):
    operator = SpecificationOperator.LIKE
    method = "like"


class NotLikeOperator(_ColumnMethodOperator):
    operator = SpecificationOperator.NOT_LIKE
    method = "not_like"


class ILikeOperator(_ColumnMethodOperator):
    operator = SpecificationOperator.ILIKE
    method = "ilike"


class RegexOperator(_ColumnMethodOperator):
    """Backend regex match; SQLite needs a REGEXP function registered."""

    operator = SpecificationOperator.REGEX
    method = "regexp_match"


class IRegexOperator(RegexOperator):
    operator = SpecificationOperator.IREGEX
    options = {"flags": "i"}


OPERATORS: tuple[type[SQLAlchemyOperator], ...] = (
    LikeOperator,
    NotLikeOperator,
    ILikeOperator,
    ContainsOperator,
    IContainsOperator,
    StartsWithOperator,
    IStartsWithOperator,
    EndsWithOperator,
    IEndsWithOperator,
    RegexOperator,
    IRegexOperator,
)
