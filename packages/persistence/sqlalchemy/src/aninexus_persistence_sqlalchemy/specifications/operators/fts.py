"""
PostgreSQL full-text search.

``to_tsvector(column) @@ <parser>(value)`` where the parser is
``plainto_tsquery`` for word search and ``phraseto_tsquery`` for phrases.
Nothing in memory can answer these, so ``satisfies`` raises
``OperatorNotSupportedError`` for specifications that use them.
"""

from __future__ import annotations

from typing import Any, ClassVar

from sqlalchemy import ColumnElement, func

from aninexus_specifications.operators import SpecificationOperator

from ..strategy import SQLAlchemyOperator


class _TextSearchOperator(SQLAlchemyOperator):
    parser: ClassVar[str]

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        query = getattr(func, self.parser)(value)
        return func.to_tsvector(column).op("@@")(query)


class FtsOperator(_TextSearchOperator):
    operator = SpecificationOperator.FTS
    parser = "plainto_tsquery"


class FtsPhraseOperator(_TextSearchOperator):
    operator = SpecificationOperator.FTS_PHRASE
    parser = "phraseto_tsquery"


OPERATORS: tuple[type[SQLAlchemyOperator], ...] = (FtsOperator, FtsPhraseOperator)
