"""
Text matching: like, contains, startswith, endswith and regex.

Each has a case-insensitive twin that differs only in ``ignore_case``.
Both sides are compared as ``str``; a ``None`` field never matches.
"""

from __future__ import annotations

import re
from abc import abstractmethod
from functools import lru_cache
from typing import Any, ClassVar

from ..evaluator import MemoryOperator
from ..operators import SpecificationOperator

_LIKE_WILDCARDS = {"%": ".*", "_": "."}


@lru_cache(maxsize=256)
def like_pattern(pattern: str, flags: int = 0) -> re.Pattern[str]:
    """Translate a LIKE pattern into a compiled regex matching the whole text."""
    body = "".join(_LIKE_WILDCARDS.get(char) or re.escape(char) for char in pattern)
    return re.compile(body, flags | re.DOTALL)


class _TextOperator(MemoryOperator):
    ignore_case: ClassVar[bool] = False

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return self.test(str(field_value), str(condition_value))

    @property
    def flags(self) -> int:
        return re.IGNORECASE if self.ignore_case else 0

    def fold(self, text: str) -> str:
        return text.casefold() if self.ignore_case else text

    @abstractmethod
    def test(self, text: str, pattern: str) -> bool: ...


class LikeOperator(_TextOperator):
    operator = SpecificationOperator.LIKE

    def test(self, text: str, pattern: str) -> bool:
        return like_pattern(pattern, self.flags).fullmatch(text) is not None


class ILikeOperator(LikeOperator):
    operator = SpecificationOperator.ILIKE
    ignore_case = True


class NotLikeOperator(LikeOperator):
    operator = SpecificationOperator.NOT_LIKE

    def test(self, text: str, pattern: str) -> bool:
        return not super().test(text, pattern)


class ContainsOperator(_TextOperator):
    operator = SpecificationOperator.CONTAINS

    def test(self, text: str, pattern: str) -> bool:
        return self.fold(pattern) in self.fold(text)


class IContainsOperator(ContainsOperator):
    operator = SpecificationOperator.ICONTAINS
    ignore_case = True


class StartsWithOperator(_TextOperator):
    operator = SpecificationOperator.STARTSWITH

    def test(self, text: str, pattern: str) -> bool:
        return self.fold(text).startswith(self.fold(pattern))


class IStartsWithOperator(StartsWithOperator):
    operator = SpecificationOperator.ISTARTSWITH
    ignore_case = True


class EndsWithOperator(_TextOperator):
    operator = SpecificationOperator.ENDSWITH

    def test(self, text: str, pattern: str) -> bool:
        return self.fold(text).endswith(self.fold(pattern))


class IEndsWithOperator(EndsWithOperator):
    operator = SpecificationOperator.IENDSWITH
    ignore_case = True


class RegexOperator(_TextOperator):
    """Unanchored search, like PostgreSQL's ``~``."""

    operator = SpecificationOperator.REGEX

    def test(self, text: str, pattern: str) -> bool:
        return re.search(pattern, text, self.flags) is not None


class IRegexOperator(RegexOperator):
    operator = SpecificationOperator.IREGEX
    ignore_case = True


OPERATORS: tuple[type[MemoryOperator], ...] = (
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
