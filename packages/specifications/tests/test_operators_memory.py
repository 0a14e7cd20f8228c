"""Tests for in-memory operators and the operator registry."""

from __future__ import annotations

import pytest

from aninexus_specifications.evaluator import MemoryOperator, MemoryOperatorRegistry
from aninexus_specifications.exceptions import (
    EvaluationError,
    OperatorNotSupportedError,
)
from aninexus_specifications.operators import SpecificationOperator
from aninexus_specifications.operators_memory import (
    DEFAULT_MEMORY_REGISTRY,
    build_default_registry,
)
from aninexus_specifications.operators_memory.null import (
    IsEmptyOperator,
    IsNotEmptyOperator,
    IsNotNullOperator,
    IsNullOperator,
)
from aninexus_specifications.operators_memory.set import (
    BetweenOperator,
    InOperator,
    NotBetweenOperator,
    NotInOperator,
)
from aninexus_specifications.operators_memory.standard import (
    EqualOperator,
    GreaterEqualOperator,
    GreaterThanOperator,
    LessEqualOperator,
    LessThanOperator,
    NotEqualOperator,
)
from aninexus_specifications.operators_memory.string import (
    ContainsOperator,
    EndsWithOperator,
    IContainsOperator,
    IEndsWithOperator,
    ILikeOperator,
    IRegexOperator,
    IStartsWithOperator,
    LikeOperator,
    NotLikeOperator,
    RegexOperator,
    StartsWithOperator,
    _TextOperator,
)


class TestStandardOperators:
    """Equality and ordering, with SQL-style None handling."""

    def test_equal_operator(self) -> None:
        op = EqualOperator()
        assert op.evaluate(42, 42) is True
        assert op.evaluate("test", "TEST") is False
        assert op.evaluate(None, None) is True

    def test_not_equal_operator(self) -> None:
        op = NotEqualOperator()
        assert op.evaluate(42, 43) is True
        assert op.evaluate(42, 42) is False

    def test_not_equal_never_matches_a_none_field(self) -> None:
        assert NotEqualOperator().evaluate(None, "active") is False
        assert EqualOperator().evaluate(None, "active") is False

    def test_comparing_against_none_is_a_null_check(self) -> None:
        assert NotEqualOperator().evaluate("active", None) is True
        assert NotEqualOperator().evaluate(None, None) is False
        assert EqualOperator().evaluate("active", None) is False

    def test_ordering_operators(self) -> None:
        assert GreaterThanOperator().evaluate(100, 50) is True
        assert GreaterThanOperator().evaluate(50, 50) is False
        assert LessThanOperator().evaluate(50, 100) is True
        assert GreaterEqualOperator().evaluate(50, 50) is True
        assert LessEqualOperator().evaluate(100, 50) is False

    def test_ordering_never_matches_none(self) -> None:
        """None behaves like SQL NULL: no ordering comparison holds."""
        for op in (
            GreaterThanOperator(),
            LessThanOperator(),
            GreaterEqualOperator(),
            LessEqualOperator(),
        ):
            assert op.evaluate(None, 50) is False
            assert op.evaluate(50, None) is False

    def test_ordering_incomparable_types_raise_type_error(self) -> None:
        with pytest.raises(TypeError):
            GreaterThanOperator().evaluate("abc", 5)

    def test_operator_names(self) -> None:
        assert EqualOperator().name == SpecificationOperator.EQ
        assert NotEqualOperator().name == SpecificationOperator.NE
        assert GreaterThanOperator().name == SpecificationOperator.GT
        assert LessThanOperator().name == SpecificationOperator.LT
        assert GreaterEqualOperator().name == SpecificationOperator.GE
        assert LessEqualOperator().name == SpecificationOperator.LE


class TestSetOperators:
    def test_in_operator(self) -> None:
        op = InOperator()
        assert op.evaluate("admin", ("admin", "owner")) is True
        assert op.evaluate("guest", ("admin", "owner")) is False
        assert op.evaluate("admin", ()) is False

    def test_not_in_operator_excludes_none(self) -> None:
        op = NotInOperator()
        assert op.evaluate("guest", ("admin",)) is True
        assert op.evaluate("admin", ("admin",)) is False
        assert op.evaluate(None, ("admin",)) is False

    def test_between_is_inclusive(self) -> None:
        op = BetweenOperator()
        assert op.evaluate(18, (18, 65)) is True
        assert op.evaluate(65, (18, 65)) is True
        assert op.evaluate(17, (18, 65)) is False
        assert op.evaluate(None, (18, 65)) is False

    def test_not_between(self) -> None:
        op = NotBetweenOperator()
        assert op.evaluate(17, (18, 65)) is True
        assert op.evaluate(30, (18, 65)) is False
        assert op.evaluate(None, (18, 65)) is False


class TestStringOperators:
    def test_like_operator_with_wildcards(self) -> None:
        op = LikeOperator()
        assert op.evaluate("hello world", "hello%") is True
        assert op.evaluate("hello world", "%world") is True
        assert op.evaluate("hello world", "hello_world") is True
        assert op.evaluate("hello world", "goodbye%") is False

    def test_like_escapes_regex_metacharacters(self) -> None:
        """Only % and _ are wildcards; everything else is literal."""
        op = LikeOperator()
        assert op.evaluate("a.b", "a.b") is True
        assert op.evaluate("axb", "a.b") is False
        assert op.evaluate("(x)+", "(x)+") is True

    def test_like_operator_with_none(self) -> None:
        assert LikeOperator().evaluate(None, "hello%") is False
        assert NotLikeOperator().evaluate(None, "hello%") is False

    def test_not_like_operator(self) -> None:
        op = NotLikeOperator()
        assert op.evaluate("hello world", "goodbye%") is True
        assert op.evaluate("hello world", "hello%") is False

    def test_ilike_operator_case_insensitive(self) -> None:
        op = ILikeOperator()
        assert op.evaluate("Hello World", "hello%") is True
        assert op.evaluate("HELLO WORLD", "%world") is True

    def test_like_spans_newlines(self) -> None:
        assert LikeOperator().evaluate("first\nsecond", "first%second") is True

    def test_text_operators_must_implement_test(self) -> None:
        class Shouty(_TextOperator):
            operator = SpecificationOperator.CONTAINS

        with pytest.raises(TypeError):
            Shouty()

    def test_contains_family(self) -> None:
        assert ContainsOperator().evaluate("hello world", "llo") is True
        assert ContainsOperator().evaluate("hello world", "LLO") is False
        assert IContainsOperator().evaluate("hello world", "LLO") is True
        assert ContainsOperator().evaluate(None, "hello") is False

    def test_prefix_and_suffix(self) -> None:
        assert StartsWithOperator().evaluate("hello world", "hello") is True
        assert StartsWithOperator().evaluate("hello world", "Hello") is False
        assert IStartsWithOperator().evaluate("hello world", "HELLO") is True
        assert EndsWithOperator().evaluate("hello world", "world") is True
        assert EndsWithOperator().evaluate("hello world", "WORLD") is False
        assert IEndsWithOperator().evaluate("hello world", "WORLD") is True

    def test_regex_operators(self) -> None:
        assert RegexOperator().evaluate("hello123world", r"\d+") is True
        assert RegexOperator().evaluate("hello world", r"^goodbye") is False
        assert RegexOperator().evaluate(None, r"hello") is False
        assert IRegexOperator().evaluate("HELLO WORLD", r"hello world") is True


class TestNullOperators:
    def test_null_checks(self) -> None:
        assert IsNullOperator().evaluate(None, None) is True
        assert IsNullOperator().evaluate("", None) is False
        assert IsNotNullOperator().evaluate(0, None) is True

    def test_empty_checks(self) -> None:
        assert IsEmptyOperator().evaluate([], None) is True
        assert IsEmptyOperator().evaluate("", None) is True
        assert IsEmptyOperator().evaluate(None, None) is True
        assert IsEmptyOperator().evaluate(["x"], None) is False
        assert IsNotEmptyOperator().evaluate("x", None) is True

    def test_numbers_are_never_empty(self) -> None:
        assert IsEmptyOperator().evaluate(0, None) is False
        assert IsEmptyOperator().evaluate(False, None) is False
        assert IsNotEmptyOperator().evaluate(0, None) is True


class TestRegistry:
    def test_default_registry_has_no_full_text_search(self) -> None:
        assert not DEFAULT_MEMORY_REGISTRY.has(SpecificationOperator.FTS)
        assert not DEFAULT_MEMORY_REGISTRY.has(SpecificationOperator.FTS_PHRASE)

    def test_default_registry_covers_every_comparison_operator(self) -> None:
        store_native = {
            SpecificationOperator.FTS,
            SpecificationOperator.FTS_PHRASE,
            SpecificationOperator.AND,
            SpecificationOperator.OR,
            SpecificationOperator.NOT,
            SpecificationOperator.TRUE,
            SpecificationOperator.FALSE,
        }
        expected = set(SpecificationOperator) - store_native
        assert DEFAULT_MEMORY_REGISTRY.supported_operators == expected

    def test_require_missing_operator_raises_evaluation_error(self) -> None:
        registry = MemoryOperatorRegistry()
        with pytest.raises(OperatorNotSupportedError) as exc_info:
            registry.require(SpecificationOperator.FTS)
        assert isinstance(exc_info.value, EvaluationError)
        assert exc_info.value.to_dict() == {
            "error": "OPERATOR_NOT_SUPPORTED",
            "operator": "fts",
        }

    def test_build_default_registry_returns_independent_instances(self) -> None:
        first = build_default_registry()
        first.unregister(SpecificationOperator.EQ)
        assert not first.has(SpecificationOperator.EQ)
        assert build_default_registry().has(SpecificationOperator.EQ)
        assert DEFAULT_MEMORY_REGISTRY.has(SpecificationOperator.EQ)

    def test_copy_is_independent(self) -> None:
        registry = DEFAULT_MEMORY_REGISTRY.copy()
        registry.unregister(SpecificationOperator.LIKE)
        assert SpecificationOperator.LIKE not in registry
        assert SpecificationOperator.LIKE in DEFAULT_MEMORY_REGISTRY
        assert len(registry) == len(DEFAULT_MEMORY_REGISTRY) - 1

    def test_custom_operator_can_be_registered(self, registry) -> None:
        class WordMatchOperator(MemoryOperator):
            operator = SpecificationOperator.FTS

            def evaluate(self, field_value, condition_value) -> bool:
                return condition_value.lower() in str(field_value).lower().split()

        registry.register(WordMatchOperator())
        assert registry.evaluate(SpecificationOperator.FTS, "Cowboy Bebop", "bebop")
