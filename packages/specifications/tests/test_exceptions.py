"""Tests for the error hierarchy and its API rendering."""

from __future__ import annotations

import pytest

from aninexus_specifications.exceptions import (
    ConstructionError,
    EvaluationError,
    FieldNotFoundError,
    ImmutableSpecificationError,
    InvalidIncludeAccessorError,
    OperatorNotFoundError,
    OperatorNotSupportedError,
    PredicateError,
    RelationshipTraversalError,
    SpecificationError,
    ValidationError,
    suggest,
)


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (ConstructionError("x"), "CONSTRUCTION_ERROR"),
        (ImmutableSpecificationError("Spec", "flag"), "CONSTRUCTION_ERROR"),
        (InvalidIncludeAccessorError("teams", "nope"), "INVALID_INCLUDE_ACCESSOR"),
        (FieldNotFoundError("a", "User", ["b"]), "FIELD_NOT_FOUND"),
        (EvaluationError("x"), "EVALUATION_ERROR"),
        (OperatorNotSupportedError("fts"), "OPERATOR_NOT_SUPPORTED"),
        (ValidationError("x"), "VALIDATION_ERROR"),
        (OperatorNotFoundError("eqq", ["="]), "OPERATOR_NOT_FOUND"),
        (RelationshipTraversalError("a", "User"), "RELATIONSHIP_TRAVERSAL_ERROR"),
        (PredicateError("x"), "PredicateError"),
    ],
)
def test_error_codes(error, code):
    assert isinstance(error, SpecificationError)
    assert error.to_dict()["error"] == code


def test_suggest_prefers_close_spellings():
    assert suggest("contians", ["contains", "icontains", "startswith"])[0] == (
        "contains"
    )
    assert suggest("zzzzz", ["=", ">", "<"]) == []


class TestFieldNotFoundError:
    def test_suggestions_in_message(self):
        err = FieldNotFoundError("usrname", "User", ["username", "email", "teams"])
        assert "usrname" in str(err)
        assert "Did you mean: username?" in str(err)
        assert err.suggestions == ["username"]

    def test_to_dict(self):
        err = FieldNotFoundError(
            invalid_field="emial",
            model_name="User",
            available_fields=["username", "email"],
            full_path="manager.emial",
        )
        assert err.to_dict() == {
            "error": "FIELD_NOT_FOUND",
            "field": "emial",
            "model": "User",
            "full_path": "manager.emial",
            "suggestions": ["email"],
            "available_fields": ["email", "username"],
        }
        assert "manager.emial" in str(err)

    def test_long_field_lists_are_truncated(self):
        fields = [f"field_{i:02d}" for i in range(20)]
        err = FieldNotFoundError("zzz", "Wide", fields)
        assert str(err).endswith("field_14, ...")
        assert len(err.available_fields) == 20


class TestConstructionErrors:
    def test_invalid_include_accessor(self):
        err = InvalidIncludeAccessorError("teams", "accessor is not callable")
        assert "lambda x: x.teams" in str(err)
        assert err.to_dict() == {
            "error": "INVALID_INCLUDE_ACCESSOR",
            "accessor": "'teams'",
            "reason": "accessor is not callable",
        }

    def test_immutable_specification_error_is_attribute_error(self):
        err = ImmutableSpecificationError("UserSpecification", "split_execution")
        assert isinstance(err, AttributeError)
        assert isinstance(err, ConstructionError)
        assert "split_execution" in str(err)
        with pytest.raises(AttributeError):
            raise err


class TestEvaluationErrors:
    def test_predicate_is_reported(self):
        err = EvaluationError("boom", predicate="u.age > 1")
        assert err.to_dict() == {
            "error": "EVALUATION_ERROR",
            "message": "boom",
            "predicate": "u.age > 1",
        }

    def test_operator_not_supported_points_at_the_source(self):
        err = OperatorNotSupportedError("fts")
        assert isinstance(err, EvaluationError)
        assert "backing source" in str(err)
        assert err.to_dict() == {"error": "OPERATOR_NOT_SUPPORTED", "operator": "fts"}


class TestValidationErrors:
    def test_path_is_optional(self):
        assert ValidationError("broken").to_dict()["path"] is None
        err = ValidationError("Missing 'attr'", path="<root>.conditions[0]")
        assert err.to_dict() == {
            "error": "VALIDATION_ERROR",
            "message": "Missing 'attr'",
            "path": "<root>.conditions[0]",
        }

    def test_operator_not_found(self):
        err = OperatorNotFoundError("contians", ["icontains", "contains", "="])
        assert "Did you mean: contains" in str(err)
        assert err.to_dict()["valid_operators"] == ["=", "contains", "icontains"]

    def test_relationship_traversal(self):
        err = RelationshipTraversalError("username", "User", "username.length")
        assert "User.username" in str(err)
        assert err.path == "username.length"
        assert err.to_dict() == {
            "error": "RELATIONSHIP_TRAVERSAL_ERROR",
            "field": "username",
            "model": "User",
            "full_path": "username.length",
        }


def test_base_to_dict():
    assert PredicateError("nope").to_dict() == {
        "error": "PredicateError",
        "message": "nope",
    }
