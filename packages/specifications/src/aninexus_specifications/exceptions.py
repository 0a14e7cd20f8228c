"""
Errors raised while building, serialising and evaluating specifications.

Every error derives from :class:`SpecificationError` and renders itself
for API responses through ``to_dict()``: an ``error`` code followed by
whatever :meth:`~SpecificationError.details` reports.

The two families callers usually catch:

- :class:`ConstructionError` while a specification is being declared
  (bad include accessors, unknown fields, mutation after construction).
- :class:`EvaluationError` when a predicate cannot be answered in memory.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any, ClassVar

_FIELD_PREVIEW = 15


def suggest(word: str, candidates: list[str], limit: int = 3) -> list[str]:
    """Close spellings of *word* among *candidates*, best first."""
    return get_close_matches(word, candidates, n=limit, cutoff=0.6)


class SpecificationError(Exception):
    """Root of the hierarchy; ``code`` defaults to the class name."""

    code: ClassVar[str | None] = None

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code or type(self).__name__, **self.details()}

    def details(self) -> dict[str, Any]:
        return {"message": str(self)}


# -- construction -------------------------------------------------------------


class ConstructionError(SpecificationError):
    code = "CONSTRUCTION_ERROR"


class InvalidIncludeAccessorError(ConstructionError):
    """The include accessor does more than read one member."""

    code = "INVALID_INCLUDE_ACCESSOR"

    def __init__(self, accessor: Any, reason: str) -> None:
        self.accessor = accessor
        self.reason = reason
        super().__init__(
            f"{accessor!r} is not a single member access "
            f"such as `lambda x: x.teams`: {reason}"
        )

    def details(self) -> dict[str, Any]:
        return {"accessor": repr(self.accessor), "reason": self.reason}


class ImmutableSpecificationError(ConstructionError, AttributeError):
    """Assignment to a specification after its constructor returned."""

    def __init__(self, spec_name: str, attribute: str) -> None:
        self.spec_name = spec_name
        self.attribute = attribute
        super().__init__(
            f"Cannot set '{attribute}': '{spec_name}' is read-only after construction"
        )


class FieldNotFoundError(ConstructionError):
    """
    A member name the model does not declare.

    The message lists close spellings first, then (a preview of) every
    field the model has::

        'User' has no field 'tems'. Did you mean: teams?
        Available fields: ban_reasons, email, id, teams, username
    """

    code = "FIELD_NOT_FOUND"

    def __init__(
        self,
        invalid_field: str,
        model_name: str,
        available_fields: list[str],
        full_path: str | None = None,
    ) -> None:
        self.invalid_field = invalid_field
        self.model_name = model_name
        self.available_fields = sorted(available_fields)
        self.full_path = full_path or invalid_field
        self.suggestions = suggest(invalid_field, self.available_fields, limit=5)

        message = f"'{model_name}' has no field '{invalid_field}'."
        if self.full_path != invalid_field:
            message += f" (path '{self.full_path}')"
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        shown = self.available_fields[:_FIELD_PREVIEW]
        listing = ", ".join(shown)
        if len(self.available_fields) > len(shown):
            listing += ", ..."
        super().__init__(f"{message}\nAvailable fields: {listing}")

    def details(self) -> dict[str, Any]:
        return {
            "field": self.invalid_field,
            "model": self.model_name,
            "full_path": self.full_path,
            "suggestions": self.suggestions,
            "available_fields": self.available_fields,
        }


# -- predicates ---------------------------------------------------------------


class PredicateError(SpecificationError):
    """The lambda builds something a predicate tree cannot hold."""


class EvaluationError(SpecificationError):
    """
    In-memory evaluation failed.

    Nothing falls back to a default boolean; callers that can ask the
    backing source instead should catch this.
    """

    code = "EVALUATION_ERROR"

    def __init__(self, message: str, predicate: str | None = None) -> None:
        self.predicate = predicate
        super().__init__(message)

    def details(self) -> dict[str, Any]:
        return {"message": str(self), "predicate": self.predicate}


class OperatorNotSupportedError(EvaluationError):
    """Only a backing store implements this operator."""

    code = "OPERATOR_NOT_SUPPORTED"

    def __init__(self, operator: str) -> None:
        self.operator = operator
        super().__init__(
            f"'{operator}' has no in-memory implementation; "
            f"run the specification against its backing source"
        )

    def details(self) -> dict[str, Any]:
        return {"operator": self.operator}


# -- serialised predicates ----------------------------------------------------


class ValidationError(SpecificationError):
    """A serialised predicate is malformed at ``path``."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)

    def details(self) -> dict[str, Any]:
        return {"message": self.message, "path": self.path}


class OperatorNotFoundError(ValidationError):
    code = "OPERATOR_NOT_FOUND"

    def __init__(self, operator: str, valid_operators: list[str]) -> None:
        self.operator = operator
        self.valid_operators = sorted(valid_operators)
        self.suggestions = suggest(operator, self.valid_operators)

        message = f"Unknown operator '{operator}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def details(self) -> dict[str, Any]:
        return {
            "operator": self.operator,
            "suggestions": self.suggestions,
            "valid_operators": self.valid_operators,
        }


class RelationshipTraversalError(ValidationError):
    """A dotted path continues past a plain column, e.g. ``username.length``."""

    code = "RELATIONSHIP_TRAVERSAL_ERROR"

    def __init__(
        self,
        field: str,
        model_name: str,
        full_path: str | None = None,
    ) -> None:
        self.field = field
        self.model_name = model_name
        self.full_path = full_path or field
        super().__init__(
            f"'{model_name}.{field}' is a column, not a relationship; "
            f"'{self.full_path}' cannot go through it",
            path=self.full_path,
        )

    def details(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "model": self.model_name,
            "full_path": self.full_path,
        }
