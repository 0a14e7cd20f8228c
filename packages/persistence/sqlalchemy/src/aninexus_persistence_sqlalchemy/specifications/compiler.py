"""
Predicate to SQL ``WHERE`` clause.

:func:`build_sqla_filter` walks the ``{"op", "attr", "val"}`` tree that
``Predicate.to_dict()`` produces.  Junctions and constants map onto
``and_`` / ``or_`` / ``not_`` / ``true()`` / ``false()``; every leaf is
handed to a :class:`~.strategy.SQLAlchemyOperatorRegistry`.

A dotted ``attr`` walks relationships the way the in-memory evaluator
fans out: ``teams.name`` on ``User`` becomes
``User.teams.any(Team.name == ...)`` for a collection and ``.has(...)``
for a scalar relationship.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import ColumnElement, and_, false, not_, or_, true
from sqlalchemy import inspect as sa_inspect

from aninexus_specifications.exceptions import (
    FieldNotFoundError,
    RelationshipTraversalError,
)
from aninexus_specifications.operators import UNARY_OPERATORS, SpecificationOperator

from .operators import DEFAULT_SQLA_REGISTRY

if TYPE_CHECKING:
    from sqlalchemy.orm import Mapper, RelationshipProperty

    from aninexus_specifications.ast import Predicate

    from .strategy import SQLAlchemyOperatorRegistry

_JUNCTIONS = {
    SpecificationOperator.AND: and_,
    SpecificationOperator.OR: or_,
}


def build_sqla_filter(
    model: type[Any],
    data: dict[str, Any],
    *,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> ColumnElement[bool]:
    """
    Compile a serialised predicate against the mapped class *model*.

    *registry* replaces ``DEFAULT_SQLA_REGISTRY`` for leaf operators.

    Raises:
        FieldNotFoundError: If a member is not mapped on its model.
        RelationshipTraversalError: If a dotted path steps through a
            column instead of a relationship.
        ValueError: If a leaf operator has no translation in *registry*.
    """
    return _compile(model, data, registry or DEFAULT_SQLA_REGISTRY)


def compile_predicate(
    model: type[Any],
    predicate: Predicate[Any],
    *,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> ColumnElement[bool]:
    """Compile a :class:`~aninexus_specifications.ast.Predicate` for *model*."""
    return build_sqla_filter(model, predicate.to_dict(), registry=registry)


def _compile(
    model: type[Any],
    data: dict[str, Any],
    registry: SQLAlchemyOperatorRegistry,
) -> ColumnElement[bool]:
    op = SpecificationOperator(data.get("op", "").lower())
    if op is SpecificationOperator.TRUE:
        return true()
    if op is SpecificationOperator.FALSE:
        return false()

    if op in _JUNCTIONS or op is SpecificationOperator.NOT:
        parts = [_compile(model, child, registry) for child in data["conditions"]]
        if op is SpecificationOperator.NOT:
            return not_(parts[0] if len(parts) == 1 else and_(*parts))
        return cast("ColumnElement[bool]", _JUNCTIONS[op](*parts))

    return _leaf(model, op, data["attr"], data.get("val"), registry, data["attr"])


def _leaf(
    model: type[Any],
    op: SpecificationOperator,
    attr: str,
    value: Any,
    registry: SQLAlchemyOperatorRegistry,
    full_path: str,
) -> ColumnElement[bool]:
    mapper = _mapper(model)

    head, dot, rest = attr.partition(".")
    if dot:
        relationship = _relationship(mapper, head, full_path)
        inner = _leaf(
            relationship.mapper.class_, op, rest, value, registry, full_path
        )
        hop = getattr(model, head)
        if relationship.uselist:
            return cast("ColumnElement[bool]", hop.any(inner))
        return cast("ColumnElement[bool]", hop.has(inner))

    if attr in mapper.relationships and op in UNARY_OPERATORS:
        return _relationship_presence(model, mapper, attr, op)

    if attr not in mapper.all_orm_descriptors:
        raise FieldNotFoundError(
            attr, model.__name__, _public_fields(mapper), full_path=full_path
        )
    return registry.apply(op, getattr(model, attr), value)


def _relationship_presence(
    model: type[Any],
    mapper: Mapper[Any],
    attr: str,
    op: SpecificationOperator,
) -> ColumnElement[bool]:
    """Null and empty checks on a relationship become ``EXISTS`` tests."""
    related = getattr(model, attr)
    if mapper.relationships[attr].uselist:
        # collections are never NULL, only empty
        if op is SpecificationOperator.IS_NULL:
            return false()
        if op is SpecificationOperator.IS_NOT_NULL:
            return true()
        exists = related.any()
    else:
        exists = related.has()
    if op in (SpecificationOperator.IS_NULL, SpecificationOperator.IS_EMPTY):
        return cast("ColumnElement[bool]", ~exists)
    return cast("ColumnElement[bool]", exists)


def _mapper(model: type[Any]) -> Mapper[Any]:
    return cast("Mapper[Any]", sa_inspect(model))


def _relationship(
    mapper: Mapper[Any], name: str, full_path: str
) -> RelationshipProperty[Any]:
    if name in mapper.relationships:
        return mapper.relationships[name]
    model_name = mapper.class_.__name__
    if name in mapper.all_orm_descriptors:
        raise RelationshipTraversalError(name, model_name, full_path=full_path)
    raise FieldNotFoundError(
        name, model_name, _public_fields(mapper), full_path=full_path
    )


def _public_fields(mapper: Mapper[Any]) -> list[str]:
    return [key for key in mapper.all_orm_descriptors.keys() if key[:1] != "_"]
