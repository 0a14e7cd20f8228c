"""Materialisation helpers pairing a query source with a specification."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from .base import QuerySpecification
    from .ports import QueryableSource

M = TypeVar("M")
S = TypeVar("S", bound="QueryableSource[Any]")


def with_specification(source: S, specification: QuerySpecification[Any]) -> S:
    """Return *source* with *specification* applied."""
    return specification.apply_to(source)


async def to_list(
    source: QueryableSource[M], specification: QuerySpecification[M]
) -> list[M]:
    """Apply *specification* to *source* and materialise the result."""
    return await specification.apply_to(source).to_list()


async def to_tuple(
    source: QueryableSource[M], specification: QuerySpecification[M]
) -> tuple[M, ...]:
    """Like :func:`to_list`, returning an immutable tuple."""
    return tuple(await to_list(source, specification))
