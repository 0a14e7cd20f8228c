"""Tests for the in-memory query source."""

from __future__ import annotations

import pytest
from pydantic import BaseModel

from aninexus_specifications import (
    EvaluationError,
    IncludeDirective,
    InMemoryQuerySource,
    Predicate,
    QueryableSource,
)


class Article(BaseModel):
    title: str
    views: int = 0
    is_deleted: bool = False


ARTICLES = [
    Article(title="alpha", views=10),
    Article(title="beta", views=250),
    Article(title="gamma", views=900, is_deleted=True),
]

NOT_DELETED = Predicate.of(Article, lambda a: a.is_deleted == False)  # noqa: E712


@pytest.fixture
def source() -> InMemoryQuerySource[Article]:
    return InMemoryQuerySource(ARTICLES, default_filters=[NOT_DELETED])


def test_satisfies_the_queryable_source_protocol(source):
    assert isinstance(source, QueryableSource)


async def test_default_filters_apply(source):
    assert [a.title for a in await source.to_list()] == ["alpha", "beta"]


async def test_ignore_default_filters(source):
    everything = await source.ignore_default_filters().to_list()
    assert len(everything) == 3
    assert source.default_filters_ignored is False


async def test_where_clauses_accumulate(source):
    popular = source.where(Predicate.of(Article, lambda a: a.views > 5)).where(
        Predicate.of(Article, lambda a: a.title.endswith("a"))
    )
    assert [a.title for a in await popular.to_list()] == ["alpha", "beta"]
    assert len(popular.filters) == 2
    assert source.filters == ()


async def test_includes_are_recorded_only(source):
    loaded = source.include(IncludeDirective("comments")).include_path(
        "comments.author"
    )
    assert loaded.includes == (IncludeDirective("comments"),)
    assert loaded.include_paths == ("comments.author",)
    assert len(await loaded.to_list()) == 2


async def test_items_keep_their_order():
    source = InMemoryQuerySource(reversed(ARTICLES))
    assert [a.title for a in await source.to_list()] == ["gamma", "beta", "alpha"]
    assert len(source.items) == 3


async def test_evaluation_errors_propagate(source):
    broken = source.where(Predicate.of(Article, lambda a: a.author == "x"))
    with pytest.raises(EvaluationError):
        await broken.to_list()
