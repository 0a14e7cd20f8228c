import pytest
from pytest_archon import archrule


def test_specifications_are_persistence_agnostic() -> None:
    """
    The specifications package must not know about any backing store.
    Store translation lives in the persistence adapters.
    """
    (
        archrule("specifications_independence")
        .match("aninexus_specifications*")
        .should_not_import("aninexus_persistence_*")
        .should_not_import("sqlalchemy*")
        .check("aninexus_specifications")
    )


@pytest.mark.parametrize("module", ["ast", "base", "builder", "execution"])
def test_specification_core_does_not_depend_on_adapters(module: str) -> None:
    """
    The predicate, builder and specification modules should not depend on
    concrete query sources.
    """
    (
        archrule(f"{module}_not_adapters")
        .match(f"aninexus_specifications.{module}")
        .should_not_import("aninexus_specifications.adapters*")
        .check("aninexus_specifications")
    )


def test_operators_layering() -> None:
    """
    In-memory operators are leaves: they must not import the predicate
    tree or specifications built on top of them.
    """
    (
        archrule("operators_layering")
        .match("aninexus_specifications.operators_memory*")
        .should_not_import("aninexus_specifications.ast")
        .should_not_import("aninexus_specifications.base")
        .should_not_import("aninexus_specifications.builder")
        .check("aninexus_specifications")
    )


def test_sqlalchemy_operators_independent_of_source() -> None:
    """
    SQL operator strategies compile single clauses and must not depend on
    the query source that executes them.
    """
    (
        archrule("sqlalchemy_operators_layering")
        .match("aninexus_persistence_sqlalchemy.specifications*")
        .should_not_import("aninexus_persistence_sqlalchemy.source")
        .check("aninexus_persistence_sqlalchemy")
    )
