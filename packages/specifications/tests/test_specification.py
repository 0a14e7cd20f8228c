"""Tests for QuerySpecification construction, sealing and evaluation."""

from __future__ import annotations

import pytest
from pydantic import BaseModel

from aninexus_specifications import (
    ConstructionError,
    ImmutableSpecificationError,
    InMemoryQuerySource,
    Predicate,
    QuerySpecification,
)
from aninexus_specifications.exceptions import OperatorNotSupportedError
from aninexus_specifications.operators import SpecificationOperator


class Team(BaseModel):
    name: str


class Membership(BaseModel):
    team: Team


class BanReason(BaseModel):
    reason: str


class User(BaseModel):
    username: str
    age: int = 30
    is_active: bool = True
    teams: list[Membership] = []
    ban_reasons: list[BanReason] = []


class UserIdentitySpecification(QuerySpecification[User]):
    def __init__(self, username: str, *, include_ban_reasons: bool = False) -> None:
        super().__init__(User, lambda u: u.username == username)
        self.add_include(lambda u: u.teams).then_include(lambda m: m.team)
        if include_ban_reasons:
            self.add_include(lambda u: u.ban_reasons)


class DeletedUsersSpecification(QuerySpecification[User]):
    def __init__(self) -> None:
        super().__init__(User, lambda u: u.is_active == False)  # noqa: E712
        self.bypass_default_filters = True


@pytest.fixture
def alice() -> User:
    return User(username="alice", age=34)


# ═══════════════════════════════════════════════════════════════════════════
# Construction
# ═══════════════════════════════════════════════════════════════════════════


class TestConstruction:
    def test_direct_construction(self, alice: User) -> None:
        spec = QuerySpecification(User, lambda u: u.age >= 18)
        assert spec.model is User
        assert spec.includes == ()
        assert spec.include_strings == ()
        assert spec.bypass_default_filters is False
        assert spec.split_execution is False
        assert spec.satisfies(alice) is True

    def test_generic_alias_construction(self) -> None:
        spec = QuerySpecification[User](User, lambda u: u.age >= 18)
        assert spec.model is User

    def test_accepts_prebuilt_predicate(self) -> None:
        predicate = Predicate.of(User, lambda u: u.age > 1)
        spec = QuerySpecification(User, predicate)
        assert spec.criteria is predicate

    def test_none_criteria_is_rejected(self) -> None:
        """Match-all must be spelled out with Predicate.always()."""
        with pytest.raises(ConstructionError, match="requires criteria"):
            QuerySpecification(User, None)

    def test_explicit_match_all(self, alice: User) -> None:
        spec = QuerySpecification(User, Predicate.always(User))
        assert spec.satisfies(alice) is True
        assert spec.to_dict() == {"op": "true"}

    def test_subclass_declares_includes_and_flags(self) -> None:
        spec = DeletedUsersSpecification()
        assert spec.bypass_default_filters is True
        assert spec.split_execution is False

    def test_identity_specification_without_ban_reasons(self) -> None:
        spec = UserIdentitySpecification("alice")
        assert [d.name for d in spec.includes] == ["teams"]
        assert spec.includes[0].property_type is Membership
        assert spec.includes[0].is_collection is True
        assert spec.include_strings == ("teams.team",)

    def test_identity_specification_with_ban_reasons(self) -> None:
        spec = UserIdentitySpecification("alice", include_ban_reasons=True)
        assert [d.name for d in spec.includes] == ["teams", "ban_reasons"]
        assert spec.includes[1].property_type is BanReason

    def test_repr_shows_predicate(self) -> None:
        spec = UserIdentitySpecification("alice")
        assert repr(spec) == "UserIdentitySpecification(u.username == 'alice')"


# ═══════════════════════════════════════════════════════════════════════════
# Immutability
# ═══════════════════════════════════════════════════════════════════════════


class TestImmutability:
    def test_flags_cannot_change_after_construction(self) -> None:
        spec = UserIdentitySpecification("alice")
        with pytest.raises(ImmutableSpecificationError):
            spec.bypass_default_filters = True
        with pytest.raises(ImmutableSpecificationError):
            spec.split_execution = True
        assert spec.bypass_default_filters is False

    def test_attributes_cannot_be_set_or_deleted(self) -> None:
        spec = UserIdentitySpecification("alice")
        with pytest.raises(ImmutableSpecificationError):
            spec.extra = 1  # type: ignore[attr-defined]
        with pytest.raises(ImmutableSpecificationError):
            del spec._criteria

    def test_immutable_error_is_an_attribute_error(self) -> None:
        spec = QuerySpecification(User, True)
        with pytest.raises(AttributeError):
            spec.split_execution = True

    def test_includes_cannot_be_added_after_construction(self) -> None:
        spec = UserIdentitySpecification("alice")
        with pytest.raises(ConstructionError):
            spec.add_include(lambda u: u.ban_reasons)
        with pytest.raises(ConstructionError):
            spec.add_include_path("ban_reasons")
        assert [d.name for d in spec.includes] == ["teams"]

    def test_escaped_builder_cannot_append_after_construction(self) -> None:
        escaped = []

        class LeakySpecification(QuerySpecification[User]):
            def __init__(self) -> None:
                super().__init__(User, True)
                escaped.append(self.add_include(lambda u: u.teams))

        spec = LeakySpecification()
        with pytest.raises(ConstructionError):
            escaped[0].then_include(lambda m: m.team)
        assert spec.include_strings == ()

    def test_include_tuples_are_immutable(self) -> None:
        spec = UserIdentitySpecification("alice")
        assert isinstance(spec.includes, tuple)
        assert isinstance(spec.include_strings, tuple)


# ═══════════════════════════════════════════════════════════════════════════
# Application and evaluation
# ═══════════════════════════════════════════════════════════════════════════


class TestApplication:
    async def test_apply_to_does_not_mutate_the_source(self, alice: User) -> None:
        source = InMemoryQuerySource([alice, User(username="bob")])
        spec = UserIdentitySpecification("alice", include_ban_reasons=True)

        applied = spec.apply_to(source)

        assert applied is not source
        assert source.filters == ()
        assert source.includes == ()
        assert [d.name for d in applied.includes] == ["teams", "ban_reasons"]
        assert applied.include_paths == ("teams.team",)
        assert await applied.to_list() == [alice]
        assert len(await source.to_list()) == 2

    async def test_apply_to_ignores_default_filters_when_bypassing(self) -> None:
        archived = User(username="old", is_active=False)
        source = InMemoryQuerySource(
            [archived],
            default_filters=[Predicate.of(User, lambda u: u.is_active)],
        )
        assert await QuerySpecification(User, True).apply_to(source).to_list() == []

        applied = DeletedUsersSpecification().apply_to(source)
        assert applied.default_filters_ignored is True
        assert await applied.to_list() == [archived]

    def test_satisfies_agrees_with_apply_to(self, alice: User) -> None:
        spec = UserIdentitySpecification("alice")
        assert spec.satisfies(alice) is True
        assert spec.satisfies(User(username="bob")) is False

    def test_satisfies_memoizes_compiled_predicate(self, alice: User) -> None:
        spec = UserIdentitySpecification("alice")
        spec.satisfies(alice)
        first = spec.__dict__["_compiled"]
        spec.satisfies(alice)
        assert spec.__dict__["_compiled"] is first

    def test_satisfies_with_custom_registry(self, alice: User, registry) -> None:
        registry.unregister(SpecificationOperator.EQ)
        spec = UserIdentitySpecification("alice")
        with pytest.raises(OperatorNotSupportedError):
            spec.satisfies(alice, registry=registry)
        assert spec.satisfies(alice) is True

    def test_to_dict_is_the_predicate_dict(self) -> None:
        spec = UserIdentitySpecification("alice")
        assert spec.to_dict() == {"op": "=", "attr": "username", "val": "alice"}
