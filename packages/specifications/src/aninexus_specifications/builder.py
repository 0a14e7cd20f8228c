"""
Fluent include-path builder.

Include directives are declared while a specification is being
constructed::

    class UserWithTeams(QuerySpecification[User]):
        def __init__(self, username: str) -> None:
            super().__init__(User, lambda u: u.username == username)
            (
                self.add_include(lambda u: u.teams)   # typed: "teams"
                .then_include(lambda t: t.team)       # "teams.team"
                .then_include(lambda t: t.roles)      # "teams.team.roles"
            )

The first hop is a typed :class:`IncludeDirective` checked against the
model's declared fields.  Every further hop is flattened into a dotted
path string that the query source resolves when the specification is
applied.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .ast import MemberAccess, Parameter
from .exceptions import (
    ConstructionError,
    FieldNotFoundError,
    InvalidIncludeAccessorError,
    PredicateError,
)
from .introspection import declared_fields, member_type

if TYPE_CHECKING:
    from collections.abc import Callable

P = TypeVar("P")


@dataclass(frozen=True)
class IncludeDirective:
    """A typed, single-hop eager-load directive on the root model."""

    name: str
    property_type: Any = Any
    is_collection: bool = False


class IncludeAccumulator:
    """
    Directive lists owned by one specification while it is constructed.

    :meth:`freeze` turns both lists into tuples; any later append raises
    :class:`ConstructionError`, including through escaped builders.
    """

    __slots__ = ("_directives", "_paths", "_frozen")

    def __init__(self) -> None:
        self._directives: list[IncludeDirective] | tuple[IncludeDirective, ...] = []
        self._paths: list[str] | tuple[str, ...] = []
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def directives(self) -> tuple[IncludeDirective, ...]:
        return tuple(self._directives)

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(self._paths)

    def add_directive(self, directive: IncludeDirective) -> None:
        self._check_open()
        self._directives.append(directive)  # type: ignore[union-attr]

    def add_path(self, path: str) -> None:
        self._check_open()
        self._paths.append(path)  # type: ignore[union-attr]

    def extend(
        self,
        directives: tuple[IncludeDirective, ...],
        paths: tuple[str, ...],
    ) -> None:
        self._check_open()
        self._directives.extend(directives)  # type: ignore[union-attr]
        self._paths.extend(paths)  # type: ignore[union-attr]

    def freeze(self) -> None:
        self._directives = tuple(self._directives)
        self._paths = tuple(self._paths)
        self._frozen = True

    def _check_open(self) -> None:
        if self._frozen:
            raise ConstructionError(
                "Includes can only be declared while the specification "
                "is being constructed"
            )


class IncludePathBuilder(Generic[P]):
    """
    Chainable handle returned by ``add_include`` / ``then_include``.

    The builder never changes its own prefix; every call appends to the
    owning specification's accumulator and returns a builder for the
    next hop.
    """

    __slots__ = ("_accumulator", "_prefix", "_property_type")

    def __init__(
        self,
        accumulator: IncludeAccumulator,
        prefix: str,
        property_type: Any = Any,
    ) -> None:
        self._accumulator = accumulator
        self._prefix = prefix
        self._property_type = property_type

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def property_type(self) -> Any:
        return self._property_type

    def then_include(self, accessor: Callable[[P], Any]) -> IncludePathBuilder[Any]:
        """Append ``<prefix>.<member>`` and continue from that member."""
        name = resolve_member_name(accessor, self._property_type)
        path = f"{self._prefix}.{name}"
        self._accumulator.add_path(path)
        sub_type, _ = member_type(self._property_type, name)
        return IncludePathBuilder(self._accumulator, path, sub_type)

    def also_include(self, accessor: Callable[[P], Any]) -> IncludePathBuilder[P]:
        """Append ``<prefix>.<member>`` and stay at the current prefix."""
        name = resolve_member_name(accessor, self._property_type)
        self._accumulator.add_path(f"{self._prefix}.{name}")
        return self

    def __repr__(self) -> str:
        return f"IncludePathBuilder({self._prefix!r})"


def resolve_member_name(accessor: Any, model: Any) -> str:
    """
    Resolve an accessor such as ``lambda u: u.teams`` to ``"teams"``.

    The accessor is probed with a symbolic :class:`Parameter`; anything
    other than exactly one member access on it is rejected.

    Raises:
        InvalidIncludeAccessorError: If the accessor is not a single,
            plain member access.
    """
    if not callable(accessor):
        raise InvalidIncludeAccessorError(accessor, "accessor is not callable")

    parameter = Parameter(model)
    try:
        result = accessor(parameter)
    except PredicateError as exc:
        raise InvalidIncludeAccessorError(accessor, str(exc)) from exc
    except TypeError as exc:
        raise InvalidIncludeAccessorError(
            accessor, f"accessor must take exactly one argument ({exc})"
        ) from exc

    if not isinstance(result, MemberAccess) or result.root is not parameter:
        raise InvalidIncludeAccessorError(
            accessor, f"accessor returned {type(result).__name__}, not a member"
        )
    if len(result.path) != 1:
        raise InvalidIncludeAccessorError(
            accessor,
            f"'{result!r}' spans {len(result.path)} members; "
            f"chain them with then_include()",
        )
    return result.path[0]


def build_directive(model: Any, accessor: Any) -> IncludeDirective:
    """
    Resolve a root-level accessor into a typed :class:`IncludeDirective`.

    Raises:
        InvalidIncludeAccessorError: If the accessor is not a single member.
        FieldNotFoundError: If the model declares fields and the member is
            not one of them.
    """
    name = resolve_member_name(accessor, model)
    fields = declared_fields(model)
    if fields and name not in fields:
        model_name = getattr(model, "__name__", str(model))
        raise FieldNotFoundError(name, model_name, list(fields))
    property_type, is_collection = member_type(model, name)
    return IncludeDirective(name, property_type, is_collection)


def validate_include_path(path: Any) -> str:
    """Check a raw dotted include path and return it unchanged."""
    if not isinstance(path, str) or not path:
        raise ConstructionError(
            f"Include path must be a non-empty string, got {path!r}"
        )
    if any(not segment for segment in path.split(".")):
        raise ConstructionError(f"Include path '{path}' contains an empty segment")
    return path
