"""
Query specifications.

A :class:`QuerySpecification` bundles a :class:`~.ast.Predicate`, a set of
eager-load include directives and two execution flags.  Subclasses declare
their includes and flags inside ``__init__``; once the constructor returns
the instance is sealed and every further mutation raises.

Example::

    class UserIdentitySpecification(QuerySpecification[User]):
        def __init__(self, username: str, *, include_ban_reasons: bool = False):
            super().__init__(User, lambda u: u.username == username)
            self.add_include(lambda u: u.teams).then_include(lambda t: t.team)
            if include_ban_reasons:
                self.add_include(lambda u: u.ban_reasons)

    spec = UserIdentitySpecification("alice") & ActiveUsers()
    users = await to_list(source, spec)
"""

from __future__ import annotations

import logging
from abc import ABCMeta
from functools import cached_property
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from .ast import Predicate, common_model
from .builder import (
    IncludeAccumulator,
    IncludeDirective,
    IncludePathBuilder,
    build_directive,
    validate_include_path,
)
from .exceptions import ConstructionError, ImmutableSpecificationError
from .operators import SpecificationOperator

if TYPE_CHECKING:
    from collections.abc import Callable

    from .evaluator import MemoryOperatorRegistry
    from .ports import QueryableSource

logger = logging.getLogger("aninexus.specifications")

M = TypeVar("M")
S = TypeVar("S", bound="QueryableSource[Any]")


class _SpecificationMeta(ABCMeta):
    """Seals every specification once its constructor has returned."""

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        instance = super().__call__(*args, **kwargs)
        instance._seal()
        return instance


class QuerySpecification(Generic[M], metaclass=_SpecificationMeta):
    """
    Immutable bundle of predicate, include directives and execution flags.

    Includes and flags may only be declared inside the constructor of the
    owning (sub)class.  After construction the instance is read-only and
    safe to share between tasks and threads.
    """

    def __init__(
        self,
        model: type[M],
        criteria: Predicate[M] | Callable[[Any], Any] | bool | None,
    ) -> None:
        if criteria is None:
            raise ConstructionError(
                f"{type(self).__name__} requires criteria; "
                f"use Predicate.always() to match every {model.__name__}"
            )
        object.__setattr__(self, "_sealed", False)
        self._model = model
        self._criteria: Predicate[M] = Predicate.of(model, criteria)
        self._accumulator = IncludeAccumulator()
        self._bypass_default_filters = False
        self._split_execution = False

    # -- sealing --------------------------------------------------------------

    def _seal(self) -> None:
        self._accumulator.freeze()
        object.__setattr__(self, "_sealed", True)
        logger.debug("Constructed %r", self)

    def __setattr__(self, name: str, value: Any) -> None:
        if self.__dict__.get("_sealed", False):
            raise ImmutableSpecificationError(type(self).__name__, name)
        super().__setattr__(name, value)

    def __delattr__(self, name: str) -> None:
        if self.__dict__.get("_sealed", False):
            raise ImmutableSpecificationError(type(self).__name__, name)
        super().__delattr__(name)

    # -- read-only contract ---------------------------------------------------

    @property
    def model(self) -> type[M]:
        return self._model

    @property
    def criteria(self) -> Predicate[M]:
        return self._criteria

    @property
    def includes(self) -> tuple[IncludeDirective, ...]:
        return self._accumulator.directives

    @property
    def include_strings(self) -> tuple[str, ...]:
        return self._accumulator.paths

    @property
    def bypass_default_filters(self) -> bool:
        return self._bypass_default_filters

    @bypass_default_filters.setter
    def bypass_default_filters(self, value: bool) -> None:
        self._bypass_default_filters = bool(value)

    @property
    def split_execution(self) -> bool:
        return self._split_execution

    @split_execution.setter
    def split_execution(self, value: bool) -> None:
        self._split_execution = bool(value)

    # -- construction-time includes -------------------------------------------

    def add_include(self, accessor: Callable[[M], Any]) -> IncludePathBuilder[Any]:
        """
        Register a typed single-hop include such as ``lambda u: u.teams``.

        Returns a builder positioned on the included member (the element
        type for collections) for chaining ``then_include`` calls.

        Raises:
            InvalidIncludeAccessorError: If *accessor* is not one plain
                member access.
            FieldNotFoundError: If the model does not declare the member.
            ConstructionError: If the specification is already sealed.
        """
        self._check_constructing()
        directive = build_directive(self._model, accessor)
        self._accumulator.add_directive(directive)
        return IncludePathBuilder(
            self._accumulator, directive.name, directive.property_type
        )

    def add_include_path(self, path: str) -> None:
        """Register a raw dotted include path, e.g. ``"teams.team.roles"``."""
        self._check_constructing()
        self._accumulator.add_path(validate_include_path(path))

    def _check_constructing(self) -> None:
        if self.__dict__.get("_sealed", False):
            raise ConstructionError(
                f"Includes of '{type(self).__name__}' can only be declared "
                f"inside its constructor"
            )

    # -- execution ------------------------------------------------------------

    def apply_to(self, source: S) -> S:
        """
        Apply includes, the filter bypass and the predicate to *source*.

        Returns the new source; *source* itself is left untouched.
        """
        for directive in self.includes:
            source = source.include(directive)
        for path in self.include_strings:
            source = source.include_path(path)
        if self._bypass_default_filters:
            source = source.ignore_default_filters()
        logger.debug("Applying %r to %s", self, type(source).__name__)
        return source.where(self._criteria)  # type: ignore[return-value]

    def satisfies(
        self,
        candidate: M,
        *,
        registry: MemoryOperatorRegistry | None = None,
    ) -> bool:
        """
        Evaluate the predicate against an in-memory *candidate*.

        Raises:
            EvaluationError: If the predicate cannot be answered outside
                the backing store.
        """
        if registry is None:
            return self._compiled(candidate)
        return self._criteria.compile(registry)(candidate)

    @cached_property
    def _compiled(self) -> Callable[[M], bool]:
        return self._criteria.compile()

    # -- composition ----------------------------------------------------------

    def and_(self, other: QuerySpecification[Any]) -> AndSpecification[M]:
        return AndSpecification(self, other)

    def or_(self, other: QuerySpecification[Any]) -> OrSpecification[M]:
        return OrSpecification(self, other)

    def negate(self) -> NotSpecification[M]:
        return NotSpecification(self)

    def __and__(self, other: QuerySpecification[Any]) -> AndSpecification[M]:
        return AndSpecification(self, other)

    def __or__(self, other: QuerySpecification[Any]) -> OrSpecification[M]:
        return OrSpecification(self, other)

    def __invert__(self) -> NotSpecification[M]:
        return NotSpecification(self)

    # -- serialisation --------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return self._criteria.to_dict()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._criteria.render()})"


class CombinedSpecification(QuerySpecification[M]):
    """
    Result of combining two specifications.

    The predicate is both operands' predicates rebound to one parameter
    and joined; includes are concatenated left then right without
    de-duplication; each flag is the OR of both operands' flags.
    """

    operator: ClassVar[SpecificationOperator]

    def __init__(
        self,
        left: QuerySpecification[Any],
        right: QuerySpecification[Any],
    ) -> None:
        model = common_model(left.model, right.model)
        super().__init__(
            model, Predicate.combine(self.operator, left.criteria, right.criteria)
        )
        self._left = left
        self._right = right
        self._accumulator.extend(
            left.includes + right.includes,
            left.include_strings + right.include_strings,
        )
        self.bypass_default_filters = (
            left.bypass_default_filters or right.bypass_default_filters
        )
        self.split_execution = left.split_execution or right.split_execution
        logger.debug("Combined %r %s %r", left, self.operator.value, right)

    @property
    def left(self) -> QuerySpecification[Any]:
        return self._left

    @property
    def right(self) -> QuerySpecification[Any]:
        return self._right


class AndSpecification(CombinedSpecification[M]):
    operator = SpecificationOperator.AND


class OrSpecification(CombinedSpecification[M]):
    operator = SpecificationOperator.OR


class NotSpecification(QuerySpecification[M]):
    """Negated predicate; includes and flags are carried over unchanged."""

    def __init__(self, specification: QuerySpecification[M]) -> None:
        super().__init__(specification.model, specification.criteria.negate())
        self._specification = specification
        self._accumulator.extend(
            specification.includes, specification.include_strings
        )
        self.bypass_default_filters = specification.bypass_default_filters
        self.split_execution = specification.split_execution

    @property
    def specification(self) -> QuerySpecification[M]:
        return self._specification
