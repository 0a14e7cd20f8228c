"""
Predicate expression trees.

A :class:`Predicate` is a boolean condition over one model type, bound to
exactly one :class:`Parameter`.  It is built by calling a plain Python
callable with a symbolic parameter and recording what the callable does
with it::

    adult = Predicate.of(User, lambda u: u.age >= 18)
    alice = Predicate.of(User, lambda u: (u.username == "alice") & u.is_active)

The result is an inspectable tree that can be evaluated against an
in-memory instance, serialised to the ``{"op", "attr", "val"}`` dictionary
form, translated by a persistence adapter, and combined with other
predicates after rebinding both to one shared parameter.

Only member-versus-value conditions are representable.  Arithmetic,
method calls, indexing, member-to-member comparison and the Python
``and``/``or``/``not`` keywords raise :class:`PredicateError` while the
predicate is being built.
"""

from __future__ import annotations

import inspect
import json
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, NoReturn, TypeVar

from .exceptions import (
    EvaluationError,
    OperatorNotFoundError,
    PredicateError,
    ValidationError,
)
from .operators import (
    LOGICAL_OPERATORS,
    TRUTH_OPERATORS,
    UNARY_OPERATORS,
    SpecificationOperator,
)
from .operators_memory import DEFAULT_MEMORY_REGISTRY

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from .evaluator import MemoryOperatorRegistry

M = TypeVar("M")

_VALID_OPERATORS: frozenset[str] = frozenset(m.value for m in SpecificationOperator)
_AND = SpecificationOperator.AND
_OR = SpecificationOperator.OR
_COLLECTION_TYPES = (list, tuple, set, frozenset)
_MISSING = object()

_RENDER_SYMBOLS: dict[SpecificationOperator, str] = {
    SpecificationOperator.EQ: "==",
    SpecificationOperator.NE: "!=",
    SpecificationOperator.GT: ">",
    SpecificationOperator.LT: "<",
    SpecificationOperator.GE: ">=",
    SpecificationOperator.LE: "<=",
}


def _unsupported(what: str) -> NoReturn:
    raise PredicateError(
        f"{what} cannot be expressed in a predicate; "
        f"only member-versus-value conditions are supported"
    )


def _check_value(value: Any) -> Any:
    if isinstance(value, Node):
        _unsupported("Comparing two members")
    return value


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


class Node:
    """Base class of every predicate tree node."""

    __slots__ = ()

    def __bool__(self) -> bool:
        raise PredicateError(
            "Predicate expressions have no truth value; "
            "use &, | and ~ instead of and, or and not"
        )


class _Logical:
    """``&``, ``|`` and ``~`` for anything that can act as a condition."""

    __slots__ = ()

    def __and__(self, other: Any) -> Condition:
        return _junction(_AND, as_condition(self), as_condition(other))

    def __rand__(self, other: Any) -> Condition:
        return _junction(_AND, as_condition(other), as_condition(self))

    def __or__(self, other: Any) -> Condition:
        return _junction(_OR, as_condition(self), as_condition(other))

    def __ror__(self, other: Any) -> Condition:
        return _junction(_OR, as_condition(other), as_condition(self))

    def __invert__(self) -> Condition:
        return Negation(as_condition(self))


class Parameter(Node):
    """
    The bound variable of a predicate, standing in for one model instance.

    Every public attribute name resolves to a :class:`MemberAccess`, so the
    parameter keeps its own state in private slots only.
    """

    __slots__ = ("_model", "_name")

    def __init__(self, model: Any, name: str = "x") -> None:
        self._model = model
        self._name = name

    def __getattr__(self, name: str) -> MemberAccess:
        if name.startswith("_"):
            raise AttributeError(name)
        return MemberAccess(self, (name,))

    def __eq__(self, other: object) -> NoReturn:  # type: ignore[override]
        _unsupported("Comparing the parameter itself")

    __ne__ = __eq__  # type: ignore[assignment]
    __hash__ = object.__hash__

    def __repr__(self) -> str:
        model_name = getattr(self._model, "__name__", repr(self._model))
        return f"Parameter({self._name}: {model_name})"


class MemberAccess(_Logical, Node):
    """
    A (possibly multi-hop) member path rooted at a :class:`Parameter`.

    Comparison operators and the DSL methods below turn a member into a
    :class:`Comparison`.  Attribute access extends the path.
    """

    __slots__ = ("_root", "_path")

    def __init__(self, root: Parameter, path: tuple[str, ...]) -> None:
        self._root = root
        self._path = path

    @property
    def root(self) -> Parameter:
        return self._root

    @property
    def path(self) -> tuple[str, ...]:
        return self._path

    @property
    def dotted(self) -> str:
        return ".".join(self._path)

    def __getattr__(self, name: str) -> MemberAccess:
        if name.startswith("_"):
            raise AttributeError(name)
        return MemberAccess(self._root, (*self._path, name))

    def __repr__(self) -> str:
        return f"{self._root._name}.{self.dotted}"

    def rebind(self, old: Parameter, new: Parameter) -> MemberAccess:
        if self._root is old:
            return MemberAccess(new, self._path)
        if self._root is new:
            return self
        raise PredicateError(
            f"Member '{self!r}' is bound to a parameter foreign to this predicate"
        )

    # -- comparison operators -------------------------------------------------

    def _compare(self, op: SpecificationOperator, value: Any) -> Comparison:
        return Comparison(self, op, _check_value(value))

    def __eq__(self, other: object) -> Comparison:  # type: ignore[override]
        if other is None:
            return Comparison(self, SpecificationOperator.IS_NULL)
        return self._compare(SpecificationOperator.EQ, other)

    def __ne__(self, other: object) -> Comparison:  # type: ignore[override]
        if other is None:
            return Comparison(self, SpecificationOperator.IS_NOT_NULL)
        return self._compare(SpecificationOperator.NE, other)

    def __gt__(self, other: Any) -> Comparison:
        return self._compare(SpecificationOperator.GT, other)

    def __lt__(self, other: Any) -> Comparison:
        return self._compare(SpecificationOperator.LT, other)

    def __ge__(self, other: Any) -> Comparison:
        return self._compare(SpecificationOperator.GE, other)

    def __le__(self, other: Any) -> Comparison:
        return self._compare(SpecificationOperator.LE, other)

    __hash__ = object.__hash__

    # -- DSL ------------------------------------------------------------------

    def in_(self, values: Any) -> Comparison:
        return self._compare(SpecificationOperator.IN, _as_tuple(values))

    def not_in(self, values: Any) -> Comparison:
        return self._compare(SpecificationOperator.NOT_IN, _as_tuple(values))

    def between(self, low: Any, high: Any) -> Comparison:
        return self._compare(
            SpecificationOperator.BETWEEN, (_check_value(low), _check_value(high))
        )

    def not_between(self, low: Any, high: Any) -> Comparison:
        return self._compare(
            SpecificationOperator.NOT_BETWEEN, (_check_value(low), _check_value(high))
        )

    def like(self, pattern: str) -> Comparison:
        return self._compare(SpecificationOperator.LIKE, pattern)

    def not_like(self, pattern: str) -> Comparison:
        return self._compare(SpecificationOperator.NOT_LIKE, pattern)

    def ilike(self, pattern: str) -> Comparison:
        return self._compare(SpecificationOperator.ILIKE, pattern)

    def contains(self, text: str) -> Comparison:
        return self._compare(SpecificationOperator.CONTAINS, text)

    def icontains(self, text: str) -> Comparison:
        return self._compare(SpecificationOperator.ICONTAINS, text)

    def startswith(self, prefix: str) -> Comparison:
        return self._compare(SpecificationOperator.STARTSWITH, prefix)

    def istartswith(self, prefix: str) -> Comparison:
        return self._compare(SpecificationOperator.ISTARTSWITH, prefix)

    def endswith(self, suffix: str) -> Comparison:
        return self._compare(SpecificationOperator.ENDSWITH, suffix)

    def iendswith(self, suffix: str) -> Comparison:
        return self._compare(SpecificationOperator.IENDSWITH, suffix)

    def regex(self, pattern: str) -> Comparison:
        return self._compare(SpecificationOperator.REGEX, pattern)

    def iregex(self, pattern: str) -> Comparison:
        return self._compare(SpecificationOperator.IREGEX, pattern)

    def is_(self, value: bool | None) -> Comparison:
        if value is None:
            return Comparison(self, SpecificationOperator.IS_NULL)
        if isinstance(value, bool):
            return Comparison(self, SpecificationOperator.EQ, value)
        _unsupported(f"is_({value!r})")

    def is_not(self, value: bool | None) -> Comparison:
        if value is None:
            return Comparison(self, SpecificationOperator.IS_NOT_NULL)
        if isinstance(value, bool):
            return Comparison(self, SpecificationOperator.NE, value)
        _unsupported(f"is_not({value!r})")

    def is_empty(self) -> Comparison:
        return Comparison(self, SpecificationOperator.IS_EMPTY)

    def is_not_empty(self) -> Comparison:
        return Comparison(self, SpecificationOperator.IS_NOT_EMPTY)

    def match(self, query: str) -> Comparison:
        """Full-text search; only answerable by a backing store."""
        return self._compare(SpecificationOperator.FTS, query)

    def match_phrase(self, phrase: str) -> Comparison:
        return self._compare(SpecificationOperator.FTS_PHRASE, phrase)

    # -- computations ---------------------------------------------------------

    def __call__(self, *args: Any, **kwargs: Any) -> NoReturn:
        _unsupported(f"Calling '{self!r}'")

    def __getitem__(self, key: Any) -> NoReturn:
        _unsupported(f"Indexing '{self!r}'")

    def __iter__(self) -> NoReturn:
        _unsupported(f"Iterating '{self!r}'")

    def __contains__(self, item: Any) -> NoReturn:
        _unsupported(f"'in' against '{self!r}' (use .in_() or .contains())")

    def __len__(self) -> NoReturn:
        _unsupported(f"len() of '{self!r}'")

    def _arithmetic(self, *_: Any) -> NoReturn:
        _unsupported(f"Arithmetic on '{self!r}'")

    __add__ = __radd__ = __sub__ = __rsub__ = _arithmetic
    __mul__ = __rmul__ = __truediv__ = __rtruediv__ = _arithmetic
    __floordiv__ = __rfloordiv__ = __mod__ = __rmod__ = _arithmetic
    __pow__ = __rpow__ = __neg__ = __pos__ = __abs__ = _arithmetic


class Condition(_Logical, Node, ABC):
    """
    A boolean-valued node.

    Compiled conditions follow SQL's three-valued logic: they return
    ``True``, ``False`` or ``None`` for unknown, and only
    :meth:`Predicate.compile` collapses unknown to ``False``.
    """

    __slots__ = ()

    @abstractmethod
    def rebind(self, old: Parameter, new: Parameter) -> Condition: ...

    @abstractmethod
    def members(self) -> Iterator[MemberAccess]: ...

    @abstractmethod
    def compile(
        self, registry: MemoryOperatorRegistry
    ) -> Callable[[Any], bool | None]: ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]: ...

    @abstractmethod
    def render(self) -> str: ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.render()}>"


class Truth(Condition):
    """A constant ``True`` or ``False``."""

    __slots__ = ("value",)

    def __init__(self, value: bool) -> None:
        self.value = bool(value)

    def rebind(self, old: Parameter, new: Parameter) -> Truth:
        return self

    def members(self) -> Iterator[MemberAccess]:
        return iter(())

    def compile(self, registry: MemoryOperatorRegistry) -> Callable[[Any], bool]:
        value = self.value
        return lambda _candidate: value

    def to_dict(self) -> dict[str, Any]:
        op = SpecificationOperator.TRUE if self.value else SpecificationOperator.FALSE
        return {"op": op.value}

    def render(self) -> str:
        return repr(self.value)


class Comparison(Condition):
    """``member <op> value``; the value is ignored for null/empty checks."""

    __slots__ = ("member", "op", "value")

    def __init__(
        self,
        member: MemberAccess,
        op: SpecificationOperator,
        value: Any = None,
    ) -> None:
        self.member = member
        self.op = op
        self.value = value

    def rebind(self, old: Parameter, new: Parameter) -> Comparison:
        return Comparison(self.member.rebind(old, new), self.op, self.value)

    def members(self) -> Iterator[MemberAccess]:
        yield self.member

    def compile(
        self, registry: MemoryOperatorRegistry
    ) -> Callable[[Any], bool | None]:
        operator = registry.require(self.op)
        path = self.member.path
        value = self.value
        rendered = self.render()
        answers_null = _answers_null(self.op, value)

        def test(field_value: Any) -> bool | None:
            if not answers_null and (field_value is None or value is None):
                return None
            return operator.evaluate(field_value, value)

        def evaluate(candidate: Any) -> bool | None:
            try:
                reached = resolve_member(candidate, path)
                if len(path) == 1:
                    return test(reached[0])
                # relationship hops behave like EXISTS: never unknown
                return any(test(field_value) is True for field_value in reached)
            except (AttributeError, TypeError, ValueError) as exc:
                raise EvaluationError(
                    f"Cannot evaluate '{rendered}' against {candidate!r}: {exc}",
                    predicate=rendered,
                ) from exc

        return evaluate

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"op": self.op.value, "attr": self.member.dotted}
        if self.op not in UNARY_OPERATORS:
            value = self.value
            data["val"] = list(value) if isinstance(value, tuple) else value
        return data

    def render(self) -> str:
        member = repr(self.member)
        if self.op in _RENDER_SYMBOLS:
            return f"{member} {_RENDER_SYMBOLS[self.op]} {self.value!r}"
        if self.op in UNARY_OPERATORS:
            return f"{member}.{self.op.value}()"
        return f"{member}.{self.op.value}({self.value!r})"


class Junction(Condition):
    """Logical AND / OR over two or more conditions."""

    __slots__ = ("op", "conditions")

    def __init__(
        self, op: SpecificationOperator, conditions: Sequence[Condition]
    ) -> None:
        self.op = op
        self.conditions = tuple(conditions)

    def rebind(self, old: Parameter, new: Parameter) -> Junction:
        return Junction(self.op, [c.rebind(old, new) for c in self.conditions])

    def members(self) -> Iterator[MemberAccess]:
        for condition in self.conditions:
            yield from condition.members()

    def compile(
        self, registry: MemoryOperatorRegistry
    ) -> Callable[[Any], bool | None]:
        compiled = tuple(c.compile(registry) for c in self.conditions)
        # Kleene logic: AND stops at False, OR at True; otherwise unknown wins
        decisive = self.op != SpecificationOperator.AND

        def evaluate(candidate: Any) -> bool | None:
            outcome: bool | None = not decisive
            for check in compiled:
                result = check(candidate)
                if result is decisive:
                    return decisive
                if result is None:
                    outcome = None
            return outcome

        return evaluate

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": self.op.value,
            "conditions": [c.to_dict() for c in self.conditions],
        }

    def render(self) -> str:
        joiner = " & " if self.op == SpecificationOperator.AND else " | "
        return joiner.join(f"({c.render()})" for c in self.conditions)


class Negation(Condition):
    __slots__ = ("condition",)

    def __init__(self, condition: Condition) -> None:
        self.condition = condition

    def rebind(self, old: Parameter, new: Parameter) -> Negation:
        return Negation(self.condition.rebind(old, new))

    def members(self) -> Iterator[MemberAccess]:
        return self.condition.members()

    def compile(
        self, registry: MemoryOperatorRegistry
    ) -> Callable[[Any], bool | None]:
        inner = self.condition.compile(registry)

        def evaluate(candidate: Any) -> bool | None:
            result = inner(candidate)
            return None if result is None else not result

        return evaluate

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": SpecificationOperator.NOT.value,
            "conditions": [self.condition.to_dict()],
        }

    def render(self) -> str:
        return f"~({self.condition.render()})"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def as_condition(value: Any) -> Condition:
    """
    Coerce what a predicate callable returned into a :class:`Condition`.

    A bare member means ``member == True``; a literal bool becomes a
    :class:`Truth`.
    """
    if isinstance(value, Condition):
        return value
    if isinstance(value, MemberAccess):
        return Comparison(value, SpecificationOperator.EQ, True)
    if isinstance(value, bool):
        return Truth(value)
    if isinstance(value, Parameter):
        _unsupported("The bare parameter")
    raise PredicateError(
        f"A predicate must produce a condition, got {type(value).__name__}"
    )


def _junction(
    op: SpecificationOperator, left: Condition, right: Condition
) -> Junction:
    conditions: list[Condition] = []
    for side in (left, right):
        if isinstance(side, Junction) and side.op == op:
            conditions.extend(side.conditions)
        else:
            conditions.append(side)
    return Junction(op, conditions)


def _as_tuple(values: Any) -> tuple[Any, ...]:
    if isinstance(values, str | bytes) or not hasattr(values, "__iter__"):
        raise PredicateError(f"Expected a collection of values, got {values!r}")
    return tuple(_check_value(v) for v in values)


def _answers_null(op: SpecificationOperator, value: Any) -> bool:
    """
    Whether *op* gives a definite answer for a NULL operand.

    Null and empty checks do, as do ``== None`` / ``!= None`` from a
    serialised predicate and ``in``/``not_in`` against no values, which
    SQL renders as ``false`` and ``IS NOT NULL``.  Everything else is
    unknown when either side is NULL.
    """
    if op in UNARY_OPERATORS:
        return True
    if op in (SpecificationOperator.EQ, SpecificationOperator.NE):
        return value is None
    if op in (SpecificationOperator.IN, SpecificationOperator.NOT_IN):
        return not value
    return False


def resolve_member(candidate: Any, path: Sequence[str]) -> list[Any]:
    """
    Resolve a member path on an in-memory object.

    Returns every value the path reaches.  Each hop after the first works
    like a join: a collection fans out over its elements, and a ``None``
    related object reaches nothing, so both an empty collection and a
    missing related object yield ``[]``.

    Raises:
        EvaluationError: If a member does not exist.
    """
    frontier = [_get_member(candidate, path[0], path)]
    for part in path[1:]:
        frontier = [
            _get_member(obj, part, path)
            for obj in _fan_out(frontier)
            if obj is not None
        ]
    return frontier


def _fan_out(objects: list[Any]) -> list[Any]:
    expanded: list[Any] = []
    for obj in objects:
        if isinstance(obj, _COLLECTION_TYPES):
            expanded.extend(obj)
        else:
            expanded.append(obj)
    return expanded


def _get_member(obj: Any, name: str, path: Sequence[str]) -> Any:
    if isinstance(obj, dict):
        value = obj.get(name, _MISSING)
    else:
        value = getattr(obj, name, _MISSING)
    if value is _MISSING:
        dotted = ".".join(path)
        raise EvaluationError(
            f"'{type(obj).__name__}' has no member '{name}' (path '{dotted}')",
            predicate=dotted,
        )
    return value


def common_model(left: Any, right: Any) -> Any:
    """Return the more specific of two related model types."""
    if left is right:
        return left
    if isinstance(left, type) and isinstance(right, type):
        if issubclass(left, right):
            return left
        if issubclass(right, left):
            return right
    raise TypeError(
        f"Cannot combine predicates over unrelated models "
        f"{getattr(left, '__name__', left)!s} and {getattr(right, '__name__', right)!s}"
    )


def _parameter_name(criteria: Callable[..., Any]) -> str:
    try:
        parameters = list(inspect.signature(criteria).parameters)
    except (TypeError, ValueError):
        return "x"
    return parameters[0] if parameters else "x"


# ---------------------------------------------------------------------------
# Predicate
# ---------------------------------------------------------------------------


class Predicate(Generic[M]):
    """
    A boolean condition over ``M`` bound to one :class:`Parameter`.

    Every member referenced by :attr:`body` is rooted at :attr:`parameter`.
    Predicates are immutable; :meth:`rebind`, :meth:`combine` and
    :meth:`negate` return new instances.
    """

    __slots__ = ("_parameter", "_body")

    def __init__(self, parameter: Parameter, body: Condition) -> None:
        for member in body.members():
            if member.root is not parameter:
                raise PredicateError(
                    f"Member '{member!r}' is not bound to parameter '{parameter._name}'"
                )
        self._parameter = parameter
        self._body = body

    # -- construction ---------------------------------------------------------

    @classmethod
    def of(
        cls,
        model: type[M],
        criteria: Predicate[M] | Callable[[Any], Any] | bool,
    ) -> Predicate[M]:
        """Build a predicate from a callable, a bool, or pass one through."""
        if isinstance(criteria, Predicate):
            return criteria
        if isinstance(criteria, bool):
            return cls(Parameter(model), Truth(criteria))
        if isinstance(criteria, Node) or not callable(criteria):
            raise PredicateError(
                f"Criteria must be a callable taking the model instance, "
                f"got {type(criteria).__name__}"
            )
        parameter = Parameter(model, _parameter_name(criteria))
        return cls(parameter, as_condition(criteria(parameter)))

    @classmethod
    def always(cls, model: type[M]) -> Predicate[M]:
        """The explicit match-all predicate."""
        return cls(Parameter(model), Truth(True))

    @classmethod
    def never(cls, model: type[M]) -> Predicate[M]:
        return cls(Parameter(model), Truth(False))

    @classmethod
    def combine(
        cls,
        op: SpecificationOperator,
        left: Predicate[Any],
        right: Predicate[Any],
    ) -> Predicate[M]:
        """
        Combine two predicates with AND / OR under one fresh parameter.

        Both bodies are rebound to the new parameter before being joined,
        so the result remains a single translatable tree.
        """
        if op not in (_AND, _OR):
            raise ValueError(f"Cannot combine predicates with '{op}'")
        parameter = Parameter(
            common_model(left.model, right.model), left.parameter._name
        )
        return cls(
            parameter,
            _junction(op, left.rebind(parameter).body, right.rebind(parameter).body),
        )

    # -- accessors ------------------------------------------------------------

    @property
    def parameter(self) -> Parameter:
        return self._parameter

    @property
    def body(self) -> Condition:
        return self._body

    @property
    def model(self) -> type[M]:
        return self._parameter._model  # type: ignore[no-any-return]

    # -- transformation -------------------------------------------------------

    def rebind(self, parameter: Parameter) -> Predicate[M]:
        """Return this predicate with its parameter substituted."""
        if parameter is self._parameter:
            return self
        return Predicate(parameter, self._body.rebind(self._parameter, parameter))

    def negate(self) -> Predicate[M]:
        parameter = Parameter(self.model, self._parameter._name)
        return Predicate(parameter, Negation(self.rebind(parameter).body))

    # -- evaluation -----------------------------------------------------------

    def compile(
        self, registry: MemoryOperatorRegistry | None = None
    ) -> Callable[[M], bool]:
        """
        Derive an executable form of this predicate.

        Like a SQL ``WHERE`` clause, a candidate for which the condition
        is unknown (a comparison against ``None``) does not match.

        Raises:
            OperatorNotSupportedError: If an operator has no in-memory
                implementation in *registry*.
        """
        if registry is None:
            registry = DEFAULT_MEMORY_REGISTRY
        body = self._body.compile(registry)
        return lambda candidate: body(candidate) is True

    def evaluate(
        self, candidate: M, registry: MemoryOperatorRegistry | None = None
    ) -> bool:
        return self.compile(registry)(candidate)

    # -- serialisation --------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return self._body.to_dict()

    def render(self) -> str:
        return self._body.render()

    def __repr__(self) -> str:
        model_name = getattr(self.model, "__name__", repr(self.model))
        return f"Predicate[{model_name}]({self._parameter._name} => {self.render()})"


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


class PredicateFactory:
    """
    Rebuild predicates from their dictionary / JSON representation.

    Supports:
    - ``from_dict(model, data)``: parse a nested dict tree
    - ``from_json(model, text)``: parse a JSON string
    - ``validate(data)``: validate without constructing
    """

    @staticmethod
    def from_dict(
        model: type[M],
        data: dict[str, Any],
        *,
        allowed_fields: Sequence[str] | None = None,
    ) -> Predicate[M]:
        """
        Create a predicate from a dictionary.

        Parameters
        ----------
        model:
            The model type the predicate is bound to.
        data:
            The predicate dictionary (potentially nested).
        allowed_fields:
            Optional whitelist of valid member paths.  If provided, any
            ``attr`` not in this list raises :class:`ValidationError`.
        """
        PredicateFactory._validate_node(data, allowed_fields=allowed_fields)
        parameter = Parameter(model)
        return Predicate(parameter, PredicateFactory._build(data, parameter))

    @staticmethod
    def from_json(
        model: type[M],
        text: str,
        *,
        allowed_fields: Sequence[str] | None = None,
    ) -> Predicate[M]:
        """Parse a JSON string and build a predicate."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Invalid JSON: {exc}", path="<root>") from exc

        if not isinstance(data, dict):
            raise ValidationError(
                "Top-level JSON value must be an object", path="<root>"
            )

        return PredicateFactory.from_dict(model, data, allowed_fields=allowed_fields)

    @staticmethod
    def validate(
        data: Any,
        *,
        allowed_fields: Sequence[str] | None = None,
    ) -> list[str]:
        """
        Validate a predicate dict and return a list of error messages.

        Returns an empty list when the structure is valid.
        """
        errors: list[str] = []
        PredicateFactory._collect_errors(
            data, errors, path="<root>", allowed_fields=allowed_fields
        )
        return errors

    # ------------------------------------------------------------------ #
    # Internal - recursive build                                          #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build(data: dict[str, Any], parameter: Parameter) -> Condition:
        op = SpecificationOperator(data["op"].lower())

        if op in TRUTH_OPERATORS:
            return Truth(op == SpecificationOperator.TRUE)

        if op in LOGICAL_OPERATORS:
            children = [
                PredicateFactory._build(child, parameter)
                for child in data["conditions"]
            ]
            if op == SpecificationOperator.NOT:
                inner = (
                    children[0]
                    if len(children) == 1
                    else Junction(SpecificationOperator.AND, children)
                )
                return Negation(inner)
            return Junction(op, children)

        member = MemberAccess(parameter, tuple(data["attr"].split(".")))
        if op in UNARY_OPERATORS:
            return Comparison(member, op)
        value = data.get("val")
        if isinstance(value, list):
            value = tuple(value)
        return Comparison(member, op, value)

    # ------------------------------------------------------------------ #
    # Internal - validation                                               #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _validate_node(
        data: Any,
        *,
        path: str = "<root>",
        allowed_fields: Sequence[str] | None = None,
    ) -> None:
        """Raise on first validation error (fail-fast)."""
        if not isinstance(data, dict):
            raise ValidationError(
                f"Expected a dict, got {type(data).__name__}", path=path
            )

        op_str = data.get("op")
        if not op_str or not isinstance(op_str, str):
            raise ValidationError("Missing or empty 'op' key", path=path)

        op_lower = op_str.lower()
        if op_lower not in _VALID_OPERATORS:
            raise OperatorNotFoundError(op_lower, sorted(_VALID_OPERATORS))

        op = SpecificationOperator(op_lower)
        if op in TRUTH_OPERATORS:
            return

        if op in LOGICAL_OPERATORS:
            conditions = data.get("conditions")
            if not isinstance(conditions, list) or not conditions:
                raise ValidationError(
                    f"Logical operator '{op_lower}' requires a non-empty "
                    f"'conditions' list",
                    path=path,
                )
            for idx, child in enumerate(conditions):
                PredicateFactory._validate_node(
                    child,
                    path=f"{path}.conditions[{idx}]",
                    allowed_fields=allowed_fields,
                )
            return

        PredicateFactory._validate_leaf(data, op, path, allowed_fields)

    @staticmethod
    def _validate_leaf(
        data: dict[str, Any],
        op: SpecificationOperator,
        path: str,
        allowed_fields: Sequence[str] | None,
    ) -> None:
        attr = data.get("attr")
        if not attr or not isinstance(attr, str) or "" in attr.split("."):
            raise ValidationError(f"Leaf predicate missing 'attr': {data}", path=path)

        if allowed_fields is not None and attr not in allowed_fields:
            raise ValidationError(
                f"Field '{attr}' is not in the allowed fields list", path=path
            )

        if op in (SpecificationOperator.BETWEEN, SpecificationOperator.NOT_BETWEEN):
            value = data.get("val")
            if not isinstance(value, list | tuple) or len(value) != 2:
                raise ValidationError(
                    f"Operator '{op.value}' requires a [low, high] pair", path=path
                )

    @staticmethod
    def _collect_errors(
        data: Any,
        errors: list[str],
        *,
        path: str,
        allowed_fields: Sequence[str] | None = None,
    ) -> None:
        if not isinstance(data, dict):
            errors.append(f"{path}: expected a dict, got {type(data).__name__}")
            return

        op_str = data.get("op")
        if not op_str or not isinstance(op_str, str):
            errors.append(f"{path}: missing 'op'")
            return

        op_lower = op_str.lower()
        if op_lower not in _VALID_OPERATORS:
            errors.append(f"{path}: unknown operator '{op_lower}'")
            return

        op = SpecificationOperator(op_lower)
        if op in TRUTH_OPERATORS:
            return

        if op in LOGICAL_OPERATORS:
            conditions = data.get("conditions")
            if not isinstance(conditions, list) or not conditions:
                errors.append(f"{path}: logical '{op_lower}' requires 'conditions'")
                return
            for idx, child in enumerate(conditions):
                PredicateFactory._collect_errors(
                    child,
                    errors,
                    path=f"{path}.conditions[{idx}]",
                    allowed_fields=allowed_fields,
                )
            return

        try:
            PredicateFactory._validate_leaf(data, op, path, allowed_fields)
        except ValidationError as exc:
            errors.append(f"{path}: {exc.message}")
