"""
Operator strategies for evaluating predicates against live objects.

A :class:`MemoryOperator` answers one :class:`SpecificationOperator` for a
pair of concrete values; a :class:`MemoryOperatorRegistry` holds the
strategies a compiled predicate may call.  Operators that only a backing
store understands, full-text search for example, stay unregistered and
surface as :class:`~aninexus_specifications.exceptions.OperatorNotSupportedError`
when a predicate using them is compiled.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from .exceptions import OperatorNotSupportedError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .operators import SpecificationOperator


class MemoryOperator(ABC):
    """
    One in-memory comparison.

    Subclasses set ``operator`` at class level, or override :attr:`name`
    when the key has to be computed.
    """

    operator: ClassVar[SpecificationOperator]

    @property
    def name(self) -> SpecificationOperator:
        return type(self).operator

    @abstractmethod
    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        """
        Answer ``field_value <operator> condition_value``.

        *field_value* is read from the candidate; *condition_value* is the
        operand the predicate captured (``None`` for value-less checks).
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name.value!r})"


class MemoryOperatorRegistry:
    """
    Strategies keyed by the operator they implement.

    ::

        registry = build_default_registry()
        registry.register(MyWordMatchOperator())
        spec.satisfies(candidate, registry=registry)
    """

    def __init__(self, operators: Iterable[MemoryOperator] = ()) -> None:
        self._operators: dict[SpecificationOperator, MemoryOperator] = {}
        self.register_all(*operators)

    def register(self, operator: MemoryOperator) -> None:
        """Add *operator*, replacing whatever held its key before."""
        self._operators[operator.name] = operator

    def register_all(self, *operators: MemoryOperator) -> None:
        for operator in operators:
            self.register(operator)

    def unregister(self, name: SpecificationOperator) -> None:
        self._operators.pop(name, None)

    def copy(self) -> MemoryOperatorRegistry:
        return MemoryOperatorRegistry(self._operators.values())

    def get(self, name: SpecificationOperator) -> MemoryOperator | None:
        return self._operators.get(name)

    def require(self, name: SpecificationOperator) -> MemoryOperator:
        """
        Like :meth:`get`, for callers that cannot continue without it.

        Raises:
            OperatorNotSupportedError: If nothing is registered under *name*.
        """
        try:
            return self._operators[name]
        except KeyError:
            raise OperatorNotSupportedError(name.value) from None

    def has(self, name: SpecificationOperator) -> bool:
        return name in self._operators

    @property
    def supported_operators(self) -> set[SpecificationOperator]:
        return set(self._operators)

    def evaluate(
        self,
        name: SpecificationOperator,
        field_value: Any,
        condition_value: Any,
    ) -> bool:
        return self.require(name).evaluate(field_value, condition_value)

    def __len__(self) -> int:
        return len(self._operators)

    def __contains__(self, name: object) -> bool:
        return name in self._operators
