from .adapters import InMemoryQuerySource
from .ast import (
    Comparison,
    Condition,
    Junction,
    MemberAccess,
    Negation,
    Parameter,
    Predicate,
    PredicateFactory,
    Truth,
)
from .base import (
    AndSpecification,
    CombinedSpecification,
    NotSpecification,
    OrSpecification,
    QuerySpecification,
)
from .builder import IncludeDirective, IncludePathBuilder
from .evaluator import MemoryOperator, MemoryOperatorRegistry
from .exceptions import (
    ConstructionError,
    EvaluationError,
    FieldNotFoundError,
    ImmutableSpecificationError,
    InvalidIncludeAccessorError,
    OperatorNotFoundError,
    OperatorNotSupportedError,
    PredicateError,
    RelationshipTraversalError,
    SpecificationError,
    ValidationError,
)
from .execution import to_list, to_tuple, with_specification
from .operators import SpecificationOperator
from .operators_memory import DEFAULT_MEMORY_REGISTRY, build_default_registry
from .ports import QueryableSource

__all__ = [
    # Specifications
    "QuerySpecification",
    "CombinedSpecification",
    "AndSpecification",
    "OrSpecification",
    "NotSpecification",
    # Includes
    "IncludeDirective",
    "IncludePathBuilder",
    # Predicates
    "SpecificationOperator",
    "Predicate",
    "PredicateFactory",
    "Parameter",
    "MemberAccess",
    "Condition",
    "Comparison",
    "Junction",
    "Negation",
    "Truth",
    # Evaluator / strategy
    "MemoryOperator",
    "MemoryOperatorRegistry",
    "DEFAULT_MEMORY_REGISTRY",
    "build_default_registry",
    # Execution
    "QueryableSource",
    "InMemoryQuerySource",
    "with_specification",
    "to_list",
    "to_tuple",
    # Exceptions
    "SpecificationError",
    "ConstructionError",
    "InvalidIncludeAccessorError",
    "ImmutableSpecificationError",
    "FieldNotFoundError",
    "PredicateError",
    "EvaluationError",
    "OperatorNotSupportedError",
    "ValidationError",
    "OperatorNotFoundError",
    "RelationshipTraversalError",
]
