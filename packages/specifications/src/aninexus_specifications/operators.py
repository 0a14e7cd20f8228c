from enum import Enum


class SpecificationOperator(str, Enum):
    """Supported operators for predicate nodes."""

    # Standard comparison
    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    IN = "in"
    NOT_IN = "not_in"
    BETWEEN = "between"
    NOT_BETWEEN = "not_between"

    # String operations
    LIKE = "like"
    NOT_LIKE = "not_like"
    ILIKE = "ilike"
    CONTAINS = "contains"
    ICONTAINS = "icontains"
    STARTSWITH = "startswith"
    ISTARTSWITH = "istartswith"
    ENDSWITH = "endswith"
    IENDSWITH = "iendswith"
    REGEX = "regex"
    IREGEX = "iregex"

    # Null/Empty checks
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"

    # Full-text search (store-native, no in-memory equivalent)
    FTS = "fts"
    FTS_PHRASE = "fts_phrase"

    # Logical operators
    AND = "and"
    OR = "or"
    NOT = "not"

    # Constant truth values
    TRUE = "true"
    FALSE = "false"


LOGICAL_OPERATORS: frozenset[SpecificationOperator] = frozenset(
    {SpecificationOperator.AND, SpecificationOperator.OR, SpecificationOperator.NOT}
)
TRUTH_OPERATORS: frozenset[SpecificationOperator] = frozenset(
    {SpecificationOperator.TRUE, SpecificationOperator.FALSE}
)
# Leaf operators whose value is ignored.
UNARY_OPERATORS: frozenset[SpecificationOperator] = frozenset(
    {
        SpecificationOperator.IS_NULL,
        SpecificationOperator.IS_NOT_NULL,
        SpecificationOperator.IS_EMPTY,
        SpecificationOperator.IS_NOT_EMPTY,
    }
)
