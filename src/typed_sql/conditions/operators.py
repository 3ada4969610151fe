from enum import Enum


class MergeOperator(str, Enum):
    """Boolean operators joining the members of a condition merge."""

    AND = "AND"
    OR = "OR"


class SelectorModifier(str, Enum):
    """Trailing modifier of a field selector (``["accepted", "NOT"]``)."""

    IS = "IS"
    NOT = "NOT"


# Tokens that mark a comparison tuple such as ``["age", ">", 34]``.
COMPARISON_TOKENS: frozenset[str] = frozenset(
    {"=", "==", "===", "!=", "!==", "<>", "<", ">", "<=", ">="}
)
