from .ast import (
    Condition,
    ConditionMerge,
    FieldCondition,
    FieldSelector,
    RawCondition,
)
from .builder import ConditionBuilder, and_, field, not_field, or_, raw
from .compiler import (
    CompiledCondition,
    compile_condition,
    compile_where,
    describe_condition,
)
from .factory import ConditionFactory
from .operators import MergeOperator, SelectorModifier

__all__ = [
    # Nodes
    "Condition",
    "ConditionMerge",
    "FieldCondition",
    "FieldSelector",
    "RawCondition",
    "MergeOperator",
    "SelectorModifier",
    # Decoding / building
    "ConditionFactory",
    "ConditionBuilder",
    "and_",
    "field",
    "not_field",
    "or_",
    "raw",
    # Compilation
    "CompiledCondition",
    "compile_condition",
    "compile_where",
    "describe_condition",
]
