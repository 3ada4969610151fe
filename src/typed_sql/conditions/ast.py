"""
Tagged condition variants.

A condition is one of three node types:

- :class:`FieldCondition` compares a column with one value (``=``, ``!=``,
  ``IS NULL``) or with several values (``IN``).
- :class:`ConditionMerge` joins two or more conditions with ``AND`` / ``OR``.
- :class:`RawCondition` embeds hand-written SQL with ``$1``-based
  placeholders that get renumbered into the surrounding query.

Nodes validate their own structure on construction, so a tree that exists is
a tree the compiler can lower.  The list literal syntax
(``["AND", ["name", "x"], ["age", 3]]``) is decoded into these nodes by
:class:`~typed_sql.conditions.factory.ConditionFactory`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from ..exceptions import ConditionError, UnknownMergeOperatorError
from ..types import SqlValue, is_sql_value
from .operators import MergeOperator


@dataclass(frozen=True)
class FieldSelector:
    """Column reference; ``table=None`` means the table being queried."""

    field: str
    table: str | None = None
    negate: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.field, str) or not self.field:
            raise ConditionError(
                f"Field selector needs a non-empty field name, got {self.field!r}",
                condition=self,
            )
        if self.table is not None and (
            not isinstance(self.table, str) or not self.table
        ):
            raise ConditionError(
                f"Field selector table must be a non-empty string, got {self.table!r}",
                condition=self,
            )

    def negated(self) -> FieldSelector:
        return FieldSelector(self.field, self.table, not self.negate)

    def to_literal(self) -> str | list[str]:
        if self.table is None:
            return [self.field, "NOT"] if self.negate else self.field
        if self.negate:
            return [self.table, self.field, "NOT"]
        return [self.table, self.field]


@dataclass(frozen=True)
class FieldCondition:
    """``selector`` compared with ``values`` (one value, or an ``IN`` list)."""

    selector: FieldSelector
    values: tuple[SqlValue, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))
        if not self.values:
            raise ConditionError(
                f"Field condition on '{self.selector.field}' has no values",
                condition=self,
            )
        for value in self.values:
            if not is_sql_value(value):
                raise ConditionError(
                    f"Field condition on '{self.selector.field}' got a "
                    f"non-scalar value of type {type(value).__name__}",
                    condition=self,
                )

    @property
    def is_null_test(self) -> bool:
        return len(self.values) == 1 and self.values[0] is None

    def to_literal(self) -> list[Any]:
        return [self.selector.to_literal(), *self.values]


@dataclass(frozen=True)
class ConditionMerge:
    """Two or more conditions joined by ``AND`` or ``OR``."""

    operator: MergeOperator
    conditions: tuple[Condition, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.operator, MergeOperator):
            try:
                operator = MergeOperator(self.operator)
            except ValueError:
                raise UnknownMergeOperatorError(
                    str(self.operator), [m.value for m in MergeOperator]
                ) from None
            object.__setattr__(self, "operator", operator)
        object.__setattr__(self, "conditions", tuple(self.conditions))
        if len(self.conditions) < 2:
            raise ConditionError(
                f"{self.operator.value} merge needs at least 2 conditions, "
                f"got {len(self.conditions)}",
                condition=self,
            )
        for member in self.conditions:
            if not isinstance(member, CONDITION_TYPES):
                raise ConditionError(
                    f"{self.operator.value} merge member is not a condition: "
                    f"{type(member).__name__}",
                    condition=self,
                )

    def to_literal(self) -> list[Any]:
        return [self.operator.value, *(c.to_literal() for c in self.conditions)]


@dataclass(frozen=True)
class RawCondition:
    """Hand-written SQL; ``$1`` refers to ``values[0]`` and so on."""

    query: str
    values: tuple[SqlValue, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))
        if not isinstance(self.query, str):
            raise ConditionError(
                f"Raw condition query must be a string, got "
                f"{type(self.query).__name__}",
                condition=self,
            )
        for value in self.values:
            if not is_sql_value(value):
                raise ConditionError(
                    f"Raw condition got a non-scalar value of type "
                    f"{type(value).__name__}",
                    condition=self,
                )

    def to_literal(self) -> dict[str, Any]:
        return {"query": self.query, "values": list(self.values)}


Condition = Union[FieldCondition, ConditionMerge, RawCondition]

CONDITION_TYPES = (FieldCondition, ConditionMerge, RawCondition)
