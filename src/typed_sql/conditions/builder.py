"""
Fluent builder and helper constructors for condition trees.

Example::

    cond = (
        ConditionBuilder()
        .where_not("accepted", True)
        .or_group()
            .where("receiver_id", 1)
            .where("sender_id", 1)
        .end_group()
        .build()
    )
    # -> ("t".accepted != $1 AND ("t".receiver_id = $2 OR "t".sender_id = $3))

    cond = and_(field("name", "tester"), raw("age >= $1", 18))
"""

from __future__ import annotations

from typing import Any

from ..types import SqlValue
from .ast import Condition, ConditionMerge, FieldCondition, FieldSelector, RawCondition
from .factory import ConditionFactory
from .operators import MergeOperator


def field(
    name: str,
    *values: SqlValue,
    table: str | None = None,
    negate: bool = False,
) -> FieldCondition:
    """``field("age", 3)`` → ``age = $n``; several values → ``IN``."""
    return FieldCondition(FieldSelector(name, table, negate), values)


def not_field(name: str, *values: SqlValue, table: str | None = None) -> FieldCondition:
    return field(name, *values, table=table, negate=True)


def and_(*conditions: Any) -> ConditionMerge:
    return ConditionMerge(
        MergeOperator.AND,
        tuple(ConditionFactory.from_literal(c) for c in conditions),
    )


def or_(*conditions: Any) -> ConditionMerge:
    return ConditionMerge(
        MergeOperator.OR,
        tuple(ConditionFactory.from_literal(c) for c in conditions),
    )


def raw(query: str, *values: SqlValue) -> RawCondition:
    return RawCondition(query, values)


class ConditionBuilder:
    """
    Fluent builder for composing condition trees.

    Conditions added at the same level are combined with AND.  Use
    ``or_group()`` / ``and_group()`` for explicit grouping and
    ``end_group()`` to close the current group.
    """

    def __init__(self) -> None:
        self._conditions: list[Condition] = []
        # stack items: (group_operator, members)
        self._stack: list[tuple[MergeOperator, list[Condition]]] = []

    # -- leaf conditions -----------------------------------------------------

    def where(
        self,
        name: str,
        *values: SqlValue,
        table: str | None = None,
    ) -> ConditionBuilder:
        """Add an equality / NULL / IN test to the current group."""
        self._current_list().append(field(name, *values, table=table))
        return self

    def where_not(
        self,
        name: str,
        *values: SqlValue,
        table: str | None = None,
    ) -> ConditionBuilder:
        """Add an inequality / NOT NULL / NOT IN test to the current group."""
        self._current_list().append(not_field(name, *values, table=table))
        return self

    def raw(self, query: str, *values: SqlValue) -> ConditionBuilder:
        self._current_list().append(raw(query, *values))
        return self

    def add(self, condition: Any) -> ConditionBuilder:
        """Add a node or a condition literal to the current group."""
        self._current_list().append(ConditionFactory.from_literal(condition))
        return self

    # -- grouping ------------------------------------------------------------

    def and_group(self) -> ConditionBuilder:
        """Open a new AND group.  Close with ``end_group()``."""
        self._stack.append((MergeOperator.AND, []))
        return self

    def or_group(self) -> ConditionBuilder:
        """Open a new OR group.  Close with ``end_group()``."""
        self._stack.append((MergeOperator.OR, []))
        return self

    def end_group(self) -> ConditionBuilder:
        """Close the current group and add it to the parent."""
        if not self._stack:
            raise ValueError("No open group to close")
        operator, members = self._stack.pop()
        self._current_list().append(_combine(operator, members))
        return self

    # -- build ---------------------------------------------------------------

    def build(self) -> Condition:
        """
        Finalise and return the composed condition.

        A single top-level condition is returned as is; several are ANDed.

        Raises:
            ValueError: If groups are still open or no conditions were added.
        """
        if self._stack:
            raise ValueError(
                f"{len(self._stack)} group(s) still open, "
                f"call end_group() before build()"
            )
        if not self._conditions:
            raise ValueError("No conditions added to builder")
        return _combine(MergeOperator.AND, self._conditions)

    def reset(self) -> ConditionBuilder:
        """Clear all conditions and return ``self`` for reuse."""
        self._conditions.clear()
        self._stack.clear()
        return self

    # -- internals -----------------------------------------------------------

    def _current_list(self) -> list[Condition]:
        if self._stack:
            return self._stack[-1][1]
        return self._conditions


def _combine(operator: MergeOperator, members: list[Condition]) -> Condition:
    if not members:
        raise ValueError("Cannot create an empty group")
    if len(members) == 1:
        return members[0]
    return ConditionMerge(operator, tuple(members))
