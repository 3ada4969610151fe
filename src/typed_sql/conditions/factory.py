"""
Decode the literal condition syntax into tagged condition nodes.

Literal forms::

    ["name", "tester"]                          # "t".name = $1
    [["accepted", "NOT"], True]                 # "t".accepted != $1
    [["ra", "name"], "a", "b"]                  # "ra".name IN ($1, $2)
    [["ra", "deleted_at", "NOT"], None]         # "ra".deleted_at IS NOT NULL
    ["AND", cond, cond, ...]                    # (cond AND cond ...)
    {"query": "age >= $1", "values": [18]}      # raw SQL

Merge tags are case-sensitive: ``["and", ...]`` is not a merge.
Already-built nodes pass through untouched, so literals and nodes can be mixed
freely inside one tree.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..exceptions import ConditionError, UnknownMergeOperatorError
from ..types import is_sql_value
from .ast import (
    CONDITION_TYPES,
    Condition,
    ConditionMerge,
    FieldCondition,
    FieldSelector,
    RawCondition,
)
from .operators import COMPARISON_TOKENS, MergeOperator, SelectorModifier

_MERGE_TAGS: frozenset[str] = frozenset(m.value for m in MergeOperator)
_MODIFIERS: frozenset[str] = frozenset(m.value for m in SelectorModifier)


def _is_merge_literal(literal: Any) -> bool:
    return (
        isinstance(literal, list | tuple)
        and len(literal) > 0
        and isinstance(literal[0], str)
        and literal[0] in _MERGE_TAGS
    )


class ConditionFactory:
    """
    Factory for building condition trees from their literal representation.

    Supports:
    - ``from_literal(data)``: decode (fail-fast) into tagged nodes
    - ``validate(data)``    : collect every error message without raising
    """

    # ------------------------------------------------------------------ #
    # Public API                                                          #
    # ------------------------------------------------------------------ #

    @staticmethod
    def from_literal(literal: Any) -> Condition:
        """
        Decode a condition literal.

        Raises:
            ConditionError: On the first structural problem found; ``path``
                locates the node, e.g. ``<root>[2][1]``.
        """
        return ConditionFactory._build(literal, path="<root>")

    @staticmethod
    def validate(literal: Any) -> list[str]:
        """
        Validate a condition literal and return a list of error messages.

        Returns an empty list when the structure is valid.
        """
        errors: list[str] = []
        ConditionFactory._collect_errors(literal, errors, path="<root>")
        return errors

    # ------------------------------------------------------------------ #
    # Internal: recursive build                                          #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build(literal: Any, *, path: str) -> Condition:
        if isinstance(literal, CONDITION_TYPES):
            return literal
        if isinstance(literal, list | tuple):
            if not literal:
                raise ConditionError("Empty condition", path=path, condition=literal)
            if _is_merge_literal(literal):
                return ConditionFactory._build_merge(literal, path=path)
            return ConditionFactory._build_field(literal, path=path)
        if isinstance(literal, Mapping):
            return ConditionFactory._build_raw(literal, path=path)
        raise ConditionError(
            f"Unknown condition shape: {type(literal).__name__}",
            path=path,
            condition=literal,
        )

    @staticmethod
    def _build_merge(literal: list[Any] | tuple[Any, ...], *, path: str) -> Condition:
        operator = MergeOperator(literal[0])
        if len(literal) < 3:
            raise ConditionError(
                f"{operator.value} merge needs at least 2 conditions, "
                f"got {len(literal) - 1}",
                path=path,
                condition=literal,
            )
        members = tuple(
            ConditionFactory._build(child, path=f"{path}[{idx}]")
            for idx, child in enumerate(literal[1:], start=1)
        )
        return ConditionMerge(operator, members)

    @staticmethod
    def _build_field(literal: list[Any] | tuple[Any, ...], *, path: str) -> Condition:
        selector = ConditionFactory._parse_selector(literal[0], path=f"{path}[0]")
        values = tuple(literal[1:])

        if not values:
            raise ConditionError(
                f"Field condition on '{selector.field}' has no values",
                path=path,
                condition=literal,
            )

        if not all(is_sql_value(v) for v in values):
            head = literal[0]
            if isinstance(head, str) and head.upper() in _MERGE_TAGS:
                raise UnknownMergeOperatorError(head, sorted(_MERGE_TAGS), path=path)
            raise ConditionError(
                f"Field condition on '{selector.field}' accepts only scalar values",
                path=path,
                condition=literal,
            )

        if (
            len(values) > 1
            and isinstance(values[0], str)
            and values[0] in COMPARISON_TOKENS
        ):
            raise ConditionError(
                f"Comparison tuple [{selector.field!r}, {values[0]!r}, ...] is not "
                f"supported; field conditions only test equality, NULL and IN "
                f"membership. Use a raw condition for other comparisons",
                path=path,
                condition=literal,
            )

        return FieldCondition(selector, values)

    @staticmethod
    def _build_raw(literal: Mapping[str, Any], *, path: str) -> Condition:
        if "query" not in literal:
            raise ConditionError(
                "Raw condition is missing 'query'", path=path, condition=literal
            )
        query = literal["query"]
        if not isinstance(query, str):
            raise ConditionError(
                f"Raw condition query must be a string, got {type(query).__name__}",
                path=path,
                condition=literal,
            )
        values = literal.get("values", ())
        if not isinstance(values, list | tuple):
            raise ConditionError(
                f"Raw condition values must be a list, got {type(values).__name__}",
                path=path,
                condition=literal,
            )
        try:
            return RawCondition(query, tuple(values))
        except ConditionError as exc:
            exc.path = exc.path or path
            raise

    @staticmethod
    def _parse_selector(selector: Any, *, path: str) -> FieldSelector:
        if isinstance(selector, str):
            return ConditionFactory._selector(selector, None, False, path=path)

        if isinstance(selector, list | tuple) and all(
            isinstance(part, str) for part in selector
        ):
            if len(selector) == 2:
                first, second = selector
                if second.upper() == SelectorModifier.NOT.value:
                    return ConditionFactory._selector(first, None, True, path=path)
                return ConditionFactory._selector(second, first, False, path=path)
            if len(selector) == 3:
                table, field, modifier = selector
                if modifier.upper() not in _MODIFIERS:
                    raise ConditionError(
                        f"Malformed field selector {list(selector)!r}: third "
                        f"element must be 'IS' or 'NOT'",
                        path=path,
                        condition=selector,
                    )
                return ConditionFactory._selector(
                    field,
                    table,
                    modifier.upper() == SelectorModifier.NOT.value,
                    path=path,
                )

        raise ConditionError(
            f"Malformed field selector: {selector!r}",
            path=path,
            condition=selector,
        )

    @staticmethod
    def _selector(
        field: str, table: str | None, negate: bool, *, path: str
    ) -> FieldSelector:
        try:
            return FieldSelector(field, table, negate)
        except ConditionError as exc:
            exc.path = exc.path or path
            raise

    # ------------------------------------------------------------------ #
    # Internal: validation                                               #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _collect_errors(literal: Any, errors: list[str], *, path: str) -> None:
        """Recursive error collection (non-throwing)."""
        if _is_merge_literal(literal):
            if len(literal) < 3:
                errors.append(
                    f"{path}: {literal[0]} merge needs at least 2 conditions, "
                    f"got {len(literal) - 1}"
                )
            for idx, child in enumerate(literal[1:], start=1):
                ConditionFactory._collect_errors(child, errors, path=f"{path}[{idx}]")
            return

        try:
            ConditionFactory._build(literal, path=path)
        except ConditionError as exc:
            errors.append(f"{exc.path or path}: {exc.message}")
