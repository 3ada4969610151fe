"""
Compile a condition tree into a parameterized SQL fragment.

``compile_condition`` is pure: the next free placeholder number goes in as
``counter`` and comes back out in the result, so a WHERE clause can continue
numbering after the placeholders an ``UPDATE ... SET`` already used.  Values
are emitted in exactly the order their placeholders appear in the fragment.

``compile_where`` is the entry point the dialects use.  It accepts literals as
well as nodes and decorates any :class:`ConditionError` with a dump of the
offending condition.
"""

from __future__ import annotations

import re
from pprint import pformat
from typing import Any, NamedTuple

from ..exceptions import ConditionError
from ..types import SqlValue
from .ast import Condition, ConditionMerge, FieldCondition, RawCondition
from .factory import ConditionFactory

_RAW_PLACEHOLDER = re.compile(r"\$(\d+)")


class CompiledCondition(NamedTuple):
    fragment: str
    values: tuple[SqlValue, ...]
    counter: int


def compile_condition(
    current_table: str,
    condition: Condition,
    counter: int = 1,
) -> CompiledCondition:
    """
    Lower ``condition`` into ``(fragment, values, next_counter)``.

    Args:
        current_table: Table that bare field names belong to.
        condition: A decoded condition node.
        counter: Number of the first placeholder this fragment may use.
    """
    if isinstance(condition, ConditionMerge):
        return _compile_merge(current_table, condition, counter)
    if isinstance(condition, FieldCondition):
        return _compile_field(current_table, condition, counter)
    if isinstance(condition, RawCondition):
        return _compile_raw(condition, counter)
    raise ConditionError(
        f"Unknown condition shape: {type(condition).__name__}",
        condition=condition,
    )


def compile_where(
    current_table: str,
    condition: Any,
    counter: int = 1,
) -> CompiledCondition:
    """Decode ``condition`` if needed, then compile it with diagnostics."""
    try:
        node = ConditionFactory.from_literal(condition)
        return compile_condition(current_table, node, counter)
    except ConditionError as exc:
        raise ConditionError(
            f"{exc.message}\n{describe_condition(condition)}",
            path=exc.path,
            condition=condition,
        ) from exc


def describe_condition(condition: Any) -> str:
    """Return the type and a pretty-printed dump of ``condition``."""
    literal = condition.to_literal() if hasattr(condition, "to_literal") else condition
    return (
        f"Condition type: {type(condition).__name__}\n"
        f"Condition: {pformat(literal, indent=4, width=72)}"
    )


def quote_field(table: str, field: str) -> str:
    return f'"{table}".{field}'


# ---------------------------------------------------------------------------
# Internal compilation
# ---------------------------------------------------------------------------


def _compile_merge(
    current_table: str,
    merge: ConditionMerge,
    counter: int,
) -> CompiledCondition:
    fragments: list[str] = []
    values: list[SqlValue] = []
    for member in merge.conditions:
        compiled = compile_condition(current_table, member, counter)
        fragment = compiled.fragment
        # Raw text may carry its own AND / OR; keep it grouped as one member.
        if isinstance(member, RawCondition):
            fragment = f"({fragment})"
        fragments.append(fragment)
        values.extend(compiled.values)
        counter = compiled.counter
    joiner = f" {merge.operator.value} "
    return CompiledCondition(f"({joiner.join(fragments)})", tuple(values), counter)


def _compile_field(
    current_table: str,
    condition: FieldCondition,
    counter: int,
) -> CompiledCondition:
    selector = condition.selector
    column = quote_field(selector.table or current_table, selector.field)

    if len(condition.values) > 1:
        placeholders = ", ".join(
            f"${n}" for n in range(counter, counter + len(condition.values))
        )
        keyword = "NOT IN" if selector.negate else "IN"
        return CompiledCondition(
            f"{column} {keyword} ({placeholders})",
            condition.values,
            counter + len(condition.values),
        )

    if condition.is_null_test:
        keyword = "IS NOT NULL" if selector.negate else "IS NULL"
        return CompiledCondition(f"{column} {keyword}", (), counter)

    comparator = "!=" if selector.negate else "="
    return CompiledCondition(
        f"{column} {comparator} ${counter}", condition.values, counter + 1
    )


def _compile_raw(condition: RawCondition, counter: int) -> CompiledCondition:
    offset = counter - 1
    count = len(condition.values)

    def _renumber(match: re.Match[str]) -> str:
        number = int(match.group(1))
        if number < 1 or number > count:
            raise ConditionError(
                f"Raw condition references ${number} but only {count} "
                f"value(s) were given",
                condition=condition,
            )
        return f"${number + offset}"

    fragment = _RAW_PLACEHOLDER.sub(_renumber, condition.query)
    return CompiledCondition(fragment, condition.values, counter + count)
