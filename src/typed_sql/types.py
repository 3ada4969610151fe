"""Scalar values, compiled queries and driver results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple, Union

SqlValue = Union[str, int, float, bool, None]
SqlRow = dict[str, Any]
SqlSetValueMap = dict[str, SqlValue]

_SCALAR_TYPES = (str, int, float, bool)


def is_sql_value(value: Any) -> bool:
    """Return ``True`` for ``None`` and the scalar types a placeholder can bind."""
    return value is None or isinstance(value, _SCALAR_TYPES)


class ExecutableQuery(NamedTuple):
    """
    A compiled statement: SQL text with ``$n`` placeholders plus the values
    bound to them, in strictly ascending placeholder order.
    """

    sql: str
    params: tuple[SqlValue, ...] = ()

    def to_wire(self) -> list[Any]:
        """Return the ``[sql, *values]`` wire representation."""
        return [self.sql, *self.params]

    @classmethod
    def from_wire(cls, wire: list[Any] | tuple[Any, ...]) -> ExecutableQuery:
        if not wire or not isinstance(wire[0], str):
            raise ValueError("Wire query must start with the SQL text")
        return cls(wire[0], tuple(wire[1:]))


@dataclass
class SqlQueryResult:
    """Rows returned by the driver for one statement."""

    rows: list[SqlRow] = field(default_factory=list)

    def first(self) -> SqlRow | None:
        return self.rows[0] if self.rows else None
