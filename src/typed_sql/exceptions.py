"""
Exception hierarchy for typed-sql.

All library exceptions inherit from ``TypedSqlError`` and provide
``to_dict()`` for API-friendly error responses.  Errors raised by the
database driver while executing a query are *not* wrapped: they keep their
own type and only get the failing SQL prepended to their message.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class TypedSqlError(Exception):
    """Root exception for the entire typed-sql library."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class SchemaError(TypedSqlError):
    """A table or column definition cannot be compiled to DDL."""

    def __init__(self, message: str, column: str | None = None) -> None:
        self.message = message
        self.column = column
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "SCHEMA_ERROR",
            "message": self.message,
            "column": self.column,
        }


class QueryBuildError(TypedSqlError):
    """DML input cannot be compiled into a query."""


class ConditionError(QueryBuildError):
    """
    A condition has an invalid structure.

    ``path`` points at the offending node (``<root>[2][1]``), ``condition``
    holds the node or literal that failed.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        condition: Any = None,
    ) -> None:
        self.message = message
        self.path = path
        self.condition = condition
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "CONDITION_ERROR",
            "message": self.message,
            "path": self.path,
        }


class UnknownMergeOperatorError(ConditionError):
    """
    A merge-looking literal used an operator other than ``AND`` / ``OR``.

    Provides fuzzy-matched suggestions for the likely intended operator.
    """

    def __init__(
        self,
        operator: str,
        valid_operators: list[str],
        path: str | None = None,
    ) -> None:
        self.operator = operator
        self.valid_operators = valid_operators
        self.suggestions = get_close_matches(
            operator.upper(), valid_operators, n=2, cutoff=0.5
        )

        message = f"Unknown merge operator: '{operator}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        message += " Merge operators are case-sensitive."
        super().__init__(message, path=path, condition=operator)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNKNOWN_MERGE_OPERATOR",
            "operator": self.operator,
            "suggestions": self.suggestions,
            "path": self.path,
        }


class SqlConnectionError(TypedSqlError):
    """The underlying driver is unusable (not connected, failed to open)."""


class NotFoundError(TypedSqlError):
    """Raised when a lookup matches no rows."""


class RowNotFoundError(NotFoundError):
    """Raised when a single-row lookup on a table returns nothing."""

    def __init__(self, table: str, where: Any = None, message: str | None = None) -> None:
        self.table = table
        self.where = where
        super().__init__(message or f"No row in '{table}' matches {where!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "ROW_NOT_FOUND",
            "table": self.table,
            "message": str(self),
        }


__all__: list[str] = [
    "ConditionError",
    "NotFoundError",
    "QueryBuildError",
    "RowNotFoundError",
    "SchemaError",
    "SqlConnectionError",
    "TypedSqlError",
    "UnknownMergeOperatorError",
]
