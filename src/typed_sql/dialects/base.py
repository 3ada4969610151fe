"""
SQL dialect strategy.

A dialect turns table definitions, value maps and conditions into
:class:`ExecutableQuery` objects for one database backend.  The shared
helpers for column DDL, projections and joins live on the base class so a
backend only overrides what it spells differently.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Union

from ..exceptions import QueryBuildError, SchemaError
from ..schema import Column, SqlJoin

if TYPE_CHECKING:
    from ..schema import TableDefinition
    from ..types import ExecutableQuery, SqlSetValueMap

ColumnSelector = Union[str, Sequence[Union[str, Sequence[str]]], None]
"""``None`` / ``"*"``, a column name, or a list of names and
``(table, column[, alias])`` tuples."""

JoinSpec = Union[SqlJoin, Mapping[str, Any]]

_DEFAULT_FAMILIES: dict[type, str] = {
    bool: "boolean",
    int: "numeric",
    float: "numeric",
    str: "text",
}


class AbstractSqlDialect(ABC):
    """Strategy interface for generating DDL / DML for one backend."""

    @abstractmethod
    def get_dialect_name(self) -> str: ...

    @abstractmethod
    def get_databases_query(self) -> ExecutableQuery: ...

    @abstractmethod
    def get_tables_query(self) -> ExecutableQuery: ...

    @abstractmethod
    def get_table_structure(self, table: TableDefinition) -> ExecutableQuery:
        """Query yielding one row describing ``table``, or none if it is missing."""
        ...

    @abstractmethod
    def create_table_query(self, table: TableDefinition) -> ExecutableQuery: ...

    @abstractmethod
    def drop_table_query(self, table: TableDefinition) -> ExecutableQuery: ...

    @abstractmethod
    def insert_query(
        self,
        table: TableDefinition,
        values: SqlSetValueMap,
        returning: ColumnSelector = None,
    ) -> ExecutableQuery: ...

    @abstractmethod
    def update_query(
        self,
        table: TableDefinition,
        values: SqlSetValueMap,
        where: Any = None,
        returning: ColumnSelector = None,
    ) -> ExecutableQuery: ...

    @abstractmethod
    def select_query(
        self,
        table: TableDefinition,
        select: ColumnSelector = None,
        where: Any = None,
        limit: int | None = None,
        *joins: JoinSpec,
    ) -> ExecutableQuery: ...

    @abstractmethod
    def delete_query(
        self,
        table: TableDefinition,
        where: Any = None,
        returning: ColumnSelector = None,
    ) -> ExecutableQuery: ...

    # ------------------------------------------------------------------ #
    # Shared helpers                                                      #
    # ------------------------------------------------------------------ #

    def quote_identifier(self, name: str) -> str:
        return f'"{name}"'

    def compile_projection(self, select: ColumnSelector) -> str:
        """Render a SELECT / RETURNING column list."""
        if select is None or select == "*":
            return "*"
        if isinstance(select, str):
            select = [select]

        parts: list[str] = []
        for item in select:
            if isinstance(item, str):
                parts.append(self.quote_identifier(item))
            elif (
                isinstance(item, Sequence)
                and len(item) in (2, 3)
                and all(isinstance(part, str) for part in item)
            ):
                line = f"{self.quote_identifier(item[0])}.{self.quote_identifier(item[1])}"
                if len(item) == 3:
                    line += f" AS {self.quote_identifier(item[2])}"
                parts.append(line)
            else:
                raise QueryBuildError(f"Malformed column selector: {item!r}")

        if not parts:
            raise QueryBuildError("Column selector list is empty")
        return ", ".join(parts)

    def compile_default(self, column: Column) -> str:
        """Render the literal of a ``DEFAULT`` clause."""
        value = column.default
        if value is None:
            return "NULL"

        family = _DEFAULT_FAMILIES.get(type(value))
        if family is None:
            raise SchemaError(
                f"Default of column '{column.name}' has type "
                f"{type(value).__name__}; expected str, int, float, bool or None",
                column=column.name,
            )
        if column.type_family is not None and column.type_family != family:
            raise SchemaError(
                f"Default {value!r} of column '{column.name}' does not match "
                f"its type {column.type}",
                column=column.name,
            )

        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        if isinstance(value, (int, float)):
            return str(value)
        escaped = value.replace("'", "\\'")
        return f"'{escaped}'"

    def compile_column(self, column: Column) -> str:
        """``name TYPE[(size)] [UNIQUE|PRIMARY KEY] NULL|NOT NULL [DEFAULT x]``."""
        line = f"{column.name} {column.type.upper()}"
        if column.size:
            line += f"({column.size})"
        # UNIQUE takes precedence over PRIMARY KEY.
        if column.unique:
            line += " UNIQUE"
        elif column.primary_key:
            line += " PRIMARY KEY"
        line += " NULL" if column.nullable else " NOT NULL"
        if column.has_default:
            line += f" DEFAULT {self.compile_default(column)}"
        return line

    def compile_joins(self, table: TableDefinition, joins: Sequence[JoinSpec]) -> str:
        """Render join clauses in the given order, each with a leading space."""
        line = ""
        for item in joins:
            join = item if isinstance(item, SqlJoin) else SqlJoin.model_validate(item)
            target = self.quote_identifier(join.target_table)
            line += f" {join.join or 'INNER'} JOIN {target}"
            if join.alias:
                line += f" {join.alias}"
            reference = self.quote_identifier(join.alias or join.target_table)
            source = self.quote_identifier(join.source_table or table.name)
            line += f" ON {reference}.{join.target_key} = {source}.{join.source_key}"
        return line
