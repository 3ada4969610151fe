"""PostgreSQL dialect: ``$n`` placeholders, ``RETURNING``, ``CASCADE`` drops."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..conditions.compiler import compile_where
from ..exceptions import QueryBuildError
from ..types import ExecutableQuery
from .base import AbstractSqlDialect, ColumnSelector, JoinSpec

if TYPE_CHECKING:
    from ..schema import TableDefinition
    from ..types import SqlSetValueMap, SqlValue


class PostgresSqlDialect(AbstractSqlDialect):
    def get_dialect_name(self) -> str:
        return "postgres"

    def get_databases_query(self) -> ExecutableQuery:
        return ExecutableQuery("SELECT * FROM pg_database")

    def get_tables_query(self) -> ExecutableQuery:
        return ExecutableQuery(
            "SELECT *"
            " FROM pg_catalog.pg_tables"
            " WHERE"
            " schemaname != 'pg_catalog' AND schemaname != 'information_schema'"
        )

    def get_table_structure(self, table: TableDefinition) -> ExecutableQuery:
        return ExecutableQuery(
            "SELECT table_name,"
            " string_agg("
            "column_name || ' ' || data_type"
            " || CASE WHEN is_nullable = 'YES' THEN ' NULL' ELSE ' NOT NULL' END,"
            " ', ' ORDER BY ordinal_position) AS columns"
            " FROM information_schema.columns"
            " WHERE table_schema = current_schema() AND table_name = $1"
            " GROUP BY table_name",
            (table.name,),
        )

    def create_table_query(self, table: TableDefinition) -> ExecutableQuery:
        line = ", ".join(self.compile_column(c) for c in table.columns)
        if table.foreign_keys:
            line += "," + ",".join(
                f" FOREIGN KEY({fk.column_name})"
                f" REFERENCES {self.quote_identifier(fk.foreign_table_name)}"
                f" ({fk.foreign_column_name}) ON DELETE CASCADE"
                for fk in table.foreign_keys
            )
        return ExecutableQuery(
            f"CREATE TABLE IF NOT EXISTS {self.quote_identifier(table.name)}({line})"
        )

    def drop_table_query(self, table: TableDefinition) -> ExecutableQuery:
        return ExecutableQuery(
            f"DROP TABLE IF EXISTS {self.quote_identifier(table.name)} CASCADE"
        )

    def insert_query(
        self,
        table: TableDefinition,
        values: SqlSetValueMap,
        returning: ColumnSelector = None,
    ) -> ExecutableQuery:
        if not values:
            raise QueryBuildError(f"Insert into '{table.name}' needs at least one value")
        columns = ", ".join(values)
        placeholders = ", ".join(f"${n}" for n in range(1, len(values) + 1))
        line = f"INSERT INTO {self.quote_identifier(table.name)}"
        line += f" ({columns})"
        line += f" VALUES ({placeholders})"
        if returning is not None:
            line += f" RETURNING {self.compile_projection(returning)}"
        return ExecutableQuery(line, tuple(values.values()))

    def update_query(
        self,
        table: TableDefinition,
        values: SqlSetValueMap,
        where: Any = None,
        returning: ColumnSelector = None,
    ) -> ExecutableQuery:
        if not values:
            raise QueryBuildError(f"Update of '{table.name}' needs at least one value")
        assignments = ", ".join(
            f"{column}=${n}" for n, column in enumerate(values, start=1)
        )
        line = f"UPDATE {self.quote_identifier(table.name)} SET {assignments}"
        params: list[SqlValue] = list(values.values())
        if where is not None:
            compiled = compile_where(table.name, where, len(params) + 1)
            line += f" WHERE {compiled.fragment}"
            params.extend(compiled.values)
        if returning is not None:
            line += f" RETURNING {self.compile_projection(returning)}"
        return ExecutableQuery(line, tuple(params))

    def select_query(
        self,
        table: TableDefinition,
        select: ColumnSelector = None,
        where: Any = None,
        limit: int | None = None,
        *joins: JoinSpec,
    ) -> ExecutableQuery:
        line = f"SELECT {self.compile_projection(select)}"
        line += f" FROM {self.quote_identifier(table.name)}"
        line += self.compile_joins(table, joins)
        params: tuple[SqlValue, ...] = ()
        if where is not None:
            compiled = compile_where(table.name, where, 1)
            line += f" WHERE {compiled.fragment}"
            params = compiled.values
        if limit is not None and limit > 0:
            line += f" LIMIT {int(limit)}"
        return ExecutableQuery(line, params)

    def delete_query(
        self,
        table: TableDefinition,
        where: Any = None,
        returning: ColumnSelector = None,
    ) -> ExecutableQuery:
        line = f"DELETE FROM {self.quote_identifier(table.name)}"
        params: tuple[SqlValue, ...] = ()
        if where is not None:
            compiled = compile_where(table.name, where, 1)
            line += f" WHERE {compiled.fragment}"
            params = compiled.values
        if returning is not None:
            line += f" RETURNING {self.compile_projection(returning)}"
        return ExecutableQuery(line, params)
