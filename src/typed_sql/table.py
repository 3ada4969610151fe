"""SqlTable: per-table facade that compiles through the client's dialect."""

from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Any

from .exceptions import RowNotFoundError

if TYPE_CHECKING:
    from .client import SqlClient
    from .dialects.base import AbstractSqlDialect, ColumnSelector, JoinSpec
    from .schema import Column, ForeignKey, TableDefinition
    from .types import ExecutableQuery, SqlRow, SqlSetValueMap


class SqlTable:
    """
    A table definition bound to exactly one :class:`SqlClient`.

    Instances are created by :meth:`SqlClient.get_table`, which also registers
    them for :meth:`SqlClient.create_all_tables` / ``drop_all_tables``.
    ``where`` arguments accept typed condition nodes as well as the literal
    list / dict syntax.
    """

    def __init__(self, client: SqlClient, definition: TableDefinition) -> None:
        self.client = client
        self.definition = definition

    def __repr__(self) -> str:
        return f"SqlTable({self.name!r})"

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def columns(self) -> tuple[Column, ...]:
        return self.definition.columns

    @property
    def foreign_keys(self) -> tuple[ForeignKey, ...]:
        return self.definition.foreign_keys

    @property
    def dialect(self) -> AbstractSqlDialect:
        return self.client.dialect

    async def _rows(self, query: ExecutableQuery) -> list[SqlRow]:
        return (await self.client.execute(query)).rows

    # -- Schema -----------------------------------------------------------

    async def create_table(self) -> None:
        await self.client.execute(self.dialect.create_table_query(self.definition))

    async def drop_table(self) -> None:
        await self.client.execute(self.dialect.drop_table_query(self.definition))

    async def get_structure(self) -> SqlRow | None:
        """The catalog row describing this table, or ``None`` if it does not exist."""
        result = await self.client.execute(self.dialect.get_table_structure(self.definition))
        return result.first()

    async def get_structure_hash(self) -> str | None:
        structure = await self.get_structure()
        if structure is None:
            return None
        payload = json.dumps(structure, sort_keys=True, default=str)
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    async def exist(self) -> bool:
        return await self.get_structure() is not None

    # -- Rows -------------------------------------------------------------

    async def insert(
        self,
        values: SqlSetValueMap,
        returning: ColumnSelector = None,
    ) -> SqlRow | None:
        """Insert one row; returns the first ``RETURNING`` row, if any."""
        result = await self.client.execute(
            self.dialect.insert_query(self.definition, values, returning)
        )
        return result.first()

    async def update(
        self,
        values: SqlSetValueMap,
        where: Any = None,
        returning: ColumnSelector = None,
    ) -> list[SqlRow]:
        return await self._rows(
            self.dialect.update_query(self.definition, values, where, returning)
        )

    async def select(
        self,
        select: ColumnSelector = None,
        where: Any = None,
        limit: int | None = None,
        *joins: JoinSpec,
    ) -> list[SqlRow]:
        return await self._rows(
            self.dialect.select_query(self.definition, select, where, limit, *joins)
        )

    async def select_one(
        self,
        select: ColumnSelector = None,
        where: Any = None,
        *joins: JoinSpec,
    ) -> SqlRow | None:
        rows = await self.select(select, where, 1, *joins)
        return rows[0] if rows else None

    async def get_one(
        self,
        select: ColumnSelector = None,
        where: Any = None,
        *joins: JoinSpec,
    ) -> SqlRow:
        """Like :meth:`select_one` but raises :class:`RowNotFoundError` on no match."""
        row = await self.select_one(select, where, *joins)
        if row is None:
            raise RowNotFoundError(self.name, where)
        return row

    async def delete(
        self,
        where: Any = None,
        returning: ColumnSelector = None,
    ) -> list[SqlRow]:
        return await self._rows(
            self.dialect.delete_query(self.definition, where, returning)
        )
