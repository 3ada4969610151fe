"""
SqlClient: one logical connection with idle timeout and shared lifecycle.

The client owns a single :class:`ISqlConnection`.  It opens it lazily on the
first :meth:`SqlClient.execute`, keeps it open while queries keep arriving and
closes it after ``connection_time`` seconds without a query.  Concurrent
callers of :meth:`connect` / :meth:`close` share the in-flight attempt instead
of starting their own.

Usage::

    client = SqlClient(PostgresConnection.from_config(config))
    users = client.get_table("user", [Column(name="id", type="SERIAL", primary_key=True)])
    await client.create_all_tables()
    rows = await users.select(where=["id", 1])
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Iterable
from typing import TYPE_CHECKING, Any, Callable, Optional

from .config import DEFAULT_CONNECTION_TIME
from .schema import Column, ForeignKey, TableDefinition
from .table import SqlTable

if TYPE_CHECKING:
    from types import TracebackType

    from .config import ClientSettings
    from .dialects.base import AbstractSqlDialect
    from .ports.connection import ISqlConnection
    from .types import ExecutableQuery, SqlQueryResult

logger = logging.getLogger("typed_sql.client")

QueryCallback = Callable[["ExecutableQuery", "SqlClient"], Optional[Awaitable[None]]]

_QUERY_ERROR_PREFIX = "Error while execute following query:\n```sql\n{sql}\n```\n"


class SqlClient:
    """Lifecycle manager, table registry and query interceptor."""

    def __init__(
        self,
        connection: ISqlConnection,
        connection_time: float = DEFAULT_CONNECTION_TIME,
        list_queries: bool = False,
        query_callback: QueryCallback | None = None,
    ) -> None:
        self.connection = connection
        self.connection_time = connection_time
        self.list_queries = list_queries
        self.query_callback = query_callback

        self._queries: list[ExecutableQuery] = []
        self._tables: list[SqlTable] = []
        self._connecting: asyncio.Task[None] | None = None
        self._closing: asyncio.Task[None] | None = None
        self._idle_task: asyncio.Task[None] | None = None

    @classmethod
    def from_settings(
        cls,
        connection: ISqlConnection,
        settings: ClientSettings,
        query_callback: QueryCallback | None = None,
    ) -> SqlClient:
        return cls(
            connection,
            connection_time=settings.connection_time,
            list_queries=settings.list_queries,
            query_callback=query_callback,
        )

    @property
    def dialect(self) -> AbstractSqlDialect:
        return self.connection.get_dialect()

    # ------------------------------------------------------------------ #
    # Lifecycle                                                           #
    # ------------------------------------------------------------------ #

    async def connect(self) -> None:
        """Open the connection unless it is live, and (re)arm the idle timer."""
        if self._closing is not None:
            await asyncio.shield(self._closing)
        if self._connecting is not None:
            await asyncio.shield(self._connecting)

        self._arm_idle_timer()
        if await self.connection.is_connected():
            return

        # Another caller may have started connecting while we were probing.
        if self._connecting is None:
            self._connecting = asyncio.create_task(self._open())
        await asyncio.shield(self._connecting)

    async def close(self) -> None:
        """Close the connection if it is live and stop the idle timer."""
        if self._connecting is not None:
            await asyncio.shield(self._connecting)
        if self._closing is not None:
            await asyncio.shield(self._closing)

        self._cancel_idle_timer()
        if not await self.connection.is_connected():
            return

        if self._closing is None:
            self._closing = asyncio.create_task(self._shutdown())
        await asyncio.shield(self._closing)

    async def _open(self) -> None:
        try:
            await self.connection.connect()
            logger.debug("Connection opened (idle timeout %.1fs)", self.connection_time)
        finally:
            self._connecting = None

    async def _shutdown(self) -> None:
        try:
            await self.connection.close()
            logger.debug("Connection closed")
        finally:
            self._closing = None

    def _arm_idle_timer(self) -> None:
        self._cancel_idle_timer()
        self._idle_task = asyncio.create_task(self._close_when_idle())

    def _cancel_idle_timer(self) -> None:
        task, self._idle_task = self._idle_task, None
        if task is not None and task is not asyncio.current_task():
            task.cancel()

    async def _close_when_idle(self) -> None:
        await asyncio.sleep(self.connection_time)
        # Drop our own handle first so close() does not cancel this task.
        self._idle_task = None
        logger.debug("Connection idle for %.1fs, closing", self.connection_time)
        try:
            await self.close()
        except Exception:
            logger.exception("Failed to close idle connection")

    async def __aenter__(self) -> SqlClient:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ------------------------------------------------------------------ #
    # Execution                                                           #
    # ------------------------------------------------------------------ #

    async def execute(self, query: ExecutableQuery) -> SqlQueryResult:
        """
        Run ``query`` on the managed connection.

        Connects first when needed.  If the driver fails, the exception keeps
        its type and its message is prefixed with the failing SQL.
        """
        # A pending close or open must finish before the connection is used.
        pending = self._closing is not None or self._connecting is not None
        if not pending and await self.connection.is_connected():
            self._arm_idle_timer()
        else:
            await self.connect()

        if self.query_callback is not None:
            outcome = self.query_callback(query, self)
            if inspect.isawaitable(outcome):
                await outcome
        if self.list_queries:
            self._queries.append(query)

        logger.debug("Executing %s with %d parameter(s)", query.sql, len(query.params))
        try:
            return await self.connection.execute(query)
        except Exception as exc:
            _prefix_with_query(exc, query)
            logger.error("Query failed: %s", query.sql)
            raise

    # -- Query log --------------------------------------------------------

    @property
    def queries(self) -> list[ExecutableQuery]:
        """Recorded queries, oldest first (only filled when ``list_queries``)."""
        return list(self._queries)

    def shift_query(self) -> ExecutableQuery | None:
        """Remove and return the oldest recorded query."""
        if not self._queries:
            return None
        return self._queries.pop(0)

    def clear_queries(self) -> None:
        self._queries.clear()

    # ------------------------------------------------------------------ #
    # Table registry                                                      #
    # ------------------------------------------------------------------ #

    def get_table(
        self,
        name: str,
        columns: Iterable[Column | dict[str, Any]] = (),
        foreign_keys: Iterable[ForeignKey | dict[str, Any]] = (),
    ) -> SqlTable:
        """Create a table facade bound to this client and register it."""
        definition = TableDefinition(
            name=name,
            columns=tuple(columns),
            foreign_keys=tuple(foreign_keys),
        )
        table = SqlTable(self, definition)
        self._tables.append(table)
        return table

    def get_sql_tables(self) -> list[SqlTable]:
        return list(self._tables)

    def reset_sql_tables(self) -> None:
        self._tables = []

    def remove_table(self, table: SqlTable | str) -> None:
        """Unregister every table with the same name as ``table``."""
        name = table if isinstance(table, str) else table.name
        self._tables = [t for t in self._tables if t.name != name]

    async def create_all_tables(self) -> None:
        """Create tables in registration order; no dependency sorting."""
        for table in list(self._tables):
            await table.create_table()

    async def drop_all_tables(self) -> None:
        """Drop tables in reverse registration order."""
        for table in reversed(list(self._tables)):
            await table.drop_table()

    async def get_tables(self) -> SqlQueryResult:
        return await self.execute(self.dialect.get_tables_query())

    async def get_databases(self) -> SqlQueryResult:
        return await self.execute(self.dialect.get_databases_query())


def _prefix_with_query(exc: Exception, query: ExecutableQuery) -> None:
    prefix = _QUERY_ERROR_PREFIX.format(sql=query.sql)
    if exc.args and isinstance(exc.args[0], str):
        exc.args = (prefix + exc.args[0], *exc.args[1:])
    else:
        exc.args = (prefix + str(exc),)
