"""PostgresConnection: one asyncpg connection behind the ISqlConnection port."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import asyncpg

from ..dialects.postgres import PostgresSqlDialect
from ..exceptions import SqlConnectionError
from ..types import SqlQueryResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..config import PostgresConnectionConfig
    from ..dialects.base import AbstractSqlDialect
    from ..ports.driver import ISqlDriver
    from ..types import ExecutableQuery, SqlValue

logger = logging.getLogger("typed_sql.connection")


class AsyncpgDriver:
    """ISqlDriver over a single ``asyncpg`` connection."""

    def __init__(self, config: PostgresConnectionConfig, **kwargs: Any) -> None:
        self._config = config
        self._kwargs = kwargs
        self._conn: asyncpg.Connection | None = None

    async def connect(self) -> None:
        try:
            self._conn = await asyncpg.connect(
                **self._config.to_connect_kwargs(), **self._kwargs
            )
        except (OSError, asyncpg.PostgresError) as e:
            raise SqlConnectionError(
                f"Could not connect to {self._config.host}:{self._config.port}"
                f"/{self._config.database}: {e}"
            ) from e

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def query(self, text: str, params: Sequence[SqlValue]) -> SqlQueryResult:
        if self._conn is None:
            raise SqlConnectionError("Not connected; call connect() first")
        records = await self._conn.fetch(text, *params)
        return SqlQueryResult([dict(record) for record in records])


class PostgresConnection:
    """
    Dialect-aware logical connection over any :class:`ISqlDriver`.

    Pass an :class:`~typed_sql.adapters.memory.InMemoryDriver` to run the
    whole stack without a server::

        connection = PostgresConnection(InMemoryDriver())
    """

    def __init__(
        self,
        driver: ISqlDriver,
        dialect: AbstractSqlDialect | None = None,
    ) -> None:
        self.driver = driver
        self.dialect = dialect or PostgresSqlDialect()
        self.connected = False

    @classmethod
    def from_config(
        cls, config: PostgresConnectionConfig, **kwargs: Any
    ) -> PostgresConnection:
        return cls(AsyncpgDriver(config, **kwargs))

    def get_dialect(self) -> AbstractSqlDialect:
        return self.dialect

    async def execute(self, query: ExecutableQuery) -> SqlQueryResult:
        return await self.driver.query(query.sql, list(query.params))

    async def is_connected(self) -> bool:
        return self.connected

    async def connect(self) -> None:
        await self.driver.connect()
        self.connected = True
        logger.debug("Postgres connection opened")

    async def close(self) -> None:
        await self.driver.close()
        self.connected = False
        logger.debug("Postgres connection closed")
