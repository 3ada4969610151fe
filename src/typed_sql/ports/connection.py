"""ISqlConnection: protocol for a dialect-aware logical connection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..dialects.base import AbstractSqlDialect
    from ..types import ExecutableQuery, SqlQueryResult


@runtime_checkable
class ISqlConnection(Protocol):
    """
    A single logical connection as seen by :class:`~typed_sql.client.SqlClient`.

    ``connect`` / ``close`` are only called by the client, which guarantees
    they never overlap.  ``is_connected`` is the liveness probe the client
    uses to decide whether to open or close.
    """

    def get_dialect(self) -> AbstractSqlDialect: ...

    async def execute(self, query: ExecutableQuery) -> SqlQueryResult: ...

    async def is_connected(self) -> bool: ...

    async def connect(self) -> None: ...

    async def close(self) -> None: ...
