"""ISqlDriver: protocol for the wire-level database client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..types import SqlQueryResult, SqlValue


@runtime_checkable
class ISqlDriver(Protocol):
    """
    The only surface the library needs from a database client.

    ``query`` receives SQL with ``$n`` placeholders and the positional values
    for them.  Implementations: :class:`~typed_sql.connections.postgres.AsyncpgDriver`
    for a real server, :class:`~typed_sql.adapters.memory.InMemoryDriver` for
    tests.
    """

    async def connect(self) -> None: ...

    async def close(self) -> None: ...

    async def query(self, text: str, params: Sequence[SqlValue]) -> SqlQueryResult: ...
