"""InMemoryDriver: recording fake ISqlDriver for unit tests."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, NamedTuple

from ...exceptions import SqlConnectionError
from ...types import SqlQueryResult, SqlRow

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ...types import SqlValue


class RecordedQuery(NamedTuple):
    text: str
    params: list[SqlValue]


class InMemoryDriver:
    """In-memory implementation of ``ISqlDriver``.

    Every call to :meth:`query` is recorded.  Results are served from a queue
    filled with :meth:`queue_rows` / :meth:`queue_error`; with an empty queue
    each query returns no rows.
    """

    def __init__(self, require_connect: bool = True) -> None:
        self.require_connect = require_connect
        self.queries: list[RecordedQuery] = []
        self.connected = False
        self.connect_calls = 0
        self.close_calls = 0
        self._results: deque[list[SqlRow] | BaseException] = deque()

    async def connect(self) -> None:
        self.connect_calls += 1
        self.connected = True

    async def close(self) -> None:
        self.close_calls += 1
        self.connected = False

    async def query(self, text: str, params: Sequence[SqlValue]) -> SqlQueryResult:
        if self.require_connect and not self.connected:
            raise SqlConnectionError("Not connected; call connect() first")
        self.queries.append(RecordedQuery(text, list(params)))
        if not self._results:
            return SqlQueryResult()
        result = self._results.popleft()
        if isinstance(result, BaseException):
            raise result
        return SqlQueryResult([dict(row) for row in result])

    # ── Test helpers ─────────────────────────────────────────────

    def queue_rows(self, *rows: SqlRow) -> None:
        """Serve ``rows`` as the result of the next unanswered query."""
        self._results.append(list(rows))

    def queue_error(self, exc: BaseException) -> None:
        """Make the next unanswered query raise ``exc``."""
        self._results.append(exc)

    def shift_query(self) -> RecordedQuery:
        if not self.queries:
            return RecordedQuery("No query found!", [])
        return self.queries.pop(0)

    def clear(self) -> None:
        self.queries.clear()
        self._results.clear()
