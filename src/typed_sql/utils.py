"""Type-name mapping and human-readable rendering of queries and results."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from .table import SqlTable
    from .types import SqlRow

_TEXT_THRESHOLD = 128

_PYTHON_TO_POSTGRES: dict[str, str] = {
    "int": "int",
    "float": "real",
    "bool": "bool",
}

_POSTGRES_TO_PYTHON: dict[str, str] = {
    "text": "str",
    "varchar": "str",
    "int": "int",
    "long": "int",
    "real": "float",
    "bool": "bool",
}

DEFAULT_QUERY_KEYWORDS: tuple[str, ...] = (
    "SELECT",
    "DELETE",
    "UPDATE",
    "INSERT",
    "FROM",
    "INTO",
    "WHERE",
    "INNER JOIN",
    "LEFT JOIN",
    "RIGHT JOIN",
    "FULL JOIN",
    "ON",
)


# ---------------------------------------------------------------------------
# Type names
# ---------------------------------------------------------------------------


def python_type_to_postgres(type_: type | str, length: int = -1) -> tuple[str, int]:
    """
    Map a Python type (or its name) to a PostgreSQL type name.

    Strings longer than 128 characters become ``text``, shorter ones
    ``varchar``.  Unknown names pass through lowercased.
    """
    name = (type_ if isinstance(type_, str) else type_.__name__).lower()
    if name == "str":
        return ("text" if length > _TEXT_THRESHOLD else "varchar"), length
    return _PYTHON_TO_POSTGRES.get(name, name), length


def postgres_type_to_python(type_name: str, length: int = -1) -> tuple[str, int]:
    """Inverse of :func:`python_type_to_postgres`; unknown names pass through."""
    name = type_name.lower()
    return _POSTGRES_TO_PYTHON.get(name, name), length


def parse_postgres_type(type_name: str) -> tuple[str, int]:
    """Split ``"VARCHAR(32)"`` into ``("varchar", 32)``; no size gives ``-1``."""
    name = type_name.strip(" \n").lower()
    if name.endswith(")") and "(" in name:
        base, _, size = name[:-1].partition("(")
        try:
            return base, int(size)
        except ValueError:
            return base, -1
    return name, -1


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _strip(text: str) -> str:
    return text.strip(" \n")


def _rejoin(text: str, separator: str, joiner: str) -> str:
    return joiner.join(_strip(part) for part in text.split(separator))


def to_pretty_query(query: str, keywords: Sequence[str] = DEFAULT_QUERY_KEYWORDS) -> str:
    """
    Put each top-level keyword on its own line and indent what follows::

        >>> print(to_pretty_query('SELECT * FROM "user" WHERE "user".name = $1'))
        SELECT
            *
        FROM
            "user"
        WHERE
            "user".name=$1
    """
    query = _rejoin(query, "\n", " ")
    query = _rejoin(query, ";", "; ")
    while "  " in query:
        query = query.replace("  ", " ")

    query = f" {query} "
    for keyword in keywords:
        query = _rejoin(query, f" {keyword} ", f"\n{keyword}\n    ")
    query = _strip(query)

    query = _rejoin(query, "=", "=")
    query = _rejoin(query, ",", ",\n    ")
    query = _rejoin(query, "(", " (\n    ")
    return _rejoin(query, ")", "\n) ")


def _cell(value: object, max_value_size: int) -> str:
    text = "NULL" if value is None else str(value)
    if len(text) > max_value_size:
        text = text[:max_value_size] + "..."
    return text


def render_result_table(title: str, rows: Sequence[SqlRow], max_value_size: int = 16) -> str:
    """Render rows as a ``|``-separated text table, truncating long values."""
    lines = [f"| {title}"]
    if not rows:
        lines.append("| EMPTY!")
        return "\n".join(lines)

    lines.append("| " + " | ".join(str(column) for column in rows[0]) + " |")
    for row in rows:
        cells = (_cell(value, max_value_size) for value in row.values())
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines)


async def show_table(
    table: SqlTable,
    max_value_size: int = 16,
    stream: TextIO | None = None,
) -> str:
    """Select every row of ``table`` and print it as a text table."""
    rendered = render_result_table(table.name, await table.select(), max_value_size)
    print(rendered, file=stream or sys.stdout)
    return rendered
