"""Table, column, foreign-key and join definitions."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ColumnType = str
"""Free-form SQL type name (``SERIAL``, ``VARCHAR``, ``INT``, ``BOOL``, ...)."""

JoinKind = Literal["INNER", "LEFT", "RIGHT", "FULL"]

_TYPE_FAMILIES: dict[str, str] = {
    "SERIAL": "numeric",
    "BIGSERIAL": "numeric",
    "SMALLSERIAL": "numeric",
    "INT": "numeric",
    "INTEGER": "numeric",
    "SMALLINT": "numeric",
    "BIGINT": "numeric",
    "LONG": "numeric",
    "REAL": "numeric",
    "FLOAT": "numeric",
    "DOUBLE": "numeric",
    "DOUBLE PRECISION": "numeric",
    "NUMERIC": "numeric",
    "DECIMAL": "numeric",
    "BOOL": "boolean",
    "BOOLEAN": "boolean",
    "VARCHAR": "text",
    "TEXT": "text",
    "CHAR": "text",
}


class Column(BaseModel):
    """
    A table column.

    ``default`` only counts as set when passed explicitly, so
    ``Column(..., default=None)`` renders ``DEFAULT NULL`` while omitting it
    renders no default clause at all.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: ColumnType
    nullable: bool = False
    size: int | None = None
    unique: bool = False
    primary_key: bool = False
    default: Any = None

    @property
    def has_default(self) -> bool:
        return "default" in self.model_fields_set

    @property
    def type_family(self) -> str | None:
        """``numeric`` / ``boolean`` / ``text`` for known types, else ``None``."""
        return _TYPE_FAMILIES.get(self.type.strip().upper())


class ForeignKey(BaseModel):
    """``column_name`` references ``foreign_table_name.foreign_column_name``."""

    model_config = ConfigDict(frozen=True)

    column_name: str
    foreign_table_name: str
    foreign_column_name: str


class SqlJoin(BaseModel):
    """
    One ``JOIN`` clause of a select.

    ``alias`` may also be given under its literal key ``as``::

        SqlJoin.model_validate(
            {"as": "ra", "source_key": "receiver_id",
             "target_table": "account", "target_key": "id"}
        )
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    join: JoinKind | None = None
    alias: str | None = Field(default=None, alias="as")
    source_table: str | None = None
    source_key: str
    target_table: str
    target_key: str


class TableDefinition(BaseModel):
    """Immutable identity of a table: its name, columns and foreign keys."""

    model_config = ConfigDict(frozen=True)

    name: str
    columns: tuple[Column, ...] = ()
    foreign_keys: tuple[ForeignKey, ...] = ()

    def column(self, name: str) -> Column | None:
        return next((c for c in self.columns if c.name == name), None)


__all__ = [
    "Column",
    "ColumnType",
    "ForeignKey",
    "JoinKind",
    "SqlJoin",
    "TableDefinition",
]
