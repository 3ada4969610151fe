from .base import AbstractSqlDialect, ColumnSelector, JoinSpec
from .postgres import PostgresSqlDialect

__all__ = [
    "AbstractSqlDialect",
    "ColumnSelector",
    "JoinSpec",
    "PostgresSqlDialect",
]
