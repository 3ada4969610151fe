"""typed-sql: typed query building and condition compilation for PostgreSQL.

Tables, columns and predicates are described as data; the library compiles
them into ``$n``-parameterized SQL and runs them over one idle-timed
connection.
"""

from __future__ import annotations

# ── Adapters ────────────────────────────────────────────────────
from .adapters.memory import InMemoryDriver
from .client import SqlClient

# ── Conditions ───────────────────────────────────────────────────
from .conditions import (
    CompiledCondition,
    Condition,
    ConditionBuilder,
    ConditionFactory,
    ConditionMerge,
    FieldCondition,
    FieldSelector,
    MergeOperator,
    RawCondition,
    and_,
    compile_condition,
    compile_where,
    field,
    not_field,
    or_,
    raw,
)
from .config import ClientSettings, PostgresConnectionConfig
from .connections import AsyncpgDriver, PostgresConnection

# ── Dialects ─────────────────────────────────────────────────────
from .dialects import AbstractSqlDialect, PostgresSqlDialect

# ── Errors ───────────────────────────────────────────────────────
from .exceptions import (
    ConditionError,
    NotFoundError,
    QueryBuildError,
    RowNotFoundError,
    SchemaError,
    SqlConnectionError,
    TypedSqlError,
    UnknownMergeOperatorError,
)

# ── Ports ────────────────────────────────────────────────────────
from .ports import ISqlConnection, ISqlDriver
from .schema import Column, ForeignKey, SqlJoin, TableDefinition
from .table import SqlTable
from .types import ExecutableQuery, SqlQueryResult, SqlValue, is_sql_value
from .utils import (
    parse_postgres_type,
    postgres_type_to_python,
    python_type_to_postgres,
    render_result_table,
    show_table,
    to_pretty_query,
)

__all__ = [
    # Client
    "SqlClient",
    "SqlTable",
    "ClientSettings",
    "PostgresConnectionConfig",
    # Schema & values
    "Column",
    "ForeignKey",
    "SqlJoin",
    "TableDefinition",
    "ExecutableQuery",
    "SqlQueryResult",
    "SqlValue",
    "is_sql_value",
    # Conditions
    "CompiledCondition",
    "Condition",
    "ConditionBuilder",
    "ConditionFactory",
    "ConditionMerge",
    "FieldCondition",
    "FieldSelector",
    "MergeOperator",
    "RawCondition",
    "and_",
    "compile_condition",
    "compile_where",
    "field",
    "not_field",
    "or_",
    "raw",
    # Dialects
    "AbstractSqlDialect",
    "PostgresSqlDialect",
    # Ports & drivers
    "ISqlConnection",
    "ISqlDriver",
    "AsyncpgDriver",
    "InMemoryDriver",
    "PostgresConnection",
    # Errors
    "ConditionError",
    "NotFoundError",
    "QueryBuildError",
    "RowNotFoundError",
    "SchemaError",
    "SqlConnectionError",
    "TypedSqlError",
    "UnknownMergeOperatorError",
    # Utilities
    "parse_postgres_type",
    "postgres_type_to_python",
    "python_type_to_postgres",
    "render_result_table",
    "show_table",
    "to_pretty_query",
]
