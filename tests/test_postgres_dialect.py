"""Tests for the SQL text PostgresSqlDialect generates."""

from __future__ import annotations

import pytest

from typed_sql import (
    Column,
    ConditionError,
    ForeignKey,
    PostgresSqlDialect,
    QueryBuildError,
    SchemaError,
    SqlJoin,
    TableDefinition,
)

USER = TableDefinition(
    name="user",
    columns=(
        Column(name="id", type="SERIAL", primary_key=True),
        Column(name="name", type="VARCHAR", unique=True, size=32),
        Column(name="email", type="VARCHAR", unique=True, size=128),
    ),
)

FRIENDSTATE = TableDefinition(
    name="friendstate",
    columns=(
        Column(name="id", type="SERIAL", primary_key=True),
        Column(name="sender_id", type="INT"),
        Column(name="receiver_id", type="INT"),
        Column(name="accepted", type="BOOL", default=False),
    ),
    foreign_keys=(
        ForeignKey(column_name="sender_id", foreign_table_name="user", foreign_column_name="id"),
        ForeignKey(column_name="receiver_id", foreign_table_name="user", foreign_column_name="id"),
    ),
)

JOINS = (
    {"as": "ra", "source_key": "receiver_id", "target_table": "user", "target_key": "id"},
    {"as": "sa", "source_key": "sender_id", "target_table": "user", "target_key": "id"},
)


@pytest.fixture
def dialect() -> PostgresSqlDialect:
    return PostgresSqlDialect()


def column_sql(dialect: PostgresSqlDialect, **kwargs) -> str:
    return dialect.compile_column(Column(**kwargs))


# -- catalog -----------------------------------------------------------------


def test_name(dialect):
    assert dialect.get_dialect_name() == "postgres"


def test_tables_query(dialect):
    assert dialect.get_tables_query().sql == (
        "SELECT * FROM pg_catalog.pg_tables WHERE "
        "schemaname != 'pg_catalog' AND schemaname != 'information_schema'"
    )


def test_databases_query(dialect):
    assert dialect.get_databases_query().sql == "SELECT * FROM pg_database"


def test_structure_query_binds_table_name(dialect):
    query = dialect.get_table_structure(USER)
    assert "information_schema.columns" in query.sql
    assert "table_name = $1" in query.sql
    assert query.params == ("user",)


# -- DDL ---------------------------------------------------------------------


def test_create_user_table(dialect):
    assert dialect.create_table_query(USER).sql == (
        'CREATE TABLE IF NOT EXISTS "user"(id SERIAL PRIMARY KEY NOT NULL, '
        "name VARCHAR(32) UNIQUE NOT NULL, email VARCHAR(128) UNIQUE NOT NULL)"
    )


def test_create_table_with_foreign_keys(dialect):
    assert dialect.create_table_query(FRIENDSTATE).sql == (
        'CREATE TABLE IF NOT EXISTS "friendstate"(id SERIAL PRIMARY KEY NOT NULL, '
        "sender_id INT NOT NULL, receiver_id INT NOT NULL, "
        "accepted BOOL NOT NULL DEFAULT FALSE, "
        'FOREIGN KEY(sender_id) REFERENCES "user" (id) ON DELETE CASCADE, '
        'FOREIGN KEY(receiver_id) REFERENCES "user" (id) ON DELETE CASCADE)'
    )


def test_drop_table(dialect):
    assert dialect.drop_table_query(USER).sql == 'DROP TABLE IF EXISTS "user" CASCADE'


def test_unique_wins_over_primary_key(dialect):
    assert (
        column_sql(dialect, name="id", type="int", unique=True, primary_key=True)
        == "id INT UNIQUE NOT NULL"
    )


def test_nullable_column(dialect):
    assert column_sql(dialect, name="bio", type="TEXT", nullable=True) == "bio TEXT NULL"


def test_explicit_null_default(dialect):
    assert (
        column_sql(dialect, name="bio", type="TEXT", nullable=True, default=None)
        == "bio TEXT NULL DEFAULT NULL"
    )


@pytest.mark.parametrize(
    ("type_", "default", "rendered"),
    [
        ("INT", 3, "3"),
        ("REAL", 1.5, "1.5"),
        ("BOOL", True, "TRUE"),
        ("VARCHAR", "it's", "'it\\'s'"),
        ("JSONB", "{}", "'{}'"),
    ],
)
def test_default_literals(dialect, type_, default, rendered):
    assert column_sql(dialect, name="c", type=type_, default=default).endswith(
        f" DEFAULT {rendered}"
    )


@pytest.mark.parametrize(
    ("type_", "default"),
    [("INT", "3"), ("INT", True), ("BOOL", 1), ("VARCHAR", 5), ("TEXT", [1]), ("JSONB", {"a": 1})],
)
def test_invalid_defaults(dialect, type_, default):
    with pytest.raises(SchemaError) as exc_info:
        column_sql(dialect, name="c", type=type_, default=default)
    assert exc_info.value.column == "c"


# -- DML ---------------------------------------------------------------------


def test_insert(dialect):
    query = dialect.insert_query(USER, {"name": "tester", "email": "tester@tester.com"})
    assert query.sql == 'INSERT INTO "user" (name, email) VALUES ($1, $2)'
    assert query.params == ("tester", "tester@tester.com")


def test_insert_returning(dialect):
    assert dialect.insert_query(USER, {"name": "a"}, ["id"]).sql.endswith(' RETURNING "id"')
    assert dialect.insert_query(USER, {"name": "a"}, "*").sql.endswith(" RETURNING *")


def test_empty_value_maps_raise(dialect):
    with pytest.raises(QueryBuildError):
        dialect.insert_query(USER, {})
    with pytest.raises(QueryBuildError):
        dialect.update_query(USER, {}, ["id", 1])


def test_update_continues_numbering_into_where(dialect):
    query = dialect.update_query(
        FRIENDSTATE, {"accepted": True}, ["OR", ["receiver_id", 1], ["sender_id", 1]]
    )
    assert query.sql == (
        'UPDATE "friendstate" SET accepted=$1 WHERE '
        '("friendstate".receiver_id = $2 OR "friendstate".sender_id = $3)'
    )
    assert query.params == (True, 1, 1)


def test_update_with_raw_where(dialect):
    query = dialect.update_query(
        FRIENDSTATE,
        {"sender_id": 1, "receiver_id": 2},
        {"query": "id = $1 OR id = $2", "values": [3, 4]},
        "*",
    )
    assert query.sql == (
        'UPDATE "friendstate" SET sender_id=$1, receiver_id=$2 '
        "WHERE id = $3 OR id = $4 RETURNING *"
    )
    assert query.params == (1, 2, 3, 4)


def test_select_projection(dialect):
    assert dialect.select_query(USER, ["name"]).sql == 'SELECT "name" FROM "user"'
    assert dialect.select_query(USER).sql == 'SELECT * FROM "user"'
    assert dialect.select_query(USER, "*").sql == 'SELECT * FROM "user"'
    assert dialect.select_query(USER, "id").sql == 'SELECT "id" FROM "user"'


def test_select_with_alias(dialect):
    query = dialect.select_query(USER, [("user", "name", "n"), "id"])
    assert query.sql == 'SELECT "user"."name" AS "n", "id" FROM "user"'


def test_select_with_limit(dialect):
    query = dialect.select_query(USER, ["id"], ["name", "tester"], 1)
    assert query.sql == 'SELECT "id" FROM "user" WHERE "user".name = $1 LIMIT 1'
    assert query.params == ("tester",)


@pytest.mark.parametrize("limit", [None, 0, -1])
def test_select_without_limit(dialect, limit):
    assert "LIMIT" not in dialect.select_query(USER, None, None, limit).sql


def test_select_with_joins(dialect):
    query = dialect.select_query(
        FRIENDSTATE,
        [["ra", "name"], ["sa", "name"]],
        ["AND", [["accepted", "NOT"], True], ["OR", ["receiver_id", 1], ["sender_id", 1]]],
        -1,
        *JOINS,
    )
    assert query.sql == (
        'SELECT "ra"."name", "sa"."name" FROM "friendstate" '
        'INNER JOIN "user" ra ON "ra".id = "friendstate".receiver_id '
        'INNER JOIN "user" sa ON "sa".id = "friendstate".sender_id '
        'WHERE ("friendstate".accepted != $1 AND '
        '("friendstate".receiver_id = $2 OR "friendstate".sender_id = $3))'
    )
    assert query.params == (True, 1, 1)


def test_join_kind_and_source_table(dialect):
    join = SqlJoin(join="LEFT", source_table="ra", source_key="id", target_table="friendstate", target_key="sender_id")
    query = dialect.select_query(USER, None, None, None, JOINS[0] | {"source_table": "friendstate"}, join)
    assert query.sql == (
        'SELECT * FROM "user" '
        'INNER JOIN "user" ra ON "ra".id = "friendstate".receiver_id '
        'LEFT JOIN "friendstate" ON "friendstate".sender_id = "ra".id'
    )


def test_delete(dialect):
    query = dialect.delete_query(FRIENDSTATE, ["AND", ["sender_id", 1], ["receiver_id", 2]], ["id"])
    assert query.sql == (
        'DELETE FROM "friendstate" WHERE '
        '("friendstate".sender_id = $1 AND "friendstate".receiver_id = $2) RETURNING "id"'
    )
    assert query.params == (1, 2)


def test_delete_everything(dialect):
    assert dialect.delete_query(USER).sql == 'DELETE FROM "user"'


@pytest.mark.parametrize("select", [[], [1], [("a",)], [("a", "b", "c", "d")]])
def test_malformed_projection(dialect, select):
    with pytest.raises(QueryBuildError):
        dialect.select_query(USER, select)


def test_bad_where_raises_condition_error(dialect):
    with pytest.raises(ConditionError):
        dialect.delete_query(USER, ["age", ">", 3])
