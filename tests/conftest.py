"""Shared fixtures: a client over the recording in-memory driver."""

from __future__ import annotations

import pytest
import pytest_asyncio

from typed_sql import (
    Column,
    ForeignKey,
    InMemoryDriver,
    PostgresConnection,
    SqlClient,
)

USER_COLUMNS = (
    Column(name="id", type="SERIAL", primary_key=True),
    Column(name="name", type="VARCHAR", unique=True, size=32),
    Column(name="email", type="VARCHAR", unique=True, size=128),
)

FRIENDSTATE_COLUMNS = (
    Column(name="id", type="SERIAL", primary_key=True),
    Column(name="sender_id", type="INT"),
    Column(name="receiver_id", type="INT"),
    Column(name="accepted", type="BOOL", default=False),
)


def friend_keys(table: str) -> tuple[ForeignKey, ...]:
    return (
        ForeignKey(column_name="sender_id", foreign_table_name=table, foreign_column_name="id"),
        ForeignKey(column_name="receiver_id", foreign_table_name=table, foreign_column_name="id"),
    )


@pytest.fixture
def driver() -> InMemoryDriver:
    return InMemoryDriver()


@pytest.fixture
def connection(driver: InMemoryDriver) -> PostgresConnection:
    return PostgresConnection(driver)


@pytest_asyncio.fixture
async def client(connection: PostgresConnection):
    client = SqlClient(connection, connection_time=10.0, list_queries=True)
    yield client
    await client.close()


@pytest.fixture
def user_table(client: SqlClient):
    return client.get_table("user", USER_COLUMNS)


@pytest.fixture
def friendstate_table(client: SqlClient, user_table):
    return client.get_table("friendstate", FRIENDSTATE_COLUMNS, friend_keys("user"))
