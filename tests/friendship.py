"""A small friendship service on top of typed_sql, used by the scenario tests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from typed_sql import Column, ForeignKey, RowNotFoundError, SqlClient, SqlTable


@dataclass
class FriendshipTables:
    account: SqlTable
    friendship: SqlTable


def create_friendship_tables(client: SqlClient) -> FriendshipTables:
    account = client.get_table(
        "account",
        [
            Column(name="id", type="SERIAL", primary_key=True),
            Column(name="name", type="VARCHAR", unique=True, size=32),
            Column(name="email", type="VARCHAR", unique=True, size=128),
        ],
    )
    friendship = client.get_table(
        "friendship",
        [
            Column(name="id", type="SERIAL", primary_key=True),
            Column(name="sender_id", type="INT"),
            Column(name="receiver_id", type="INT"),
            Column(name="accepted", type="BOOL", default=False),
        ],
        [
            ForeignKey(column_name="sender_id", foreign_table_name="account", foreign_column_name="id"),
            ForeignKey(column_name="receiver_id", foreign_table_name="account", foreign_column_name="id"),
        ],
    )
    return FriendshipTables(account, friendship)


async def _account_id(tables: FriendshipTables, column: str, value: str) -> int:
    row = await tables.account.select_one(["id"], [column, value])
    if row is None or not isinstance(row.get("id"), int):
        raise RowNotFoundError(
            "account",
            [column, value],
            message=f"User with {column} '{value}' not exists!",
        )
    return row["id"]


async def get_account_by_name(tables: FriendshipTables, name: str) -> int:
    return await _account_id(tables, "name", name)


async def get_account_by_email(tables: FriendshipTables, email: str) -> int:
    return await _account_id(tables, "email", email)


async def create_account(tables: FriendshipTables, name: str, email: str) -> int:
    row = await tables.account.insert({"name": name, "email": email}, ["id"])
    if row is None or not isinstance(row.get("id"), int):
        raise RowNotFoundError("account", message=f"Account '{name}' was not created")
    return row["id"]


async def remove_friendship(tables: FriendshipTables, user1: int, user2: int) -> None:
    await asyncio.gather(
        tables.friendship.delete(["AND", ["sender_id", user1], ["receiver_id", user2]]),
        tables.friendship.delete(["AND", ["sender_id", user2], ["receiver_id", user1]]),
    )


async def request_friendship(tables: FriendshipTables, sender_id: int, receiver_id: int) -> None:
    await remove_friendship(tables, sender_id, receiver_id)
    await tables.friendship.insert({"sender_id": sender_id, "receiver_id": receiver_id})


async def accept_friendship(tables: FriendshipTables, sender_id: int, receiver_id: int) -> None:
    await tables.friendship.update(
        {"accepted": True},
        ["AND", ["sender_id", sender_id], ["receiver_id", receiver_id]],
    )


async def get_friends(tables: FriendshipTables, user: int) -> list[int]:
    rows = await tables.friendship.select(
        ["sender_id", "receiver_id"],
        ["AND", ["accepted", True], ["OR", ["sender_id", user], ["receiver_id", user]]],
    )
    return [
        row["receiver_id"] if row["sender_id"] == user else row["sender_id"]
        for row in rows
    ]
