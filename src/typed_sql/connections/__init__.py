from .postgres import AsyncpgDriver, PostgresConnection

__all__ = [
    "AsyncpgDriver",
    "PostgresConnection",
]
