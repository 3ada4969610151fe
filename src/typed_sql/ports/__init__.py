from .connection import ISqlConnection
from .driver import ISqlDriver

__all__ = [
    "ISqlConnection",
    "ISqlDriver",
]
