from .driver import InMemoryDriver, RecordedQuery

__all__ = [
    "InMemoryDriver",
    "RecordedQuery",
]
