from .memory import InMemoryDriver

__all__ = [
    "InMemoryDriver",
]
