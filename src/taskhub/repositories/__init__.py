"""Task repository adapters."""

from .memory import InMemoryTaskRepository
from .mongo import MongoConnection, MongoTaskRepository

__all__ = [
    "InMemoryTaskRepository",
    "MongoConnection",
    "MongoTaskRepository",
]
