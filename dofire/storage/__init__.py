"""Storage backends."""

from dofire.storage.interface import (
    ConflictError,
    ConstraintViolationError,
    Repository,
    StorageError,
)
from dofire.storage.memory import InMemoryRepository

__all__ = [
    "ConflictError",
    "ConstraintViolationError",
    "InMemoryRepository",
    "Repository",
    "StorageError",
]
