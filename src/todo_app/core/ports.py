# src/todo_app/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store depends on a gateway Protocol instead of a concrete backend,
so file/SQLite storage stay swappable and tests can use an in-memory fake.
"""

from typing import Awaitable, Protocol


class TaskGateway(Protocol):
    """
    Durable key-value slot holding the whole serialized task collection.

    The key is fixed per gateway instance. Both methods raise
    StorageUnavailable if the backend cannot be reached.
    """

    def read_all(self) -> Awaitable[str | None]: ...
    def write_all(self, serialized: str) -> Awaitable[None]: ...

