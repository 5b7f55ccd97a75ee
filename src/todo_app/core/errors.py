# src/todo_app/core/errors.py

from __future__ import annotations


class StorageUnavailable(RuntimeError):
    """The persistence backend cannot be read or written."""


class MalformedPersistedData(ValueError):
    """Stored bytes do not parse into a valid task collection."""
