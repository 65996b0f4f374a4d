"""
Abstract Storage Interface

We define an abstract interface for the durable key-value slot.
This allows us to:
1. Keep the ledger on local JSON files in production
2. Use in-memory storage for testing
3. Keep the record store decoupled from where bytes end up

The interface is intentionally tiny: the whole ledger is one document
stored under one key, and the login flag lives under another.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueSlot(ABC):
    """
    Abstract interface for a durable key-value store of text values.

    Any storage implementation (files, a database row, etc.)
    must implement these methods.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Slot name

        Returns:
            The stored text, or None if nothing was ever written

        Raises:
            SlotReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """
        Overwrite the value stored under a key.

        Args:
            key: Slot name
            value: Text to store

        Raises:
            SlotWriteError: If the backend cannot be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if something was removed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class SlotReadError(StorageError):
    """The storage backend could not be read."""
    pass


class SlotWriteError(StorageError):
    """The storage backend could not be written."""
    pass


class SnapshotError(StorageError):
    """A serialized ledger document could not be used."""
    pass


class SnapshotImportError(SnapshotError):
    """A backup file is malformed; nothing was imported."""
    pass


class SchemaVersionError(SnapshotError):
    """The document carries a schema version that cannot be read."""
    pass


class NewerSchemaError(SchemaVersionError):
    """The document was written by a newer, unknown schema version."""
    pass
