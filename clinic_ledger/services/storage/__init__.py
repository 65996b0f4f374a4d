"""
Storage Services Package

Provides the abstract key-value slot interface, its local file and
in-memory implementations, and the adapter that persists the ledger.
"""

from clinic_ledger.services.storage.interface import (
    KeyValueSlot,
    NewerSchemaError,
    SchemaVersionError,
    SlotReadError,
    SlotWriteError,
    SnapshotError,
    SnapshotImportError,
    StorageError,
)
from clinic_ledger.services.storage.local_file import JsonFileSlot
from clinic_ledger.services.storage.memory import InMemorySlot
from clinic_ledger.services.storage.migrations import (
    CURRENT_SCHEMA_VERSION,
    migrate,
)
from clinic_ledger.services.storage.persistence import PersistenceAdapter

__all__ = [
    # Interfaces
    "KeyValueSlot",
    # Exceptions
    "NewerSchemaError",
    "SchemaVersionError",
    "SlotReadError",
    "SlotWriteError",
    "SnapshotError",
    "SnapshotImportError",
    "StorageError",
    # Implementations
    "InMemorySlot",
    "JsonFileSlot",
    # Persistence
    "CURRENT_SCHEMA_VERSION",
    "PersistenceAdapter",
    "migrate",
]
