"""Services package."""

from clinic_ledger.services.storage import (
    InMemorySlot,
    JsonFileSlot,
    KeyValueSlot,
    PersistenceAdapter,
    SchemaVersionError,
    SlotReadError,
    SlotWriteError,
    SnapshotError,
    SnapshotImportError,
    StorageError,
)

__all__ = [
    "InMemorySlot",
    "JsonFileSlot",
    "KeyValueSlot",
    "PersistenceAdapter",
    "SchemaVersionError",
    "SlotReadError",
    "SlotWriteError",
    "SnapshotError",
    "SnapshotImportError",
    "StorageError",
]
