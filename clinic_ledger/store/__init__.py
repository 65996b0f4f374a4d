"""In-memory record store and identifier generation."""

from clinic_ledger.store.identifiers import (
    IdGenerator,
    SequentialIdGenerator,
    UuidIdGenerator,
)
from clinic_ledger.store.record_store import RecordStore

__all__ = [
    "IdGenerator",
    "RecordStore",
    "SequentialIdGenerator",
    "UuidIdGenerator",
]
