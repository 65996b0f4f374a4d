"""
Persistence Adapter

Mirrors the whole ledger into one slot key on every mutation.

GUARANTEES:
- load() never fails: unreadable data means starting empty, and one
  broken record does not take the rest of its collection with it
- save() refuses to run before load() completed, so the empty initial
  state can never overwrite what is already on disk
- a document written by a newer schema is never overwritten: the
  adapter loads empty and stays read-only
- import_snapshot() is all-or-nothing: it either returns a complete
  state or raises SnapshotImportError
"""

import json
from datetime import date
from decimal import Decimal
from typing import Any, Optional, get_args

from pydantic import TypeAdapter, ValidationError

from clinic_ledger.activity import ActivityLogger
from clinic_ledger.config import get_settings
from clinic_ledger.models.records import LedgerState
from clinic_ledger.services.storage.interface import (
    KeyValueSlot,
    NewerSchemaError,
    SchemaVersionError,
    SlotReadError,
    SlotWriteError,
    SnapshotImportError,
)
from clinic_ledger.services.storage.migrations import (
    CURRENT_SCHEMA_VERSION,
    SCHEMA_VERSION_FIELD,
    migrate,
)


EXPORT_FILENAME_TEMPLATE = "clinic-ledger-backup-{day}.json"


def _parse_document(blob: str) -> dict[str, Any]:
    """Parse JSON text into a dict. Floats become Decimal to keep cents exact."""
    document = json.loads(blob, parse_float=Decimal)
    if not isinstance(document, dict):
        raise ValueError(
            f"Expected a JSON object, got {type(document).__name__}"
        )
    return document


class PersistenceAdapter:
    """Serializes LedgerState into a KeyValueSlot."""

    def __init__(
        self,
        slot: KeyValueSlot,
        key: Optional[str] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._slot = slot
        self._key = key or get_settings().storage.state_key
        self._activity = activity_logger or ActivityLogger()
        self._loaded = False
        self._read_only = False

    @property
    def key(self) -> str:
        return self._key

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def is_read_only(self) -> bool:
        """True when the slot holds a newer schema than this code can write."""
        return self._read_only

    # -------------------------------------------------------------------------
    # Load / save
    # -------------------------------------------------------------------------

    def load(self) -> LedgerState:
        """
        Read the saved ledger.

        Missing or unreadable data yields an empty ledger. After this call
        returns, save() is allowed unless the slot holds a newer schema.
        """
        try:
            state = self._load_state()
        finally:
            self._loaded = True
        return state

    def _load_state(self) -> LedgerState:
        try:
            blob = self._slot.read(self._key)
        except SlotReadError as e:
            self._activity.log_state_load_failed(self._key, str(e))
            return LedgerState()

        if blob is None:
            return LedgerState()

        try:
            document, version = migrate(_parse_document(blob))
        except NewerSchemaError as e:
            self._read_only = True
            self._activity.log_state_load_failed(self._key, str(e))
            return LedgerState()
        except (ValueError, SchemaVersionError) as e:
            # json.JSONDecodeError is a ValueError
            self._activity.log_state_load_failed(self._key, str(e))
            return LedgerState()

        if version != CURRENT_SCHEMA_VERSION:
            self._activity.log_state_migrated(
                self._key, version, CURRENT_SCHEMA_VERSION
            )

        state = self._lenient_state(document)
        self._activity.log_state_loaded(self._key, self.counts(state))
        return state

    def _lenient_state(self, document: dict[str, Any]) -> LedgerState:
        """Validate each record on its own; drop only the broken ones."""
        values = {}
        for name, field in LedgerState.model_fields.items():
            wire_name = field.alias or name
            raw = document.get(wire_name)
            if raw is None:
                continue
            if not isinstance(raw, list):
                self._activity.log_collection_discarded(
                    self._key, wire_name, f"Expected a list, got {type(raw).__name__}"
                )
                continue

            item_adapter = TypeAdapter(get_args(field.annotation)[0])
            kept = []
            for index, item in enumerate(raw):
                try:
                    kept.append(item_adapter.validate_python(item))
                except ValidationError as e:
                    self._activity.log_record_discarded(
                        self._key, wire_name, index, str(e)
                    )
            values[name] = kept
        return LedgerState(**values)

    def save(self, state: LedgerState) -> bool:
        """
        Overwrite the slot with the full state.

        Returns:
            True if written, False if skipped (not loaded yet, or the slot
            holds a newer schema) or failed
        """
        if not self._loaded:
            self._activity.log_save_skipped(self._key, "load not completed")
            return False
        if self._read_only:
            self._activity.log_save_skipped(self._key, "slot holds a newer schema")
            return False

        try:
            self._slot.write(self._key, self._serialize(state))
        except SlotWriteError as e:
            self._activity.log_state_save_failed(self._key, str(e))
            return False
        return True

    def _serialize(self, state: LedgerState, indent: Optional[int] = None) -> str:
        document = {
            SCHEMA_VERSION_FIELD: CURRENT_SCHEMA_VERSION,
            **state.to_document(),
        }
        return json.dumps(document, ensure_ascii=False, indent=indent)

    # -------------------------------------------------------------------------
    # Backup files
    # -------------------------------------------------------------------------

    def export_snapshot(self, state: LedgerState) -> str:
        """Human-readable JSON of the full state, for manual backup."""
        return self._serialize(state, indent=2)

    @staticmethod
    def export_filename(reference_date: date) -> str:
        return EXPORT_FILENAME_TEMPLATE.format(day=reference_date.isoformat())

    def import_snapshot(self, blob: str) -> LedgerState:
        """
        Parse a backup file into a complete state.

        Raises:
            SnapshotImportError: If the file is not a valid backup.
                Nothing is modified in that case.
        """
        try:
            document, _ = migrate(_parse_document(blob))
            return LedgerState.model_validate(document)
        except (ValueError, SchemaVersionError) as e:
            # pydantic's ValidationError is a ValueError as well
            self._activity.log_snapshot_import_failed(str(e))
            raise SnapshotImportError(f"Invalid backup file: {e}") from e

    @staticmethod
    def counts(state: LedgerState) -> dict[str, int]:
        return {
            "professionals": len(state.professionals),
            "patients": len(state.patients),
            "receipts": len(state.receipts),
            "expenses": len(state.expenses),
            "products": len(state.products),
            "daily_configs": len(state.daily_configs),
            "service_types": len(state.service_types),
        }
