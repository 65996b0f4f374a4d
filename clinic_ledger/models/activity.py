"""
Activity Models for Clinic Ledger

Every mutation of the ledger and every recovered failure produces one
activity event. Events are written to the local structured log only;
they are not persisted, so there is no audit trail to reconstruct.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class ActivityEventType(str, Enum):
    """Types of events we log."""
    # Records
    RECORD_ADDED = "record_added"
    RECORD_UPDATED = "record_updated"
    RECORD_REMOVED = "record_removed"
    RECORD_NOT_FOUND = "record_not_found"
    STOCK_ADJUSTED = "stock_adjusted"
    STOCK_ADJUSTMENT_IGNORED = "stock_adjustment_ignored"
    DAILY_CASH_SET = "daily_cash_set"

    # Persistence
    STATE_LOADED = "state_loaded"
    STATE_LOAD_FAILED = "state_load_failed"
    COLLECTION_DISCARDED = "collection_discarded"
    RECORD_DISCARDED = "record_discarded"
    STATE_SAVE_FAILED = "state_save_failed"
    SAVE_SKIPPED = "save_skipped"
    STATE_MIGRATED = "state_migrated"
    STATE_CLEARED = "state_cleared"

    # Backup
    SNAPSHOT_EXPORTED = "snapshot_exported"
    SNAPSHOT_IMPORTED = "snapshot_imported"
    SNAPSHOT_IMPORT_FAILED = "snapshot_import_failed"
    SNAPSHOT_IMPORT_DECLINED = "snapshot_import_declined"

    # Input
    ENTRY_REJECTED = "entry_rejected"

    # Session
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    LOGGED_OUT = "logged_out"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """A single activity event."""

    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred (local time)"
    )
    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO

    # What record is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Kind of record (e.g., 'receipt', 'product', 'state')"
    )
    entity_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.record_added("receipt", receipt.id)
        event = ActivityEventBuilder.state_load_failed("centroMedicoCamocim", str(e))
    """

    @staticmethod
    def record_added(
        entity_type: str,
        entity_id: str,
        details: Optional[dict] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.RECORD_ADDED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} added",
            details=details or {},
        )

    @staticmethod
    def record_updated(
        entity_type: str,
        entity_id: str,
        details: Optional[dict] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.RECORD_UPDATED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} updated",
            details=details or {},
        )

    @staticmethod
    def record_removed(entity_type: str, entity_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.RECORD_REMOVED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} removed",
        )

    @staticmethod
    def record_not_found(entity_type: str, entity_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.RECORD_NOT_FOUND,
            severity=ActivitySeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} not found, nothing changed",
        )

    @staticmethod
    def stock_adjusted(
        product_id: str,
        delta: int,
        quantity: int,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STOCK_ADJUSTED,
            entity_type="product",
            entity_id=product_id,
            description=f"Stock adjusted by {delta:+d}",
            details={"delta": delta, "quantity": quantity},
        )

    @staticmethod
    def stock_adjustment_ignored(
        product_id: str,
        delta: int,
        quantity: int,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STOCK_ADJUSTMENT_IGNORED,
            severity=ActivitySeverity.WARNING,
            entity_type="product",
            entity_id=product_id,
            description="Stock adjustment would make quantity negative",
            details={"delta": delta, "quantity": quantity},
        )

    @staticmethod
    def daily_cash_set(day: str, value: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.DAILY_CASH_SET,
            entity_type="daily_config",
            entity_id=day,
            description=f"Opening cash for {day} set",
            details={"initial_cash": value},
        )

    @staticmethod
    def state_loaded(key: str, counts: dict[str, int]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STATE_LOADED,
            entity_type="state",
            entity_id=key,
            description="Ledger state loaded",
            details=counts,
        )

    @staticmethod
    def state_load_failed(key: str, error_message: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STATE_LOAD_FAILED,
            severity=ActivitySeverity.ERROR,
            entity_type="state",
            entity_id=key,
            description="Saved state unreadable, starting empty",
            error_message=error_message,
        )

    @staticmethod
    def collection_discarded(
        key: str,
        collection: str,
        error_message: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.COLLECTION_DISCARDED,
            severity=ActivitySeverity.ERROR,
            entity_type="state",
            entity_id=key,
            description=f"Collection '{collection}' unreadable, starting it empty",
            details={"collection": collection},
            error_message=error_message,
        )

    @staticmethod
    def record_discarded(
        key: str,
        collection: str,
        index: int,
        error_message: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.RECORD_DISCARDED,
            severity=ActivitySeverity.ERROR,
            entity_type="state",
            entity_id=key,
            description=f"Record {index} of '{collection}' unreadable, dropped",
            details={"collection": collection, "index": index},
            error_message=error_message,
        )

    @staticmethod
    def save_skipped(key: str, reason: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SAVE_SKIPPED,
            severity=ActivitySeverity.WARNING,
            entity_type="state",
            entity_id=key,
            description=f"Save skipped: {reason}",
            details={"reason": reason},
        )

    @staticmethod
    def state_save_failed(key: str, error_message: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STATE_SAVE_FAILED,
            severity=ActivitySeverity.ERROR,
            entity_type="state",
            entity_id=key,
            description="Ledger state could not be written",
            error_message=error_message,
        )

    @staticmethod
    def state_migrated(key: str, from_version: int, to_version: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STATE_MIGRATED,
            entity_type="state",
            entity_id=key,
            description=f"State migrated from schema {from_version} to {to_version}",
            details={"from_version": from_version, "to_version": to_version},
        )

    @staticmethod
    def state_cleared(key: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STATE_CLEARED,
            severity=ActivitySeverity.WARNING,
            entity_type="state",
            entity_id=key,
            description="All ledger data cleared",
        )

    @staticmethod
    def snapshot_exported(filename: str, counts: dict[str, int]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SNAPSHOT_EXPORTED,
            entity_type="snapshot",
            entity_id=filename,
            description="Backup file exported",
            details=counts,
        )

    @staticmethod
    def snapshot_imported(counts: dict[str, int]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SNAPSHOT_IMPORTED,
            severity=ActivitySeverity.WARNING,
            entity_type="snapshot",
            description="Backup file imported, previous data replaced",
            details=counts,
        )

    @staticmethod
    def snapshot_import_declined() -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SNAPSHOT_IMPORT_DECLINED,
            entity_type="snapshot",
            description="Backup import cancelled by the user",
        )

    @staticmethod
    def snapshot_import_failed(error_message: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SNAPSHOT_IMPORT_FAILED,
            severity=ActivitySeverity.WARNING,
            entity_type="snapshot",
            description="Backup file rejected, current data kept",
            error_message=error_message,
        )

    @staticmethod
    def entry_rejected(entry_type: str, issues: list[dict]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ENTRY_REJECTED,
            severity=ActivitySeverity.WARNING,
            entity_type=entry_type,
            description=f"{entry_type.capitalize()} rejected with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def login_succeeded(username: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.LOGIN_SUCCEEDED,
            entity_type="session",
            description="User logged in",
            details={"username": username},
        )

    @staticmethod
    def logged_out() -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.LOGGED_OUT,
            entity_type="session",
            description="User logged out",
        )

    @staticmethod
    def login_failed(username: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.LOGIN_FAILED,
            severity=ActivitySeverity.WARNING,
            entity_type="session",
            description="Login attempt with wrong credentials",
            details={"username": username},
        )
