"""
Activity Logger

Every mutation of the ledger and every recovered failure is logged.
This provides:
1. Traceability of what the user changed and when
2. Debugging information when saved data turns out to be corrupt

The activity logger:
- Writes structured JSON lines through structlog
- Never raises: a logging failure must not break a mutation
"""

import logging
from typing import Optional

import structlog

from clinic_ledger.config import get_settings
from clinic_ledger.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivitySeverity,
)


LOGGER_NAME = "clinic_ledger"


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logging.getLogger(LOGGER_NAME).setLevel(get_settings().app.log_level)


class ActivityLogger:
    """Central activity logging service."""

    def __init__(self, name: str = LOGGER_NAME):
        self._logger = structlog.get_logger(name)

    def log(self, event: ActivityEvent) -> None:
        """Log an activity event at the level matching its severity."""
        log_dict = event.to_log_dict()

        try:
            if event.severity == ActivitySeverity.ERROR:
                self._logger.error("activity_event", **log_dict)
            elif event.severity == ActivitySeverity.WARNING:
                self._logger.warning("activity_event", **log_dict)
            elif event.severity == ActivitySeverity.DEBUG:
                self._logger.debug("activity_event", **log_dict)
            else:
                self._logger.info("activity_event", **log_dict)
        except Exception as e:
            logging.getLogger(LOGGER_NAME).error(
                "activity log write failed: %s", e
            )

    def log_record_added(
        self,
        entity_type: str,
        entity_id: str,
        details: Optional[dict] = None,
    ) -> None:
        self.log(ActivityEventBuilder.record_added(entity_type, entity_id, details))

    def log_record_updated(
        self,
        entity_type: str,
        entity_id: str,
        details: Optional[dict] = None,
    ) -> None:
        self.log(ActivityEventBuilder.record_updated(entity_type, entity_id, details))

    def log_record_removed(self, entity_type: str, entity_id: str) -> None:
        self.log(ActivityEventBuilder.record_removed(entity_type, entity_id))

    def log_record_not_found(self, entity_type: str, entity_id: str) -> None:
        self.log(ActivityEventBuilder.record_not_found(entity_type, entity_id))

    def log_stock_adjusted(self, product_id: str, delta: int, quantity: int) -> None:
        self.log(ActivityEventBuilder.stock_adjusted(product_id, delta, quantity))

    def log_stock_adjustment_ignored(
        self,
        product_id: str,
        delta: int,
        quantity: int,
    ) -> None:
        self.log(
            ActivityEventBuilder.stock_adjustment_ignored(product_id, delta, quantity)
        )

    def log_daily_cash_set(self, day: str, value: str) -> None:
        self.log(ActivityEventBuilder.daily_cash_set(day, value))

    def log_state_loaded(self, key: str, counts: dict[str, int]) -> None:
        self.log(ActivityEventBuilder.state_loaded(key, counts))

    def log_state_load_failed(self, key: str, error_message: str) -> None:
        self.log(ActivityEventBuilder.state_load_failed(key, error_message))

    def log_collection_discarded(
        self,
        key: str,
        collection: str,
        error_message: str,
    ) -> None:
        self.log(
            ActivityEventBuilder.collection_discarded(key, collection, error_message)
        )

    def log_record_discarded(
        self,
        key: str,
        collection: str,
        index: int,
        error_message: str,
    ) -> None:
        self.log(
            ActivityEventBuilder.record_discarded(key, collection, index, error_message)
        )

    def log_save_skipped(self, key: str, reason: str) -> None:
        self.log(ActivityEventBuilder.save_skipped(key, reason))

    def log_state_save_failed(self, key: str, error_message: str) -> None:
        self.log(ActivityEventBuilder.state_save_failed(key, error_message))

    def log_state_migrated(self, key: str, from_version: int, to_version: int) -> None:
        self.log(ActivityEventBuilder.state_migrated(key, from_version, to_version))

    def log_state_cleared(self, key: str) -> None:
        self.log(ActivityEventBuilder.state_cleared(key))

    def log_snapshot_exported(self, filename: str, counts: dict[str, int]) -> None:
        self.log(ActivityEventBuilder.snapshot_exported(filename, counts))

    def log_snapshot_imported(self, counts: dict[str, int]) -> None:
        self.log(ActivityEventBuilder.snapshot_imported(counts))

    def log_snapshot_import_declined(self) -> None:
        self.log(ActivityEventBuilder.snapshot_import_declined())

    def log_snapshot_import_failed(self, error_message: str) -> None:
        self.log(ActivityEventBuilder.snapshot_import_failed(error_message))

    def log_entry_rejected(self, entry_type: str, issues: list[dict]) -> None:
        self.log(ActivityEventBuilder.entry_rejected(entry_type, issues))

    def log_login_succeeded(self, username: str) -> None:
        self.log(ActivityEventBuilder.login_succeeded(username))

    def log_login_failed(self, username: str) -> None:
        self.log(ActivityEventBuilder.login_failed(username))

    def log_logged_out(self) -> None:
        self.log(ActivityEventBuilder.logged_out())
