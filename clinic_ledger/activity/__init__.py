"""Activity logging package."""

from clinic_ledger.activity.logger import ActivityLogger

__all__ = ["ActivityLogger"]
