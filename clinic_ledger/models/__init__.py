"""
Data Models Package

This package contains all Pydantic models used by the clinic ledger.
All data flowing through the system must conform to these schemas.
"""

from clinic_ledger.models.records import (
    DailyCashConfig,
    Expense,
    LedgerState,
    Patient,
    PaymentMethod,
    Product,
    Professional,
    Receipt,
    ServiceType,
    default_service_types,
)
from clinic_ledger.models.ledger import (
    CommissionSplit,
    DailyDashboard,
    DailyTotals,
    MonthlyTotals,
    ProfessionalBreakdown,
    ProfessionalSummary,
)
from clinic_ledger.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from clinic_ledger.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Records
    "DailyCashConfig",
    "Expense",
    "LedgerState",
    "Patient",
    "PaymentMethod",
    "Product",
    "Professional",
    "Receipt",
    "ServiceType",
    "default_service_types",
    # Aggregates
    "CommissionSplit",
    "DailyDashboard",
    "DailyTotals",
    "MonthlyTotals",
    "ProfessionalBreakdown",
    "ProfessionalSummary",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Activity
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
