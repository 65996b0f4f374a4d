"""Commission calculation and ledger aggregation."""

from clinic_ledger.ledger.aggregator import (
    daily_by_payment_method,
    daily_expenses,
    daily_receipts,
    daily_totals,
    initial_cash_for,
    monthly_by_service_type,
    monthly_receipts,
    monthly_totals,
    per_professional_breakdown,
    professional_summaries,
)
from clinic_ledger.ledger.commission import NO_SPLIT_PERCENTAGE, compute_split
from clinic_ledger.ledger.formatting import format_currency, round_cents

__all__ = [
    "NO_SPLIT_PERCENTAGE",
    "compute_split",
    "daily_by_payment_method",
    "daily_expenses",
    "daily_receipts",
    "daily_totals",
    "format_currency",
    "initial_cash_for",
    "monthly_by_service_type",
    "monthly_receipts",
    "monthly_totals",
    "per_professional_breakdown",
    "professional_summaries",
    "round_cents",
]
