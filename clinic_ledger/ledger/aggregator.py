"""
Ledger Aggregator

Pure functions computing daily, monthly and per-professional summaries
from the flat receipt and expense lists.

There is no cache: every call walks the full collection. A single
clinic produces a few dozen receipts a day, so this stays cheap.

Daily filters compare the calendar date of the local timestamp.
Monthly filters compare calendar year and month, so a receipt at
23:59:59 on the last day of a month belongs to that month.
"""

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from clinic_ledger.models.ledger import (
    ZERO,
    DailyTotals,
    MonthlyTotals,
    ProfessionalBreakdown,
    ProfessionalSummary,
    empty_method_totals,
)
from clinic_ledger.models.records import (
    DailyCashConfig,
    Expense,
    PaymentMethod,
    Professional,
    Receipt,
    ServiceType,
)


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def _sum_by_method(receipts: Iterable[Receipt]) -> dict[PaymentMethod, Decimal]:
    totals = empty_method_totals()
    for receipt in receipts:
        if receipt.payment_method in totals:
            totals[receipt.payment_method] += receipt.gross_value
    return totals


# =============================================================================
# DAILY
# =============================================================================

def daily_receipts(receipts: Sequence[Receipt], day: date) -> list[Receipt]:
    """
    Receipts recorded on a calendar day, latest first.

    Receipts with the same timestamp come out last-added first.
    """
    matching = [r for r in reversed(receipts) if r.day == day]
    # sort is stable, so equal timestamps keep the reversed insertion order
    matching.sort(key=lambda r: r.recorded_at, reverse=True)
    return matching


def daily_expenses(expenses: Sequence[Expense], day: date) -> list[Expense]:
    """Expenses recorded on a calendar day, in insertion order."""
    return [e for e in expenses if e.day == day]


def daily_totals(
    receipts: Iterable[Receipt],
    expenses: Iterable[Expense],
) -> DailyTotals:
    """Sum gross and clinic net of the receipts, and the value of the expenses."""
    receipts = list(receipts)
    return DailyTotals(
        gross=_sum(r.gross_value for r in receipts),
        expense=_sum(e.value for e in expenses),
        net=_sum(r.net_clinic for r in receipts),
    )


def daily_by_payment_method(receipts: Iterable[Receipt]) -> dict[PaymentMethod, Decimal]:
    """Gross per payment method. Every method is present, zero if unused."""
    return _sum_by_method(receipts)


def initial_cash_for(configs: Iterable[DailyCashConfig], day: date) -> Decimal:
    """Opening cash configured for a day, zero when none was set."""
    for config in configs:
        if config.day == day:
            return config.initial_cash
    return ZERO


# =============================================================================
# MONTHLY
# =============================================================================

def monthly_receipts(receipts: Iterable[Receipt], reference_date: date) -> list[Receipt]:
    """Receipts in the same calendar month and year as the reference date."""
    return [
        r for r in receipts
        if r.recorded_at.year == reference_date.year
        and r.recorded_at.month == reference_date.month
    ]


def monthly_totals(monthly: Iterable[Receipt]) -> MonthlyTotals:
    monthly = list(monthly)
    return MonthlyTotals(
        gross=_sum(r.gross_value for r in monthly),
        net=_sum(r.net_clinic for r in monthly),
        by_payment_method=_sum_by_method(monthly),
    )


def monthly_by_service_type(
    monthly: Iterable[Receipt],
    catalog: Iterable[ServiceType],
) -> dict[str, Decimal]:
    """
    Gross per service type, keyed by display label.

    Keys missing from the catalog (e.g. a service type removed after
    use) are shown as the raw key. Order follows first appearance.
    """
    labels = {}
    for service_type in catalog:
        labels.setdefault(service_type.key, service_type.label)

    stats: dict[str, Decimal] = {}
    for receipt in monthly:
        label = labels.get(receipt.service_type, receipt.service_type)
        stats[label] = stats.get(label, ZERO) + receipt.gross_value
    return stats


# =============================================================================
# PER PROFESSIONAL
# =============================================================================

def per_professional_breakdown(
    receipts: Iterable[Receipt],
    professional_id: str,
) -> ProfessionalBreakdown:
    """
    Totals of one professional's receipts, in the order given.

    Works for removed professionals too: their receipts still carry the id.
    An id with no receipts yields zero totals.
    """
    own = [r for r in receipts if r.professional_id == professional_id]
    return ProfessionalBreakdown(
        professional_id=professional_id,
        gross_total=_sum(r.gross_value for r in own),
        professional_total=_sum(r.professional_value for r in own),
        clinic_total=_sum(r.net_clinic for r in own),
        by_payment_method=_sum_by_method(own),
        receipts=own,
    )


def professional_summaries(
    receipts: Sequence[Receipt],
    professionals: Iterable[Professional],
) -> list[ProfessionalSummary]:
    """Breakdowns of every registered professional with at least one receipt."""
    summaries = []
    for professional in professionals:
        breakdown = per_professional_breakdown(receipts, professional.id)
        if breakdown.receipt_count:
            summaries.append(
                ProfessionalSummary(professional=professional, breakdown=breakdown)
            )
    return summaries
