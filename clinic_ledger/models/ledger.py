"""
Aggregate Models

Results of the commission calculator and the ledger aggregator.
These are computed on demand and never persisted.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from clinic_ledger.models.records import (
    Expense,
    PaymentMethod,
    Professional,
    Receipt,
)


ZERO = Decimal("0")


def empty_method_totals() -> dict[PaymentMethod, Decimal]:
    """One zero entry per payment method, in declaration order."""
    return {method: ZERO for method in PaymentMethod}


class CommissionSplit(BaseModel):
    """How a gross value is divided between professional and clinic."""

    professional_value: Decimal
    net_clinic: Decimal


class DailyTotals(BaseModel):
    """Totals for one calendar day."""

    gross: Decimal = ZERO
    expense: Decimal = ZERO
    net: Decimal = ZERO


class MonthlyTotals(BaseModel):
    """Totals for one calendar month."""

    gross: Decimal = ZERO
    net: Decimal = ZERO
    by_payment_method: dict[PaymentMethod, Decimal] = Field(
        default_factory=empty_method_totals
    )


class ProfessionalBreakdown(BaseModel):
    """
    Receipts of one professional within a list (usually one day).

    An unknown or removed professional simply yields zero totals.
    """

    professional_id: str
    gross_total: Decimal = ZERO
    professional_total: Decimal = ZERO
    clinic_total: Decimal = ZERO
    by_payment_method: dict[PaymentMethod, Decimal] = Field(
        default_factory=empty_method_totals
    )
    receipts: list[Receipt] = Field(default_factory=list)

    @property
    def receipt_count(self) -> int:
        return len(self.receipts)


class ProfessionalSummary(BaseModel):
    """A professional paired with their breakdown for the day."""

    professional: Professional
    breakdown: ProfessionalBreakdown


class DailyDashboard(BaseModel):
    """
    Everything the dashboard shows for a reference day.

    Daily figures cover the reference day only; monthly figures cover
    the calendar month the reference day falls in.
    """

    reference_date: date
    initial_cash: Decimal = ZERO
    daily_receipts: list[Receipt] = Field(default_factory=list)
    daily_expenses: list[Expense] = Field(default_factory=list)
    daily_totals: DailyTotals = Field(default_factory=DailyTotals)
    daily_by_payment_method: dict[PaymentMethod, Decimal] = Field(
        default_factory=empty_method_totals
    )
    professional_summaries: list[ProfessionalSummary] = Field(default_factory=list)
    monthly_totals: MonthlyTotals = Field(default_factory=MonthlyTotals)
    monthly_by_service_type: dict[str, Decimal] = Field(default_factory=dict)
    low_stock_products: list[str] = Field(
        default_factory=list,
        description="Names of products at or below their minimum quantity"
    )

    def summary_for(self, professional_id: str) -> Optional[ProfessionalSummary]:
        for summary in self.professional_summaries:
            if summary.professional.id == professional_id:
                return summary
        return None
