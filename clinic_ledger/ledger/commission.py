"""
Commission Calculator

Splits a gross value between the professional and the clinic.

The calculator assumes validated input: gross is a finite, non-negative
Decimal and percentage an integer in 0..100. Validation happens at the
form boundary (see clinic_ledger.validation).
"""

from decimal import Decimal

from clinic_ledger.models.ledger import CommissionSplit


# A professional registered "without percentage" carries 100. The clinic
# then keeps the whole gross and the professional is paid outside the
# ledger. This is not "the professional keeps 100%"; keep it as is until
# the clinic confirms otherwise.
NO_SPLIT_PERCENTAGE = 100

HUNDRED = Decimal("100")


def compute_split(gross_value: Decimal, percentage: int) -> CommissionSplit:
    """
    Compute the professional share and the clinic net of a gross value.

    Values keep full precision; rounding to cents happens only for display.

    >>> compute_split(Decimal("200"), 30)
    CommissionSplit(professional_value=Decimal('60'), net_clinic=Decimal('140'))
    """
    if percentage == NO_SPLIT_PERCENTAGE:
        professional_value = Decimal("0")
    else:
        professional_value = gross_value * Decimal(percentage) / HUNDRED

    return CommissionSplit(
        professional_value=professional_value,
        net_clinic=gross_value - professional_value,
    )
