"""Display helpers. Stored values keep full precision; rounding happens here only."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from clinic_ledger.config import get_settings


CENTS = Decimal("0.01")


def round_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_currency(value: Decimal, symbol: Optional[str] = None) -> str:
    """
    Format an amount with two decimals and the configured currency symbol.

    >>> format_currency(Decimal("60"), "R$")
    'R$ 60.00'
    """
    if symbol is None:
        symbol = get_settings().app.currency_symbol
    return f"{symbol} {round_cents(value)}"
