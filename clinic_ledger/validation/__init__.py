"""Boundary validation of raw form input."""

from clinic_ledger.validation.validator import (
    EntryValidator,
    is_negative_number,
    parse_amount,
    parse_percentage,
    parse_whole_number,
)

__all__ = [
    "EntryValidator",
    "is_negative_number",
    "parse_amount",
    "parse_percentage",
    "parse_whole_number",
]
