"""
Record Lookups

DESIGN DECISION: Lookups are DETERMINISTIC filters over the stored
records. They never reorder, never invent matches and return an empty
list when nothing matches.
"""

from collections.abc import Iterable
from enum import Enum

from clinic_ledger.models.records import Patient, Product


class StockFilter(str, Enum):
    """Which products the stock list shows."""
    ALL = "all"
    LOW = "low"      # quantity at or below the minimum
    EMPTY = "empty"  # quantity zero


def _matches(name: str, text: str) -> bool:
    return text.strip().lower() in name.lower()


def search_patients(patients: Iterable[Patient], text: str = "") -> list[Patient]:
    """Patients whose name contains the text, ignoring case. Empty text matches all."""
    return [p for p in patients if _matches(p.name, text)]


def filter_products(
    products: Iterable[Product],
    text: str = "",
    stock_filter: StockFilter = StockFilter.ALL,
) -> list[Product]:
    """
    Products matching a name search and a stock level.

    Args:
        products: Products to filter, order is kept
        text: Case-insensitive substring of the product name
        stock_filter: ALL, LOW (at or below minimum) or EMPTY (zero)

    Returns:
        Matching products
    """
    stock_filter = StockFilter(stock_filter)
    results = []
    for product in products:
        if not _matches(product.name, text):
            continue
        if stock_filter == StockFilter.LOW and not product.is_low_stock:
            continue
        if stock_filter == StockFilter.EMPTY and not product.is_out_of_stock:
            continue
        results.append(product)
    return results


def low_stock_names(products: Iterable[Product]) -> list[str]:
    """Names of products at or below their minimum, for the dashboard alert."""
    return [p.name for p in filter_products(products, stock_filter=StockFilter.LOW)]
