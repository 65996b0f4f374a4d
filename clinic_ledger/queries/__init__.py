"""Patient and stock lookups."""

from clinic_ledger.queries.lookups import (
    StockFilter,
    filter_products,
    low_stock_names,
    search_patients,
)

__all__ = ["StockFilter", "filter_products", "low_stock_names", "search_patients"]
