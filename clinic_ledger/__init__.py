"""
Clinic Ledger - Source Package

A financial ledger for a small medical clinic: service receipts,
professional commissions, expenses, patients and stock levels,
mirrored to a local key-value slot on every change.

DESIGN PRINCIPLES:
1. Validate at the form boundary, store only complete records
2. Corrupt saved data never crashes the ledger
3. No silent corrections
4. Every mutation is logged
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Clinic Ledger Team"
