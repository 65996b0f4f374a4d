"""Configured-credential login gate."""

from clinic_ledger.auth.session import NotAuthenticatedError, SessionGate

__all__ = ["NotAuthenticatedError", "SessionGate"]
