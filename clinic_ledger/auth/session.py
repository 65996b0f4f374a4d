"""
Session Gate

A single configured credential pair guards access to the ledger.

This is NOT authentication in any security sense: credentials come from
settings in plain text, nothing is hashed and the session never expires.
The gate only keeps casual users away from the dashboard.

The logged-in flag lives under its own slot key, so logging out never
touches ledger data.
"""

from typing import Optional

from clinic_ledger.activity import ActivityLogger
from clinic_ledger.config import AuthSettings, get_settings
from clinic_ledger.services.storage.interface import KeyValueSlot


SESSION_FLAG = "true"


class NotAuthenticatedError(Exception):
    """Raised when the ledger is opened without a logged-in session."""
    pass


class SessionGate:
    """Login flag stored in a key-value slot."""

    def __init__(
        self,
        slot: KeyValueSlot,
        auth_settings: Optional[AuthSettings] = None,
        session_key: Optional[str] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        settings = get_settings()
        self._slot = slot
        self._auth = auth_settings or settings.auth
        self._key = session_key or settings.storage.session_key
        self._activity = activity_logger or ActivityLogger()

    @property
    def slot(self) -> KeyValueSlot:
        return self._slot

    def login(self, username: str, password: str) -> bool:
        """
        Check the credentials and set the session flag on success.

        Returns:
            True if the credentials match the configured pair
        """
        if username != self._auth.username or password != self._auth.password:
            self._activity.log_login_failed(username)
            return False

        self._slot.write(self._key, SESSION_FLAG)
        self._activity.log_login_succeeded(username)
        return True

    def is_authenticated(self) -> bool:
        return self._slot.read(self._key) == SESSION_FLAG

    def logout(self) -> None:
        """Clear the session flag. Ledger data stays as it is."""
        self._slot.delete(self._key)
        self._activity.log_logged_out()

    def require(self) -> None:
        """
        Raises:
            NotAuthenticatedError: If nobody is logged in
        """
        if not self.is_authenticated():
            raise NotAuthenticatedError("Log in before opening the ledger")
