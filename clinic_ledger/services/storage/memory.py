"""In-memory slot, used by tests and throwaway sessions."""

from typing import Optional

from clinic_ledger.services.storage.interface import KeyValueSlot


class InMemorySlot(KeyValueSlot):
    """Keeps values in a dict. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})
        self.write_count = 0

    def read(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def write(self, key: str, value: str) -> None:
        self._values[key] = value
        self.write_count += 1

    def delete(self, key: str) -> bool:
        return self._values.pop(key, None) is not None
