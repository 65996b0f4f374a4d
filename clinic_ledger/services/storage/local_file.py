"""
Local File Storage Implementation

Each key is one UTF-8 file inside a data directory.

TRADEOFFS:
- Not suitable for concurrent writers (one clinic, one user: we're fine)
- No transactions; a write goes to a temporary file first and is then
  renamed over the target, so a crash never leaves half a document

The implementation follows the abstract interface, so the ledger can
move to another backend without changing business logic.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from clinic_ledger.config import get_settings
from clinic_ledger.services.storage.interface import (
    KeyValueSlot,
    SlotReadError,
    SlotWriteError,
)


class JsonFileSlot(KeyValueSlot):
    """Stores each key as <data_dir>/<key>.json."""

    SUFFIX = ".json"

    def __init__(self, data_dir: Optional[Path] = None):
        self._data_dir = Path(data_dir or get_settings().storage.data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        return self._data_dir / f"{key}{self.SUFFIX}"

    def read(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise SlotReadError(f"Failed to read {path}: {e}")

    def write(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir,
                prefix=f".{key}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise SlotWriteError(f"Failed to write {path}: {e}")

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise SlotWriteError(f"Failed to delete {path}: {e}")
