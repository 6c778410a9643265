"""Last-known address per record, kept as one plain-text file each."""

from __future__ import annotations

import hashlib
import logging
import re
from pathlib import Path

_SAFE_NAME_RE = re.compile(r"[A-Za-z0-9_-][A-Za-z0-9._-]*")


class AddressStore:
    """Reads and writes the address last pushed for each record name.

    Ordinary hostnames keep their name as the file name. Anything that could
    leave the state directory or clash with special names (path separators,
    wildcards, a leading dot) is stored under the SHA-256 of the record name.
    """

    def __init__(self, state_dir: str | Path = ".") -> None:
        self._state_dir = Path(state_dir)

    @property
    def state_dir(self) -> Path:
        return self._state_dir

    def path_for(self, record_name: str) -> Path:
        if _SAFE_NAME_RE.fullmatch(record_name):
            file_name = record_name
        else:
            file_name = hashlib.sha256(record_name.encode("utf-8")).hexdigest()
        return self._state_dir / file_name

    def read(self, record_name: str) -> str:
        path = self.path_for(record_name)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logging.info("No stored address for %s yet (%s)", record_name, path)
            return ""
        except (OSError, UnicodeDecodeError) as exc:
            logging.warning("Failed to read stored address from %s: %s", path, exc)
            return ""

    def write(self, record_name: str, address: str) -> None:
        """Overwrite the stored address; OSError propagates to the caller."""
        path = self.path_for(record_name)
        self._state_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(address, encoding="utf-8")
