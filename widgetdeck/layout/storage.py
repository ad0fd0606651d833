"""
Key-value persistence for layout documents.

The layout engine only needs ``get(key) -> str | None`` and
``set(key, value)``. MemoryStore backs tests and throwaway sessions;
JsonFileStore keeps every key in a single JSON object on disk.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol, runtime_checkable

from widgetdeck.exceptions import StorageWriteError

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal string key-value store."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """In-memory key-value store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self) -> List[str]:
        return sorted(self._data)


class JsonFileStore:
    """Key-value store persisted as one JSON object in a file.

    A missing, unreadable or corrupt file reads as empty; the next write
    replaces it. Writes go through a temp file and ``os.replace`` so a crash
    mid-write never leaves a truncated document behind.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring unreadable layout store {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring layout store {self.path}: top level is not an object")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        """Write ``value`` under ``key``.

        Raises:
            StorageWriteError: If the file cannot be written
        """
        data = self._read_all()
        data[key] = value
        payload = json.dumps(data, indent=2, sort_keys=True) + "\n"

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=str(self.path.parent)
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(
                "Failed to write layout store", key=key, path=str(self.path)
            ) from e
