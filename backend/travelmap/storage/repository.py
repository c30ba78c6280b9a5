from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol

from travelmap.core.errors import PersistenceError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """String key-value persistence, shaped like browser local storage."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryStore(KeyValueStore):
    def __init__(self, initial: Dict[str, str] | None = None) -> None:
        self.items: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set(self, key: str, value: str) -> None:
        self.items[key] = value


class JsonFileStore(KeyValueStore):
    """
    All keys live in a single JSON object file. Writes go to a temporary file
    in the same directory and are moved over the old file, so a crash never
    leaves a half-written store behind.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceError(f"{self.path} does not contain a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            try:
                data = self._read_all()
            except PersistenceError as exc:
                logger.warning("Overwriting unreadable store: %s", exc)
                data = {}
            data[key] = value
            tmp_name = None
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, indent=2)
                os.replace(tmp_name, self.path)
            except OSError as exc:
                if tmp_name is not None:
                    Path(tmp_name).unlink(missing_ok=True)
                raise PersistenceError(f"Cannot write {self.path}: {exc}") from exc
