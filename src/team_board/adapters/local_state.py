"""Durable local key-value state backed by a JSON file."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

_logger = logging.getLogger(__name__)


class StateStorage(Protocol):
    """Interface for small durable client-side state."""

    def get(self, key: str) -> object | None:
        """Return the stored value for a key, if present."""

    def set(self, key: str, value: object) -> None:
        """Store a JSON-serialisable value under a key."""

    def remove(self, key: str) -> None:
        """Remove a key if present."""


@dataclass
class JsonFileStateStorage(StateStorage):
    """State storage persisted to a single JSON document.

    An unreadable or corrupted file reads as empty; the next write replaces it.
    """

    path: Path

    def get(self, key: str) -> object | None:
        """Return a stored value."""
        return self._read().get(key)

    def set(self, key: str, value: object) -> None:
        """Store a value and flush the document to disk."""
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        """Remove a value and flush the document to disk."""
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def _read(self) -> dict[str, object]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError:
            _logger.warning("Unable to read state file %s", self.path, exc_info=True)
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            _logger.warning("Ignoring corrupted state file %s", self.path)
            return {}
        if not isinstance(data, dict):
            _logger.warning("Ignoring state file %s without an object", self.path)
            return {}
        return data

    def _write(self, data: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
