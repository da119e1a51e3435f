"""Key-value storage persisted as a JSON object in a local file."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from caffeine_calculator.services.history import KeyValueStorage

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileStorage(KeyValueStorage):
    """File-backed string storage, one JSON object holding every key."""

    path: Path

    def get(self, key: str) -> str | None:
        """Return the value stored under a key."""
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Store a value and flush the file."""
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove(self, key: str) -> None:
        """Delete a key and flush the file."""
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)

    def _load(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
            data = json.loads(text) if text.strip() else {}
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
            _logger.warning("Discarding unreadable storage file: path=%s", self.path)
            return {}
        if not isinstance(data, dict):
            _logger.warning("Discarding unexpected storage layout: path=%s", self.path)
            return {}
        return data

    def _dump(self, data: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        tmp_path.replace(self.path)
