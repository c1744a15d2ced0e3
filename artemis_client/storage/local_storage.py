"""Client-local key/value storage persisted to a JSON file."""

import json
import os
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


class LocalStorage:
    """String key/value store kept in a single JSON file.

    Every write rewrites the file through a temporary sibling so a crash
    never leaves a half-written store behind.
    """

    def __init__(self, path: str | Path):
        """Initialize storage.

        Args:
            path: Location of the JSON file (``~`` is expanded)
        """
        self.path = Path(path).expanduser()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open(encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"Storage file {self.path} does not hold an object")
        return data

    def _save(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2, sort_keys=True)
        os.replace(tmp_path, self.path)

    def get_item(self, key: str) -> str | None:
        """Return the stored value for key, or None.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is not valid JSON
        """
        value = self._load().get(key)
        return None if value is None else str(value)

    def set_item(self, key: str, value: str) -> None:
        """Store a value.

        Raises:
            OSError: If the file cannot be written
            ValueError: If the existing file is not valid JSON
        """
        data = self._load()
        data[key] = value
        self._save(data)
        logger.debug("Stored local value", key=key)

    def remove_item(self, key: str) -> None:
        """Remove a value if present."""
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)
