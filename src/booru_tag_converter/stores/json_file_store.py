"""JSONFileStore: key-value store backed by a single JSON file.

The whole file is one JSON object (key -> value string). Writes go to a
temporary file first and replace the original, so a crash never leaves a
half-written settings file behind.
"""

import json
import os
from pathlib import Path

from loguru import logger

from .base_store import BaseStore


class JSONFileStore(BaseStore):
    """Store for JSON settings files.

    Args:
        file_path: Path to the JSON file (created on first write)
    """

    def __init__(self, file_path: Path | str) -> None:
        self.file_path = Path(file_path)

    def _read_all(self) -> dict[str, str]:
        if not self.file_path.exists():
            return {}
        try:
            with open(self.file_path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to read JSON store: {self.file_path}") from e

        if not isinstance(data, dict):
            raise ValueError(f"JSON store must contain a JSON object: {self.file_path}")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.file_path.with_name(self.file_path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.file_path)

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except ValueError:
            logger.warning(f"Overwriting unreadable JSON store: {self.file_path}")
            data = {}
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
