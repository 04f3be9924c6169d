"""MemoryStore: in-process key-value store.

Used for tests and for the `memory` backend (settings are not kept across runs).
"""

from .base_store import BaseStore


class MemoryStore(BaseStore):
    """Dict-backed store.

    Args:
        initial: Optional initial key/value pairs
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
