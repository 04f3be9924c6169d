"""フィルタ設定の保存先ストア群."""

from pathlib import Path

from .base_store import BaseStore
from .json_file_store import JSONFileStore
from .memory_store import MemoryStore
from .sqlite_store import SQLiteStore

STORE_BACKENDS = ("sqlite", "json", "memory")


def create_store(backend: str, path: Path | str | None = None) -> BaseStore:
    """バックエンド名からストアを生成する.

    Raises:
        ValueError: 未知のバックエンド、またはパスが必要なのに未指定の場合
    """
    if backend == "memory":
        return MemoryStore()
    if path is None:
        raise ValueError(f"Store backend '{backend}' requires a path")
    if backend == "sqlite":
        return SQLiteStore(path)
    if backend == "json":
        return JSONFileStore(path)
    raise ValueError(f"Unknown store backend: {backend!r} (valid: {STORE_BACKENDS})")


__all__ = [
    "BaseStore",
    "JSONFileStore",
    "MemoryStore",
    "SQLiteStore",
    "STORE_BACKENDS",
    "create_store",
]
