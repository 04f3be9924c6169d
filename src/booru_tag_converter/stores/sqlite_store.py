"""SQLite キーバリューストア.

フィルタ設定をローカルの SQLite ファイルへ保存する。
1キー1行の単純なテーブルで、値は JSON 文字列のまま保存する。

注意:
    PRAGMA のうち journal_mode は DB ファイルに永続化されるが、
    synchronous / busy_timeout は接続単位の設定なので接続ごとに適用する。
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from loguru import logger

from .base_store import BaseStore

CONNECTION_PRAGMAS = [
    "PRAGMA journal_mode = WAL;",  # 読み取り並行性
    "PRAGMA synchronous = NORMAL;",
    "PRAGMA busy_timeout = 5000;",
]

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS KV_STORE (
    key TEXT NOT NULL PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at DATETIME DEFAULT (CURRENT_TIMESTAMP)
);
"""


class SQLiteStore(BaseStore):
    """SQLite ファイルをバックエンドにしたストア.

    Args:
        db_path: SQLite ファイルのパス（`:memory:` も可）。親ディレクトリは自動作成
    """

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(self.db_path)
        for pragma in CONNECTION_PRAGMAS:
            self._conn.execute(pragma)
        self._conn.execute(SCHEMA_SQL)
        self._conn.commit()
        logger.debug(f"Opened settings store: {self.db_path}")

    def get(self, key: str) -> str | None:
        row = self._conn.execute("SELECT value FROM KV_STORE WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO KV_STORE (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value),
            )

    def delete(self, key: str) -> None:
        with self._conn:
            self._conn.execute("DELETE FROM KV_STORE WHERE key = ?", (key,))

    def close(self) -> None:
        self._conn.close()
