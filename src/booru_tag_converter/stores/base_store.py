"""設定保存用キーバリューストア（基底クラス）.

フィルタ設定の永続化先（SQLite/JSONファイル/メモリ）を共通インターフェースで扱うための
抽象基底クラスを定義します。値は JSON 文字列として保存する前提です。
"""

from abc import ABC, abstractmethod


class BaseStore(ABC):
    """キーバリューストアの基底クラス.

    全てのストアはこのクラスを継承し、get()/set()/delete() を実装します。
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """キーに対応する値を取得する（存在しなければ None）."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """キーに値を保存する（既存値は上書き）."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """キーを削除する（存在しなくてもエラーにしない）."""
        ...

    def close(self) -> None:
        """リソースを解放する（必要なストアのみ上書き）."""
