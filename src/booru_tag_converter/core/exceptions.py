"""Tag converter exceptions.

カスタム例外クラスを定義します。
"""

from __future__ import annotations


class TagConverterError(Exception):
    """booru_tag_converter の基底例外."""


class ConfigValidationError(TagConverterError, ValueError):
    """フィルタ設定（永続化データ/インポート文書）が不正な場合の例外.

    Attributes:
        field: 問題のあったフィールド名（特定できない場合は None）
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        """例外初期化.

        Args:
            message: エラーメッセージ
            field: 問題のあったフィールド名
        """
        self.field = field
        super().__init__(message)
