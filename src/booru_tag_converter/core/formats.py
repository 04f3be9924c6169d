"""入力フォーマットの判定.

画像掲示板からコピーしたタグ文字列が、次のどれに当たるかを推定する。

- Danbooru: カテゴリ見出し + `?` 行 + タグ行（改行区切り）
- Gelbooru: `Artist?` / `Tag?` などのマーカーが1行に連結された形式
- Standard: カンマ区切りのプロンプト

判定は改行・マーカー・`?` の有無だけを見る決定的なヒューリスティックで、
どんな文字列でも必ずいずれか1つに分類される（空文字列は Standard）。
"""

from __future__ import annotations

import re
from enum import Enum


class TagFormat(str, Enum):
    """入力フォーマットの判定結果."""

    DANBOORU = "danbooru"  # 改行 + `?` 行
    GELBOORU = "gelbooru"  # `Artist?` 等が1行に連結
    STANDARD = "standard"  # カンマ区切り


GELBOORU_MARKERS = re.compile(r"(?:Artist|Character|Copyright|Tag|Metadata)\?", re.IGNORECASE)


def detect_format(text: str) -> TagFormat:
    """入力テキストのフォーマットを判定する.

    Args:
        text: 入力テキスト

    Returns:
        判定されたフォーマット

    Examples:
        >>> detect_format("General\\n?\\n1girl 6.1M")
        <TagFormat.DANBOORU: 'danbooru'>
        >>> detect_format("Tag? 1girl 8032615")
        <TagFormat.GELBOORU: 'gelbooru'>
        >>> detect_format("1girl, smile")
        <TagFormat.STANDARD: 'standard'>
    """
    has_newlines = "\n" in text
    has_question_marks = "?" in text

    if not has_newlines and GELBOORU_MARKERS.search(text):
        return TagFormat.GELBOORU

    if has_newlines and has_question_marks:
        return TagFormat.DANBOORU

    # マーカーが無くても単一行で `?` を含むものは Gelbooru 扱い
    if not has_newlines and has_question_marks:
        return TagFormat.GELBOORU

    return TagFormat.STANDARD
