"""フォーマット別のコンテンツ抽出.

判定済みフォーマットに従って、入力から「カンマ区切りの生コンテンツ」を取り出す。
ここではタグへの分割は行わない（分割・重複除去は `clean` の責務）。
"""

from __future__ import annotations

import re

from .formats import TagFormat

# Gelbooru はカテゴリ名の直後に空白が入る（`Artist nekotokage 169` のような段落）
_CATEGORY_CONTENT = re.compile(r"^(Artist|Character|Copyright|Metadata|Tag)\s+(.*)$")
# 末尾の件数 + 次段落のカテゴリ名（区切りが無く連結しているケース）
_GELBOORU_WEIGHT = re.compile(r"\s+\d+\s*(Artist|Character|Copyright|Metadata|Tag)?.*$")
_TRAILING_COUNT = re.compile(r"\s+\d+.*$")

CONTENT_SEPARATOR = ", "


def extract_danbooru(text: str) -> str:
    """Danbooru 形式から `?` 行の次の行だけを取り出す.

    `?` 行に続かない行（`General` などの見出し）は捨てる。
    取り出した行はマーカーとして再判定しない。
    """
    lines = [line.strip() for line in text.split("\n")]
    contents: list[str] = []

    i = 0
    while i < len(lines):
        if lines[i] == "?" and i + 1 < len(lines):
            contents.append(lines[i + 1])
            i += 2
            continue
        i += 1

    return CONTENT_SEPARATOR.join(contents)


def process_gelbooru_segment(segment: str) -> str | None:
    """Gelbooru の1段落からタグ部分を取り出す.

    Args:
        segment: `?` で分割した段落（strip 済み）

    Returns:
        タグ文字列。空、または1文字以下なら None
    """
    category_match = _CATEGORY_CONTENT.match(segment)
    if category_match:
        content = _GELBOORU_WEIGHT.sub("", category_match.group(2))
    else:
        content = _TRAILING_COUNT.sub("", segment)

    content = content.strip()
    if len(content) <= 1:
        return None
    return content


def extract_gelbooru(text: str) -> str:
    """Gelbooru 形式を `?` で分割し、段落ごとにタグを取り出す."""
    processed: list[str] = []
    for segment in text.split("?"):
        trimmed = segment.strip()
        if not trimmed:
            continue
        content = process_gelbooru_segment(trimmed)
        if content:
            processed.append(content)
    return CONTENT_SEPARATOR.join(processed)


def extract_content(text: str, fmt: TagFormat) -> str:
    """フォーマットに応じてコンテンツを抽出する.

    Args:
        text: 入力テキスト
        fmt: `detect_format()` の判定結果

    Returns:
        カンマ区切りの生コンテンツ（Standard は入力そのまま）
    """
    if fmt == TagFormat.DANBOORU:
        return extract_danbooru(text)
    if fmt == TagFormat.GELBOORU:
        return extract_gelbooru(text)
    return text
