"""抽出済みコンテンツのクリーニング（分割・ノイズ除去・重複除去）.

設計方針:
    - カンマで分割し、カテゴリ見出し（`Artist` など単独の語）はタグとして扱わない
    - 末尾の件数/重み（`1.4M`, `169`, `12k`）はサイトの統計値なので除去する
    - 重複判定は大文字小文字を無視し、表示は最初に出現した表記を残す
"""

from __future__ import annotations

import re

CATEGORY_MARKERS = ("Artist", "Character", "Copyright", "Tag", "Metadata", "General")

_CATEGORY_WORDS = frozenset(word.lower() for word in CATEGORY_MARKERS)
_WEIGHT_SUFFIX = re.compile(r"\s+\d+\.?\d*[kM]?\s*$")
_SPACES = re.compile(r"\s+")


def is_category_word(text: str) -> bool:
    """カテゴリ見出しそのもの（`Artist`, `General` など）か判定する."""
    return text.lower() in _CATEGORY_WORDS


def clean_single_tag(text: str) -> str | None:
    """1タグ分の文字列を整形する.

    Returns:
        整形後のタグ。捨てるべき断片なら None

    Examples:
        >>> clean_single_tag("1girl 6.1M")
        '1girl'
        >>> clean_single_tag("long   hair")
        'long hair'
        >>> clean_single_tag("General") is None
        True
    """
    if not text:
        return None

    if is_category_word(text):
        return None

    cleaned = _WEIGHT_SUFFIX.sub("", text).strip()
    cleaned = _SPACES.sub(" ", cleaned).strip()
    return cleaned or None


def remove_duplicates(tags: list[str]) -> list[str]:
    """大文字小文字を無視して重複を除去する（先勝ち・順序維持）."""
    seen: set[str] = set()
    out: list[str] = []
    for tag in tags:
        key = tag.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(tag)
    return out


def clean_tags(raw_text: str) -> list[str]:
    """カンマ区切りの生コンテンツをタグのリストに変換する.

    Args:
        raw_text: `extract_content()` の出力

    Returns:
        重複・カテゴリ見出し・重みを含まないタグのリスト（入力順）
    """
    if not raw_text:
        return []

    cleaned: list[str] = []
    for segment in raw_text.split(","):
        tag = clean_single_tag(segment.strip())
        if tag:
            cleaned.append(tag)

    return remove_duplicates(cleaned)
