"""冗長タグの簡略化.

他のタグに「含まれる」タグを取り除く（例: `red hat` があれば `hat` は不要）。

包含判定（STRICT、既定）:
    1. 単語境界での一致。`hat` は `red hat` に含まれるが、
       `censored` は `uncensored` に含まれない。
    2. 括弧付きタグの構造比較。`unzen (azur lane)` は
       `unzen (sojourn through clear seas) (azur lane)` に含まれる。

LEGACY は旧フィルタの単純な部分文字列一致。互換のために残しているだけで非推奨。
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_BRACKET = re.compile(r"\(([^)]+)\)")
_ALNUM = re.compile(r"[a-z0-9]")


class SimplifyMode(str, Enum):
    """包含判定の厳しさ."""

    STRICT = "strict"  # 単語境界 + 括弧構造
    LEGACY = "legacy"  # 部分文字列（非推奨）


@dataclass(frozen=True)
class TagStructure:
    main_word: str
    bracket_contents: tuple[str, ...]


def parse_tag_structure(tag: str) -> TagStructure:
    """タグを主語部分と括弧内の内容に分解する.

    Examples:
        >>> parse_tag_structure("unzen (azur lane)")
        TagStructure(main_word='unzen', bracket_contents=('azur lane',))
    """
    contents: list[str] = []
    clean = tag
    for match in _BRACKET.finditer(tag):
        contents.append(match.group(1).strip())
        clean = clean.replace(match.group(0), "", 1).strip()
    return TagStructure(main_word=clean.strip(), bracket_contents=tuple(contents))


def is_simple_word_contained(short_tag: str, long_tag: str) -> bool:
    """short_tag が long_tag に独立した単語として含まれるか判定する."""
    try:
        pattern = re.compile(rf"\b{re.escape(short_tag)}\b", re.IGNORECASE)
    except re.error:
        return False

    if not pattern.search(long_tag):
        return False

    short_lower = short_tag.lower()
    long_lower = long_tag.lower()

    # 先頭/末尾に接している場合は、前後の文字が英数字なら同一単語の一部とみなす
    if long_lower.startswith(short_lower) or long_lower.endswith(short_lower):
        if long_lower == short_lower:
            return False
        pos = long_lower.find(short_lower)
        if pos >= 0:
            before = long_lower[pos - 1] if pos > 0 else ""
            end = pos + len(short_lower)
            after = long_lower[end] if end < len(long_lower) else ""
            if _ALNUM.match(before) or _ALNUM.match(after):
                return False

    return True


def is_complex_phrase_contained(short_tag: str, long_tag: str) -> bool:
    """括弧付きタグとしての包含を判定する.

    主語部分が一致し、short 側の括弧内容が全て long 側のいずれかの括弧内容に
    部分文字列として含まれていれば包含とみなす。
    """
    short_parts = parse_tag_structure(short_tag)
    long_parts = parse_tag_structure(long_tag)

    if not short_parts.main_word or not long_parts.main_word:
        return False

    if short_parts.main_word.lower() != long_parts.main_word.lower():
        return False

    for short_bracket in short_parts.bracket_contents:
        needle = short_bracket.lower()
        if not any(needle in long_bracket.lower() for long_bracket in long_parts.bracket_contents):
            return False
    return True


def is_tag_contained_in(short_tag: str, long_tag: str, mode: SimplifyMode = SimplifyMode.STRICT) -> bool:
    """short_tag が long_tag に含まれる（冗長）か判定する."""
    if short_tag.lower() == long_tag.lower():
        return False

    if len(short_tag) >= len(long_tag):
        return False

    short_trimmed = short_tag.strip()
    long_trimmed = long_tag.strip()

    if mode == SimplifyMode.LEGACY:
        return short_trimmed.lower() in long_trimmed.lower()

    if is_simple_word_contained(short_trimmed, long_trimmed):
        return True

    return is_complex_phrase_contained(short_trimmed, long_trimmed)


def simplify_tags(tags: list[str], mode: SimplifyMode = SimplifyMode.STRICT) -> list[str]:
    """他のタグに含まれる冗長なタグを取り除く.

    Args:
        tags: タグのリスト
        mode: 包含判定のモード

    Returns:
        残ったタグのリスト（入力順を維持）

    Examples:
        >>> simplify_tags(["hat", "red hat", "blue eyes"])
        ['red hat', 'blue eyes']
    """
    if len(tags) <= 1:
        return list(tags)

    result: list[str] = []
    for i, tag in enumerate(tags):
        contained = any(i != j and is_tag_contained_in(tag, other, mode) for j, other in enumerate(tags))
        if not contained:
            result.append(tag)
    return result
