"""フィルタキーワードのパターンコンパイル.

キーワードは基本的に正規表現として扱う。コンパイルに失敗したものはエラーにせず、
エスケープしたリテラルの完全一致（`^...$`）として扱う。

アンカー（`^` / `$`）も `\\b` も含まないキーワードは `^keyword$` で囲む。
`censored` が `uncensored` にヒットするような部分一致を避けるため。
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from loguru import logger


@dataclass(frozen=True)
class RegexPattern:
    """正規表現としてコンパイルできたキーワード."""

    source: str
    regex: re.Pattern[str]

    def matches(self, tag: str) -> bool:
        return self.regex.search(tag) is not None


@dataclass(frozen=True)
class LiteralPattern:
    """正規表現として無効だったキーワード（リテラル完全一致）."""

    text: str
    regex: re.Pattern[str]

    def matches(self, tag: str) -> bool:
        return self.regex.search(tag) is not None


CompiledPattern = RegexPattern | LiteralPattern


def needs_anchoring(keyword: str) -> bool:
    """境界指定が無く、完全一致に寄せるべきキーワードか判定する."""
    return not keyword.startswith("^") and not keyword.endswith("$") and "\\b" not in keyword


def compile_literal(keyword: str) -> LiteralPattern:
    text = keyword.strip()
    return LiteralPattern(text=text, regex=re.compile(f"^{re.escape(text)}$", re.IGNORECASE))


def compile_keyword(keyword: str) -> CompiledPattern | None:
    """キーワードを1つコンパイルする.

    Args:
        keyword: 生のキーワード（正規表現またはリテラル）

    Returns:
        コンパイル済みパターン。空白のみのキーワードは None

    Examples:
        >>> compile_keyword("hat").matches("red hat")
        False
        >>> compile_keyword("hat$").matches("red hat")
        True
        >>> isinstance(compile_keyword("[broken"), LiteralPattern)
        True
    """
    trimmed = keyword.strip()
    if not trimmed:
        return None

    final_pattern = f"^{trimmed}$" if needs_anchoring(trimmed) else trimmed
    try:
        return RegexPattern(source=trimmed, regex=re.compile(final_pattern, re.IGNORECASE))
    except re.error as e:
        logger.debug(f"Keyword is not a valid regex, falling back to literal match: {trimmed!r} ({e})")
        return compile_literal(trimmed)


def compile_keywords(keywords: list[str]) -> list[CompiledPattern]:
    """キーワード列をコンパイルする（空キーワードは除外）."""
    patterns: list[CompiledPattern] = []
    for keyword in keywords:
        pattern = compile_keyword(keyword)
        if pattern is not None:
            patterns.append(pattern)
    return patterns
