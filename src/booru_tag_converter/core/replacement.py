"""置換文字列の検証とトークン分割.

置換文字列は出力と同じ `", "` 区切りで書く決まりにしている。
書式が崩れているもの（`a,b` / `a , b` / `a, , b` など）は無効とし、
フィルタ実行時は「置換なし（削除のみ）」として扱う。エラーにはしない。
"""

from __future__ import annotations

REPLACEMENT_SEPARATOR = ", "


def replacement_error(text: str) -> str | None:
    """置換文字列が無効な理由を返す（有効なら None）.

    Examples:
        >>> replacement_error("clean, safe") is None
        True
        >>> replacement_error("clean,safe")
        'Each comma must be followed by exactly one space'
    """
    if not text or "," not in text:
        return None

    for i, ch in enumerate(text):
        if ch != ",":
            continue
        if i > 0 and text[i - 1] == " ":
            return "A comma must not be preceded by a space"
        if i + 1 >= len(text) or text[i + 1] != " ":
            return "Each comma must be followed by exactly one space"
        if i + 2 < len(text) and text[i + 2] == " ":
            return "Each comma must be followed by exactly one space"

    tokens = [token.strip() for token in text.split(REPLACEMENT_SEPARATOR)]
    if any(not token for token in tokens):
        return "Empty replacement tag"

    if REPLACEMENT_SEPARATOR.join(tokens) != text:
        return "Replacement tags must not have leading or trailing spaces"

    return None


def is_valid_replacement(text: str) -> bool:
    """置換文字列として有効か判定する（空文字列は有効）."""
    return replacement_error(text) is None


def parse_replacement(text: str) -> list[str]:
    """置換文字列をトークンに分割する.

    Returns:
        置換トークンのリスト。空または無効な文字列なら空リスト
    """
    if not text or not is_valid_replacement(text):
        return []
    if "," not in text:
        token = text.strip()
        return [token] if token else []
    return text.split(REPLACEMENT_SEPARATOR)
