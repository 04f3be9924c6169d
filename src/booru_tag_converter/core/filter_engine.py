"""グループ化フィルタエンジン.

FilterConfig のグループを先頭から順に適用する（左から右への fold）。

各グループの処理:
    1. キーワードをコンパイル（無効な正則表現はリテラル完全一致へフォールバック）
    2. いずれかのパターンに一致したタグの位置を記録
    3. 一致したタグを削除
    4. 有効な置換文字列があれば、最初に一致した位置へ置換タグを挿入
    5. リスト全体を完全一致で重複除去（先勝ち）

全グループの後、simplify が有効なら冗長タグの簡略化を行う。
グループの実行順が結果を左右する点に注意（[A, B] と [B, A] は別物）。
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from .filter_config import FilterConfig, FilterGroup
from .patterns import compile_keywords
from .replacement import parse_replacement
from .simplify import SimplifyMode, simplify_tags


@dataclass(frozen=True)
class FilterResult:
    """直近のフィルタ実行の統計."""

    group_match_counts: dict[str, int] = field(default_factory=dict)
    total_filtered: int = 0
    total_simplified: int = 0


def dedupe_exact(tags: list[str]) -> list[str]:
    """完全一致で重複を除去する（先勝ち・順序維持）."""
    seen: set[str] = set()
    out: list[str] = []
    for tag in tags:
        if tag in seen:
            continue
        seen.add(tag)
        out.append(tag)
    return out


def apply_group(group: FilterGroup, tags: list[str]) -> tuple[list[str], int]:
    """1グループ分の削除/置換を適用する.

    Args:
        group: 適用するグループ（有効かつキーワードありが前提）
        tags: 現在のタグリスト

    Returns:
        (処理後のタグリスト, 一致したタグ数)
    """
    patterns = compile_keywords(group.keywords)
    matched = [i for i, tag in enumerate(tags) if any(p.matches(tag) for p in patterns)]
    if not matched:
        return dedupe_exact(tags), 0

    matched_set = set(matched)
    remaining = [tag for i, tag in enumerate(tags) if i not in matched_set]

    tokens = parse_replacement(group.replacement)
    if tokens:
        # 削除した先頭要素より前のタグは動かないので、そのまま同じ位置へ差し込める
        insert_at = min(matched)
        remaining[insert_at:insert_at] = tokens

    return dedupe_exact(remaining), len(matched_set)


class FilterEngine:
    """FilterConfig に従ってタグリストをフィルタする.

    Args:
        config: フィルタ設定（エンジンは参照のみ。match_count だけ上書きする）
        simplify_mode: 冗長タグ簡略化の包含判定モード
    """

    def __init__(self, config: FilterConfig | None = None, simplify_mode: SimplifyMode = SimplifyMode.STRICT) -> None:
        self.config = config if config is not None else FilterConfig.default()
        self.simplify_mode = simplify_mode
        self.last_result = FilterResult()

    @property
    def master_enabled(self) -> bool:
        return self.config.master_enabled

    @property
    def simplify_enabled(self) -> bool:
        return self.config.simplify_enabled

    def apply_filter(self, tags: list[str]) -> list[str]:
        """タグリストにフィルタを適用する.

        Args:
            tags: `clean_tags()` の出力

        Returns:
            フィルタ後のタグリスト（入力リストは変更しない）
        """
        if not self.config.master_enabled:
            self.last_result = FilterResult()
            return list(tags)

        current = list(tags)
        match_counts: dict[str, int] = {}

        for group in self.config.groups:
            if not group.is_active:
                group.match_count = 0
                match_counts[group.id] = 0
                continue

            current, count = apply_group(group, current)
            group.match_count = count
            match_counts[group.id] = count
            if count:
                logger.debug(f"Filter group '{group.name}' matched {count} tags")

        total_simplified = 0
        if self.config.simplify_enabled:
            before = len(current)
            current = simplify_tags(current, self.simplify_mode)
            total_simplified = before - len(current)

        self.last_result = FilterResult(
            group_match_counts=match_counts,
            total_filtered=sum(match_counts.values()),
            total_simplified=total_simplified,
        )
        return current
