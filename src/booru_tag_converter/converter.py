"""タグ変換のパイプライン制御.

フォーマット判定 → コンテンツ抽出 → クリーニング → フィルタ の4段を順に実行する。

`convert()` は例外を外に出さない（fail-soft）。想定外のエラーはログに残し、
空リストと `ConversionStatus.error` で呼び出し側へ伝える。
呼び出し側（CLI/UI）は `status` だけを読めばよい。
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from booru_tag_converter.core.clean import clean_tags
from booru_tag_converter.core.extract import extract_content
from booru_tag_converter.core.filter_engine import FilterEngine
from booru_tag_converter.core.formats import TagFormat, detect_format
from booru_tag_converter.core.simplify import SimplifyMode
from booru_tag_converter.settings import FilterSettings

CONVERSION_ERROR_MESSAGE = "Conversion failed, please check the input format"


@dataclass(frozen=True)
class ConversionStatus:
    """直近の変換結果の状態（読み取り専用スナップショット）."""

    format: TagFormat | None = None
    tag_count: int = 0
    master_enabled: bool = False
    simplify_enabled: bool = False
    group_match_counts: dict[str, int] = field(default_factory=dict)
    total_filtered: int = 0
    total_simplified: int = 0
    error: str | None = None

    def as_dict(self) -> dict[str, object]:
        return {
            "format": self.format.value if self.format else None,
            "tag_count": self.tag_count,
            "master_enabled": self.master_enabled,
            "simplify_enabled": self.simplify_enabled,
            "group_match_counts": dict(self.group_match_counts),
            "total_filtered": self.total_filtered,
            "total_simplified": self.total_simplified,
            "error": self.error,
        }


class TagConverter:
    """変換パイプラインのコンテキスト.

    起動時に1度だけ生成し、CLI やイベントハンドラへ渡して使う。

    Args:
        engine: フィルタエンジン（省略時はフィルタ無効の既定設定）
        settings: 永続化された設定（指定時は設定の差し替えにエンジンを追従させる）
    """

    def __init__(self, engine: FilterEngine | None = None, settings: FilterSettings | None = None) -> None:
        self.engine = engine if engine is not None else FilterEngine()
        self._settings = settings
        self._status = self._empty_status()

    @classmethod
    def from_settings(cls, settings: FilterSettings, simplify_mode: SimplifyMode = SimplifyMode.STRICT) -> TagConverter:
        """永続化された設定を参照するコンバータを作る.

        エンジンは settings.config を参照するだけなので、設定変更は次の convert から反映される。
        """
        return cls(FilterEngine(settings.config, simplify_mode=simplify_mode), settings=settings)

    @property
    def status(self) -> ConversionStatus:
        return self._status

    def _sync_config(self) -> None:
        # settings.reset()/import で config が差し替わっても追従する
        if self._settings is not None and self.engine.config is not self._settings.config:
            self.engine.config = self._settings.config

    def _empty_status(self, error: str | None = None) -> ConversionStatus:
        return ConversionStatus(
            master_enabled=self.engine.master_enabled,
            simplify_enabled=self.engine.simplify_enabled,
            error=error,
        )

    def convert(self, raw_input: object) -> list[str]:
        """入力文字列をタグのリストに変換する.

        Args:
            raw_input: 入力（str 以外や空文字列は空リスト）

        Returns:
            変換後のタグリスト。失敗時も例外は出さず空リスト
        """
        self._sync_config()

        if not isinstance(raw_input, str) or not raw_input.strip():
            self._status = self._empty_status()
            return []

        try:
            text = raw_input.strip()
            fmt = detect_format(text)
            raw_content = extract_content(text, fmt)
            cleaned = clean_tags(raw_content)
            tags = self.engine.apply_filter(cleaned)
        except Exception:
            logger.exception("Tag conversion failed")
            self._status = self._empty_status(error=CONVERSION_ERROR_MESSAGE)
            return []

        result = self.engine.last_result
        self._status = ConversionStatus(
            format=fmt,
            tag_count=len(tags),
            master_enabled=self.engine.master_enabled,
            simplify_enabled=self.engine.simplify_enabled,
            group_match_counts=dict(result.group_match_counts),
            total_filtered=result.total_filtered,
            total_simplified=result.total_simplified,
        )
        logger.debug(
            f"Converted input: format={fmt.value}, cleaned={len(cleaned)}, output={len(tags)}, "
            f"filtered={result.total_filtered}, simplified={result.total_simplified}"
        )
        return tags
