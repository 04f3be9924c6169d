"""タグ変換のコア処理群.

- フォーマット判定（Danbooru / Gelbooru / Standard）
- コンテンツ抽出・クリーニング（分割、重み除去、重複除去）
- グループ化フィルタ（削除/置換）と冗長タグの簡略化
"""

from .clean import clean_tags
from .extract import extract_content
from .filter_config import FilterConfig, FilterGroup, migrate_legacy_config
from .filter_engine import FilterEngine, FilterResult
from .formats import TagFormat, detect_format
from .simplify import SimplifyMode, simplify_tags

__all__ = [
    "TagFormat",
    "detect_format",
    "extract_content",
    "clean_tags",
    "FilterConfig",
    "FilterGroup",
    "migrate_legacy_config",
    "FilterEngine",
    "FilterResult",
    "SimplifyMode",
    "simplify_tags",
]
