"""Danbooru/Gelbooru/カンマ区切りのタグ文字列を、重複なし・フィルタ済みのタグリストに変換する."""

from booru_tag_converter.converter import ConversionStatus, TagConverter
from booru_tag_converter.settings import FilterSettings

__version__ = "0.1.0"

__all__ = [
    "ConversionStatus",
    "FilterSettings",
    "TagConverter",
]
