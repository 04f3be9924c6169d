"""Unit tests for the conversion controller."""

import pytest

from booru_tag_converter.converter import CONVERSION_ERROR_MESSAGE, ConversionStatus, TagConverter
from booru_tag_converter.core.filter_config import FilterConfig, FilterGroup
from booru_tag_converter.core.filter_engine import FilterEngine
from booru_tag_converter.core.formats import TagFormat
from booru_tag_converter.samples import SAMPLES, get_sample
from booru_tag_converter.settings import FilterSettings
from booru_tag_converter.stores import MemoryStore


class _BrokenEngine(FilterEngine):
    def apply_filter(self, tags: list[str]) -> list[str]:
        raise RuntimeError("boom")


class TestConvert:
    def test_danbooru_sample(self) -> None:
        converter = TagConverter()
        assert converter.convert(get_sample("Danbooru").content) == ["1boy", "1girl", "original"]
        assert converter.status.format == TagFormat.DANBOORU
        assert converter.status.tag_count == 3

    def test_gelbooru_sample(self) -> None:
        converter = TagConverter()
        assert converter.convert(get_sample("Gelbooru").content) == [
            "nekotokage",
            "shirayuki tomoe",
            "1girl",
            "long hair",
            "smile",
        ]
        assert converter.status.format == TagFormat.GELBOORU

    def test_standard_sample(self) -> None:
        converter = TagConverter()
        assert converter.convert(get_sample("Standard").content) == [
            "masterpiece",
            "best quality",
            "1girl",
            "long hair",
            "blue eyes",
            "school uniform",
        ]
        assert converter.status.format == TagFormat.STANDARD

    @pytest.mark.parametrize("raw", ["", "   \n ", None, 42, ["1girl"]])
    def test_empty_or_non_string_input(self, raw: object) -> None:
        converter = TagConverter()
        assert converter.convert(raw) == []
        assert converter.status.format is None
        assert converter.status.error is None

    def test_empty_input_clears_status_only(self) -> None:
        """空入力は直前の状態を消すだけで、グループの統計は変更しない."""
        group = FilterGroup(id="g", name="Hats", keywords=["hat"])
        converter = TagConverter(FilterEngine(FilterConfig(master_enabled=True, groups=[group])))
        converter.convert("hat, smile")
        assert converter.status.format == TagFormat.STANDARD

        assert converter.convert("") == []
        assert converter.status.format is None
        assert converter.status.group_match_counts == {}
        assert converter.status.master_enabled is True
        assert group.match_count == 1

    def test_input_is_trimmed_before_detection(self) -> None:
        """前後の改行で Danbooru と誤判定しないこと."""
        converter = TagConverter()
        assert converter.convert("\n1girl, smile\n") == ["1girl", "smile"]
        assert converter.status.format == TagFormat.STANDARD

    def test_idempotent(self) -> None:
        converter = TagConverter()
        for sample in SAMPLES:
            assert converter.convert(sample.content) == converter.convert(sample.content)

    def test_failure_is_contained(self) -> None:
        converter = TagConverter(_BrokenEngine(FilterConfig(master_enabled=True)))
        assert converter.convert("1girl, smile") == []
        assert converter.status.error == CONVERSION_ERROR_MESSAGE
        assert converter.status.master_enabled is True

    def test_error_is_cleared_by_next_success(self) -> None:
        engine = _BrokenEngine()
        converter = TagConverter(engine)
        converter.convert("1girl")
        converter.engine = FilterEngine()
        converter.convert("1girl")
        assert converter.status.error is None


class TestStatus:
    def test_filter_stats(self) -> None:
        config = FilterConfig(
            master_enabled=True,
            simplify_enabled=True,
            groups=[FilterGroup(id="g", name="Marks", keywords=["watermark"], replacement="clean, safe")],
        )
        converter = TagConverter(FilterEngine(config))

        tags = converter.convert("hat, watermark, red hat, smile")
        assert tags == ["clean", "safe", "red hat", "smile"]

        status = converter.status
        assert status.master_enabled is True
        assert status.simplify_enabled is True
        assert status.group_match_counts == {"g": 1}
        assert status.total_filtered == 1
        assert status.total_simplified == 1
        assert status.tag_count == 4

    def test_as_dict(self) -> None:
        status = ConversionStatus(format=TagFormat.GELBOORU, tag_count=2)
        data = status.as_dict()
        assert data["format"] == "gelbooru"
        assert data["tag_count"] == 2
        assert data["error"] is None


class TestFromSettings:
    def test_follows_settings_changes(self) -> None:
        settings = FilterSettings(MemoryStore())
        converter = TagConverter.from_settings(settings)

        assert converter.convert("hat, smile") == ["hat", "smile"]

        settings.add_group(name="Hats", keywords=["hat"])
        settings.set_master_enabled(True)
        assert converter.convert("hat, smile") == ["smile"]

        settings.reset()
        assert converter.convert("hat, smile") == ["hat", "smile"]
        assert converter.status.master_enabled is False
