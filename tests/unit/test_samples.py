"""Unit tests for built-in samples."""

import pytest

from booru_tag_converter.samples import SAMPLES, SampleCycler, get_sample


class TestSamples:
    def test_lookup_is_case_insensitive(self) -> None:
        assert get_sample("gelbooru").name == "Gelbooru"

    def test_unknown(self) -> None:
        with pytest.raises(KeyError):
            get_sample("pixiv")

    def test_cycler_wraps_around(self) -> None:
        cycler = SampleCycler()
        names = [cycler.next().name for _ in range(len(SAMPLES) + 1)]
        assert names == ["Danbooru", "Gelbooru", "Standard", "Danbooru"]
