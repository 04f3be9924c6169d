"""Unit tests for redundant tag simplification."""

from booru_tag_converter.core.simplify import (
    SimplifyMode,
    TagStructure,
    is_complex_phrase_contained,
    is_simple_word_contained,
    is_tag_contained_in,
    parse_tag_structure,
    simplify_tags,
)


class TestSimplifyTags:
    def test_contained_tag_is_removed(self) -> None:
        assert simplify_tags(["hat", "red hat", "blue eyes"]) == ["red hat", "blue eyes"]

    def test_order_is_preserved(self) -> None:
        assert simplify_tags(["blue eyes", "hat", "1girl", "red hat"]) == ["blue eyes", "1girl", "red hat"]

    def test_bracketed_tags(self) -> None:
        tags = ["unzen (azur lane)", "unzen (sojourn through clear seas) (azur lane)"]
        assert simplify_tags(tags) == ["unzen (sojourn through clear seas) (azur lane)"]

    def test_censored_is_not_contained_in_uncensored(self) -> None:
        assert simplify_tags(["censored", "uncensored"]) == ["censored", "uncensored"]

    def test_pairwise_non_containing_is_unchanged(self) -> None:
        assert simplify_tags(["blue eyes", "1girl"]) == ["blue eyes", "1girl"]

    def test_short_lists(self) -> None:
        assert simplify_tags([]) == []
        assert simplify_tags(["hat"]) == ["hat"]

    def test_case_insensitive_duplicates_are_kept(self) -> None:
        """大文字小文字違いの同一タグは包含とみなさない."""
        assert simplify_tags(["Hat", "hat"]) == ["Hat", "hat"]

    def test_idempotent(self) -> None:
        tags = ["hat", "red hat", "witch hat", "long hair", "hair", "unzen (azur lane)", "unzen"]
        once = simplify_tags(tags)
        assert simplify_tags(once) == once

    def test_does_not_mutate_input(self) -> None:
        tags = ["hat", "red hat"]
        simplify_tags(tags)
        assert tags == ["hat", "red hat"]


class TestIsTagContainedIn:
    def test_equal_or_longer_is_never_contained(self) -> None:
        assert is_tag_contained_in("hat", "HAT") is False
        assert is_tag_contained_in("red hat", "hat") is False

    def test_word_boundary(self) -> None:
        assert is_tag_contained_in("hat", "red hat") is True
        assert is_tag_contained_in("hair", "long hair ornament") is True
        assert is_tag_contained_in("hat", "hatsune miku") is False

    def test_legacy_mode_uses_substring(self) -> None:
        assert is_tag_contained_in("censored", "uncensored", SimplifyMode.LEGACY) is True
        assert is_tag_contained_in("hat", "hatsune miku", SimplifyMode.LEGACY) is True
        assert is_tag_contained_in("hat", "HAT", SimplifyMode.LEGACY) is False

    def test_legacy_simplify(self) -> None:
        tags = ["censored", "uncensored", "smile"]
        assert simplify_tags(tags, SimplifyMode.LEGACY) == ["uncensored", "smile"]


class TestContainmentHelpers:
    def test_simple_word_rejects_glued_prefix(self) -> None:
        assert is_simple_word_contained("hat", "hatx hat") is False

    def test_simple_word_with_punctuation(self) -> None:
        assert is_simple_word_contained("azur lane", "unzen (azur lane)") is True

    def test_complex_phrase_requires_same_main_word(self) -> None:
        assert is_complex_phrase_contained("unzen (azur lane)", "akagi (azur lane) (cosplay)") is False

    def test_complex_phrase_bracket_substring(self) -> None:
        assert is_complex_phrase_contained("unzen (azur)", "unzen (azur lane)") is True

    def test_complex_phrase_missing_bracket(self) -> None:
        assert is_complex_phrase_contained("unzen (kancolle)", "unzen (azur lane)") is False


class TestParseTagStructure:
    def test_multiple_brackets(self) -> None:
        assert parse_tag_structure("unzen (sojourn through clear seas) (azur lane)") == TagStructure(
            main_word="unzen",
            bracket_contents=("sojourn through clear seas", "azur lane"),
        )

    def test_no_brackets(self) -> None:
        assert parse_tag_structure("red hat") == TagStructure(main_word="red hat", bracket_contents=())
