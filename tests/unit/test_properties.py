"""Invariants every operation must preserve, checked over a sample corpus."""

from __future__ import annotations

import pytest

from colortext.annotated import AnnotatedString, SplitOptions, concat, join
from colortext.color import BLUE, GREEN
from colortext.markers import is_normalized
from colortext.markup import encode_markup, parse_markup
from tests.helpers.samples import SAMPLE_IDS, SAMPLE_VALUES, SAMPLES

samples = pytest.mark.parametrize("value", SAMPLE_VALUES, ids=SAMPLE_IDS)


def assert_valid(value: AnnotatedString) -> None:
    assert is_normalized(value.markers, len(value))
    if value:
        assert value.markers[0].start == 0
    else:
        assert value.markers == ()


def per_char_colors(value: AnnotatedString) -> list:
    return [value.color_at(i) for i in range(len(value))]


@samples
class TestOperationsKeepInvariants:
    """Every derived string has a normalised marker list."""

    def test_self(self, value: AnnotatedString) -> None:
        assert_valid(value)

    def test_concat(self, value: AnnotatedString) -> None:
        for other in SAMPLE_VALUES:
            assert_valid(concat(value, other))

    def test_substring(self, value: AnnotatedString) -> None:
        for start in range(len(value) + 1):
            for stop in range(start, len(value) + 1):
                assert_valid(value.substring(start, stop))

    def test_padding(self, value: AnnotatedString) -> None:
        assert_valid(value.pad_left(len(value) + 3))
        assert_valid(value.pad_right(len(value) + 3))

    def test_replace(self, value: AnnotatedString) -> None:
        for old in (" ", "l", ",", ">"):
            assert_valid(value.replace(old, BLUE.for_text("<>")))
            assert_valid(value.replace(old, AnnotatedString()))

    def test_split_and_trim(self, value: AnnotatedString) -> None:
        options = SplitOptions.TRIM_ENTRIES | SplitOptions.REMOVE_EMPTY_ENTRIES
        for part in value.split([",", " "], options=options):
            assert_valid(part)
        assert_valid(value.trim())

    def test_transforms(self, value: AnnotatedString) -> None:
        assert_valid(value.upper())
        assert_valid(value.recolor(lambda _c: GREEN))


@samples
class TestAlgebra:
    """Relations between operations."""

    def test_render_runs_rebuild_value(self, value: AnnotatedString) -> None:
        runs = value.render_runs()
        assert "".join(run.text for run in runs) == value.text
        assert AnnotatedString.from_runs(runs) == value

    def test_adjacent_runs_differ_in_color(self, value: AnnotatedString) -> None:
        runs = value.render_runs()
        assert all(a.color != b.color for a, b in zip(runs, runs[1:], strict=False))

    def test_concat_associative(self, value: AnnotatedString) -> None:
        a, b = SAMPLES["two_runs"], SAMPLES["empty"]
        assert concat(concat(value, a), b) == concat(value, concat(a, b))
        assert concat(concat(a, value), a) == concat(a, concat(value, a))

    def test_concat_keeps_character_colors(self, value: AnnotatedString) -> None:
        other = SAMPLES["three_runs"]
        joined = concat(value, other)
        assert per_char_colors(joined) == per_char_colors(value) + per_char_colors(
            other
        )

    def test_substring_keeps_character_colors(self, value: AnnotatedString) -> None:
        colors = per_char_colors(value)
        for start in range(len(value)):
            assert per_char_colors(value.substring(start)) == colors[start:]

    def test_split_join_inverse(self, value: AnnotatedString) -> None:
        separator = AnnotatedString(",")
        assert join(separator, value.split(",")).text == value.text

    def test_markup_round_trip(self, value: AnnotatedString) -> None:
        assert parse_markup(encode_markup(value)) == value

    def test_markup_round_trip_decimal(self, value: AnnotatedString) -> None:
        encoded = encode_markup(value, color_format="decimal", explicit_leading=False)
        assert parse_markup(encoded) == value
