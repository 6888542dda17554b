"""Tests for descriptor collection and deduplication."""
from __future__ import annotations

import pytest

from den_stitcher.collector import ImageElement, collect_sources, dedup

PREFIX = "BEARISH #"


def _el(
    alt: str, src: str = "", current: str = "", side: int = 10,
) -> ImageElement:
    return ImageElement(alt=alt, src=src, current_src=current,
                        natural_width=side, natural_height=side)


class TestCollectSources:
    def test_filters_by_alt_prefix_and_keeps_order(self) -> None:
        elements = [
            _el("BEARISH #2", src="b"),
            _el("Logo", src="logo"),
            _el("BEARISH #1", src="a"),
            _el("bearish #3", src="lower"),
        ]
        assert collect_sources(elements, PREFIX) == ["b", "a"]

    def test_prefers_current_src(self) -> None:
        elements = [_el("BEARISH #1", src="declared", current="picked")]
        assert collect_sources(elements, PREFIX) == ["picked"]

    def test_drops_elements_without_source(self) -> None:
        elements = [_el("BEARISH #1"), _el("BEARISH #2", src="x")]
        assert collect_sources(elements, PREFIX) == ["x"]

    def test_no_match_is_empty_not_error(self) -> None:
        assert collect_sources([_el("Other", src="x")], PREFIX) == []
        assert collect_sources([], PREFIX) == []

    def test_require_rendered_skips_undecoded(self) -> None:
        elements = [
            _el("BEARISH #1", src="a", side=0),
            _el("BEARISH #2", src="b"),
        ]
        assert collect_sources(elements, PREFIX) == ["a", "b"]
        assert collect_sources(
            elements, PREFIX, require_rendered=True) == ["b"]

    def test_limit_caps_considered_elements(self) -> None:
        elements = [_el(f"BEARISH #{i}", src=f"s{i}") for i in range(10)]
        assert collect_sources(elements, PREFIX, limit=3) == ["s0", "s1", "s2"]


class TestImageElement:
    def test_from_mapping_handles_missing_fields(self) -> None:
        el = ImageElement.from_mapping({"alt": "BEARISH #7", "src": "u"})
        assert el.best_source == "u"
        assert el.natural_width == 0
        assert not el.is_rendered

    def test_from_mapping_reads_page_keys(self) -> None:
        el = ImageElement.from_mapping({
            "alt": "BEARISH #7",
            "src": "u",
            "currentSrc": "c",
            "naturalWidth": 5,
            "naturalHeight": 6,
        })
        assert el.best_source == "c"
        assert el.is_rendered


@pytest.mark.parametrize(
    ("items", "expected"),
    [
        ([], []),
        (["a"], ["a"]),
        (["a", "b", "a", "c", "b"], ["a", "b", "c"]),
        (["x", "x", "x"], ["x"]),
        (["b", "a", "b", "a"], ["b", "a"]),
    ],
)
def test_dedup_keeps_first_occurrence(items: list[str],
                                      expected: list[str]) -> None:
    assert dedup(items) == expected


@pytest.mark.parametrize(
    "items",
    [["a", "b", "a"], ["z", "y", "z", "x", "y"], [], ["q"]],
)
def test_dedup_is_idempotent(items: list[str]) -> None:
    once = dedup(items)
    assert dedup(once) == once


def test_dedup_is_case_sensitive() -> None:
    assert dedup(["A", "a"]) == ["A", "a"]


def test_merge_then_dedup_keeps_source_a_first() -> None:
    source_a = ["x", "y"]
    source_b = ["y", "z"]
    assert dedup([*source_a, *source_b]) == ["x", "y", "z"]
