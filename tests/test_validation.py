from __future__ import annotations

import logging

import pytest
from roadmapparse.validation import (
    is_roadmap_shape,
    is_topic_detail_shape,
    parse_and_validate_roadmap,
    parse_and_validate_topic_detail,
    topic_detail_variant,
    unwrap_roadmap,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ({"phases": [{"id": "a"}]}, True),
        ({"phases": []}, False),
        ({"phases": "soon"}, False),
        ({"phases": {"0": {}}}, False),
        ({"goal": "x"}, False),
        ([{"phases": [1]}], False),
        (None, False),
        ("phases", False),
    ],
)
def test_is_roadmap_shape(value, expected) -> None:
    assert is_roadmap_shape(value) is expected


def test_unwrap_roadmap_one_level() -> None:
    inner = {"goal": "Go", "phases": [{"phase_title": "Basics"}]}

    assert unwrap_roadmap({"roadmap": inner}) is inner
    assert unwrap_roadmap({"data": inner}) is inner
    assert unwrap_roadmap({"data": {"roadmap": inner}}) == {"roadmap": inner}


def test_unwrap_roadmap_keeps_shaped_root() -> None:
    root = {"phases": [{"id": "a"}], "data": {"phases": [{"id": "b"}]}}

    assert unwrap_roadmap(root) is root


@pytest.mark.parametrize(
    ("value", "variant"),
    [
        ({"title": "Hooks", "sections": {"introduction": {"markdown": "Intro"}}}, "sections"),
        ({"title": "Hooks", "overview": "Legacy overview"}, "overview"),
        ({"title": "Hooks", "sections": {"key_characteristics": []}}, "generic_sections"),
        ({"title": "Hooks", "sections": {"introduction": {"markdown": 3}}}, "generic_sections"),
        ({"title": "Hooks"}, None),
        ({"title": 7, "overview": "x"}, None),
        ({"title": "Hooks", "sections": ["introduction"]}, None),
        (["title"], None),
        (None, None),
    ],
)
def test_topic_detail_variant(value, variant) -> None:
    assert topic_detail_variant(value) == variant
    assert is_topic_detail_shape(value) is (variant is not None)


def test_parse_and_validate_roadmap_fenced() -> None:
    text = '```json\n{"phases": [{"id":"a"}]}\n```'

    assert parse_and_validate_roadmap(text) == {"phases": [{"id": "a"}]}


def test_parse_and_validate_roadmap_unwraps() -> None:
    text = 'Here it is: {"roadmap": {"goal": "Go", "phases": [{"phase_title": "Basics"}]}}'

    assert parse_and_validate_roadmap(text) == {"goal": "Go", "phases": [{"phase_title": "Basics"}]}


def test_parse_and_validate_roadmap_without_container() -> None:
    diagnostics: list[str] = []

    assert parse_and_validate_roadmap("just text", diagnostics) is None
    assert len(diagnostics) == 1
    assert "no JSON container found" in diagnostics[0]


def test_parse_and_validate_roadmap_wrong_shape() -> None:
    diagnostics: list[str] = []

    assert parse_and_validate_roadmap('{"phases": "soon"}', diagnostics) is None
    assert "validation failed" in diagnostics[0]
    assert "phases" in diagnostics[0]


def test_parse_and_validate_roadmap_logs_reason(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="roadmapparse.validation"):
        assert parse_and_validate_roadmap("nothing to see") is None

    assert "Roadmap parse error" in caplog.text


def test_parse_and_validate_topic_detail_truncated() -> None:
    text = '{"title": "X", "sections": {"introduction": {"markdown": "hi"}}'

    parsed = parse_and_validate_topic_detail(text)

    assert parsed is not None
    assert parsed["title"] == "X"
    assert parsed["sections"]["introduction"]["markdown"] == "hi"


def test_parse_and_validate_topic_detail_legacy_overview() -> None:
    text = '{"title": "Closures", "overview": "Functions that capture scope."}'

    assert parse_and_validate_topic_detail(text) == {
        "title": "Closures",
        "overview": "Functions that capture scope.",
    }


def test_parse_and_validate_topic_detail_rejects_roadmap() -> None:
    diagnostics: list[str] = []

    assert parse_and_validate_topic_detail('{"phases": [{"id": "a"}]}', diagnostics) is None
    assert "Topic detail validation failed" in diagnostics[0]


def test_wrappers_never_raise_on_garbage() -> None:
    for text in ["", "   ", "{", "]]]", '{"a" "b"}', "```json\n```"]:
        assert parse_and_validate_roadmap(text) is None
        assert parse_and_validate_topic_detail(text) is None
