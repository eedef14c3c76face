"""Shape checks for decoded roadmap and topic-detail payloads.

The checks are shallow: they reject values that are obviously the wrong
document, not every malformed field. They never raise.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from .json_utils import parse_llm_json

logger = logging.getLogger(__name__)

TopicDetailVariant = Literal["sections", "overview", "generic_sections"]

_ROADMAP_WRAPPER_KEYS = ("roadmap", "data")


def is_roadmap_shape(value: Any) -> bool:
    if not isinstance(value, dict):
        return False
    phases = value.get("phases")
    return isinstance(phases, list) and len(phases) > 0


def unwrap_roadmap(value: Any) -> Any:
    """Return the payload nested one level under ``roadmap``/``data`` if needed."""
    if not isinstance(value, dict) or is_roadmap_shape(value):
        return value

    for key in _ROADMAP_WRAPPER_KEYS:
        inner = value.get(key)
        if isinstance(inner, dict):
            return inner
    return value


def topic_detail_variant(value: Any) -> TopicDetailVariant | None:
    if not isinstance(value, dict) or not isinstance(value.get("title"), str):
        return None

    sections = value.get("sections")
    if isinstance(sections, dict):
        introduction = sections.get("introduction")
        if isinstance(introduction, dict) and isinstance(introduction.get("markdown"), str):
            return "sections"
    if isinstance(value.get("overview"), str):
        return "overview"
    if isinstance(sections, dict):
        return "generic_sections"
    return None


def is_topic_detail_shape(value: Any) -> bool:
    return topic_detail_variant(value) is not None


def parse_and_validate_roadmap(
    raw_output: str,
    diagnostics: list[str] | None = None,
) -> dict[str, Any] | None:
    try:
        parsed = unwrap_roadmap(parse_llm_json(raw_output))
    except Exception as exc:
        _report(diagnostics, f"Roadmap parse error: {exc}")
        return None

    if not is_roadmap_shape(parsed):
        _report(
            diagnostics,
            "Roadmap validation failed: expected an object with a non-empty 'phases' array, "
            f"got {_describe(parsed)}.",
        )
        return None

    return parsed


def parse_and_validate_topic_detail(
    raw_output: str,
    diagnostics: list[str] | None = None,
) -> dict[str, Any] | None:
    try:
        parsed = parse_llm_json(raw_output)
    except Exception as exc:
        _report(diagnostics, f"Topic detail parse error: {exc}")
        return None

    if not is_topic_detail_shape(parsed):
        _report(
            diagnostics,
            "Topic detail validation failed: expected an object with a string 'title' and "
            f"'sections' or 'overview', got {_describe(parsed)}.",
        )
        return None

    return parsed


def _report(diagnostics: list[str] | None, message: str) -> None:
    logger.warning(message)
    if diagnostics is not None:
        diagnostics.append(message)


def _describe(value: Any) -> str:
    if isinstance(value, dict):
        keys = ", ".join(sorted(str(key) for key in value)[:8])
        return f"object with keys [{keys}]"
    return type(value).__name__
