from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable

from .errors import JSONRecoveryError
from .normalize import normalize_llm_json
from .scanning import StringTracker, count_unescaped_quotes, last_unescaped_quote
from .structure import close_open_structures

_CLOSERS_OR_END = ("}", "]", "")
_OPENERS_OR_START = ("{", "[", ",", "")
_STRUCTURAL = frozenset('"{}[]')


@dataclass(frozen=True)
class StrategyOutcome:
    strategy: str
    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_llm_json(raw_output: str) -> Any:
    """Decode model output, repairing it as little as possible.

    Raises:
        ContainerNotFoundError: the text holds no object or array.
        JSONRecoveryError: every repair strategy failed to decode.
    """
    return recover_json(raw_output).value


def recover_json(raw_output: str) -> StrategyOutcome:
    """Like :func:`parse_llm_json` but also reports which strategy succeeded."""
    if not raw_output or not raw_output.strip():
        raise JSONRecoveryError("Empty input")

    normalized = normalize_llm_json(raw_output)

    last_error = "no strategy attempted"
    for name, repair in STRATEGIES:
        outcome = _attempt(name, repair, normalized)
        if outcome.ok:
            return outcome
        last_error = outcome.error or last_error

    raise JSONRecoveryError(f"JSON parse failed: {last_error}")


def _attempt(name: str, repair: Callable[[str], str], text: str) -> StrategyOutcome:
    try:
        return StrategyOutcome(strategy=name, value=json.loads(repair(text)))
    except (ValueError, RecursionError) as exc:
        return StrategyOutcome(strategy=name, error=str(exc) or type(exc).__name__)


def remove_trailing_commas(text: str) -> str:
    tracker = StringTracker()
    out: list[str] = []
    for index, char in enumerate(text):
        if (
            not tracker.in_string
            and char == ","
            and _next_significant(text, index + 1) in _CLOSERS_OR_END
        ):
            continue
        tracker.feed(char)
        out.append(char)
    return "".join(out)


def close_unterminated_string(text: str) -> str:
    if count_unescaped_quotes(text) % 2 == 0:
        return text

    last_quote = last_unescaped_quote(text)
    closers = [
        position
        for position in (text.find("}", last_quote + 1), text.find("]", last_quote + 1))
        if position != -1
    ]
    if not closers:
        return text + '"'

    insert_at = min(closers)
    return text[:insert_at] + '"' + text[insert_at:]


def close_incomplete_structure(text: str) -> str:
    return remove_trailing_commas(close_open_structures(text))


def strip_stray_punctuation(text: str) -> str:
    tracker = StringTracker()
    out: list[str] = []
    for char in text:
        if not tracker.in_string and char in "}]":
            _drop_stray_tail(out)
        tracker.feed(char)
        out.append(char)
    return "".join(out)


def remove_redundant_commas(text: str) -> str:
    """Drop commas before closers, after openers, doubled, or at the very end."""
    tracker = StringTracker()
    out: list[str] = []
    for index, char in enumerate(text):
        if not tracker.in_string and char == ",":
            following = _next_significant(text, index + 1)
            if following in _CLOSERS_OR_END or following == ",":
                continue
            if _last_significant(out) in _OPENERS_OR_START:
                continue
        tracker.feed(char)
        out.append(char)
    return "".join(out)


STRATEGIES: tuple[tuple[str, Callable[[str], str]], ...] = (
    ("direct", lambda text: text),
    ("trailing_commas", remove_trailing_commas),
    ("unterminated_string", close_unterminated_string),
    ("incomplete_structure", close_incomplete_structure),
    ("stray_punctuation", strip_stray_punctuation),
    ("aggressive_commas", remove_redundant_commas),
)


def _next_significant(text: str, start: int) -> str:
    for index in range(start, len(text)):
        if not text[index].isspace():
            return text[index]
    return ""


def _last_significant(out: list[str]) -> str:
    for char in reversed(out):
        if not char.isspace():
            return char
    return ""


def _drop_stray_tail(out: list[str]) -> None:
    cut = len(out)
    while cut and out[cut - 1].isspace():
        cut -= 1
    stray_end = cut
    while cut and _is_stray(out[cut - 1]):
        cut -= 1
    if cut < stray_end:
        del out[cut:]


def _is_stray(char: str) -> bool:
    return not (char.isalnum() or char.isspace() or char in _STRUCTURAL)
