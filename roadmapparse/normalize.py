"""Text normalization applied to model output before any decode attempt.

Each pass takes and returns a plain string. The order in
:func:`normalize_llm_json` matters: container extraction relies on embedded
code blocks already being escaped, and the string-aware passes rely on the
text starting at the JSON root.
"""

from __future__ import annotations

import re

from .errors import ContainerNotFoundError
from .scanning import StringTracker, brace_balance

_OPENING_FENCE_RE = re.compile(r"^```(?:json)?", re.IGNORECASE)
_FENCE = "```"

_CONTROL_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}
_VALID_ESCAPES = frozenset('"\\/bfnrtu')
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def normalize_llm_json(raw_output: str) -> str:
    """Turn raw model output into text that is as close to JSON as possible.

    Raises:
        ContainerNotFoundError: when the text holds no ``{`` or ``[`` at all.
    """
    text = strip_markdown_fences(raw_output)
    text = escape_embedded_code_blocks(text)
    text = extract_outer_container(text)
    text = strip_comments(text)
    text = escape_control_characters(text)
    text = collapse_double_braces(text)
    return repair_invalid_escapes(text)


def strip_markdown_fences(text: str) -> str:
    cleaned = text.strip()
    match = _OPENING_FENCE_RE.match(cleaned)
    if match:
        cleaned = cleaned[match.end() :]
    if cleaned.endswith(_FENCE):
        cleaned = cleaned[: -len(_FENCE)]
    return cleaned.strip()


def escape_embedded_code_blocks(text: str) -> str:
    """Escape fenced code blocks that appear inside string values.

    A fence only starts a block when its string runs into a raw line break
    before any closing quote; a fence inside a well-formed string never
    does, so valid JSON passes through unchanged. Scanning starts at the
    first opener so quotes in leading prose cannot open a string.
    """
    start = _first_opener(text)
    if _FENCE not in text or start == -1:
        return text

    tracker = StringTracker()
    parts: list[str] = [text[:start]]
    index = start
    length = len(text)

    while index < length:
        if (
            tracker.in_string
            and text.startswith(_FENCE, index)
            and _breaks_line_before_quote(text, index)
        ):
            close = text.find(_FENCE, index + len(_FENCE))
            end = length if close == -1 else close + len(_FENCE)
            block = text[index:end]
            if "\n" in block or "\r" in block:
                parts.append(_escape_code_block(block))
                tracker.clear_escape()
                index = end
                continue

        char = text[index]
        tracker.feed(char)
        parts.append(char)
        index += 1

    return "".join(parts)


def _first_opener(text: str) -> int:
    positions = [position for position in (text.find("{"), text.find("[")) if position != -1]
    return min(positions, default=-1)


def _breaks_line_before_quote(text: str, start: int) -> bool:
    backslashes = 0
    for char in text[start:]:
        if char in "\r\n":
            return True
        if char == '"' and backslashes % 2 == 0:
            return False
        backslashes = backslashes + 1 if char == "\\" else 0
    return False


def _escape_code_block(block: str) -> str:
    escaped: list[str] = []
    backslashes = 0
    for char in block:
        if char == "\\":
            backslashes += 1
            escaped.append(char)
            continue

        if char == "\n":
            escaped.append("\\n")
        elif char == "\r":
            escaped.append("\\r")
        elif char == '"' and backslashes % 2 == 0:
            escaped.append('\\"')
        else:
            escaped.append(char)
        backslashes = 0

    return "".join(escaped)


def extract_outer_container(text: str) -> str:
    """Slice ``text`` to its root object or array.

    The root is whichever of ``{`` / ``[`` occurs first. It runs to the last
    closer of the same kind, or to the end of the text when the stream was cut
    before any closer arrived. Closers that all precede the opener mean the
    delimiters are misordered rather than truncated.
    """
    start = _first_opener(text)
    if start == -1:
        raise ContainerNotFoundError("no JSON container found")

    closer = "}" if text[start] == "{" else "]"
    end = text.rfind(closer)
    if end == -1:
        return text[start:]
    if end < start:
        raise ContainerNotFoundError(f"'{closer}' appears before the opening '{text[start]}'")
    return text[start : end + 1]


def strip_comments(text: str) -> str:
    tracker = StringTracker()
    kept: list[str] = []
    index = 0
    length = len(text)

    while index < length:
        char = text[index]
        if not tracker.in_string and char == "/" and index + 1 < length:
            following = text[index + 1]
            if following == "/":
                index += 2
                while index < length and text[index] not in "\r\n":
                    index += 1
                continue
            if following == "*":
                close = text.find("*/", index + 2)
                index = length if close == -1 else close + 2
                continue

        tracker.feed(char)
        kept.append(char)
        index += 1

    return "".join(kept)


def escape_control_characters(text: str) -> str:
    tracker = StringTracker()
    out: list[str] = []
    for char in text:
        if tracker.in_string and ord(char) < 32:
            out.append(_CONTROL_ESCAPES.get(char) or f"\\u{ord(char):04x}")
        else:
            out.append(char)
        tracker.feed(char)
    return "".join(out)


def collapse_double_braces(text: str) -> str:
    if text.startswith("{{"):
        text = text[1:]
    if text.endswith("}}") and brace_balance(text) < 0:
        text = text[:-1]
    return text


def repair_invalid_escapes(text: str) -> str:
    """Double every backslash inside a string that does not start a legal escape."""
    out: list[str] = []
    in_string = False
    index = 0
    length = len(text)

    while index < length:
        char = text[index]
        if not in_string:
            if char == '"':
                in_string = True
            out.append(char)
            index += 1
            continue

        if char == "\\":
            following = text[index + 1] if index + 1 < length else ""
            if following and following in _VALID_ESCAPES and (
                following != "u" or _is_unicode_escape(text, index + 2)
            ):
                out.append(char + following)
                index += 2
                continue
            out.append("\\\\")
            index += 1
            continue

        if char == '"':
            in_string = False
        out.append(char)
        index += 1

    return "".join(out)


def _is_unicode_escape(text: str, start: int) -> bool:
    digits = text[start : start + 4]
    return len(digits) == 4 and all(digit in _HEX_DIGITS for digit in digits)
