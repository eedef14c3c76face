from __future__ import annotations

from .scanning import StringTracker

_CLOSERS = {"{": "}", "[": "]"}


def close_open_structures(text: str) -> str:
    """Terminate a dangling string and close every unbalanced container.

    The result is bracket-balanced and string-terminated but not guaranteed to
    decode: a truncated key, for example, is closed as a bare string.
    """
    tracker = StringTracker()
    expected: list[str] = []

    for char in text:
        was_in_string = tracker.in_string
        tracker.feed(char)
        if was_in_string:
            continue
        if char in _CLOSERS:
            expected.append(_CLOSERS[char])
        elif expected and char == expected[-1]:
            expected.pop()

    repaired = text
    if tracker.in_string:
        # A lone trailing backslash would escape the closing quote.
        if tracker.pending_escape:
            repaired = repaired[:-1]
        repaired += '"'

    trimmed = repaired.rstrip()
    if trimmed.endswith(","):
        repaired = trimmed[:-1]
    elif trimmed.endswith(":"):
        repaired = trimmed + " null"

    return repaired + "".join(reversed(expected))
