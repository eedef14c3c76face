from __future__ import annotations


class StringTracker:
    """Follows JSON string-literal state one character at a time.

    Backslashes are only counted inside a string; a quote toggles the state
    unless an odd number of backslashes precedes it.
    """

    __slots__ = ("in_string", "_backslashes")

    def __init__(self) -> None:
        self.in_string = False
        self._backslashes = 0

    @property
    def pending_escape(self) -> bool:
        return self.in_string and self._backslashes % 2 == 1

    def clear_escape(self) -> None:
        self._backslashes = 0

    def feed(self, char: str) -> bool:
        """Consume ``char`` and return True when it opened or closed a string."""
        if not self.in_string:
            if char == '"':
                self.in_string = True
                self._backslashes = 0
                return True
            return False

        if char == "\\":
            self._backslashes += 1
            return False

        escaped = self._backslashes % 2 == 1
        self._backslashes = 0
        if char == '"' and not escaped:
            self.in_string = False
            return True
        return False


def count_unescaped_quotes(text: str) -> int:
    tracker = StringTracker()
    return sum(1 for char in text if tracker.feed(char))


def last_unescaped_quote(text: str) -> int:
    tracker = StringTracker()
    last = -1
    for index, char in enumerate(text):
        if tracker.feed(char):
            last = index
    return last


def brace_balance(text: str) -> int:
    """Return opening minus closing braces found outside string literals."""
    tracker = StringTracker()
    balance = 0
    for char in text:
        was_in_string = tracker.in_string
        tracker.feed(char)
        if was_in_string:
            continue
        if char == "{":
            balance += 1
        elif char == "}":
            balance -= 1
    return balance
