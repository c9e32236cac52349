"""Character cursor used by the window phrase recognizer.

The scanner owns the lower-cased phrase and a single integer cursor.  Every
matching helper either consumes text and moves the cursor forward or leaves it
untouched, so grammar alternatives can be tried speculatively and undone with
``rollback_to``.
"""

from __future__ import annotations

import re
from typing import Iterable, Tuple

WHITESPACE = frozenset(" \t\n")


class Scanner:
    """Stateful cursor over a normalised phrase."""

    def __init__(self, text: str):
        self.text = text.lower()
        self.pos = 0

    @property
    def remainder(self) -> str:
        return self.text[self.pos :]

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def try_literal(self, candidates: Iterable[str]) -> str:
        """Consume the first candidate, in the given order, found at the cursor.

        Candidates are not ranked by length: ``["a", "ab"]`` against ``"ab"``
        yields ``"a"``.  Returns an empty string when nothing matches.
        """
        for candidate in candidates:
            if candidate and self.text.startswith(candidate, self.pos):
                self.pos += len(candidate)
                return candidate
        return ""

    def consume_until(self, delimiters: Iterable[str]) -> Tuple[str, str]:
        """Consume text up to the first delimiter; the delimiter stays unconsumed.

        Returns ``(consumed, delimiter)``.  At end of input the delimiter is an
        empty string and everything left has been consumed.
        """
        delimiters = [item for item in delimiters if item]
        start = self.pos
        while not self.at_end():
            for delimiter in delimiters:
                if self.text.startswith(delimiter, self.pos):
                    return self.text[start : self.pos], delimiter
            self.pos += 1
        return self.text[start:], ""

    def consume_pattern(self, pattern: str) -> str:
        """Consume the regex match anchored at the cursor, or nothing."""
        if self.at_end():
            return ""
        match = re.compile(pattern).match(self.text, self.pos)
        if match is None:
            return ""
        self.pos = match.end()
        return match.group(0)

    def skip_whitespace(self) -> int:
        skipped = 0
        while not self.at_end() and self.text[self.pos] in WHITESPACE:
            self.pos += 1
            skipped += 1
        return skipped

    def rollback(self, count: int) -> None:
        self.pos = max(0, self.pos - count)

    def rollback_to(self, position: int) -> None:
        self.pos = position

    def caret(self, position: int | None = None) -> str:
        """Render the text with a ``^`` marker under ``position`` (cursor by default)."""
        where = self.pos if position is None else position
        return f"{self.text}\n{' ' * where}^"
