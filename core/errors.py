"""Error kinds raised while recognising and resolving time window phrases."""

from __future__ import annotations

from typing import Optional


class WindowError(Exception):
    """Root of every failure raised by the window engine."""


class RecognitionError(WindowError):
    """A phrase could not be turned into a Specification.

    Keeps the normalised text and the cursor offset so callers can point at
    the offending character.
    """

    def __init__(self, message: str, text: str = "", position: int = 0):
        super().__init__(message)
        self.message = message
        self.text = text
        self.position = position

    @property
    def caret(self) -> str:
        """Render the text with a caret under the failing position."""
        if not self.text:
            return ""
        return f"{self.text}\n{' ' * self.position}^"


class GrammarFailure(RecognitionError):
    """No grammar alternative matched at a bound position."""

    def __init__(self, side: str, text: str = "", position: int = 0):
        super().__init__(f"failed to recognize the {side} bound", text=text, position=position)
        self.side = side


class ResidualInputFailure(RecognitionError):
    """Both bounds were recognised but unconsumed text remains."""

    def __init__(self, text: str, position: int, detail: Optional[str] = None):
        message = f"unexpected character found at {position}"
        if detail:
            message += f": {detail}"
        if text:
            message += f"\n{text}\n{' ' * position}^"
        super().__init__(message, text=text, position=position)


class InvariantViolation(WindowError, ValueError):
    """A Specification or Window breaks one of its structural rules."""


class UnresolvedAccessFailure(WindowError):
    """A Window accessor was called on the wrong kind of window."""


class UnknownTimezone(WindowError, ValueError):
    """The requested IANA time zone name could not be found."""
