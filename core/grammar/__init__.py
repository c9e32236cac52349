"""Phrase recognition: scanner, vocabulary, bounds and the recognizer."""

from .bounds import Absolute, RelativeDuration, RelativeToNow, Specification, make_specification
from .recognizer import Recognizer, parse
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

__all__ = [
    "Absolute",
    "RelativeDuration",
    "RelativeToNow",
    "Specification",
    "make_specification",
    "Recognizer",
    "parse",
    "Vocabulary",
    "DEFAULT_VOCABULARY",
]
