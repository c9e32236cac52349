"""Backtracking recognizer turning window phrases into Specifications.

The recognizer is a small state machine (left bound, right bound, validate,
finish).  At each bound it tries three grammars in a fixed order: a bound
relative to now ("yesterday", "next june", "2 days ago"), a bare duration
("3 days and 2 hours") and finally an absolute date handed to the strict date
parser.  Each grammar method returns ``None`` when it does not match and the
caller puts the cursor back where the attempt started.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Callable, Optional, TypeVar

import pandas as pd

from app.utils.time_windows import parse_strict
from core.errors import GrammarFailure, ResidualInputFailure
from core.grammar.bounds import Absolute, Bound, RelativeDuration, RelativeToNow, Specification
from core.grammar.scanner import Scanner
from core.grammar.vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

T = TypeVar("T")

DateParser = Callable[[str], pd.Timestamp]


class State(IntEnum):
    LEFT_BOUND = 0
    RIGHT_BOUND = 1
    VALIDATE = 2
    FINISH = 3


class Recognizer:
    """Recognise one phrase; create a new instance per phrase."""

    def __init__(
        self,
        text: str,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        date_parser: DateParser = parse_strict,
    ):
        self.scanner = Scanner(text)
        self.vocabulary = vocabulary
        self.date_parser = date_parser
        self.left: Optional[Bound] = None
        self.right: Optional[Bound] = None

    def run(self) -> Specification:
        state = State.LEFT_BOUND
        while state != State.FINISH:
            state = self.step(state)
        return Specification(left=self.left, right=self.right)

    def step(self, state: State) -> State:
        """Handle one state and return the next one, raising on failure."""
        self.scanner.skip_whitespace()
        if state == State.LEFT_BOUND:
            return self._left_bound()
        if state == State.RIGHT_BOUND:
            return self._right_bound()
        if state == State.VALIDATE:
            return self._validate()
        raise ValueError(f"unexpected state {state!r}")

    def _left_bound(self) -> State:
        self.scanner.try_literal(self.vocabulary.left_markers)
        self.scanner.skip_whitespace()
        bound = self._bound(self.vocabulary.left_delimiters)
        if bound is None:
            raise GrammarFailure("left", text=self.scanner.text, position=self.scanner.pos)
        self.left = bound
        return State.RIGHT_BOUND

    def _right_bound(self) -> State:
        if self.scanner.at_end():
            # sliding window, nothing on the right
            return State.VALIDATE
        self.scanner.try_literal(self.vocabulary.right_markers)
        self.scanner.skip_whitespace()
        bound = self._bound(())
        if bound is None:
            raise GrammarFailure("right", text=self.scanner.text, position=self.scanner.pos)
        self.right = bound
        return State.VALIDATE

    def _validate(self) -> State:
        if not self.scanner.at_end():
            raise ResidualInputFailure(self.scanner.text, self.scanner.pos)
        Specification(left=self.left, right=self.right).validate()
        return State.FINISH

    def _bound(self, delimiters) -> Optional[Bound]:
        """Try the three bound grammars in order at the cursor."""
        relative_to_now = self._attempt(self.relative_to_now)
        if relative_to_now is not None:
            return relative_to_now
        duration = self._attempt(self.duration)
        if duration is not None:
            return RelativeDuration(duration)
        absolute = self._attempt(lambda: self.absolute(delimiters))
        if absolute is not None:
            return Absolute(absolute)
        return None

    def _attempt(self, grammar: Callable[[], Optional[T]]) -> Optional[T]:
        start = self.scanner.pos
        result = grammar()
        if result is None:
            logger.debug("%s did not match at %d, rolling back", getattr(grammar, "__name__", "grammar"), start)
            self.scanner.rollback_to(start)
        return result

    def relative_to_now(self) -> Optional[RelativeToNow]:
        """Match "today", "last june", "next week" or "2 days ago"."""
        vocabulary = self.vocabulary
        word = self.scanner.try_literal(vocabulary.short_words)
        if word:
            return RelativeToNow(verbal=word)

        start = self.scanner.pos
        direction = self.scanner.try_literal(vocabulary.directions)
        if direction:
            self.scanner.skip_whitespace()
            period = self.scanner.try_literal(vocabulary.period_words)
            if period:
                return RelativeToNow(in_future=vocabulary.directions[direction], verbal=period)
            self.scanner.rollback_to(start)

        duration = self.duration()
        if duration is None:
            return None
        self.scanner.skip_whitespace()
        keyword = self.scanner.try_literal(vocabulary.relative_keywords)
        if not keyword:
            return None
        return RelativeToNow(in_future=vocabulary.relative_keywords[keyword], duration=duration)

    def duration(self) -> Optional[pd.Timedelta]:
        """Match "<n> <unit>" optionally followed by "and <n> <unit> ..."."""
        scanner = self.scanner
        scanner.skip_whitespace()
        digits = scanner.consume_pattern(r"\d+")
        if not digits:
            return None

        scanner.skip_whitespace()
        unit = scanner.consume_pattern(r"\w+")
        if not unit:
            return None
        unit_duration = self.vocabulary.unit_duration(unit)
        if unit_duration is None:
            scanner.rollback(len(unit))
            return None
        try:
            total = pd.Timedelta(int(unit_duration.value) * int(digits), unit="ns")
        except (OverflowError, ValueError):
            logger.debug("duration %s %s is out of range", digits, unit)
            return None

        after_unit = scanner.pos
        scanner.skip_whitespace()
        before_conjunction = scanner.pos
        if not scanner.try_literal((self.vocabulary.conjunction,)):
            scanner.rollback_to(after_unit)
            return total
        extra = self.duration()
        if extra is None:
            # leave "and ..." for the caller
            scanner.rollback_to(before_conjunction)
            return total
        try:
            return total + extra
        except (OverflowError, ValueError):
            logger.debug("sum %s + %s is out of range", total, extra)
            scanner.rollback_to(before_conjunction)
            return total

    def absolute(self, delimiters) -> Optional[pd.Timestamp]:
        """Hand the text up to the next delimiter to the strict date parser."""
        text, _ = self.scanner.consume_until(delimiters)
        text = text.strip(" \n\t")
        try:
            return self.date_parser(text)
        except ValueError as exc:
            logger.debug("not an absolute date %r: %s", text, exc)
            return None


def parse(
    text: str,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    date_parser: DateParser = parse_strict,
) -> Specification:
    """Recognise ``text`` and return its Specification."""
    return Recognizer(text, vocabulary=vocabulary, date_parser=date_parser).run()
