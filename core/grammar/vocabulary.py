"""Keyword tables shared by the recognizer and the bound resolver.

Everything the grammar needs to know about English lives in one immutable
``Vocabulary`` value.  The recognizer and resolver receive it at construction,
so an alternative vocabulary (for instance loaded from YAML) never touches the
state machine itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import pandas as pd

NANOSECOND = 1
MICROSECOND = 1_000 * NANOSECOND
MILLISECOND = 1_000 * MICROSECOND
SECOND = 1_000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY

# Duration Unit Table: word -> nanoseconds.  Months and years have no fixed
# length and are deliberately absent.
DURATION_UNITS: Mapping[str, int] = MappingProxyType(
    {
        "nanosecond": NANOSECOND,
        "nanoseconds": NANOSECOND,
        "microsecond": MICROSECOND,
        "microseconds": MICROSECOND,
        "millisecond": MILLISECOND,
        "milliseconds": MILLISECOND,
        "second": SECOND,
        "seconds": SECOND,
        "minute": MINUTE,
        "minutes": MINUTE,
        "hour": HOUR,
        "hours": HOUR,
        "day": DAY,
        "days": DAY,
        "week": WEEK,
        "weeks": WEEK,
    }
)

# Canonical calendar units understood by the resolver.
PERIOD_UNITS = ("nanosecond", "microsecond", "millisecond", "second", "minute", "hour", "day", "week", "month", "year")

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
MONTHS = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

# Last day of each month by calendar month number.  February is fixed at 28.
MONTH_LAST_DAY = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def _plural_first(units: Tuple[str, ...]) -> Dict[str, str]:
    # plural forms go first so "seconds" is not consumed as "second" + "s"
    words: Dict[str, str] = {}
    for unit in units:
        words[unit + "s"] = unit
    for unit in units:
        words[unit] = unit
    return words


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class Vocabulary:
    """Immutable keyword configuration for one language."""

    # short word -> canonical meaning ("today", "yesterday", "now", "tomorrow")
    short_words: Mapping[str, str] = field(
        default_factory=lambda: _frozen({"today": "today", "yesterday": "yesterday", "now": "now", "tomorrow": "tomorrow"})
    )
    # direction token -> in_future
    directions: Mapping[str, bool] = field(default_factory=lambda: _frozen({"last": False, "next": True}))
    weekdays: Tuple[str, ...] = WEEKDAYS
    months: Tuple[str, ...] = MONTHS
    # period word -> canonical calendar unit
    period_units: Mapping[str, str] = field(default_factory=lambda: _frozen(_plural_first(PERIOD_UNITS)))
    # trailing keyword after a numeric duration -> in_future
    relative_keywords: Mapping[str, bool] = field(
        default_factory=lambda: _frozen({"ago": False, "before": False, "after": True, "later": True, "ahead": True})
    )
    units: Mapping[str, int] = field(default_factory=lambda: DURATION_UNITS)
    left_markers: Tuple[str, ...] = ("from", "since", "within")
    left_delimiters: Tuple[str, ...] = (" to", "until", "within")
    right_markers: Tuple[str, ...] = ("until", "to ", "within")
    conjunction: str = "and"

    @property
    def period_words(self) -> Tuple[str, ...]:
        """Words accepted after a direction token, in matching order."""
        return tuple(self.weekdays) + tuple(self.months) + tuple(self.period_units)

    def unit_duration(self, word: str) -> Optional[pd.Timedelta]:
        """Look a unit word up in the Duration Unit Table; ``None`` when unknown."""
        nanos = self.units.get(word)
        if nanos is None:
            return None
        return pd.Timedelta(nanos, unit="ns")

    def canonical_short_word(self, word: str) -> Optional[str]:
        return self.short_words.get(word)

    def weekday_index(self, word: str) -> Optional[int]:
        """Monday is 0, as in ``datetime.date.weekday``."""
        try:
            return self.weekdays.index(word)
        except ValueError:
            return None

    def month_number(self, word: str) -> Optional[int]:
        try:
            return self.months.index(word) + 1
        except ValueError:
            return None

    def canonical_unit(self, word: str) -> Optional[str]:
        return self.period_units.get(word)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], base: Optional["Vocabulary"] = None) -> "Vocabulary":
        """Build a vocabulary from a config mapping, keeping ``base`` for missing keys."""
        base = base or DEFAULT_VOCABULARY
        changes: Dict[str, Any] = {}
        for key in ("short_words", "directions", "period_units", "relative_keywords", "units"):
            if raw.get(key):
                changes[key] = _frozen(raw[key])
        for key in ("weekdays", "months", "left_markers", "left_delimiters", "right_markers"):
            if raw.get(key):
                changes[key] = tuple(raw[key])
        if raw.get("conjunction"):
            changes["conjunction"] = str(raw["conjunction"])
        if "weekdays" in changes and len(changes["weekdays"]) != 7:
            raise ValueError("vocabulary needs exactly 7 weekday names")
        if "months" in changes and len(changes["months"]) != 12:
            raise ValueError("vocabulary needs exactly 12 month names")
        unknown = set(changes.get("period_units", {}).values()) - set(PERIOD_UNITS)
        if unknown:
            raise ValueError(f"unsupported period units: {sorted(unknown)}")
        return replace(base, **changes)


DEFAULT_VOCABULARY = Vocabulary()
