"""Resolved time windows and the absolute-date helpers around them.

Phrases are resolved into ``Window`` values: either a sliding duration with no
anchors ("within 3 days") or a pair of instants.  Instants are nanosecond
precision ``pandas.Timestamp`` objects so sub-microsecond periods such as
"next nanosecond" survive the arithmetic.  Absolute date strings are parsed by
``python-dateutil`` in a strict mode that refuses to guess missing or
ambiguous components.
"""

from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import pandas as pd
from dateutil import parser as dtparser
from dateutil import tz

from core.errors import InvariantViolation, UnknownTimezone, UnresolvedAccessFailure

# Two sentinel defaults: a component that dateutil filled from the default
# differs between them, one that came from the text does not.
_SENTINELS = (dt.datetime(1, 1, 1), dt.datetime(2, 2, 2))

# isoparse also accepts "2022" and "2022-04"; only full calendar dates go that way.
_ISO_DATE = re.compile(r"\d{4}-?\d{2}-?\d{2}")


def parse_strict(text: str) -> pd.Timestamp:
    """Parse a fully specified absolute date, raising ValueError otherwise.

    ISO 8601 strings are accepted as is.  Anything else must be matched by
    dateutil in full (no fuzzy skipping), must name a day, a month and a year,
    and must read the same whether the day or the month comes first.
    """
    text = (text or "").strip()
    if not text:
        raise ValueError("empty date string")
    if _ISO_DATE.match(text):
        try:
            return pd.Timestamp(dtparser.isoparse(text))
        except (ValueError, OverflowError):
            pass

    candidates = []
    for default in _SENTINELS:
        for dayfirst in (False, True):
            try:
                candidates.append(dtparser.parse(text, default=default, dayfirst=dayfirst, fuzzy=False))
            except (ValueError, OverflowError) as exc:
                raise ValueError(f"not an absolute date: {text!r}") from exc

    first = candidates[0]
    if any((c.year, c.month, c.day) != (first.year, first.month, first.day) for c in candidates[1:]):
        raise ValueError(f"incomplete or ambiguous date: {text!r}")
    return pd.Timestamp(first)


def lookup_timezone(name: str) -> dt.tzinfo:
    """Return the tzinfo for an IANA name such as ``America/Denver``."""
    zone = tz.gettz(name)
    if zone is None:
        raise UnknownTimezone(f"unknown time zone {name!r}")
    return zone


def localize(wall: pd.Timestamp, zone, earliest: bool = True) -> pd.Timestamp:
    """Attach ``zone`` to a wall-clock instant; a ``None`` zone keeps it naive.

    A repeated wall-clock time takes its first occurrence when ``earliest``
    and its second otherwise.  A skipped one moves forward to the first
    instant after the gap.
    """
    if zone is None:
        return wall
    return wall.tz_localize(zone, ambiguous=earliest, nonexistent="shift_forward")


def shift_instant(instant: pd.Timestamp, delta: pd.Timedelta) -> pd.Timestamp:
    """Return ``instant + delta``, raising InvariantViolation when it leaves the representable range."""
    try:
        return instant + delta
    except (OverflowError, ValueError) as exc:
        raise InvariantViolation(f"{instant.isoformat()} shifted by {delta} is out of range") from exc


def humanize_duration(duration: pd.Timedelta) -> str:
    """Render a duration as ``"3 day(s) 2 hour(s) 0.500000000 seconds(s)"``."""
    remaining = int(pd.Timedelta(duration).value)
    parts = []
    for label, size in (("day", 86_400_000_000_000), ("hour", 3_600_000_000_000), ("minute", 60_000_000_000)):
        count, remaining = divmod(remaining, size)
        if count:
            parts.append(f"{count} {label}(s)")
    if remaining:
        parts.append(f"{remaining / 1_000_000_000:.9f} seconds(s)")
    return " ".join(parts)


@dataclass(frozen=True)
class Window:
    """A resolved window: a sliding ``duration`` or ``start``/``end`` instants.

    An end may be missing for open windows such as "since 1 April 2022".
    """

    start: Optional[pd.Timestamp] = None
    end: Optional[pd.Timestamp] = None
    duration: Optional[pd.Timedelta] = None

    def __post_init__(self) -> None:
        if self.duration is not None:
            if self.start is not None or self.end is not None:
                raise InvariantViolation("a sliding window cannot carry absolute bounds")
            if self.duration <= pd.Timedelta(0):
                raise InvariantViolation(f"sliding window needs a positive duration, got {self.duration}")
            return
        if self.start is None and self.end is None:
            raise InvariantViolation("window is empty: no bounds and no slide")
        if self.start is not None and self.end is not None and self.start > self.end:
            raise InvariantViolation(f"window is reversed: {self.start.isoformat()} is after {self.end.isoformat()}")

    def is_sliding(self) -> bool:
        return self.duration is not None

    def slide(self) -> pd.Timedelta:
        if self.duration is None:
            raise UnresolvedAccessFailure("an anchored window has no slide")
        return self.duration

    def bounds(self) -> Tuple[Optional[pd.Timestamp], Optional[pd.Timestamp]]:
        if self.duration is not None:
            raise UnresolvedAccessFailure("a sliding window has no absolute bounds")
        return self.start, self.end

    def as_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly representation used by the CLI and API."""
        if self.duration is not None:
            return {
                "sliding": True,
                "slide": humanize_duration(self.duration),
                "slide_ns": int(self.duration.value),
                "from": None,
                "to": None,
            }
        return {
            "sliding": False,
            "slide": None,
            "slide_ns": None,
            "from": self.start.isoformat() if self.start is not None else None,
            "to": self.end.isoformat() if self.end is not None else None,
        }
