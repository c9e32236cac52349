"""Calendar period arithmetic for bounds expressed relative to now.

Every verbal bound ("yesterday", "next month", "last friday") names a period
next to the reference instant.  ``period_interval`` returns that period as a
closed ``(start, end)`` pair in the reference instant's own zone, with ``end``
on the last nanosecond of the period.  ``resolve_period`` then picks the end
for a left bound and the start for a right bound, which gives the tightest
window around the reference for phrases such as "from yesterday to tomorrow".
"""

from __future__ import annotations

import datetime as dt
from typing import Tuple

import pandas as pd

from app.utils.time_windows import localize, shift_instant
from core.errors import InvariantViolation
from core.grammar.bounds import RelativeToNow
from core.grammar.vocabulary import (
    DAY,
    DEFAULT_VOCABULARY,
    DURATION_UNITS,
    MONTH_LAST_DAY,
    Vocabulary,
)

END_OF_DAY = DAY - 1
SHORT_WORD_OFFSETS = {"yesterday": -1, "today": 0, "tomorrow": 1}
SUB_DAY_UNITS = ("nanosecond", "microsecond", "millisecond", "second", "minute", "hour")

Interval = Tuple[pd.Timestamp, pd.Timestamp]


def _wall(instant: pd.Timestamp) -> pd.Timestamp:
    """Drop the zone, keeping the local wall-clock reading."""
    return instant.tz_localize(None) if instant.tz is not None else instant


def _at(zone, day: dt.date, nanos_of_day: int = 0, earliest: bool = True) -> pd.Timestamp:
    try:
        wall = pd.Timestamp(year=day.year, month=day.month, day=day.day) + pd.Timedelta(nanos_of_day, unit="ns")
    except (OverflowError, ValueError) as exc:
        raise InvariantViolation(f"{day.isoformat()} is out of range") from exc
    return localize(wall, zone, earliest=earliest)


def _whole_day(zone, day: dt.date) -> Interval:
    return _at(zone, day), _at(zone, day, END_OF_DAY, earliest=False)


def _whole_month(zone, year: int, month: int) -> Interval:
    last_day = MONTH_LAST_DAY[month - 1]
    return _at(zone, dt.date(year, month, 1)), _at(zone, dt.date(year, month, last_day), END_OF_DAY, earliest=False)


def _shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _sub_day(reference: pd.Timestamp, unit: str, sign: int) -> Interval:
    size = DURATION_UNITS[unit]
    shifted = shift_instant(reference, pd.Timedelta(sign * size, unit="ns"))
    # a repeated hour keeps the offset of the instant it was reached from
    earliest = shifted.tz is None or bool(shifted.dst())
    wall = _wall(shifted)
    floor = wall.value - wall.value % size
    start = pd.Timestamp(floor, unit="ns")
    end = pd.Timestamp(floor + size - 1, unit="ns")
    return localize(start, reference.tz, earliest), localize(end, reference.tz, earliest)


def _next_monday(today: dt.date) -> dt.date:
    return today + dt.timedelta(days=7 - today.weekday())


def _nearest_weekday(today: dt.date, weekday: int, in_future: bool) -> dt.date:
    if in_future:
        return today + dt.timedelta(days=(weekday - today.weekday() - 1) % 7 + 1)
    return today - dt.timedelta(days=(today.weekday() - weekday - 1) % 7 + 1)


def _nearest_month(year: int, month: int, target: int, in_future: bool) -> Tuple[int, int]:
    if in_future:
        return _shift_month(year, month, (target - month - 1) % 12 + 1)
    return _shift_month(year, month, -((month - target - 1) % 12 + 1))


def period_interval(
    reference: pd.Timestamp,
    in_future: bool,
    verbal: str,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> Interval:
    """Return the ``(start, end)`` of the period named by ``verbal``."""
    zone = reference.tz
    today = _wall(reference).date()
    sign = 1 if in_future else -1

    short = vocabulary.canonical_short_word(verbal)
    if short == "now":
        return reference, reference
    if short is not None:
        return _whole_day(zone, today + dt.timedelta(days=SHORT_WORD_OFFSETS[short]))

    weekday = vocabulary.weekday_index(verbal)
    if weekday is not None:
        return _whole_day(zone, _nearest_weekday(today, weekday, in_future))

    month = vocabulary.month_number(verbal)
    if month is not None:
        return _whole_month(zone, *_nearest_month(today.year, today.month, month, in_future))

    unit = vocabulary.canonical_unit(verbal)
    if unit in SUB_DAY_UNITS:
        return _sub_day(reference, unit, sign)
    if unit == "day":
        return _whole_day(zone, today + dt.timedelta(days=sign))
    if unit == "week":
        # always the coming monday, whatever the direction
        return _whole_day(zone, _next_monday(today))
    if unit == "month":
        return _whole_month(zone, *_shift_month(today.year, today.month, sign))
    if unit == "year":
        year = today.year + sign
        return _at(zone, dt.date(year, 1, 1)), _at(zone, dt.date(year, 12, 31), END_OF_DAY, earliest=False)
    raise InvariantViolation(f"period word {verbal!r} is not recognized")


def resolve_period(
    reference: pd.Timestamp,
    in_future: bool,
    verbal: str,
    is_left_bound: bool,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> pd.Timestamp:
    """Pick the end of the period for a left bound, its start otherwise."""
    if vocabulary.canonical_short_word(verbal) == "now":
        return reference
    start, end = period_interval(reference, in_future, verbal, vocabulary)
    return end if is_left_bound else start


def resolve_relative(
    reference: pd.Timestamp,
    bound: RelativeToNow,
    is_left_bound: bool,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> pd.Timestamp:
    """Resolve a RelativeToNow bound against ``reference``.

    Numeric bounds ("2 days ago", "3 hours later") have no period to pick a
    side from and resolve to ``reference -/+ duration`` on either side.
    """
    if bound.verbal:
        return resolve_period(reference, bound.in_future, bound.verbal, is_left_bound, vocabulary)
    offset = bound.duration
    return shift_instant(reference, offset if bound.in_future else -offset)
