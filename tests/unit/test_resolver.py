from __future__ import annotations

import pandas as pd
import pytest

from core.errors import InvariantViolation
from core.grammar.bounds import Absolute, RelativeDuration, RelativeToNow, Specification, make_specification
from core.grammar.recognizer import parse
from core.resolver.resolve import align_to_reference, resolve

NOW = pd.Timestamp("2022-05-01", tz="UTC")


def utc(text: str) -> pd.Timestamp:
    return pd.Timestamp(text, tz="UTC")


def test_sliding_window_keeps_duration():
    window = resolve(parse("3 days"), NOW)
    assert window.is_sliding()
    assert window.slide() == pd.Timedelta(hours=72)


def test_absolute_bounds_are_placed_in_reference_zone():
    window = resolve(parse("1 April 2022 to 2 April 2022"), NOW)
    assert window.bounds() == (utc("2022-04-01"), utc("2022-04-02"))
    assert window.start.tz is not None


def test_right_duration_anchors_on_left_bound():
    assert resolve(parse("1 April 2022 within 1 day"), NOW) == resolve(parse("1 April 2022 to 2 April 2022"), NOW)


def test_left_duration_is_anchored_against_right_bound():
    window = resolve(parse("1 day to 2 April 2022"), NOW)
    assert not window.is_sliding()
    assert window.bounds() == (utc("2022-04-01"), utc("2022-04-02"))


def test_verbal_left_bound_after_absolute_right_bound_is_rejected():
    with pytest.raises(InvariantViolation):
        resolve(parse("yesterday to 1 Apr 2022"), NOW)


def test_yesterday_to_tomorrow_is_the_tightest_window_around_now():
    window = resolve(parse("from yesterday to tomorrow"), NOW)
    assert window.bounds() == (utc("2022-04-30 23:59:59.999999999"), utc("2022-05-02"))


def test_next_year_within_duration():
    window = resolve(parse("next year within 3 days and 2 hours"), NOW)
    start, end = window.bounds()
    assert start == utc("2023-12-31 23:59:59.999999999")
    assert end == start + pd.Timedelta(days=3, hours=2)


def test_numeric_relative_bounds():
    window = resolve(parse("2 days ago to now"), NOW)
    assert window.bounds() == (utc("2022-04-29"), NOW)
    window = resolve(parse("30 days until 2 days ago"), NOW)
    assert window.bounds() == (utc("2022-03-30"), utc("2022-04-29"))


def test_open_window_from_absolute_left_bound():
    window = resolve(parse("since 1 April 2022"), NOW)
    assert not window.is_sliding()
    assert window.bounds() == (utc("2022-04-01"), None)


def test_resolution_is_repeatable():
    spec = parse("from last month until 2 hours later")
    assert resolve(spec, NOW) == resolve(spec, NOW)


def test_two_durations_are_rejected_by_resolve_too():
    spec = Specification(left=RelativeDuration(pd.Timedelta(days=1)), right=RelativeDuration(pd.Timedelta(days=2)))
    with pytest.raises(InvariantViolation):
        resolve(spec, NOW)


def test_right_duration_without_absolute_left_is_rejected():
    spec = make_specification(None, pd.Timedelta(days=1))
    with pytest.raises(InvariantViolation):
        resolve(spec, NOW)


def test_empty_specification_is_rejected():
    with pytest.raises(InvariantViolation):
        resolve(Specification(), NOW)


def test_zero_slide_is_rejected():
    with pytest.raises(InvariantViolation):
        resolve(parse("0 days"), NOW)


def test_relative_bounds_follow_reference_zone():
    reference = pd.Timestamp("2022-05-01 12:00", tz="America/Denver")
    window = resolve(Specification(left=RelativeToNow(verbal="today"), right=Absolute(pd.Timestamp("2022-05-03"))), reference)
    start, end = window.bounds()
    assert start == pd.Timestamp("2022-05-01 23:59:59.999999999", tz="America/Denver")
    assert end == pd.Timestamp("2022-05-03", tz="America/Denver")


def test_align_to_reference():
    zoned = pd.Timestamp("2022-04-01 02:00", tz="Europe/Paris")
    assert align_to_reference(pd.Timestamp("2022-04-01"), NOW) == utc("2022-04-01")
    assert align_to_reference(zoned, NOW) == zoned
    assert align_to_reference(zoned, pd.Timestamp("2022-05-01")) == pd.Timestamp("2022-04-01 00:00")


def test_window_across_repeated_hour():
    reference = pd.Timestamp("2022-11-06 00:30", tz="America/Denver")
    start, end = resolve(parse("last day to next hour"), reference).bounds()
    assert start == utc("2022-11-06 05:59:59.999999999")
    assert end == utc("2022-11-06 07:00")


def test_window_across_skipped_midnight():
    reference = pd.Timestamp("2018-11-03 12:00", tz="America/Sao_Paulo")
    start, end = resolve(parse("now to tomorrow"), reference).bounds()
    assert start == reference
    assert end == utc("2018-11-04 03:00")
    assert align_to_reference(pd.Timestamp("2018-11-04"), reference) == utc("2018-11-04 03:00")


def test_duration_past_representable_range_is_rejected():
    with pytest.raises(InvariantViolation):
        resolve(parse("1 Jan 2262 within 200 days"), NOW)
    with pytest.raises(InvariantViolation):
        resolve(parse("200 days to 1 Feb 1678"), NOW)
