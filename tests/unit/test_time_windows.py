from __future__ import annotations

import pandas as pd
import pytest

from app.utils.time_windows import Window, humanize_duration, lookup_timezone, parse_strict
from core.errors import InvariantViolation, UnknownTimezone, UnresolvedAccessFailure


def test_parse_strict_accepts_full_dates():
    assert parse_strict("1 Jan 1991") == pd.Timestamp("1991-01-01")
    assert parse_strict("  2 April 2022 ") == pd.Timestamp("2022-04-02")
    assert parse_strict("13/01/2022") == pd.Timestamp("2022-01-13")
    assert parse_strict("2022-04-01") == pd.Timestamp("2022-04-01")
    assert parse_strict("1 Apr 2022 10:30") == pd.Timestamp("2022-04-01 10:30")


def test_parse_strict_keeps_explicit_offsets():
    parsed = parse_strict("2022-04-01T10:30:00+02:00")
    assert parsed == pd.Timestamp("2022-04-01 08:30", tz="UTC")


@pytest.mark.parametrize("text", ["", "   ", "a", "max", "one day", "1", "2022", "April 2022", "1 April", "01/02/2022", "next week"])
def test_parse_strict_rejects_partial_or_ambiguous_text(text):
    with pytest.raises(ValueError):
        parse_strict(text)


def test_lookup_timezone():
    assert lookup_timezone("America/Denver") is not None
    with pytest.raises(UnknownTimezone):
        lookup_timezone("Mars/Olympus_Mons")


@pytest.mark.parametrize(
    "duration, expected",
    [
        (pd.Timedelta(days=30), "30 day(s)"),
        (pd.Timedelta(days=3, hours=2), "3 day(s) 2 hour(s)"),
        (pd.Timedelta(minutes=1, seconds=30.5), "1 minute(s) 30.500000000 seconds(s)"),
        (pd.Timedelta(1, unit="ns"), "0.000000001 seconds(s)"),
        (pd.Timedelta(0), ""),
    ],
)
def test_humanize_duration(duration, expected):
    assert humanize_duration(duration) == expected


def test_sliding_window_accessors():
    window = Window(duration=pd.Timedelta(days=3))
    assert window.is_sliding()
    assert window.slide() == pd.Timedelta(days=3)
    with pytest.raises(UnresolvedAccessFailure):
        window.bounds()
    assert window.as_dict()["slide_ns"] == 3 * 86_400 * 10**9


def test_anchored_window_accessors():
    start = pd.Timestamp("2022-04-01", tz="UTC")
    end = pd.Timestamp("2022-04-02", tz="UTC")
    window = Window(start=start, end=end)
    assert not window.is_sliding()
    assert window.bounds() == (start, end)
    with pytest.raises(UnresolvedAccessFailure):
        window.slide()
    assert window.as_dict()["from"] == "2022-04-01T00:00:00+00:00"


def test_window_invariants():
    start = pd.Timestamp("2022-04-02", tz="UTC")
    end = pd.Timestamp("2022-04-01", tz="UTC")
    with pytest.raises(InvariantViolation):
        Window()
    with pytest.raises(InvariantViolation):
        Window(start=start, end=end)
    with pytest.raises(InvariantViolation):
        Window(duration=pd.Timedelta(0))
    with pytest.raises(InvariantViolation):
        Window(start=end, duration=pd.Timedelta(days=1))
    assert Window(start=end, end=end).bounds() == (end, end)
