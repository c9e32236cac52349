from __future__ import annotations

import pandas as pd
import pytest

from app.deps import ROOT, _load_yaml
from core.grammar.vocabulary import DEFAULT_VOCABULARY, MONTH_LAST_DAY, Vocabulary


@pytest.mark.parametrize(
    "word, expected",
    [
        ("nanosecond", pd.Timedelta(1, unit="ns")),
        ("microseconds", pd.Timedelta(microseconds=1)),
        ("millisecond", pd.Timedelta(milliseconds=1)),
        ("seconds", pd.Timedelta(seconds=1)),
        ("minute", pd.Timedelta(minutes=1)),
        ("hours", pd.Timedelta(hours=1)),
        ("day", pd.Timedelta(hours=24)),
        ("weeks", pd.Timedelta(days=7)),
    ],
)
def test_unit_table(word, expected):
    assert DEFAULT_VOCABULARY.unit_duration(word) == expected


@pytest.mark.parametrize("word", ["month", "years", "fortnight", ""])
def test_unknown_unit_is_not_zero(word):
    assert DEFAULT_VOCABULARY.unit_duration(word) is None


def test_plural_period_words_are_tried_first():
    words = DEFAULT_VOCABULARY.period_words
    assert words.index("seconds") < words.index("second")
    assert words.index("hours") < words.index("hour")
    assert "monday" in words and "december" in words and "year" in words


def test_period_lookups():
    assert DEFAULT_VOCABULARY.weekday_index("monday") == 0
    assert DEFAULT_VOCABULARY.weekday_index("sunday") == 6
    assert DEFAULT_VOCABULARY.month_number("february") == 2
    assert DEFAULT_VOCABULARY.canonical_unit("months") == "month"
    assert DEFAULT_VOCABULARY.canonical_unit("june") is None


def test_month_table_is_not_leap_aware():
    assert MONTH_LAST_DAY[1] == 28
    assert sum(MONTH_LAST_DAY) == 365


def test_shipped_config_matches_builtin_vocabulary():
    raw = _load_yaml(ROOT / "config" / "vocabulary.yaml")
    assert Vocabulary.from_mapping(raw) == DEFAULT_VOCABULARY


def test_from_mapping_overrides_only_given_keys():
    custom = Vocabulary.from_mapping({"short_words": {"hier": "yesterday", "now": "now"}})
    assert list(custom.short_words) == ["hier", "now"]
    assert custom.directions == DEFAULT_VOCABULARY.directions


def test_from_mapping_rejects_bad_tables():
    with pytest.raises(ValueError):
        Vocabulary.from_mapping({"weekdays": ["monday"]})
    with pytest.raises(ValueError):
        Vocabulary.from_mapping({"period_units": {"quarter": "quarter"}})
