"""Resolve a Specification into a concrete Window at a reference instant.

Resolution runs as an ordered pipeline: the left bound first, then the right
bound (which may need the left one as an anchor), then a correction pass that
anchors a leading duration against the right bound ("1 day to 2 April 2022").
"""

from __future__ import annotations

import logging
from typing import Optional

import pandas as pd

from app.utils.time_windows import Window, localize, shift_instant
from core.errors import InvariantViolation
from core.grammar.bounds import Absolute, Bound, RelativeDuration, RelativeToNow, Specification
from core.grammar.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from core.resolver.periods import resolve_relative

logger = logging.getLogger(__name__)


def align_to_reference(instant: pd.Timestamp, reference: pd.Timestamp) -> pd.Timestamp:
    """Place a zone-less absolute instant in the reference zone.

    When the reference itself carries no zone, zoned instants are converted
    to UTC and the zone dropped so both sides stay comparable.
    """
    instant = pd.Timestamp(instant)
    if instant.tz is None and reference.tz is not None:
        return localize(instant, reference.tz)
    if instant.tz is not None and reference.tz is None:
        return instant.tz_convert(None)
    return instant


def _resolve_left(bound: Optional[Bound], reference: pd.Timestamp, vocabulary: Vocabulary):
    """Return ``(start, pending_slide)`` for the left bound."""
    if bound is None:
        return None, None
    if isinstance(bound, Absolute):
        return align_to_reference(bound.instant, reference), None
    if isinstance(bound, RelativeDuration):
        return None, bound.duration
    if isinstance(bound, RelativeToNow):
        return resolve_relative(reference, bound, True, vocabulary), None
    raise TypeError(f"unsupported left bound {bound!r}")


def _resolve_right(
    bound: Optional[Bound],
    start: Optional[pd.Timestamp],
    reference: pd.Timestamp,
    vocabulary: Vocabulary,
) -> Optional[pd.Timestamp]:
    if bound is None:
        return None
    if isinstance(bound, Absolute):
        return align_to_reference(bound.instant, reference)
    if isinstance(bound, RelativeDuration):
        if start is None:
            raise InvariantViolation("a duration on the right needs an absolute left bound")
        return shift_instant(start, bound.duration)
    if isinstance(bound, RelativeToNow):
        return resolve_relative(reference, bound, False, vocabulary)
    raise TypeError(f"unsupported right bound {bound!r}")


def resolve(
    spec: Specification,
    reference: pd.Timestamp,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> Window:
    """Resolve ``spec`` at ``reference``; raise InvariantViolation for empty or reversed windows."""
    reference = pd.Timestamp(reference)
    spec.validate()

    start, slide = _resolve_left(spec.left, reference, vocabulary)
    end = _resolve_right(spec.right, start, reference, vocabulary)

    if slide is not None and end is not None:
        start = shift_instant(end, -slide)
        slide = None

    logger.debug("resolved %s at %s to start=%s end=%s slide=%s", spec, reference, start, end, slide)
    return Window(start=start, end=end, duration=slide)
