"""Bound variants and the unresolved window Specification."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import pandas as pd

from core.errors import InvariantViolation

ZERO = pd.Timedelta(0)


@dataclass(frozen=True)
class Absolute:
    """A fixed point in time, e.g. "2 April 2022"."""

    instant: pd.Timestamp

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "absolute", "instant": self.instant.isoformat()}


@dataclass(frozen=True)
class RelativeDuration:
    """A bare magnitude such as "3 days"; anchored by the opposite bound."""

    duration: pd.Timedelta

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "relative_duration", "duration_ns": int(self.duration.value)}


@dataclass(frozen=True)
class RelativeToNow:
    """A point relative to the reference instant.

    Either ``verbal`` is set ("yesterday", "june", "week" after last/next) or
    ``duration`` is ("2 days ago"), never both.
    """

    in_future: bool = False
    verbal: str = ""
    duration: pd.Timedelta = ZERO

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"kind": "relative_to_now", "in_future": self.in_future}
        if self.verbal:
            payload["verbal"] = self.verbal
        else:
            payload["duration_ns"] = int(self.duration.value)
        return payload


Bound = Union[Absolute, RelativeDuration, RelativeToNow]


@dataclass(frozen=True)
class Specification:
    """Left and right bounds recognised from one phrase, not yet resolved."""

    left: Optional[Bound] = None
    right: Optional[Bound] = None

    @property
    def is_sliding(self) -> bool:
        """True for phrases like "within 3 days" that name only a duration."""
        return isinstance(self.left, RelativeDuration) and self.right is None

    def validate(self) -> None:
        if isinstance(self.left, RelativeDuration) and isinstance(self.right, RelativeDuration):
            raise InvariantViolation("two relative duration bounds are not allowed, one side needs an anchor")

    def to_dict(self) -> Dict[str, Optional[Dict[str, Any]]]:
        return {
            "left": self.left.to_dict() if self.left is not None else None,
            "right": self.right.to_dict() if self.right is not None else None,
        }


def make_specification(left: Any = None, right: Any = None) -> Specification:
    """Build a Specification from plain values.

    ``Timestamp``/``datetime`` become Absolute bounds, ``Timedelta``/``timedelta``
    become RelativeDuration bounds; Bound instances pass through unchanged.
    """
    return Specification(left=_as_bound(left), right=_as_bound(right))


def _as_bound(value: Any) -> Optional[Bound]:
    if value is None or isinstance(value, (Absolute, RelativeDuration, RelativeToNow)):
        return value
    if isinstance(value, dt.timedelta):
        return RelativeDuration(pd.Timedelta(value))
    return Absolute(pd.Timestamp(value))
