"""Phrase-to-window service shared by the CLI and the HTTP API.

Both front ends go through ``resolve_phrase`` so that the configured
vocabulary, the default time zone and the reference instant are chosen the
same way everywhere.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

import pandas as pd

from app.deps import get_default_timezone, get_vocabulary
from app.utils.time_windows import Window, localize, lookup_timezone
from core.grammar.bounds import Specification
from core.grammar.recognizer import parse
from core.resolver.resolve import resolve

logger = logging.getLogger(__name__)


def reference_instant(at: Optional[str] = None, timezone: Optional[str] = None) -> pd.Timestamp:
    """Return the reference instant: ``at`` if given, otherwise the current time.

    ``timezone`` (or the configured default) names the zone of the result; a
    zone-less ``at`` is read as wall-clock time in that zone.
    """
    zone = lookup_timezone(timezone or get_default_timezone() or "UTC")
    if at is None:
        return pd.Timestamp.now(tz=zone)
    instant = pd.Timestamp(at)
    if instant.tz is None:
        return localize(instant, zone)
    return instant.tz_convert(zone)


def parse_phrase(text: str) -> Specification:
    return parse(text, vocabulary=get_vocabulary())


def resolve_phrase(
    text: str,
    at: Optional[str] = None,
    timezone: Optional[str] = None,
) -> Tuple[Window, pd.Timestamp]:
    """Parse and resolve ``text``; return the window and the reference used."""
    reference = reference_instant(at, timezone)
    spec = parse_phrase(text)
    window = resolve(spec, reference, vocabulary=get_vocabulary())
    logger.info("Resolved %r at %s", text, reference.isoformat())
    return window, reference


def describe(text: str, window: Window, reference: pd.Timestamp) -> Dict:
    payload = {"phrase": text, "reference": reference.isoformat()}
    payload.update(window.as_dict())
    return payload
