"""Resolution of Specifications into Windows at a reference instant."""

from .periods import period_interval, resolve_period, resolve_relative
from .resolve import resolve

__all__ = ["period_interval", "resolve", "resolve_period", "resolve_relative"]
