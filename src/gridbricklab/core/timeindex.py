"""
Time primitives used by the time-index and time-period handlers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

import numpy as np
import pandas as pd

from .errors import DomainError


def to_timestamp(value) -> pd.Timestamp:
    """Convert a datetime-like value to a pandas Timestamp."""
    if isinstance(value, pd.Timestamp):
        return value
    if isinstance(value, (datetime, date, np.datetime64)):
        return pd.Timestamp(value)
    raise TypeError(f"Expected a timestamp, got {type(value).__name__}")


def to_timedelta(value) -> pd.Timedelta:
    """
    Convert a duration to a pandas Timedelta at millisecond resolution.

    Strings are parsed by pandas (e.g. '1h', '7 days', 'PT3H').
    """
    if isinstance(value, (pd.Timedelta, timedelta, np.timedelta64, str, pd.offsets.Tick)):
        delta = pd.Timedelta(value)
    else:
        raise TypeError(f"Expected a duration, got {type(value).__name__}")
    return delta.floor("ms")


def iso_year_start(year: int) -> pd.Timestamp:
    """Monday of ISO week 1 of the given ISO year."""
    return pd.Timestamp(datetime.fromisocalendar(year, 1, 1))


def is_iso_year_start(value) -> bool:
    ts = to_timestamp(value)
    if ts != ts.normalize():
        return False
    return ts == iso_year_start(ts.isocalendar()[0])


def vector_index(values, label: str = "") -> pd.DatetimeIndex:
    """
    Build an explicit time index.

    Raises:
        DomainError: If the sequence is empty or not strictly increasing
    """
    index = pd.DatetimeIndex([to_timestamp(v) for v in values])
    if len(index) == 0:
        raise DomainError(f"Time index must be non-empty {label}".rstrip())
    if not index.is_monotonic_increasing or not index.is_unique:
        raise DomainError(f"Time index must be strictly increasing {label}".rstrip())
    return index


def range_index(start, steps: int, delta, label: str = "") -> pd.DatetimeIndex:
    """
    Build an evenly spaced time index of `steps` points starting at `start`.

    Raises:
        DomainError: If steps <= 0 or delta <= 0
    """
    delta = to_timedelta(delta)
    if steps <= 0:
        raise DomainError(f"Steps <= 0 {label}".rstrip())
    if delta <= pd.Timedelta(0):
        raise DomainError(f"Delta <= 0 milliseconds {label}".rstrip())
    return pd.date_range(start=to_timestamp(start), periods=steps, freq=delta)


@dataclass(frozen=True)
class TimePeriod:
    """
    A window between two times.

    A scenario period limits how much of a long historical record is read
    into the model, e.g. 30 of 60 available weather years. A simulation
    period is the span the model is run over.
    """

    start: pd.Timestamp
    stop: pd.Timestamp
    kind: str = "simulation"

    @property
    def duration(self) -> pd.Timedelta:
        return self.stop - self.start

    def contains(self, value) -> bool:
        ts = to_timestamp(value)
        return self.start <= ts < self.stop

    def clip(self, index: pd.DatetimeIndex) -> pd.DatetimeIndex:
        """Points of an index that fall within the period."""
        return index[(index >= self.start) & (index < self.stop)]
