"""
Handlers for time indices, time deltas and time periods (low-level values).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime, timedelta
from typing import Any

import numpy as np
import pandas as pd

from gridbricklab.core.errors import ConfigError, DomainError
from gridbricklab.core.ids import C, Id, RecordKey
from gridbricklab.core.records import check_key, get_field
from gridbricklab.core.timeindex import (
    TimePeriod,
    is_iso_year_start,
    range_index,
    to_timedelta,
    to_timestamp,
    vector_index,
)

TIMESTAMP_TYPES = (datetime, date, pd.Timestamp, np.datetime64)
DURATION_TYPES = (timedelta, pd.Timedelta, np.timedelta64, pd.offsets.Tick)


# --- VectorTimeIndex ---


def include_vector_time_index(
    toplevel: dict, lowlevel: dict, key: RecordKey, value: Any
) -> tuple[bool, list[Id]]:
    """
    Explicit list of strictly increasing timestamps.

    Accepts either the sequence itself or a mapping with a 'Vector' field.
    """
    check_key(lowlevel, key)
    if isinstance(value, Mapping):
        value = get_field(value, "Vector", (list, tuple, pd.DatetimeIndex), key)
    elif not isinstance(value, (Sequence, pd.DatetimeIndex)) or isinstance(value, str):
        raise ConfigError(
            f"VectorTimeIndex expects a sequence or mapping, got {type(value).__name__}",
            key,
        )
    for item in value:
        if not isinstance(item, TIMESTAMP_TYPES):
            raise ConfigError(
                f"VectorTimeIndex values must be timestamps, got {type(item).__name__}",
                key,
            )
    lowlevel[key.object_id] = vector_index(value, label=f"for {key}")
    return True, []


# --- RangeTimeIndex ---


def include_range_time_index(
    toplevel: dict, lowlevel: dict, key: RecordKey, value: Any
) -> tuple[bool, list[Id]]:
    """
    Evenly spaced time index described by Start, Steps and Delta.

    Delta is either a duration or the name of a TimeDelta record, in which
    case that record is a dependency. A ready-made DatetimeIndex with a
    fixed positive frequency is accepted as well.
    """
    check_key(lowlevel, key)

    if isinstance(value, pd.DatetimeIndex):
        if value.freq is None or len(value) == 0:
            raise DomainError("RangeTimeIndex needs a non-empty index with a fixed frequency", key)
        try:
            delta = pd.Timedelta(value.freq)
        except (TypeError, ValueError) as e:
            raise DomainError(
                f"RangeTimeIndex needs a fixed frequency, got '{value.freqstr}'", key
            ) from e
        lowlevel[key.object_id] = range_index(value[0], len(value), delta, label=f"for {key}")
        return True, []

    deps: list[Id] = []
    start = get_field(value, "Start", TIMESTAMP_TYPES, key)
    steps = get_field(value, "Steps", int, key)
    delta = get_field(value, "Delta", DURATION_TYPES + (str,), key)

    if isinstance(delta, str):
        delta_id = Id(C.TIMEDELTA, delta)
        deps.append(delta_id)
        if delta_id not in lowlevel:
            return False, deps
        delta = lowlevel[delta_id]

    lowlevel[key.object_id] = range_index(start, steps, delta, label=f"for {key}")
    return True, deps


# --- MsTimeDelta ---


def include_ms_time_delta(
    toplevel: dict, lowlevel: dict, key: RecordKey, value: Any
) -> tuple[bool, list[Id]]:
    """Positive duration stored at millisecond resolution."""
    check_key(lowlevel, key)
    period = get_field(value, "Period", DURATION_TYPES + (str,), key)
    try:
        delta = to_timedelta(period)
    except ValueError as e:
        raise ConfigError(f"Invalid duration '{period}': {e}", key) from e
    if delta <= pd.Timedelta(0):
        raise DomainError("Period <= 0 milliseconds", key)
    lowlevel[key.object_id] = delta
    return True, []


# --- ScenarioTimePeriod / SimulationTimePeriod ---


def _read_period(value: Any, key: RecordKey) -> tuple[pd.Timestamp, pd.Timestamp]:
    start = to_timestamp(get_field(value, "Start", TIMESTAMP_TYPES, key))
    stop = to_timestamp(get_field(value, "Stop", TIMESTAMP_TYPES, key))
    if not stop > start:
        raise DomainError("Stop <= Start", key)
    return start, stop


def include_scenario_time_period(
    toplevel: dict, lowlevel: dict, key: RecordKey, value: Any
) -> tuple[bool, list[Id]]:
    """Window of historical scenario data; both ends at an ISO year start."""
    check_key(lowlevel, key)
    start, stop = _read_period(value, key)
    if not is_iso_year_start(start):
        raise DomainError("Start must be an ISO year start", key)
    if not is_iso_year_start(stop):
        raise DomainError("Stop must be an ISO year start", key)
    lowlevel[key.object_id] = TimePeriod(start, stop, kind="scenario")
    return True, []


def include_simulation_time_period(
    toplevel: dict, lowlevel: dict, key: RecordKey, value: Any
) -> tuple[bool, list[Id]]:
    check_key(lowlevel, key)
    start, stop = _read_period(value, key)
    lowlevel[key.object_id] = TimePeriod(start, stop, kind="simulation")
    return True, []
