"""
Tests for the time-index, time-delta and time-period handlers.
"""

from datetime import datetime, timedelta

import pandas as pd
import pytest
from gridbricklab.core.errors import ConfigError, DomainError
from gridbricklab.core.ids import C, Id, RecordKey
from gridbricklab.core.timeindex import TimePeriod, is_iso_year_start, iso_year_start
from gridbricklab.handlers.time import (
    include_ms_time_delta,
    include_range_time_index,
    include_scenario_time_period,
    include_simulation_time_period,
    include_vector_time_index,
)

KEY = RecordKey("doesnotmatter", "doesnotmatter", "doesnotmatter")


def _assert_ok_no_deps(ret):
    assert isinstance(ret, tuple) and len(ret) == 2
    ok, deps = ret
    assert ok is True
    assert deps == []


class TestVectorTimeIndex:
    def test_empty_vector(self):
        with pytest.raises(DomainError, match="non-empty"):
            include_vector_time_index({}, {}, KEY, [])

    def test_not_sorted(self):
        v = [datetime(2024, 3, 23), datetime(1985, 7, 1)]
        with pytest.raises(DomainError, match="strictly increasing"):
            include_vector_time_index({}, {}, KEY, v)

    def test_repeated_timestamp(self):
        v = [datetime(1985, 7, 1), datetime(1985, 7, 1)]
        with pytest.raises(DomainError):
            include_vector_time_index({}, {}, KEY, v)

    def test_single_element(self):
        lowlevel = {}
        ret = include_vector_time_index({}, lowlevel, KEY, [datetime(1985, 7, 1)])
        _assert_ok_no_deps(ret)
        index = lowlevel[KEY.object_id]
        assert isinstance(index, pd.DatetimeIndex)
        assert list(index) == [pd.Timestamp(1985, 7, 1)]

    def test_same_id_already_stored(self):
        lowlevel = {KEY.object_id: 1}
        with pytest.raises(ConfigError, match="already exists"):
            include_vector_time_index({}, lowlevel, KEY, [datetime(1985, 7, 1)])

    def test_mapping_missing_vector(self):
        with pytest.raises(ConfigError, match="'Vector'"):
            include_vector_time_index({}, {}, KEY, {})

    def test_mapping_ok(self):
        lowlevel = {}
        ret = include_vector_time_index(
            {}, lowlevel, KEY, {"Vector": [datetime(1985, 7, 1), datetime(1986, 7, 1)]}
        )
        _assert_ok_no_deps(ret)
        assert len(lowlevel[KEY.object_id]) == 2

    def test_non_timestamp_values(self):
        with pytest.raises(ConfigError, match="must be timestamps"):
            include_vector_time_index({}, {}, KEY, [1, 2, 3])


class TestRangeTimeIndex:
    def _value(self, **overrides):
        value = {"Start": datetime(1985, 7, 1), "Steps": 10, "Delta": timedelta(hours=1)}
        value.update(overrides)
        return value

    def test_empty_dict(self):
        with pytest.raises(ConfigError):
            include_range_time_index({}, {}, KEY, {})

    @pytest.mark.parametrize(
        "field, bad",
        [("Start", "DateTime(1985, 7, 1)"), ("Steps", "10"), ("Delta", 10)],
    )
    def test_wrong_field_types(self, field, bad):
        with pytest.raises(ConfigError, match=f"'{field}'"):
            include_range_time_index({}, {}, KEY, self._value(**{field: bad}))

    def test_ok(self):
        lowlevel = {}
        ret = include_range_time_index({}, lowlevel, KEY, self._value())
        _assert_ok_no_deps(ret)
        index = lowlevel[KEY.object_id]
        assert len(index) == 10
        assert index[0] == pd.Timestamp(1985, 7, 1)
        assert (index[1:] - index[:-1] == pd.Timedelta(hours=1)).all()

    def test_zero_steps(self):
        with pytest.raises(DomainError, match="Steps <= 0"):
            include_range_time_index({}, {}, KEY, self._value(Steps=0))

    @pytest.mark.parametrize("delta", [timedelta(0), timedelta(hours=-1)])
    def test_non_positive_delta(self, delta):
        with pytest.raises(DomainError, match="Delta <= 0"):
            include_range_time_index({}, {}, KEY, self._value(Delta=delta))

    def test_delta_by_reference_waits(self):
        lowlevel = {}
        ok, deps = include_range_time_index({}, lowlevel, KEY, self._value(Delta="OneHour"))
        assert ok is False
        assert deps == [Id(C.TIMEDELTA, "OneHour")]
        assert lowlevel == {}

    def test_delta_by_reference_resolves(self):
        lowlevel = {Id(C.TIMEDELTA, "OneHour"): pd.Timedelta(hours=1)}
        ok, deps = include_range_time_index({}, lowlevel, KEY, self._value(Delta="OneHour"))
        assert ok is True
        assert deps == [Id(C.TIMEDELTA, "OneHour")]
        assert len(lowlevel[KEY.object_id]) == 10

    def test_ready_made_index(self):
        lowlevel = {}
        rng = pd.date_range("2024-01-01", periods=5, freq="1h")
        ret = include_range_time_index({}, lowlevel, KEY, rng)
        _assert_ok_no_deps(ret)
        assert lowlevel[KEY.object_id].equals(rng)

    def test_ready_made_index_without_frequency(self):
        irregular = pd.DatetimeIndex(["2024-01-01", "2024-01-03", "2024-01-04"])
        with pytest.raises(DomainError, match="fixed frequency"):
            include_range_time_index({}, {}, KEY, irregular)

    def test_ready_made_index_with_calendar_frequency(self):
        monthly = pd.date_range("2024-01-01", periods=3, freq="MS")
        with pytest.raises(DomainError, match="fixed frequency") as exc:
            include_range_time_index({}, {}, KEY, monthly)
        assert exc.value.key == KEY


class TestMsTimeDelta:
    def test_string_period(self):
        lowlevel = {}
        _assert_ok_no_deps(include_ms_time_delta({}, lowlevel, KEY, {"Period": "3h"}))
        assert lowlevel[KEY.object_id] == pd.Timedelta(hours=3)

    def test_truncated_to_milliseconds(self):
        lowlevel = {}
        include_ms_time_delta({}, lowlevel, KEY, {"Period": timedelta(microseconds=1500)})
        assert lowlevel[KEY.object_id] == pd.Timedelta(milliseconds=1)

    def test_non_positive(self):
        with pytest.raises(DomainError, match="Period <= 0"):
            include_ms_time_delta({}, {}, KEY, {"Period": timedelta(0)})

    def test_unparsable(self):
        with pytest.raises(ConfigError, match="Invalid duration"):
            include_ms_time_delta({}, {}, KEY, {"Period": "soon"})


class TestTimePeriods:
    def test_iso_year_start(self):
        assert iso_year_start(2024) == pd.Timestamp(2024, 1, 1)
        assert iso_year_start(2021) == pd.Timestamp(2021, 1, 4)
        assert is_iso_year_start(datetime(2021, 1, 4))
        assert not is_iso_year_start(datetime(2021, 1, 1))
        assert not is_iso_year_start(datetime(2021, 1, 4, 6))

    def test_scenario_period_ok(self):
        lowlevel = {}
        value = {"Start": iso_year_start(1981), "Stop": iso_year_start(1983)}
        _assert_ok_no_deps(include_scenario_time_period({}, lowlevel, KEY, value))
        period = lowlevel[KEY.object_id]
        assert isinstance(period, TimePeriod)
        assert period.kind == "scenario"
        assert period.contains(datetime(1982, 6, 1))
        assert not period.contains(iso_year_start(1983))

    def test_scenario_period_not_year_aligned(self):
        value = {"Start": datetime(1981, 3, 1), "Stop": iso_year_start(1983)}
        with pytest.raises(DomainError, match="Start must be an ISO year start"):
            include_scenario_time_period({}, {}, KEY, value)
        value = {"Start": iso_year_start(1981), "Stop": datetime(1983, 3, 1)}
        with pytest.raises(DomainError, match="Stop must be an ISO year start"):
            include_scenario_time_period({}, {}, KEY, value)

    def test_scenario_period_stop_before_start(self):
        value = {"Start": iso_year_start(1983), "Stop": iso_year_start(1981)}
        with pytest.raises(DomainError, match="Stop <= Start"):
            include_scenario_time_period({}, {}, KEY, value)

    def test_simulation_period(self):
        lowlevel = {}
        value = {"Start": datetime(2025, 3, 1), "Stop": datetime(2025, 3, 8)}
        _assert_ok_no_deps(include_simulation_time_period({}, lowlevel, KEY, value))
        period = lowlevel[KEY.object_id]
        assert period.duration == pd.Timedelta(days=7)
        index = pd.date_range("2025-02-27", periods=10, freq="1D")
        assert len(period.clip(index)) == 7

    def test_simulation_period_equal_ends(self):
        value = {"Start": datetime(2025, 3, 1), "Stop": datetime(2025, 3, 1)}
        with pytest.raises(DomainError):
            include_simulation_time_period({}, {}, KEY, value)
