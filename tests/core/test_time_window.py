"""Tests for instants, TimeWindow and DataDomain."""

from datetime import date, datetime, timedelta, timezone

import numpy as np
import pytest

from timescope.core.errors import ConfigurationError
from timescope.core.time_window import (
    MS_PER_DAY, DataDomain, TimeWindow, from_ms, is_finite, same_instant, to_ms,
)

EPOCH_2024 = 1_704_067_200_000.0


class TestConversions:
    def test_aware_datetime(self):
        assert to_ms(datetime(2024, 1, 1, tzinfo=timezone.utc)) == EPOCH_2024

    def test_naive_datetime_is_utc(self):
        assert to_ms(datetime(2024, 1, 1)) == EPOCH_2024

    def test_offset_datetime(self):
        plus_two = timezone(timedelta(hours=2))
        assert to_ms(datetime(2024, 1, 1, 2, tzinfo=plus_two)) == EPOCH_2024

    def test_date(self):
        assert to_ms(date(2024, 1, 2)) == EPOCH_2024 + MS_PER_DAY

    def test_numpy_datetime64(self):
        assert to_ms(np.datetime64('2024-01-01T00:00:00')) == EPOCH_2024

    def test_number_passthrough(self):
        assert to_ms(1234) == 1234.0

    def test_from_ms_round_trip(self):
        dt = from_ms(EPOCH_2024)
        assert dt == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert dt.tzinfo is not None


class TestHelpers:
    def test_is_finite(self):
        assert is_finite(1.0, 2, -3.5)
        assert not is_finite(1.0, float('nan'))
        assert not is_finite(float('inf'))
        assert not is_finite(None)

    def test_same_instant_is_millisecond_granular(self):
        assert same_instant(1000.0, 1000.4)
        assert not same_instant(1000.0, 1001.0)


class TestTimeWindow:
    def test_duration_and_center(self):
        w = TimeWindow(100.0, 300.0)
        assert w.duration == 200.0
        assert w.center == 200.0

    def test_zero_length_allowed(self):
        assert TimeWindow(5.0, 5.0).duration == 0.0

    def test_reversed_rejected(self):
        with pytest.raises(ValueError):
            TimeWindow(10.0, 5.0)

    def test_contains_is_inclusive(self):
        w = TimeWindow(0.0, 10.0)
        assert w.contains(0.0)
        assert w.contains(10.0)
        assert not w.contains(10.5)

    def test_shifted(self):
        assert TimeWindow(0.0, 10.0).shifted(5.0) == TimeWindow(5.0, 15.0)

    def test_from_instants(self):
        w = TimeWindow.from_instants(datetime(2024, 1, 1), datetime(2024, 1, 8))
        assert w.duration == 7 * MS_PER_DAY
        assert w.as_tuple() == (EPOCH_2024, EPOCH_2024 + 7 * MS_PER_DAY)

    def test_as_datetimes(self):
        start, end = TimeWindow(EPOCH_2024, EPOCH_2024 + MS_PER_DAY).as_datetimes()
        assert end - start == timedelta(days=1)


class TestDataDomain:
    def test_span(self, year_domain):
        assert year_domain.span == 365 * MS_PER_DAY

    def test_window_covers_domain(self, year_domain):
        assert year_domain.window == TimeWindow(year_domain.start, year_domain.end)

    def test_empty_domain_rejected(self):
        with pytest.raises(ConfigurationError):
            DataDomain(EPOCH_2024, EPOCH_2024)

    def test_inverted_domain_rejected(self):
        with pytest.raises(ConfigurationError):
            DataDomain(EPOCH_2024, EPOCH_2024 - 1)

    def test_nan_domain_rejected(self):
        with pytest.raises(ConfigurationError):
            DataDomain(float('nan'), EPOCH_2024)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            DataDomain(1.0, 0.0)

    def test_from_timestamps(self):
        domain = DataDomain.from_timestamps([EPOCH_2024 + 50, EPOCH_2024, EPOCH_2024 + 10])
        assert domain.start == EPOCH_2024
        assert domain.end == EPOCH_2024 + 50

    def test_from_timestamps_empty(self):
        with pytest.raises(ConfigurationError):
            DataDomain.from_timestamps([])

    def test_from_single_timestamp_is_empty(self):
        with pytest.raises(ConfigurationError):
            DataDomain.from_timestamps([EPOCH_2024])
