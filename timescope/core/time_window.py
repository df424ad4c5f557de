"""Time instants, visible windows and the data domain.

Instants are floats counting milliseconds since the Unix epoch (UTC). This
keeps every transform plain float arithmetic; conversion to ``datetime`` only
happens at the edges (labels, user input).
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Iterable, Tuple, Union

import numpy as np

from .errors import ConfigurationError

MS_PER_SECOND = 1000.0
MS_PER_DAY = 86_400_000.0

InstantLike = Union[datetime, date, np.datetime64, float, int]


class ZoomLabel(Enum):
    DAY = 'day'
    WEEK = 'week'
    MONTH = 'month'
    QUARTER = 'quarter'
    YEAR = 'year'
    CUSTOM = 'custom'


def to_ms(value: InstantLike) -> float:
    """Convert an instant to epoch milliseconds.

    Naive datetimes are taken to be UTC. Plain numbers are assumed to already
    be milliseconds.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp() * MS_PER_SECOND
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc).timestamp() * MS_PER_SECOND
    if isinstance(value, np.datetime64):
        return float(value.astype('datetime64[us]').astype(np.int64)) / 1000.0
    return float(value)


def from_ms(ms: float) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(ms / MS_PER_SECOND, tz=timezone.utc)


def is_finite(*values: float) -> bool:
    """True if every value is a real, finite number."""
    try:
        return all(math.isfinite(v) for v in values)
    except TypeError:
        return False


def same_instant(a: float, b: float) -> bool:
    """Instant equality at millisecond granularity."""
    return round(a) == round(b)


@dataclass(frozen=True)
class TimeWindow:
    """Visible ``[start, end]`` range in epoch milliseconds."""

    start: float
    end: float

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"TimeWindow start {self.start} is after end {self.end}")

    @classmethod
    def from_instants(cls, start: InstantLike, end: InstantLike) -> "TimeWindow":
        return cls(to_ms(start), to_ms(end))

    @property
    def duration(self) -> float:
        return self.end - self.start

    @property
    def center(self) -> float:
        return self.start + self.duration / 2.0

    def contains(self, t: float) -> bool:
        return self.start <= t <= self.end

    def shifted(self, delta: float) -> "TimeWindow":
        return TimeWindow(self.start + delta, self.end + delta)

    def as_datetimes(self) -> Tuple[datetime, datetime]:
        return from_ms(self.start), from_ms(self.end)

    def as_tuple(self) -> Tuple[float, float]:
        return self.start, self.end


@dataclass(frozen=True)
class DataDomain:
    """Full extent of the available data. Immutable for a session."""

    start: float
    end: float

    def __post_init__(self):
        if not is_finite(self.start, self.end):
            raise ConfigurationError(f"Data domain bounds must be finite, got ({self.start}, {self.end})")
        if self.end <= self.start:
            raise ConfigurationError(
                f"Data domain is empty: start {from_ms(self.start).isoformat()} "
                f"is not before end {from_ms(self.end).isoformat()}"
            )

    @classmethod
    def from_instants(cls, start: InstantLike, end: InstantLike) -> "DataDomain":
        return cls(to_ms(start), to_ms(end))

    @classmethod
    def from_timestamps(cls, timestamps: Iterable[InstantLike]) -> "DataDomain":
        """Build the domain ``[min(t), max(t)]`` of a data source."""
        values = np.asarray([to_ms(t) for t in timestamps], dtype=float)
        if values.size == 0:
            raise ConfigurationError("Cannot build a data domain from an empty data source")
        return cls(float(np.nanmin(values)), float(np.nanmax(values)))

    @property
    def span(self) -> float:
        return self.end - self.start

    @property
    def window(self) -> TimeWindow:
        """The whole domain as a TimeWindow."""
        return TimeWindow(self.start, self.end)
