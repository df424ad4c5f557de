"""Viewport configuration."""

from dataclasses import dataclass, fields, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Tuple

from timescope.logging import get_logger
from .errors import ConfigurationError
from .settings import get_setting
from .time_window import DataDomain, InstantLike, is_finite

logger = get_logger(__name__)

SETTINGS_KEY = "viewport"

DEFAULT_TIME_EXTENT = (
    datetime(2024, 1, 1, tzinfo=timezone.utc),
    datetime(2024, 12, 31, tzinfo=timezone.utc),
)


def _parse_extent(value: Any) -> Tuple[InstantLike, InstantLike]:
    """``initial_time_extent`` from JSON: a [start, end] pair of ISO strings or numbers."""
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ConfigurationError(f"initial_time_extent must be a [start, end] pair, got {value!r}")
    try:
        start, end = (datetime.fromisoformat(v) if isinstance(v, str) else v for v in value)
    except ValueError as e:
        raise ConfigurationError(f"Invalid initial_time_extent {value!r}: {e}") from e
    return start, end


@dataclass(frozen=True)
class ViewportConfig:
    """Options recognized by the viewport controller."""

    initial_time_extent: Tuple[InstantLike, InstantLike] = DEFAULT_TIME_EXTENT
    min_scale: float = 0.1
    max_scale: float = 10.0
    enforce_boundaries: bool = True
    minimap_width_px: float = 200.0
    min_indicator_width_px: float = 10.0
    chart_width_px: float = 800.0
    zoom_step: float = 1.5
    frame_interval_ms: float = 1000.0 / 60.0
    max_latency_ms: float = 100.0
    visible_data_threshold: int = 1000

    def validate(self) -> "ViewportConfig":
        """Raise ConfigurationError for unusable settings; return self otherwise."""
        if not is_finite(self.min_scale, self.max_scale) or self.min_scale <= 0:
            raise ConfigurationError(
                f"Scale limits must be finite and positive, got min={self.min_scale} max={self.max_scale}"
            )
        if self.min_scale > self.max_scale:
            raise ConfigurationError(f"min_scale ({self.min_scale}) exceeds max_scale ({self.max_scale})")
        for name in ('minimap_width_px', 'chart_width_px', 'frame_interval_ms', 'max_latency_ms'):
            value = getattr(self, name)
            if not is_finite(value) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive number, got {value}")
        if not is_finite(self.min_indicator_width_px) or self.min_indicator_width_px < 0:
            raise ConfigurationError(
                f"min_indicator_width_px must be non-negative, got {self.min_indicator_width_px}"
            )
        if not is_finite(self.zoom_step) or self.zoom_step <= 1.0:
            raise ConfigurationError(f"zoom_step must be greater than 1, got {self.zoom_step}")
        if (not isinstance(self.visible_data_threshold, int)
                or isinstance(self.visible_data_threshold, bool)
                or self.visible_data_threshold < 1):
            raise ConfigurationError(
                f"visible_data_threshold must be an integer of at least 1, got {self.visible_data_threshold!r}"
            )
        try:
            self.domain()
        except ConfigurationError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid initial_time_extent {self.initial_time_extent!r}: {e}") from e
        return self

    def domain(self) -> DataDomain:
        """Data domain described by ``initial_time_extent``."""
        start, end = self.initial_time_extent
        return DataDomain.from_instants(start, end)

    def with_overrides(self, **overrides: Any) -> "ViewportConfig":
        return replace(self, **overrides)

    @classmethod
    def from_settings(cls, path: Optional[Path] = None, **overrides: Any) -> "ViewportConfig":
        """Build a config from the ``viewport`` settings section plus overrides.

        Unknown keys in the settings file are skipped. Explicit overrides win.
        """
        stored = get_setting(SETTINGS_KEY, {}, path)
        if not isinstance(stored, dict):
            logger.debug(f"Ignoring non-dict '{SETTINGS_KEY}' settings section: {stored!r}")
            stored = {}

        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in stored.items():
            if key not in known:
                logger.debug(f"Ignoring unknown viewport setting '{key}'")
                continue
            if key == 'initial_time_extent':
                value = _parse_extent(value)
            values[key] = value
        values.update(overrides)
        return cls(**values).validate()
