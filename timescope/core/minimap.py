"""
Minimap projector: linear mapping between domain time and minimap pixels.

Pure functions; the minimap widget and the brush coordinator both use them.
"""

from dataclasses import dataclass

from .time_window import DataDomain, TimeWindow

DEFAULT_MIN_INDICATOR_PX = 10.0


@dataclass(frozen=True)
class MinimapViewport:
    """Position of the current-window indicator on the minimap."""

    left_px: float
    width_px: float
    map_width_px: float

    @property
    def left_percent(self) -> float:
        return 100.0 * self.left_px / self.map_width_px

    @property
    def width_percent(self) -> float:
        return 100.0 * self.width_px / self.map_width_px

    @property
    def right_px(self) -> float:
        return self.left_px + self.width_px


def project_instant(t: float, domain: DataDomain, map_width_px: float) -> float:
    """Pixel offset of instant ``t`` (not clamped)."""
    return (t - domain.start) / domain.span * map_width_px


def project_viewport(window: TimeWindow, domain: DataDomain, map_width_px: float,
                     min_indicator_px: float = DEFAULT_MIN_INDICATOR_PX) -> MinimapViewport:
    """Indicator rectangle for ``window``.

    The width never drops below ``min_indicator_px`` so a deeply zoomed view
    still has something to grab. The rectangle always stays inside the map;
    a floored indicator at the right edge is shifted left to fit.
    """
    left = project_instant(window.start, domain, map_width_px)
    left = max(0.0, min(left, map_width_px))
    width = window.duration / domain.span * map_width_px
    width = min(max(min_indicator_px, min(width, map_width_px - left)), map_width_px)
    left = max(0.0, min(left, map_width_px - width))
    return MinimapViewport(left_px=left, width_px=width, map_width_px=map_width_px)


def invert_pixel(px: float, domain: DataDomain, map_width_px: float) -> float:
    """Instant under minimap pixel ``px``."""
    return domain.start + (px / map_width_px) * domain.span


def brush_to_window(px_a: float, px_b: float, domain: DataDomain,
                    map_width_px: float) -> TimeWindow:
    """Time window covered by a brushed pixel range (either direction)."""
    lo, hi = sorted((px_a, px_b))
    return TimeWindow(invert_pixel(lo, domain, map_width_px),
                      invert_pixel(hi, domain, map_width_px))
