"""
Constraint solver: clamp scale and time windows to configured limits.

All functions are pure. Only clamp_scale raises, and only for an invalid
configuration (min above max).
"""

from typing import Tuple

from .errors import ConfigurationError
from .time_window import DataDomain, TimeWindow, same_instant


def clamp_scale(scale: float, min_scale: float, max_scale: float) -> float:
    if min_scale > max_scale:
        raise ConfigurationError(f"min_scale ({min_scale}) exceeds max_scale ({max_scale})")
    return max(min_scale, min(max_scale, scale))


def clamp_time_window(start: float, end: float, domain: DataDomain,
                      enforce: bool = True) -> Tuple[float, float]:
    """Keep ``[start, end]`` inside the domain, preserving duration when possible.

    A window sticking out on one side is shifted back inside rather than
    truncated. A window wider than the domain collapses to the full domain.
    """
    if not enforce:
        return start, end

    if end < start:
        start, end = end, start

    duration = end - start
    if duration >= domain.span:
        return domain.start, domain.end
    if start < domain.start:
        return domain.start, domain.start + duration
    if end > domain.end:
        return domain.end - duration, domain.end
    return start, end


def clamp_window(window: TimeWindow, domain: DataDomain, enforce: bool = True) -> TimeWindow:
    """clamp_time_window for TimeWindow values."""
    start, end = clamp_time_window(window.start, window.end, domain, enforce)
    return TimeWindow(start, end)


def compute_at_boundary(window: TimeWindow, domain: DataDomain) -> bool:
    """True when the window touches either edge of the domain."""
    return same_instant(window.start, domain.start) or same_instant(window.end, domain.end)
