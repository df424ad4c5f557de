"""
ViewTransform: the viewport state and the pure operations that evolve it.

Every operation takes the previous state plus a TransformContext and returns a
new, already-constrained state. Nothing here mutates or notifies; the
controller owns the single live instance.
"""

from dataclasses import dataclass, replace
from typing import Optional

from .config import ViewportConfig
from .constraints import clamp_scale, clamp_time_window, compute_at_boundary
from .presets import resolve_preset
from .time_window import DataDomain, TimeWindow, ZoomLabel


@dataclass(frozen=True)
class TransformContext:
    """Everything an operation needs besides the previous state."""

    domain: DataDomain
    min_scale: float = 0.1
    max_scale: float = 10.0
    enforce_boundaries: bool = True
    chart_width_px: float = 800.0

    @classmethod
    def from_config(cls, config: ViewportConfig, domain: DataDomain,
                    chart_width_px: Optional[float] = None) -> "TransformContext":
        return cls(
            domain=domain,
            min_scale=config.min_scale,
            max_scale=config.max_scale,
            enforce_boundaries=config.enforce_boundaries,
            chart_width_px=chart_width_px if chart_width_px else config.chart_width_px,
        )


@dataclass(frozen=True)
class ViewTransform:
    """Immutable snapshot of the viewport."""

    time_window: TimeWindow
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0
    zoom_label: ZoomLabel = ZoomLabel.CUSTOM
    at_boundary: bool = False

    @classmethod
    def initial(cls, ctx: TransformContext) -> "ViewTransform":
        """Whole domain at scale 1.0."""
        return reset(cls(time_window=ctx.domain.window), ctx)

    @property
    def duration(self) -> float:
        return self.time_window.duration


def _constrained(state: ViewTransform, ctx: TransformContext, start: float, end: float,
                 **changes) -> ViewTransform:
    start, end = clamp_time_window(start, end, ctx.domain, ctx.enforce_boundaries)
    window = TimeWindow(start, end)
    return replace(state, time_window=window,
                   at_boundary=compute_at_boundary(window, ctx.domain), **changes)


def _zoom(state: ViewTransform, ctx: TransformContext, anchor_frac: float,
          target_scale: float) -> ViewTransform:
    new_scale = clamp_scale(target_scale, ctx.min_scale, ctx.max_scale)
    effective = new_scale / state.scale
    window = state.time_window
    if effective == 1.0:
        return _constrained(state, ctx, window.start, window.end)

    anchor_frac = max(0.0, min(1.0, anchor_frac))
    anchor = window.start + anchor_frac * window.duration
    new_duration = window.duration / effective
    new_start = anchor - anchor_frac * new_duration
    return _constrained(state, ctx, new_start, new_start + new_duration,
                        scale=new_scale, zoom_label=ZoomLabel.CUSTOM)


def zoom_at_point(state: ViewTransform, ctx: TransformContext, x: float, y: float,
                  factor: float) -> ViewTransform:
    """Zoom by ``factor`` keeping the instant under pixel ``x`` in place.

    ``factor > 1`` zooms in. When the scale limit cuts the factor short the
    window follows the effective factor, so window and scale stay in step.
    ``y`` does not affect the time axis.
    """
    return _zoom(state, ctx, x / ctx.chart_width_px, state.scale * factor)


def zoom_to_scale(state: ViewTransform, ctx: TransformContext, scale: float) -> ViewTransform:
    """Zoom to an absolute scale, anchored on the viewport center."""
    return _zoom(state, ctx, 0.5, scale)


def pan_by_pixels(state: ViewTransform, ctx: TransformContext, dx: float,
                  chart_width_px: Optional[float] = None, dy: float = 0.0) -> ViewTransform:
    """Shift the window by a horizontal pixel distance.

    Dragging right (positive ``dx``) reveals earlier data.
    """
    width = chart_width_px if chart_width_px and chart_width_px > 0 else ctx.chart_width_px
    window = state.time_window
    time_delta = -(dx / width) * window.duration
    return _constrained(state, ctx, window.start + time_delta, window.end + time_delta,
                        translate_x=state.translate_x + dx,
                        translate_y=state.translate_y + dy)


def pan_to_instant(state: ViewTransform, ctx: TransformContext, instant: float) -> ViewTransform:
    """Recenter the window on ``instant``, keeping its duration."""
    half = state.time_window.duration / 2.0
    return _constrained(state, ctx, instant - half, instant + half)


def apply_preset(state: ViewTransform, ctx: TransformContext, code: str) -> ViewTransform:
    """Show the last preset-length stretch of the domain.

    Ranges end at the domain end, not at wall-clock now. Unknown codes show
    the whole domain.
    """
    preset = resolve_preset(code)
    scale = clamp_scale(1.0, ctx.min_scale, ctx.max_scale)
    if preset is None:
        return _constrained(state, ctx, ctx.domain.start, ctx.domain.end,
                            scale=scale, zoom_label=ZoomLabel.CUSTOM)
    return _constrained(state, ctx, ctx.domain.end - preset.duration_ms, ctx.domain.end,
                        scale=scale, zoom_label=preset.zoom_label)


def zoom_to_time_range(state: ViewTransform, ctx: TransformContext, start: float,
                       end: float) -> ViewTransform:
    """Show ``[start, end]`` directly (order-insensitive)."""
    if end < start:
        start, end = end, start
    return _constrained(state, ctx, start, end, zoom_label=ZoomLabel.CUSTOM)


def reset(state: ViewTransform, ctx: TransformContext) -> ViewTransform:
    """Whole domain, scale 1.0, no translation."""
    return _constrained(state, ctx, ctx.domain.start, ctx.domain.end,
                        scale=clamp_scale(1.0, ctx.min_scale, ctx.max_scale),
                        translate_x=0.0, translate_y=0.0,
                        zoom_label=ZoomLabel.CUSTOM)
