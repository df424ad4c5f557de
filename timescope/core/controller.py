"""
Viewport session controller.

The one writer of the live ViewTransform. Every action, whether a coalesced
gesture update or an imperative call, goes through dispatch(): reduce through
the handler table, store, publish once.
"""

from typing import Callable, Dict, FrozenSet, Optional, Tuple

from timescope.logging import get_logger
from . import view_transform as vt
from .config import ViewportConfig
from .coordinators import (
    DragPanCoordinator, MinimapBrushCoordinator, PresetSelector,
    TouchCoordinator, WheelZoomCoordinator,
)
from .frame_governor import FrameGovernor
from .gestures import (
    BrushGesture, ChangeKind, DragGesture, Gesture, GestureKind, PanCommand,
    PanToCommand, PinchGesture, PresetGesture, ResetCommand, RestoreCommand,
    TimeRangeCommand, WheelGesture, ZoomCommand, ZoomToScaleCommand,
)
from .minimap import MinimapViewport, brush_to_window, invert_pixel, project_viewport
from .notification import TransformBus, TransformCallback
from .time_window import DataDomain, InstantLike, is_finite, to_ms
from .view_transform import TransformContext, ViewTransform

logger = get_logger(__name__)

ZOOM = frozenset({ChangeKind.ZOOM})
PAN = frozenset({ChangeKind.PAN})
ZOOM_AND_PAN = frozenset({ChangeKind.ZOOM, ChangeKind.PAN})

Reduction = Tuple[ViewTransform, FrozenSet[ChangeKind]]
Handler = Callable[[ViewTransform, TransformContext, Gesture, ViewportConfig], Reduction]


def _wheel(state, ctx, g: WheelGesture, config) -> Reduction:
    factor = config.zoom_step if g.delta_y < 0 else 1.0 / config.zoom_step
    return vt.zoom_at_point(state, ctx, g.x, g.y, factor), ZOOM


def _drag(state, ctx, g: DragGesture, config) -> Reduction:
    return vt.pan_by_pixels(g.start_transform, ctx, g.dx, ctx.chart_width_px, g.dy), PAN


def _pinch(state, ctx, g: PinchGesture, config) -> Reduction:
    return vt.zoom_at_point(g.start_transform, ctx, g.center_x, g.center_y, g.ratio), ZOOM


def _brush(state, ctx, g: BrushGesture, config) -> Reduction:
    window = brush_to_window(g.start_px, g.end_px, ctx.domain, g.map_width_px)
    return vt.zoom_to_time_range(state, ctx, window.start, window.end), ZOOM_AND_PAN


def _preset(state, ctx, g: PresetGesture, config) -> Reduction:
    return vt.apply_preset(state, ctx, g.code), ZOOM


def _zoom(state, ctx, g: ZoomCommand, config) -> Reduction:
    x = ctx.chart_width_px / 2.0 if g.x is None else g.x
    return vt.zoom_at_point(state, ctx, x, 0.0, g.factor), ZOOM


def _zoom_to_scale(state, ctx, g: ZoomToScaleCommand, config) -> Reduction:
    return vt.zoom_to_scale(state, ctx, g.scale), ZOOM


def _pan(state, ctx, g: PanCommand, config) -> Reduction:
    return vt.pan_by_pixels(state, ctx, g.dx, ctx.chart_width_px, g.dy), PAN


def _pan_to(state, ctx, g: PanToCommand, config) -> Reduction:
    return vt.pan_to_instant(state, ctx, g.instant), PAN


def _time_range(state, ctx, g: TimeRangeCommand, config) -> Reduction:
    return vt.zoom_to_time_range(state, ctx, g.start, g.end), ZOOM_AND_PAN


def _reset(state, ctx, g: ResetCommand, config) -> Reduction:
    return vt.reset(state, ctx), ZOOM_AND_PAN


def _restore(state, ctx, g: RestoreCommand, config) -> Reduction:
    return g.transform, ZOOM_AND_PAN


HANDLERS: Dict[GestureKind, Handler] = {
    GestureKind.WHEEL: _wheel,
    GestureKind.DRAG: _drag,
    GestureKind.PINCH: _pinch,
    GestureKind.BRUSH: _brush,
    GestureKind.PRESET: _preset,
    GestureKind.ZOOM: _zoom,
    GestureKind.ZOOM_SCALE: _zoom_to_scale,
    GestureKind.PAN: _pan,
    GestureKind.PAN_TO: _pan_to,
    GestureKind.RANGE: _time_range,
    GestureKind.RESET: _reset,
    GestureKind.RESTORE: _restore,
}

_missing = set(GestureKind) - set(HANDLERS)
if _missing:
    raise RuntimeError(f"No viewport handler for {sorted(k.name for k in _missing)}")


class ViewportController:
    """Owns the ViewTransform for one viewing session.

    Attributes:
        wheel, drag, touch, presets, brush: input coordinators bound to this
            controller. Hosts feed raw pointer data to them.
    """

    def __init__(
        self,
        domain: Optional[DataDomain] = None,
        config: Optional[ViewportConfig] = None,
        governor: Optional[FrameGovernor] = None,
        bus: Optional[TransformBus] = None,
        on_transform_change: Optional[TransformCallback] = None,
        on_zoom_change: Optional[TransformCallback] = None,
        on_pan_change: Optional[TransformCallback] = None,
    ):
        self._config = (config or ViewportConfig()).validate()
        self._domain = domain if domain is not None else self._config.domain()
        self._chart_width_px = float(self._config.chart_width_px)
        self._governor = governor or FrameGovernor(
            frame_interval_ms=self._config.frame_interval_ms,
            max_latency_ms=self._config.max_latency_ms,
        )
        self._bus = bus or TransformBus()
        self._state = ViewTransform.initial(self._context())
        self._active = None
        self._shut_down = False

        if on_transform_change is not None:
            self._bus.subscribe(on_transform_change)
        if on_zoom_change is not None:
            self._bus.subscribe(on_zoom_change, ZOOM)
        if on_pan_change is not None:
            self._bus.subscribe(on_pan_change, PAN)

        self.wheel = WheelZoomCoordinator(self)
        self.drag = DragPanCoordinator(self)
        self.touch = TouchCoordinator(self)
        self.presets = PresetSelector(self)
        self.brush = MinimapBrushCoordinator(self)

        logger.debug(f"ViewportController created: domain={self._domain}, config={self._config}")

    # ── Properties ────────────────────────────────────────────────────────────

    @property
    def state(self) -> ViewTransform:
        return self._state

    @property
    def domain(self) -> DataDomain:
        return self._domain

    @property
    def config(self) -> ViewportConfig:
        return self._config

    @property
    def bus(self) -> TransformBus:
        return self._bus

    @property
    def governor(self) -> FrameGovernor:
        return self._governor

    @property
    def chart_width_px(self) -> float:
        return self._chart_width_px

    @property
    def is_shut_down(self) -> bool:
        return self._shut_down

    @property
    def active_gesture(self):
        """Coordinator currently holding a gesture session, if any."""
        return self._active

    def _context(self) -> TransformContext:
        return TransformContext.from_config(self._config, self._domain, self._chart_width_px)

    # ── Core transition ───────────────────────────────────────────────────────

    def dispatch(self, gesture: Gesture) -> ViewTransform:
        """Apply one action, constrain, store and publish the result."""
        if self._shut_down:
            logger.debug(f"Ignoring {gesture.kind.name} after shutdown")
            return self._state
        handler = HANDLERS[gesture.kind]
        new_state, changes = handler(self._state, self._context(), gesture, self._config)
        self._state = new_state
        self._bus.publish(new_state, changes)
        return new_state

    def subscribe(self, callback: TransformCallback,
                  kinds: Optional[FrozenSet[ChangeKind]] = None) -> Callable[[], None]:
        return self._bus.subscribe(callback, kinds)

    def set_chart_width(self, width_px: float) -> None:
        """Renderer width used to convert pixels to time."""
        if not is_finite(width_px) or width_px <= 0:
            logger.debug(f"Ignoring chart width {width_px!r}")
            return
        self._chart_width_px = float(width_px)

    # ── Gesture bookkeeping ───────────────────────────────────────────────────

    def begin_gesture(self, coordinator) -> ViewTransform:
        """Make ``coordinator`` the active gesture; returns the start snapshot.

        A still-running gesture from another coordinator is ended first and a
        pending frame update is applied so the snapshot is current.
        """
        if self._active is not None and self._active is not coordinator:
            self._active.end()
        self._governor.flush()
        self._active = coordinator
        return self._state

    def end_gesture(self, coordinator) -> None:
        if self._active is coordinator:
            self._active = None

    def settle_gesture(self) -> None:
        """Apply and close an in-flight drag or pinch.

        Called before a wheel zoom is queued: the governor holds one pending
        update, so the gesture's last move must land before the zoom replaces
        it. A minimap brush only changes the view on release and is left open.
        """
        if self._active is not None and self._active is not self.brush:
            self._active.end()

    def interrupt_gestures(self) -> None:
        """Cancel the in-flight gesture without publishing the rollback.

        Used before a discrete action so it lands on the pre-gesture state and
        wins over any update still waiting for a frame.
        """
        if self._active is not None:
            self._active.cancel(notify=False)
        self._governor.cancel()

    def restore(self, transform: ViewTransform, notify: bool = True) -> None:
        if notify:
            self.dispatch(RestoreCommand(transform))
        else:
            self._state = transform

    def shutdown(self) -> None:
        """Host teardown: end sessions, drop pending work, detach subscribers."""
        if self._shut_down:
            return
        if self._active is not None:
            self._active.abandon()
            self._active = None
        self._governor.cancel()
        self._bus.clear()
        self._shut_down = True
        logger.debug("ViewportController shut down")

    # ── Imperative surface ────────────────────────────────────────────────────

    def _command(self, gesture: Gesture) -> ViewTransform:
        self.interrupt_gestures()
        return self.dispatch(gesture)

    def zoom_in(self, x: Optional[float] = None) -> ViewTransform:
        return self.zoom_by(self._config.zoom_step, x)

    def zoom_out(self, x: Optional[float] = None) -> ViewTransform:
        return self.zoom_by(1.0 / self._config.zoom_step, x)

    def zoom_by(self, factor: float, x: Optional[float] = None) -> ViewTransform:
        if not is_finite(factor) or factor <= 0 or (x is not None and not is_finite(x)):
            logger.debug(f"Ignoring zoom factor={factor!r} x={x!r}")
            return self._state
        return self._command(ZoomCommand(factor, x))

    def zoom_to_scale(self, scale: float) -> ViewTransform:
        if not is_finite(scale) or scale <= 0:
            logger.debug(f"Ignoring zoom_to_scale({scale!r})")
            return self._state
        return self._command(ZoomToScaleCommand(scale))

    def apply_preset(self, code: str) -> ViewTransform:
        return self._command(PresetGesture(code))

    def pan_by(self, dx: float, dy: float = 0.0) -> ViewTransform:
        if not is_finite(dx, dy):
            logger.debug(f"Ignoring pan_by({dx!r}, {dy!r})")
            return self._state
        return self._command(PanCommand(dx, dy))

    def pan_to_instant(self, instant: InstantLike) -> ViewTransform:
        t = to_ms(instant)
        if not is_finite(t):
            logger.debug(f"Ignoring pan_to_instant({instant!r})")
            return self._state
        return self._command(PanToCommand(t))

    def zoom_to_time_range(self, start: InstantLike, end: InstantLike) -> ViewTransform:
        s, e = to_ms(start), to_ms(end)
        if not is_finite(s, e):
            logger.debug(f"Ignoring zoom_to_time_range({start!r}, {end!r})")
            return self._state
        return self._command(TimeRangeCommand(s, e))

    def reset_zoom(self) -> ViewTransform:
        return self._command(ResetCommand())

    # ── Minimap queries ───────────────────────────────────────────────────────

    def project_viewport(self, map_width_px: Optional[float] = None) -> MinimapViewport:
        """Indicator geometry for the current window."""
        return project_viewport(
            self._state.time_window, self._domain,
            map_width_px or self._config.minimap_width_px,
            self._config.min_indicator_width_px,
        )

    def invert_pixel(self, px: float, map_width_px: Optional[float] = None) -> float:
        return invert_pixel(px, self._domain, map_width_px or self._config.minimap_width_px)
