"""
Input coordinators: turn raw pointer, wheel and touch data into viewport actions.

One coordinator per modality. They never raise on interactive input: NaN or
infinite coordinates, zero wheel deltas, a zero-width minimap or a zero pinch
distance are dropped and the current view is kept.
"""

import math
from functools import partial
from typing import TYPE_CHECKING, Optional, Sequence, Tuple

from timescope.logging import get_logger
from .gestures import (
    BrushGesture, DragGesture, GestureKind, GestureSession, PinchGesture,
    Point, WheelGesture,
)
from .minimap import invert_pixel
from .presets import PRESETS, preset_for_label, resolve_preset
from .time_window import is_finite
from .view_transform import ViewTransform

if TYPE_CHECKING:
    from .controller import ViewportController

logger = get_logger(__name__)

# Brush releases shorter than this are treated as a click (jump)
CLICK_TOLERANCE_PX = 2.0


class _SessionCoordinator:
    """Shared begin/end/cancel handling for coordinators with a GestureSession."""

    kind: GestureKind

    def __init__(self, controller: "ViewportController"):
        self._controller = controller
        self.session: Optional[GestureSession] = None

    @property
    def active(self) -> bool:
        return self.session is not None

    def _open(self, origin: Point, kind: Optional[GestureKind] = None,
              initial_distance: Optional[float] = None) -> GestureSession:
        start = self._controller.begin_gesture(self)
        self.session = GestureSession(
            kind=kind or self.kind,
            pointer_origin=origin,
            last_position=origin,
            start_transform=start,
            initial_distance=initial_distance,
        )
        return self.session

    def _close(self) -> None:
        self.session = None
        self._controller.end_gesture(self)

    def end(self) -> None:
        """Finish the gesture, applying its last pending update."""
        if self.session is None:
            return
        self._controller.governor.flush()
        self._close()

    def cancel(self, notify: bool = True) -> bool:
        """Abort the gesture and return to the pre-gesture view.

        Returns False if no gesture was in progress.
        """
        if self.session is None:
            return False
        start = self.session.start_transform
        self._controller.governor.cancel()
        self._close()
        self._controller.restore(start, notify=notify)
        logger.debug(f"{type(self).__name__}: gesture cancelled")
        return True

    def abandon(self) -> None:
        """Forget the session without touching the view (host teardown)."""
        self.session = None

    def _schedule(self, gesture) -> None:
        self._controller.governor.schedule(partial(self._controller.dispatch, gesture))


class WheelZoomCoordinator:
    """Mouse wheel zoom anchored at the pointer.

    A wheel tick during a drag or pinch ends that gesture at its current
    position; later moves of the same gesture are ignored.
    """

    def __init__(self, controller: "ViewportController"):
        self._controller = controller

    def on_wheel(self, x: float, y: float, delta_y: float) -> bool:
        """Queue a zoom step. True means the host should swallow the scroll."""
        if self._controller.is_shut_down:
            return False
        if not is_finite(x, y, delta_y) or delta_y == 0:
            logger.debug(f"Ignoring wheel event x={x!r} y={y!r} delta_y={delta_y!r}")
            return False
        self._controller.settle_gesture()
        self._controller.governor.schedule(
            partial(self._controller.dispatch, WheelGesture(float(x), float(y), float(delta_y)))
        )
        return True


class DragPanCoordinator(_SessionCoordinator):
    """Click-and-drag panning.

    Each move pans the gesture's start transform by the total travel from
    the origin, so rounding never accumulates across moves.
    """

    kind = GestureKind.DRAG

    def begin(self, x: float, y: float) -> bool:
        if self._controller.is_shut_down or not is_finite(x, y):
            logger.debug(f"Ignoring drag start at ({x!r}, {y!r})")
            return False
        self._open((float(x), float(y)))
        return True

    def move(self, x: float, y: float) -> bool:
        if self.session is None:
            return False
        if not is_finite(x, y):
            logger.debug(f"Ignoring drag move to ({x!r}, {y!r})")
            return False
        self.session = self.session.moved_to((float(x), float(y)))
        dx, dy = self.session.delta
        self._schedule(DragGesture(dx, dy, self.session.start_transform))
        return True


def _clean_points(points: Sequence) -> Optional[Tuple[Point, ...]]:
    try:
        cleaned = tuple((float(p[0]), float(p[1])) for p in points)
    except (TypeError, ValueError, IndexError):
        return None
    if not all(is_finite(x, y) for x, y in cleaned):
        return None
    return cleaned


def _distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def _midpoint(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


class TouchCoordinator(_SessionCoordinator):
    """One finger pans, two fingers pinch-zoom around their midpoint."""

    kind = GestureKind.DRAG

    def begin(self, points: Sequence) -> bool:
        if self._controller.is_shut_down:
            return False
        cleaned = _clean_points(points)
        if not cleaned:
            logger.debug(f"Ignoring touch start with points {points!r}")
            return False

        if len(cleaned) == 1:
            self._open(cleaned[0], GestureKind.DRAG)
            return True

        a, b = cleaned[0], cleaned[1]
        distance = _distance(a, b)
        if distance == 0:
            logger.debug("Ignoring pinch start with coincident touch points")
            return False
        self._open(_midpoint(a, b), GestureKind.PINCH, initial_distance=distance)
        return True

    def move(self, points: Sequence) -> bool:
        cleaned = _clean_points(points)
        if not cleaned:
            logger.debug(f"Ignoring touch move with points {points!r}")
            return False
        if self.session is None:
            return self.begin(cleaned)

        wanted = GestureKind.DRAG if len(cleaned) == 1 else GestureKind.PINCH
        if wanted is not self.session.kind:
            # Finger added or lifted: continue from where the view is now
            self.end()
            return self.begin(cleaned)

        if wanted is GestureKind.DRAG:
            self.session = self.session.moved_to(cleaned[0])
            dx, dy = self.session.delta
            self._schedule(DragGesture(dx, dy, self.session.start_transform))
            return True

        a, b = cleaned[0], cleaned[1]
        distance = _distance(a, b)
        if distance == 0:
            logger.debug("Ignoring pinch move with coincident touch points")
            return False
        center = _midpoint(a, b)
        self.session = self.session.moved_to(center)
        ratio = distance / self.session.initial_distance
        self._schedule(PinchGesture(center[0], center[1], ratio, self.session.start_transform))
        return True


class PresetSelector:
    """Preset zoom buttons. Exactly one preset is active: the one matching zoom_label."""

    def __init__(self, controller: "ViewportController"):
        self._controller = controller

    @property
    def presets(self):
        return PRESETS

    @property
    def active_code(self) -> Optional[str]:
        preset = preset_for_label(self._controller.state.zoom_label)
        return preset.code if preset else None

    def select(self, code: str) -> bool:
        """Apply a preset. Returns False for unknown or already-active presets."""
        preset = resolve_preset(code)
        if preset is None:
            logger.debug(f"Ignoring unknown preset {code!r}")
            return False
        if preset.zoom_label is self._controller.state.zoom_label:
            return False
        self._controller.apply_preset(preset.code)
        return True


class MinimapBrushCoordinator(_SessionCoordinator):
    """Brush a pixel range on the minimap to jump the main view there.

    The window only changes on release; moves just extend the selection so
    the minimap can draw it. A release without travel recenters the view on
    the clicked instant instead.
    """

    kind = GestureKind.BRUSH

    def __init__(self, controller: "ViewportController"):
        super().__init__(controller)
        self._map_width_px = float(controller.config.minimap_width_px)

    @property
    def map_width_px(self) -> float:
        return self._map_width_px

    @map_width_px.setter
    def map_width_px(self, width: float) -> None:
        if not is_finite(width) or width <= 0:
            logger.debug(f"Ignoring minimap width {width!r}")
            return
        self._map_width_px = float(width)

    @property
    def selection_px(self) -> Optional[Tuple[float, float]]:
        """Ordered pixel range being brushed, if a brush is in progress."""
        if self.session is None:
            return None
        a, b = self.session.pointer_origin[0], self.session.last_position[0]
        return (min(a, b), max(a, b))

    def begin(self, px: float) -> bool:
        if self._controller.is_shut_down or not is_finite(px):
            logger.debug(f"Ignoring brush start at {px!r}")
            return False
        self._open((float(px), 0.0))
        return True

    def move(self, px: float) -> bool:
        if self.session is None or not is_finite(px):
            return False
        self.session = self.session.moved_to((float(px), 0.0))
        return True

    def end(self) -> None:
        if self.session is None:
            return
        lo, hi = self.selection_px
        origin = self.session.pointer_origin[0]
        self._close()
        if hi - lo < CLICK_TOLERANCE_PX:
            self.click(origin)
            return
        self._controller.dispatch(BrushGesture(lo, hi, self._map_width_px))

    def cancel(self, notify: bool = True) -> bool:
        # Brushing never changes the view before release: nothing to roll back
        if self.session is None:
            return False
        self._close()
        return True

    def click(self, px: float) -> Optional[ViewTransform]:
        """Recenter the main view on the instant under minimap pixel ``px``."""
        if self._controller.is_shut_down or not is_finite(px):
            logger.debug(f"Ignoring minimap click at {px!r}")
            return None
        instant = invert_pixel(px, self._controller.domain, self._map_width_px)
        return self._controller.pan_to_instant(instant)
