"""
Tagged viewport actions and the per-gesture session value.

Each action type carries only the fields it needs and a ``kind`` tag; the
controller dispatches on that tag through a single table.
"""

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import ClassVar, Optional, Tuple, Union

from .view_transform import ViewTransform


class GestureKind(Enum):
    # Pointer / touch gestures
    WHEEL = auto()
    DRAG = auto()
    PINCH = auto()
    BRUSH = auto()
    PRESET = auto()
    # Imperative commands
    ZOOM = auto()
    ZOOM_SCALE = auto()
    PAN = auto()
    PAN_TO = auto()
    RANGE = auto()
    RESET = auto()
    RESTORE = auto()


class ChangeKind(Enum):
    """What a published transform change was about (for filtered subscribers)."""
    ZOOM = auto()
    PAN = auto()


@dataclass(frozen=True)
class WheelGesture:
    kind: ClassVar[GestureKind] = GestureKind.WHEEL
    x: float
    y: float
    delta_y: float


@dataclass(frozen=True)
class DragGesture:
    """Pan by the total pointer travel since the gesture began."""
    kind: ClassVar[GestureKind] = GestureKind.DRAG
    dx: float
    dy: float
    start_transform: ViewTransform


@dataclass(frozen=True)
class PinchGesture:
    kind: ClassVar[GestureKind] = GestureKind.PINCH
    center_x: float
    center_y: float
    ratio: float
    start_transform: ViewTransform


@dataclass(frozen=True)
class BrushGesture:
    kind: ClassVar[GestureKind] = GestureKind.BRUSH
    start_px: float
    end_px: float
    map_width_px: float


@dataclass(frozen=True)
class PresetGesture:
    kind: ClassVar[GestureKind] = GestureKind.PRESET
    code: str


@dataclass(frozen=True)
class ZoomCommand:
    kind: ClassVar[GestureKind] = GestureKind.ZOOM
    factor: float
    x: Optional[float] = None


@dataclass(frozen=True)
class ZoomToScaleCommand:
    kind: ClassVar[GestureKind] = GestureKind.ZOOM_SCALE
    scale: float


@dataclass(frozen=True)
class PanCommand:
    kind: ClassVar[GestureKind] = GestureKind.PAN
    dx: float
    dy: float = 0.0


@dataclass(frozen=True)
class PanToCommand:
    kind: ClassVar[GestureKind] = GestureKind.PAN_TO
    instant: float


@dataclass(frozen=True)
class TimeRangeCommand:
    kind: ClassVar[GestureKind] = GestureKind.RANGE
    start: float
    end: float


@dataclass(frozen=True)
class ResetCommand:
    kind: ClassVar[GestureKind] = GestureKind.RESET


@dataclass(frozen=True)
class RestoreCommand:
    """Reinstate a previous snapshot (gesture cancellation)."""
    kind: ClassVar[GestureKind] = GestureKind.RESTORE
    transform: ViewTransform


Gesture = Union[
    WheelGesture, DragGesture, PinchGesture, BrushGesture, PresetGesture,
    ZoomCommand, ZoomToScaleCommand, PanCommand, PanToCommand,
    TimeRangeCommand, ResetCommand, RestoreCommand,
]

Point = Tuple[float, float]


@dataclass(frozen=True)
class GestureSession:
    """State of one in-progress pointer/touch gesture.

    Created on gesture start and replaced (never mutated) on every move.
    """

    kind: GestureKind
    pointer_origin: Point
    last_position: Point
    start_transform: ViewTransform
    initial_distance: Optional[float] = None

    def moved_to(self, position: Point) -> "GestureSession":
        return replace(self, last_position=position)

    @property
    def delta(self) -> Point:
        """Total travel from the origin."""
        return (self.last_position[0] - self.pointer_origin[0],
                self.last_position[1] - self.pointer_origin[1])
