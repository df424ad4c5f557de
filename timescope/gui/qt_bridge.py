"""
Qt glue for the viewport core.

QtTransformBridge re-emits bus notifications as Qt signals so widgets can
connect slots. QtFrameDriver ticks the frame governor from a QTimer, which
stands in for the host's per-frame hook.
"""

from typing import Callable, List, Optional

from PyQt6.QtCore import QObject, QTimer, Qt, pyqtSignal

from timescope.logging import get_logger
from ..core.controller import PAN, ZOOM, ViewportController
from ..core.frame_governor import FrameGovernor

logger = get_logger(__name__)


class QtTransformBridge(QObject):
    """Expose a controller's transform notifications as signals.

    Signals:
        transform_changed(ViewTransform): every published change
        zoom_changed(ViewTransform): changes that altered scale or window size
        pan_changed(ViewTransform): changes that moved the window
    """

    transform_changed = pyqtSignal(object)
    zoom_changed = pyqtSignal(object)
    pan_changed = pyqtSignal(object)

    def __init__(self, controller: ViewportController, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._controller = controller
        self._unsubscribers: List[Callable[[], None]] = [
            controller.subscribe(self.transform_changed.emit),
            controller.subscribe(self.zoom_changed.emit, ZOOM),
            controller.subscribe(self.pan_changed.emit, PAN),
        ]

    @property
    def controller(self) -> ViewportController:
        return self._controller

    def detach(self) -> None:
        """Stop relaying notifications. Safe to call twice."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()


class QtFrameDriver(QObject):
    """Drain the governor's pending update once per frame interval."""

    def __init__(self, governor: FrameGovernor, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._governor = governor
        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.setInterval(max(1, int(round(governor.frame_interval_ms))))
        self._timer.timeout.connect(self._on_frame)

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        self._timer.start()
        logger.debug(f"Frame driver started at {self._timer.interval()}ms")

    def stop(self) -> None:
        self._timer.stop()

    def _on_frame(self) -> None:
        self._governor.tick()
