"""
ViewBox that hands wheel and drag input to the viewport coordinators.

pyqtgraph's own pan/zoom is bypassed: the controller decides the visible
window and the renderer applies it with setXRange().
"""

import pyqtgraph as pg
from PyQt6.QtCore import Qt

from timescope.logging import get_logger
from ..core.controller import ViewportController

logger = get_logger(__name__)


class ViewportViewBox(pg.ViewBox):
    """ViewBox whose mouse interaction is driven by a ViewportController."""

    def __init__(self, controller: ViewportController, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._controller = controller
        self._dragging = False
        self.setMouseEnabled(x=False, y=False)
        self.setMenuEnabled(False)
        self.enableAutoRange(axis=pg.ViewBox.YAxis, enable=True)
        self.sigResized.connect(self._on_resized)

    def _on_resized(self, *_) -> None:
        self._controller.set_chart_width(self.boundingRect().width())

    @property
    def owns_drag(self) -> bool:
        """True while the controller's drag session was started by this view."""
        return self._dragging and self._controller.drag.active

    def end_drag(self) -> None:
        """End the drag session if this view started it."""
        if self.owns_drag:
            self._controller.drag.end()
        self._dragging = False

    def wheelEvent(self, ev, axis=None):
        """Zoom around the pointer. Qt reports scroll-up as positive delta."""
        pos = ev.pos()
        if self._controller.wheel.on_wheel(pos.x(), pos.y(), -ev.delta()):
            ev.accept()
        else:
            ev.ignore()

    def mouseDragEvent(self, ev, axis=None):
        if ev.button() != Qt.MouseButton.LeftButton:
            ev.ignore()
            return
        ev.accept()

        drag = self._controller.drag
        pos = ev.pos()
        if ev.isStart():
            down = ev.buttonDownPos()
            self._dragging = drag.begin(down.x(), down.y())
            drag.move(pos.x(), pos.y())
        elif ev.isFinish():
            if self.owns_drag:
                drag.move(pos.x(), pos.y())
                drag.end()
            self._dragging = False
        elif self.owns_drag:
            drag.move(pos.x(), pos.y())
