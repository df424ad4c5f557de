"""
Minimap: a fixed-size overview of the whole domain with the current-window
indicator. Drag across it to brush a new window, click to jump.
"""

from typing import Optional, Sequence

import numpy as np
from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QPainter, QPen, QPolygonF
from PyQt6.QtWidgets import QWidget

from timescope.logging import get_logger
from ..core.controller import ViewportController
from ..core.minimap import MinimapViewport, project_instant
from ..core.sampling import downsample_stride
from ..core.view_transform import ViewTransform
from ..gui.qt_bridge import QtTransformBridge

logger = get_logger(__name__)

MINIMAP_HEIGHT_PX = 60

BACKGROUND_COLOR = QColor('#1a1a2e')
CURVE_COLOR = QColor('#3b82f6')
INDICATOR_FILL = QColor(0, 255, 255, 60)
INDICATOR_BORDER = QColor('#00ffff')
BRUSH_FILL = QColor(0, 123, 255, 77)
BRUSH_BORDER = QColor('#007bff')


class MinimapPlot(QWidget):
    """Overview strip bound to a controller's brush coordinator."""

    def __init__(
        self,
        controller: ViewportController,
        bridge: QtTransformBridge,
        timestamps_ms: Sequence[float] = (),
        values: Sequence[float] = (),
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self._controller = controller
        self._bridge = bridge
        self._timestamps = np.empty(0, dtype=float)
        self._values = np.empty(0, dtype=float)
        self._polyline = QPolygonF()
        self._indicator: MinimapViewport = controller.project_viewport()
        self._attached = True

        width = int(round(controller.config.minimap_width_px))
        self.setFixedSize(width, MINIMAP_HEIGHT_PX)
        self.setMouseTracking(False)
        self.setCursor(Qt.CursorShape.CrossCursor)

        self._bridge.transform_changed.connect(self._on_transform_changed)
        self.set_data(timestamps_ms, values)

    @property
    def map_width_px(self) -> float:
        return float(self.width())

    @property
    def indicator(self) -> MinimapViewport:
        """Indicator geometry as last drawn."""
        return self._indicator

    def set_data(self, timestamps_ms: Sequence[float], values: Sequence[float]) -> None:
        t = np.asarray(timestamps_ms, dtype=float)
        v = np.asarray(values, dtype=float)
        order = np.argsort(t, kind='stable')
        self._timestamps = t[order]
        self._values = v[order]
        self._rebuild_polyline()
        self._on_transform_changed(self._controller.state)

    def _rebuild_polyline(self) -> None:
        self._polyline = QPolygonF()
        if self._timestamps.size < 2:
            return
        # About two points per pixel is plenty for an overview
        stride = downsample_stride(self._timestamps.size, int(self.map_width_px * 2))
        t = self._timestamps[::stride]
        v = self._values[::stride]
        lo, hi = np.nanmin(v), np.nanmax(v)
        span = hi - lo if hi > lo else 1.0
        xs = project_instant(t, self._controller.domain, self.map_width_px)
        ys = self.height() - (v - lo) / span * (self.height() - 4) - 2
        for x, y in zip(xs, ys):
            if np.isfinite(y):
                self._polyline.append(QPointF(float(x), float(y)))

    def _on_transform_changed(self, transform: ViewTransform) -> None:
        self._indicator = self._controller.project_viewport(self.map_width_px)
        self.update()

    # ── Painting ──────────────────────────────────────────────────────────────

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), BACKGROUND_COLOR)

        painter.setPen(QPen(CURVE_COLOR, 1))
        painter.drawPolyline(self._polyline)

        indicator = QRectF(self._indicator.left_px, 0, self._indicator.width_px, self.height() - 1)
        painter.setPen(QPen(INDICATOR_BORDER, 2))
        painter.setBrush(QBrush(INDICATOR_FILL))
        painter.drawRect(indicator)

        selection = self._controller.brush.selection_px
        if selection is not None:
            lo, hi = selection
            painter.setPen(QPen(BRUSH_BORDER, 1))
            painter.setBrush(QBrush(BRUSH_FILL))
            painter.drawRect(QRectF(lo, 0, hi - lo, self.height() - 1))
        painter.end()

    # ── Input ─────────────────────────────────────────────────────────────────

    def mousePressEvent(self, event) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        self._controller.brush.map_width_px = self.map_width_px
        self._controller.brush.begin(event.position().x())
        event.accept()

    def mouseMoveEvent(self, event) -> None:
        if self._controller.brush.move(event.position().x()):
            self.update()
        event.accept()

    def mouseReleaseEvent(self, event) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            super().mouseReleaseEvent(event)
            return
        self._controller.brush.move(event.position().x())
        self._controller.brush.end()
        self.update()
        event.accept()

    def keyPressEvent(self, event) -> None:
        if event.key() == Qt.Key.Key_Escape and self._controller.brush.cancel():
            self.update()
            event.accept()
            return
        super().keyPressEvent(event)

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self._rebuild_polyline()
        self._on_transform_changed(self._controller.state)

    # ── Teardown ──────────────────────────────────────────────────────────────

    def detach(self) -> None:
        if not self._attached:
            return
        self._attached = False
        try:
            self._bridge.transform_changed.disconnect(self._on_transform_changed)
        except TypeError:
            pass  # already disconnected
        self._controller.brush.cancel()

    def closeEvent(self, event) -> None:
        self.detach()
        super().closeEvent(event)
