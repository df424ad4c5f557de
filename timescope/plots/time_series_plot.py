"""
PyQtGraph time-series chart driven by a ViewportController.

Draws only the records inside the current time window, thinned to the
configured visible-data threshold. Wheel and drag go through the custom
ViewBox; touch points are forwarded to the touch coordinator.
"""

from typing import Optional, Sequence

import numpy as np
import pyqtgraph as pg
from PyQt6.QtCore import QEvent, QObject, Qt
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QVBoxLayout, QWidget

from timescope.logging import get_logger
from ..core.controller import ViewportController
from ..core.sampling import visible_data
from ..core.time_window import MS_PER_SECOND
from ..core.view_transform import ViewTransform
from ..gui.qt_bridge import QtTransformBridge
from ..gui.viewport_viewbox import ViewportViewBox

logger = get_logger(__name__)

_TOUCH_EVENTS = {
    QEvent.Type.TouchBegin,
    QEvent.Type.TouchUpdate,
    QEvent.Type.TouchEnd,
    QEvent.Type.TouchCancel,
}


class TimeSeriesPlot(QWidget):
    """Main chart: one curve, x axis in dates, window set by the controller."""

    def __init__(
        self,
        controller: ViewportController,
        bridge: QtTransformBridge,
        timestamps_ms: Sequence[float] = (),
        values: Sequence[float] = (),
        title: str = "",
        color: str = '#00ffff',
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self._controller = controller
        self._bridge = bridge
        self._title = title
        self._color = color
        self._timestamps = np.empty(0, dtype=float)
        self._values = np.empty(0, dtype=float)
        self._visible_count = 0
        self._touching = False
        self._attached = True

        self._setup_ui()
        self._bridge.transform_changed.connect(self._on_transform_changed)
        self.set_data(timestamps_ms, values)

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(2)

        header = QHBoxLayout()
        self._title_label = QLabel(self._title)
        self._title_label.setFont(QFont("JetBrains Mono", 11, QFont.Weight.Bold))
        self._title_label.setStyleSheet(f"color: {self._color};")
        header.addWidget(self._title_label)
        header.addStretch()
        self._info_label = QLabel("")
        self._info_label.setFont(QFont("JetBrains Mono", 9))
        self._info_label.setStyleSheet("color: #888888;")
        header.addWidget(self._info_label)
        layout.addLayout(header)

        self._view_box = ViewportViewBox(self._controller)
        self._plot_widget = pg.PlotWidget(
            viewBox=self._view_box,
            axisItems={'bottom': pg.DateAxisItem(orientation='bottom')},
        )
        self._plot_widget.setBackground('#0d0d0d')
        self._plot_widget.showGrid(x=True, y=True, alpha=0.3)
        axis_pen = pg.mkPen(color=self._color, width=1)
        for name in ('left', 'bottom'):
            self._plot_widget.getAxis(name).setPen(axis_pen)
            self._plot_widget.getAxis(name).setTextPen(axis_pen)
        self._curve = self._plot_widget.plot(pen=pg.mkPen(color=self._color, width=1.5), antialias=False)
        layout.addWidget(self._plot_widget)

        viewport = self._plot_widget.viewport()
        viewport.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents, True)
        viewport.installEventFilter(self)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

    # ── Data ──────────────────────────────────────────────────────────────────

    def set_data(self, timestamps_ms: Sequence[float], values: Sequence[float]) -> None:
        """Replace the records. Timestamps are sorted; values follow them."""
        t = np.asarray(timestamps_ms, dtype=float)
        v = np.asarray(values, dtype=float)
        if t.shape != v.shape:
            raise ValueError(f"timestamps {t.shape} and values {v.shape} differ in shape")
        order = np.argsort(t, kind='stable')
        self._timestamps = t[order]
        self._values = v[order]
        self._on_transform_changed(self._controller.state)

    @property
    def visible_point_count(self) -> int:
        """Points drawn for the current window (after thinning)."""
        return self._visible_count

    @property
    def view_box(self) -> ViewportViewBox:
        return self._view_box

    def x_range_ms(self):
        """Visible x range of the plot, in epoch milliseconds."""
        (x0, x1), _ = self._view_box.viewRange()
        return x0 * MS_PER_SECOND, x1 * MS_PER_SECOND

    # ── Viewport updates ──────────────────────────────────────────────────────

    def _on_transform_changed(self, transform: ViewTransform) -> None:
        window = transform.time_window
        t, v = visible_data(self._timestamps, self._values, window,
                            self._controller.config.visible_data_threshold)
        self._visible_count = len(t)
        self._curve.setData(t / MS_PER_SECOND, v)
        self._view_box.setXRange(window.start / MS_PER_SECOND, window.end / MS_PER_SECOND, padding=0)

        start, end = window.as_datetimes()
        edge = " | edge" if transform.at_boundary else ""
        self._info_label.setText(
            f"{self._visible_count} pts | {transform.scale:.2f}x | "
            f"{start:%Y-%m-%d} - {end:%Y-%m-%d}{edge}"
        )

    # ── Input ─────────────────────────────────────────────────────────────────

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if event.type() in _TOUCH_EVENTS:
            self._handle_touch(event)
            return True
        return super().eventFilter(obj, event)

    @property
    def owns_touch(self) -> bool:
        """True while the controller's touch session was started on this chart."""
        return self._touching and self._controller.touch.active

    def _touch_points(self, event) -> list:
        points = []
        for point in event.points():
            scene_pos = self._plot_widget.mapToScene(point.position().toPoint())
            local = self._view_box.mapFromScene(scene_pos)
            points.append((local.x(), local.y()))
        return points

    def _handle_touch(self, event) -> None:
        touch = self._controller.touch
        kind = event.type()
        if kind == QEvent.Type.TouchCancel:
            if self.owns_touch:
                touch.cancel()
            self._touching = False
        elif kind == QEvent.Type.TouchEnd:
            if self.owns_touch:
                touch.end()
            self._touching = False
        elif kind == QEvent.Type.TouchBegin:
            self._touching = touch.begin(self._touch_points(event))
        elif touch.move(self._touch_points(event)):
            self._touching = True
        event.accept()

    def keyPressEvent(self, event) -> None:
        if event.key() == Qt.Key.Key_Escape:
            cancelled = self._controller.drag.cancel() or self._controller.touch.cancel()
            if cancelled:
                event.accept()
                return
        super().keyPressEvent(event)

    # ── Teardown ──────────────────────────────────────────────────────────────

    def detach(self) -> None:
        """Stop listening and end any gesture this view started."""
        if not self._attached:
            return
        self._attached = False
        try:
            self._bridge.transform_changed.disconnect(self._on_transform_changed)
        except TypeError:
            pass  # already disconnected
        self._view_box.end_drag()
        if self.owns_touch:
            self._controller.touch.end()
        self._touching = False
        logger.debug(f"TimeSeriesPlot '{self._title}' detached")

    def closeEvent(self, event) -> None:
        self.detach()
        super().closeEvent(event)
