"""
Main viewer window: zoom controls, one or more synchronized charts and the
minimap, all sharing a single ViewportController.
"""

from typing import List, Optional, Sequence

from PyQt6.QtWidgets import QHBoxLayout, QLabel, QMainWindow, QVBoxLayout, QWidget

from timescope.logging import get_logger
from ..core.config import ViewportConfig
from ..core.controller import ViewportController
from ..core.time_window import DataDomain
from ..core.view_transform import ViewTransform
from ..plots.minimap_plot import MinimapPlot
from ..plots.time_series_plot import TimeSeriesPlot
from .qt_bridge import QtFrameDriver, QtTransformBridge
from .zoom_controls import ZoomControls

logger = get_logger(__name__)

PEER_COLORS = ['#00ffff', '#ff00ff', '#ffff00', '#00ff7f']


class ViewerWindow(QMainWindow):
    """Interactive time-series viewer."""

    def __init__(
        self,
        timestamps_ms: Sequence[float],
        series: Sequence[Sequence[float]],
        config: Optional[ViewportConfig] = None,
        titles: Optional[Sequence[str]] = None,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("TimeScope")

        domain = DataDomain.from_timestamps(timestamps_ms)
        self._controller = ViewportController(domain=domain, config=config)
        self._bridge = QtTransformBridge(self._controller, self)
        self._driver = QtFrameDriver(self._controller.governor, self)
        self._plots: List[TimeSeriesPlot] = []

        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(6, 6, 6, 6)

        top = QHBoxLayout()
        self._controls = ZoomControls(self._controller, self._bridge, central)
        top.addWidget(self._controls)
        top.addStretch()
        self._status = QLabel("", central)
        self._status.setStyleSheet("color: #888888;")
        top.addWidget(self._status)
        layout.addLayout(top)

        titles = list(titles or [f"series {i}" for i in range(len(series))])
        for idx, values in enumerate(series):
            plot = TimeSeriesPlot(
                self._controller, self._bridge, timestamps_ms, values,
                title=titles[idx], color=PEER_COLORS[idx % len(PEER_COLORS)], parent=central,
            )
            layout.addWidget(plot, stretch=1)
            self._plots.append(plot)

        self._minimap = MinimapPlot(
            self._controller, self._bridge, timestamps_ms,
            series[0] if len(series) else (), parent=central,
        )
        layout.addWidget(self._minimap)

        self.setCentralWidget(central)
        self._bridge.transform_changed.connect(self._on_transform_changed)
        self._on_transform_changed(self._controller.state)
        self._driver.start()

    @property
    def controller(self) -> ViewportController:
        return self._controller

    @property
    def plots(self) -> List[TimeSeriesPlot]:
        return list(self._plots)

    @property
    def minimap(self) -> MinimapPlot:
        return self._minimap

    @property
    def zoom_controls(self) -> ZoomControls:
        return self._controls

    def _on_transform_changed(self, transform: ViewTransform) -> None:
        stats = self._controller.governor.stats
        edge = "at data edge" if transform.at_boundary else ""
        self._status.setText(
            f"{transform.zoom_label.value} {edge}  "
            f"frame {stats.last_latency_ms:.1f}ms (max {stats.max_latency_ms:.1f}ms)"
        )

    def closeEvent(self, event) -> None:
        self._driver.stop()
        for plot in self._plots:
            plot.detach()
        self._minimap.detach()
        self._controls.detach()
        self._bridge.detach()
        self._controller.shutdown()
        super().closeEvent(event)
