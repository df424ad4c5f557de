"""Tests for TimeSeriesPlot rendering of the controller's window."""

import numpy as np
import pytest
from PyQt6.QtCore import QEvent, QPointF, Qt
from PyQt6.QtGui import QKeyEvent

from timescope.core.time_window import MS_PER_DAY
from timescope.plots.time_series_plot import TimeSeriesPlot


@pytest.fixture
def plot(qtbot, qapp, controller, bridge, sample_series):
    t, v = sample_series
    w = TimeSeriesPlot(controller, bridge, t, v, title="load")
    qtbot.addWidget(w)
    w.resize(800, 300)
    yield w
    w.detach()
    w.close()
    w.deleteLater()
    qapp.processEvents()


class DragEvent:
    """Minimal stand-in for pyqtgraph's MouseDragEvent."""

    def __init__(self, down, pos, start=False, finish=False):
        self._down = QPointF(*down)
        self._pos = QPointF(*pos)
        self._start = start
        self._finish = finish

    def button(self):
        return Qt.MouseButton.LeftButton

    def buttonDownPos(self):
        return self._down

    def pos(self):
        return self._pos

    def isStart(self):
        return self._start

    def isFinish(self):
        return self._finish

    def accept(self):
        pass

    def ignore(self):
        pass


def assert_x_range(plot, window):
    x0, x1 = plot.x_range_ms()
    assert x0 == pytest.approx(window.start, rel=1e-9)
    assert x1 == pytest.approx(window.end, rel=1e-9)


class TestTimeSeriesPlotWindow:
    def test_initial_range_is_domain(self, plot, controller):
        assert_x_range(plot, controller.domain.window)

    def test_follows_preset(self, plot, controller):
        controller.apply_preset('1W')
        assert_x_range(plot, controller.state.time_window)
        # 6-hourly records over 7 days, both ends inclusive
        assert plot.visible_point_count == 29

    def test_follows_pan(self, plot, controller):
        controller.zoom_to_scale(4.0)
        controller.pan_by(100.0)
        assert_x_range(plot, controller.state.time_window)

    def test_thinned_to_threshold(self, qtbot, qapp, controller_factory, year_domain):
        from timescope.core.config import ViewportConfig
        from timescope.gui.qt_bridge import QtTransformBridge

        controller = controller_factory(config=ViewportConfig(visible_data_threshold=100))
        bridge = QtTransformBridge(controller)
        t = np.linspace(year_domain.start, year_domain.end, 5000)
        w = TimeSeriesPlot(controller, bridge, t, np.zeros_like(t))
        qtbot.addWidget(w)
        try:
            assert w.visible_point_count <= 100
        finally:
            w.detach()
            bridge.detach()
            w.close()
            w.deleteLater()
            qapp.processEvents()

    def test_info_label(self, plot, controller):
        controller.apply_preset('1M')
        text = plot._info_label.text()
        assert "2024-12-01" in text
        assert "edge" in text


class TestTimeSeriesPlotData:
    def test_unsorted_data_is_sorted(self, plot, controller):
        start = controller.domain.start
        plot.set_data([start + 2 * MS_PER_DAY, start, start + MS_PER_DAY], [3.0, 1.0, 2.0])
        x, y = plot._curve.getData()
        np.testing.assert_array_equal(y, [1.0, 2.0, 3.0])

    def test_shape_mismatch(self, plot):
        with pytest.raises(ValueError):
            plot.set_data([1.0, 2.0], [1.0])


class TestTimeSeriesPlotLifecycle:
    def test_escape_cancels_drag(self, plot, controller):
        controller.zoom_to_scale(2.0)
        start = controller.state
        controller.drag.begin(0.0, 0.0)
        controller.drag.move(100.0, 0.0)
        controller.governor.tick()
        plot.keyPressEvent(QKeyEvent(QEvent.Type.KeyPress, Qt.Key.Key_Escape,
                                     Qt.KeyboardModifier.NoModifier))
        assert controller.state == start
        assert_x_range(plot, start.time_window)

    def test_detach_stops_updates(self, plot, controller):
        before = plot.x_range_ms()
        plot.detach()
        controller.apply_preset('1W')
        assert plot.x_range_ms() == before

    def test_detach_ends_own_drag(self, plot, controller):
        controller.zoom_to_scale(2.0)
        plot.view_box.mouseDragEvent(DragEvent((100, 0), (150, 0), start=True))
        assert plot.view_box.owns_drag
        plot.detach()
        assert controller.active_gesture is None
        assert controller.state.translate_x == 50.0

    def test_detach_leaves_peer_drag_running(self, qtbot, qapp, plot, controller, bridge, sample_series):
        t, v = sample_series
        peer = TimeSeriesPlot(controller, bridge, t, v, title="peer")
        qtbot.addWidget(peer)
        try:
            controller.zoom_to_scale(2.0)
            peer.view_box.mouseDragEvent(DragEvent((100, 0), (150, 0), start=True))
            plot.detach()
            assert controller.drag.active
            assert peer.view_box.owns_drag
            peer.view_box.mouseDragEvent(DragEvent((100, 0), (180, 0), finish=True))
            assert controller.active_gesture is None
            assert controller.state.translate_x == 80.0
        finally:
            peer.detach()
            peer.close()
            peer.deleteLater()
            qapp.processEvents()

    def test_detach_leaves_unowned_touch_running(self, plot, controller):
        controller.zoom_to_scale(2.0)
        controller.touch.begin([(100.0, 0.0)])
        plot.detach()
        assert controller.touch.active
        controller.touch.end()
