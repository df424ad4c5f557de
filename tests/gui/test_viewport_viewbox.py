"""Tests for ViewportViewBox input forwarding."""

import pytest
from PyQt6.QtCore import QPointF, Qt

from timescope.gui.viewport_viewbox import ViewportViewBox


class FakeWheelEvent:
    def __init__(self, x, y, delta):
        self._pos = QPointF(x, y)
        self._delta = delta
        self.accepted = None

    def pos(self):
        return self._pos

    def delta(self):
        return self._delta

    def accept(self):
        self.accepted = True

    def ignore(self):
        self.accepted = False


class FakeDragEvent:
    def __init__(self, down, pos, start=False, finish=False, button=Qt.MouseButton.LeftButton):
        self._down = QPointF(*down)
        self._pos = QPointF(*pos)
        self._start = start
        self._finish = finish
        self._button = button
        self.accepted = None

    def button(self):
        return self._button

    def buttonDownPos(self):
        return self._down

    def pos(self):
        return self._pos

    def isStart(self):
        return self._start

    def isFinish(self):
        return self._finish

    def accept(self):
        self.accepted = True

    def ignore(self):
        self.accepted = False


@pytest.fixture
def view_box(qapp, controller):
    return ViewportViewBox(controller)


def test_builtin_mouse_interaction_disabled(view_box):
    assert view_box.state['mouseEnabled'] == [False, False]


def test_scroll_up_queues_zoom_in(view_box, controller):
    ev = FakeWheelEvent(400.0, 10.0, 120)
    view_box.wheelEvent(ev)
    assert ev.accepted is True
    controller.governor.tick()
    assert controller.state.scale == pytest.approx(1.5)


def test_zero_scroll_ignored(view_box, controller):
    ev = FakeWheelEvent(400.0, 10.0, 0)
    view_box.wheelEvent(ev)
    assert ev.accepted is False
    assert not controller.governor.has_pending


def test_drag_pans_from_button_down_position(view_box, controller):
    controller.zoom_to_scale(2.0)
    view_box.mouseDragEvent(FakeDragEvent((100, 0), (110, 0), start=True))
    view_box.mouseDragEvent(FakeDragEvent((100, 0), (150, 0)))
    view_box.mouseDragEvent(FakeDragEvent((100, 0), (180, 0), finish=True))
    assert controller.state.translate_x == 80.0
    assert controller.active_gesture is None


def test_right_button_drag_ignored(view_box, controller):
    ev = FakeDragEvent((0, 0), (50, 0), start=True, button=Qt.MouseButton.RightButton)
    view_box.mouseDragEvent(ev)
    assert ev.accepted is False
    assert controller.active_gesture is None
