"""Shared test fixtures for the TimeScope test suite.

Provides the session QApplication, a manual clock for the frame governor and
factories for domains, configs and controllers.
"""

import os
import sys
from datetime import datetime, timezone

import pytest

# Allow Qt to run headless (CI / no display).
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from timescope.core.config import ViewportConfig
from timescope.core.controller import ViewportController
from timescope.core.frame_governor import FrameGovernor
from timescope.core.time_window import DataDomain
from timescope.core.view_transform import TransformContext, ViewTransform

YEAR_START = datetime(2024, 1, 1, tzinfo=timezone.utc)
YEAR_END = datetime(2024, 12, 31, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def qapp():
    """Session-scoped QApplication shared by all tests."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app


class ManualClock:
    """Stand-in for time.perf_counter; advanced explicitly by tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000.0


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def year_domain():
    """2024-01-01 .. 2024-12-31, a 365 day span."""
    return DataDomain.from_instants(YEAR_START, YEAR_END)


@pytest.fixture
def ctx(year_domain):
    return TransformContext(domain=year_domain)


@pytest.fixture
def initial(ctx):
    return ViewTransform.initial(ctx)


@pytest.fixture
def controller_factory(clock):
    """Factory fixture: controllers driven by the manual clock."""
    made = []

    def _make(domain=None, config=None, **kwargs):
        config = config or ViewportConfig()
        governor = FrameGovernor(
            frame_interval_ms=config.frame_interval_ms,
            max_latency_ms=config.max_latency_ms,
            clock=clock,
        )
        controller = ViewportController(domain=domain, config=config, governor=governor, **kwargs)
        made.append(controller)
        return controller

    yield _make
    for controller in made:
        controller.shutdown()


@pytest.fixture
def controller(controller_factory):
    return controller_factory()



@pytest.fixture
def bridge(qapp, controller):
    """QtTransformBridge relaying ``controller`` notifications."""
    from timescope.gui.qt_bridge import QtTransformBridge

    b = QtTransformBridge(controller)
    yield b
    b.detach()


@pytest.fixture
def sample_series(year_domain):
    """One record every 6 hours across the year, as (timestamps_ms, values)."""
    import numpy as np

    t = np.arange(year_domain.start, year_domain.end + 1, 6 * 3_600_000.0)
    return t, np.sin(np.linspace(0, 20 * np.pi, t.size))
