"""
Application entry point and setup.
"""

import sys
from datetime import datetime, timezone
from typing import Optional, Tuple

import numpy as np
from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QApplication

# Configure PyQtGraph before importing any plot modules
import pyqtgraph as pg
pg.setConfigOptions(
    useOpenGL=False,
    antialias=False,
)

from ..core.config import ViewportConfig
from ..core.time_window import MS_PER_DAY, to_ms
from .viewer_window import ViewerWindow


def create_app() -> QApplication:
    """Create and configure the QApplication."""
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )
    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("TimeScope")
    app.setOrganizationName("TimeScope")
    return app


def make_sample_series(
    start: datetime,
    days: float,
    points: int,
    series: int = 1,
    seed: Optional[int] = 0,
) -> Tuple[np.ndarray, np.ndarray]:
    """Evenly spaced timestamps (epoch ms) and ``series`` random-walk rows."""
    rng = np.random.default_rng(seed)
    start_ms = to_ms(start)
    timestamps = np.linspace(start_ms, start_ms + days * MS_PER_DAY, points)
    walks = np.cumsum(rng.normal(0.0, 1.0, size=(series, points)), axis=1)
    seasonal = np.sin(np.linspace(0.0, 2 * np.pi * days / 30.0, points))
    return timestamps, walks + 5.0 * seasonal


def run_app(
    days: float = 365.0,
    points: int = 50_000,
    peers: int = 1,
    start: Optional[datetime] = None,
    config: Optional[ViewportConfig] = None,
) -> int:
    """Run the TimeScope viewer on generated data."""
    app = create_app()

    start = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
    timestamps, values = make_sample_series(start, days, points, series=max(1, peers))
    config = config or ViewportConfig.from_settings()

    window = ViewerWindow(timestamps, values, config=config)
    window.resize(1100, 420 + 220 * (max(1, peers) - 1))
    window.show()

    return app.exec()
