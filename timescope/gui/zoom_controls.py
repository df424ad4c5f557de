"""
Preset zoom buttons (1W / 1M / 3M / 1Y), zoom in/out and reset.
The checked preset always mirrors the controller's zoom label.
"""

from typing import Dict, Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QHBoxLayout, QPushButton, QWidget

from timescope.logging import get_logger
from ..core.controller import ViewportController
from ..core.view_transform import ViewTransform
from .qt_bridge import QtTransformBridge

logger = get_logger(__name__)

_STYLE = """
    QWidget {
        background: transparent;
    }
    QPushButton {
        background-color: rgba(26, 26, 46, 200);
        color: #00ffff;
        border: 1px solid #00ffff;
        border-radius: 4px;
        padding: 4px 8px;
        min-height: 24px;
    }
    QPushButton:hover {
        background-color: rgba(0, 255, 255, 60);
    }
    QPushButton:checked {
        background-color: rgba(0, 255, 255, 100);
        border: 2px solid #00ffff;
    }
"""


class ZoomControls(QWidget):
    """Row of zoom buttons bound to a ViewportController.

    Signals:
        preset_selected(str): preset code that was applied
        reset_requested(): reset button clicked
    """

    preset_selected = pyqtSignal(str)
    reset_requested = pyqtSignal()

    def __init__(self, controller: ViewportController, bridge: QtTransformBridge,
                 parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._controller = controller
        self._bridge = bridge
        self._preset_buttons: Dict[str, QPushButton] = {}
        self._setup_ui()
        self._bridge.transform_changed.connect(self._on_transform_changed)
        self._sync_buttons()

    def _setup_ui(self) -> None:
        self.setStyleSheet(_STYLE)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)

        for preset in self._controller.presets.presets:
            btn = QPushButton(preset.code, self)
            btn.setToolTip(f"Zoom to last {preset.label}")
            btn.setCheckable(True)
            btn.clicked.connect(lambda checked, code=preset.code: self._on_preset_clicked(code))
            layout.addWidget(btn)
            self._preset_buttons[preset.code] = btn

        layout.addSpacing(8)

        self._zoom_in_btn = QPushButton("+", self)
        self._zoom_in_btn.setToolTip("Zoom in")
        self._zoom_in_btn.clicked.connect(lambda: self._controller.zoom_in())
        layout.addWidget(self._zoom_in_btn)

        self._zoom_out_btn = QPushButton("-", self)
        self._zoom_out_btn.setToolTip("Zoom out")
        self._zoom_out_btn.clicked.connect(lambda: self._controller.zoom_out())
        layout.addWidget(self._zoom_out_btn)

        self._reset_btn = QPushButton("Reset", self)
        self._reset_btn.setToolTip("Reset zoom to show all data")
        self._reset_btn.clicked.connect(self._on_reset_clicked)
        layout.addWidget(self._reset_btn)

        layout.addStretch()

    @property
    def active_code(self) -> Optional[str]:
        return self._controller.presets.active_code

    def preset_button(self, code: str) -> QPushButton:
        return self._preset_buttons[code]

    def _on_preset_clicked(self, code: str) -> None:
        if self._controller.presets.select(code):
            self.preset_selected.emit(code)
            logger.debug(f"Preset {code} applied")
        # A click toggles the button; put it back in line with the state
        self._sync_buttons()

    def _on_reset_clicked(self) -> None:
        self._controller.reset_zoom()
        self.reset_requested.emit()

    def _on_transform_changed(self, transform: ViewTransform) -> None:
        self._sync_buttons()

    def _sync_buttons(self) -> None:
        active = self.active_code
        for code, btn in self._preset_buttons.items():
            btn.setChecked(code == active)

    def detach(self) -> None:
        try:
            self._bridge.transform_changed.disconnect(self._on_transform_changed)
        except TypeError:
            pass  # already disconnected
