"""Qt-free viewport core: state, constraints, input coordination, minimap math."""
from .config import ViewportConfig
from .controller import ViewportController
from .errors import ConfigurationError
from .time_window import DataDomain, TimeWindow, ZoomLabel, from_ms, to_ms
from .view_transform import ViewTransform

__all__ = [
    'ConfigurationError', 'DataDomain', 'TimeWindow', 'ViewTransform',
    'ViewportConfig', 'ViewportController', 'ZoomLabel', 'from_ms', 'to_ms',
]
