"""Select and thin the records a renderer should draw for a time window."""

from typing import Tuple

import numpy as np

from .time_window import TimeWindow


def visible_slice(timestamps_ms: np.ndarray, window: TimeWindow) -> slice:
    """Index range of sorted ``timestamps_ms`` falling inside ``window`` (inclusive)."""
    lo = int(np.searchsorted(timestamps_ms, window.start, side='left'))
    hi = int(np.searchsorted(timestamps_ms, window.end, side='right'))
    return slice(lo, hi)


def downsample_stride(count: int, threshold: int) -> int:
    """Keep every n-th point so at most ``threshold`` remain."""
    if threshold < 1 or count <= threshold:
        return 1
    return int(np.ceil(count / threshold))


def visible_data(timestamps_ms: np.ndarray, values: np.ndarray, window: TimeWindow,
                 threshold: int = 0) -> Tuple[np.ndarray, np.ndarray]:
    """Timestamps and values inside ``window``, thinned above ``threshold`` points.

    ``threshold <= 0`` disables thinning.
    """
    sl = visible_slice(timestamps_ms, window)
    t = timestamps_ms[sl]
    v = values[sl]
    stride = downsample_stride(len(t), threshold)
    if stride > 1:
        t = t[::stride]
        v = v[::stride]
    return t, v
