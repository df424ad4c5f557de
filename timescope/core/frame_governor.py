"""Frame coalescing for high-frequency viewport input."""

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from timescope.logging import get_logger

logger = get_logger(__name__)

Update = Callable[[], None]


@dataclass
class FrameStats:
    """Counters for applied, forced and superseded updates."""

    applied: int = 0
    forced: int = 0
    dropped: int = 0
    last_latency_ms: float = 0.0
    max_latency_ms: float = 0.0


@dataclass
class FrameGovernor:
    """Hold at most one pending viewport update until the next frame.

    ``schedule()`` replaces any update the host has not consumed yet, so a
    burst of wheel ticks or drag moves inside one frame costs a single
    recomputation using the newest event. ``tick()`` is the host's per-frame
    hook. If ticks fall behind while input keeps arriving, an update older than
    ``max_latency_ms`` is pushed through by the next schedule().
    """

    frame_interval_ms: float = 1000.0 / 60.0
    max_latency_ms: float = 100.0
    clock: Callable[[], float] = time.perf_counter
    stats: FrameStats = field(default_factory=FrameStats, init=False)
    _pending: Optional[Update] = field(default=None, init=False, repr=False)
    _pending_since: float = field(default=0.0, init=False, repr=False)

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def pending_age_ms(self) -> float:
        """Milliseconds since the oldest unconsumed schedule (0 if idle)."""
        if self._pending is None:
            return 0.0
        return (self.clock() - self._pending_since) * 1000.0

    def schedule(self, update: Update) -> bool:
        """Queue ``update`` for the next frame. Returns True if it ran immediately."""
        now = self.clock()
        if self._pending is None:
            self._pending_since = now
        else:
            self.stats.dropped += 1
        self._pending = update

        if (now - self._pending_since) * 1000.0 >= self.max_latency_ms:
            self.stats.forced += 1
            self._run(now)
            return True
        return False

    def tick(self) -> bool:
        """Run the pending update, if any. Returns True if something ran."""
        if self._pending is None:
            return False
        self._run(self.clock())
        return True

    def flush(self) -> bool:
        """Apply the pending update now (e.g. at gesture end)."""
        return self.tick()

    def cancel(self) -> bool:
        """Drop the pending update. Returns True if one was pending."""
        if self._pending is None:
            return False
        self._pending = None
        self.stats.dropped += 1
        return True

    def _run(self, now: float) -> None:
        update = self._pending
        self._pending = None
        latency_ms = (now - self._pending_since) * 1000.0

        self.stats.applied += 1
        self.stats.last_latency_ms = latency_ms
        self.stats.max_latency_ms = max(self.stats.max_latency_ms, latency_ms)
        if latency_ms > self.max_latency_ms:
            logger.warning(f"Viewport update latency {latency_ms:.1f}ms exceeded {self.max_latency_ms:.0f}ms ceiling")
        elif latency_ms > self.frame_interval_ms:
            logger.debug(f"Viewport update latency {latency_ms:.1f}ms > frame budget {self.frame_interval_ms:.1f}ms")

        update()
