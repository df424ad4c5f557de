"""Publish/subscribe fan-out of viewport snapshots."""

from dataclasses import dataclass
from typing import Callable, FrozenSet, List, Optional

from timescope.logging import get_logger
from .gestures import ChangeKind
from .view_transform import ViewTransform

logger = get_logger(__name__)

TransformCallback = Callable[[ViewTransform], None]


@dataclass(frozen=True, eq=False)
class _Subscription:
    callback: TransformCallback
    kinds: Optional[FrozenSet[ChangeKind]]

    def wants(self, changes: FrozenSet[ChangeKind]) -> bool:
        return self.kinds is None or bool(self.kinds & changes)


class TransformBus:
    """Deliver each published ViewTransform to every subscriber, in order.

    Subscribers receive the same immutable snapshot. A subscriber that
    raises is logged and skipped; the rest still get the update.
    """

    def __init__(self) -> None:
        self._subscriptions: List[_Subscription] = []

    def subscribe(self, callback: TransformCallback,
                  kinds: Optional[FrozenSet[ChangeKind]] = None) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it.

        ``kinds`` limits delivery to zoom and/or pan changes. None means all.
        """
        sub = _Subscription(callback, frozenset(kinds) if kinds is not None else None)
        self._subscriptions.append(sub)

        def unsubscribe() -> None:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)

        return unsubscribe

    def publish(self, transform: ViewTransform,
                changes: FrozenSet[ChangeKind] = frozenset()) -> None:
        # Copy so callbacks may unsubscribe while we iterate
        for sub in list(self._subscriptions):
            if not sub.wants(changes):
                continue
            try:
                sub.callback(transform)
            except Exception:
                logger.exception(f"Transform subscriber {sub.callback!r} failed")

    def clear(self) -> None:
        self._subscriptions.clear()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)
