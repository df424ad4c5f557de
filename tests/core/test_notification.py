"""Tests for TransformBus fan-out."""

import logging

import pytest

from timescope.core.gestures import ChangeKind
from timescope.core.notification import TransformBus

ZOOM = frozenset({ChangeKind.ZOOM})
PAN = frozenset({ChangeKind.PAN})


@pytest.fixture
def bus():
    return TransformBus()


def test_delivers_same_snapshot_in_subscription_order(bus, initial):
    received = []
    bus.subscribe(lambda t: received.append(('a', t)))
    bus.subscribe(lambda t: received.append(('b', t)))
    bus.publish(initial, ZOOM)
    assert [name for name, _ in received] == ['a', 'b']
    assert received[0][1] is received[1][1] is initial


def test_unsubscribe(bus, initial):
    received = []
    unsubscribe = bus.subscribe(received.append)
    unsubscribe()
    unsubscribe()
    bus.publish(initial)
    assert received == []
    assert bus.subscriber_count == 0


def test_same_callback_twice_unsubscribes_independently(bus, initial):
    received = []
    first = bus.subscribe(received.append)
    bus.subscribe(received.append)
    first()
    bus.publish(initial)
    assert len(received) == 1


def test_kind_filter(bus, initial):
    zooms, pans, all_changes = [], [], []
    bus.subscribe(zooms.append, ZOOM)
    bus.subscribe(pans.append, PAN)
    bus.subscribe(all_changes.append)
    bus.publish(initial, ZOOM)
    bus.publish(initial, PAN)
    bus.publish(initial, ZOOM | PAN)
    assert len(zooms) == 2
    assert len(pans) == 2
    assert len(all_changes) == 3


def test_failing_subscriber_does_not_block_others(bus, initial, caplog):
    received = []

    def broken(transform):
        raise RuntimeError("boom")

    bus.subscribe(broken)
    bus.subscribe(received.append)
    with caplog.at_level(logging.ERROR, logger='timescope'):
        bus.publish(initial)
    assert received == [initial]
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_unsubscribe_during_publish(bus, initial):
    received = []
    holder = {}

    def once(transform):
        received.append(transform)
        holder['unsub']()

    holder['unsub'] = bus.subscribe(once)
    bus.publish(initial)
    bus.publish(initial)
    assert len(received) == 1


def test_clear(bus, initial):
    bus.subscribe(lambda t: None)
    bus.clear()
    assert bus.subscriber_count == 0
