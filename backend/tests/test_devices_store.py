"""Tests for the device store."""

from __future__ import annotations

from shelfwatch.sources import MemorySource
from shelfwatch.sources.base import live_path, location_collection_path
from shelfwatch.stores import DevicesStore

NET, LOC = "net-001", "loc-001"


def _source() -> MemorySource:
    return MemorySource(
        {
            location_collection_path(NET, LOC, "devices"): {
                "brain-1": {"status": "online", "firmware_version": "1.4.2", "ip_address": "10.0.0.2"},
                "brain-2": {"status": "offline"},
            },
            location_collection_path(NET, LOC, "nodes"): {
                "AA": {"paired_to_brain": "brain-1", "status": "online"},
            },
            live_path(LOC, "devices_live"): {
                "brain-1": {"last_seen": 1, "queue_depth": 4, "error_count": 0},
            },
        }
    )


def test_devices_projected_with_presence(fake_loop) -> None:
    source = _source()
    store = DevicesStore(source, source, loop=fake_loop)
    store.subscribe(NET, LOC)
    fake_loop.run_pending()
    assert [(b.config.brain_id, b.is_online) for b in store.brains] == [("brain-1", True), ("brain-2", False)]
    assert store.brains[0].live.queue_depth == 4
    assert [(n.config.node_id, n.is_online) for n in store.nodes] == [("AA", False)]
    assert store.nodes[0].config.paired_to_brain == "brain-1"

    source.publish(live_path(LOC, "nodes_live"), {"AA": {"last_seen": 2, "rssi": -48, "battery": 3.9}})
    fake_loop.run_pending()
    assert store.nodes[0].is_online is True
    assert store.nodes[0].live.battery == 3.9


def test_devices_unsubscribe_clears(fake_loop) -> None:
    source = _source()
    store = DevicesStore(source, source, loop=fake_loop)
    store.subscribe(NET, LOC)
    fake_loop.run_pending()
    store.unsubscribe()
    assert store.brains == []
    assert store.nodes == []
    assert dict(store.brain_configs) == {}
    assert source.subscriber_count() == 0


def test_heartbeat_burst_recomputes_once(fake_loop) -> None:
    source = _source()
    store = DevicesStore(source, source, loop=fake_loop)
    store.subscribe(NET, LOC)
    fake_loop.run_pending()
    passes: list[int] = []
    store.add_listener(lambda s: passes.append(s.brains[0].live.queue_depth))
    for depth in (5, 6, 7):
        source.publish(live_path(LOC, "devices_live"), {"brain-1": {"last_seen": 3, "queue_depth": depth}})
    source.publish(live_path(LOC, "nodes_live"), {"AA": {"last_seen": 3}})
    assert len(fake_loop.pending) == 1
    assert passes == []
    fake_loop.run_pending()
    assert passes == [7]
    assert store.nodes[0].is_online is True
