"""API integration tests."""

from __future__ import annotations

import time

import pytest
from fastapi.testclient import TestClient

from shelfwatch.api import dependencies as deps
from shelfwatch.app import app
from shelfwatch.sources.base import live_path, location_collection_path
from shelfwatch.utils.time import now_ms

NET, LOC = "net-001", "loc-001"


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


def _seed(loc: str = LOC) -> None:
    # published before the first request so deliveries happen on the loop thread
    source = deps.get_source()
    now = now_ms()
    source.publish(
        location_collection_path(NET, loc, "slots"),
        {
            "slot-1": {"shelf_id": "shelf-1", "name": "Flour", "node_id": "AA", "sku_id": "sku-1", "tare_g": 150, "status": "active"},
            "slot-2": {"shelf_id": "shelf-1", "name": "Rice", "node_id": "BB", "sku_id": "sku-2", "tare_g": 0, "status": "active"},
            "slot-3": {"shelf_id": "shelf-2", "name": "Spare", "node_id": "CC", "status": "provisioning"},
        },
    )
    source.publish(location_collection_path(NET, loc, "skus"), {"sku-1": {"name": "Flour 1 kg"}})
    source.publish(
        live_path(loc, "inventory_live"),
        {
            "slot-1": {"quantity": 2, "updated_at": now, "flags": 3, "seq": 7},
            "slot-2": {"quantity": 6, "updated_at": now, "flags": 1},
        },
    )
    source.publish(live_path(loc, "nodes_live"), {"AA": {"last_seen": now}, "BB": {"last_seen": now}})
    source.publish(location_collection_path(NET, loc, "devices"), {"brain-1": {"status": "online"}})
    source.publish(location_collection_path(NET, loc, "nodes"), {"AA": {}, "BB": {}, "CC": {}})
    source.publish(live_path(loc, "devices_live"), {"brain-1": {"last_seen": now, "queue_depth": 1}})


def _poll(client: TestClient, path: str) -> dict:
    deadline = time.monotonic() + 3
    while True:
        payload = client.get(path).json()
        if not payload["loading"] or time.monotonic() > deadline:
            return payload
        time.sleep(0.02)


def test_health(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["ok"] is True
    assert payload["source"] == "memory"
    assert payload["locations"] == {"inventory": [], "devices": []}


def test_slots_flow(client: TestClient) -> None:
    _seed()
    base = f"/networks/{NET}/locations/{LOC}"
    payload = _poll(client, f"{base}/slots")
    assert payload["loading"] is False
    assert payload["error"] is None
    assert payload["location_id"] == LOC
    slots = {slot["slot_id"]: slot for slot in payload["slots"]}
    assert set(slots) == {"slot-1", "slot-2"}
    assert slots["slot-1"]["status"] == "LOW"
    assert slots["slot-1"]["status_label"] == "Low Stock"
    assert slots["slot-1"]["is_overloaded"] is True
    assert slots["slot-1"]["flag_names"] == ["stable_weight", "overload"]
    assert slots["slot-1"]["sku_name"] == "Flour 1 kg"
    assert slots["slot-2"]["status"] == "UNCALIBRATED"

    one = client.get(f"{base}/slots/slot-2")
    assert one.status_code == 200
    assert one.json()["slot_name"] == "Rice"
    assert client.get(f"{base}/slots/slot-3").status_code == 404

    summary = client.get(f"{base}/summary").json()
    assert summary["total"] == 2
    assert summary["counts"]["LOW"] == 1
    assert summary["counts"]["UNCALIBRATED"] == 1
    assert summary["counts"]["OK"] == 0


def test_devices_flow(client: TestClient) -> None:
    _seed()
    payload = _poll(client, f"/networks/{NET}/locations/{LOC}/devices")
    assert payload["summary"] == {
        "brains_online": 1,
        "brains_offline": 0,
        "nodes_online": 2,
        "nodes_offline": 1,
    }
    assert payload["brains"][0]["live"]["queue_depth"] == 1
    offline = [node["config"]["node_id"] for node in payload["nodes"] if not node["is_online"]]
    assert offline == ["CC"]


def test_metrics_endpoint(client: TestClient) -> None:
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "shw_projection_runs_total" in resp.text


def test_single_slot_before_first_projection(client: TestClient) -> None:
    _seed()
    path = f"/networks/{NET}/locations/{LOC}/slots/slot-1"
    first = client.get(path)
    # the store was just bound; its debounced projection has not run yet
    assert first.status_code == 503
    assert first.headers["retry-after"] == "1"

    deadline = time.monotonic() + 3
    resp = client.get(path)
    while resp.status_code == 503 and time.monotonic() < deadline:
        time.sleep(0.02)
        resp = client.get(path)
    assert resp.status_code == 200
    assert resp.json()["slot_id"] == "slot-1"


def test_locations_keep_their_own_stores(client: TestClient) -> None:
    other = "loc-002"
    _seed()
    _seed(other)
    first = f"/networks/{NET}/locations/{LOC}/slots"
    second = f"/networks/{NET}/locations/{other}/slots"

    assert len(_poll(client, first)["slots"]) == 2
    assert len(_poll(client, second)["slots"]) == 2
    for _ in range(3):
        again = client.get(first).json()
        assert again["loading"] is False
        assert again["location_id"] == LOC
        assert len(again["slots"]) == 2
        assert client.get(second).json()["location_id"] == other

    health = client.get("/health").json()
    assert health["locations"]["inventory"] == [f"{NET}/{LOC}", f"{NET}/{other}"]
