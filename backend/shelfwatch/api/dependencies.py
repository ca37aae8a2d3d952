"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from shelfwatch.core.config import Settings, get_settings
from shelfwatch.sources import MemorySource, SnapshotFileSource, SnapshotSource
from shelfwatch.stores import AggregationStore, DevicesStore, InventoryStore

TenantKey = tuple[str, str]

_SOURCE: SnapshotSource | None = None
# one bound store per (network_id, location_id); a store is never re-bound
_INVENTORY_STORES: dict[TenantKey, InventoryStore] = {}
_DEVICES_STORES: dict[TenantKey, DevicesStore] = {}


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_source() -> SnapshotSource:
    global _SOURCE
    if _SOURCE is None:
        settings = get_app_settings()
        if settings.source == "memory":
            _SOURCE = MemorySource()
        else:
            source = SnapshotFileSource(settings.snapshot_root)
            source.start()
            _SOURCE = source
    return _SOURCE


# Declared async so subscription runs on the event loop thread, where the
# stores' debounce timers live.
async def get_inventory_store(network_id: str, location_id: str) -> InventoryStore:
    """Inventory store bound to the location in the request path."""
    key = (network_id, location_id)
    store = _INVENTORY_STORES.get(key)
    if store is None:
        settings = get_app_settings()
        source = get_source()
        store = InventoryStore(
            source,
            source,
            low_threshold=settings.low_threshold,
            debounce_s=settings.debounce_seconds,
        )
        store.subscribe(network_id, location_id)
        _INVENTORY_STORES[key] = store
    return store


async def get_devices_store(network_id: str, location_id: str) -> DevicesStore:
    """Device store bound to the location in the request path."""
    key = (network_id, location_id)
    store = _DEVICES_STORES.get(key)
    if store is None:
        source = get_source()
        store = DevicesStore(source, source, debounce_s=get_app_settings().debounce_seconds)
        store.subscribe(network_id, location_id)
        _DEVICES_STORES[key] = store
    return store


def bound_locations() -> dict[str, list[str]]:
    """``network/location`` keys that currently hold a store, per store kind."""
    return {
        "inventory": sorted(f"{n}/{l}" for n, l in _INVENTORY_STORES),
        "devices": sorted(f"{n}/{l}" for n, l in _DEVICES_STORES),
    }


def shutdown_dependencies() -> None:
    """Release every store subscription and the file watcher."""
    global _SOURCE
    stores: list[AggregationStore] = [*_INVENTORY_STORES.values(), *_DEVICES_STORES.values()]
    for store in stores:
        store.unsubscribe()
    _INVENTORY_STORES.clear()
    _DEVICES_STORES.clear()
    if isinstance(_SOURCE, SnapshotFileSource):
        _SOURCE.stop()
    _SOURCE = None


__all__ = [
    "get_app_settings",
    "get_source",
    "get_inventory_store",
    "get_devices_store",
    "bound_locations",
    "shutdown_dependencies",
]
