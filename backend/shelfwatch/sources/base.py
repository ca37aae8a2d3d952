"""Collaborator contracts for configuration and telemetry streams.

Every stream delivers a full snapshot dict keyed by id on each change, never
a delta. Subscribing returns a callable that cancels the subscription.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Generic, Mapping, Protocol, TypeVar

from shelfwatch.core.logging import get_logger
from shelfwatch.models.entities import (
    BrainLiveState,
    DeviceConfig,
    LocationConfig,
    MemberConfig,
    NetworkConfig,
    NodeConfig,
    NodeLiveState,
    ShelfConfig,
    SkuConfig,
    SlotConfig,
    SlotLiveState,
)
from shelfwatch.sources import parsing

logger = get_logger(__name__)

T = TypeVar("T")

Unsubscribe = Callable[[], None]
ErrorCallback = Callable[[Exception], None]
SnapshotCallback = Callable[[dict[str, T]], None]
RawDocs = Mapping[str, Any]


class SourceError(RuntimeError):
    """A collaborator stream could not deliver a snapshot."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"{path}: {detail}")
        self.path = path
        self.detail = detail


class ConfigSource(Protocol):
    def subscribe_networks(
        self, on_change: SnapshotCallback[NetworkConfig], on_error: ErrorCallback | None = None
    ) -> Unsubscribe: ...

    def subscribe_locations(
        self,
        network_id: str,
        on_change: SnapshotCallback[LocationConfig],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe: ...

    def subscribe_members(
        self,
        network_id: str,
        on_change: SnapshotCallback[MemberConfig],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe: ...

    def subscribe_shelves(
        self,
        network_id: str,
        location_id: str,
        on_change: SnapshotCallback[ShelfConfig],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe: ...

    def subscribe_slot_configs(
        self,
        network_id: str,
        location_id: str,
        on_change: SnapshotCallback[SlotConfig],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe: ...

    def subscribe_skus(
        self,
        network_id: str,
        location_id: str,
        on_change: SnapshotCallback[SkuConfig],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe: ...

    def subscribe_devices(
        self,
        network_id: str,
        location_id: str,
        on_change: SnapshotCallback[DeviceConfig],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe: ...

    def subscribe_nodes(
        self,
        network_id: str,
        location_id: str,
        on_change: SnapshotCallback[NodeConfig],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe: ...


class TelemetrySource(Protocol):
    def subscribe_live_readings(
        self,
        location_id: str,
        on_change: SnapshotCallback[SlotLiveState],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe: ...

    def subscribe_nodes_live(
        self,
        location_id: str,
        on_change: SnapshotCallback[NodeLiveState],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe: ...

    def subscribe_brains_live(
        self,
        location_id: str,
        on_change: SnapshotCallback[BrainLiveState],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe: ...


# Stream paths ----------------------------------------------------------


def networks_path() -> str:
    return "networks"


def locations_path(network_id: str) -> str:
    return f"networks/{network_id}/locations"


def members_path(network_id: str) -> str:
    return f"networks/{network_id}/members"


def location_collection_path(network_id: str, location_id: str, collection: str) -> str:
    return f"networks/{network_id}/locations/{location_id}/{collection}"


def live_path(location_id: str, stream: str) -> str:
    return f"tenants/{location_id}/{stream}"


# Shared subscriber bookkeeping -----------------------------------------


@dataclass(eq=False)
class Subscriber(Generic[T]):
    path: str
    parse: Callable[[str, Mapping[str, Any]], T]
    on_change: SnapshotCallback[T]
    on_error: ErrorCallback | None
    active: bool = True

    def deliver(self, docs: RawDocs) -> None:
        if not self.active:
            return
        snapshot: dict[str, T] = {}
        for doc_id, raw in docs.items():
            if not isinstance(raw, Mapping):
                logger.debug("Ignoring non-object document %s/%s", self.path, doc_id)
                continue
            snapshot[str(doc_id)] = self.parse(str(doc_id), raw)
        self.on_change(snapshot)

    def fail(self, exc: Exception) -> None:
        if not self.active:
            return
        if self.on_error is None:
            logger.warning("Unhandled stream error on %s: %s", self.path, exc)
            return
        self.on_error(exc)


class SnapshotSource:
    """Implements both collaborator protocols over raw per-path snapshots.

    Subclasses decide where raw documents come from by overriding
    ``_on_subscribed`` (deliver the current snapshot to a new subscriber).
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Subscriber[Any]]] = {}

    def subscriber_count(self, path: str | None = None) -> int:
        if path is not None:
            return len(self._subscribers.get(path, ()))
        return sum(len(subs) for subs in self._subscribers.values())

    def _subscribe(
        self,
        path: str,
        parse: Callable[[str, Mapping[str, Any]], T],
        on_change: SnapshotCallback[T],
        on_error: ErrorCallback | None,
    ) -> Unsubscribe:
        subscriber = Subscriber(path=path, parse=parse, on_change=on_change, on_error=on_error)
        self._subscribers.setdefault(path, []).append(subscriber)

        def unsubscribe() -> None:
            subscriber.active = False
            subscribers = self._subscribers.get(path)
            if subscribers and subscriber in subscribers:
                subscribers.remove(subscriber)
                if not subscribers:
                    del self._subscribers[path]
                    self._on_path_idle(path)

        self._on_subscribed(subscriber)
        return unsubscribe

    def _dispatch(self, path: str, docs: RawDocs) -> None:
        for subscriber in list(self._subscribers.get(path, ())):
            subscriber.deliver(docs)

    def _dispatch_error(self, path: str, exc: Exception) -> None:
        for subscriber in list(self._subscribers.get(path, ())):
            subscriber.fail(exc)

    def _on_subscribed(self, subscriber: Subscriber[Any]) -> None:
        raise NotImplementedError

    def _on_path_idle(self, path: str) -> None:
        """Hook for sources that hold per-path resources."""

    # ConfigSource ----------------------------------------------------

    def subscribe_networks(
        self, on_change: SnapshotCallback[NetworkConfig], on_error: ErrorCallback | None = None
    ) -> Unsubscribe:
        return self._subscribe(networks_path(), parsing.to_network_config, on_change, on_error)

    def subscribe_locations(
        self,
        network_id: str,
        on_change: SnapshotCallback[LocationConfig],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        parse = partial(parsing.to_location_config, network_id=network_id)
        return self._subscribe(locations_path(network_id), parse, on_change, on_error)

    def subscribe_members(
        self,
        network_id: str,
        on_change: SnapshotCallback[MemberConfig],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        parse = partial(parsing.to_member_config, network_id=network_id)
        return self._subscribe(members_path(network_id), parse, on_change, on_error)

    def subscribe_shelves(
        self,
        network_id: str,
        location_id: str,
        on_change: SnapshotCallback[ShelfConfig],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        parse = partial(parsing.to_shelf_config, network_id=network_id, location_id=location_id)
        path = location_collection_path(network_id, location_id, "shelves")
        return self._subscribe(path, parse, on_change, on_error)

    def subscribe_slot_configs(
        self,
        network_id: str,
        location_id: str,
        on_change: SnapshotCallback[SlotConfig],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        parse = partial(parsing.to_slot_config, network_id=network_id, location_id=location_id)
        path = location_collection_path(network_id, location_id, "slots")
        return self._subscribe(path, parse, on_change, on_error)

    def subscribe_skus(
        self,
        network_id: str,
        location_id: str,
        on_change: SnapshotCallback[SkuConfig],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        path = location_collection_path(network_id, location_id, "skus")
        return self._subscribe(path, parsing.to_sku_config, on_change, on_error)

    def subscribe_devices(
        self,
        network_id: str,
        location_id: str,
        on_change: SnapshotCallback[DeviceConfig],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        parse = partial(parsing.to_device_config, network_id=network_id, location_id=location_id)
        path = location_collection_path(network_id, location_id, "devices")
        return self._subscribe(path, parse, on_change, on_error)

    def subscribe_nodes(
        self,
        network_id: str,
        location_id: str,
        on_change: SnapshotCallback[NodeConfig],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        parse = partial(parsing.to_node_config, network_id=network_id, location_id=location_id)
        path = location_collection_path(network_id, location_id, "nodes")
        return self._subscribe(path, parse, on_change, on_error)

    # TelemetrySource -------------------------------------------------

    def subscribe_live_readings(
        self,
        location_id: str,
        on_change: SnapshotCallback[SlotLiveState],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        path = live_path(location_id, "inventory_live")
        return self._subscribe(path, parsing.to_slot_live_state, on_change, on_error)

    def subscribe_nodes_live(
        self,
        location_id: str,
        on_change: SnapshotCallback[NodeLiveState],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        path = live_path(location_id, "nodes_live")
        return self._subscribe(path, parsing.to_node_live_state, on_change, on_error)

    def subscribe_brains_live(
        self,
        location_id: str,
        on_change: SnapshotCallback[BrainLiveState],
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        path = live_path(location_id, "devices_live")
        return self._subscribe(path, parsing.to_brain_live_state, on_change, on_error)


__all__ = [
    "Unsubscribe",
    "ErrorCallback",
    "SnapshotCallback",
    "SourceError",
    "ConfigSource",
    "TelemetrySource",
    "SnapshotSource",
    "Subscriber",
    "networks_path",
    "locations_path",
    "members_path",
    "location_collection_path",
    "live_path",
]
