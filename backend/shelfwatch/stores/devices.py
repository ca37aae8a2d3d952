"""Device store: brain/node configs merged with their heartbeats."""

from __future__ import annotations

from functools import partial
from typing import Callable, Mapping

from shelfwatch.models.entities import (
    BrainLiveState,
    BrainViewModel,
    DeviceConfig,
    NodeConfig,
    NodeLiveState,
    NodeViewModel,
)
from shelfwatch.projection import project_brains, project_nodes
from shelfwatch.sources.base import ConfigSource, TelemetrySource
from shelfwatch.stores.base import AggregationStore
from shelfwatch.stores.debounce import DEFAULT_DEBOUNCE_S, Scheduler
from shelfwatch.utils.time import now_ms


class DevicesStore(AggregationStore):
    name = "devices"
    streams = ("devices", "nodes", "brains_live", "nodes_live")

    def __init__(
        self,
        config_source: ConfigSource,
        telemetry_source: TelemetrySource,
        *,
        debounce_s: float = DEFAULT_DEBOUNCE_S,
        clock: Callable[[], int] = now_ms,
        loop: Scheduler | None = None,
    ) -> None:
        self.config_source = config_source
        self.telemetry_source = telemetry_source
        super().__init__(debounce_s=debounce_s, clock=clock, loop=loop)

    @property
    def brain_configs(self) -> Mapping[str, DeviceConfig]:
        return self.cache("devices")

    @property
    def node_configs(self) -> Mapping[str, NodeConfig]:
        return self.cache("nodes")

    @property
    def brains_live(self) -> Mapping[str, BrainLiveState]:
        return self.cache("brains_live")

    @property
    def nodes_live(self) -> Mapping[str, NodeLiveState]:
        return self.cache("nodes_live")

    def _open_streams(self, network_id: str, location_id: str) -> None:
        config = self.config_source
        telemetry = self.telemetry_source
        self._open("devices", partial(config.subscribe_devices, network_id, location_id))
        self._open("nodes", partial(config.subscribe_nodes, network_id, location_id))
        self._open("brains_live", partial(telemetry.subscribe_brains_live, location_id))
        self._open("nodes_live", partial(telemetry.subscribe_nodes_live, location_id))

    def _project(self, now: int) -> None:
        self.brains = project_brains(self._caches["devices"], self._caches["brains_live"])
        self.nodes = project_nodes(self._caches["nodes"], self._caches["nodes_live"])

    def _reset_outputs(self) -> None:
        self.brains: list[BrainViewModel] = []
        self.nodes: list[NodeViewModel] = []


__all__ = ["DevicesStore"]
