"""Live inventory store: slot configs + SKUs + telemetry -> slot view models."""

from __future__ import annotations

from functools import partial
from typing import Callable, Mapping

from shelfwatch.core.metrics import SLOTS_BY_STATUS
from shelfwatch.models.entities import (
    NodeLiveState,
    SkuConfig,
    SlotConfig,
    SlotLiveState,
    SlotViewModel,
)
from shelfwatch.models.status import SlotStatus
from shelfwatch.projection import DEFAULT_LOW_THRESHOLD, count_by_status, project_location
from shelfwatch.sources.base import ConfigSource, TelemetrySource
from shelfwatch.stores.base import AggregationStore
from shelfwatch.stores.debounce import DEFAULT_DEBOUNCE_S, Scheduler
from shelfwatch.utils.time import now_ms


class InventoryStore(AggregationStore):
    """Keeps ``slots`` current for the subscribed location."""

    name = "inventory"
    streams = ("slot_configs", "skus", "live_readings", "nodes_live")

    def __init__(
        self,
        config_source: ConfigSource,
        telemetry_source: TelemetrySource,
        *,
        low_threshold: int = DEFAULT_LOW_THRESHOLD,
        debounce_s: float = DEFAULT_DEBOUNCE_S,
        clock: Callable[[], int] = now_ms,
        loop: Scheduler | None = None,
    ) -> None:
        self.config_source = config_source
        self.telemetry_source = telemetry_source
        self.low_threshold = low_threshold
        self._gauge_tenant: tuple[str, str] | None = None
        super().__init__(debounce_s=debounce_s, clock=clock, loop=loop)

    @property
    def slot_configs(self) -> Mapping[str, SlotConfig]:
        return self.cache("slot_configs")

    @property
    def skus(self) -> Mapping[str, SkuConfig]:
        return self.cache("skus")

    @property
    def live_states(self) -> Mapping[str, SlotLiveState]:
        return self.cache("live_readings")

    @property
    def nodes_live(self) -> Mapping[str, NodeLiveState]:
        return self.cache("nodes_live")

    def find_slot(self, slot_id: str) -> SlotViewModel | None:
        for slot in self.slots:
            if slot.slot_id == slot_id:
                return slot
        return None

    def _open_streams(self, network_id: str, location_id: str) -> None:
        config = self.config_source
        telemetry = self.telemetry_source
        self._open("slot_configs", partial(config.subscribe_slot_configs, network_id, location_id))
        self._open("skus", partial(config.subscribe_skus, network_id, location_id))
        self._open("live_readings", partial(telemetry.subscribe_live_readings, location_id))
        self._open("nodes_live", partial(telemetry.subscribe_nodes_live, location_id))

    def _project(self, now: int) -> None:
        self.slots = project_location(
            self._caches["slot_configs"],
            self._caches["live_readings"],
            self._caches["skus"],
            set(self._caches["nodes_live"]),
            now=now,
            low_threshold=self.low_threshold,
        )
        tenant = (self.network_id, self.location_id)
        for status, count in count_by_status(self.slots).items():
            SLOTS_BY_STATUS.labels(*tenant, status.value).set(count)
        self._gauge_tenant = tenant

    def _reset_outputs(self) -> None:
        self.slots: list[SlotViewModel] = []
        self._clear_gauge()

    def _clear_gauge(self) -> None:
        if self._gauge_tenant is None:
            return
        # every status is published together, so every label set exists
        for status in SlotStatus:
            SLOTS_BY_STATUS.remove(*self._gauge_tenant, status.value)
        self._gauge_tenant = None


__all__ = ["InventoryStore"]
