"""Shared subscribe/unsubscribe lifecycle for aggregation stores."""

from __future__ import annotations

import time
from types import MappingProxyType
from typing import Any, Callable, Mapping

from shelfwatch.core.logging import TenantLogger, get_logger
from shelfwatch.core.metrics import (
    ACTIVE_SUBSCRIPTIONS,
    PROJECTION_LATENCY,
    PROJECTION_RUNS,
    SOURCE_ERRORS,
)
from shelfwatch.sources.base import ErrorCallback, SnapshotCallback, Unsubscribe
from shelfwatch.stores.debounce import DEFAULT_DEBOUNCE_S, Debouncer, Scheduler
from shelfwatch.utils.time import now_ms

logger = get_logger(__name__)

StreamOpener = Callable[[SnapshotCallback[Any], ErrorCallback], Unsubscribe]
Listener = Callable[["AggregationStore"], None]


class AggregationStore:
    """Cache collaborator snapshots for one network/location and re-project.

    The store is either idle or bound to a single (network, location) pair.
    Each stream push replaces its cache wholesale and arms the debouncer;
    when the timer fires the subclass recomputes its outputs from the
    current caches. All callbacks are expected on the loop thread.
    """

    name = "store"
    streams: tuple[str, ...] = ()

    def __init__(
        self,
        *,
        debounce_s: float = DEFAULT_DEBOUNCE_S,
        clock: Callable[[], int] = now_ms,
        loop: Scheduler | None = None,
    ) -> None:
        self._debouncer = Debouncer(debounce_s, self._run_projection, loop=loop)
        self._clock = clock
        self._log = TenantLogger(logger, self._log_context)
        self._unsubs: list[Unsubscribe] = []
        self._listeners: list[Listener] = []
        self._errors: dict[str, str] = {}
        self._generation = 0
        self._caches: dict[str, dict[str, Any]] = {stream: {} for stream in self.streams}
        self.network_id: str | None = None
        self.location_id: str | None = None
        self.loading = False
        self.projected_at: int | None = None
        self._reset_outputs()

    # Lifecycle ---------------------------------------------------------

    @property
    def subscribed(self) -> bool:
        return self.location_id is not None

    @property
    def error(self) -> str | None:
        if not self._errors:
            return None
        return "; ".join(f"{stream}: {message}" for stream, message in self._errors.items())

    def subscribe(self, network_id: str, location_id: str) -> None:
        """Bind to a network/location; a repeat call for the same pair is a no-op."""
        if self.network_id == network_id and self.location_id == location_id:
            return
        self.unsubscribe()
        self.network_id = network_id
        self.location_id = location_id
        self.loading = True
        self._log.info("Subscribing %s store", self.name)
        try:
            self._open_streams(network_id, location_id)
        except Exception:
            self._log.exception("Failed to open %s streams", self.name)
            self.unsubscribe()
            raise
        self._notify()

    def unsubscribe(self) -> None:
        """Cancel pending work and every stream, then clear all state."""
        self._debouncer.cancel()
        self._generation += 1
        unsubs, self._unsubs = self._unsubs, []
        for unsub in unsubs:
            unsub()
        ACTIVE_SUBSCRIPTIONS.labels(store=self.name).dec(len(unsubs))
        was_subscribed = self.subscribed
        self.network_id = None
        self.location_id = None
        self.loading = False
        self.projected_at = None
        self._errors.clear()
        self._caches = {stream: {} for stream in self.streams}
        self._reset_outputs()
        if was_subscribed:
            self._log.info("Unsubscribed %s store", self.name)
            self._notify()

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(store)`` after every state change; returns a remover."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def cache(self, stream: str) -> Mapping[str, Any]:
        """Read-only view of one input cache."""
        return MappingProxyType(self._caches[stream])

    # Stream plumbing ---------------------------------------------------

    def _open(self, stream: str, opener: StreamOpener) -> None:
        generation = self._generation

        def on_change(snapshot: Mapping[str, Any]) -> None:
            if generation != self._generation:
                return
            self._errors.pop(stream, None)
            self._caches[stream] = dict(snapshot)
            self._debouncer.schedule()

        def on_error(exc: Exception) -> None:
            if generation != self._generation:
                return
            self._errors[stream] = str(exc)
            self.loading = False
            SOURCE_ERRORS.labels(store=self.name).inc()
            self._log.warning("%s stream %s failed: %s", self.name, stream, exc)
            self._notify()

        self._unsubs.append(opener(on_change, on_error))
        ACTIVE_SUBSCRIPTIONS.labels(store=self.name).inc()

    def _log_context(self) -> dict[str, str | None]:
        return {"store": self.name, "network_id": self.network_id, "location_id": self.location_id}

    def _run_projection(self) -> None:
        if not self.subscribed:
            return
        started = time.perf_counter()
        now = self._clock()
        self._project(now)
        PROJECTION_LATENCY.labels(store=self.name).observe(time.perf_counter() - started)
        PROJECTION_RUNS.labels(store=self.name).inc()
        self.loading = False
        self.projected_at = now
        self._log.debug("Projected %s store", self.name)
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                self._log.exception("%s store listener failed", self.name)

    # Subclass hooks ----------------------------------------------------

    def _open_streams(self, network_id: str, location_id: str) -> None:
        raise NotImplementedError

    def _project(self, now: int) -> None:
        raise NotImplementedError

    def _reset_outputs(self) -> None:
        raise NotImplementedError


__all__ = ["AggregationStore", "Listener"]
