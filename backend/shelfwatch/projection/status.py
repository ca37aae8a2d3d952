"""Slot status resolution."""

from __future__ import annotations

from shelfwatch.models.entities import SlotConfig, SlotLiveState
from shelfwatch.models.status import STALE_THRESHOLD_MS, Flags, SlotStatus
from shelfwatch.utils.time import age_ms

DEFAULT_LOW_THRESHOLD = 2


def resolve_status(
    config: SlotConfig,
    live: SlotLiveState | None,
    node_online: bool,
    now: int | None = None,
    low_threshold: int = DEFAULT_LOW_THRESHOLD,
) -> SlotStatus:
    """Resolve the single highest-priority status for a slot.

    Rules are checked in order and the first match wins:
    OFFLINE_NODE, STALE, ERROR_SENSOR, CALIBRATING, UNCALIBRATED, EMPTY, LOW, OK.

    ``node_online`` must come from node presence, not from the slot reading.
    ``now`` is epoch milliseconds and defaults to the wall clock.
    """
    if live is None or not node_online:
        return SlotStatus.OFFLINE_NODE

    if age_ms(live.updated_at, now) > STALE_THRESHOLD_MS:
        return SlotStatus.STALE

    if live.flags & Flags.SENSOR_ERROR:
        return SlotStatus.ERROR_SENSOR
    if live.flags & Flags.CALIBRATION_MODE:
        return SlotStatus.CALIBRATING

    if config.tare_g == 0:
        return SlotStatus.UNCALIBRATED

    if live.quantity <= 0:
        return SlotStatus.EMPTY
    if live.quantity <= low_threshold:
        return SlotStatus.LOW
    return SlotStatus.OK


__all__ = ["DEFAULT_LOW_THRESHOLD", "resolve_status"]
