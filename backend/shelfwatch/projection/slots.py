"""Merge slot configuration, telemetry and SKU data into view models."""

from __future__ import annotations

from typing import AbstractSet, Mapping

from shelfwatch.models.entities import SkuConfig, SlotConfig, SlotLiveState, SlotViewModel
from shelfwatch.models.status import STATUS_LABELS, Flags, SlotStatus, has_flag
from shelfwatch.projection.status import DEFAULT_LOW_THRESHOLD, resolve_status
from shelfwatch.utils.time import now_ms


def project_slot(
    config: SlotConfig,
    live: SlotLiveState | None,
    sku: SkuConfig | None,
    node_online: bool,
    now: int | None = None,
    low_threshold: int = DEFAULT_LOW_THRESHOLD,
) -> SlotViewModel:
    """Project one slot into a fully resolved view model."""
    status = resolve_status(config, live, node_online, now, low_threshold)
    flags = live.flags if live is not None else 0

    return SlotViewModel(
        slot_id=config.slot_id,
        shelf_id=config.shelf_id,
        location_id=config.location_id,
        network_id=config.network_id,
        slot_name=config.name,
        sku_id=config.sku_id,
        sku_name=sku.name if sku is not None else "",
        quantity=live.quantity if live is not None else 0,
        confidence=live.confidence if live is not None else 0.0,
        net_weight_g=live.net_weight_g if live is not None else 0.0,
        status=status,
        status_label=STATUS_LABELS[status],
        # restated from status so the booleans never disagree with the label
        is_stale=status is SlotStatus.STALE,
        is_offline=status is SlotStatus.OFFLINE_NODE,
        has_error=status is SlotStatus.ERROR_SENSOR,
        is_overloaded=has_flag(flags, Flags.OVERLOAD),
        is_calibrating=has_flag(flags, Flags.CALIBRATION_MODE),
        is_weight_stable=has_flag(flags, Flags.STABLE_WEIGHT),
        node_id=config.node_id,
        updated_at=live.updated_at if live is not None else 0,
        flags=flags,
        seq=live.seq if live is not None else 0,
        is_active=config.status == "active",
    )


def project_location(
    configs: Mapping[str, SlotConfig],
    live_states: Mapping[str, SlotLiveState],
    skus: Mapping[str, SkuConfig],
    online_node_ids: AbstractSet[str],
    now: int | None = None,
    low_threshold: int = DEFAULT_LOW_THRESHOLD,
) -> list[SlotViewModel]:
    """Project every active slot of a location, in config iteration order.

    Slots that are provisioning or disabled are skipped even when they have
    live data. One ``now`` is used for the whole pass.
    """
    if now is None:
        now = now_ms()
    results: list[SlotViewModel] = []
    for config in configs.values():
        if config.status != "active":
            continue
        live = live_states.get(config.slot_id)
        sku = skus.get(config.sku_id)
        node_online = config.node_id in online_node_ids
        results.append(project_slot(config, live, sku, node_online, now, low_threshold))
    return results


__all__ = ["project_slot", "project_location"]
