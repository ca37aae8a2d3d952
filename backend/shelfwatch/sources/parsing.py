"""Coerce raw collaborator documents into domain entities.

Missing or malformed numbers become 0, strings become "", and unknown
lifecycle values fall back to the provisioning state. The projector relies
on this: it never validates its input.
"""

from __future__ import annotations

import math
from typing import Any, Mapping

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

_SLOT_STATES = ("provisioning", "active", "disabled")
_NETWORK_STATES = ("active", "suspended", "archived")
_LOCATION_STATES = ("active", "inactive")
_MEMBER_ROLES = ("network_admin", "manager", "viewer")
_DEVICE_STATES = ("provisioning", "online", "offline", "decommissioned")
_NODE_STATES = ("provisioning", "online", "offline", "error")


def as_float(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def as_int(value: Any, default: int = 0) -> int:
    number = as_float(value, float(default))
    return int(number)


def as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _choice(value: Any, allowed: tuple[str, ...], default: str) -> Any:
    text = as_str(value)
    return text if text in allowed else default


def to_network_config(network_id: str, raw: Mapping[str, Any]) -> NetworkConfig:
    return NetworkConfig(
        network_id=network_id,
        name=as_str(raw.get("name")),
        created_at=as_str(raw.get("created_at")),
        status=_choice(raw.get("status"), _NETWORK_STATES, "active"),
    )


def to_location_config(location_id: str, raw: Mapping[str, Any], *, network_id: str) -> LocationConfig:
    return LocationConfig(
        location_id=location_id,
        network_id=network_id,
        name=as_str(raw.get("name")),
        timezone=as_str(raw.get("timezone"), "UTC"),
        created_at=as_str(raw.get("created_at")),
        status=_choice(raw.get("status"), _LOCATION_STATES, "active"),
    )


def to_member_config(uid: str, raw: Mapping[str, Any], *, network_id: str) -> MemberConfig:
    return MemberConfig(
        uid=uid,
        network_id=network_id,
        role=_choice(raw.get("role"), _MEMBER_ROLES, "viewer"),
    )


def to_shelf_config(shelf_id: str, raw: Mapping[str, Any], *, network_id: str, location_id: str) -> ShelfConfig:
    return ShelfConfig(
        shelf_id=shelf_id,
        location_id=location_id,
        network_id=network_id,
        name=as_str(raw.get("name")),
        order_index=as_int(raw.get("order_index")),
    )


def to_slot_config(slot_id: str, raw: Mapping[str, Any], *, network_id: str, location_id: str) -> SlotConfig:
    return SlotConfig(
        slot_id=slot_id,
        shelf_id=as_str(raw.get("shelf_id")),
        location_id=as_str(raw.get("location_id")) or location_id,
        network_id=as_str(raw.get("network_id")) or network_id,
        name=as_str(raw.get("name")),
        node_id=as_str(raw.get("node_id")),
        sku_id=as_str(raw.get("sku_id")),
        tare_g=as_float(raw.get("tare_g")),
        calibration_factor=as_float(raw.get("calibration_factor"), 1.0),
        hysteresis_g=as_float(raw.get("hysteresis_g")),
        min_qty_step=as_int(raw.get("min_qty_step"), 1),
        status=_choice(raw.get("status"), _SLOT_STATES, "provisioning"),
    )


def to_sku_config(sku_id: str, raw: Mapping[str, Any]) -> SkuConfig:
    return SkuConfig(
        sku_id=sku_id,
        name=as_str(raw.get("name")),
        unit_weight_g=as_float(raw.get("unit_weight_g")),
        tolerance_g=as_float(raw.get("tolerance_g")),
        packaging_weight_g=as_float(raw.get("packaging_weight_g")),
        active=as_bool(raw.get("active"), True),
    )


def to_device_config(brain_id: str, raw: Mapping[str, Any], *, network_id: str, location_id: str) -> DeviceConfig:
    return DeviceConfig(
        brain_id=brain_id,
        location_id=location_id,
        network_id=network_id,
        status=_choice(raw.get("status"), _DEVICE_STATES, "provisioning"),
        firmware_version=as_str(raw.get("firmware_version")),
        last_seen=as_str(raw.get("last_seen")),
        ip_address=as_str(raw.get("ip_address")),
    )


def to_node_config(node_id: str, raw: Mapping[str, Any], *, network_id: str, location_id: str) -> NodeConfig:
    counters = raw.get("error_counters")
    return NodeConfig(
        node_id=node_id,
        location_id=location_id,
        network_id=network_id,
        node_mac=as_str(raw.get("node_mac"), node_id),
        paired_to_brain=as_str(raw.get("paired_to_brain")),
        firmware_version=as_str(raw.get("firmware_version")),
        last_seen=as_str(raw.get("last_seen")),
        rssi=as_int(raw.get("rssi")),
        status=_choice(raw.get("status"), _NODE_STATES, "provisioning"),
        error_counters=(
            {str(key): as_int(value) for key, value in counters.items()}
            if isinstance(counters, Mapping)
            else {}
        ),
    )


def to_slot_live_state(slot_id: str, raw: Mapping[str, Any]) -> SlotLiveState:
    return SlotLiveState(
        slot_id=slot_id,
        net_weight_g=as_float(raw.get("net_weight_g")),
        quantity=as_int(raw.get("quantity")),
        updated_at=as_int(raw.get("updated_at")),
        confidence=as_float(raw.get("confidence")),
        flags=as_int(raw.get("flags")),
        source_node=as_str(raw.get("source_node")),
        seq=as_int(raw.get("seq")),
    )


def to_node_live_state(node_id: str, raw: Mapping[str, Any]) -> NodeLiveState:
    battery = raw.get("battery")
    return NodeLiveState(
        node_id=node_id,
        last_seen=as_int(raw.get("last_seen")),
        rssi=as_int(raw.get("rssi")),
        error_count=as_int(raw.get("error_count")),
        battery=as_float(battery) if battery is not None else None,
    )


def to_brain_live_state(brain_id: str, raw: Mapping[str, Any]) -> BrainLiveState:
    return BrainLiveState(
        brain_id=brain_id,
        last_seen=as_int(raw.get("last_seen")),
        firmware_version=as_str(raw.get("firmware_version")),
        ip=as_str(raw.get("ip")),
        queue_depth=as_int(raw.get("queue_depth")),
        error_count=as_int(raw.get("error_count")),
    )


__all__ = [
    "as_float",
    "as_int",
    "as_str",
    "as_bool",
    "to_network_config",
    "to_location_config",
    "to_member_config",
    "to_shelf_config",
    "to_slot_config",
    "to_sku_config",
    "to_device_config",
    "to_node_config",
    "to_slot_live_state",
    "to_node_live_state",
    "to_brain_live_state",
]
