"""Internal dataclasses for configuration, telemetry and view models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from shelfwatch.models.status import SlotStatus

SlotLifecycle = Literal["provisioning", "active", "disabled"]
NetworkStatus = Literal["active", "suspended", "archived"]
LocationStatus = Literal["active", "inactive"]
MemberRole = Literal["network_admin", "manager", "viewer"]
DeviceStatus = Literal["provisioning", "online", "offline", "decommissioned"]
NodeStatus = Literal["provisioning", "online", "offline", "error"]


# Durable configuration -------------------------------------------------


@dataclass(slots=True)
class NetworkConfig:
    network_id: str
    name: str
    created_at: str
    status: NetworkStatus


@dataclass(slots=True)
class LocationConfig:
    location_id: str
    network_id: str
    name: str
    timezone: str
    created_at: str
    status: LocationStatus


@dataclass(slots=True)
class MemberConfig:
    uid: str
    network_id: str
    role: MemberRole


@dataclass(slots=True)
class ShelfConfig:
    shelf_id: str
    location_id: str
    network_id: str
    name: str
    order_index: int


@dataclass(slots=True)
class SlotConfig:
    """Operator-managed slot definition.

    ``tare_g == 0`` marks a slot that was never calibrated.
    """

    slot_id: str
    shelf_id: str
    location_id: str
    network_id: str
    name: str
    node_id: str
    sku_id: str
    tare_g: float
    calibration_factor: float
    hysteresis_g: float
    min_qty_step: int
    status: SlotLifecycle


@dataclass(slots=True)
class SkuConfig:
    sku_id: str
    name: str
    unit_weight_g: float
    tolerance_g: float
    packaging_weight_g: float
    active: bool


@dataclass(slots=True)
class DeviceConfig:
    brain_id: str
    location_id: str
    network_id: str
    status: DeviceStatus
    firmware_version: str
    last_seen: str
    ip_address: str
    type: Literal["brain"] = "brain"


@dataclass(slots=True)
class NodeConfig:
    node_id: str
    location_id: str
    network_id: str
    node_mac: str
    paired_to_brain: str
    firmware_version: str
    last_seen: str
    rssi: int
    status: NodeStatus
    error_counters: dict[str, int] = field(default_factory=dict)


# Hardware telemetry ----------------------------------------------------


@dataclass(slots=True)
class SlotLiveState:
    """Latest reading written by a brain; quantity is computed on the brain."""

    slot_id: str
    net_weight_g: float
    quantity: int
    updated_at: int
    confidence: float
    flags: int
    source_node: str
    seq: int


@dataclass(slots=True)
class NodeLiveState:
    node_id: str
    last_seen: int
    rssi: int
    error_count: int
    battery: float | None = None


@dataclass(slots=True)
class BrainLiveState:
    brain_id: str
    last_seen: int
    firmware_version: str
    ip: str
    queue_depth: int
    error_count: int


# View models -----------------------------------------------------------


@dataclass(slots=True, frozen=True)
class SlotViewModel:
    # identity
    slot_id: str
    shelf_id: str
    location_id: str
    network_id: str
    slot_name: str
    # product
    sku_id: str
    sku_name: str
    quantity: int
    confidence: float
    net_weight_g: float
    # resolved status
    status: SlotStatus
    status_label: str
    is_stale: bool
    is_offline: bool
    has_error: bool
    # flag word
    is_overloaded: bool
    is_calibrating: bool
    is_weight_stable: bool
    # diagnostics
    node_id: str
    updated_at: int
    flags: int
    seq: int
    is_active: bool


@dataclass(slots=True, frozen=True)
class BrainViewModel:
    config: DeviceConfig
    live: BrainLiveState | None
    is_online: bool


@dataclass(slots=True, frozen=True)
class NodeViewModel:
    config: NodeConfig
    live: NodeLiveState | None
    is_online: bool


__all__ = [
    "SlotLifecycle",
    "NetworkConfig",
    "LocationConfig",
    "MemberConfig",
    "ShelfConfig",
    "SlotConfig",
    "SkuConfig",
    "DeviceConfig",
    "NodeConfig",
    "SlotLiveState",
    "NodeLiveState",
    "BrainLiveState",
    "SlotViewModel",
    "BrainViewModel",
    "NodeViewModel",
]
