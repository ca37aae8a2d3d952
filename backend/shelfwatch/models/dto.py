"""Pydantic DTOs exposed via API."""

from __future__ import annotations

from dataclasses import asdict
from typing import Literal

from pydantic import BaseModel, Field

from shelfwatch.models.entities import BrainViewModel, NodeViewModel, SlotViewModel
from shelfwatch.models.status import SlotStatus, describe_flags


class SlotView(BaseModel):
    slot_id: str
    shelf_id: str
    location_id: str
    network_id: str
    slot_name: str
    sku_id: str
    sku_name: str
    quantity: int
    confidence: float
    net_weight_g: float
    status: SlotStatus
    status_label: str
    is_stale: bool
    is_offline: bool
    has_error: bool
    is_overloaded: bool
    is_calibrating: bool
    is_weight_stable: bool
    node_id: str
    updated_at: int
    flags: int
    flag_names: list[str] = Field(default_factory=list)
    seq: int
    is_active: bool

    @classmethod
    def from_view_model(cls, slot: SlotViewModel) -> "SlotView":
        return cls(**asdict(slot), flag_names=describe_flags(slot.flags))


class StoreState(BaseModel):
    network_id: str | None
    location_id: str | None
    loading: bool
    error: str | None = None
    projected_at: int | None = None


class SlotListResponse(StoreState):
    slots: list[SlotView]


class StatusSummaryResponse(StoreState):
    total: int
    counts: dict[SlotStatus, int]


class DeviceConfigOut(BaseModel):
    brain_id: str
    location_id: str
    network_id: str
    type: Literal["brain"] = "brain"
    status: str
    firmware_version: str
    last_seen: str
    ip_address: str


class BrainLiveOut(BaseModel):
    brain_id: str
    last_seen: int
    firmware_version: str
    ip: str
    queue_depth: int
    error_count: int


class BrainView(BaseModel):
    config: DeviceConfigOut
    live: BrainLiveOut | None
    is_online: bool

    @classmethod
    def from_view_model(cls, brain: BrainViewModel) -> "BrainView":
        return cls(**asdict(brain))


class NodeConfigOut(BaseModel):
    node_id: str
    location_id: str
    network_id: str
    node_mac: str
    paired_to_brain: str
    firmware_version: str
    last_seen: str
    rssi: int
    status: str
    error_counters: dict[str, int] = Field(default_factory=dict)


class NodeLiveOut(BaseModel):
    node_id: str
    last_seen: int
    rssi: int
    error_count: int
    battery: float | None = None


class NodeView(BaseModel):
    config: NodeConfigOut
    live: NodeLiveOut | None
    is_online: bool

    @classmethod
    def from_view_model(cls, node: NodeViewModel) -> "NodeView":
        return cls(**asdict(node))


class DeviceSummaryOut(BaseModel):
    brains_online: int
    brains_offline: int
    nodes_online: int
    nodes_offline: int


class DeviceListResponse(StoreState):
    brains: list[BrainView]
    nodes: list[NodeView]
    summary: DeviceSummaryOut


__all__ = [
    "SlotView",
    "StoreState",
    "SlotListResponse",
    "StatusSummaryResponse",
    "BrainView",
    "NodeView",
    "DeviceSummaryOut",
    "DeviceListResponse",
]
