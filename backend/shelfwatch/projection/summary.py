"""Dashboard-level aggregates over projected view models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from shelfwatch.models.entities import (
    BrainViewModel,
    NodeViewModel,
    ShelfConfig,
    SlotViewModel,
)
from shelfwatch.models.status import SlotStatus


@dataclass(slots=True)
class ShelfGroup:
    shelf: ShelfConfig
    slots: list[SlotViewModel] = field(default_factory=list)


@dataclass(slots=True)
class DeviceSummary:
    brains_online: int = 0
    brains_offline: int = 0
    nodes_online: int = 0
    nodes_offline: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "brains_online": self.brains_online,
            "brains_offline": self.brains_offline,
            "nodes_online": self.nodes_online,
            "nodes_offline": self.nodes_offline,
        }


def count_by_status(slots: Iterable[SlotViewModel]) -> dict[SlotStatus, int]:
    """Count slots per status; every status is present, zero-filled."""
    counts = {status: 0 for status in SlotStatus}
    for slot in slots:
        counts[slot.status] += 1
    return counts


def group_by_shelf(
    slots: Sequence[SlotViewModel],
    shelves: Iterable[ShelfConfig],
) -> tuple[list[ShelfGroup], list[SlotViewModel]]:
    """Group slots under their shelves ordered by ``order_index``.

    Returns the groups plus the slots whose shelf is unknown.
    """
    ordered = sorted(shelves, key=lambda shelf: shelf.order_index)
    groups = {shelf.shelf_id: ShelfGroup(shelf=shelf) for shelf in ordered}
    unassigned: list[SlotViewModel] = []
    for slot in slots:
        group = groups.get(slot.shelf_id)
        if group is None:
            unassigned.append(slot)
        else:
            group.slots.append(slot)
    return list(groups.values()), unassigned


def summarize_devices(
    brains: Iterable[BrainViewModel],
    nodes: Iterable[NodeViewModel],
) -> DeviceSummary:
    summary = DeviceSummary()
    for brain in brains:
        if brain.is_online:
            summary.brains_online += 1
        else:
            summary.brains_offline += 1
    for node in nodes:
        if node.is_online:
            summary.nodes_online += 1
        else:
            summary.nodes_offline += 1
    return summary


__all__ = [
    "ShelfGroup",
    "DeviceSummary",
    "count_by_status",
    "group_by_shelf",
    "summarize_devices",
]
