"""Merge brain and node configuration with their heartbeats."""

from __future__ import annotations

from typing import Mapping

from shelfwatch.models.entities import (
    BrainLiveState,
    BrainViewModel,
    DeviceConfig,
    NodeConfig,
    NodeLiveState,
    NodeViewModel,
)


# Online is presence of a heartbeat record; there is no staleness check here.


def project_brains(
    configs: Mapping[str, DeviceConfig],
    live: Mapping[str, BrainLiveState],
) -> list[BrainViewModel]:
    results: list[BrainViewModel] = []
    for config in configs.values():
        heartbeat = live.get(config.brain_id)
        results.append(BrainViewModel(config=config, live=heartbeat, is_online=heartbeat is not None))
    return results


def project_nodes(
    configs: Mapping[str, NodeConfig],
    live: Mapping[str, NodeLiveState],
) -> list[NodeViewModel]:
    results: list[NodeViewModel] = []
    for config in configs.values():
        heartbeat = live.get(config.node_id)
        results.append(NodeViewModel(config=config, live=heartbeat, is_online=heartbeat is not None))
    return results


__all__ = ["project_brains", "project_nodes"]
