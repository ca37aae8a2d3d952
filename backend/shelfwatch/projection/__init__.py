"""Pure projection functions: configuration + telemetry -> view models."""

from .status import DEFAULT_LOW_THRESHOLD, resolve_status
from .slots import project_location, project_slot
from .devices import project_brains, project_nodes
from .summary import count_by_status, group_by_shelf, summarize_devices

__all__ = [
    "DEFAULT_LOW_THRESHOLD",
    "resolve_status",
    "project_slot",
    "project_location",
    "project_brains",
    "project_nodes",
    "count_by_status",
    "group_by_shelf",
    "summarize_devices",
]
