"""Reactive stores that keep projected view models current."""

from .debounce import DEFAULT_DEBOUNCE_S, Debouncer
from .base import AggregationStore
from .inventory import InventoryStore
from .devices import DevicesStore

__all__ = [
    "DEFAULT_DEBOUNCE_S",
    "Debouncer",
    "AggregationStore",
    "InventoryStore",
    "DevicesStore",
]
