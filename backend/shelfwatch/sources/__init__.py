"""Collaborator streams feeding the aggregation stores."""

from .base import ConfigSource, SnapshotSource, SourceError, TelemetrySource, Unsubscribe
from .memory import MemorySource
from .files import SnapshotFileSource

__all__ = [
    "ConfigSource",
    "TelemetrySource",
    "SnapshotSource",
    "SourceError",
    "Unsubscribe",
    "MemorySource",
    "SnapshotFileSource",
]
