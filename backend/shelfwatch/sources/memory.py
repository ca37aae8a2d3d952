"""In-process snapshot publisher."""

from __future__ import annotations

from typing import Any, Mapping

from shelfwatch.sources.base import RawDocs, SnapshotSource, Subscriber


class MemorySource(SnapshotSource):
    """Holds raw snapshots per stream path and pushes them to subscribers.

    New subscribers receive the current snapshot immediately when one has
    been published. Callbacks run on the publishing thread.
    """

    def __init__(self, snapshots: Mapping[str, RawDocs] | None = None) -> None:
        super().__init__()
        self._snapshots: dict[str, dict[str, Any]] = {
            path: dict(docs) for path, docs in (snapshots or {}).items()
        }

    def publish(self, path: str, docs: RawDocs) -> None:
        """Replace the snapshot at ``path`` and notify subscribers."""
        snapshot = dict(docs)
        self._snapshots[path] = snapshot
        self._dispatch(path, snapshot)

    def fail(self, path: str, exc: Exception) -> None:
        """Report a stream failure to subscribers of ``path``."""
        self._dispatch_error(path, exc)

    def snapshot(self, path: str) -> dict[str, Any]:
        return dict(self._snapshots.get(path, {}))

    def _on_subscribed(self, subscriber: Subscriber[Any]) -> None:
        snapshot = self._snapshots.get(subscriber.path)
        if snapshot is not None:
            subscriber.deliver(snapshot)


__all__ = ["MemorySource"]
