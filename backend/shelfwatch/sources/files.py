"""Snapshot source backed by JSON files watched with watchdog.

Each stream lives at ``<root>/<stream path>.json`` and holds one JSON object
keyed by document id, e.g. ``<root>/tenants/loc-1/inventory_live.json``.
"""

from __future__ import annotations

import asyncio
import threading
from pathlib import Path
from typing import Any

import orjson
from watchdog.events import FileSystemEvent, PatternMatchingEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from shelfwatch.core.logging import get_logger
from shelfwatch.sources.base import SnapshotSource, SourceError, Subscriber

logger = get_logger(__name__)


class SnapshotEventHandler(PatternMatchingEventHandler):
    """Forward changes of ``*.json`` files to the owning source."""

    def __init__(self, source: "SnapshotFileSource") -> None:
        super().__init__(patterns=["*.json"], ignore_directories=True, case_sensitive=False)
        self.source = source

    def on_created(self, event: FileSystemEvent) -> None:  # pragma: no cover - requires filesystem
        self.source.notify_changed(Path(event.src_path))

    def on_modified(self, event: FileSystemEvent) -> None:  # pragma: no cover - requires filesystem
        self.source.notify_changed(Path(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:  # pragma: no cover - requires filesystem
        self.source.notify_changed(Path(event.dest_path))

    def on_deleted(self, event: FileSystemEvent) -> None:  # pragma: no cover - requires filesystem
        self.source.notify_changed(Path(event.src_path))


class SnapshotFileSource(SnapshotSource):
    """Serve collaborator streams from a directory of JSON snapshots.

    Watchdog events arrive on the observer thread; reloads are handed to the
    asyncio loop so subscribers are only ever called from the loop thread.
    """

    def __init__(self, root: Path, loop: asyncio.AbstractEventLoop | None = None) -> None:
        super().__init__()
        self.root = root.expanduser().resolve()
        self._loop = loop
        self._observer: BaseObserver | None = None
        self._lock = threading.Lock()

    def file_for(self, path: str) -> Path:
        return self.root / f"{path}.json"

    def load(self, path: str) -> dict[str, Any]:
        """Read the raw snapshot for ``path``; a missing file is empty."""
        file_path = self.file_for(path)
        if not file_path.exists():
            return {}
        try:
            data = orjson.loads(file_path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as exc:
            raise SourceError(path, str(exc)) from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SourceError(path, "snapshot must be a JSON object")
        return data

    def start(self) -> None:
        with self._lock:
            if self._observer is not None:
                return
            self.root.mkdir(parents=True, exist_ok=True)
            observer = Observer()
            observer.schedule(SnapshotEventHandler(self), str(self.root), recursive=True)
            observer.start()
            self._observer = observer
            logger.info("Watching snapshot directory %s", self.root)

    def stop(self) -> None:
        with self._lock:
            if self._observer is None:
                return
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None

    def notify_changed(self, file_path: Path) -> None:
        """Schedule a reload of the stream stored at ``file_path``; thread-safe."""
        path = self._stream_path(file_path)
        loop = self._loop
        if path is None or loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._reload, path)

    def _stream_path(self, file_path: Path) -> str | None:
        try:
            relative = file_path.resolve().relative_to(self.root)
        except ValueError:
            return None
        if relative.suffix.lower() != ".json":
            return None
        return relative.with_suffix("").as_posix()

    def _on_subscribed(self, subscriber: Subscriber[Any]) -> None:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self._loop.call_soon(self._reload_one, subscriber)

    def _reload_one(self, subscriber: Subscriber[Any]) -> None:
        try:
            docs = self.load(subscriber.path)
        except SourceError as exc:
            logger.warning("Failed to load snapshot %s: %s", subscriber.path, exc.detail)
            subscriber.fail(exc)
            return
        subscriber.deliver(docs)

    def _reload(self, path: str) -> None:
        if not self.subscriber_count(path):
            return
        try:
            docs = self.load(path)
        except SourceError as exc:
            logger.warning("Failed to load snapshot %s: %s", path, exc.detail)
            self._dispatch_error(path, exc)
            return
        logger.debug("Reloaded snapshot %s (%s documents)", path, len(docs))
        self._dispatch(path, docs)


__all__ = ["SnapshotFileSource", "SnapshotEventHandler"]
