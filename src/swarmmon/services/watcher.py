"""Usage file watcher — filesystem events plus a polling fallback."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from swarmmon.data.parser import parse_usage_file
from swarmmon.models.usage import UsageSnapshot
from swarmmon.services.protocols import FileEvent, FileEventSource

if TYPE_CHECKING:
    from swarmmon.config import Config

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[UsageSnapshot | None], None]
UsageLoader = Callable[[Path, int], UsageSnapshot | None]


class WatcherState(StrEnum):
    STOPPED = "stopped"
    RUNNING = "running"


class UsageWatcher:
    """Produces a fresh snapshot (or ``None`` for no data) whenever the usage file may have changed.

    Three triggers feed the same refresh pass: change/create events from the
    event source, delete events (reported as ``None`` without reading), and a
    periodic poll that runs regardless of events since some platforms drop
    filesystem notifications. A failed pass is logged and skipped; the
    callback keeps whatever it showed last.

    All triggers run on the asyncio loop that called :meth:`start`.
    """

    def __init__(
        self,
        config: Config,
        event_source: FileEventSource | None = None,
        loader: UsageLoader = parse_usage_file,
    ) -> None:
        self._config = config
        self._event_source = event_source
        self._loader = loader
        self._callback: SnapshotCallback | None = None
        self._state = WatcherState.STOPPED
        self._unsubscribe: Callable[[], None] | None = None
        self._poll_task: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def state(self) -> WatcherState:
        return self._state

    @property
    def config(self) -> Config:
        return self._config

    def set_callback(self, callback: SnapshotCallback | None) -> None:
        """Register the update callback, replacing any previous one."""
        self._callback = callback

    def start(self) -> None:
        """Read once, subscribe to file events and start polling.

        Must be called from a running event loop.
        """
        if self._state is WatcherState.RUNNING:
            return
        self._state = WatcherState.RUNNING
        path = self._config.usage_path

        self._spawn_refresh()
        if self._event_source is not None:
            self._unsubscribe = self._event_source.watch(path, self._on_file_event)
        self._poll_task = asyncio.get_running_loop().create_task(
            self._poll_loop(self._config.refresh_interval)
        )
        logger.info(
            "Watching %s (poll every %.0fs)", path, self._config.refresh_interval
        )

    def stop(self) -> None:
        """Release the event subscription, the poll task and in-flight reads."""
        if self._state is WatcherState.STOPPED:
            return
        self._state = WatcherState.STOPPED

        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None
        for task in list(self._pending):
            task.cancel()
        logger.info("Stopped watching %s", self._config.usage_path)

    def reconfigure(self, config: Config) -> None:
        """Apply new settings; a running watcher is fully restarted."""
        was_running = self._state is WatcherState.RUNNING
        self.stop()
        self._config = config
        if was_running:
            self.start()

    async def refresh(self) -> UsageSnapshot | None:
        """Run one read-and-validate pass and deliver the result.

        Returns the snapshot, or None for no data. A pass that fails
        unexpectedly also returns None but does not invoke the callback.
        """
        config = self._config
        try:
            snapshot = await asyncio.to_thread(
                self._loader, config.usage_path, config.max_file_size
            )
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.warning("Usage refresh failed", exc_info=True)
            return None
        self._emit(snapshot)
        return snapshot

    async def drain(self) -> None:
        """Wait until every in-flight refresh pass has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _on_file_event(self, event: FileEvent) -> None:
        if self._state is not WatcherState.RUNNING:
            return
        if event is FileEvent.DELETED:
            logger.debug("Usage file deleted: %s", self._config.usage_path)
            self._emit(None)
            return
        self._spawn_refresh()

    def _spawn_refresh(self) -> None:
        task = asyncio.get_running_loop().create_task(self.refresh())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _poll_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self._spawn_refresh()

    def _emit(self, snapshot: UsageSnapshot | None) -> None:
        callback = self._callback
        if callback is None:
            return
        try:
            callback(snapshot)
        except Exception:
            logger.exception("Usage update callback failed")
