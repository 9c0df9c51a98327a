"""QFileSystemWatcher-backed file event source."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from PySide6.QtCore import QFileSystemWatcher, QObject

from swarmmon.services.protocols import FileEvent

logger = logging.getLogger(__name__)


class _Subscription(QObject):
    """Watches one file plus its directory so creation and deletion are seen."""

    def __init__(self, path: Path, handler: Callable[[FileEvent], None]) -> None:
        super().__init__()
        self._path = path
        self._handler = handler
        self._exists = path.exists()
        self._watcher = QFileSystemWatcher(self)
        if path.parent.is_dir():
            self._watcher.addPath(str(path.parent))
        else:
            logger.info("Usage directory not found: %s", path.parent)
        if self._exists:
            self._watcher.addPath(str(path))
        self._watcher.fileChanged.connect(self._on_file_changed)
        self._watcher.directoryChanged.connect(self._on_directory_changed)

    def _on_file_changed(self, _changed: str) -> None:
        if self._path.exists():
            # Atomic replace drops the watch on some platforms
            if str(self._path) not in self._watcher.files():
                self._watcher.addPath(str(self._path))
            self._exists = True
            self._handler(FileEvent.CHANGED)
        elif self._exists:
            self._exists = False
            self._handler(FileEvent.DELETED)

    def _on_directory_changed(self, _directory: str) -> None:
        exists = self._path.exists()
        if exists and not self._exists:
            self._watcher.addPath(str(self._path))
            self._exists = True
            self._handler(FileEvent.CREATED)
        elif not exists and self._exists:
            self._exists = False
            self._handler(FileEvent.DELETED)

    def close(self) -> None:
        self._watcher.fileChanged.disconnect(self._on_file_changed)
        self._watcher.directoryChanged.disconnect(self._on_directory_changed)
        paths = self._watcher.files() + self._watcher.directories()
        if paths:
            self._watcher.removePaths(paths)


class QtFileEventSource:
    """File event source for the Qt event loop."""

    def watch(self, path: Path, handler: Callable[[FileEvent], None]) -> Callable[[], None]:
        subscription = _Subscription(path, handler)
        return subscription.close
