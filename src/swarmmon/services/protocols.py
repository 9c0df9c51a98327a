"""Protocol definitions for collaborators at the display boundary."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from pathlib import Path
from typing import Protocol

from swarmmon.models.views import StatusSummary


class FileEvent(StrEnum):
    CHANGED = "changed"
    CREATED = "created"
    DELETED = "deleted"


class FileEventSource(Protocol):
    """Interface for filesystem change notifications."""

    def watch(self, path: Path, handler: Callable[[FileEvent], None]) -> Callable[[], None]:
        """Subscribe ``handler`` to events for ``path``; return an unsubscribe callable."""
        ...


class NotificationSurface(Protocol):
    """Interface for the status / alert surface."""

    def show(self, summary: StatusSummary) -> None: ...


class KeyValueStore(Protocol):
    """Interface for the persistent key-value store used by the restore cache."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...
