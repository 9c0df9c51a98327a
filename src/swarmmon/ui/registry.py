"""Registry holding the one dashboard window of an application shell."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol


class Disposable(Protocol):
    def dispose(self) -> None: ...


class DashboardRegistry[W: Disposable]:
    """Creates the dashboard on first request and reuses it afterwards."""

    def __init__(self, factory: Callable[[], W]) -> None:
        self._factory = factory
        self._current: W | None = None

    @property
    def current(self) -> W | None:
        return self._current

    def get_or_create(self) -> W:
        if self._current is None:
            self._current = self._factory()
        return self._current

    def dispose(self) -> None:
        current, self._current = self._current, None
        if current is not None:
            current.dispose()
