"""Last-value-wins debouncer on the asyncio loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Debouncer[T]:
    """Coalesce rapid :meth:`push` calls into one delayed ``action(value)``.

    Each push replaces the pending value and restarts the delay, so only the
    most recent value is delivered. Must be used from a running event loop.
    """

    def __init__(self, action: Callable[[T], None], delay: float = 0.3) -> None:
        self._action = action
        self._delay = delay
        self._handle: asyncio.TimerHandle | None = None
        self._value: T | None = None
        self._has_value = False

    @property
    def pending(self) -> bool:
        return self._has_value

    def push(self, value: T) -> None:
        self._value = value
        self._has_value = True
        if self._handle is not None:
            self._handle.cancel()
        self._handle = asyncio.get_running_loop().call_later(self._delay, self.flush)

    def flush(self) -> None:
        """Deliver the pending value now, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if not self._has_value:
            return
        value = self._value
        self._value = None
        self._has_value = False
        try:
            self._action(value)  # type: ignore[arg-type]
        except Exception:
            logger.exception("Debounced action failed")

    def cancel(self) -> None:
        """Drop the pending value without delivering it."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._value = None
        self._has_value = False
