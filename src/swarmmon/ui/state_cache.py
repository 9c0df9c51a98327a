"""Restore cache for the last dashboard payload."""

from __future__ import annotations

import logging

from pydantic import ValidationError
from PySide6.QtCore import QSettings

from swarmmon.models.usage import DashboardPayload
from swarmmon.services.debounce import Debouncer
from swarmmon.services.protocols import KeyValueStore

logger = logging.getLogger(__name__)

PAYLOAD_KEY = "dashboard/last_payload"


class SettingsStore:
    """KeyValueStore over QSettings."""

    def __init__(self, settings: QSettings | None = None) -> None:
        self._settings = settings or QSettings("SwarmMonitor", "SwarmMonitor")

    def get(self, key: str) -> str | None:
        value = self._settings.value(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        self._settings.setValue(key, value)


class StateCache:
    """Persists the last payload, coalescing rapid updates."""

    def __init__(self, store: KeyValueStore, delay: float = 0.3) -> None:
        self._store = store
        self._debouncer: Debouncer[DashboardPayload] = Debouncer(self._write, delay)

    def save(self, payload: DashboardPayload) -> None:
        """Schedule a write; only the latest payload within the delay is stored."""
        self._debouncer.push(payload)

    def flush(self) -> None:
        self._debouncer.flush()

    def load(self) -> DashboardPayload | None:
        raw = self._store.get(PAYLOAD_KEY)
        if not raw:
            return None
        try:
            return DashboardPayload.model_validate_json(raw)
        except ValidationError:
            logger.info("Discarding unreadable cached dashboard state")
            return None

    def _write(self, payload: DashboardPayload) -> None:
        self._store.set(PAYLOAD_KEY, payload.model_dump_json())
