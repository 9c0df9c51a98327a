"""Protocol module smoke test."""

from __future__ import annotations

from swarmmon.services import protocols


def test_protocols_module_imports() -> None:
    assert hasattr(protocols, "FileEventSource")
    assert hasattr(protocols, "NotificationSurface")
    assert hasattr(protocols, "KeyValueStore")
    assert {event.value for event in protocols.FileEvent} == {"changed", "created", "deleted"}
