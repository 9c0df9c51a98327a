"""Tests for the debouncer and the payload restore cache."""

from __future__ import annotations

import asyncio

import pytest
from conftest import NOW, make_usage

from swarmmon.models.usage import DashboardPayload, UsageSnapshot
from swarmmon.services.debounce import Debouncer
from swarmmon.services.metrics import build_payload
from swarmmon.ui.state_cache import PAYLOAD_KEY, StateCache


class DictStore:
    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.writes = 0

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        self.data[key] = value


def _payload(prompt_count: int = 150) -> DashboardPayload:
    data = make_usage()
    data["current_window"]["prompt_count"] = prompt_count
    return build_payload(UsageSnapshot.model_validate(data), now=NOW)


@pytest.mark.asyncio
async def test_debouncer_delivers_last_value_once() -> None:
    delivered: list[int] = []
    debouncer: Debouncer[int] = Debouncer(delivered.append, delay=0.02)
    for value in range(5):
        debouncer.push(value)
    assert debouncer.pending
    await asyncio.sleep(0.08)
    assert delivered == [4]
    assert not debouncer.pending


@pytest.mark.asyncio
async def test_debouncer_flush_delivers_immediately() -> None:
    delivered: list[str] = []
    debouncer: Debouncer[str] = Debouncer(delivered.append, delay=10)
    debouncer.push("a")
    debouncer.flush()
    assert delivered == ["a"]
    debouncer.flush()
    assert delivered == ["a"]


@pytest.mark.asyncio
async def test_debouncer_cancel_drops_value() -> None:
    delivered: list[str] = []
    debouncer: Debouncer[str] = Debouncer(delivered.append, delay=0.01)
    debouncer.push("a")
    debouncer.cancel()
    await asyncio.sleep(0.03)
    assert delivered == []
    assert not debouncer.pending


@pytest.mark.asyncio
async def test_debouncer_logs_action_failure(caplog: pytest.LogCaptureFixture) -> None:
    def boom(_value: int) -> None:
        raise RuntimeError("nope")

    debouncer: Debouncer[int] = Debouncer(boom, delay=10)
    debouncer.push(1)
    debouncer.flush()
    assert "Debounced action failed" in caplog.text
    assert not debouncer.pending


@pytest.mark.asyncio
async def test_state_cache_coalesces_saves() -> None:
    store = DictStore()
    cache = StateCache(store, delay=0.02)
    cache.save(_payload(100))
    cache.save(_payload(200))
    cache.save(_payload(300))
    await asyncio.sleep(0.08)
    assert store.writes == 1
    loaded = cache.load()
    assert loaded == _payload(300)


@pytest.mark.asyncio
async def test_state_cache_flush_writes_pending() -> None:
    store = DictStore()
    cache = StateCache(store, delay=10)
    cache.save(_payload())
    assert store.writes == 0
    cache.flush()
    assert store.writes == 1
    assert PAYLOAD_KEY in store.data


def test_state_cache_load_empty_and_corrupt() -> None:
    store = DictStore()
    cache = StateCache(store)
    assert cache.load() is None
    store.data[PAYLOAD_KEY] = '{"snapshot": 42}'
    assert cache.load() is None
