"""Shared fixtures for Swarm Monitor tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from swarmmon.config import Config

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)


def make_usage(**overrides: Any) -> dict[str, Any]:
    """A realistic usage document; top-level keys can be overridden."""
    data: dict[str, Any] = {
        "current_window": {
            "window_start": "2025-01-15T10:00:00Z",
            "window_end": "2025-01-15T15:00:00Z",
            "prompt_count": 150,
            "total_input_tokens": 1_000_000,
            "total_output_tokens": 700_000,
            "estimated_cost_usd": 12.34,
        },
        "daily_totals": [
            {
                "date": "2025-01-14",
                "prompt_count": 200,
                "total_input_tokens": 400_000,
                "total_output_tokens": 100_000,
                "estimated_cost_usd": 3.0,
            },
            {
                "date": "2025-01-15",
                "prompt_count": 150,
                "total_input_tokens": 1_000_000,
                "total_output_tokens": 700_000,
                "estimated_cost_usd": 12.34,
            },
        ],
        "recent_requests": [
            {
                "timestamp": "2025-01-15T11:00:00Z",
                "type": "batch",
                "task_count": 8,
                "input_tokens": 2000,
                "output_tokens": 1000,
                "cost_usd": 0.02,
                "response_time_ms": 1500,
                "caller": "code-review",
            },
            {
                "timestamp": "2025-01-15T11:05:00Z",
                "type": "query",
                "task_count": 1,
                "input_tokens": 500,
                "output_tokens": 500,
                "cost_usd": 0.01,
                "response_time_ms": 500,
                "caller": "refactor",
                "error": "rate limited",
            },
        ],
        "provider": {
            "name": "example",
            "pricing": {"input_per_million": 0.5, "output_per_million": 1.5},
        },
    }
    data.update(overrides)
    return data


@pytest.fixture
def write_usage(tmp_path: Path) -> Callable[..., Path]:
    """Write a usage document (dict or raw text) and return its path."""
    path = tmp_path / "usage.json"

    def _write(data: dict[str, Any] | str | None = None, **overrides: Any) -> Path:
        if data is None:
            data = make_usage(**overrides)
        text = data if isinstance(data, str) else json.dumps(data)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def usage_file(write_usage: Callable[..., Path]) -> Path:
    return write_usage()


@pytest.fixture
def test_config(usage_file: Path, tmp_path: Path) -> Config:
    """Config pointing at the temporary usage file."""
    return Config(usage_file=usage_file, claude_dir=tmp_path / ".claude", refresh_interval=0.05)
