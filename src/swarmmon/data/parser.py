"""Usage file reader — bounded read, JSON decode, shape validation."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError
from result import Err, Ok, Result

from swarmmon.constants import DEFAULT_USAGE_FILENAME, MAX_USAGE_FILE_SIZE
from swarmmon.models.usage import UsageSnapshot

logger = logging.getLogger(__name__)


def resolve_usage_path(custom: str | Path | None = None, claude_dir: Path | None = None) -> Path:
    """Return the custom usage path when set, else the default under ``~/.claude``."""
    if custom is not None and str(custom).strip():
        return Path(str(custom).strip()).expanduser()
    base = claude_dir if claude_dir is not None else Path.home() / ".claude"
    return base / DEFAULT_USAGE_FILENAME


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def parse_usage_data(raw: object) -> Result[UsageSnapshot, str]:
    """Validate decoded JSON and build a snapshot.

    ``current_window`` must be an object with a numeric ``prompt_count`` and
    string ``window_start``/``window_end``. Missing or non-list
    ``daily_totals``/``recent_requests`` become empty.
    """
    if not isinstance(raw, dict):
        return Err("root is not an object")

    window = raw.get("current_window")
    if not isinstance(window, dict):
        return Err("missing current_window")
    if not _is_number(window.get("prompt_count")):
        return Err("current_window.prompt_count is not a number")
    for key in ("window_start", "window_end"):
        if not isinstance(window.get(key), str):
            return Err(f"current_window.{key} is not a string")

    try:
        return Ok(UsageSnapshot.model_validate(raw))
    except ValidationError as exc:
        return Err(f"schema validation failed: {exc.error_count()} error(s)")


def load_usage_file(path: Path, max_bytes: int = MAX_USAGE_FILE_SIZE) -> Result[UsageSnapshot, str]:
    """Read and validate the usage file, explaining any rejection."""
    try:
        size = path.stat().st_size
    except FileNotFoundError:
        return Err(f"usage file not found: {path}")
    except OSError as exc:
        return Err(f"cannot stat {path}: {exc}")

    if size > max_bytes:
        return Err(f"usage file too large ({size} bytes > {max_bytes})")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return Err(f"cannot read {path}: {exc}")

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        return Err(f"invalid JSON in {path}: {exc.msg} at line {exc.lineno}")

    return parse_usage_data(raw)


def parse_usage_file(path: Path, max_bytes: int = MAX_USAGE_FILE_SIZE) -> UsageSnapshot | None:
    """Return a validated snapshot, or None when there is no usable data."""
    result = load_usage_file(path, max_bytes)
    if isinstance(result, Err):
        logger.debug("No usage data: %s", result.err_value)
        return None
    return result.ok_value
