"""Configuration for Swarm Monitor."""

from dataclasses import dataclass, field
from pathlib import Path

from swarmmon.constants import (
    DEFAULT_REFRESH_INTERVAL_S,
    DEFAULT_WARNING_THRESHOLD,
    MAX_USAGE_FILE_SIZE,
)
from swarmmon.data.parser import resolve_usage_path
from swarmmon.models.usage import PricingConfig


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    usage_file: Path | None = None
    claude_dir: Path = field(default_factory=lambda: Path.home() / ".claude")
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL_S
    pricing: PricingConfig = field(default_factory=PricingConfig)
    warning_threshold: int = DEFAULT_WARNING_THRESHOLD
    max_file_size: int = MAX_USAGE_FILE_SIZE

    @property
    def usage_path(self) -> Path:
        return resolve_usage_path(self.usage_file, self.claude_dir)
