"""Policy constants shared by the parser, metrics engine and views."""

from __future__ import annotations

# Prompt cap for one rate-limit window (5-hour plan limit)
MAX_PROMPTS_PER_WINDOW = 1000

# Largest usage file we are willing to read (1 MiB)
MAX_USAGE_FILE_SIZE = 1_048_576

DEFAULT_REFRESH_INTERVAL_S = 30.0
DEFAULT_USAGE_FILENAME = "llm-swarm-usage.json"

# Reference-tier pricing per million tokens (USD)
DEFAULT_INPUT_PER_MILLION = 15.0
DEFAULT_OUTPUT_PER_MILLION = 75.0

# Quota usage percentages
DEFAULT_WARNING_THRESHOLD = 80
CRITICAL_THRESHOLD = 95

DAILY_WINDOW_DAYS = 30
TREND_MIN_REQUESTS = 20
UNKNOWN_CALLER = "unknown"
