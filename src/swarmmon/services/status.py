"""Status summary for the status bar / notification surface."""

from __future__ import annotations

from swarmmon.constants import CRITICAL_THRESHOLD, DEFAULT_WARNING_THRESHOLD, MAX_PROMPTS_PER_WINDOW
from swarmmon.models.usage import DerivedMetrics, UsageSnapshot
from swarmmon.models.views import StatusLevel, StatusSummary

NO_DATA_TEXT = "Swarm: No data"
NO_DATA_TOOLTIP = "Swarm Monitor — No usage data found"


def format_time_remaining(ms: int) -> str:
    """Format window time left as ``"2h 5m"``, ``"12m"`` or ``"expired"``."""
    if ms <= 0:
        return "expired"
    total_minutes = ms // 60_000
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def _tooltip(snapshot: UsageSnapshot, metrics: DerivedMetrics) -> str:
    window = snapshot.current_window
    lines = [
        f"Prompts: {window.prompt_count}/{MAX_PROMPTS_PER_WINDOW} used "
        f"({metrics.prompts_remaining} remaining)",
        f"Cost: ${window.estimated_cost_usd:.4f}",
        f"Comparison cost: ${metrics.comparison_cost_usd:.4f}",
        f"Savings: ${metrics.savings_usd:.4f} ({metrics.savings_percent:.1f}%)",
        f"Window: {format_time_remaining(metrics.window_time_remaining_ms)} remaining",
    ]
    if metrics.avg_response_time_ms is not None:
        lines.append(f"Avg response: {round(metrics.avg_response_time_ms)}ms")
    return "\n".join(lines)


def status_summary(
    snapshot: UsageSnapshot | None,
    metrics: DerivedMetrics | None,
    warning_threshold: float = DEFAULT_WARNING_THRESHOLD,
) -> StatusSummary:
    """Summarize the current window in one line plus a tooltip."""
    if snapshot is None or metrics is None:
        return StatusSummary(level=StatusLevel.NO_DATA, text=NO_DATA_TEXT, tooltip=NO_DATA_TOOLTIP)

    window = snapshot.current_window
    usage_percent = window.prompt_count / MAX_PROMPTS_PER_WINDOW * 100
    time_left = format_time_remaining(metrics.window_time_remaining_ms)

    if metrics.window_time_remaining_ms == 0:
        level = StatusLevel.EXPIRED
    elif usage_percent >= CRITICAL_THRESHOLD:
        level = StatusLevel.ERROR
    elif usage_percent >= warning_threshold:
        level = StatusLevel.WARNING
    else:
        level = StatusLevel.OK

    text = (
        f"{metrics.prompts_remaining}/{MAX_PROMPTS_PER_WINDOW} | "
        f"${window.estimated_cost_usd:.2f} | {time_left}"
    )
    return StatusSummary(level=level, text=text, tooltip=_tooltip(snapshot, metrics))
