"""Comparison pricing and derived usage metrics."""

from __future__ import annotations

from datetime import UTC, datetime

from swarmmon.constants import MAX_PROMPTS_PER_WINDOW
from swarmmon.models.usage import DashboardPayload, DerivedMetrics, PricingConfig, UsageSnapshot

DEFAULT_PRICING = PricingConfig()


def comparison_cost(
    input_tokens: int,
    output_tokens: int,
    pricing: PricingConfig = DEFAULT_PRICING,
) -> float:
    """What the given tokens would cost at the reference-tier pricing."""
    return (input_tokens / 1_000_000) * pricing.input_per_million + (
        output_tokens / 1_000_000
    ) * pricing.output_per_million


def percent_of(part: float, whole: float) -> float:
    """``part / whole * 100``, or 0 when ``whole`` is not positive."""
    return (part / whole) * 100 if whole > 0 else 0.0


def compute_metrics(
    snapshot: UsageSnapshot,
    pricing: PricingConfig = DEFAULT_PRICING,
    *,
    now: datetime | None = None,
) -> DerivedMetrics:
    """Compute all derived metrics from a snapshot.

    Pure for a fixed ``now``; the current UTC time is used otherwise.
    """
    window = snapshot.current_window
    comparison = comparison_cost(window.total_input_tokens, window.total_output_tokens, pricing)
    savings = comparison - window.estimated_cost_usd

    current = now or datetime.now(tz=UTC)
    window_end = window.window_end_at
    remaining_ms = 0
    if window_end is not None:
        remaining_ms = max(0, int((window_end - current).total_seconds() * 1000))

    avg_response: float | None = None
    batch_efficiency: float | None = None
    error_rate: float | None = None

    requests = snapshot.recent_requests
    if requests:
        avg_response = sum(r.response_time_ms for r in requests) / len(requests)

        total_tasks = sum(r.task_count for r in requests)
        batch_tasks = sum(r.task_count for r in requests if r.type == "batch")
        batch_efficiency = batch_tasks / total_tasks if total_tasks > 0 else 0.0

        error_rate = sum(1 for r in requests if r.failed) / len(requests)

    return DerivedMetrics(
        comparison_cost_usd=comparison,
        savings_usd=savings,
        savings_percent=percent_of(savings, comparison),
        window_time_remaining_ms=remaining_ms,
        prompts_remaining=max(0, MAX_PROMPTS_PER_WINDOW - window.prompt_count),
        avg_response_time_ms=avg_response,
        batch_efficiency=batch_efficiency,
        error_rate=error_rate,
    )


def build_payload(
    snapshot: UsageSnapshot | None,
    pricing: PricingConfig = DEFAULT_PRICING,
    *,
    now: datetime | None = None,
) -> DashboardPayload:
    """Bundle a snapshot with freshly computed metrics for the display layer."""
    if snapshot is None:
        return DashboardPayload(pricing=pricing)
    return DashboardPayload(
        snapshot=snapshot,
        metrics=compute_metrics(snapshot, pricing, now=now),
        pricing=pricing,
    )
