"""Tab aggregators — turn a snapshot and its metrics into chart-ready views.

Every function here is pure: the same payload always yields the same view,
whether it came from a live read or from the restore cache.
"""

from __future__ import annotations

from swarmmon.constants import (
    CRITICAL_THRESHOLD,
    DAILY_WINDOW_DAYS,
    DEFAULT_WARNING_THRESHOLD,
    MAX_PROMPTS_PER_WINDOW,
    TREND_MIN_REQUESTS,
    UNKNOWN_CALLER,
)
from swarmmon.models.usage import (
    DashboardPayload,
    DerivedMetrics,
    PricingConfig,
    RequestLog,
    UsageSnapshot,
)
from swarmmon.models.views import (
    ChartData,
    ChartSeries,
    CostSavingsView,
    DashboardViews,
    HeaderStats,
    KindBreakdown,
    PerformanceView,
    PointAnnotation,
    QuotaLevel,
    Trend,
    UsagePatternsView,
)
from swarmmon.services.metrics import DEFAULT_PRICING, comparison_cost, percent_of

COST_EMPTY_MESSAGE = "Start using MCP tools to see cost savings here"
USAGE_EMPTY_MESSAGE = "No usage data yet"
PERFORMANCE_EMPTY_MESSAGE = "No request data yet. Performance metrics appear after MCP tool calls"

# Under 30 minutes left in the window
TIME_LOW_MS = 30 * 60 * 1000


def _has_no_usage(snapshot: UsageSnapshot) -> bool:
    return not snapshot.daily_totals and snapshot.current_window.prompt_count == 0


def quota_level(
    percent: float, warning_threshold: float = DEFAULT_WARNING_THRESHOLD
) -> QuotaLevel:
    if percent >= CRITICAL_THRESHOLD:
        return QuotaLevel.CRITICAL
    if percent >= warning_threshold:
        return QuotaLevel.WARNING
    return QuotaLevel.NORMAL


def cost_savings_view(
    snapshot: UsageSnapshot,
    metrics: DerivedMetrics,
    pricing: PricingConfig = DEFAULT_PRICING,
) -> CostSavingsView:
    """Actual vs comparison cost over the last 30 days."""
    if _has_no_usage(snapshot):
        return CostSavingsView(empty=True, empty_message=COST_EMPTY_MESSAGE)

    daily = snapshot.daily_totals[-DAILY_WINDOW_DAYS:]
    actual = [d.estimated_cost_usd for d in daily]
    comparison = [
        comparison_cost(d.total_input_tokens, d.total_output_tokens, pricing) for d in daily
    ]

    if daily:
        total_actual = sum(actual)
        total_comparison = sum(comparison)
        total_prompts = sum(d.prompt_count for d in daily)
    else:
        # Brand-new snapshot: nothing rolled into daily totals yet
        window = snapshot.current_window
        total_actual = window.estimated_cost_usd
        total_comparison = metrics.comparison_cost_usd
        total_prompts = window.prompt_count

    total_saved = total_comparison - total_actual
    chart = None
    if daily:
        chart = ChartData(
            kind="bar",
            labels=[d.short_label for d in daily],
            series=[
                ChartSeries(label="Actual Cost", values=actual),
                ChartSeries(label="Comparison Cost", values=comparison),
            ],
        )

    return CostSavingsView(
        total_actual_usd=total_actual,
        total_comparison_usd=total_comparison,
        total_saved_usd=total_saved,
        savings_percent=percent_of(total_saved, total_comparison),
        total_prompts=total_prompts,
        avg_cost_per_prompt=total_actual / total_prompts if total_prompts > 0 else 0.0,
        daily_chart=chart,
    )


def caller_breakdown(requests: tuple[RequestLog, ...]) -> dict[str, int]:
    """Sum task counts per caller, in first-seen order."""
    buckets: dict[str, int] = {}
    for request in requests:
        key = request.caller or UNKNOWN_CALLER
        buckets[key] = buckets.get(key, 0) + request.task_count
    return buckets


def usage_patterns_view(
    snapshot: UsageSnapshot,
    metrics: DerivedMetrics,
    warning_threshold: float = DEFAULT_WARNING_THRESHOLD,
) -> UsagePatternsView:
    """Quota progress, daily prompt trend, token split and caller split."""
    if _has_no_usage(snapshot):
        return UsagePatternsView(empty=True, empty_message=USAGE_EMPTY_MESSAGE)

    window = snapshot.current_window
    used = window.prompt_count
    percent = min(100.0, used / MAX_PROMPTS_PER_WINDOW * 100)

    callers = caller_breakdown(snapshot.recent_requests)
    has_callers = bool(callers) and list(callers) != [UNKNOWN_CALLER]

    input_tokens = window.total_input_tokens
    output_tokens = window.total_output_tokens
    total_tokens = input_tokens + output_tokens

    daily = snapshot.daily_totals[-DAILY_WINDOW_DAYS:]
    daily_chart = None
    if daily:
        daily_chart = ChartData(
            kind="line",
            labels=[d.short_label for d in daily],
            series=[ChartSeries(label="Prompts", values=[d.prompt_count for d in daily])],
        )

    token_chart = None
    if total_tokens > 0:
        token_chart = ChartData(
            kind="doughnut",
            labels=["Input Tokens", "Output Tokens"],
            series=[ChartSeries(label="Tokens", values=[input_tokens, output_tokens])],
        )

    caller_chart = None
    if has_callers:
        caller_chart = ChartData(
            kind="pie",
            labels=list(callers),
            series=[ChartSeries(label="Tasks", values=list(callers.values()))],
        )

    return UsagePatternsView(
        prompts_used=used,
        prompts_remaining=metrics.prompts_remaining,
        quota_percent=percent,
        quota_level=quota_level(percent, warning_threshold),
        caller_tasks=callers,
        has_callers=has_callers,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        input_share=percent_of(input_tokens, total_tokens),
        output_share=percent_of(output_tokens, total_tokens),
        daily_prompts_chart=daily_chart,
        token_chart=token_chart,
        caller_chart=caller_chart,
    )


def _mean_latency(requests: tuple[RequestLog, ...]) -> float:
    return sum(r.response_time_ms for r in requests) / len(requests)


def latency_trend(requests: tuple[RequestLog, ...]) -> Trend | None:
    """Compare mean latency of the first half of the log with the second half.

    Halves are split by position, not timestamp. None with too few requests.
    """
    if len(requests) < TREND_MIN_REQUESTS:
        return None
    half = len(requests) // 2
    older = _mean_latency(requests[:half])
    newer = _mean_latency(requests[half:])
    if newer < older:
        return Trend.IMPROVING
    if newer > older:
        return Trend.DEGRADING
    return Trend.STEADY


def _kind_breakdown(requests: list[RequestLog]) -> KindBreakdown:
    if not requests:
        return KindBreakdown()
    return KindBreakdown(
        count=len(requests),
        avg_tokens=sum(r.total_tokens for r in requests) / len(requests),
        avg_cost_usd=sum(r.cost_usd for r in requests) / len(requests),
    )


def performance_view(snapshot: UsageSnapshot, metrics: DerivedMetrics) -> PerformanceView:
    """Latency, throughput, error rate and batch-vs-query comparison."""
    requests = snapshot.recent_requests
    if not requests:
        return PerformanceView(empty=True, empty_message=PERFORMANCE_EMPTY_MESSAGE)

    total_tokens = sum(r.total_tokens for r in requests)
    total_seconds = sum(r.response_time_ms for r in requests) / 1000
    error_count = sum(1 for r in requests if r.failed)

    batches = [r for r in requests if r.type == "batch"]
    queries = [r for r in requests if r.type != "batch"]
    batch_tasks = sum(r.task_count for r in batches)
    all_tasks = batch_tasks + sum(r.task_count for r in queries)

    latency_chart = ChartData(
        kind="line",
        labels=[str(i) for i in range(1, len(requests) + 1)],
        series=[
            ChartSeries(
                label="Response Time (ms)",
                values=[r.response_time_ms for r in requests],
                annotations=[
                    PointAnnotation(
                        kind=r.type,
                        errored=r.failed,
                        caller=r.caller,
                        error=r.error or None,
                    )
                    for r in requests
                ],
            )
        ],
    )

    return PerformanceView(
        request_count=len(requests),
        avg_response_time_ms=(
            metrics.avg_response_time_ms
            if metrics.avg_response_time_ms is not None
            else _mean_latency(requests)
        ),
        throughput_tokens_per_s=total_tokens / total_seconds if total_seconds > 0 else 0.0,
        error_count=error_count,
        error_rate=error_count / len(requests),
        batch_efficiency=batch_tasks / all_tasks if all_tasks > 0 else 0.0,
        trend=latency_trend(requests),
        batch=_kind_breakdown(batches),
        query=_kind_breakdown(queries),
        latency_chart=latency_chart,
    )


def header_stats(
    snapshot: UsageSnapshot,
    metrics: DerivedMetrics,
    warning_threshold: float = DEFAULT_WARNING_THRESHOLD,
) -> HeaderStats:
    window = snapshot.current_window
    used_percent = window.prompt_count / MAX_PROMPTS_PER_WINDOW * 100
    return HeaderStats(
        prompts_remaining=metrics.prompts_remaining,
        prompts_used=window.prompt_count,
        window_cost_usd=window.estimated_cost_usd,
        time_remaining_ms=metrics.window_time_remaining_ms,
        savings_usd=metrics.savings_usd,
        prompts_level=quota_level(used_percent, warning_threshold),
        time_low=metrics.window_time_remaining_ms < TIME_LOW_MS,
    )


def build_dashboard(
    payload: DashboardPayload,
    warning_threshold: float = DEFAULT_WARNING_THRESHOLD,
) -> DashboardViews:
    """Build every tab from one payload; no data gives three empty tabs."""
    snapshot, metrics = payload.snapshot, payload.metrics
    if snapshot is None or metrics is None:
        return DashboardViews(
            cost=CostSavingsView(empty=True, empty_message=COST_EMPTY_MESSAGE),
            usage=UsagePatternsView(empty=True, empty_message=USAGE_EMPTY_MESSAGE),
            performance=PerformanceView(empty=True, empty_message=PERFORMANCE_EMPTY_MESSAGE),
        )
    return DashboardViews(
        header=header_stats(snapshot, metrics, warning_threshold),
        cost=cost_savings_view(snapshot, metrics, payload.pricing),
        usage=usage_patterns_view(snapshot, metrics, warning_threshold),
        performance=performance_view(snapshot, metrics),
    )
