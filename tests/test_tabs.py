"""Tests for the tab aggregators and dashboard assembly."""

from __future__ import annotations

import pytest
from conftest import NOW, make_usage

from swarmmon.models.usage import DashboardPayload, PricingConfig, UsageSnapshot
from swarmmon.models.views import QuotaLevel, Trend
from swarmmon.services.metrics import build_payload, compute_metrics
from swarmmon.services.tabs import (
    COST_EMPTY_MESSAGE,
    PERFORMANCE_EMPTY_MESSAGE,
    USAGE_EMPTY_MESSAGE,
    build_dashboard,
    caller_breakdown,
    cost_savings_view,
    latency_trend,
    performance_view,
    quota_level,
    usage_patterns_view,
)


def _snapshot(**overrides) -> UsageSnapshot:  # type: ignore[no-untyped-def]
    return UsageSnapshot.model_validate(make_usage(**overrides))


def _empty_window(**fields) -> dict:  # type: ignore[no-untyped-def, type-arg]
    window = {
        "window_start": "2025-01-15T10:00:00Z",
        "window_end": "2025-01-15T15:00:00Z",
        "prompt_count": 0,
    }
    window.update(fields)
    return window


def _days(count: int) -> list[dict]:  # type: ignore[type-arg]
    return [
        {
            "date": f"2025-{1 + i // 28:02d}-{1 + i % 28:02d}",
            "prompt_count": i,
            "total_input_tokens": 1_000_000,
            "total_output_tokens": 0,
            "estimated_cost_usd": 1.0,
        }
        for i in range(count)
    ]


def _requests(latencies: list[float]) -> list[dict]:  # type: ignore[type-arg]
    return [{"response_time_ms": ms} for ms in latencies]


# ── Quota levels ──


@pytest.mark.parametrize(
    ("percent", "expected"),
    [
        (0, QuotaLevel.NORMAL),
        (79.9, QuotaLevel.NORMAL),
        (80, QuotaLevel.WARNING),
        (94.9, QuotaLevel.WARNING),
        (95, QuotaLevel.CRITICAL),
        (100, QuotaLevel.CRITICAL),
    ],
)
def test_quota_level(percent: float, expected: QuotaLevel) -> None:
    assert quota_level(percent) is expected


def test_quota_level_custom_threshold() -> None:
    assert quota_level(60, warning_threshold=50) is QuotaLevel.WARNING


# ── Cost savings ──


def test_cost_view_empty_without_any_usage() -> None:
    snapshot = _snapshot(current_window=_empty_window(), daily_totals=[])
    view = cost_savings_view(snapshot, compute_metrics(snapshot, now=NOW))
    assert view.empty
    assert view.empty_message == COST_EMPTY_MESSAGE
    assert view.daily_chart is None


def test_cost_view_totals_from_daily() -> None:
    snapshot = _snapshot()
    view = cost_savings_view(snapshot, compute_metrics(snapshot, now=NOW))
    assert not view.empty
    assert view.total_actual_usd == pytest.approx(15.34)
    # 400k in + 100k out = 13.5; 1M in + 700k out = 67.5
    assert view.total_comparison_usd == pytest.approx(81.0)
    assert view.total_saved_usd == pytest.approx(65.66)
    assert view.savings_percent == pytest.approx(65.66 / 81.0 * 100)
    assert view.total_prompts == 350
    assert view.avg_cost_per_prompt == pytest.approx(15.34 / 350)

    chart = view.daily_chart
    assert chart is not None
    assert chart.kind == "bar"
    assert chart.labels == ["01-14", "01-15"]
    assert [s.label for s in chart.series] == ["Actual Cost", "Comparison Cost"]
    assert chart.series[1].values == pytest.approx([13.5, 67.5])


def test_cost_view_keeps_last_30_days() -> None:
    snapshot = _snapshot(daily_totals=_days(40))
    view = cost_savings_view(snapshot, compute_metrics(snapshot, now=NOW))
    assert view.daily_chart is not None
    assert len(view.daily_chart.labels) == 30
    assert view.total_actual_usd == pytest.approx(30.0)
    assert view.total_prompts == sum(range(10, 40))


def test_cost_view_falls_back_to_window_without_daily() -> None:
    snapshot = _snapshot(daily_totals=[])
    metrics = compute_metrics(snapshot, now=NOW)
    view = cost_savings_view(snapshot, metrics)
    assert not view.empty
    assert view.daily_chart is None
    assert view.total_actual_usd == pytest.approx(12.34)
    assert view.total_comparison_usd == pytest.approx(metrics.comparison_cost_usd)
    assert view.total_prompts == 150


def test_cost_view_uses_configured_pricing() -> None:
    snapshot = _snapshot()
    pricing = PricingConfig(input_per_million=1.0, output_per_million=1.0)
    view = cost_savings_view(snapshot, compute_metrics(snapshot, pricing, now=NOW), pricing)
    assert view.total_comparison_usd == pytest.approx(0.5 + 1.7)


# ── Usage patterns ──


def test_usage_view_empty_without_any_usage() -> None:
    snapshot = _snapshot(current_window=_empty_window(), daily_totals=[])
    view = usage_patterns_view(snapshot, compute_metrics(snapshot, now=NOW))
    assert view.empty
    assert view.empty_message == USAGE_EMPTY_MESSAGE


def test_usage_view_quota_and_tokens() -> None:
    snapshot = _snapshot()
    view = usage_patterns_view(snapshot, compute_metrics(snapshot, now=NOW))
    assert view.prompts_used == 150
    assert view.prompts_remaining == 850
    assert view.quota_percent == pytest.approx(15.0)
    assert view.quota_level is QuotaLevel.NORMAL
    assert view.input_share == pytest.approx(1_000_000 / 1_700_000 * 100)
    assert view.output_share == pytest.approx(700_000 / 1_700_000 * 100)
    assert view.token_chart is not None
    assert view.token_chart.kind == "doughnut"
    assert view.daily_prompts_chart is not None
    assert view.daily_prompts_chart.series[0].values == [200, 150]


def test_usage_view_quota_percent_capped() -> None:
    snapshot = _snapshot(current_window=_empty_window(prompt_count=1500))
    view = usage_patterns_view(snapshot, compute_metrics(snapshot, now=NOW))
    assert view.quota_percent == 100.0
    assert view.quota_level is QuotaLevel.CRITICAL
    assert view.prompts_remaining == 0


def test_usage_view_omits_charts_independently() -> None:
    snapshot = _snapshot(current_window=_empty_window(prompt_count=3), daily_totals=[])
    view = usage_patterns_view(snapshot, compute_metrics(snapshot, now=NOW))
    assert not view.empty
    assert view.daily_prompts_chart is None
    assert view.token_chart is None
    assert view.caller_chart is not None


def test_caller_breakdown_sums_tasks() -> None:
    snapshot = _snapshot(
        recent_requests=[
            {"caller": "a", "task_count": 3},
            {"caller": "b"},
            {"caller": "a", "task_count": 2},
            {},
        ]
    )
    assert caller_breakdown(snapshot.recent_requests) == {"a": 5, "b": 1, "unknown": 1}


def test_callers_all_unknown_means_no_caller_data() -> None:
    snapshot = _snapshot(recent_requests=[{}, {"caller": ""}])
    view = usage_patterns_view(snapshot, compute_metrics(snapshot, now=NOW))
    assert view.caller_tasks == {"unknown": 2}
    assert not view.has_callers
    assert view.caller_chart is None


def test_caller_chart_when_callers_present() -> None:
    snapshot = _snapshot()
    view = usage_patterns_view(snapshot, compute_metrics(snapshot, now=NOW))
    assert view.has_callers
    assert view.caller_chart is not None
    assert view.caller_chart.kind == "pie"
    assert view.caller_chart.labels == ["code-review", "refactor"]
    assert view.caller_chart.series[0].values == [8, 1]


# ── Performance ──


def test_performance_view_empty_without_requests() -> None:
    snapshot = _snapshot(recent_requests=[])
    view = performance_view(snapshot, compute_metrics(snapshot, now=NOW))
    assert view.empty
    assert view.empty_message == PERFORMANCE_EMPTY_MESSAGE
    assert view.latency_chart is None


def test_performance_view_metrics() -> None:
    snapshot = _snapshot()
    view = performance_view(snapshot, compute_metrics(snapshot, now=NOW))
    assert view.request_count == 2
    assert view.avg_response_time_ms == pytest.approx(1000.0)
    # 4000 tokens over 2 seconds
    assert view.throughput_tokens_per_s == pytest.approx(2000.0)
    assert view.error_count == 1
    assert view.error_rate == pytest.approx(0.5)
    assert view.batch_efficiency == pytest.approx(8 / 9)
    assert view.trend is None
    assert view.batch.count == 1
    assert view.batch.avg_tokens == pytest.approx(3000)
    assert view.query.count == 1
    assert view.query.avg_cost_usd == pytest.approx(0.01)


def test_performance_throughput_zero_without_latency() -> None:
    snapshot = _snapshot(recent_requests=[{"input_tokens": 100}])
    view = performance_view(snapshot, compute_metrics(snapshot, now=NOW))
    assert view.throughput_tokens_per_s == 0.0


def test_latency_chart_annotations() -> None:
    snapshot = _snapshot()
    view = performance_view(snapshot, compute_metrics(snapshot, now=NOW))
    chart = view.latency_chart
    assert chart is not None
    assert chart.kind == "line"
    assert chart.labels == ["1", "2"]
    series = chart.series[0]
    assert series.values == [1500, 500]
    assert [a.kind for a in series.annotations] == ["batch", "query"]
    assert [a.errored for a in series.annotations] == [False, True]
    assert series.annotations[1].error == "rate limited"
    assert series.annotations[0].caller == "code-review"


@pytest.mark.parametrize(
    ("latencies", "expected"),
    [
        ([500.0] * 10 + [100.0] * 10, Trend.IMPROVING),
        ([100.0] * 10 + [500.0] * 10, Trend.DEGRADING),
        ([200.0] * 20, Trend.STEADY),
        ([500.0] * 10 + [100.0] * 9, None),
    ],
)
def test_latency_trend(latencies: list[float], expected: Trend | None) -> None:
    snapshot = _snapshot(recent_requests=_requests(latencies))
    assert latency_trend(snapshot.recent_requests) == expected


def test_latency_trend_odd_count_splits_by_position() -> None:
    # first half is 10 entries, second half 11
    snapshot = _snapshot(recent_requests=_requests([100.0] * 10 + [100.0] * 10 + [1000.0]))
    assert latency_trend(snapshot.recent_requests) is Trend.DEGRADING


# ── Dashboard ──


def test_build_dashboard_without_data() -> None:
    views = build_dashboard(DashboardPayload())
    assert views.header is None
    assert views.cost.empty
    assert views.usage.empty
    assert views.performance.empty


def test_build_dashboard_with_data() -> None:
    views = build_dashboard(build_payload(_snapshot(), now=NOW))
    assert views.header is not None
    assert views.header.prompts_remaining == 850
    assert views.header.window_cost_usd == pytest.approx(12.34)
    assert views.header.savings_usd == pytest.approx(55.16)
    assert not views.header.time_low
    assert not views.cost.empty
    assert not views.usage.empty
    assert not views.performance.empty


def test_header_flags_low_time_and_quota_warning() -> None:
    snapshot = _snapshot(
        current_window=_empty_window(prompt_count=900, window_end="2025-01-15T12:10:00Z")
    )
    views = build_dashboard(build_payload(snapshot, now=NOW))
    assert views.header is not None
    assert views.header.time_low
    assert views.header.prompts_level is QuotaLevel.WARNING


def test_cached_payload_renders_identically() -> None:
    payload = build_payload(_snapshot(), now=NOW)
    restored = DashboardPayload.model_validate_json(payload.model_dump_json())
    assert restored == payload
    assert build_dashboard(restored) == build_dashboard(payload)


def test_unknown_request_kind_reported_with_queries() -> None:
    snapshot = _snapshot(
        recent_requests=[
            {"type": "batch", "task_count": 4, "response_time_ms": 100},
            {"type": "stream", "response_time_ms": 300, "input_tokens": 10},
        ]
    )
    view = performance_view(snapshot, compute_metrics(snapshot, now=NOW))
    assert view.request_count == 2
    assert view.batch.count == 1
    assert view.query.count == 1
    assert view.query.avg_tokens == pytest.approx(10)
    assert view.latency_chart is not None
    assert [a.kind for a in view.latency_chart.series[0].annotations] == ["batch", "stream"]
