"""Chart-ready view models produced by the tab aggregators."""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ChartKind = Literal["bar", "line", "doughnut", "pie"]


class QuotaLevel(StrEnum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class Trend(StrEnum):
    IMPROVING = "improving"
    DEGRADING = "degrading"
    STEADY = "steady"


class StatusLevel(StrEnum):
    NO_DATA = "no_data"
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"
    EXPIRED = "expired"


class PointAnnotation(BaseModel):
    """Per-point detail for the latency series."""

    model_config = ConfigDict(frozen=True)

    kind: str
    errored: bool = False
    caller: str | None = None
    error: str | None = None


class ChartSeries(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    values: list[float] = Field(default_factory=list)
    annotations: list[PointAnnotation] = Field(default_factory=list)


class ChartData(BaseModel):
    """One chart: axis labels plus one or more series."""

    model_config = ConfigDict(frozen=True)

    kind: ChartKind
    labels: list[str] = Field(default_factory=list)
    series: list[ChartSeries] = Field(default_factory=list)


class CostSavingsView(BaseModel):
    model_config = ConfigDict(frozen=True)

    empty: bool = False
    empty_message: str = ""
    total_actual_usd: float = 0.0
    total_comparison_usd: float = 0.0
    total_saved_usd: float = 0.0
    savings_percent: float = 0.0
    total_prompts: int = 0
    avg_cost_per_prompt: float = 0.0
    daily_chart: ChartData | None = None


class UsagePatternsView(BaseModel):
    model_config = ConfigDict(frozen=True)

    empty: bool = False
    empty_message: str = ""
    prompts_used: int = 0
    prompts_remaining: int = 0
    quota_percent: float = 0.0
    quota_level: QuotaLevel = QuotaLevel.NORMAL
    caller_tasks: dict[str, int] = Field(default_factory=dict)
    has_callers: bool = False
    input_tokens: int = 0
    output_tokens: int = 0
    input_share: float = 0.0
    output_share: float = 0.0
    daily_prompts_chart: ChartData | None = None
    token_chart: ChartData | None = None
    caller_chart: ChartData | None = None


class KindBreakdown(BaseModel):
    """Averages for one request kind."""

    model_config = ConfigDict(frozen=True)

    count: int = 0
    avg_tokens: float = 0.0
    avg_cost_usd: float = 0.0


class PerformanceView(BaseModel):
    model_config = ConfigDict(frozen=True)

    empty: bool = False
    empty_message: str = ""
    request_count: int = 0
    avg_response_time_ms: float = 0.0
    throughput_tokens_per_s: float = 0.0
    error_count: int = 0
    error_rate: float = 0.0
    batch_efficiency: float = 0.0
    trend: Trend | None = None
    batch: KindBreakdown = Field(default_factory=KindBreakdown)
    query: KindBreakdown = Field(default_factory=KindBreakdown)
    latency_chart: ChartData | None = None


class HeaderStats(BaseModel):
    """Top-of-dashboard window status."""

    model_config = ConfigDict(frozen=True)

    prompts_remaining: int = 0
    prompts_used: int = 0
    window_cost_usd: float = 0.0
    time_remaining_ms: int = 0
    savings_usd: float = 0.0
    prompts_level: QuotaLevel = QuotaLevel.NORMAL
    time_low: bool = False


class DashboardViews(BaseModel):
    model_config = ConfigDict(frozen=True)

    header: HeaderStats | None = None
    cost: CostSavingsView
    usage: UsagePatternsView
    performance: PerformanceView


class StatusSummary(BaseModel):
    """Compact status for the status bar / notification surface."""

    model_config = ConfigDict(frozen=True)

    level: StatusLevel
    text: str
    tooltip: str = ""
