"""Pydantic models for Swarm Monitor."""

from swarmmon.models.usage import (
    DailyTotal,
    DashboardPayload,
    DerivedMetrics,
    PricingConfig,
    ProviderInfo,
    ProviderPricing,
    RequestLog,
    UsageSnapshot,
    UsageWindow,
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
    StatusLevel,
    StatusSummary,
    Trend,
    UsagePatternsView,
)

__all__ = [
    "ChartData",
    "ChartSeries",
    "CostSavingsView",
    "DailyTotal",
    "DashboardPayload",
    "DashboardViews",
    "DerivedMetrics",
    "HeaderStats",
    "KindBreakdown",
    "PerformanceView",
    "PointAnnotation",
    "PricingConfig",
    "ProviderInfo",
    "ProviderPricing",
    "QuotaLevel",
    "RequestLog",
    "StatusLevel",
    "StatusSummary",
    "Trend",
    "UsagePatternsView",
    "UsageSnapshot",
    "UsageWindow",
]
