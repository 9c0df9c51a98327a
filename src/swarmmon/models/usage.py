"""Usage snapshot and derived metric models."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from swarmmon.constants import DEFAULT_INPUT_PER_MILLION, DEFAULT_OUTPUT_PER_MILLION

logger = logging.getLogger(__name__)


def parse_instant(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _default_if_none(model: type[BaseModel], value: Any, info: ValidationInfo) -> Any:
    """A null optional figure falls back to the field default."""
    if value is None and info.field_name is not None:
        return model.model_fields[info.field_name].get_default(call_default_factory=True)
    return value


class UsageWindow(BaseModel):
    """The currently-active rate-limit accounting period."""

    model_config = ConfigDict(frozen=True)

    window_start: str
    window_end: str
    prompt_count: int
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    estimated_cost_usd: float = 0.0

    @field_validator(
        "total_input_tokens", "total_output_tokens", "estimated_cost_usd", mode="before"
    )
    @classmethod
    def _null_figures(cls, value: Any, info: ValidationInfo) -> Any:
        return _default_if_none(cls, value, info)

    @property
    def window_end_at(self) -> datetime | None:
        return parse_instant(self.window_end)


class DailyTotal(BaseModel):
    """One calendar day's aggregate usage."""

    model_config = ConfigDict(frozen=True)

    date: str
    prompt_count: int = 0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    estimated_cost_usd: float = 0.0

    @field_validator(
        "prompt_count",
        "total_input_tokens",
        "total_output_tokens",
        "estimated_cost_usd",
        mode="before",
    )
    @classmethod
    def _null_figures(cls, value: Any, info: ValidationInfo) -> Any:
        return _default_if_none(cls, value, info)

    @property
    def short_label(self) -> str:
        """Month-day label (``MM-DD``) for chart axes."""
        return self.date[5:] if len(self.date) > 5 else self.date


class RequestLog(BaseModel):
    """One logged API call."""

    model_config = ConfigDict(frozen=True)

    timestamp: str = ""
    # anything other than "batch" is reported as a single query
    type: str = "query"
    task_count: int = Field(default=1, ge=1)
    input_tokens: int = 0
    output_tokens: int = 0
    cost_usd: float = 0.0
    response_time_ms: float = Field(default=0.0, ge=0)
    caller: str | None = None
    error: str | None = None

    @field_validator(
        "timestamp",
        "type",
        "task_count",
        "input_tokens",
        "output_tokens",
        "cost_usd",
        "response_time_ms",
        mode="before",
    )
    @classmethod
    def _null_fields(cls, value: Any, info: ValidationInfo) -> Any:
        return _default_if_none(cls, value, info)

    @property
    def failed(self) -> bool:
        return bool(self.error)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class ProviderPricing(BaseModel):
    model_config = ConfigDict(frozen=True)

    input_per_million: float = 0.0
    output_per_million: float = 0.0

    @field_validator("input_per_million", "output_per_million", mode="before")
    @classmethod
    def _null_prices(cls, value: Any, info: ValidationInfo) -> Any:
        return _default_if_none(cls, value, info)


class ProviderInfo(BaseModel):
    """Provider block written by the usage tracker (informational)."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    pricing: ProviderPricing = Field(default_factory=ProviderPricing)

    @field_validator("name", "pricing", mode="before")
    @classmethod
    def _null_fields(cls, value: Any, info: ValidationInfo) -> Any:
        return _default_if_none(cls, value, info)


def _valid_entries(value: Any, model: type[BaseModel], field_name: str) -> list[BaseModel]:
    if not isinstance(value, list | tuple):
        return []
    entries: list[BaseModel] = []
    for index, item in enumerate(value):
        try:
            entries.append(model.model_validate(item))
        except ValidationError:
            logger.debug("Dropping invalid %s entry at index %d", field_name, index)
    return entries


class UsageSnapshot(BaseModel):
    """One complete, validated read of the usage file."""

    model_config = ConfigDict(frozen=True)

    current_window: UsageWindow
    daily_totals: tuple[DailyTotal, ...] = ()
    recent_requests: tuple[RequestLog, ...] = ()
    provider: ProviderInfo | None = None

    @field_validator("daily_totals", mode="before")
    @classmethod
    def _backfill_daily_totals(cls, value: Any) -> list[BaseModel]:
        return _valid_entries(value, DailyTotal, "daily_totals")

    @field_validator("recent_requests", mode="before")
    @classmethod
    def _backfill_recent_requests(cls, value: Any) -> list[BaseModel]:
        return _valid_entries(value, RequestLog, "recent_requests")

    @field_validator("provider", mode="before")
    @classmethod
    def _drop_malformed_provider(cls, value: Any) -> ProviderInfo | None:
        if value is None or isinstance(value, ProviderInfo):
            return value
        try:
            return ProviderInfo.model_validate(value)
        except ValidationError:
            logger.debug("Ignoring malformed provider block")
            return None


class PricingConfig(BaseModel):
    """Reference-tier pricing used for the comparison cost."""

    model_config = ConfigDict(frozen=True)

    input_per_million: float = Field(default=DEFAULT_INPUT_PER_MILLION, ge=0)
    output_per_million: float = Field(default=DEFAULT_OUTPUT_PER_MILLION, ge=0)


class DerivedMetrics(BaseModel):
    """Values derived from a snapshot and a pricing config."""

    model_config = ConfigDict(frozen=True)

    comparison_cost_usd: float
    savings_usd: float
    savings_percent: float
    window_time_remaining_ms: int
    prompts_remaining: int
    # None when the request log is empty
    avg_response_time_ms: float | None = None
    batch_efficiency: float | None = None
    error_rate: float | None = None


class DashboardPayload(BaseModel):
    """Message pushed to the display layer and cached for restore."""

    model_config = ConfigDict(frozen=True)

    snapshot: UsageSnapshot | None = None
    metrics: DerivedMetrics | None = None
    pricing: PricingConfig = Field(default_factory=PricingConfig)

    @property
    def has_data(self) -> bool:
        return self.snapshot is not None and self.metrics is not None
