"""Typer CLI for Swarm Monitor — serve, show and watch commands."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer

from swarmmon.config import Config
from swarmmon.constants import DEFAULT_REFRESH_INTERVAL_S, DEFAULT_WARNING_THRESHOLD
from swarmmon.models.usage import DashboardPayload, PricingConfig, UsageSnapshot

app = typer.Typer(
    name="swarmmon",
    help="Swarm Monitor — live dashboard for rate-limited API usage.",
    invoke_without_command=True,
)

UsageFileOption = Annotated[
    Path | None,
    typer.Option("--usage-file", help="Path to the usage JSON file"),
]
IntervalOption = Annotated[
    float,
    typer.Option("--interval", min=1.0, help="Polling interval in seconds"),
]
InputPriceOption = Annotated[
    float,
    typer.Option("--input-price", min=0.0, help="Comparison price per million input tokens"),
]
OutputPriceOption = Annotated[
    float,
    typer.Option("--output-price", min=0.0, help="Comparison price per million output tokens"),
]
ThresholdOption = Annotated[
    int,
    typer.Option("--warning-threshold", min=1, max=100, help="Quota warning level (percent)"),
]

_DEFAULT_PRICING = PricingConfig()


def _build_config(
    usage_file: Path | None,
    interval: float,
    input_price: float,
    output_price: float,
    warning_threshold: int,
) -> Config:
    return Config(
        usage_file=usage_file,
        refresh_interval=interval,
        pricing=PricingConfig(input_per_million=input_price, output_per_million=output_price),
        warning_threshold=warning_threshold,
    )


@app.callback(invoke_without_command=True)
def serve(
    ctx: typer.Context,
    usage_file: UsageFileOption = None,
    interval: IntervalOption = DEFAULT_REFRESH_INTERVAL_S,
    input_price: InputPriceOption = _DEFAULT_PRICING.input_per_million,
    output_price: OutputPriceOption = _DEFAULT_PRICING.output_per_million,
    warning_threshold: ThresholdOption = DEFAULT_WARNING_THRESHOLD,
) -> None:
    """Start the Swarm Monitor desktop dashboard."""
    if ctx.invoked_subcommand is not None:
        return
    config = _build_config(usage_file, interval, input_price, output_price, warning_threshold)
    from swarmmon.ui.app import run_app

    run_app(config)


@app.command()
def show(
    usage_file: UsageFileOption = None,
    input_price: InputPriceOption = _DEFAULT_PRICING.input_per_million,
    output_price: OutputPriceOption = _DEFAULT_PRICING.output_per_million,
    warning_threshold: ThresholdOption = DEFAULT_WARNING_THRESHOLD,
) -> None:
    """Read the usage file once and print metrics for every tab."""
    from swarmmon.data.parser import parse_usage_file
    from swarmmon.services.metrics import compute_metrics
    from swarmmon.services.status import format_time_remaining, status_summary
    from swarmmon.services.tabs import build_dashboard

    config = _build_config(
        usage_file, DEFAULT_REFRESH_INTERVAL_S, input_price, output_price, warning_threshold
    )
    snapshot = parse_usage_file(config.usage_path, config.max_file_size)
    if snapshot is None:
        typer.echo(f"No usage data at {config.usage_path}")
        raise typer.Exit(code=1)

    metrics = compute_metrics(snapshot, config.pricing)
    payload = DashboardPayload(snapshot=snapshot, metrics=metrics, pricing=config.pricing)
    views = build_dashboard(payload, config.warning_threshold)

    typer.echo(status_summary(snapshot, metrics, config.warning_threshold).text)
    typer.echo(f"  Prompts remaining:   {metrics.prompts_remaining}")
    typer.echo(f"  Window time left:    {format_time_remaining(metrics.window_time_remaining_ms)}")
    typer.echo(f"  Comparison cost:     ${metrics.comparison_cost_usd:.4f}")
    typer.echo(
        f"  Saved:               ${metrics.savings_usd:.4f} ({metrics.savings_percent:.1f}%)"
    )

    cost = views.cost
    typer.echo("\nCost Savings")
    if cost.empty:
        typer.echo(f"  {cost.empty_message}")
    else:
        typer.echo(f"  Actual ${cost.total_actual_usd:.4f} vs ${cost.total_comparison_usd:.4f}")
        typer.echo(f"  Saved ${cost.total_saved_usd:.4f} ({cost.savings_percent:.1f}%)")
        typer.echo(f"  {cost.total_prompts} prompts, ${cost.avg_cost_per_prompt:.4f}/prompt")

    usage = views.usage
    typer.echo("\nUsage Patterns")
    if usage.empty:
        typer.echo(f"  {usage.empty_message}")
    else:
        typer.echo(f"  Quota used: {usage.quota_percent:.0f}% ({usage.quota_level})")
        if usage.has_callers:
            for caller, tasks in usage.caller_tasks.items():
                typer.echo(f"  {caller}: {tasks} tasks")

    perf = views.performance
    typer.echo("\nPerformance")
    if perf.empty:
        typer.echo(f"  {perf.empty_message}")
    else:
        trend = f" ({perf.trend})" if perf.trend else ""
        typer.echo(f"  Avg response: {round(perf.avg_response_time_ms)}ms{trend}")
        typer.echo(f"  Throughput: {round(perf.throughput_tokens_per_s)} tokens/s")
        typer.echo(f"  Error rate: {perf.error_rate * 100:.1f}% ({perf.error_count})")
        typer.echo(f"  Batch efficiency: {perf.batch_efficiency * 100:.0f}%")


@app.command()
def watch(
    usage_file: UsageFileOption = None,
    interval: IntervalOption = DEFAULT_REFRESH_INTERVAL_S,
    warning_threshold: ThresholdOption = DEFAULT_WARNING_THRESHOLD,
) -> None:
    """Poll the usage file and print a status line on every refresh."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    config = _build_config(
        usage_file,
        interval,
        _DEFAULT_PRICING.input_per_million,
        _DEFAULT_PRICING.output_per_million,
        warning_threshold,
    )
    try:
        asyncio.run(_do_watch(config))
    except KeyboardInterrupt:
        typer.echo("Stopped.")


async def _do_watch(config: Config, stop: asyncio.Event | None = None) -> None:
    """Run a poll-only watcher until ``stop`` is set."""
    from swarmmon.services.metrics import compute_metrics
    from swarmmon.services.status import status_summary
    from swarmmon.services.watcher import UsageWatcher

    def on_update(snapshot: UsageSnapshot | None) -> None:
        metrics = compute_metrics(snapshot, config.pricing) if snapshot else None
        typer.echo(status_summary(snapshot, metrics, config.warning_threshold).text)

    watcher = UsageWatcher(config)
    watcher.set_callback(on_update)
    watcher.start()
    try:
        await (stop or asyncio.Event()).wait()
    finally:
        watcher.stop()
