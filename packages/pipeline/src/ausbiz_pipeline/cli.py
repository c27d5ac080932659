"""
cli.py — Click CLI entrypoint.

Usage:
    ausbiz refresh
    ausbiz refresh --simulate --seed 7 --json
    ausbiz sources
    ausbiz serve --port 8000
"""

from __future__ import annotations

import asyncio
import json

import click

from ausbiz_shared.config import settings
from ausbiz_shared.dataset import Dataset
from ausbiz_shared.stats import derived_stats
from ausbiz_pipeline.pipelines.reconcile import (
    ReconciliationController,
    badge_for,
    build_default_chain,
)
from ausbiz_pipeline.utils.logging import configure_logging, get_logger

log = get_logger(__name__)


@click.group()
@click.option(
    "--log-level",
    default=settings.log_level,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level",
)
@click.option(
    "--log-format",
    default=settings.log_format,
    type=click.Choice(["console", "json"]),
    help="Log renderer",
)
def main(log_level: str, log_format: str) -> None:
    """ausbiz dashboard data tools."""
    configure_logging(log_level, log_format)


@main.command()
@click.option(
    "--simulate/--no-simulate",
    default=None,
    help="Force the simulated source on or off (default: from settings).",
)
@click.option("--seed", type=int, default=None, help="Seed for the simulated source.")
@click.option("--offline", is_flag=True, help="Skip both network sources.")
@click.option("--json", "as_json", is_flag=True, help="Print the outcome as JSON.")
def refresh(simulate: bool | None, seed: int | None, offline: bool, as_json: bool) -> None:
    """Run one reconciliation cycle against the built-in dataset."""
    overrides: dict[str, object] = {}
    if simulate is not None:
        overrides["simulate_api"] = simulate
    if seed is not None:
        overrides["simulation_seed"] = seed
    if offline:
        overrides["use_real_api"] = False
        overrides["use_market_api"] = False
    cfg = settings.model_copy(update=overrides)

    dataset = Dataset.with_defaults()
    controller = ReconciliationController.from_settings(dataset, cfg=cfg)
    outcome = asyncio.run(controller.refresh())
    # a fresh controller is never already loading
    assert outcome is not None

    stats = derived_stats(dataset)
    if as_json:
        click.echo(
            json.dumps(
                {
                    "outcome": outcome.to_dict(),
                    "badge": badge_for(outcome.source_label),
                    "stats": stats,
                },
                indent=2,
            )
        )
        return

    badge = badge_for(outcome.source_label)
    click.echo(f"{badge['text']}  ({outcome.state})")
    if outcome.notice:
        click.echo(f"  Info: {outcome.notice}")
    for attempt in outcome.attempts:
        mark = "✓" if attempt.ok else "✗"
        reason = f"  {attempt.reason}" if attempt.reason else ""
        click.echo(f"  {mark} {attempt.source_label:14s} {attempt.duration_ms:6d} ms{reason}")
    if outcome.replaced:
        click.echo(f"  replaced: {', '.join(outcome.replaced)}")
    for name, detail in outcome.rejected.items():
        click.echo(f"  rejected: {name} ({detail})")
    for name, stat in stats.items():
        click.echo(f"  {name:18s} {stat['display']}")


@main.command()
def sources() -> None:
    """List the configured source chain in priority order."""
    chain = build_default_chain(settings)
    if not chain:
        click.echo("No sources enabled; every refresh will fall back to demo data.")
        return

    async def _metadata() -> list[dict]:
        return list(await asyncio.gather(*(s.get_metadata() for s in chain)))

    for i, meta in enumerate(asyncio.run(_metadata()), start=1):
        click.echo(f"  {i}. {meta['source_label']:14s} {meta['source_name']:12s} {meta['description']}")


@main.command()
@click.option("--host", default=settings.api_host, show_default=True)
@click.option("--port", default=settings.api_port, type=int, show_default=True)
@click.option("--reload", is_flag=True, help="Auto-reload on code changes.")
def serve(host: str, port: int, reload: bool) -> None:
    """Serve the dashboard API."""
    import uvicorn

    log.info("serve_start", host=host, port=port)
    uvicorn.run("ausbiz_api.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
