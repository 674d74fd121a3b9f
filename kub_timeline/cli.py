"""CLI entry point for kub-timeline.

Usage:
    kub-timeline timeline FILE [--namespace NS] [--reason R] [--json]
    kub-timeline decode LOCATOR
    kub-timeline allowance ALERT_NAME [--platform P] [--observed SECONDS]
"""

from __future__ import annotations

import logging
import sys
from datetime import timedelta

import click
from rich.console import Console

from kub_timeline import __version__
from kub_timeline.allowances import HistoricalDataError, evaluate
from kub_timeline.config import Config
from kub_timeline.intervals import IntervalDocumentError, dump_intervals, load_intervals
from kub_timeline.locator import namespace_from_locator
from kub_timeline.models import AlertDataKey
from kub_timeline.output import render_allowance, render_locator, render_timeline
from kub_timeline.timeline import intervals_with_reasons, sort_intervals

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="kub-timeline")
@click.option("--config", "config_path", default="", help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Order cluster event intervals and evaluate alert allowances."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    ctx.obj = Config.load(config_path or None)


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--namespace", "-n", default="", help="Only show intervals in this namespace")
@click.option("--reason", "-r", multiple=True, help="Only show these reasons (repeatable)")
@click.option("--json", "as_json", is_flag=True, help="Emit the ordered intervals as JSON")
@click.pass_obj
def timeline(cfg: Config, path: str, namespace: str, reason: tuple[str, ...], as_json: bool):
    """Sort an interval document into timeline order."""
    try:
        intervals = load_intervals(path)
    except IntervalDocumentError as exc:
        console.print(f"[bold red]Invalid interval document:[/bold red] {exc}")
        sys.exit(1)

    ordered = sort_intervals(intervals)
    if namespace:
        ordered = [e for e in ordered if namespace_from_locator(e.locator) == namespace]
    if reason:
        ordered = intervals_with_reasons(ordered, reason)

    if as_json:
        click.echo(dump_intervals(ordered))
        return

    render_timeline(ordered, console, show_point_events=cfg.show_point_events)


@main.command()
@click.argument("locator")
def decode(locator: str):
    """Show the pod and container a locator refers to."""
    render_locator(locator, console)


@main.command()
@click.argument("alert_name")
@click.option("--namespace", "alert_namespace", default="", help="Namespace the alert fires in")
@click.option("--level", default="warning", help="Alert level (e.g., warning, critical)")
@click.option("--release", default="", help="Release under test")
@click.option("--from-release", default="", help="Release upgraded from")
@click.option("--platform", default=None, help="Cloud platform (e.g., aws, gcp)")
@click.option("--architecture", default="amd64", help="CPU architecture")
@click.option("--network", default="", help="Network plugin")
@click.option("--topology", default=None, help="Cluster topology (e.g., ha, single)")
@click.option("--data", "data_path", default="", help="Historical data document")
@click.option("--never-fail", is_flag=True, help="Only flake, never fail, for this alert")
@click.option("--observed", type=float, default=None, help="Seconds the alert was active")
@click.pass_obj
def allowance(
    cfg: Config,
    alert_name: str,
    alert_namespace: str,
    level: str,
    release: str,
    from_release: str,
    platform: str | None,
    architecture: str,
    network: str,
    topology: str | None,
    data_path: str,
    never_fail: bool,
    observed: float | None,
):
    """Show flake and fail thresholds for an alert."""
    # CLI flag overrides
    if data_path:
        cfg.historical_data = data_path
    if never_fail and alert_name not in cfg.never_fail_alerts:
        cfg.never_fail_alerts.append(alert_name)

    if not cfg.historical_data:
        console.print(
            "[bold red]No historical data configured.[/bold red]\n"
            "[dim]Pass --data, set KUB_TIMELINE_HISTORICAL_DATA, or add historical_data to the config file.[/dim]"
        )
        sys.exit(1)

    key = AlertDataKey(
        alert_name=alert_name,
        alert_namespace=alert_namespace,
        alert_level=level,
        release=release,
        from_release=from_release,
        platform=platform if platform is not None else cfg.default_platform,
        architecture=architecture,
        network=network,
        topology=topology if topology is not None else cfg.default_topology,
    )

    try:
        calculator = cfg.allowance_for(alert_name)
        fail_after = calculator.fail_after(key)
        flake_after = calculator.flake_after(key)
        observed_td = timedelta(seconds=observed) if observed is not None else None
        decision = evaluate(calculator, key, observed_td) if observed_td is not None else None
    except HistoricalDataError as exc:
        console.print(f"[bold red]Cannot determine allowance:[/bold red] {exc}")
        sys.exit(1)

    render_allowance(key, flake_after, fail_after, console, observed=observed_td, decision=decision)


@main.command()
def init():
    """Generate a sample configuration file."""
    sample = """\
# kub-timeline configuration
# Place this file at .kub-timeline.yaml in your project or home directory.

# Historical alert percentiles (YAML or JSON list of records):
#   - alert_name: KubePodNotReady
#     alert_namespace: openshift-monitoring
#     release: "4.14"     # quote releases so YAML keeps them as strings
#     platform: aws
#     topology: ha
#     p95: 12.5           # seconds
#     p99: 40.0
#     job_runs: 350
# historical_data: ./alert-percentiles.yaml

# Alerts that may only flake, never fail (e.g., newly added alerts)
never_fail_alerts: []

# Fuzzy matches need at least this many job runs
min_job_runs: 100

# Defaults for alert keys
# default_platform: aws
default_topology: ha

# Output
show_point_events: true
"""
    from pathlib import Path

    out_path = Path.cwd() / ".kub-timeline.yaml"
    if out_path.exists():
        console.print(f"[yellow]Config file already exists:[/yellow] {out_path}")
        return

    out_path.write_text(sample)
    console.print(f"[green]Created config file:[/green] {out_path}")
    console.print("[dim]Edit it to point at your historical alert data.[/dim]")


if __name__ == "__main__":
    main()
