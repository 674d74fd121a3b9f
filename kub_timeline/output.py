"""Rich terminal output for timelines and allowance decisions."""

from __future__ import annotations

from datetime import timedelta

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from kub_timeline.allowances import AllowanceDecision
from kub_timeline.locator import container_from, pod_from, reason_from
from kub_timeline.models import AlertDataKey, EventInterval
from kub_timeline.reasons import (
    is_container_lifecycle_reason,
    is_container_readiness_reason,
    is_kubelet_readiness_check_reason,
    is_pod_lifecycle_reason,
)


def reason_style(reason: str) -> str:
    """Colour for a reason by the lifecycle set it belongs to."""
    if is_pod_lifecycle_reason(reason):
        return "cyan"
    if is_container_lifecycle_reason(reason):
        return "blue"
    if is_container_readiness_reason(reason):
        return "green"
    if is_kubelet_readiness_check_reason(reason):
        return "bold red"
    return "white"


def render_timeline(
    intervals: list[EventInterval],
    console: Console,
    show_point_events: bool = True,
) -> None:
    """Render an ordered timeline as a table."""
    table = Table(title="Event Timeline", show_lines=False)
    table.add_column("From", style="dim", no_wrap=True)
    table.add_column("Duration", justify="right")
    table.add_column("Locator")
    table.add_column("Reason")
    table.add_column("Message")

    shown = 0
    for interval in intervals:
        if interval.is_point and not show_point_events:
            continue
        reason = reason_from(interval.message)
        table.add_row(
            interval.from_.strftime("%H:%M:%S"),
            "-" if interval.is_point else _format_duration(interval.duration),
            interval.locator,
            Text(reason, style=reason_style(reason)),
            interval.message,
        )
        shown += 1

    console.print(table)
    console.print(f"[dim]{shown} of {len(intervals)} intervals shown[/dim]")


def render_locator(locator: str, console: Console) -> None:
    """Show what a locator decodes to."""
    pod = pod_from(locator)
    container = container_from(locator)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("field", style="bold")
    table.add_column("value")

    if pod.is_empty:
        table.add_row("Pod", Text("incomplete (namespace, name and uid required)", style="yellow"))
    else:
        table.add_row("Namespace", pod.namespace)
        table.add_row("Pod", pod.name)
        table.add_row("UID", pod.uid)
    if not container.is_empty:
        table.add_row("Container", container.container_name)

    console.print(Panel(table, title=f"[bold]{locator}[/bold]", border_style="dim"))


def render_allowance(
    key: AlertDataKey,
    flake_after: timedelta,
    fail_after: timedelta,
    console: Console,
    observed: timedelta | None = None,
    decision: AllowanceDecision | None = None,
) -> None:
    """Render the thresholds for an alert key and an optional decision."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("metric", style="bold")
    table.add_column("value", justify="right")

    table.add_row("Flake after", _format_duration(flake_after))
    table.add_row("Fail after", _format_duration(fail_after))

    border = "dim"
    if observed is not None and decision is not None:
        style = {
            AllowanceDecision.PASS: "green",
            AllowanceDecision.FLAKE: "yellow",
            AllowanceDecision.FAIL: "bold red",
        }[decision]
        table.add_row("Observed", _format_duration(observed))
        table.add_row("Decision", Text(decision.value.upper(), style=style))
        border = style

    console.print(
        Panel(table, title=f"[bold]{key.alert_name}[/bold]", subtitle=key.describe(), border_style=border)
    )


def _format_duration(d: timedelta) -> str:
    total = int(d.total_seconds())
    hours, rem = divmod(total, 3600)
    minutes, seconds = divmod(rem, 60)
    if hours:
        return f"{hours}h{minutes:02d}m{seconds:02d}s"
    if minutes:
        return f"{minutes}m{seconds:02d}s"
    return f"{d.total_seconds():.1f}s"
