"""Display components for console output."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table

from benefitsengine.core.types import RateStatus
from benefitsengine.engine.resolver import rate_status


if TYPE_CHECKING:
    from datetime import date

    from rich.console import Console

    from benefitsengine.core.models import (
        Enrollment,
        Rate,
        RateHistoryEntry,
        RenewalReport,
    )

STATUS_STYLE = {
    RateStatus.ACTIVE: "green",
    RateStatus.PENDING: "yellow",
    RateStatus.ENDED: "dim",
}


def money(value: Any) -> str:
    return f"${value:,.2f}" if value is not None else "-"


def print_rate_table(
    console: Console, title: str, rates: list[Rate], today: date, current: Rate | None
) -> None:
    """Print a rate table with status, marking the displayed current rate."""
    if not rates:
        console.print(f"  [yellow]⚠[/yellow] No rates for {title}")
        return
    table = Table(title=title, border_style="blue")
    table.add_column("", width=2)
    table.add_column("Rate", justify="right")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Status")
    table.add_column("Class amounts", style="dim")
    for rate in sorted(rates, key=lambda r: r.start_date, reverse=True):
        status = rate_status(rate, today)
        style = STATUS_STYLE[status]
        classes = ", ".join(f"{k}: {money(v)}" for k, v in sorted(rate.class_amounts.items()))
        table.add_row(
            "▶" if current is not None and rate.id == current.id else "",
            money(rate.rate),
            rate.start_date.isoformat(),
            rate.end_date.isoformat() if rate.end_date else "open",
            f"[{style}]{status.value}[/{style}]",
            classes,
        )
    console.print(table)


def print_enrollments(
    console: Console,
    enrollments: list[Enrollment],
    current: dict[str, RateHistoryEntry | None],
) -> None:
    """Print enrollments with their currently open rate entry."""
    if not enrollments:
        console.print("  [yellow]⚠[/yellow] No enrollments")
        return
    table = Table(title="Enrollments", border_style="blue")
    table.add_column("ID", style="dim", width=12)
    table.add_column("Plan")
    table.add_column("Covers")
    table.add_column("Effective")
    table.add_column("Rate", justify="right")
    table.add_column("Employer", justify="right")
    table.add_column("Employee", justify="right")
    for e in enrollments:
        entry = current.get(e.id or "")
        covers = e.dependent_id or "employee"
        if e.is_rider:
            covers += " [dim](rider)[/dim]"
        table.add_row(
            (e.id or "")[:12],
            e.plan_id,
            covers,
            e.effective_date.isoformat(),
            money(entry.rate_amount) if entry else "-",
            money(entry.employer_amount) if entry else "-",
            money(entry.employee_amount) if entry else "-",
        )
    console.print(table)


def print_history(console: Console, enrollment_id: str, entries: list[RateHistoryEntry]) -> None:
    table = Table(title=f"Rate history {enrollment_id}", border_style="dim")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Rate", justify="right")
    table.add_column("Contribution")
    table.add_column("Employer", justify="right")
    table.add_column("Employee", justify="right")
    for entry in entries:
        policy = (
            f"{entry.contribution_type.value} {entry.contribution_value}"
            if entry.contribution_type else "none"
        )
        table.add_row(
            entry.start_date.isoformat(),
            entry.end_date.isoformat() if entry.end_date else "[green]open[/green]",
            money(entry.rate_amount),
            policy,
            money(entry.employer_amount),
            money(entry.employee_amount),
        )
    console.print(table)


def print_renewal_report(console: Console, report: RenewalReport) -> None:
    """Print renewal outcome and the list of enrollments needing manual attention."""
    color = "green" if report.ok else "yellow"
    console.print(
        Panel(
            f"[bold]Renewal date:[/bold] {report.renewal_date}\n"
            f"[bold]Plans:[/bold] {', '.join(report.plan_ids)}\n"
            f"[green]Renewed:[/green] {len(report.succeeded)}  "
            f"[dim]Unchanged:[/dim] {len(report.unchanged)}  "
            f"[red]Failed:[/red] {len(report.failed)}",
            title=f"[{color}]Renewal[/{color}]",
            border_style=color,
        )
    )
    if report.failed:
        table = Table(title="Needs manual remediation", border_style="red")
        table.add_column("Participant")
        table.add_column("Plan")
        table.add_column("Enrollment", style="dim")
        table.add_column("Reason")
        for failure in report.failed:
            table.add_row(
                failure.participant_id, failure.plan_id, failure.enrollment_id, failure.reason
            )
        console.print(table)


def print_db_stats(console: Console, stats: dict[str, Any]) -> None:
    """Print database statistics."""
    table = Table(title="Rate Store Statistics", border_style="blue")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    for key in (
        "groups", "plans", "plan_options", "rates", "participants",
        "dependents", "enrollments", "enrollment_rate_history", "renewals",
    ):
        table.add_row(key.replace("_", " ").title(), str(stats.get(key, 0)))
    table.add_row("Open History Entries", str(stats.get("open_history_entries", 0)))
    for plan_type, count in stats.get("plans_by_type", {}).items():
        table.add_row(f"  {plan_type}", str(count))
    console.print()
    console.print(table)
