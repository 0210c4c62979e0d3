"""Console output and logging setup for the CLI."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from benefitsengine.console.display import (
    print_db_stats,
    print_enrollments,
    print_history,
    print_rate_table,
    print_renewal_report,
)


if TYPE_CHECKING:
    from datetime import date

    from benefitsengine.core.models import (
        Enrollment,
        Rate,
        RateHistoryEntry,
        RenewalReport,
    )


class EngineConsole:
    """Rich console interface for engine commands."""

    def __init__(self, verbose: bool = False) -> None:
        self.console = Console()
        self.verbose = verbose

    def setup_logging(self, level: str = "INFO") -> None:
        logging.basicConfig(
            level=level if self.verbose else "WARNING",
            format="%(message)s",
            handlers=[
                RichHandler(
                    console=self.console, rich_tracebacks=True, show_time=False, show_path=False
                )
            ],
            force=True,
        )

    def print_rate_table(
        self, title: str, rates: list[Rate], today: date, current: Rate | None
    ) -> None:
        print_rate_table(self.console, title, rates, today, current)

    def print_enrollments(
        self, enrollments: list[Enrollment], current: dict[str, RateHistoryEntry | None]
    ) -> None:
        print_enrollments(self.console, enrollments, current)

    def print_history(self, enrollment_id: str, entries: list[RateHistoryEntry]) -> None:
        print_history(self.console, enrollment_id, entries)

    def print_renewal_report(self, report: RenewalReport) -> None:
        print_renewal_report(self.console, report)

    def print_db_stats(self, stats: dict[str, Any]) -> None:
        print_db_stats(self.console, stats)

    def print_success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, error: str) -> None:
        self.console.print()
        self.console.print(
            Panel(f"[red]{error}[/red]", title="[red]Error[/red]", border_style="red")
        )
