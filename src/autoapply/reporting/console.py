"""Rich-powered console output for foreground sessions."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from autoapply.models import AutomationSession, LogEntry, LogSeverity

_console = Console()

_SEVERITY_STYLES: dict[LogSeverity, str] = {
    LogSeverity.INFO: "cyan",
    LogSeverity.SUCCESS: "bold green",
    LogSeverity.WARNING: "yellow",
    LogSeverity.ERROR: "bold red",
}


def print_banner() -> None:
    """Display the startup banner."""
    _console.print(
        Panel.fit(
            "[bold cyan]AutoApply[/bold cyan]  Automated job search and application",
            border_style="cyan",
        )
    )


def print_log_entry(entry: LogEntry) -> None:
    style = _SEVERITY_STYLES.get(entry.severity, "")
    _console.print(
        f"  [dim]{entry.time[11:19]}[/dim]  "
        f"[{style}]{entry.severity.value:<8}[/{style}]  {entry.message}"
    )


def print_session_report(session: AutomationSession) -> None:
    """Display a session summary table."""
    table = Table(title="Session Report", show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Status", session.status.value)
    table.add_row("Jobs found", str(session.jobs_found))
    table.add_row("Applications submitted", str(session.applications_submitted))
    table.add_row("Applications skipped", str(session.applications_skipped))
    table.add_row("Session ID", session.id)
    table.add_row("Started", session.start_time)
    table.add_row("Last update", session.last_update_time)

    _console.print()
    _console.print(table)
    _console.print()


async def follow_session(
    fetch: Callable[[], Awaitable[AutomationSession]],
    interval: float,
    on_entry: Callable[[LogEntry], None] = print_log_entry,
) -> AutomationSession:
    """Poll *fetch* every *interval* seconds until the session is terminal.

    Log entries are handed to *on_entry* once each, in order. The final
    snapshot is returned.
    """
    printed = 0
    while True:
        session = await fetch()
        for entry in session.logs[printed:]:
            on_entry(entry)
        printed = len(session.logs)
        if session.status.is_terminal:
            return session
        await asyncio.sleep(interval)
