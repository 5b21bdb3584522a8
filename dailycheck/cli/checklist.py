"""Checklist commands for DailyCheck CLI.

Shows a day's rule verdicts, the compliance history of a date range,
and exports the history to CSV.
"""

from pathlib import Path
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from dailycheck.cli.context import (
    console,
    get_backend_client,
    get_data_store,
    get_settings,
    parse_date,
    require_config,
)

HISTORY_WINDOWS = ["7", "14", "30", "60"]

_LEVEL_STYLES = {"info": "green", "warning": "yellow", "error": "red"}


def _get_provider(config: dict):
    """Get the telemetry provider from the ``[telemetry]`` config table."""
    from dailycheck.providers.demo import SeededTelemetryProvider

    telemetry = config.get("telemetry", {})
    return SeededTelemetryProvider(
        journal_base_url=telemetry.get("journal_base_url", "https://journals.example")
    )


def _load_context(config: dict, store, remote: bool, focus=None) -> tuple[dict, dict]:
    """Load plans and journal entries keyed by date.

    Args:
        config: Configuration dictionary.
        store: Local data store.
        remote: Read from the backend instead of the local store.
        focus: Date for backend records that carry no timestamp.

    Returns:
        Tuple of (plans by date, journal entries by date).
    """
    from dailycheck.config import get_account_number, get_trader
    from dailycheck.engine.checklist import journals_by_date, plans_by_date

    if not remote:
        trader = get_trader(config)
        return store.get_plans(trader), store.get_journals(trader)

    account = get_account_number(config)
    with get_backend_client(config) as client:
        plans = client.fetch_plans(account)
        journals = client.fetch_journals(account)
    return plans_by_date(plans, focus), journals_by_date(journals, focus)


def _build_days(config: dict, start, end, remote: bool) -> list:
    from dailycheck.config import get_trader
    from dailycheck.engine.checklist import build_range

    store = get_data_store()
    settings = get_settings(config, store)
    plans, journals = _load_context(config, store, remote, focus=end)
    return build_range(
        _get_provider(config),
        get_trader(config),
        start,
        end,
        settings,
        plans=plans,
        journals=journals,
    )


def _badge(rule) -> str:
    """Render a rule's status badge."""
    color = _LEVEL_STYLES.get(rule.level or "info", "white")
    if rule.passed:
        return f"[{color}]PASS[/{color}]"
    label = "FAIL" if rule.level == "error" else "WARN"
    return f"[{color}]{label}[/{color}]"


def _rate_style(percent: int) -> str:
    if percent >= 80:
        return "green"
    if percent >= 50:
        return "yellow"
    return "red"


def _fmt(value) -> str:
    return "-" if value is None else str(value)


@click.command()
@click.option("--date", "day_str", default=None, help="Day to check (YYYY-MM-DD, default today).")
@click.option(
    "--remote",
    is_flag=True,
    default=False,
    help="Read plans and journals from the backend.",
)
def day(day_str: Optional[str], remote: bool) -> None:
    """Show the checklist for one day.

    \b
    Examples:
      dailycheck day                    # Today
      dailycheck day --date 2025-01-15  # A past day
    """
    from dailycheck.engine.aggregate import day_rate, whole_percent

    config = require_config()
    focus = parse_date(day_str)

    days = _build_days(config, focus, focus, remote)
    checklist = days[0]
    rate = day_rate(checklist)
    percent = whole_percent(rate.rate)
    style = _rate_style(percent)

    table = Table(
        title=f"Checklist {checklist.date.isoformat()} ({checklist.trader})",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Status", justify="center")
    table.add_column("Rule", style="bold")
    table.add_column("Value", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Notes", max_width=40)

    for rule in checklist.rules:
        table.add_row(
            _badge(rule),
            rule.title,
            _fmt(rule.value),
            _fmt(rule.limit),
            rule.notes or "-",
        )

    console.print(table)

    equity = (
        f"{checklist.equity_open:,.2f} → {checklist.equity_close:,.2f}"
        if checklist.equity_open is not None and checklist.equity_close is not None
        else "-"
    )
    console.print(Panel(
        f"Trades: {checklist.trades_count} | "
        f"DD: {_fmt(checklist.dd_percent)}% | "
        f"Equity: {equity}\n"
        f"Journal: {checklist.journal_url or '-'}\n\n"
        f"[bold]Pass rate:[/bold] [{style}]{percent}%[/{style}] "
        f"({rate.passed}/{rate.total} rules)",
        title="[bold]Summary[/bold]",
        border_style=style,
    ))


@click.command()
@click.option(
    "-d",
    "--days",
    type=click.Choice(HISTORY_WINDOWS),
    default="7",
    show_default=True,
    help="Number of days to show.",
)
@click.option("--end", "end_str", default=None, help="Last day (YYYY-MM-DD, default today).")
@click.option(
    "--remote",
    is_flag=True,
    default=False,
    help="Read plans and journals from the backend.",
)
def history(days: str, end_str: Optional[str], remote: bool) -> None:
    """Show compliance history for a range of days.

    \b
    Examples:
      dailycheck history          # Last 7 days
      dailycheck history -d 30    # Last 30 days
    """
    from dailycheck.engine.aggregate import date_window, day_rate, range_summary, whole_percent

    config = require_config()
    start, end = date_window(parse_date(end_str), int(days))
    checklist_days = _build_days(config, start, end, remote)

    table = Table(
        title=f"Compliance {start.isoformat()} → {end.isoformat()}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Date", style="bold")
    table.add_column("Trades", justify="right")
    table.add_column("DD %", justify="right")
    table.add_column("Pass Rate", justify="right")
    table.add_column("Failed", max_width=40)

    for checklist in checklist_days:
        percent = whole_percent(day_rate(checklist).rate)
        style = _rate_style(percent)
        failed = [rule.title for rule in checklist.rules if not rule.passed]
        table.add_row(
            checklist.date.isoformat(),
            str(checklist.trades_count),
            _fmt(checklist.dd_percent),
            f"[{style}]{percent}%[/{style}]",
            ", ".join(failed) or "-",
        )

    console.print(table)

    summary = range_summary(checklist_days)
    console.print(
        f"\n[bold]{summary.day_count} days[/bold], "
        f"avg pass rate {whole_percent(summary.mean_rate)}%"
    )


@click.command()
@click.option(
    "-d",
    "--days",
    type=click.Choice(HISTORY_WINDOWS),
    default="7",
    show_default=True,
    help="Number of days to export.",
)
@click.option("--end", "end_str", default=None, help="Last day (YYYY-MM-DD, default today).")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("checklists.csv"),
    show_default=True,
    help="Destination CSV file.",
)
@click.option(
    "--remote",
    is_flag=True,
    default=False,
    help="Read plans and journals from the backend.",
)
def export(days: str, end_str: Optional[str], output: Path, remote: bool) -> None:
    """Export compliance history to CSV.

    Columns: date, trader, trades, dd_percent, pass_rate.

    \b
    Examples:
      dailycheck export -d 30 -o march.csv
    """
    from dailycheck.engine.aggregate import date_window, export_rows
    from dailycheck.engine.export import write_csv

    config = require_config()
    start, end = date_window(parse_date(end_str), int(days))
    rows = export_rows(_build_days(config, start, end, remote))

    if not write_csv(rows, output):
        console.print("[yellow]Nothing to export.[/yellow]")
        return

    console.print(f"[green]✓ Exported {len(rows)} days to {output}[/green]")
