"""Plan and journal commands for DailyCheck CLI.

Handles the pre-trade plan declared before the first trade of the day
and the pre-entry journal written before each new trade.
"""

import re
from datetime import datetime, timezone
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from dailycheck.cli.context import (
    console,
    error_panel,
    get_backend_client,
    get_data_store,
    get_settings,
    parse_date,
    require_config,
)
from dailycheck.models import MOODS

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _validate_time(ctx, param, value: Optional[str]) -> Optional[str]:
    """Click callback accepting HH:MM."""
    if value is not None and not _TIME_RE.match(value):
        raise click.BadParameter(f"'{value}' is not a HH:MM time.")
    return value


def parse_window(text: str):
    """Parse an entry window written as ``HH:MM-HH:MM[=Label]``.

    Args:
        text: Window text, e.g. ``07:00-09:00=London breakout``.

    Returns:
        PlanWindow.

    Raises:
        click.BadParameter: If the text is not a valid window.
    """
    from dailycheck.models import PlanWindow

    span, _, label = text.partition("=")
    start, sep, end = span.strip().partition("-")
    if not sep or not _TIME_RE.match(start) or not _TIME_RE.match(end):
        raise click.BadParameter(f"Invalid window '{text}'. Use HH:MM-HH:MM[=Label].")
    return PlanWindow(start=start, end=end, label=label.strip() or None)


def _num(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:g}"


def _sync(what: str, send) -> None:
    """Push a saved record to the backend, exiting on failure."""
    from dailycheck.errors import BackendError

    try:
        send()
    except BackendError as e:
        error_panel(
            f"[red]{e}[/red]\n\n[dim]The {what} was saved locally.[/dim]",
            title="Sync Failed",
        )
        raise SystemExit(1)
    console.print(f"[green]✓ {what.capitalize()} synced to backend[/green]")


# ==================== Plan ====================


@click.group()
def plan() -> None:
    """Declare and review the pre-trade plan."""


@plan.command("set")
@click.option("--mood", default="", help="Mood before trading.")
@click.option("--trades", type=click.IntRange(min=0), default=0, help="Planned number of trades.")
@click.option("--rr", type=click.FloatRange(min=0), default=0.0, help="Reward:risk target.")
@click.option(
    "-w",
    "--window",
    "windows",
    multiple=True,
    help="Entry window HH:MM-HH:MM[=Label] (repeatable).",
)
@click.option("--high", callback=_validate_time, default=None, help="Expected high time (HH:MM).")
@click.option("--low", callback=_validate_time, default=None, help="Expected low time (HH:MM).")
@click.option("--notes", default=None, help="Free-form notes.")
@click.option("--date", "day_str", default=None, help="Plan date (YYYY-MM-DD, default today).")
@click.option("--sync", is_flag=True, default=False, help="Also save the plan to the backend.")
def plan_set(
    mood: str,
    trades: int,
    rr: float,
    windows: tuple[str, ...],
    high: Optional[str],
    low: Optional[str],
    notes: Optional[str],
    day_str: Optional[str],
    sync: bool,
) -> None:
    """Save today's pre-trade plan.

    Saving again replaces the current plan; earlier versions are kept
    in the plan history.

    \b
    Examples:
      dailycheck plan set --mood Calm --trades 2 --rr 2 \\
        -w "07:00-09:00=London" --high 08:30 --low 20:00
    """
    from dailycheck.config import get_account_number, get_trader
    from dailycheck.engine.rules import format_number, missing_plan_fields
    from dailycheck.models import PreTradePlan

    config = require_config()
    plan_date = parse_date(day_str)

    new_plan = PreTradePlan(
        mood=mood.strip(),
        planned_trades=trades,
        planned_windows=[parse_window(w) for w in windows],
        expected_high_time=high,
        expected_low_time=low,
        rr_target=rr,
        notes=notes,
        submitted_at=datetime.now(timezone.utc),
    )

    store = get_data_store()
    settings = get_settings(config, store)
    store.save_plan(get_trader(config), new_plan, plan_date=plan_date)

    missing = missing_plan_fields(new_plan)
    lines = [f"[green]✓ Plan saved for {plan_date.isoformat()}[/green]"]
    if missing:
        lines.append(f"[yellow]Missing: {', '.join(missing)}[/yellow]")
    if new_plan.rr_target < settings.min_rr_allowed:
        lines.append(
            f"[yellow]RR {format_number(new_plan.rr_target)} is below the minimum "
            f"{format_number(settings.min_rr_allowed)}[/yellow]"
        )
    console.print("\n".join(lines))

    if sync:
        with get_backend_client(config) as client:
            _sync("plan", lambda: client.save_plan(get_account_number(config), new_plan))


@plan.command("show")
@click.option("--date", "day_str", default=None, help="Plan date (YYYY-MM-DD, default today).")
def plan_show(day_str: Optional[str]) -> None:
    """Show the current plan and its history."""
    from dailycheck.config import get_trader
    from dailycheck.engine.rules import format_number

    config = require_config()
    plan_date = parse_date(day_str)
    store = get_data_store()
    entries = store.get_plan_history(get_trader(config), plan_date)

    if not entries:
        console.print(Panel(
            f"[dim]No plan saved for {plan_date.isoformat()}[/dim]",
            title="[bold]Pre-trade Plan[/bold]",
            border_style="dim",
        ))
        return

    current = entries[0].plan
    windows = "\n".join(
        f"  {w.start}-{w.end}" + (f" {w.label}" if w.label else "")
        for w in current.planned_windows
    ) or "  -"
    console.print(Panel(
        f"Mood: {current.mood or '-'}\n"
        f"Planned trades: {current.planned_trades}\n"
        f"RR target: {format_number(current.rr_target)}\n"
        f"Expected high: {current.expected_high_time or '-'} | "
        f"Expected low: {current.expected_low_time or '-'}\n"
        f"Windows:\n{windows}\n"
        f"Notes: {current.notes or '-'}",
        title=f"[bold cyan]Plan {plan_date.isoformat()}[/bold cyan]",
        border_style="cyan",
    ))

    if len(entries) > 1:
        table = Table(title="Plan History", show_header=True, header_style="bold cyan")
        table.add_column("Saved", style="bold")
        table.add_column("Mood")
        table.add_column("Trades", justify="right")
        table.add_column("RR", justify="right")
        for entry in entries:
            table.add_row(
                entry.saved_at.strftime("%Y-%m-%d %H:%M:%S"),
                entry.plan.mood or "-",
                str(entry.plan.planned_trades),
                format_number(entry.plan.rr_target),
            )
        console.print(table)


# ==================== Journal ====================


@click.group()
def journal() -> None:
    """Write and review pre-entry journal entries."""


@journal.command("add")
@click.option("--mood", type=click.Choice(MOODS), required=True, help="Mood before the entry.")
@click.option("--entry", "entry_price", type=click.FloatRange(min=0), required=True, help="Entry price.")
@click.option("--sl", type=click.FloatRange(min=0), required=True, help="Stop-loss price.")
@click.option("--lots", type=click.FloatRange(min=0), required=True, help="Position size in lots.")
@click.option("--rr", type=click.FloatRange(min=0), required=True, help="Expected reward:risk.")
@click.option(
    "--value-per-point",
    type=click.FloatRange(min=0),
    default=1.0,
    show_default=True,
    help="Cash value of one price unit per lot.",
)
@click.option("--equity", type=float, default=None, help="Equity at entry.")
@click.option("--conditions", default="", help="Entry factors and conditions.")
@click.option("-y", "--yes", is_flag=True, default=False, help="Save without confirming warnings.")
@click.option("--sync", is_flag=True, default=False, help="Also save the entry to the backend.")
def journal_add(
    mood: str,
    entry_price: float,
    sl: float,
    lots: float,
    rr: float,
    value_per_point: float,
    equity: Optional[float],
    conditions: str,
    yes: bool,
    sync: bool,
) -> None:
    """Write a pre-entry journal entry.

    Risk figures are computed from entry, stop, size and equity. Entries
    that break the RR or risk limits ask for confirmation.

    \b
    Examples:
      dailycheck journal add --mood Calm --entry 2400 --sl 2395 \\
        --lots 0.5 --rr 2 --value-per-point 100 --equity 10000
    """
    from dailycheck.config import get_account_number, get_trader
    from dailycheck.engine.journal import build_journal_entry, journal_warnings, target_price

    config = require_config()
    store = get_data_store()
    settings = get_settings(config, store)

    entry = build_journal_entry(
        mood=mood,
        entry=entry_price,
        sl=sl,
        lots=lots,
        rr=rr,
        value_per_point=value_per_point,
        equity=equity,
        conditions=conditions,
    )

    tp = target_price(entry_price, sl, rr)
    console.print(Panel(
        f"Risk: {entry.risk_cash:,.2f} ({entry.risk_pct:.2f}%)\n"
        f"Profit at TP: {entry.profit_at_tp:,.2f} | Loss at SL: {entry.loss_at_sl:,.2f}\n"
        f"Target price: {f'{tp:,.2f}' if tp is not None else '-'}",
        title="[bold cyan]Risk[/bold cyan]",
        border_style="cyan",
    ))

    warnings = journal_warnings(rr, entry.risk_pct or 0.0, settings)
    for warning in warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]")
    if warnings and not yes:
        click.confirm("Save anyway?", abort=True)

    store.add_journal_entry(get_trader(config), entry)
    console.print(f"[green]✓ Journal entry saved: {entry.id}[/green]")

    if sync:
        with get_backend_client(config) as client:
            _sync("journal entry", lambda: client.save_journal(get_account_number(config), entry))


@journal.command("list")
@click.option("--date", "day_str", default=None, help="Entry date (YYYY-MM-DD, default today).")
def journal_list(day_str: Optional[str]) -> None:
    """List a day's journal entries."""
    from dailycheck.config import get_trader

    config = require_config()
    entry_date = parse_date(day_str)
    entries = get_data_store().get_journal_entries(get_trader(config), entry_date)

    if not entries:
        console.print(Panel(
            f"[dim]No journal entries for {entry_date.isoformat()}[/dim]",
            title="[bold]Journal[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title=f"Journal {entry_date.isoformat()}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("ID", style="dim")
    table.add_column("Time", style="bold")
    table.add_column("Mood")
    table.add_column("Entry", justify="right")
    table.add_column("SL", justify="right")
    table.add_column("Lots", justify="right")
    table.add_column("RR", justify="right")
    table.add_column("Risk %", justify="right")
    table.add_column("Conditions", max_width=30)

    for entry in entries:
        table.add_row(
            entry.id,
            entry.created_at.strftime("%H:%M:%S") if entry.created_at else "-",
            entry.mood or "-",
            _num(entry.entry),
            _num(entry.sl),
            _num(entry.lots),
            _num(entry.rr),
            f"{entry.risk_pct:.2f}" if entry.risk_pct is not None else "-",
            (entry.conditions[:27] + "...") if len(entry.conditions) > 30 else (entry.conditions or "-"),
        )

    console.print(table)


@journal.command("remove")
@click.argument("entry_id")
def journal_remove(entry_id: str) -> None:
    """Remove a journal entry by id."""
    from dailycheck.config import get_trader

    config = require_config()
    if not get_data_store().remove_journal_entry(get_trader(config), entry_id):
        error_panel(f"[red]No journal entry with id {entry_id}[/red]")
        raise SystemExit(1)
    console.print(f"[green]✓ Removed journal entry {entry_id}[/green]")
