"""Rule settings commands for DailyCheck CLI.

Settings can be edited locally, loaded from the backend's trade rules,
and written back to those rules.
"""

from typing import Optional

import click
from pydantic import ValidationError
from rich.table import Table

from dailycheck.cli.context import (
    console,
    error_panel,
    get_backend_client,
    get_data_store,
    get_settings,
    require_config,
)

DEFAULT_SESSION_TZ = "Asia/Ho_Chi_Minh"


def _settings_table(settings, title: str = "Rule Settings") -> Table:
    """Render settings as a two-column table."""
    from dailycheck.engine.rules import format_number

    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="bold")
    table.add_column("Value", justify="right")

    for name, value in settings.model_dump(exclude={"allowed_sessions"}).items():
        if isinstance(value, bool):
            shown = "[green]yes[/green]" if value else "[dim]no[/dim]"
        else:
            shown = format_number(value)
        table.add_row(name, shown)

    sessions = "\n".join(s.describe() for s in settings.allowed_sessions) or "-"
    table.add_row("allowed_sessions", sessions)
    return table


def parse_session(text: str, tz: str):
    """Parse a session written as ``HH:MM-HH:MM[=Label]``."""
    from dailycheck.cli.plan import parse_window
    from dailycheck.models import RuleSession

    window = parse_window(text)
    return RuleSession(start=window.start, end=window.end, tz=tz, label=window.label)


@click.group()
def rules() -> None:
    """View and manage rule settings."""


@rules.command("show")
def rules_show() -> None:
    """Show the effective rule settings."""
    config = require_config()
    store = get_data_store()
    source = "local store" if store.get_settings() is not None else "config file"
    console.print(_settings_table(get_settings(config, store)))
    console.print(f"[dim]Source: {source}[/dim]")


@rules.command("set")
@click.option("--max-risk", type=float, default=None, help="Max risk % per trade.")
@click.option("--max-positions", type=int, default=None, help="Max concurrent positions.")
@click.option("--max-lots", type=float, default=None, help="Max lots per trade.")
@click.option("--max-sl", type=float, default=None, help="Max stop-loss % of account.")
@click.option("--max-dd", type=float, default=None, help="Max daily drawdown %.")
@click.option("--min-rr", type=float, default=None, help="Minimum reward:risk.")
@click.option("--max-sl-tp-change", type=float, default=None, help="Max SL/TP change %.")
@click.option(
    "--session",
    "sessions",
    multiple=True,
    help="Allowed session HH:MM-HH:MM[=Label] (repeatable, replaces all).",
)
@click.option("--tz", default=DEFAULT_SESSION_TZ, show_default=True, help="Time zone for --session.")
@click.option(
    "--outside-session-violation/--outside-session-allowed",
    default=None,
    help="Whether trading outside sessions is a violation.",
)
@click.option(
    "--require-plan/--no-require-plan",
    default=None,
    help="Require a pre-trade plan before the first trade.",
)
@click.option(
    "--require-journal/--no-require-journal",
    default=None,
    help="Require a pre-entry journal before each trade.",
)
def rules_set(
    max_risk: Optional[float],
    max_positions: Optional[int],
    max_lots: Optional[float],
    max_sl: Optional[float],
    max_dd: Optional[float],
    min_rr: Optional[float],
    max_sl_tp_change: Optional[float],
    sessions: tuple[str, ...],
    tz: str,
    outside_session_violation: Optional[bool],
    require_plan: Optional[bool],
    require_journal: Optional[bool],
) -> None:
    """Change rule settings locally.

    Only the options given are changed.

    \b
    Examples:
      dailycheck rules set --max-risk 2 --min-rr 2
      dailycheck rules set --session "07:00-11:00=London AM" --session "19:00-23:00=NY"
    """
    from dailycheck.models import RuleSettings

    config = require_config()
    store = get_data_store()
    current = get_settings(config, store)

    updates = {
        "max_risk_percent": max_risk,
        "max_positions": max_positions,
        "max_lots_per_trade": max_lots,
        "max_sl_percent": max_sl,
        "max_daily_dd_percent": max_dd,
        "min_rr_allowed": min_rr,
        "max_sl_tp_change_percent": max_sl_tp_change,
        "violate_outside_session": outside_session_violation,
        "require_first_trade_goal": require_plan,
        "require_journal_before_new_trade": require_journal,
    }
    updates = {k: v for k, v in updates.items() if v is not None}
    if sessions:
        updates["allowed_sessions"] = [
            parse_session(s, tz).model_dump() for s in sessions
        ]

    if not updates:
        console.print("[yellow]Nothing to change.[/yellow]")
        return

    try:
        settings = RuleSettings.model_validate({**current.model_dump(), **updates})
    except ValidationError as e:
        error_panel(f"[red]Invalid settings:[/red]\n{e}")
        raise SystemExit(1)

    store.save_settings(settings)
    console.print(_settings_table(settings, title="Updated Rule Settings"))


@rules.command("load")
def rules_load() -> None:
    """Load trade rules from the backend and merge them into settings."""
    from dailycheck.config import get_account_number
    from dailycheck.engine.reconcile import apply_rules, classify

    config = require_config()
    account = get_account_number(config)
    store = get_data_store()

    with get_backend_client(config) as client:
        records = client.fetch_rules(account)

    if not records:
        console.print(
            f"[yellow]No rules returned for account {account}; settings unchanged.[/yellow]"
        )
        return

    store.save_rule_records(account, records)
    settings = apply_rules(records, get_settings(config, store))
    store.save_settings(settings)

    matched = sum(1 for r in records if classify(r) is not None)
    console.print(
        f"[green]✓ Loaded {len(records)} rules ({matched} mapped to settings)[/green]"
    )
    console.print(_settings_table(settings))


@rules.command("save")
def rules_save() -> None:
    """Write the current settings back to the backend's trade rules.

    Rules must have been loaded with ``dailycheck rules load`` first.
    """
    from dailycheck.config import get_account_number
    from dailycheck.engine.reconcile import patch_rules
    from dailycheck.errors import BackendError, ConfigurationError

    config = require_config()
    account = get_account_number(config)
    store = get_data_store()
    settings = get_settings(config, store)

    try:
        patched = patch_rules(settings, store.get_rule_records(account))
        with get_backend_client(config) as client:
            client.save_rules(patched)
    except ConfigurationError as e:
        error_panel(
            f"[red]{e}[/red]\n\n"
            "Run [cyan]dailycheck rules load[/cyan] first."
        )
        raise SystemExit(1)
    except BackendError as e:
        error_panel(f"[red]{e}[/red]", title="Save Failed")
        raise SystemExit(1)

    store.save_rule_records(account, patched)
    console.print(f"[green]✓ Saved {len(patched)} rules to backend[/green]")
