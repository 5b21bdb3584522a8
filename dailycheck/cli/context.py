"""Helpers shared by DailyCheck CLI commands."""

from datetime import date, datetime
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

console = Console()


def error_panel(message: str, title: str = "Error") -> None:
    """Print an error panel."""
    console.print(Panel(
        message,
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


def require_config() -> dict:
    """Load configuration or exit with an error panel."""
    from dailycheck.config import CONFIG_PATH, load_config

    config = load_config(CONFIG_PATH)
    if config is None:
        error_panel(
            "[red]Configuration not found.[/red]\n\n"
            "Run [cyan]dailycheck init[/cyan] to create a config file."
        )
        raise SystemExit(1)
    return config


def get_data_store():
    """Get the data store instance."""
    from dailycheck.config import DB_PATH
    from dailycheck.db.store import DataStore

    return DataStore(DB_PATH)


def get_backend_client(config: dict):
    """Get a backend client from the ``[backend]`` config table."""
    from dailycheck.config import DEFAULT_BASE_URL
    from dailycheck.remote.client import DEFAULT_TIMEOUT_SECONDS, BackendClient

    backend = config.get("backend", {})
    return BackendClient(
        base_url=backend.get("base_url", DEFAULT_BASE_URL),
        timeout=float(backend.get("timeout", DEFAULT_TIMEOUT_SECONDS)),
    )


def get_settings(config: dict, store=None):
    """Get the effective settings.

    Settings saved in the store win over the config file's ``[rules]``.
    """
    from dailycheck.config import settings_from_config

    store = store or get_data_store()
    return store.get_settings() or settings_from_config(config)


def parse_date(value: Optional[str]) -> date:
    """Parse a YYYY-MM-DD option, defaulting to today in UTC."""
    from dailycheck.engine.aggregate import utc_today

    if not value:
        return utc_today()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise click.BadParameter(f"Invalid date '{value}'. Use YYYY-MM-DD.")
