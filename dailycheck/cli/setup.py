"""Setup command for DailyCheck CLI."""

import click
from rich.panel import Panel

from dailycheck.cli.context import console, get_data_store


@click.command()
@click.option(
    "--force",
    is_flag=True,
    default=False,
    help="Overwrite an existing config file.",
)
def init(force: bool) -> None:
    """Create the config file and local database.

    \b
    Examples:
      dailycheck init          # Create ~/.config/dailycheck/config.toml
      dailycheck init --force  # Recreate it with defaults
    """
    from dailycheck.config import CONFIG_PATH, create_template_config

    if CONFIG_PATH.exists() and not force:
        console.print(Panel(
            f"[yellow]Config already exists:[/yellow] {CONFIG_PATH}\n\n"
            "Use [cyan]--force[/cyan] to overwrite it.",
            title="[bold yellow]Init[/bold yellow]",
            border_style="yellow",
        ))
        return

    path = create_template_config(CONFIG_PATH)
    store = get_data_store()
    stats = store.get_stats()

    tables = "\n".join(f"  {name}: {count} rows" for name, count in stats.items())
    console.print(Panel(
        f"[green]✓ Config written:[/green] {path}\n"
        f"[green]✓ Database ready:[/green] {store.db_path}\n\n"
        f"{tables}\n\n"
        "[dim]Edit [account] and [backend] before running "
        "[cyan]dailycheck rules load[/cyan].[/dim]",
        title="[bold green]DailyCheck initialized[/bold green]",
        border_style="green",
    ))
