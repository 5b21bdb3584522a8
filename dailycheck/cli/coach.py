"""Coaching command for DailyCheck CLI."""

from datetime import date
from typing import Optional

import click
from rich.panel import Panel

from dailycheck.cli.context import console


@click.command()
@click.option(
    "--day",
    "cycle_day",
    type=click.IntRange(1, 9),
    default=None,
    help="Day of the nine-day cycle (default: today's).",
)
def mantra(cycle_day: Optional[int]) -> None:
    """Show the trading mantras for today.

    \b
    Examples:
      dailycheck mantra         # Today's mantras
      dailycheck mantra --day 3
    """
    from dailycheck.coaching import COACH_MANTRAS, suggested_mantra

    selected = COACH_MANTRAS[cycle_day - 1] if cycle_day else suggested_mantra(date.today())

    def section(title: str, lines: list[str]) -> str:
        return f"[bold]{title}[/bold]\n" + "\n".join(f"  • {line}" for line in lines)

    console.print(Panel(
        "\n\n".join([
            section("Before trading", selected.pre),
            section("In trade", selected.in_trade),
            section("After trading", selected.post),
        ]),
        title=f"[bold magenta]Day {selected.day}: {selected.theme}[/bold magenta]",
        border_style="magenta",
    ))
