"""CLI commands for DailyCheck.

This package provides the command-line interface for DailyCheck,
including checklist history, plans, journals and rule settings.
"""

from dailycheck.cli.main import cli, main

__all__ = ["cli", "main"]
