"""Seeded demo telemetry provider."""

import random
from datetime import date

from dailycheck.models import DayTelemetry
from dailycheck.providers.base import BaseTelemetryProvider


class SeededTelemetryProvider(BaseTelemetryProvider):
    """Demo telemetry generated from a seed derived from (date, trader).

    The same trader and date always produce the same figures, so repeated
    calls are identical and tests stay reproducible.
    """

    def __init__(self, journal_base_url: str = "https://journals.example"):
        """Initialize the demo provider.

        Args:
            journal_base_url: Base URL for generated daily journal links.
        """
        self._journal_base_url = journal_base_url.rstrip("/")

    @staticmethod
    def _rng(trader: str, day: date) -> random.Random:
        return random.Random(f"{day.isoformat()}|{trader}")

    def get(self, trader: str, day: date) -> DayTelemetry:
        """Generate telemetry for one trader and day."""
        r = self._rng(trader, day)

        trades = int(r.random() * 5)  # 0..4
        risk_per_trade = round((r.random() * 3 + 0.2) * 10) / 10  # 0.2..3.2%
        dd = round(r.random() * 6 * 10) / 10  # 0..6%
        has_journal = r.random() > 0.3
        all_have_sl = r.random() > 0.15

        equity_open = 10000 + round(r.random() * 1000)
        equity_close = equity_open * (1 + (r.random() - 0.5) * 0.02)

        return DayTelemetry(
            date=day,
            trader=trader,
            trades_count=trades,
            risk_per_trade_pct=risk_per_trade,
            dd_percent=dd,
            all_have_sl=all_have_sl,
            equity_open=round(equity_open, 2),
            equity_close=round(equity_close, 2),
            journal_url=(
                f"{self._journal_base_url}/{trader}/{day.isoformat()}" if has_journal else None
            ),
        )
