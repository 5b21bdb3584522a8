"""Assemble checklist days from telemetry, settings, plans and journals."""

import itertools
import logging
import threading
from datetime import date, datetime, timezone
from typing import Mapping, NamedTuple, Optional, Sequence

from dailycheck.engine.aggregate import as_utc, utc_date, utc_today
from dailycheck.engine.rules import evaluate
from dailycheck.models import (
    ChecklistDay,
    DayTelemetry,
    PreTradePlan,
    RuleSettings,
    TradeJournalEntry,
)
from dailycheck.providers.base import BaseTelemetryProvider

logger = logging.getLogger(__name__)


def build_day(
    telemetry: DayTelemetry,
    settings: RuleSettings,
    plan: Optional[PreTradePlan] = None,
    journal_entries: Optional[Sequence[TradeJournalEntry]] = None,
) -> ChecklistDay:
    """Evaluate one day and combine the verdicts with its telemetry.

    Args:
        telemetry: The day's trading figures.
        settings: Active rule settings.
        plan: Current pre-trade plan for the day.
        journal_entries: Pre-entry journal entries for the day.

    Returns:
        A new ChecklistDay.
    """
    return ChecklistDay(
        date=telemetry.date,
        trader=telemetry.trader,
        equity_open=telemetry.equity_open,
        equity_close=telemetry.equity_close,
        dd_percent=telemetry.dd_percent,
        journal_url=telemetry.journal_url,
        trades_count=telemetry.trades_count,
        rules=evaluate(telemetry, settings, plan, journal_entries),
    )


def build_range(
    provider: BaseTelemetryProvider,
    trader: str,
    start: date,
    end: date,
    settings: RuleSettings,
    plans: Optional[Mapping[date, PreTradePlan]] = None,
    journals: Optional[Mapping[date, Sequence[TradeJournalEntry]]] = None,
) -> list[ChecklistDay]:
    """Build the checklist for every day of a range.

    Args:
        provider: Telemetry source.
        trader: Trader id.
        start: First day.
        end: Last day (inclusive).
        settings: Active rule settings.
        plans: Current plan per date.
        journals: Journal entries per date.

    Returns:
        Checklist days in ascending date order.
    """
    plans = plans or {}
    journals = journals or {}
    days = [
        build_day(t, settings, plans.get(t.date), journals.get(t.date, []))
        for t in provider.get_range(trader, start, end)
    ]
    return sorted(days, key=lambda d: d.date)


# Undated records sort before every dated one.
_UNDATED = datetime.min.replace(tzinfo=timezone.utc)


def _sort_key(moment: Optional[datetime]) -> datetime:
    return as_utc(moment) if moment is not None else _UNDATED


def plans_by_date(
    plans: Sequence[PreTradePlan], fallback_date: Optional[date] = None
) -> dict[date, PreTradePlan]:
    """Pick the current plan for each UTC date.

    The most recently submitted plan of a date wins. Plans without a
    submission time belong to ``fallback_date`` (today in UTC when not
    given) and lose to any dated plan of that day.

    Args:
        plans: Plans in the order they were saved.
        fallback_date: Date for plans without a submission time.

    Returns:
        Mapping of date to its current plan.
    """
    fallback_date = fallback_date or utc_today()
    current: dict[date, PreTradePlan] = {}
    for plan in plans:
        day = utc_date(plan.submitted_at) if plan.submitted_at else fallback_date
        existing = current.get(day)
        if existing is None or _sort_key(plan.submitted_at) >= _sort_key(existing.submitted_at):
            current[day] = plan
    return current


def journals_by_date(
    entries: Sequence[TradeJournalEntry], fallback_date: Optional[date] = None
) -> dict[date, list[TradeJournalEntry]]:
    """Group journal entries by the UTC date they were written on.

    Entries without a creation time belong to ``fallback_date`` (today in
    UTC when not given).
    """
    fallback_date = fallback_date or utc_today()
    grouped: dict[date, list[TradeJournalEntry]] = {}
    for entry in sorted(entries, key=lambda e: _sort_key(e.created_at)):
        day = utc_date(entry.created_at) if entry.created_at else fallback_date
        grouped.setdefault(day, []).append(entry)
    return grouped


class RangeRequest(NamedTuple):
    """Identifies one load of a date range."""

    token: int
    trader: str
    start: date
    end: date
    settings: RuleSettings


class ActiveRange:
    """Tracks the single active range and drops stale results.

    Each ``begin`` supersedes the previous request. Only results for the
    latest request can be committed; late completions of older requests
    are discarded.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._tokens = itertools.count(1)
        self._active: Optional[RangeRequest] = None
        self._days: list[ChecklistDay] = []

    def begin(self, trader: str, start: date, end: date, settings: RuleSettings) -> RangeRequest:
        """Start a new range load, superseding any request in flight."""
        with self._lock:
            request = RangeRequest(next(self._tokens), trader, start, end, settings)
            self._active = request
            return request

    def commit(self, request: RangeRequest, days: Sequence[ChecklistDay]) -> bool:
        """Store the results of a request if it is still the active one.

        Args:
            request: Request the results belong to.
            days: Evaluated days, in any order.

        Returns:
            True if committed, False if the request was superseded.
        """
        with self._lock:
            if self._active is None or request.token != self._active.token:
                logger.debug(
                    "Dropping stale range %s..%s (request %d)",
                    request.start,
                    request.end,
                    request.token,
                )
                return False
            self._days = sorted(days, key=lambda d: d.date)
            return True

    @property
    def days(self) -> list[ChecklistDay]:
        """Days committed for the active range."""
        with self._lock:
            return list(self._days)
