"""Day and range compliance aggregation."""

from datetime import date, datetime, timedelta, timezone
from typing import Iterator, NamedTuple, Sequence

from dailycheck.models import ChecklistDay, ExportRow


class DayRate(NamedTuple):
    """Compliance of a single day."""

    rate: float
    passed: int
    total: int


class RangeSummary(NamedTuple):
    """Compliance over a range of days."""

    mean_rate: float
    day_count: int


def day_rate(day: ChecklistDay) -> DayRate:
    """Compute the share of a day's rules that passed.

    Args:
        day: Checklist day.

    Returns:
        DayRate; the rate is 0 for a day without rules.
    """
    total = len(day.rules)
    passed = sum(1 for rule in day.rules if rule.passed)
    rate = passed / total if total > 0 else 0.0
    return DayRate(rate=rate, passed=passed, total=total)


def range_summary(days: Sequence[ChecklistDay]) -> RangeSummary:
    """Average the per-day compliance rates over a range.

    Each day weighs the same regardless of how many rules it has.

    Args:
        days: Consecutive checklist days in ascending order.

    Returns:
        RangeSummary; ``(0.0, 0)`` for an empty range.
    """
    if not days:
        return RangeSummary(mean_rate=0.0, day_count=0)
    rates = [day_rate(day).rate for day in days]
    return RangeSummary(mean_rate=sum(rates) / len(rates), day_count=len(days))


def whole_percent(rate: float) -> int:
    """Convert a 0..1 rate to a whole percent, rounding halves up."""
    return int(rate * 100 + 0.5)


def export_rows(days: Sequence[ChecklistDay]) -> list[ExportRow]:
    """Flatten checklist days into export rows."""
    return [
        ExportRow(
            date=day.date,
            trader=day.trader,
            trades=day.trades_count,
            dd_percent=day.dd_percent,
            pass_rate=whole_percent(day_rate(day).rate),
        )
        for day in days
    ]


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def date_window(focus: date, days: int) -> tuple[date, date]:
    """Get the range of ``days`` calendar days ending on ``focus``.

    Args:
        focus: Last day of the window.
        days: Window length, at least 1.

    Returns:
        Tuple of (start, end).
    """
    if days < 1:
        raise ValueError(f"Window must cover at least one day, got {days}")
    return focus - timedelta(days=days - 1), focus


def as_utc(moment: datetime) -> datetime:
    """Normalize a timestamp to aware UTC; naive timestamps are taken as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def utc_date(moment: datetime) -> date:
    """Calendar date of a timestamp in UTC."""
    return as_utc(moment).date()


def utc_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()
