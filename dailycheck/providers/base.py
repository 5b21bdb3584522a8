"""Base telemetry provider interface for DailyCheck."""

from abc import ABC, abstractmethod
from datetime import date

from dailycheck.engine.aggregate import iter_dates
from dailycheck.models import DayTelemetry


class BaseTelemetryProvider(ABC):
    """Abstract source of end-of-day trading telemetry.

    Implementations (demo generator, broker export, backend API) must
    return one record per trader per calendar day.
    """

    @abstractmethod
    def get(self, trader: str, day: date) -> DayTelemetry:
        """Get telemetry for one trader and day.

        Args:
            trader: Trader id.
            day: Calendar date (UTC).

        Returns:
            DayTelemetry for that day.
        """
        pass

    def get_range(self, trader: str, start: date, end: date) -> list[DayTelemetry]:
        """Get telemetry for every calendar day from start to end inclusive.

        Args:
            trader: Trader id.
            start: First day.
            end: Last day.

        Returns:
            One record per day in ascending date order; empty if end < start.
        """
        return [self.get(trader, day) for day in iter_dates(start, end)]
