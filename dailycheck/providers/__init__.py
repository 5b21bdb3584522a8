"""Telemetry providers for DailyCheck."""

from dailycheck.providers.base import BaseTelemetryProvider
from dailycheck.providers.demo import SeededTelemetryProvider

__all__ = ["BaseTelemetryProvider", "SeededTelemetryProvider"]
