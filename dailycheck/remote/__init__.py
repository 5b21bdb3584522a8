"""Backend API client for DailyCheck."""

from dailycheck.remote.client import BackendClient

__all__ = ["BackendClient"]
