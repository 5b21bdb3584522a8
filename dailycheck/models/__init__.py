"""Data models for DailyCheck."""

from dailycheck.models.settings import RuleSession, RuleSettings
from dailycheck.models.telemetry import DayTelemetry
from dailycheck.models.checklist import ChecklistDay, ExportRow, RuleCheck, RuleLevel
from dailycheck.models.plan import PlanHistoryEntry, PlanWindow, PreTradePlan
from dailycheck.models.journal import MOODS, TradeJournalEntry
from dailycheck.models.rule_record import RuleRecord

__all__ = [
    "RuleSession",
    "RuleSettings",
    "DayTelemetry",
    "ChecklistDay",
    "ExportRow",
    "RuleCheck",
    "RuleLevel",
    "PlanHistoryEntry",
    "PlanWindow",
    "PreTradePlan",
    "MOODS",
    "TradeJournalEntry",
    "RuleRecord",
]
