"""SQLite data store for DailyCheck."""

import json
import logging
import sqlite3
import uuid
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from dailycheck.engine.aggregate import utc_date, utc_today
from dailycheck.models import (
    PlanHistoryEntry,
    PreTradePlan,
    RuleRecord,
    RuleSettings,
    TradeJournalEntry,
)

logger = logging.getLogger(__name__)

# Saved versions kept per trader and date.
PLAN_HISTORY_LIMIT = 20

# Saved settings versions kept.
SETTINGS_HISTORY_LIMIT = 20


class DataStore:
    """SQLite-based data store for DailyCheck."""

    REQUIRED_TABLES = [
        "plans",
        "journal_entries",
        "rule_records",
        "settings_history",
    ]

    def __init__(self, db_path: Path):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            # Plan history, newest version per trader/date is the current plan
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS plans (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    trader TEXT NOT NULL,
                    date TEXT NOT NULL,
                    saved_at TEXT NOT NULL,
                    payload TEXT NOT NULL
                )
            """)

            # Pre-entry journal entries (append-only, removable by id)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS journal_entries (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL,
                    trader TEXT NOT NULL,
                    date TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    payload TEXT NOT NULL,
                    UNIQUE(trader, id)
                )
            """)

            # Last rule-record collection loaded from the backend
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS rule_records (
                    account_number TEXT PRIMARY KEY,
                    loaded_at TEXT NOT NULL,
                    payload TEXT NOT NULL
                )
            """)

            # Settings history
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS settings_history (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    saved_at TEXT NOT NULL,
                    payload TEXT NOT NULL
                )
            """)

            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Plans ====================

    def save_plan(
        self,
        trader: str,
        plan: PreTradePlan,
        plan_date: Optional[date] = None,
        saved_at: Optional[datetime] = None,
    ) -> PlanHistoryEntry:
        """Save a plan as the current plan for its date.

        Earlier versions stay in the history, which keeps the most recent
        ``PLAN_HISTORY_LIMIT`` saves per trader and date.

        Args:
            trader: Trader id.
            plan: Plan to save.
            plan_date: Date the plan is for; defaults to its submission date,
                or today (UTC) when it has none.
            saved_at: Save time; defaults to now (UTC).

        Returns:
            The new history entry.
        """
        if plan_date is None:
            plan_date = utc_date(plan.submitted_at) if plan.submitted_at else utc_today()
        saved_at = saved_at or datetime.now(timezone.utc)
        entry = PlanHistoryEntry(
            id=f"{plan_date.isoformat()}-{uuid.uuid4().hex[:12]}",
            saved_at=saved_at,
            plan=plan,
        )

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO plans (id, trader, date, saved_at, payload)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    entry.id,
                    trader,
                    plan_date.isoformat(),
                    saved_at.isoformat(),
                    plan.model_dump_json(),
                ),
            )
            cursor.execute(
                """
                DELETE FROM plans
                WHERE trader = ? AND date = ? AND seq NOT IN (
                    SELECT seq FROM plans
                    WHERE trader = ? AND date = ?
                    ORDER BY seq DESC
                    LIMIT ?
                )
                """,
                (
                    trader,
                    plan_date.isoformat(),
                    trader,
                    plan_date.isoformat(),
                    PLAN_HISTORY_LIMIT,
                ),
            )
            conn.commit()
        finally:
            conn.close()
        return entry

    def get_plan_history(self, trader: str, plan_date: date) -> list[PlanHistoryEntry]:
        """Get saved versions of a date's plan, newest first.

        Args:
            trader: Trader id.
            plan_date: Plan date.

        Returns:
            Up to ``PLAN_HISTORY_LIMIT`` history entries.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, saved_at, payload
                FROM plans
                WHERE trader = ? AND date = ?
                ORDER BY seq DESC
                """,
                (trader, plan_date.isoformat()),
            )
            return [
                PlanHistoryEntry(
                    id=row["id"],
                    saved_at=datetime.fromisoformat(row["saved_at"]),
                    plan=PreTradePlan.model_validate_json(row["payload"]),
                )
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()

    def get_plan(self, trader: str, plan_date: date) -> Optional[PreTradePlan]:
        """Get the current plan for a date.

        Returns:
            The most recently saved plan, or None if none was saved.
        """
        history = self.get_plan_history(trader, plan_date)
        return history[0].plan if history else None

    def get_plans(self, trader: str) -> dict[date, PreTradePlan]:
        """Get the current plan of every date.

        Args:
            trader: Trader id.

        Returns:
            Mapping of date to its most recently saved plan.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT date, payload
                FROM plans
                WHERE trader = ?
                ORDER BY seq
                """,
                (trader,),
            )
            # Later saves overwrite earlier ones
            return {
                date.fromisoformat(row["date"]): PreTradePlan.model_validate_json(row["payload"])
                for row in cursor.fetchall()
            }
        finally:
            conn.close()

    # ==================== Journal ====================

    def add_journal_entry(
        self,
        trader: str,
        entry: TradeJournalEntry,
        entry_date: Optional[date] = None,
    ) -> None:
        """Append a pre-entry journal entry.

        Args:
            trader: Trader id.
            entry: Entry to save.
            entry_date: Date the entry belongs to; defaults to its creation date,
                or today (UTC) when it has none.
        """
        if entry_date is None:
            entry_date = utc_date(entry.created_at) if entry.created_at else utc_today()
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO journal_entries (id, trader, date, created_at, payload)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    entry.id,
                    trader,
                    entry_date.isoformat(),
                    entry.created_at.isoformat() if entry.created_at else "",
                    entry.model_dump_json(),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def remove_journal_entry(self, trader: str, entry_id: str) -> bool:
        """Remove a journal entry by id.

        Returns:
            True if an entry was removed.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM journal_entries WHERE trader = ? AND id = ?",
                (trader, entry_id),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def get_journal_entries(
        self, trader: str, entry_date: Optional[date] = None
    ) -> list[TradeJournalEntry]:
        """Get journal entries in the order they were written.

        Args:
            trader: Trader id.
            entry_date: Optional date filter. If None, returns all entries.

        Returns:
            List of journal entries.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            if entry_date:
                cursor.execute(
                    """
                    SELECT payload FROM journal_entries
                    WHERE trader = ? AND date = ?
                    ORDER BY seq
                    """,
                    (trader, entry_date.isoformat()),
                )
            else:
                cursor.execute(
                    """
                    SELECT payload FROM journal_entries
                    WHERE trader = ?
                    ORDER BY seq
                    """,
                    (trader,),
                )
            return [
                TradeJournalEntry.model_validate_json(row["payload"])
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()

    def get_journals(self, trader: str) -> dict[date, list[TradeJournalEntry]]:
        """Get journal entries grouped by date."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT date, payload FROM journal_entries
                WHERE trader = ?
                ORDER BY seq
                """,
                (trader,),
            )
            grouped: dict[date, list[TradeJournalEntry]] = {}
            for row in cursor.fetchall():
                grouped.setdefault(date.fromisoformat(row["date"]), []).append(
                    TradeJournalEntry.model_validate_json(row["payload"])
                )
            return grouped
        finally:
            conn.close()

    # ==================== Rule records ====================

    def save_rule_records(self, account_number: int, records: Sequence[RuleRecord]) -> None:
        """Replace the stored rule-record collection of an account.

        Args:
            account_number: Trading account number.
            records: Records as loaded from the backend.
        """
        payload = json.dumps(
            [r.model_dump(mode="json", exclude_unset=True) for r in records]
        )
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT OR REPLACE INTO rule_records (account_number, loaded_at, payload)
                VALUES (?, ?, ?)
                """,
                (str(account_number), datetime.now(timezone.utc).isoformat(), payload),
            )
            conn.commit()
        finally:
            conn.close()
        logger.debug("Stored %d rule records for account %s", len(records), account_number)

    def get_rule_records(self, account_number: int) -> Optional[list[RuleRecord]]:
        """Get the last rule-record collection loaded for an account.

        Returns:
            The records, or None if nothing was ever loaded.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT payload FROM rule_records WHERE account_number = ?",
                (str(account_number),),
            )
            row = cursor.fetchone()
            if row is None:
                return None
            return [RuleRecord.model_validate(item) for item in json.loads(row["payload"])]
        finally:
            conn.close()

    # ==================== Settings ====================

    def save_settings(self, settings: RuleSettings) -> None:
        """Save settings as the current settings.

        Only the most recent ``SETTINGS_HISTORY_LIMIT`` versions are kept.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO settings_history (saved_at, payload) VALUES (?, ?)",
                (datetime.now(timezone.utc).isoformat(), settings.model_dump_json()),
            )
            cursor.execute(
                """
                DELETE FROM settings_history
                WHERE seq NOT IN (
                    SELECT seq FROM settings_history
                    ORDER BY seq DESC
                    LIMIT ?
                )
                """,
                (SETTINGS_HISTORY_LIMIT,),
            )
            conn.commit()
        finally:
            conn.close()

    def get_settings(self) -> Optional[RuleSettings]:
        """Get the most recently saved settings.

        Returns:
            RuleSettings, or None if none were saved.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT payload FROM settings_history ORDER BY seq DESC LIMIT 1"
            )
            row = cursor.fetchone()
            if row:
                return RuleSettings.model_validate_json(row["payload"])
            return None
        finally:
            conn.close()

    def get_stats(self) -> dict:
        """Get database statistics.

        Returns:
            Dictionary with table record counts.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            stats = {}
            for table in self.REQUIRED_TABLES:
                cursor.execute(f"SELECT COUNT(*) as count FROM {table}")
                stats[table] = cursor.fetchone()["count"]
            return stats
        finally:
            conn.close()
