"""Property-based tests for the database store.

**Feature: daily-checklist**
"""

import tempfile
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from dailycheck.db.store import PLAN_HISTORY_LIMIT, SETTINGS_HISTORY_LIMIT, DataStore
from dailycheck.engine.journal import build_journal_entry
from dailycheck.models import PreTradePlan, RuleRecord, RuleSettings, TradeJournalEntry


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        yield DataStore(db_path)


def _plan(rr: float, submitted_at: datetime = datetime(2025, 1, 15, 6, 0, tzinfo=timezone.utc)):
    return PreTradePlan(mood="Calm", planned_trades=1, rr_target=rr, submitted_at=submitted_at)


class TestDatabaseSchemaCompleteness:
    """
    **Feature: daily-checklist, Property 17: Database Schema Completeness**

    *For any* fresh database, all required tables (plans, journal_entries,
    rule_records, settings_history) should exist.
    """

    def test_schema_completeness(self, temp_db: DataStore):
        """Test that all required tables exist in a fresh database."""
        tables = temp_db.get_tables()

        for table in DataStore.REQUIRED_TABLES:
            assert table in tables, f"Required table '{table}' is missing"

    @given(st.integers(min_value=1, max_value=5))
    @settings(max_examples=10)
    def test_schema_completeness_multiple_instances(self, num_instances: int):
        """
        *For any* number of DataStore instances created with fresh databases,
        all required tables should exist in each.
        """
        with tempfile.TemporaryDirectory() as tmpdir:
            for i in range(num_instances):
                store = DataStore(Path(tmpdir) / f"test_{i}.db")
                tables = store.get_tables()

                for table in DataStore.REQUIRED_TABLES:
                    assert table in tables, f"Required table '{table}' missing in instance {i}"

    def test_stats_start_empty(self, temp_db: DataStore):
        assert temp_db.get_stats() == {table: 0 for table in DataStore.REQUIRED_TABLES}


class TestPlanHistory:
    """
    **Feature: daily-checklist, Property 18: Plan History**

    The latest save is the current plan; history keeps the newest
    PLAN_HISTORY_LIMIT versions, newest first.
    """

    def test_current_plan_is_latest(self, temp_db: DataStore):
        day = date(2025, 1, 15)
        temp_db.save_plan("trader_01", _plan(1.0), plan_date=day)
        temp_db.save_plan("trader_01", _plan(2.0), plan_date=day)

        assert temp_db.get_plan("trader_01", day).rr_target == 2.0
        assert temp_db.get_plans("trader_01")[day].rr_target == 2.0

    def test_history_limit(self, temp_db: DataStore):
        day = date(2025, 1, 15)
        for i in range(PLAN_HISTORY_LIMIT + 5):
            temp_db.save_plan("trader_01", _plan(float(i)), plan_date=day)

        history = temp_db.get_plan_history("trader_01", day)

        assert len(history) == PLAN_HISTORY_LIMIT
        assert [h.plan.rr_target for h in history] == [
            float(i) for i in reversed(range(5, PLAN_HISTORY_LIMIT + 5))
        ]

    def test_plan_date_defaults_to_submission(self, temp_db: DataStore):
        submitted = datetime(2025, 1, 16, 3, 0, tzinfo=timezone(timedelta(hours=7)))
        temp_db.save_plan("trader_01", _plan(2.0, submitted))

        assert temp_db.get_plan("trader_01", date(2025, 1, 15)) is not None

    def test_undated_plan_saved_for_utc_today(self, temp_db: DataStore):
        plan = PreTradePlan(mood="Calm", planned_trades=2, rr_target=2)
        temp_db.save_plan("trader_01", plan)

        today = datetime.now(timezone.utc).date()
        assert temp_db.get_plan("trader_01", today) == plan

    def test_traders_separate(self, temp_db: DataStore):
        day = date(2025, 1, 15)
        temp_db.save_plan("trader_01", _plan(1.0), plan_date=day)

        assert temp_db.get_plan("trader_02", day) is None
        assert temp_db.get_plans("trader_02") == {}

    @given(rr=st.floats(min_value=0, max_value=10, allow_nan=False))
    @settings(max_examples=25)
    def test_plan_persisted(self, rr: float):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = DataStore(Path(tmpdir) / "test.db")
            plan = _plan(rr)
            store.save_plan("trader_01", plan)

            assert store.get_plan("trader_01", date(2025, 1, 15)) == plan


class TestJournalOperations:
    """
    **Feature: daily-checklist, Property 19: Journal Add/Remove Consistency**

    *For any* journal entry added, it should be retrievable; after removal,
    it should not be.
    """

    def _entry(self, hour: int = 7):
        return build_journal_entry(
            "Calm", 2400, 2395, 0.5, 2, 100, 10000,
            created_at=datetime(2025, 1, 15, hour, 0, tzinfo=timezone.utc),
        )

    def test_add_retrieve(self, temp_db: DataStore):
        entry = self._entry()
        temp_db.add_journal_entry("trader_01", entry)

        assert temp_db.get_journal_entries("trader_01", date(2025, 1, 15)) == [entry]
        assert temp_db.get_journals("trader_01") == {date(2025, 1, 15): [entry]}

    def test_add_remove(self, temp_db: DataStore):
        first, second = self._entry(7), self._entry(8)
        temp_db.add_journal_entry("trader_01", first)
        temp_db.add_journal_entry("trader_01", second)

        assert temp_db.remove_journal_entry("trader_01", first.id) is True
        assert temp_db.get_journal_entries("trader_01") == [second]

    def test_remove_missing(self, temp_db: DataStore):
        assert temp_db.remove_journal_entry("trader_01", "nope") is False

    def test_entries_filtered_by_date(self, temp_db: DataStore):
        temp_db.add_journal_entry("trader_01", self._entry())

        assert temp_db.get_journal_entries("trader_01", date(2025, 1, 16)) == []

    def test_undated_entry(self, temp_db: DataStore):
        entry = TradeJournalEntry(id="remote_1", mood="Neutral", rr=2)
        temp_db.add_journal_entry("trader_01", entry, entry_date=date(2025, 1, 15))

        assert temp_db.get_journal_entries("trader_01", date(2025, 1, 15)) == [entry]


class TestRuleRecordsAndSettings:
    """
    **Feature: daily-checklist, Property 20: Stored Rules and Settings**

    Loaded rule records and saved settings read back unchanged.
    """

    def test_records_none_before_load(self, temp_db: DataStore):
        assert temp_db.get_rule_records(5440722) is None

    def test_records_round_trip(self, temp_db: DataStore):
        records = [
            RuleRecord.model_validate({
                "id": 1,
                "name": "Max Risk 5%",
                "condition": {"max_risk_percent": 5},
                "status": "not_executed",
            }),
            RuleRecord(id=2, name="No Overtrade", condition={"max_positions": 5}),
        ]
        temp_db.save_rule_records(5440722, records)

        loaded = temp_db.get_rule_records(5440722)

        assert [r.name for r in loaded] == ["Max Risk 5%", "No Overtrade"]
        assert loaded[0].model_dump()["status"] == "not_executed"
        assert loaded[1].condition == {"max_positions": 5}

    def test_empty_collection_is_not_none(self, temp_db: DataStore):
        temp_db.save_rule_records(5440722, [])
        assert temp_db.get_rule_records(5440722) == []

    def test_settings(self, temp_db: DataStore):
        assert temp_db.get_settings() is None

        temp_db.save_settings(RuleSettings(max_risk_percent=2.0))
        temp_db.save_settings(RuleSettings(max_risk_percent=3.0))

        assert temp_db.get_settings() == RuleSettings(max_risk_percent=3.0)

    def test_settings_history_limit(self, temp_db: DataStore):
        for i in range(SETTINGS_HISTORY_LIMIT + 5):
            temp_db.save_settings(RuleSettings(max_positions=i))

        assert temp_db.get_stats()["settings_history"] == SETTINGS_HISTORY_LIMIT
        assert temp_db.get_settings().max_positions == SETTINGS_HISTORY_LIMIT + 4
