"""Property-based tests for rule evaluation.

**Feature: daily-checklist**
"""

from datetime import date, datetime, timezone

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from dailycheck.engine.rules import RULE_KEYS, evaluate, format_number, missing_plan_fields
from dailycheck.models import DayTelemetry, PlanWindow, PreTradePlan, RuleSettings, TradeJournalEntry


def _telemetry(**overrides) -> DayTelemetry:
    data = {
        "date": date(2025, 1, 15),
        "trader": "trader_01",
        "trades_count": 2,
        "risk_per_trade_pct": 1.5,
        "dd_percent": 1.0,
        "all_have_sl": True,
    }
    data.update(overrides)
    return DayTelemetry(**data)


def _complete_plan(rr: float = 2.0) -> PreTradePlan:
    return PreTradePlan(
        mood="Calm",
        planned_trades=2,
        planned_windows=[PlanWindow(start="07:00", end="09:00", label="London")],
        expected_high_time="08:30",
        expected_low_time="20:00",
        rr_target=rr,
        submitted_at=datetime(2025, 1, 15, 6, 0, tzinfo=timezone.utc),
    )


def _journal_entry() -> TradeJournalEntry:
    return TradeJournalEntry(
        id="2025-01-15-abcd1234",
        created_at=datetime(2025, 1, 15, 7, 30, tzinfo=timezone.utc),
        mood="Focused",
        entry=2400.0,
        lots=0.5,
        sl=2395.0,
        rr=2.0,
        value_per_point=100.0,
    )


def _by_key(checks):
    return {check.key: check for check in checks}


telemetry_strategy = st.builds(
    DayTelemetry,
    date=st.dates(min_value=date(2020, 1, 1), max_value=date(2030, 12, 31)),
    trader=st.sampled_from(["trader_01", "trader_02"]),
    trades_count=st.integers(min_value=0, max_value=20),
    risk_per_trade_pct=st.floats(min_value=0, max_value=10, allow_nan=False),
    dd_percent=st.one_of(st.none(), st.floats(min_value=0, max_value=20, allow_nan=False)),
    all_have_sl=st.booleans(),
)


class TestScenarios:
    """
    **Feature: daily-checklist, Property 1: Core Rule Verdicts**

    Known telemetry and default settings produce the documented verdicts.
    """

    def test_clean_day_passes_core_rules(self):
        checks = _by_key(evaluate(_telemetry(), RuleSettings()))

        for key in [
            "max_risk_percent",
            "no_overtrade",
            "stop_loss_required",
            "max_sl_percent",
            "max_daily_dd",
        ]:
            assert checks[key].passed, f"{key} should pass"
            assert checks[key].level == "info"

    def test_overtrade(self):
        checks = _by_key(evaluate(_telemetry(trades_count=6), RuleSettings(max_positions=5)))
        rule = checks["no_overtrade"]

        assert rule.passed is False
        assert rule.value == 6
        assert rule.limit == 5
        assert rule.level == "warning"
        assert rule.notes == "Too many positions: 6"

    def test_no_plan_fails_rr_target(self):
        checks = _by_key(evaluate(_telemetry(), RuleSettings(require_first_trade_goal=True)))
        rule = checks["rr_target_declared"]

        assert rule.passed is False
        assert rule.level == "warning"
        assert rule.value is None
        assert "not declared" in rule.notes

    def test_no_journal_fails_journal_rule(self):
        checks = _by_key(
            evaluate(_telemetry(), RuleSettings(require_journal_before_new_trade=True), None, [])
        )
        rule = checks["journal_before_new_trade"]

        assert rule.passed is False
        assert rule.value == 0
        assert rule.level == "warning"

    def test_missing_stop_loss_is_error(self):
        checks = _by_key(evaluate(_telemetry(all_have_sl=False), RuleSettings()))
        rule = checks["stop_loss_required"]

        assert rule.passed is False
        assert rule.level == "error"

    def test_threshold_values_are_percent_strings(self):
        checks = _by_key(evaluate(_telemetry(risk_per_trade_pct=1.5), RuleSettings()))

        assert checks["max_risk_percent"].value == "1.5%"
        assert checks["max_risk_percent"].limit == "5%"
        assert checks["max_risk_percent"].title == "Max Risk 5%"

    def test_limit_is_inclusive(self):
        checks = _by_key(
            evaluate(
                _telemetry(trades_count=5, risk_per_trade_pct=5.0, dd_percent=5.0),
                RuleSettings(max_positions=5, max_risk_percent=5.0, max_daily_dd_percent=5.0),
            )
        )

        assert checks["no_overtrade"].passed
        assert checks["max_risk_percent"].passed
        assert checks["max_daily_dd"].passed

    def test_missing_drawdown_counts_as_zero(self):
        checks = _by_key(evaluate(_telemetry(dd_percent=None), RuleSettings()))

        assert checks["max_daily_dd"].passed
        assert checks["max_daily_dd"].value == "0%"

    def test_sl_rule_measures_risk_per_trade(self):
        checks = _by_key(
            evaluate(_telemetry(risk_per_trade_pct=3.0), RuleSettings(max_sl_percent=2.0))
        )

        assert checks["max_risk_percent"].passed
        assert checks["max_sl_percent"].passed is False
        assert checks["max_sl_percent"].level == "error"
        assert checks["max_sl_percent"].value == "3%"


class TestPlanAndJournalRules:
    """
    **Feature: daily-checklist, Property 2: Plan and Journal Context**

    Plan and journal context decides the RR-target and journal verdicts.
    """

    def test_complete_plan_passes(self):
        checks = _by_key(evaluate(_telemetry(), RuleSettings(), _complete_plan(2.0), []))
        rule = checks["rr_target_declared"]

        assert rule.passed
        assert rule.level == "info"
        assert rule.value == "RR 2"
        assert rule.limit == "RR 1.5"
        assert rule.notes == "2 trades • Calm"

    def test_rr_below_minimum_fails(self):
        checks = _by_key(evaluate(_telemetry(), RuleSettings(min_rr_allowed=1.5), _complete_plan(1.0)))
        rule = checks["rr_target_declared"]

        assert rule.passed is False
        assert "below minimum" in rule.notes

    def test_incomplete_plan_fails(self):
        plan = PreTradePlan(
            rr_target=3.0,
            submitted_at=datetime(2025, 1, 15, tzinfo=timezone.utc),
        )
        checks = _by_key(evaluate(_telemetry(), RuleSettings(), plan))
        rule = checks["rr_target_declared"]

        assert rule.passed is False
        assert "missing: mood" in rule.notes

    def test_rr_rule_not_enforced_still_warns(self):
        checks = _by_key(evaluate(_telemetry(), RuleSettings(require_first_trade_goal=False)))
        rule = checks["rr_target_declared"]

        assert rule.passed is True
        assert rule.level == "warning"

    def test_journal_entry_passes(self):
        checks = _by_key(evaluate(_telemetry(), RuleSettings(), None, [_journal_entry()]))
        rule = checks["journal_before_new_trade"]

        assert rule.passed
        assert rule.value == 1
        assert rule.limit == 1
        assert rule.level == "info"

    def test_journal_not_required(self):
        checks = _by_key(
            evaluate(_telemetry(), RuleSettings(require_journal_before_new_trade=False), None, [])
        )
        rule = checks["journal_before_new_trade"]

        assert rule.passed
        assert rule.limit == 0
        assert rule.level == "info"

    def test_missing_plan_fields(self):
        assert missing_plan_fields(_complete_plan()) == []
        empty = PreTradePlan(submitted_at=datetime(2025, 1, 15, tzinfo=timezone.utc))
        assert missing_plan_fields(empty) == [
            "mood",
            "planned trades",
            "entry windows",
            "expected high time",
            "expected low time",
        ]


class TestInformationalRules:
    """
    **Feature: daily-checklist, Property 3: Informational Rules**

    Rules that need live order telemetry always pass.
    """

    def test_sessions_listed_in_notes(self):
        checks = _by_key(evaluate(_telemetry(), RuleSettings()))
        rule = checks["session_allowed"]

        assert rule.passed
        assert "London AM 07:00-11:00 (Asia/Ho_Chi_Minh)" in rule.notes

    def test_no_sessions(self):
        checks = _by_key(evaluate(_telemetry(), RuleSettings(allowed_sessions=[])))

        assert checks["session_allowed"].notes == "No sessions set"

    def test_sl_tp_change_is_warning(self):
        checks = _by_key(evaluate(_telemetry(), RuleSettings()))
        rule = checks["max_sl_tp_change_percent"]

        assert rule.passed
        assert rule.level == "warning"
        assert rule.limit == "10%"
        assert rule.notes == "Realtime check required"


class TestEvaluationProperties:
    """
    **Feature: daily-checklist, Property 4: Deterministic Evaluation**

    *For any* telemetry, evaluation returns one verdict per key in a fixed
    order and the same inputs give the same verdicts.
    """

    @given(telemetry=telemetry_strategy)
    @settings(max_examples=100)
    def test_key_order(self, telemetry: DayTelemetry):
        checks = evaluate(telemetry, RuleSettings())
        assert [c.key for c in checks] == RULE_KEYS

    @given(telemetry=telemetry_strategy)
    @settings(max_examples=100)
    def test_deterministic(self, telemetry: DayTelemetry):
        plan = _complete_plan()
        assert evaluate(telemetry, RuleSettings(), plan, []) == evaluate(
            telemetry, RuleSettings(), plan, []
        )

    @given(
        telemetry=telemetry_strategy,
        max_positions=st.integers(min_value=0, max_value=20),
    )
    @settings(max_examples=100)
    def test_overtrade_matches_threshold(self, telemetry: DayTelemetry, max_positions: int):
        checks = _by_key(evaluate(telemetry, RuleSettings(max_positions=max_positions)))
        assert checks["no_overtrade"].passed == (telemetry.trades_count <= max_positions)


@pytest.mark.parametrize(
    "value, expected",
    [(5.0, "5"), (1.5, "1.5"), (0, "0"), (2.25, "2.25"), (10, "10")],
)
def test_format_number(value, expected):
    assert format_number(value) == expected
