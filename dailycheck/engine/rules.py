"""Rule evaluation for the daily discipline checklist.

``evaluate`` maps one day's telemetry, the active settings and the optional
plan/journal context to the day's rule verdicts. It is a pure function: no
clock, no randomness and no I/O, so the same inputs always produce the same
verdicts in the same order.
"""

from typing import Optional, Sequence

from dailycheck.models import (
    DayTelemetry,
    PreTradePlan,
    RuleCheck,
    RuleSettings,
    TradeJournalEntry,
)


# Verdict keys in evaluation order.
RULE_KEYS = [
    "max_risk_percent",
    "no_overtrade",
    "stop_loss_required",
    "max_sl_percent",
    "max_daily_dd",
    "session_allowed",
    "max_sl_tp_change_percent",
    "rr_target_declared",
    "journal_before_new_trade",
]


def format_number(value: float) -> str:
    """Format a number without a trailing ``.0`` for integral values.

    Args:
        value: Number to format.

    Returns:
        ``"5"`` for 5.0, ``"1.5"`` for 1.5.
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:.10g}"


def format_percent(value: float) -> str:
    """Format a number as a percent string, e.g. ``"1.5%"``."""
    return f"{format_number(value)}%"


def _threshold_check(
    key: str,
    title: str,
    description: str,
    measured: float,
    limit: float,
    ok_note: str,
    fail_note: str,
) -> RuleCheck:
    passed = measured <= limit
    return RuleCheck(
        key=key,
        title=title,
        description=description,
        passed=passed,
        value=format_percent(measured),
        limit=format_percent(limit),
        level="info" if passed else "error",
        notes=ok_note if passed else fail_note,
    )


def missing_plan_fields(plan: PreTradePlan) -> list[str]:
    """List the parts of a plan that are missing for it to count as declared.

    Args:
        plan: Pre-trade plan to inspect.

    Returns:
        Human-readable names of missing parts, empty if the plan is complete.
    """
    missing = []
    if not plan.mood:
        missing.append("mood")
    if plan.planned_trades <= 0:
        missing.append("planned trades")
    if not plan.planned_windows:
        missing.append("entry windows")
    if not plan.expected_high_time:
        missing.append("expected high time")
    if not plan.expected_low_time:
        missing.append("expected low time")
    return missing


def _rr_target_check(settings: RuleSettings, plan: Optional[PreTradePlan]) -> RuleCheck:
    title = f"RR Target Declared (≥ {format_number(settings.min_rr_allowed)})"
    limit = f"RR {format_number(settings.min_rr_allowed)}"

    if plan is None:
        rr_ok = False
        value = None
        notes = "RR target/plan not declared"
    else:
        missing = missing_plan_fields(plan)
        rr_high_enough = plan.rr_target >= settings.min_rr_allowed
        rr_ok = rr_high_enough and not missing
        value = f"RR {format_number(plan.rr_target)}"
        notes = f"{plan.planned_trades} trades • {plan.mood or 'no mood'}"
        if not rr_high_enough:
            notes += f"; RR {format_number(plan.rr_target)} below minimum"
        if missing:
            notes += f"; missing: {', '.join(missing)}"

    # Level tracks plan quality even when the rule is not enforced.
    return RuleCheck(
        key="rr_target_declared",
        title=title,
        description="Must declare RR target/plan for first trade of the day",
        passed=rr_ok if settings.require_first_trade_goal else True,
        value=value,
        limit=limit,
        level="info" if rr_ok else "warning",
        notes=notes,
    )


def _journal_check(
    settings: RuleSettings, journal_entries: Sequence[TradeJournalEntry]
) -> RuleCheck:
    count = len(journal_entries)
    required = settings.require_journal_before_new_trade
    return RuleCheck(
        key="journal_before_new_trade",
        title="Journal before new trade",
        description="Must write journal before opening a new trade",
        passed=count > 0 if required else True,
        value=count,
        limit=1 if required else 0,
        level="warning" if required and count == 0 else "info",
        notes=f"{count} entries" if count else "No pre-entry journal yet",
    )


def evaluate(
    telemetry: DayTelemetry,
    settings: RuleSettings,
    plan: Optional[PreTradePlan] = None,
    journal_entries: Optional[Sequence[TradeJournalEntry]] = None,
) -> list[RuleCheck]:
    """Evaluate every checklist rule for one trading day.

    Missing plan or journal context never raises: the dependent rules fail
    with an explanatory note instead.

    Args:
        telemetry: The day's trading figures.
        settings: Active rule settings.
        plan: Pre-trade plan declared for the day, if any.
        journal_entries: Pre-entry journal entries written that day.

    Returns:
        Verdicts in ``RULE_KEYS`` order.
    """
    risk = telemetry.risk_per_trade_pct
    trades = telemetry.trades_count
    dd = telemetry.dd_percent if telemetry.dd_percent is not None else 0.0
    entries = list(journal_entries or [])

    overtrade_ok = trades <= settings.max_positions
    sessions = "; ".join(s.describe() for s in settings.allowed_sessions)

    return [
        _threshold_check(
            "max_risk_percent",
            f"Max Risk {format_percent(settings.max_risk_percent)}",
            "Risk per trade must not exceed % of total account",
            risk,
            settings.max_risk_percent,
            "Within risk limit",
            "Risk exceeded",
        ),
        RuleCheck(
            key="no_overtrade",
            title="No Overtrade",
            description="Must not open too many positions at once",
            passed=overtrade_ok,
            value=trades,
            limit=settings.max_positions,
            level="info" if overtrade_ok else "warning",
            notes="Position count OK" if overtrade_ok else f"Too many positions: {trades}",
        ),
        RuleCheck(
            key="stop_loss_required",
            title="Stop Loss Required",
            description="Stop loss must be set for every trade",
            passed=telemetry.all_have_sl,
            level="info" if telemetry.all_have_sl else "error",
            notes="All trades have SL" if telemetry.all_have_sl else "Some trades missing SL",
        ),
        # TODO: measure stop-loss distance separately once telemetry reports it;
        # this currently re-checks the per-trade risk figure.
        _threshold_check(
            "max_sl_percent",
            f"Max SL {format_percent(settings.max_sl_percent)}",
            "Stop loss must not exceed % of total account",
            risk,
            settings.max_sl_percent,
            "SL within limit",
            "SL exceeded",
        ),
        _threshold_check(
            "max_daily_dd",
            f"Max Daily DD {format_percent(settings.max_daily_dd_percent)}",
            "Daily drawdown must not exceed % of opening equity",
            dd,
            settings.max_daily_dd_percent,
            "DD within limit",
            "DD exceeded",
        ),
        # Session and SL/TP-change rules need live order telemetry.
        RuleCheck(
            key="session_allowed",
            title="Allowed Trading Sessions",
            description="Only trade within the defined sessions",
            passed=True,
            level="info",
            notes=sessions or "No sessions set",
        ),
        RuleCheck(
            key="max_sl_tp_change_percent",
            title=f"Max SL/TP Change {format_percent(settings.max_sl_tp_change_percent)}",
            description="SL/TP changes must not exceed % of initial distance",
            passed=True,
            level="warning",
            limit=format_percent(settings.max_sl_tp_change_percent),
            notes="Realtime check required",
        ),
        _rr_target_check(settings, plan),
        _journal_check(settings, entries),
    ]
