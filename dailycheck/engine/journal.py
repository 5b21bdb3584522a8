"""Risk maths for pre-entry journal entries."""

import uuid
from datetime import datetime, timezone
from typing import NamedTuple, Optional

from dailycheck.engine.rules import format_number
from dailycheck.models import RuleSettings, TradeJournalEntry


class RiskFigures(NamedTuple):
    """Cash and percent risk of a planned entry."""

    risk_points: float
    risk_cash: float
    risk_pct: float
    profit_at_tp: float
    loss_at_sl: float
    target_price: Optional[float]


def target_price(entry: float, sl: float, rr: float) -> Optional[float]:
    """Get the take-profit price implied by entry, stop and RR.

    A stop below the entry is a long, above it a short.

    Returns:
        Target price, or None when entry, stop or RR is zero.
    """
    if not (entry and sl and rr):
        return None
    if entry > sl:
        return entry + rr * (entry - sl)
    return entry - rr * (sl - entry)


def compute_risk(
    entry: float,
    sl: float,
    lots: float,
    rr: float,
    value_per_point: float,
    equity: Optional[float],
) -> RiskFigures:
    """Compute the risk figures of a planned entry.

    Args:
        entry: Entry price.
        sl: Stop-loss price.
        lots: Position size in lots.
        rr: Expected reward:risk ratio.
        value_per_point: Cash value of one price unit per lot.
        equity: Reference equity; percent risk is 0 when unknown.

    Returns:
        RiskFigures.
    """
    risk_points = abs(entry - sl)
    risk_cash = risk_points * value_per_point * lots
    risk_pct = (risk_cash / equity) * 100 if equity else 0.0
    return RiskFigures(
        risk_points=risk_points,
        risk_cash=risk_cash,
        risk_pct=risk_pct,
        profit_at_tp=risk_cash * rr,
        loss_at_sl=risk_cash,
        target_price=target_price(entry, sl, rr),
    )


def journal_warnings(rr: float, risk_pct: float, settings: RuleSettings) -> list[str]:
    """Warnings to show before a journal entry is saved."""
    warnings = []
    if 0 < rr < settings.min_rr_allowed:
        warnings.append(
            f"Current RR ({rr:.2f}) is below the minimum required "
            f"{format_number(settings.min_rr_allowed)}."
        )
    if risk_pct > settings.max_risk_percent:
        warnings.append(
            f"Estimated risk ~{risk_pct:.2f}% exceeds the maximum "
            f"{format_number(settings.max_risk_percent)}%."
        )
    return warnings


def build_journal_entry(
    mood: str,
    entry: float,
    sl: float,
    lots: float,
    rr: float,
    value_per_point: float,
    equity: Optional[float],
    conditions: str = "",
    created_at: Optional[datetime] = None,
    entry_id: Optional[str] = None,
) -> TradeJournalEntry:
    """Create a journal entry with its risk figures filled in.

    Args:
        mood: Mood before the entry.
        entry: Entry price.
        sl: Stop-loss price.
        lots: Position size in lots.
        rr: Expected reward:risk ratio.
        value_per_point: Cash value of one price unit per lot.
        equity: Equity at entry.
        conditions: Entry factors and conditions.
        created_at: Creation time, defaults to now (UTC).
        entry_id: Entry id, generated when not given.

    Returns:
        The new TradeJournalEntry.
    """
    created_at = created_at or datetime.now(timezone.utc)
    risk = compute_risk(entry, sl, lots, rr, value_per_point, equity)
    return TradeJournalEntry(
        id=entry_id or f"{created_at.date().isoformat()}-{uuid.uuid4().hex[:8]}",
        created_at=created_at,
        mood=mood,
        conditions=conditions.strip(),
        entry=entry,
        lots=lots,
        sl=sl,
        rr=rr,
        value_per_point=value_per_point,
        equity_at_entry=equity,
        risk_cash=risk.risk_cash,
        risk_pct=risk.risk_pct,
        profit_at_tp=risk.profit_at_tp,
        loss_at_sl=risk.loss_at_sl,
    )
