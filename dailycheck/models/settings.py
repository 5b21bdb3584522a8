"""RuleSettings data model."""

from typing import Optional

from pydantic import BaseModel, Field


class RuleSession(BaseModel):
    """A trading time window during which trading is permitted."""

    start: str = Field(..., description="Session start (HH:MM)")
    end: str = Field(..., description="Session end (HH:MM)")
    tz: str = Field(..., min_length=1, description="IANA time zone name")
    label: Optional[str] = Field(default=None, description="Display label")

    model_config = {"frozen": True}

    def describe(self) -> str:
        """Render the session as ``label start-end (tz)``."""
        text = f"{self.start}-{self.end} ({self.tz})"
        return f"{self.label} {text}" if self.label else text


def _default_sessions() -> list[RuleSession]:
    return [
        RuleSession(start="07:00", end="11:00", tz="Asia/Ho_Chi_Minh", label="London AM"),
        RuleSession(start="19:00", end="23:00", tz="Asia/Ho_Chi_Minh", label="NY"),
    ]


class RuleSettings(BaseModel):
    """Thresholds and toggles the daily checklist is evaluated against."""

    max_risk_percent: float = Field(default=5.0, ge=0, description="Max risk % per trade")
    max_positions: int = Field(default=5, ge=0, description="Max concurrent positions")
    max_lots_per_trade: float = Field(default=1.0, ge=0, description="Max lots per trade")
    max_sl_percent: float = Field(default=2.0, ge=0, description="Max stop-loss % of account")
    max_daily_dd_percent: float = Field(
        default=5.0, ge=0, description="Max daily drawdown % of opening equity"
    )
    min_rr_allowed: float = Field(default=1.5, ge=0, description="Minimum reward:risk ratio")
    allowed_sessions: list[RuleSession] = Field(
        default_factory=_default_sessions, description="Allowed trading sessions"
    )
    violate_outside_session: bool = Field(
        default=True, description="Trading outside allowed sessions is a violation"
    )
    max_sl_tp_change_percent: float = Field(
        default=10.0, ge=0, description="Max SL/TP change % of the initial distance"
    )
    require_first_trade_goal: bool = Field(
        default=True, description="Require a pre-trade plan before the first trade"
    )
    require_journal_before_new_trade: bool = Field(
        default=True, description="Require a pre-entry journal before each trade"
    )

    model_config = {"frozen": True}
