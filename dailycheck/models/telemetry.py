"""DayTelemetry data model."""

from datetime import date as date_type
from typing import Optional

from pydantic import BaseModel, Field


class DayTelemetry(BaseModel):
    """End-of-day trading figures for one trader on one date."""

    date: date_type = Field(..., description="Trading date (UTC)")
    trader: str = Field(..., min_length=1, description="Trader id")
    trades_count: int = Field(..., ge=0, description="Trades executed")
    risk_per_trade_pct: float = Field(..., ge=0, description="Measured risk % per trade")
    dd_percent: Optional[float] = Field(default=None, ge=0, description="Max drawdown %")
    all_have_sl: bool = Field(..., description="Every trade had a stop loss")
    equity_open: Optional[float] = Field(default=None, description="Equity at day open")
    equity_close: Optional[float] = Field(default=None, description="Equity at day close")
    journal_url: Optional[str] = Field(default=None, description="Link to the daily journal")

    model_config = {"frozen": True}
