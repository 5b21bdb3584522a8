"""RuleCheck, ChecklistDay and ExportRow data models."""

from datetime import date as date_type
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

RuleLevel = Literal["info", "warning", "error"]

Measure = Union[int, float, str]


class RuleCheck(BaseModel):
    """One rule's verdict for a day."""

    key: str = Field(..., min_length=1, description="Stable rule identifier")
    title: str = Field(..., description="Display title")
    description: Optional[str] = Field(default=None, description="What the rule enforces")
    passed: bool = Field(..., alias="pass", description="Whether the rule was respected")
    level: Optional[RuleLevel] = Field(default=None, description="Severity")
    value: Optional[Measure] = Field(default=None, description="Measured quantity")
    limit: Optional[Measure] = Field(default=None, description="Threshold")
    notes: Optional[str] = Field(default=None, description="Explanation")

    model_config = {"frozen": True, "populate_by_name": True}


class ChecklistDay(BaseModel):
    """A trader's checklist for one calendar day."""

    date: date_type = Field(..., description="Calendar date (UTC)")
    trader: str = Field(..., min_length=1, description="Trader id")
    equity_open: Optional[float] = Field(default=None, description="Equity at day open")
    equity_close: Optional[float] = Field(default=None, description="Equity at day close")
    dd_percent: Optional[float] = Field(default=None, description="Max drawdown % during the day")
    journal_url: Optional[str] = Field(default=None, description="Link to the daily journal")
    trades_count: int = Field(..., ge=0, description="Trades executed")
    rules: list[RuleCheck] = Field(default_factory=list, description="Rule verdicts")

    model_config = {"frozen": True}

    def get_rule(self, key: str) -> Optional[RuleCheck]:
        """Return the verdict with the given key, if present."""
        return next((r for r in self.rules if r.key == key), None)


class ExportRow(BaseModel):
    """Flattened checklist day used for tabular export."""

    date: date_type = Field(..., description="Calendar date")
    trader: str = Field(..., description="Trader id")
    trades: int = Field(..., ge=0, description="Trades executed")
    dd_percent: Optional[float] = Field(default=None, description="Max drawdown %")
    pass_rate: int = Field(..., ge=0, le=100, description="Rules passed, whole percent")

    model_config = {"frozen": True}
