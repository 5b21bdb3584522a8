"""TradeJournalEntry data model."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

MOODS: list[str] = ["Calm", "Focused", "Anxious", "Euphoric", "Stressed"]


class TradeJournalEntry(BaseModel):
    """A pre-entry journal record written before opening a position.

    Entries written locally always carry every field. Entries read back
    from the backend may lack prices, figures or a timestamp; they still
    count as a journal for their day.
    """

    id: str = Field(..., min_length=1, description="Entry id")
    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")
    mood: str = Field(default="", description="Mood before the entry, usually one of MOODS")
    conditions: str = Field(default="", description="Entry factors and conditions")
    entry: Optional[float] = Field(default=None, ge=0, description="Entry price")
    lots: Optional[float] = Field(default=None, ge=0, description="Position size in lots")
    sl: Optional[float] = Field(default=None, ge=0, description="Stop-loss price")
    rr: Optional[float] = Field(default=None, ge=0, description="Expected reward:risk ratio")
    value_per_point: Optional[float] = Field(
        default=None, ge=0, description="Cash value of one price unit per lot"
    )
    equity_at_entry: Optional[float] = Field(default=None, description="Reference equity")
    risk_cash: Optional[float] = Field(default=None, description="Cash lost if SL is hit")
    risk_pct: Optional[float] = Field(default=None, description="% of equity at risk")
    profit_at_tp: Optional[float] = Field(default=None, description="Profit at target")
    loss_at_sl: Optional[float] = Field(default=None, description="Loss at stop")

    model_config = {"frozen": True}
