"""PreTradePlan data model."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PlanWindow(BaseModel):
    """A planned entry time window."""

    start: str = Field(..., description="Window start (HH:MM)")
    end: str = Field(..., description="Window end (HH:MM)")
    label: Optional[str] = Field(default=None, description="Setup label")

    model_config = {"frozen": True}


class PreTradePlan(BaseModel):
    """A trader's declared intentions before the first trade of the day."""

    mood: str = Field(default="", description="Declared mood")
    planned_trades: int = Field(default=0, ge=0, description="Planned number of trades")
    planned_windows: list[PlanWindow] = Field(
        default_factory=list, description="Planned entry windows"
    )
    expected_high_time: Optional[str] = Field(
        default=None, description="Expected time of the daily high (HH:MM)"
    )
    expected_low_time: Optional[str] = Field(
        default=None, description="Expected time of the daily low (HH:MM)"
    )
    rr_target: float = Field(default=0.0, ge=0, description="Declared reward:risk target")
    notes: Optional[str] = Field(default=None, description="Free-form notes")
    submitted_at: Optional[datetime] = Field(
        default=None, description="Submission timestamp, unknown for some backend records"
    )

    model_config = {"frozen": True}


class PlanHistoryEntry(BaseModel):
    """One saved version of a plan."""

    id: str = Field(..., description="History entry id")
    saved_at: datetime = Field(..., description="When this version was saved")
    plan: PreTradePlan = Field(..., description="The saved plan")

    model_config = {"frozen": True}
