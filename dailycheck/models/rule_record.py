"""RuleRecord data model for backend-stored trade rules."""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class RuleRecord(BaseModel):
    """A named rule as stored by the backend.

    The condition payload is opaque and loosely typed. Fields the backend
    sends that are not declared here are kept and sent back unchanged.
    """

    id: Optional[Union[int, str]] = Field(default=None, description="Backend id")
    account_number: Optional[Union[int, str]] = Field(default=None, description="Account")
    name: str = Field(default="", description="Display name")
    description: Optional[str] = Field(default=None, description="Display description")
    condition: Any = Field(default_factory=dict, description="Condition payload")
    category: Optional[str] = Field(default=None, description="Explicit category tag")
    created_at: Optional[str] = Field(default=None, description="Creation timestamp")
    updated_at: Optional[str] = Field(default=None, description="Last update timestamp")

    model_config = {"frozen": True, "extra": "allow"}
