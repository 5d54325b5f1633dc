"""
Date window model for collaborative date scheduling
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator


class WindowPrecision(str, Enum):
    """How literally the parsed dates should be taken"""

    EXACT = "exact"
    APPROX = "approx"


class DateWindow(BaseModel):
    """
    A candidate contiguous date range proposed by a traveler.

    Dates are inclusive calendar days. A window whose source text could not be
    parsed carries no dates at all ("flexible"); it still counts as a response
    but is left out of overlap and convergence math.
    """

    id: str = Field(..., description="Window ID")
    trip_id: str = Field(..., description="Trip this window belongs to")
    start_date: date | None = Field(None, description="First day (inclusive)")
    end_date: date | None = Field(None, description="Last day (inclusive)")
    proposed_by: str | None = Field(None, description="User ID of the proposer")
    supporter_ids: list[str] = Field(
        default_factory=list, description="Travelers endorsing this window"
    )
    source_text: str | None = Field(None, description="Free-form text the window was parsed from")
    precision: WindowPrecision = Field(default=WindowPrecision.EXACT)
    proposal_index: int | None = Field(
        None, description="Stable proposal order used to break ties (earliest wins)"
    )
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @field_validator("supporter_ids")
    @classmethod
    def _dedupe_supporters(cls, value: list[str]) -> list[str]:
        seen: list[str] = []
        for user_id in value:
            if user_id and user_id not in seen:
                seen.append(user_id)
        return seen

    @model_validator(mode="after")
    def _check_bounds(self) -> "DateWindow":
        if (self.start_date is None) != (self.end_date is None):
            raise ValueError("start_date and end_date must be provided together")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    @property
    def is_dated(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    def supporters(self) -> set[str]:
        """Explicit supporters plus the proposer"""
        users = set(self.supporter_ids)
        if self.proposed_by:
            users.add(self.proposed_by)
        return users
