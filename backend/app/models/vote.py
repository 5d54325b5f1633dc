"""
Vote and reaction models for the date consensus flow
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Vote(BaseModel):
    """
    A traveler's vote on a consensus option during the voting stage.
    option_key is "<startISO>_<endISO>", so two windows with the same dates
    collapse into one option.
    """

    trip_id: str | None = Field(None, description="Trip ID")
    user_id: str | None = Field(None, description="Voting user")
    option_key: str = Field(..., description="startISO_endISO of the chosen option")
    voter_name: str | None = Field(None, description="Cached display name")
    user_name: str | None = Field(None, description="Legacy cached display name")
    timestamp: datetime | None = Field(None)

    def display_name(self) -> str | None:
        return self.voter_name or self.user_name


class ReactionType(str, Enum):
    """Reaction to the leader's proposed dates"""

    WORKS = "WORKS"
    CAVEAT = "CAVEAT"
    CANT = "CANT"


class DateReaction(BaseModel):
    """A traveler's reaction to a proposed window"""

    trip_id: str | None = Field(None)
    window_id: str | None = Field(None, description="Proposed window reacted to")
    user_id: str = Field(...)
    user_name: str | None = Field(None)
    reaction_type: ReactionType = Field(...)
    note: str | None = Field(None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
