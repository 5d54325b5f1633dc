"""
Trip model (scheduling slice) for collaborative date planning
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from app.models.date_window import DateWindow
from app.models.vote import DateReaction, Vote


class Traveler(BaseModel):
    """Active traveler on a trip"""

    user_id: str = Field(..., description="User ID")
    name: str | None = Field(None, description="Display name")


class ConsensusOption(BaseModel):
    """A date option eligible for voting"""

    start_date: date | None = Field(None)
    end_date: date | None = Field(None)
    name: str | None = Field(None)
    label: str | None = Field(None)
    proposal_index: int | None = Field(
        None, description="Stable proposal order; earliest wins vote ties"
    )


class Trip(BaseModel):
    """
    Scheduling-related fields of a trip document
    """

    trip_id: str = Field(..., description="Trip ID")
    trip_code: str | None = Field(None, description="6-character join code")
    name: str | None = Field(None, description="Trip name")
    type: str = Field(default="collaborative", description="collaborative or hosted")
    status: str | None = Field(
        None, description="Trip status: scheduling, voting, proposed, locked, completed"
    )
    created_by: str | None = Field(None, description="Leader user ID")
    members: list[str] = Field(default_factory=list, description="Traveler user IDs")

    # Scheduling funnel
    proposed_window_id: str | None = Field(None, description="Window the leader proposed")
    locked_start_date: date | None = Field(None)
    locked_end_date: date | None = Field(None)

    # Voting stage options
    promising_windows: list[ConsensusOption] = Field(default_factory=list)
    consensus_options: list[ConsensusOption] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        json_schema_extra = {
            "example": {
                "trip_id": "665f1c2e9b1e8a0012ab34cd",
                "trip_code": "XY7K9M",
                "name": "Summer Japan Trip",
                "type": "collaborative",
                "status": "scheduling",
                "created_by": "user_alice",
                "members": ["user_alice", "user_bob", "user_carol"],
                "proposed_window_id": None,
            }
        }


class TripSnapshot(BaseModel):
    """
    Everything the consensus engine reads for one trip, fetched in one go.
    """

    trip: Trip
    travelers: list[Traveler] = Field(default_factory=list)
    windows: list[DateWindow] = Field(default_factory=list)
    votes: list[Vote] = Field(default_factory=list)
    reactions: list[DateReaction] = Field(default_factory=list)
