"""
Derived scheduling results (recomputed on every read, never stored)
"""

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class SchedulingPhase(str, Enum):
    """Date-locking funnel phases; only ever move forward"""

    COLLECTING = "COLLECTING"
    PROPOSED = "PROPOSED"
    LOCKED = "LOCKED"


class SimilarWindow(BaseModel):
    """An existing window that overlaps a new proposal"""

    window: Any
    score: float = Field(..., ge=0.0, le=1.0)


class MostSimilarWindow(BaseModel):
    window_id: str | None = None
    score: float = Field(..., ge=0.0, le=1.0)


class DayAvailability(BaseModel):
    day: date
    supporter_count: int = 0


class BestStretch(BaseModel):
    start_index: int
    length: int


class ConvergenceResult(BaseModel):
    """Per-day availability heat map across dated windows"""

    days: list[DayAvailability] = Field(default_factory=list)
    peak_count: int = 0
    best_stretch: BestStretch
    best_label: str
    best_start_date: date
    best_end_date: date
    best_stretch_is_unique: bool = True
    # Separate runs of days at peak_count; more than one means support is split
    peak_stretch_count: int = 1
    total_days: int = 0


class LockBasis(str, Enum):
    """Why a voting round may be locked"""

    MAJORITY = "majority"
    ALL_VOTED = "all_voted"
    TIE_LEADER_DECIDES = "tie_leader_decides"


class VotingOption(BaseModel):
    option_key: str
    label: str
    start_date: date
    end_date: date
    votes: int = 0
    voter_names: list[str] = Field(default_factory=list)
    proposal_index: int = 0


class VotingStatus(BaseModel):
    stage: str
    is_voting_stage: bool = False
    total_travelers: int = 0
    voted_count: int = 0
    remaining_count: int = 0
    has_current_user_voted: bool = False
    leading_option: VotingOption | None = None
    leading_votes: int = 0
    is_tie: bool = False
    ready_to_lock: bool = False
    ready_to_lock_reason: str | None = None
    lock_basis: LockBasis | None = None
    options: list[VotingOption] = Field(default_factory=list)


class ProposalReadiness(BaseModel):
    """Whether the group has converged enough for the leader to propose dates"""

    proposal_ready: bool = False
    total_travelers: int = 0
    responder_count: int = 0
    leading_window_text: str | None = None
    leading_support_count: int = 0
    has_clear_leader: bool = False
    threshold_needed: int = 0
    can_propose: bool = False
    leader_override: bool = False


class PhaseTransition(BaseModel):
    """Forward phase change, consumed by the notification side"""

    from_phase: SchedulingPhase = Field(..., serialization_alias="from")
    to_phase: SchedulingPhase = Field(..., serialization_alias="to")


class SchedulingSummary(BaseModel):
    """
    Live scheduling state for one trip as seen by one user.
    COLLECTING fills the window/responder fields, PROPOSED the reaction fields.
    """

    phase: SchedulingPhase
    total_travelers: int = 0

    # COLLECTING
    window_count: int = 0
    responder_count: int = 0
    leading_window_text: str | None = None
    leading_support_count: int = 0
    proposal_ready: bool = False
    user_has_responded: bool = False

    # PROPOSED
    proposed_window_text: str | None = None
    approval_count: int = 0
    required_approvals: int = 0
    total_reactions: int = 0
    user_reaction: str | None = None
