"""
Models package for trip scheduling documents and derived results
"""

from app.models.date_window import DateWindow, WindowPrecision
from app.models.scheduling import (
    ConvergenceResult,
    SchedulingPhase,
    SchedulingSummary,
    VotingStatus,
)
from app.models.trip import ConsensusOption, Traveler, Trip, TripSnapshot
from app.models.vote import DateReaction, ReactionType, Vote

__all__ = [
    "ConsensusOption",
    "ConvergenceResult",
    "DateReaction",
    "DateWindow",
    "ReactionType",
    "SchedulingPhase",
    "SchedulingSummary",
    "Traveler",
    "Trip",
    "TripSnapshot",
    "Vote",
    "VotingStatus",
    "WindowPrecision",
]
