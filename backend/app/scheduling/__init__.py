"""
Trip date consensus engine.

Pure, synchronous computations over an already-fetched trip snapshot. Nothing
in this package performs I/O or keeps state between calls.
"""

from app.scheduling.convergence import aggregate_convergence
from app.scheduling.phase_coordinator import (
    build_scheduling_summary,
    can_leader_propose,
    can_submit_window,
    compute_proposal_readiness,
    detect_phase_transition,
    get_scheduling_phase,
)
from app.scheduling.vote_tally import format_leading_option, get_voting_status
from app.scheduling.window_overlap import (
    compute_overlap_score,
    find_similar_windows,
    get_most_similar_window,
    is_near_duplicate,
)

__all__ = [
    "aggregate_convergence",
    "build_scheduling_summary",
    "can_leader_propose",
    "can_submit_window",
    "compute_overlap_score",
    "compute_proposal_readiness",
    "detect_phase_transition",
    "find_similar_windows",
    "format_leading_option",
    "get_most_similar_window",
    "get_scheduling_phase",
    "get_voting_status",
    "is_near_duplicate",
]
