"""
Scheduling phase coordination for the date-locking funnel.

    COLLECTING -> PROPOSED -> LOCKED

COLLECTING: travelers propose and support windows; no favorite picked yet.
PROPOSED:   the leader put one window forward; travelers react to it.
LOCKED:     dates are final.

Nothing here changes a trip's phase. Phase changes are explicit leader actions
handled by the write side; this module only reads the current phase and
computes the signals (proposal readiness, approvals) that decide whether the
leader should be offered the next step.
"""

import math
from typing import Any

from app.models.scheduling import (
    ConvergenceResult,
    PhaseTransition,
    ProposalReadiness,
    SchedulingPhase,
    SchedulingSummary,
)
from app.models.trip import TripSnapshot
from app.models.vote import ReactionType
from app.scheduling.convergence import aggregate_convergence
from app.scheduling.dates import (
    format_range,
    parse_iso_date,
    proposal_order,
    window_bounds,
    window_field,
    window_supporters,
)

LARGE_GROUP_SIZE = 10
LARGE_GROUP_MIN_SUPPORT = 5

_PHASE_ORDER = {
    SchedulingPhase.COLLECTING: 0,
    SchedulingPhase.PROPOSED: 1,
    SchedulingPhase.LOCKED: 2,
}


def get_scheduling_phase(trip: Any) -> SchedulingPhase:
    if window_field(trip, "status") == "locked" or window_field(trip, "locked_start_date"):
        return SchedulingPhase.LOCKED
    if window_field(trip, "proposed_window_id"):
        return SchedulingPhase.PROPOSED
    return SchedulingPhase.COLLECTING


def can_submit_window(trip: Any) -> bool:
    """New windows are frozen once a proposal is on the table"""
    return get_scheduling_phase(trip) == SchedulingPhase.COLLECTING


def is_forward_transition(before: SchedulingPhase | str | None, after: SchedulingPhase | str | None) -> bool:
    try:
        before_phase = SchedulingPhase(before)
        after_phase = SchedulingPhase(after)
    except ValueError:
        return False
    return _PHASE_ORDER[after_phase] > _PHASE_ORDER[before_phase]


def detect_phase_transition(before: SchedulingPhase | str | None, after: SchedulingPhase | str | None) -> PhaseTransition | None:
    """Forward phase change between two reads, or None (no change, backward, unknown)"""
    if not is_forward_transition(before, after):
        return None
    return PhaseTransition(from_phase=SchedulingPhase(before), to_phase=SchedulingPhase(after))


def required_approvals(total_travelers: int) -> int:
    if total_travelers <= 0:
        return 1
    return math.ceil(total_travelers / 2)


def proposal_threshold(total_travelers: int, responder_count: int) -> int:
    """
    Supporters the leading window needs before the leader is nudged to propose.
    Groups up to 10: strict majority of travelers. Larger groups: majority of
    responders, never below 5.
    """
    if total_travelers <= LARGE_GROUP_SIZE:
        return total_travelers // 2 + 1
    return max(LARGE_GROUP_MIN_SUPPORT, math.ceil(responder_count / 2))


def _traveler_ids(travelers: list[Any] | None) -> set[str]:
    ids = set()
    for traveler in travelers or []:
        user_id = traveler if isinstance(traveler, str) else window_field(traveler, "user_id")
        if user_id:
            ids.add(user_id)
    return ids


def _member_reactions(reactions: list[Any], member_ids: set[str] | None) -> list[Any]:
    """Reactions from current travelers; no filtering when membership is unknown"""
    if not member_ids:
        return list(reactions)
    return [r for r in reactions if window_field(r, "user_id") in member_ids]


def _latest_reaction_per_user(reactions: list[Any]) -> dict[str, Any]:
    latest: dict[str, Any] = {}
    for reaction in reactions:
        user_id = window_field(reaction, "user_id")
        if user_id:
            latest[user_id] = reaction
    return latest


def _reaction_value(reaction: Any) -> str | None:
    value = window_field(reaction, "reaction_type")
    if isinstance(value, ReactionType):
        return value.value
    return value


def count_approvals(reactions: list[Any] | None, travelers: list[Any] | None = None) -> int:
    """WORKS reactions, latest per user, from travelers still on the trip"""
    current = _member_reactions(reactions or [], _traveler_ids(travelers))
    return sum(
        1
        for reaction in _latest_reaction_per_user(current).values()
        if _reaction_value(reaction) == ReactionType.WORKS.value
    )


def _responders(windows: list[Any]) -> set[str]:
    users: set[str] = set()
    for window in windows:
        users |= window_supporters(window)
    return users


def _window_text(window: Any) -> str | None:
    bounds = window_bounds(window)
    if bounds is not None:
        return format_range(*bounds)
    return window_field(window, "source_text")


def _most_supported_window(windows: list[Any]) -> tuple[Any, int, bool] | None:
    """
    (window, supporter count, clear) for the best-supported window.
    Ties go to the earliest proposal; a tie also means there is no clear leader.
    """
    if not windows:
        return None
    ranked = sorted(
        ((len(window_supporters(w)), proposal_order(w, position), w) for position, w in enumerate(windows)),
        key=lambda item: (-item[0], item[1]),
    )
    top_count, _, top_window = ranked[0]
    clear = top_count > 0 and (len(ranked) == 1 or ranked[1][0] < top_count)
    return top_window, top_count, clear


def compute_proposal_readiness(
    windows: list[Any] | None,
    travelers: list[Any] | None,
    convergence: ConvergenceResult | None = None,
    leader_override: bool = False,
) -> ProposalReadiness:
    """
    Leading window comes from the convergence peak stretch, falling back to
    the window with the most supporters when convergence has no result.

    The leader is clear only when its support is strictly ahead of every other
    stretch or window; stretch length picks the label, never the leader.
    Ready once more than half the travelers responded, the leader is clear and
    its support reaches proposal_threshold().

    Pass a convergence result already computed for this snapshot to avoid
    recomputing it.
    """
    windows = windows or []
    total = len(travelers or [])
    readiness = ProposalReadiness(
        total_travelers=total,
        responder_count=len(_responders(windows)),
        leader_override=leader_override,
    )
    readiness.threshold_needed = proposal_threshold(total, readiness.responder_count)

    if convergence is None:
        convergence = aggregate_convergence(windows)

    if convergence is not None:
        readiness.leading_window_text = convergence.best_label
        readiness.leading_support_count = convergence.peak_count
        readiness.has_clear_leader = convergence.peak_stretch_count == 1
    else:
        top = _most_supported_window(windows)
        if top is not None:
            top_window, top_count, clear = top
            readiness.leading_window_text = _window_text(top_window)
            readiness.leading_support_count = top_count
            readiness.has_clear_leader = clear

    if total > 0:
        readiness.proposal_ready = (
            readiness.responder_count > total / 2
            and readiness.has_clear_leader
            and readiness.leading_support_count >= readiness.threshold_needed
        )
    readiness.can_propose = readiness.proposal_ready or leader_override
    return readiness


def can_leader_propose(
    windows: list[Any] | None,
    travelers: list[Any] | None,
    leader_override: bool = False,
    convergence: ConvergenceResult | None = None,
) -> ProposalReadiness:
    """Proposal readiness, with the leader allowed to propose early on purpose"""
    return compute_proposal_readiness(windows, travelers, convergence, leader_override=leader_override)


def _find_window(windows: list[Any], window_id: Any) -> Any:
    for window in windows:
        if str(window_field(window, "id")) == str(window_id):
            return window
    return None


def _proposed_text(trip: Any, windows: list[Any]) -> str | None:
    window = _find_window(windows, window_field(trip, "proposed_window_id"))
    if window is not None:
        return _window_text(window)
    return None


def build_scheduling_summary(
    snapshot: TripSnapshot | None,
    user_id: str | None = None,
    convergence: ConvergenceResult | None = None,
) -> SchedulingSummary | None:
    """
    Summary of the trip's scheduling state for `user_id`.

    Returns None for LOCKED trips: once dates are final there is nothing left
    to signal, whatever the windows and votes say.
    """
    if snapshot is None:
        return None

    trip = snapshot.trip
    phase = get_scheduling_phase(trip)
    if phase == SchedulingPhase.LOCKED:
        return None

    windows = snapshot.windows or []
    travelers = snapshot.travelers or []
    summary = SchedulingSummary(phase=phase, total_travelers=len(travelers))

    if phase == SchedulingPhase.COLLECTING:
        readiness = compute_proposal_readiness(windows, travelers, convergence)
        summary.window_count = len(windows)
        summary.responder_count = readiness.responder_count
        summary.leading_window_text = readiness.leading_window_text
        summary.leading_support_count = readiness.leading_support_count
        summary.proposal_ready = readiness.proposal_ready
        summary.user_has_responded = bool(user_id) and user_id in _responders(windows)
        return summary

    proposed_id = window_field(trip, "proposed_window_id")
    reactions = _member_reactions(
        [r for r in (snapshot.reactions or []) if window_field(r, "window_id") in (None, proposed_id)],
        _traveler_ids(travelers),
    )
    latest = _latest_reaction_per_user(reactions)

    summary.proposed_window_text = _proposed_text(trip, windows)
    summary.approval_count = count_approvals(reactions, travelers)
    summary.required_approvals = required_approvals(len(travelers))
    summary.total_reactions = len(latest)
    if user_id and user_id in latest:
        summary.user_reaction = _reaction_value(latest[user_id])
    return summary


def locked_window_text(trip: Any) -> str | None:
    """Label for the final dates of a locked trip"""
    start = parse_iso_date(window_field(trip, "locked_start_date"))
    end = parse_iso_date(window_field(trip, "locked_end_date")) or start
    if start is None or end < start:
        return None
    return format_range(start, end)
