"""
Vote tallying for the date voting stage.

Votes reference an option_key ("<start>_<end>"), not a window id, so windows
with identical dates pool their votes. Ties go to the earliest-proposed option.
"""

from typing import Any

from app.models.scheduling import LockBasis, VotingOption, VotingStatus
from app.scheduling.dates import format_range, option_key, parse_iso_date, proposal_order, window_field

VOTING_STAGE = "voting"


def resolve_stage(trip: Any) -> str:
    """Trip status, or the implied default: hosted trips are born locked"""
    status = window_field(trip, "status")
    if status:
        return status
    return "locked" if window_field(trip, "type") == "hosted" else "scheduling"


def _first_name(name: str | None) -> str | None:
    if not name or not name.strip():
        return None
    return name.strip().split(" ")[0]


def _build_options(raw_options: list[Any]) -> dict[str, VotingOption]:
    options: dict[str, VotingOption] = {}
    for position, raw in enumerate(raw_options):
        start = parse_iso_date(window_field(raw, "start_date"))
        end = parse_iso_date(window_field(raw, "end_date"))
        if start is None or end is None:
            continue
        key = option_key(start, end)
        if key in options:
            continue
        label = (
            window_field(raw, "name")
            or window_field(raw, "label")
            or format_range(start, end, separator="–")
        )
        options[key] = VotingOption(
            option_key=key,
            label=label,
            start_date=start,
            end_date=end,
            proposal_index=proposal_order(raw, position),
        )
    return options


def _live_votes(votes: list[Any]) -> list[Any]:
    """One vote per user; a later submission replaces an earlier one"""
    by_user: dict[str, Any] = {}
    anonymous = []
    for vote in votes:
        user_id = window_field(vote, "user_id")
        if user_id:
            by_user.pop(user_id, None)
            by_user[user_id] = vote
        else:
            anonymous.append(vote)
    return anonymous + list(by_user.values())


def get_voting_status(
    trip: Any,
    votes: list[Any] | None,
    travelers: list[Any] | None,
    current_user_id: str | None = None,
) -> VotingStatus:
    """
    Tally `votes` over the trip's voting options.

    Outside the voting stage the result is the uniform default: no options,
    no leader, nothing to lock.
    """
    stage = resolve_stage(trip)
    total = len(travelers or [])
    result = VotingStatus(stage=stage, total_travelers=total, remaining_count=total)
    if stage != VOTING_STAGE:
        return result

    result.is_voting_stage = True

    votes = _live_votes(votes or [])
    voted_user_ids = {window_field(v, "user_id") for v in votes if window_field(v, "user_id")}
    result.voted_count = len(voted_user_ids)
    result.remaining_count = total - result.voted_count
    result.has_current_user_voted = current_user_id in voted_user_ids

    raw_options = window_field(trip, "promising_windows") or window_field(trip, "consensus_options") or []
    options = _build_options(raw_options)
    if not options:
        return result

    for vote in votes:
        option = options.get(window_field(vote, "option_key"))
        if option is None:
            continue
        option.votes += 1
        display = window_field(vote, "voter_name") or window_field(vote, "user_name")
        first_name = _first_name(display)
        if first_name and first_name not in option.voter_names:
            option.voter_names.append(first_name)

    result.options = sorted(options.values(), key=lambda o: (-o.votes, o.proposal_index))

    leader = result.options[0]
    if leader.votes > 0:
        result.leading_option = leader
        result.leading_votes = leader.votes
        if len(result.options) > 1 and result.options[1].votes == leader.votes:
            result.is_tie = True

    if total == 0:
        return result

    has_leader = result.leading_option is not None
    majority_voted = result.voted_count > total / 2
    all_voted = result.voted_count == total

    if majority_voted and has_leader and not result.is_tie:
        result.ready_to_lock = True
        result.ready_to_lock_reason = f"{result.voted_count}/{total} voted, clear leader"
        result.lock_basis = LockBasis.MAJORITY
    elif all_voted and has_leader and not result.is_tie:
        result.ready_to_lock = True
        result.ready_to_lock_reason = "All votes in"
        result.lock_basis = LockBasis.ALL_VOTED
    elif all_voted and result.is_tie:
        result.ready_to_lock = True
        result.ready_to_lock_reason = "All votes in (tie - leader decides)"
        result.lock_basis = LockBasis.TIE_LEADER_DECIDES

    return result


def format_leading_option(status: VotingStatus) -> str | None:
    if status.leading_option is None:
        return None
    label = status.leading_option.label
    votes = status.leading_votes
    if status.is_tie:
        return f"Tied: {label} ({votes} votes)"
    noun = "vote" if votes == 1 else "votes"
    return f"Leading: {label} ({votes} {noun})"
