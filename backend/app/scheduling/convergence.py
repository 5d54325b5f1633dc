"""
Convergence aggregation: which dates work for the most people.

For each day between the earliest start and the latest end of the dated
windows, count the UNIQUE travelers backing at least one window that covers
the day. A traveler supporting two overlapping windows is counted once.
"""

from datetime import timedelta
from typing import Any

from app.core.config import CONVERGENCE_MAX_SPAN_DAYS
from app.models.scheduling import BestStretch, ConvergenceResult, DayAvailability
from app.scheduling.dates import format_range, inclusive_days, window_bounds, window_supporters

MIN_DATED_WINDOWS = 2


def _longest_peak_runs(counts: list[int], peak: int) -> tuple[BestStretch | None, int, int]:
    """
    Longest run of consecutive days at `peak`, earliest run winning length ties.
    Also returns how many runs share that best length, and how many peak runs
    there are in total.
    """
    best: BestStretch | None = None
    ties = 0
    runs = 0
    run_start = None
    for index, count in enumerate(counts + [None]):
        if count == peak:
            if run_start is None:
                run_start = index
            continue
        if run_start is not None:
            runs += 1
            length = index - run_start
            if best is None or length > best.length:
                best = BestStretch(start_index=run_start, length=length)
                ties = 1
            elif length == best.length:
                ties += 1
            run_start = None
    return best, ties, runs


def aggregate_convergence(
    windows: list[Any] | None,
    max_span_days: int = CONVERGENCE_MAX_SPAN_DAYS,
) -> ConvergenceResult | None:
    """
    Build the per-day availability series and find the best stretch.

    Returns None when fewer than two windows carry dates, when the day axis
    would exceed `max_span_days`, or when no day has any supporter.
    """
    dated = []
    for window in windows or []:
        bounds = window_bounds(window)
        if bounds is not None:
            dated.append((bounds[0], bounds[1], window_supporters(window)))
    if len(dated) < MIN_DATED_WINDOWS:
        return None

    axis_start = min(start for start, _, _ in dated)
    axis_end = max(end for _, end, _ in dated)
    total_days = inclusive_days(axis_start, axis_end)
    if total_days <= 0 or total_days > max_span_days:
        return None

    days = []
    for offset in range(total_days):
        day = axis_start + timedelta(days=offset)
        available: set[str] = set()
        for start, end, supporters in dated:
            if start <= day <= end:
                available |= supporters
        days.append(DayAvailability(day=day, supporter_count=len(available)))

    counts = [d.supporter_count for d in days]
    peak = max(counts)
    if peak == 0:
        return None

    best, ties, runs = _longest_peak_runs(counts, peak)
    best_start = days[best.start_index].day
    best_end = days[best.start_index + best.length - 1].day

    return ConvergenceResult(
        days=days,
        peak_count=peak,
        best_stretch=best,
        best_label=format_range(best_start, best_end),
        best_start_date=best_start,
        best_end_date=best_end,
        best_stretch_is_unique=ties == 1,
        peak_stretch_count=runs,
        total_days=total_days,
    )
