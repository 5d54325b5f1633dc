"""
Window overlap detection.

Scores how much two date windows overlap so a traveler about to propose a new
window can be nudged toward supporting an existing near-duplicate instead.
"""

import math
from typing import Any

from app.core.config import SIMILARITY_THRESHOLD
from app.models.scheduling import MostSimilarWindow, SimilarWindow
from app.scheduling.dates import inclusive_days, window_bounds, window_field


def _round_score(score: float) -> float:
    """Two decimals, halves rounded up"""
    return math.floor(score * 100 + 0.5) / 100


def compute_overlap_score(window_a: Any, window_b: Any) -> float:
    """
    Score = overlapping days / length of the shorter window.

    0.0 means no shared day, 1.0 means the shorter window sits entirely inside
    the longer one. Undated windows always score 0.
    """
    bounds_a = window_bounds(window_a)
    bounds_b = window_bounds(window_b)
    if bounds_a is None or bounds_b is None:
        return 0.0

    start_a, end_a = bounds_a
    start_b, end_b = bounds_b
    intersect_start = max(start_a, start_b)
    intersect_end = min(end_a, end_b)
    if intersect_start > intersect_end:
        return 0.0

    overlap = inclusive_days(intersect_start, intersect_end)
    shorter = min(inclusive_days(start_a, end_a), inclusive_days(start_b, end_b))
    return overlap / shorter


def find_similar_windows(
    new_window: Any,
    existing_windows: list[Any] | None,
    threshold: float = SIMILARITY_THRESHOLD,
) -> list[SimilarWindow]:
    """
    Existing windows scoring at least `threshold` against `new_window`,
    best first. Windows sharing no day are never returned. Scores are rounded
    to 2 decimals; equal scores keep input order.
    """
    if not existing_windows:
        return []

    similar = []
    for existing in existing_windows:
        score = compute_overlap_score(new_window, existing)
        # no shared day is never similar, whatever the threshold
        if score > 0 and score >= threshold:
            similar.append(SimilarWindow(window=existing, score=_round_score(score)))

    # list.sort is stable, so ties stay in input order
    similar.sort(key=lambda s: s.score, reverse=True)
    return similar


def get_most_similar_window(
    new_window: Any,
    existing_windows: list[Any] | None,
    threshold: float = SIMILARITY_THRESHOLD,
) -> MostSimilarWindow | None:
    similar = find_similar_windows(new_window, existing_windows, threshold)
    if not similar:
        return None
    best = similar[0]
    window_id = window_field(best.window, "id") or window_field(best.window, "_id")
    return MostSimilarWindow(
        window_id=str(window_id) if window_id is not None else None,
        score=best.score,
    )


def is_near_duplicate(
    new_window: Any,
    existing_windows: list[Any] | None,
    threshold: float = SIMILARITY_THRESHOLD,
) -> bool:
    return get_most_similar_window(new_window, existing_windows, threshold) is not None
