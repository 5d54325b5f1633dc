"""
Tests for per-day convergence aggregation
"""

import sys
from datetime import date
from pathlib import Path

# Allow importing from backend/app
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.models.date_window import DateWindow
from app.scheduling.convergence import aggregate_convergence


def make_window(
    window_id: str,
    start: str | None,
    end: str | None,
    proposed_by: str | None,
    supporters: list[str] | None = None,
) -> DateWindow:
    return DateWindow(
        id=window_id,
        trip_id="trip-1",
        start_date=date.fromisoformat(start) if start else None,
        end_date=date.fromisoformat(end) if end else None,
        proposed_by=proposed_by,
        supporter_ids=supporters or [],
    )


def test_overlapping_windows_peak_on_shared_days():
    windows = [
        make_window("w1", "2025-06-01", "2025-06-05", "alice", ["alice", "bob"]),
        make_window("w2", "2025-06-03", "2025-06-08", "carol", ["carol"]),
    ]

    result = aggregate_convergence(windows)

    assert result is not None
    assert result.total_days == 8
    assert [d.supporter_count for d in result.days] == [2, 2, 3, 3, 3, 1, 1, 1]
    assert result.days[0].day == date(2025, 6, 1)
    assert result.peak_count == 3
    assert result.best_stretch.start_index == 2
    assert result.best_stretch.length == 3
    assert result.best_label == "Jun 3 – Jun 5"
    assert result.best_start_date == date(2025, 6, 3)
    assert result.best_end_date == date(2025, 6, 5)
    assert result.best_stretch_is_unique is True
    assert result.peak_stretch_count == 1


def test_traveler_counted_once_per_day():
    # alice backs both overlapping windows
    windows = [
        make_window("w1", "2025-06-01", "2025-06-04", "alice"),
        make_window("w2", "2025-06-02", "2025-06-05", "bob", ["alice"]),
    ]

    result = aggregate_convergence(windows)

    assert [d.supporter_count for d in result.days] == [1, 2, 2, 2, 2]
    assert result.peak_count == 2
    assert result.best_label == "Jun 2 – Jun 5"


def test_counts_bounded_by_distinct_supporters():
    windows = [
        make_window("w1", "2025-07-01", "2025-07-10", "a", ["b", "c"]),
        make_window("w2", "2025-07-05", "2025-07-12", "b", ["d"]),
        make_window("w3", "2025-07-08", "2025-07-09", "e"),
    ]
    distinct = {"a", "b", "c", "d", "e"}

    result = aggregate_convergence(windows)

    counts = [d.supporter_count for d in result.days]
    assert all(0 <= c <= len(distinct) for c in counts)
    assert result.peak_count == max(counts)


def test_single_day_best_label():
    windows = [
        make_window("w1", "2025-06-01", "2025-06-03", "a"),
        make_window("w2", "2025-06-03", "2025-06-05", "b"),
    ]
    result = aggregate_convergence(windows)
    assert result.best_label == "Jun 3"
    assert result.best_stretch.length == 1


def test_equal_length_runs_earliest_wins():
    windows = [
        make_window("w1", "2025-06-01", "2025-06-02", "a", ["b"]),
        make_window("w2", "2025-06-05", "2025-06-06", "c", ["d"]),
    ]

    result = aggregate_convergence(windows)

    assert [d.supporter_count for d in result.days] == [2, 2, 0, 0, 2, 2]
    assert result.best_stretch.start_index == 0
    assert result.best_label == "Jun 1 – Jun 2"
    assert result.best_stretch_is_unique is False
    assert result.peak_stretch_count == 2


def test_longer_later_run_beats_shorter_earlier_run():
    windows = [
        make_window("w1", "2025-06-01", "2025-06-01", "a", ["b"]),
        make_window("w2", "2025-06-04", "2025-06-07", "c", ["d"]),
    ]
    result = aggregate_convergence(windows)
    assert result.best_stretch.start_index == 3
    assert result.best_stretch.length == 4
    assert result.best_stretch_is_unique is True
    # a longer run does not make the shorter peak run go away
    assert result.peak_stretch_count == 2


def test_requires_two_dated_windows():
    dated = make_window("w1", "2025-06-01", "2025-06-05", "a")
    flexible = make_window("w2", None, None, "b")

    assert aggregate_convergence([dated, flexible]) is None
    assert aggregate_convergence([dated]) is None
    assert aggregate_convergence([]) is None
    assert aggregate_convergence(None) is None


def test_undated_windows_are_ignored():
    windows = [
        make_window("w1", "2025-06-01", "2025-06-02", "a"),
        make_window("w2", None, None, "z"),
        make_window("w3", "2025-06-02", "2025-06-03", "b"),
    ]
    result = aggregate_convergence(windows)
    assert result.peak_count == 2
    assert result.total_days == 3


def test_span_guard():
    # Jan 1 .. Apr 30 2025 is exactly 120 days
    within = [
        make_window("w1", "2025-01-01", "2025-01-03", "a"),
        make_window("w2", "2025-04-28", "2025-04-30", "b"),
    ]
    too_long = [
        make_window("w1", "2025-01-01", "2025-01-03", "a"),
        make_window("w2", "2025-05-01", "2025-05-03", "b"),
    ]

    assert aggregate_convergence(within, max_span_days=120).total_days == 120
    assert aggregate_convergence(too_long, max_span_days=120) is None
    assert aggregate_convergence(too_long, max_span_days=200) is not None


def test_no_supporters_means_no_result():
    windows = [
        make_window("w1", "2025-06-01", "2025-06-02", None),
        make_window("w2", "2025-06-02", "2025-06-03", None),
    ]
    assert aggregate_convergence(windows) is None


def test_accepts_raw_documents():
    windows = [
        {"id": "w1", "start_date": "2025-06-01", "end_date": "2025-06-05", "proposed_by": "alice", "supporter_ids": ["bob"]},
        {"id": "w2", "start_date": "2025-06-03", "end_date": "2025-06-08", "proposed_by": "carol"},
    ]
    result = aggregate_convergence(windows)
    assert result.peak_count == 3
    assert result.best_label == "Jun 3 – Jun 5"
