"""
Calendar helpers shared by the consensus engine.

Windows reach the engine either as pydantic models or as raw trip documents,
so field access goes through window_field()/window_bounds() instead of
attribute lookups.
"""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

# Document aliases for a window's start/end, most specific first
_START_KEYS = ("normalized_start", "start_iso", "start_date")
_END_KEYS = ("normalized_end", "end_iso", "end_date")


def window_field(window: Any, name: str, default: Any = None) -> Any:
    if window is None:
        return default
    if isinstance(window, Mapping):
        return window.get(name, default)
    return getattr(window, name, default)


def parse_iso_date(value: Any) -> date | None:
    """Accept date, datetime or 'YYYY-MM-DD'; anything else is None"""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def _first_date(window: Any, keys: tuple[str, ...]) -> date | None:
    for key in keys:
        parsed = parse_iso_date(window_field(window, key))
        if parsed is not None:
            return parsed
    return None


def window_bounds(window: Any) -> tuple[date, date] | None:
    """(start, end) of a dated window, or None when undated or inverted"""
    start = _first_date(window, _START_KEYS)
    end = _first_date(window, _END_KEYS)
    if start is None or end is None or end < start:
        return None
    return start, end


def inclusive_days(start: date, end: date) -> int:
    return (end - start).days + 1


def format_day(day: date) -> str:
    """'Jun 3'"""
    return f"{day.strftime('%b')} {day.day}"


def format_range(start: date, end: date, separator: str = " – ") -> str:
    if start == end:
        return format_day(start)
    return f"{format_day(start)}{separator}{format_day(end)}"


def option_key(start: date, end: date) -> str:
    return f"{start.isoformat()}_{end.isoformat()}"


def window_supporters(window: Any) -> set[str]:
    """Supporter IDs plus the proposer, who always backs their own window"""
    users = {uid for uid in (window_field(window, "supporter_ids") or []) if uid}
    proposer = window_field(window, "proposed_by")
    if proposer:
        users.add(proposer)
    return users


def proposal_order(item: Any, position: int) -> int:
    """Explicit proposal_index when set, else the item's position in its list"""
    index = window_field(item, "proposal_index")
    return index if isinstance(index, int) else position
