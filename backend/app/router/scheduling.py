"""
Scheduling Router
Read-side endpoints over the trip date consensus engine
"""

from datetime import date

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field, model_validator

from app.core.config import SIMILARITY_THRESHOLD
from app.db.trip_snapshot import load_trip_snapshot
from app.models.common import APIResponse, json_or_none
from app.models.trip import TripSnapshot
from app.scheduling.convergence import aggregate_convergence
from app.scheduling.phase_coordinator import (
    build_scheduling_summary,
    can_leader_propose,
    can_submit_window,
    get_scheduling_phase,
)
from app.scheduling.vote_tally import format_leading_option, get_voting_status
from app.scheduling.window_overlap import find_similar_windows, get_most_similar_window

router = APIRouter(prefix="/trips/{trip_id}/scheduling", tags=["Scheduling"])


class SimilarWindowsRequest(BaseModel):
    """A window a traveler is about to propose"""

    start_date: date
    end_date: date
    threshold: float = Field(default=SIMILARITY_THRESHOLD, gt=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_order(self) -> "SimilarWindowsRequest":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


async def _require_snapshot(trip_id: str) -> TripSnapshot:
    snapshot = await load_trip_snapshot(trip_id)
    if snapshot is None:
        raise HTTPException(status_code=404, detail=f"Trip {trip_id} not found")
    return snapshot


@router.get("/summary", response_model=APIResponse)
async def get_scheduling_summary(
    trip_id: str,
    user_id: str | None = Query(None, description="Viewing user"),
):
    """
    Live scheduling summary for the trip. data is null once dates are locked.
    """
    try:
        snapshot = await _require_snapshot(trip_id)
        summary = build_scheduling_summary(snapshot, user_id)
        return APIResponse(code=0, msg="ok", data=json_or_none(summary))

    except HTTPException:
        raise
    except Exception as e:
        print(f"[get_scheduling_summary] Error: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to compute scheduling summary: {str(e)}")


@router.get("/convergence", response_model=APIResponse)
async def get_convergence(trip_id: str):
    """
    Per-day availability heat map and best overlap stretch.
    data is null with fewer than two dated windows or a span that is too long.
    """
    try:
        snapshot = await _require_snapshot(trip_id)
        result = aggregate_convergence(snapshot.windows)
        return APIResponse(code=0, msg="ok", data=json_or_none(result))

    except HTTPException:
        raise
    except Exception as e:
        print(f"[get_convergence] Error: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to compute convergence: {str(e)}")


@router.get("/voting-status", response_model=APIResponse)
async def get_trip_voting_status(
    trip_id: str,
    user_id: str | None = Query(None, description="Viewing user"),
):
    try:
        snapshot = await _require_snapshot(trip_id)
        status = get_voting_status(snapshot.trip, snapshot.votes, snapshot.travelers, user_id)
        data = status.model_dump(mode="json")
        data["leading_text"] = format_leading_option(status)
        return APIResponse(code=0, msg="ok", data=data)

    except HTTPException:
        raise
    except Exception as e:
        print(f"[get_trip_voting_status] Error: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to compute voting status: {str(e)}")


@router.get("/phase", response_model=APIResponse)
async def get_phase(
    trip_id: str,
    leader_override: bool = Query(False, description="Leader wants to propose before the threshold"),
):
    """
    Current phase plus whether the leader should be offered the next step.
    """
    try:
        snapshot = await _require_snapshot(trip_id)
        phase = get_scheduling_phase(snapshot.trip)
        readiness = can_leader_propose(snapshot.windows, snapshot.travelers, leader_override)
        return APIResponse(
            code=0,
            msg="ok",
            data={
                "phase": phase.value,
                "can_submit_window": can_submit_window(snapshot.trip),
                "proposal": readiness.model_dump(mode="json"),
            },
        )

    except HTTPException:
        raise
    except Exception as e:
        print(f"[get_phase] Error: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/similar-windows", response_model=APIResponse)
async def check_similar_windows(trip_id: str, body: SimilarWindowsRequest):
    """
    Existing windows that overlap a proposed one enough to be near-duplicates.
    """
    print(f"[check_similar_windows] trip={trip_id}, window={body.start_date}..{body.end_date}")
    try:
        snapshot = await _require_snapshot(trip_id)
        candidate = {"start_date": body.start_date, "end_date": body.end_date}

        similar = find_similar_windows(candidate, snapshot.windows, body.threshold)
        most_similar = get_most_similar_window(candidate, snapshot.windows, body.threshold)

        return APIResponse(
            code=0,
            msg="ok",
            data={
                "similar": [
                    {"window": s.window.model_dump(mode="json"), "score": s.score} for s in similar
                ],
                "most_similar": json_or_none(most_similar),
                "is_near_duplicate": most_similar is not None,
            },
        )

    except HTTPException:
        raise
    except Exception as e:
        print(f"[check_similar_windows] Error: {e}")
        raise HTTPException(status_code=500, detail=str(e))
