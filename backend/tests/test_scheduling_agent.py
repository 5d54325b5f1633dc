"""
Test suite for the Scheduling Agent
Runs the LangGraph workflow over in-memory snapshots: load -> summarize
"""

import asyncio
import sys
from datetime import date
from pathlib import Path
from unittest.mock import AsyncMock, patch

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.agents.scheduling_agent import SchedulingAgent
from app.models.date_window import DateWindow
from app.models.trip import Traveler, Trip, TripSnapshot
from app.models.vote import DateReaction


def print_section(title: str):
    """Print a formatted section header"""
    print("\n" + "=" * 80)
    print(f"  {title}")
    print("=" * 80)


def build_snapshot(**trip_fields) -> TripSnapshot:
    return TripSnapshot(
        trip=Trip(trip_id="trip-1", name="Lisbon Long Weekend", **trip_fields),
        travelers=[Traveler(user_id=u, name=u.title()) for u in ("alice", "bob", "carol", "dave")],
        windows=[
            DateWindow(
                id="w1",
                trip_id="trip-1",
                start_date=date(2025, 6, 1),
                end_date=date(2025, 6, 5),
                proposed_by="alice",
                supporter_ids=["bob"],
            ),
            DateWindow(
                id="w2",
                trip_id="trip-1",
                start_date=date(2025, 6, 3),
                end_date=date(2025, 6, 8),
                proposed_by="carol",
            ),
        ],
        reactions=[
            DateReaction(trip_id="trip-1", window_id="w1", user_id="alice", reaction_type="WORKS"),
            DateReaction(trip_id="trip-1", window_id="w1", user_id="bob", reaction_type="WORKS"),
        ],
    )


def run_agent(state: dict) -> dict:
    return asyncio.run(SchedulingAgent().run(state))


def test_collecting_snapshot():
    print_section("COLLECTING PHASE")
    result = run_agent(
        {
            "trip_id": "trip-1",
            "user_id": "bob",
            "agent_data": {"trip_snapshot": build_snapshot()},
        }
    )

    scheduling = result["agent_data"]["scheduling"]
    print(scheduling["summary"])

    assert result["done"] is True
    assert scheduling["phase"] == "COLLECTING"
    assert scheduling["can_submit_window"] is True
    assert scheduling["summary"]["proposal_ready"] is True
    assert scheduling["summary"]["leading_window_text"] == "Jun 3 – Jun 5"
    assert scheduling["convergence"]["peak_count"] == 3
    assert scheduling["voting_status"]["is_voting_stage"] is False
    assert scheduling["leading_text"] is None
    assert "phase_transition" not in result["agent_data"]
    assert result["agent_data"]["previous_phase"] == "COLLECTING"
    assert result["messages"][-1].content == "[scheduling] 2 windows, 3/4 responded, proposal ready: True"


def test_phase_transition_detected():
    print_section("COLLECTING -> PROPOSED")
    result = run_agent(
        {
            "trip_id": "trip-1",
            "user_id": "alice",
            "agent_data": {
                "trip_snapshot": build_snapshot(proposed_window_id="w1"),
                "previous_phase": "COLLECTING",
            },
        }
    )

    agent_data = result["agent_data"]
    assert agent_data["phase_transition"] == {"from": "COLLECTING", "to": "PROPOSED"}
    assert agent_data["previous_phase"] == "PROPOSED"
    assert agent_data["scheduling"]["summary"]["approval_count"] == 2
    assert agent_data["scheduling"]["summary"]["user_reaction"] == "WORKS"
    assert result["messages"][-1].content == "[scheduling] Proposed Jun 1 – Jun 5: 2/2 approvals"


def test_no_backward_transition():
    result = run_agent(
        {
            "trip_id": "trip-1",
            "agent_data": {"trip_snapshot": build_snapshot(), "previous_phase": "PROPOSED"},
        }
    )
    assert "phase_transition" not in result["agent_data"]


def test_locked_trip():
    print_section("LOCKED PHASE")
    snapshot = build_snapshot(
        status="locked",
        proposed_window_id="w1",
        locked_start_date=date(2025, 6, 1),
        locked_end_date=date(2025, 6, 5),
    )
    result = run_agent({"trip_id": "trip-1", "agent_data": {"trip_snapshot": snapshot}})

    scheduling = result["agent_data"]["scheduling"]
    assert scheduling["phase"] == "LOCKED"
    assert scheduling["summary"] is None
    assert scheduling["can_submit_window"] is False
    assert scheduling["locked_window_text"] == "Jun 1 – Jun 5"
    assert result["messages"][-1].content == "[scheduling] Dates locked"


def test_snapshot_passed_as_dict():
    snapshot = build_snapshot().model_dump(mode="json")
    result = run_agent({"trip_id": "trip-1", "agent_data": {"trip_snapshot": snapshot}})
    assert result["agent_data"]["scheduling"]["summary"]["window_count"] == 2


def test_loads_snapshot_from_database():
    with patch(
        "app.agents.scheduling_agent.load_trip_snapshot",
        new=AsyncMock(return_value=build_snapshot()),
    ) as loader:
        result = run_agent({"trip_id": "trip-1", "user_id": "dave"})

    loader.assert_awaited_once_with("trip-1")
    assert result["agent_data"]["scheduling"]["summary"]["user_has_responded"] is False


def test_trip_not_found():
    with patch("app.agents.scheduling_agent.load_trip_snapshot", new=AsyncMock(return_value=None)):
        result = run_agent({"trip_id": "missing"})

    assert result["done"] is True
    assert "scheduling" not in result.get("agent_data", {})
    assert result["messages"][-1].content == "[scheduling] Trip not found"


def test_database_error_ends_workflow():
    with patch(
        "app.agents.scheduling_agent.load_trip_snapshot",
        new=AsyncMock(side_effect=RuntimeError("connection refused")),
    ):
        result = run_agent({"trip_id": "trip-1"})

    assert result["done"] is True
    assert result["messages"][-1].content == "[scheduling] Error: connection refused"


def test_missing_trip_id():
    result = run_agent({"trip_id": ""})
    assert result["messages"][-1].content == "[scheduling] No trip_id"


if __name__ == "__main__":
    test_collecting_snapshot()
    test_phase_transition_detected()
    test_locked_trip()
