"""
Scheduling Agent - Computes a trip's date consensus picture for the planning workflow
"""

from typing import Any

from langchain_core.messages import AIMessage
from langgraph.graph import END, StateGraph

from app.agents.agent_state import AgentState
from app.db.trip_snapshot import load_trip_snapshot
from app.models.common import json_or_none
from app.models.scheduling import SchedulingPhase
from app.models.trip import TripSnapshot
from app.scheduling.convergence import aggregate_convergence
from app.scheduling.phase_coordinator import (
    build_scheduling_summary,
    can_submit_window,
    detect_phase_transition,
    get_scheduling_phase,
    locked_window_text,
)
from app.scheduling.vote_tally import format_leading_option, get_voting_status


class SchedulingAgent:
    """
    Loads a trip snapshot and runs the consensus engine over it once:
    convergence, voting status, phase summary and proposal readiness.

    Reads agent_data:
    - trip_snapshot: optional pre-fetched snapshot (skips the database)
    - previous_phase: phase seen on the last run, for transition detection

    Writes agent_data:
    - scheduling: {phase, summary, convergence, voting_status, leading_text, ...}
    - phase_transition: {"from", "to"} when the phase moved forward
    """

    def __init__(self):
        self.app = self._build_graph()

    async def _load_snapshot(self, state: AgentState) -> AgentState:
        trip_id = state.get("trip_id")
        agent_data = dict(state.get("agent_data", {}) or {})

        provided = agent_data.get("trip_snapshot")
        if provided is not None:
            snapshot = provided if isinstance(provided, TripSnapshot) else TripSnapshot.model_validate(provided)
            agent_data["trip_snapshot"] = snapshot
            return {"agent_data": agent_data}

        if not trip_id:
            return {"done": True, "messages": [AIMessage(content="[scheduling] No trip_id")]}

        print(f"[scheduling_agent] Loading snapshot for trip {trip_id}")
        try:
            snapshot = await load_trip_snapshot(trip_id)
        except Exception as e:
            print(f"[scheduling_agent] Error loading trip {trip_id}: {e}")
            return {"done": True, "messages": [AIMessage(content=f"[scheduling] Error: {e}")]}

        if snapshot is None:
            return {"done": True, "messages": [AIMessage(content="[scheduling] Trip not found")]}

        agent_data["trip_snapshot"] = snapshot
        return {"agent_data": agent_data}

    def _after_load(self, state: AgentState) -> str:
        return "end" if state.get("done") else "summarize"

    async def _summarize(self, state: AgentState) -> AgentState:
        agent_data = dict(state.get("agent_data", {}) or {})
        snapshot: TripSnapshot = agent_data["trip_snapshot"]
        trip = snapshot.trip
        user_id = state.get("user_id")

        phase = get_scheduling_phase(trip)
        print(f"[scheduling_agent] Trip {trip.trip_id} phase: {phase.value}")

        # One convergence pass shared by the summary and the response
        convergence = aggregate_convergence(snapshot.windows)
        summary = build_scheduling_summary(snapshot, user_id, convergence=convergence)
        voting_status = get_voting_status(trip, snapshot.votes, snapshot.travelers, user_id)

        scheduling: dict[str, Any] = {
            "phase": phase.value,
            "can_submit_window": can_submit_window(trip),
            "summary": json_or_none(summary),
            "convergence": json_or_none(convergence),
            "voting_status": voting_status.model_dump(mode="json"),
            "leading_text": format_leading_option(voting_status),
        }
        if phase == SchedulingPhase.LOCKED:
            scheduling["locked_window_text"] = locked_window_text(trip)
        agent_data["scheduling"] = scheduling

        transition = detect_phase_transition(agent_data.get("previous_phase"), phase)
        if transition is not None:
            agent_data["phase_transition"] = json_or_none(transition, by_alias=True)
            print(f"[scheduling_agent] Phase moved {transition.from_phase.value} -> {transition.to_phase.value}")
        else:
            agent_data.pop("phase_transition", None)
        agent_data["previous_phase"] = phase.value

        if summary is None:
            content = "[scheduling] Dates locked"
        elif summary.phase == SchedulingPhase.COLLECTING:
            content = (
                f"[scheduling] {summary.window_count} windows, "
                f"{summary.responder_count}/{summary.total_travelers} responded, "
                f"proposal ready: {summary.proposal_ready}"
            )
        else:
            content = (
                f"[scheduling] Proposed {summary.proposed_window_text or 'dates'}: "
                f"{summary.approval_count}/{summary.required_approvals} approvals"
            )

        return {
            "agent_data": agent_data,
            "done": True,
            "messages": [AIMessage(content=content)],
        }

    def _build_graph(self) -> StateGraph:
        """Build LangGraph state machine"""
        g = StateGraph(AgentState)
        g.add_node("load_snapshot", self._load_snapshot)
        g.add_node("summarize", self._summarize)
        g.set_entry_point("load_snapshot")
        g.add_conditional_edges(
            "load_snapshot",
            self._after_load,
            {"summarize": "summarize", "end": END},
        )
        g.add_edge("summarize", END)
        return g.compile()

    async def run(self, initial_state: dict[str, Any]) -> dict[str, Any]:
        """Run the scheduling agent"""
        return await self.app.ainvoke(initial_state)
