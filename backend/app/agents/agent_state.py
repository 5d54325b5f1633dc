# agent_state.py - Shared state for the planning agents
from typing import Annotated, Any, TypedDict

from langgraph.graph.message import add_messages


class AgentState(TypedDict, total=False):
    """
    State schema shared by the LangGraph agents.

    Core fields:
    - messages: Accumulated conversation history
    - trip_id: Trip being planned
    - user_id: User the results are computed for (e.g. "has this user responded")
    - done: Whether the workflow is complete

    Generic storage:
    - agent_data: Generic dict for agent inputs and outputs
      Examples:
      - agent_data["trip_snapshot"] = TripSnapshot(...)   # optional pre-fetched input
      - agent_data["scheduling"] = {...}                  # SchedulingAgent output
      - agent_data["phase_transition"] = {"from": ..., "to": ...}
    """

    # ========== Core Communication Fields ==========
    messages: Annotated[list, add_messages]

    # ========== Identifiers ==========
    trip_id: str
    user_id: str

    # ========== Workflow Control ==========
    done: bool  # Workflow completion flag

    # ========== Generic Storage ==========
    agent_data: dict[str, Any]  # All agent outputs
