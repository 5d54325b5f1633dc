"""
LangGraph workflows over the trip date consensus engine.

Submodules are not imported here: scheduling_agent pulls in the Mongo
snapshot loader, and tests should be able to import the state schema alone.

    from app.agents.scheduling_agent import SchedulingAgent
"""

__all__: list[str] = []
