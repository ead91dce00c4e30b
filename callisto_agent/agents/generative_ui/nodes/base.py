"""Base protocol for agent nodes."""

from typing import Any, Protocol, runtime_checkable

from callisto_agent.agents.generative_ui.state import AgentState


@runtime_checkable
class Node(Protocol):
    """Protocol for agent graph nodes.

    Nodes are callable objects that receive the AgentState and return a
    partial state update (or a LangGraph Command carrying one).
    """

    async def __call__(self, state: AgentState) -> Any:
        """Process state and return the update.

        Args:
            state: Current agent state

        Returns:
            Partial state update or Command
        """
        ...
