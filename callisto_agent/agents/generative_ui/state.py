"""LangGraph state definition for the generative UI agent."""

from callisto_agent.platform.agent.contract import ToolDefinition
from callisto_agent.platform.agent.state import BaseAgentState


class AgentState(BaseAgentState):
    """LangGraph state for the generative UI agent.

    Inherits from BaseAgentState and adds:
        tool_definitions: Tools the client can execute, keyed by name
        requires_user_input: Whether the cycle paused to collect tool arguments via a form
        pending_tool_name: Tool whose arguments are being collected, if any
    """

    tool_definitions: dict[str, ToolDefinition]
    requires_user_input: bool
    pending_tool_name: str | None
