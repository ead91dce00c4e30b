"""LangGraph nodes."""

from callisto_agent.agents.generative_ui.nodes.base import Node
from callisto_agent.agents.generative_ui.nodes.human_in_the_loop import HumanInTheLoopNode
from callisto_agent.agents.generative_ui.nodes.model import ModelNode
from callisto_agent.agents.generative_ui.nodes.tool_executor import ToolExecutorNode

__all__ = [
    "HumanInTheLoopNode",
    "ModelNode",
    "Node",
    "ToolExecutorNode",
]
