"""Tool executor node: hands the requested tool call to the client."""

import logging

from langchain_core.messages import AIMessage

from callisto_agent.agents.generative_ui.state import AgentState
from callisto_agent.platform.agent.langgraph import DIRECTIVE_KEY

from .base import Node

logger = logging.getLogger(__name__)


class ToolExecutorNode(Node):
    """Node that turns the model's first tool call into a tool_call directive.

    Tools run on the client, so nothing is executed here. The model response
    is replaced in place (same message id) by a copy holding only the first
    tool call and tagged as a directive.
    """

    async def __call__(self, state: AgentState) -> dict:
        last = state["messages"][-1]
        if not isinstance(last, AIMessage) or not last.tool_calls:
            raise ValueError("Invalid state: expected an AIMessage with tool_calls.")

        tool_call = last.tool_calls[0]
        logger.info(f"Dispatching tool call {tool_call['name']} ({tool_call['id']}) to the client")
        directive = last.model_copy(
            update={
                "tool_calls": [tool_call],
                "additional_kwargs": {**last.additional_kwargs, DIRECTIVE_KEY: "tool_call"},
            }
        )
        return {"messages": [directive]}
