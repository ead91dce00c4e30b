"""Routing decision taken after every model turn.

``route`` is a pure function of the agent state: it returns the state update to
apply together with the node to jump to, and never mutates its input.
"""

import logging
from enum import StrEnum
from typing import Any, TypeAlias

from langchain_core.messages import AIMessage
from langgraph.graph import END as GRAPH_END

from callisto_agent.agents.generative_ui.state import AgentState
from callisto_agent.platform.agent.contract import ErrorMessage
from callisto_agent.platform.agent.langgraph import LangGraphMessageParser, directive_type

logger = logging.getLogger(__name__)

UNKNOWN_TOOL = "unknown_tool"


class Route(StrEnum):
    """Nodes reachable from the agent node."""

    TOOL_EXECUTOR = "tool_executor"
    HUMAN_IN_THE_LOOP = "human_in_the_loop"
    END = GRAPH_END


RoutingDecision: TypeAlias = tuple[dict[str, Any], Route]


def route(state: AgentState, message_parser: LangGraphMessageParser | None = None) -> RoutingDecision:
    """Decide what happens after the latest model response.

    Only the first tool call of a response is considered; extra calls are
    dropped with a warning.

    Args:
        state: Agent state whose last message is the model response to route
        message_parser: Parser used to build error messages

    Returns:
        Tuple of (state update, next route). The update is empty when the
        cycle simply ends.
    """
    messages = state.get("messages") or []
    if not messages:
        return {}, Route.END

    last = messages[-1]
    if not isinstance(last, AIMessage) or directive_type(last) is not None:
        return {}, Route.END
    if not last.tool_calls:
        return {}, Route.END

    tool_call = last.tool_calls[0]
    if len(last.tool_calls) > 1:
        dropped = [tc["name"] for tc in last.tool_calls[1:]]
        logger.warning(f"Only the first tool call is handled, dropping: {dropped}")

    name = tool_call["name"]
    definition = (state.get("tool_definitions") or {}).get(name)
    if definition is None:
        logger.warning(f"Model requested unknown tool {name}")
        parser = message_parser or LangGraphMessageParser()
        error = ErrorMessage(
            code=UNKNOWN_TOOL,
            message=f"Tool {name} not found.",
            tool_name=name,
        )
        return {
            "messages": [parser.to_langchain_message(error)],
            "requires_user_input": False,
            "pending_tool_name": None,
        }, Route.END

    errors = definition.validation_errors(tool_call.get("args") or {})
    if errors:
        logger.info(f"Arguments for {name} need user input: {errors}")
        return {"requires_user_input": True, "pending_tool_name": name}, Route.HUMAN_IN_THE_LOOP

    return {"requires_user_input": False, "pending_tool_name": None}, Route.TOOL_EXECUTOR
