"""Human-in-the-loop node: asks the user for tool arguments through a rendered form."""

import logging

from callisto_agent.agents.generative_ui.prompt import build_form_prompt
from callisto_agent.agents.generative_ui.state import AgentState
from callisto_agent.platform.agent.config import AgentConfig
from callisto_agent.platform.agent.contract import ErrorMessage, RenderHtmlMessage
from callisto_agent.platform.agent.langgraph import LangGraphMessageParser
from callisto_agent.platform.clients.rendering import RenderingClient, RenderingError

from .base import Node

logger = logging.getLogger(__name__)

RENDER_ERROR = "render_error"
RENDER_ERROR_TEXT = (
    "Sorry, I'm having trouble generating the form right now. Please try again in a moment."
)


class HumanInTheLoopNode(Node):
    """Node that renders a form for the pending tool and pauses the cycle."""

    def __init__(
        self,
        rendering_client: RenderingClient,
        config: AgentConfig,
        message_parser: LangGraphMessageParser | None = None,
    ):
        """Initialize the node.

        Args:
            rendering_client: Client for the rendering service
            config: Agent configuration
            message_parser: Parser used to build directive messages
        """
        self.rendering_client = rendering_client
        self.config = config
        self.message_parser = message_parser or LangGraphMessageParser()

    async def __call__(self, state: AgentState) -> dict:
        """Render the form and append the render_html directive.

        Args:
            state: Current agent state, with pending_tool_name set

        Returns:
            State update with the directive, or an error message when rendering fails
        """
        tool_name = state.get("pending_tool_name")
        if not tool_name:
            raise ValueError("Invalid state: pending_tool_name is not set.")

        tool = (state.get("tool_definitions") or {}).get(tool_name)
        if tool is None:
            raise ValueError(f"Tool {tool_name} not found.")

        try:
            html = await self.rendering_client.render(tool.json_schema, tool_name=tool.name)
        except RenderingError:
            logger.exception(f"Failed to render form for tool {tool_name}")
            error = ErrorMessage(code=RENDER_ERROR, message=RENDER_ERROR_TEXT, tool_name=tool_name)
            return {
                "messages": [self.message_parser.to_langchain_message(error)],
                "requires_user_input": False,
                "pending_tool_name": None,
            }

        directive = RenderHtmlMessage(
            html=html,
            component_id=self.config.form_component_id,
            message=build_form_prompt(tool.description),
            json_schema=tool.json_schema,
            tool_name=tool.name,
        )
        return {"messages": [self.message_parser.to_langchain_message(directive)]}
