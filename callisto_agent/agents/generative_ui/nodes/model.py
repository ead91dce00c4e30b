"""Model node: one LLM turn followed by the routing decision."""

import asyncio
import logging

from langchain_core.messages import AIMessage, trim_messages
from langgraph.types import Command

from callisto_agent.agents.generative_ui.routing import Route, route
from callisto_agent.agents.generative_ui.state import AgentState
from callisto_agent.platform.agent.config import AgentConfig
from callisto_agent.platform.agent.contract import ErrorMessage
from callisto_agent.platform.agent.langgraph import LangGraphMessageParser
from callisto_agent.platform.agent.llm_client import LlmClient
from callisto_agent.platform.agent.metrics import record_route

from .base import Node

logger = logging.getLogger(__name__)

MODEL_ERROR = "model_error"
MODEL_ERROR_TEXT = "Sorry, I couldn't get a response from the language model. Please try again."


class ModelNode(Node):
    """Node that invokes the LLM with the client's tool catalog and routes its response.

    The catalog travels with every request, so tools are bound per call rather
    than once at build time.
    """

    def __init__(
        self,
        llm: LlmClient,
        config: AgentConfig,
        timeout_seconds: float,
        message_parser: LangGraphMessageParser | None = None,
    ):
        """Initialize the model node.

        Args:
            llm: LLM client without tools bound
            config: Agent configuration
            timeout_seconds: Deadline for one model call
            message_parser: Parser used to build error messages
        """
        self.llm = llm
        self.config = config
        self.timeout_seconds = timeout_seconds
        self.message_parser = message_parser or LangGraphMessageParser()
        self._trimmer = trim_messages(  # type: ignore
            max_tokens=self.config.max_context_tokens,
            strategy="last",
            token_counter=lambda msgs: sum(len(str(m.content)) for m in msgs) // 4,  # ~4 chars per token
            include_system=True,
            allow_partial=False,
            # a client-posted history may open with an assistant greeting
            start_on=["human", "ai"],
        )

    def _get_token_state_update(self, response: AIMessage) -> dict:
        """Extract token usage from response as state update dict.

        Args:
            response: AIMessage from LLM

        Returns:
            Dict with input/output tokens keyed by model for state reducer
        """
        input_tokens, output_tokens = self.llm.extract_tokens(response)
        return {
            "input_tokens_by_model": {self.llm.model_name: input_tokens},
            "output_tokens_by_model": {self.llm.model_name: output_tokens},
        }

    async def __call__(self, state: AgentState) -> Command:
        """Call the model, append its response and jump to the routed node.

        Args:
            state: Current agent state

        Returns:
            Command carrying the state update and the next node
        """
        agent_slug = state.get("agent_slug", "")
        messages = state["messages"]
        tools = [tool.to_openai_tool() for tool in (state.get("tool_definitions") or {}).values()]
        logger.debug(f"Calling model with {len(messages)} messages and {len(tools)} tools")

        chain = self._trimmer | self.llm.bind_tools(tools)
        try:
            async with asyncio.timeout(self.timeout_seconds):
                response = await chain.ainvoke(messages)
        except Exception:
            logger.exception("Model call failed")
            error = ErrorMessage(code=MODEL_ERROR, message=MODEL_ERROR_TEXT)
            record_route(agent_slug, Route.END)
            return Command(
                update={
                    "messages": [self.message_parser.to_langchain_message(error)],
                    "requires_user_input": False,
                    "pending_tool_name": None,
                },
                goto=Route.END.value,
            )

        update, next_route = route(
            {**state, "messages": [*messages, response]},  # type: ignore
            message_parser=self.message_parser,
        )
        record_route(agent_slug, next_route)
        return Command(
            update={
                **update,
                "messages": [response, *update.get("messages", [])],
                **self._get_token_state_update(response),
            },
            goto=next_route.value,
        )
