"""Generative UI agent builder module.

This module provides the builder class for the generative UI agent: a
LangGraph state machine that, after each model turn, hands a tool call to the
client, asks the user for missing tool arguments through a server-rendered
form, or ends the cycle.
"""

from collections.abc import Sequence
from typing import Self

import httpx
from langchain_core.messages import SystemMessage
from langgraph.graph import END, START, StateGraph

from callisto_agent.agents.generative_ui.nodes import (
    HumanInTheLoopNode,
    ModelNode,
    ToolExecutorNode,
)
from callisto_agent.agents.generative_ui.prompt import build_system_prompt
from callisto_agent.agents.generative_ui.routing import Route
from callisto_agent.agents.generative_ui.state import AgentState
from callisto_agent.platform.agent.config import (
    AgentConfig,
    AgentIdentity,
    LlmConfig,
    RenderingConfig,
)
from callisto_agent.platform.agent.contract import Message, ToolDefinition
from callisto_agent.platform.agent.langgraph import LangGraphAgent, LangGraphMessageParser
from callisto_agent.platform.agent.llm_client import LlmClient
from callisto_agent.platform.clients.rendering import RenderingClient
from callisto_agent.platform.constants import SERVICE_NAME, SQUAD_NAME
from callisto_agent.platform.settings import Settings


class GenerativeUIAgentBuilder:
    """Builder for constructing the generative UI agent.

    This builder assembles all components needed for the agent:
    - LLM client (tools are bound per request from the client's catalog)
    - Rendering client for the human-in-the-loop form
    - Model, tool executor and human-in-the-loop nodes
    """

    SLUG = "generative-ui"

    def __init__(
        self,
        agent_config: AgentConfig,
        llm_config: LlmConfig,
        rendering_config: RenderingConfig,
        identity: AgentIdentity,
        http_client: httpx.AsyncClient | None = None,
        llm_client: LlmClient | None = None,
        rendering_client: RenderingClient | None = None,
    ) -> None:
        """Initialize the builder with configuration.

        Args:
            agent_config: Configuration for agent behavior
            llm_config: Configuration for the LLM client
            rendering_config: Configuration for the rendering service
            identity: Agent identity (name, description, slug, squad)
            http_client: Optional shared HTTP client for the rendering service
            llm_client: Optional pre-built LLM client. Inject for testing.
            rendering_client: Optional pre-built rendering client. Inject for testing.
        """
        self.agent_config = agent_config
        self.llm_config = llm_config
        self.rendering_config = rendering_config
        self.identity = identity
        self.http_client = http_client
        self._llm_client = llm_client
        self._rendering_client = rendering_client

    async def build(self) -> LangGraphAgent:
        """Build and return a configured LangGraphAgent.

        The graph has no checkpointer: each request carries the full history
        and runs exactly one decision cycle.

        Returns:
            A fully configured LangGraphAgent ready for execution.
        """
        llm_client = self._llm_client or LlmClient.from_config(self.identity.slug, self.llm_config)
        rendering_client = self._rendering_client or RenderingClient(
            self.rendering_config,
            http_client=self.http_client,
            agent_slug=self.identity.slug,
        )
        message_parser = LangGraphMessageParser()

        model_node = ModelNode(
            llm_client,
            self.agent_config,
            timeout_seconds=self.llm_config.timeout_seconds,
            message_parser=message_parser,
        )
        tool_executor_node = ToolExecutorNode()
        human_in_the_loop_node = HumanInTheLoopNode(
            rendering_client,
            self.agent_config,
            message_parser=message_parser,
        )

        workflow = StateGraph(AgentState)  # type: ignore[bad-specialization]

        workflow.add_node(
            "agent",
            model_node,  # type: ignore
            destinations=(Route.TOOL_EXECUTOR.value, Route.HUMAN_IN_THE_LOOP.value),
        )
        workflow.add_node(Route.TOOL_EXECUTOR.value, tool_executor_node)  # type: ignore
        workflow.add_node(Route.HUMAN_IN_THE_LOOP.value, human_in_the_loop_node)  # type: ignore

        workflow.add_edge(START, "agent")  # type: ignore
        workflow.add_edge(Route.TOOL_EXECUTOR.value, END)  # type: ignore
        workflow.add_edge(Route.HUMAN_IN_THE_LOOP.value, END)  # type: ignore

        compiled = workflow.compile()
        return LangGraphAgent(
            graph=compiled.with_config({"recursion_limit": self.agent_config.recursion_limit}),  # type: ignore
            identity=self.identity,
            initial_state_builder=self.build_initial_state,  # type: ignore
            message_parser=message_parser,
        )

    @classmethod
    def default_identity(cls) -> AgentIdentity:
        return AgentIdentity(
            name="Generative UI",
            description="A chat agent that calls client-side tools and asks for missing details with forms",
            slug=cls.SLUG,
            squad=SQUAD_NAME,
            origin=SERVICE_NAME,
        )

    @classmethod
    def default_builder(
        cls,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
        identity: AgentIdentity | None = None,
    ) -> Self:
        """Create a builder configured from application settings.

        Args:
            settings: Application settings
            http_client: Optional shared HTTP client for the rendering service
            identity: Optional agent identity. Defaults to the generative UI agent.

        Returns:
            A configured GenerativeUIAgentBuilder instance.
        """
        return cls(
            agent_config=AgentConfig(
                # One decision cycle visits at most two nodes; the limit only
                # guards against a misconfigured graph.
                recursion_limit=10,
                max_context_tokens=100000,
            ),
            llm_config=LlmConfig(
                model=settings.litellm.model,
                base_url=settings.litellm.proxy_api_base,
                api_key=settings.litellm.proxy_api_key,
                temperature=settings.litellm.temperature,
                timeout_seconds=settings.litellm.timeout_seconds,
            ),
            rendering_config=RenderingConfig(
                url=settings.rendering.url,
                component=settings.rendering.component,
                timeout_seconds=settings.rendering.timeout_seconds,
                max_attempts=settings.rendering.max_attempts,
            ),
            identity=identity or cls.default_identity(),
            http_client=http_client,
        )

    @classmethod
    def build_initial_state(
        cls,
        messages: Sequence[Message],
        tool_definitions: Sequence[ToolDefinition],
        thread_id: str,
    ) -> AgentState:
        """Get the initial state for one decision cycle.

        The state is rebuilt from the posted history on every request.

        Args:
            messages: Contract history posted by the client
            tool_definitions: Tools the client can execute for this session
            thread_id: Identifier grouping the requests of one conversation

        Returns:
            Initial agent state dictionary
        """
        system_msg = SystemMessage(content=build_system_prompt())
        history = LangGraphMessageParser().to_langchain(messages)

        return AgentState(
            messages=[system_msg, *history],
            tool_definitions={tool.name: tool for tool in tool_definitions},
            requires_user_input=False,
            pending_tool_name=None,
            thread_id=thread_id,
            agent_slug=cls.SLUG,
            input_tokens_by_model={},
            output_tokens_by_model={},
        )
