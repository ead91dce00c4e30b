"""Agent dependencies for FastAPI routes."""

from collections.abc import Callable

from fastapi import Request

from callisto_agent.platform.agent.protocol import Agent


def get_agent(builder_cls: type) -> Callable[[Request], Agent]:
    """Create a dependency that retrieves a built agent by its builder class.

    Agents are built once in the application lifespan and stored in
    ``app.state.agents`` keyed by builder class.

    Args:
        builder_cls: The agent builder class (e.g., GenerativeUIAgentBuilder)

    Returns:
        A FastAPI dependency function that returns the built agent

    Raises:
        KeyError: If the agent is not found in the registry

    Example:
        from callisto_agent.agents.generative_ui.agent import GenerativeUIAgentBuilder

        @router.post("/chat")
        async def chat(
            payload: ChatRequest,
            agent: Agent = Depends(get_agent(GenerativeUIAgentBuilder)),
        ):
            return await agent.run(payload.messages, payload.tool_definitions, thread_id)
    """

    def _get_agent(request: Request) -> Agent:
        agents = request.app.state.agents
        if builder_cls not in agents:
            raise KeyError(
                f"Agent for {builder_cls.__name__} not found. "
                f"Available: {[cls.__name__ for cls in agents.keys()]}"
            )
        return agents[builder_cls]

    return _get_agent
