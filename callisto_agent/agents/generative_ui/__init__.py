"""Generative UI agent: tool calls executed on the client, forms rendered on the server."""

from callisto_agent.agents.generative_ui.agent import GenerativeUIAgentBuilder
from callisto_agent.agents.generative_ui.routes import chat_router

__all__ = [
    "GenerativeUIAgentBuilder",
    "chat_router",
]
