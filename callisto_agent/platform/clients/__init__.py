"""HTTP clients for external services.

This module provides the client for the HTML rendering service and the
client-side chat library (tool registry and chat session).
"""

from callisto_agent.platform.clients.chat import (
    AgentRequestError,
    ChatClientError,
    ChatSession,
    RegisteredTool,
    ToolNotFoundError,
    ToolRegistry,
    ToolValidationError,
)
from callisto_agent.platform.clients.rendering import RenderingClient, RenderingError

__all__ = [
    # Rendering
    "RenderingClient",
    "RenderingError",
    # Chat
    "ChatSession",
    "RegisteredTool",
    "ToolRegistry",
    # Exceptions
    "AgentRequestError",
    "ChatClientError",
    "ToolNotFoundError",
    "ToolValidationError",
]
