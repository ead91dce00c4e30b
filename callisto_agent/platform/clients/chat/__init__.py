"""Client-side chat library: tool registry and chat session."""

from callisto_agent.platform.clients.chat.exceptions import (
    AgentRequestError,
    ChatClientError,
    ToolNotFoundError,
    ToolValidationError,
)
from callisto_agent.platform.clients.chat.registry import RegisteredTool, ToolRegistry
from callisto_agent.platform.clients.chat.session import ChatSession

__all__ = [
    "AgentRequestError",
    "ChatClientError",
    "ChatSession",
    "RegisteredTool",
    "ToolNotFoundError",
    "ToolRegistry",
    "ToolValidationError",
]
