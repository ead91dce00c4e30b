"""Agent infrastructure module.

This module provides the core abstractions and integrations for building agents:
- Agent protocol definition
- Configuration dataclasses
- Message contract shared with the chat client
- LangGraph integration
- Agent-specific metrics
"""

from callisto_agent.platform.agent.config import (
    AgentConfig,
    AgentIdentity,
    LlmConfig,
    RenderingConfig,
)
from callisto_agent.platform.agent.contract import (
    ChatRequest,
    ChatResponse,
    ContractError,
    Message,
    ToolDefinition,
    parse_history,
    parse_message,
)
from callisto_agent.platform.agent.langgraph import (
    LangGraphAgent,
    LangGraphMessageParser,
)
from callisto_agent.platform.agent.messages import (
    ExecutionResult,
    StreamEvent,
)
from callisto_agent.platform.agent.protocol import Agent

__all__ = [
    "Agent",
    "AgentConfig",
    "AgentIdentity",
    "LlmConfig",
    "RenderingConfig",
    "ChatRequest",
    "ChatResponse",
    "ContractError",
    "Message",
    "ToolDefinition",
    "parse_history",
    "parse_message",
    "ExecutionResult",
    "StreamEvent",
    "LangGraphAgent",
    "LangGraphMessageParser",
]
