"""Platform infrastructure module.

This module provides the infrastructure the generative UI agent is built on:
- Agent protocol, configuration and message contract
- LangGraph integration
- Rendering service and chat clients
- FastAPI server configuration
- Observability utilities
"""

from callisto_agent.platform.agent.config import (
    AgentConfig,
    AgentIdentity,
    LlmConfig,
    RenderingConfig,
)
from callisto_agent.platform.agent.contract import Message, ToolDefinition
from callisto_agent.platform.agent.langgraph import LangGraphAgent
from callisto_agent.platform.agent.messages import (
    ExecutionResult,
    StreamEvent,
)
from callisto_agent.platform.agent.protocol import Agent
from callisto_agent.platform.settings import Settings

__all__ = [
    # Core protocols
    "Agent",
    # Configuration
    "AgentConfig",
    "AgentIdentity",
    "LlmConfig",
    "RenderingConfig",
    "Settings",
    # LangGraph integration
    "LangGraphAgent",
    # Message types
    "ExecutionResult",
    "Message",
    "StreamEvent",
    "ToolDefinition",
]
