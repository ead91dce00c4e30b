"""Configuration dataclasses for agent components.

This module provides immutable configuration objects for LLM clients,
the rendering collaborator, and agent behavior settings.
"""

from dataclasses import dataclass
from enum import StrEnum


class Audience(StrEnum):
    """Target audience for the agent."""

    CUSTOMER = "customer"
    INTERNAL = "internal"
    PUBLIC = "public"


@dataclass(frozen=True)
class LlmConfig:
    """Configuration for language model clients.

    Attributes:
        model: Model identifier (e.g., "gpt-4o" or "litellm_proxy/openai/gpt-4o")
        api_key: API key for the LLM provider
        base_url: Base URL for the API (e.g., LiteLLM proxy URL)
        temperature: Sampling temperature (0.0 to 1.0)
        timeout_seconds: Deadline for a single model call
    """

    model: str
    api_key: str | None = None
    base_url: str | None = None
    temperature: float = 0.0
    timeout_seconds: float = 60.0


@dataclass(frozen=True)
class RenderingConfig:
    """Configuration for the rendering service client.

    Attributes:
        url: Full URL of the rendering endpoint
        component: Selector of the form component the service should render
        timeout_seconds: Request timeout in seconds (default: 10.0)
        max_attempts: Attempts made on transport failures (default: 2)
    """

    url: str
    component: str = "agentic-dynamic-form"
    timeout_seconds: float = 10.0
    max_attempts: int = 2


@dataclass(frozen=True)
class AgentConfig:
    """Configuration for agent behavior.

    Attributes:
        recursion_limit: LangGraph recursion limit
        max_context_tokens: Maximum tokens before trimming old messages
        form_component_id: Component id stamped on render_html directives
    """

    recursion_limit: int = 10
    max_context_tokens: int = 100000
    form_component_id: str = "dynamic-form"


@dataclass(frozen=True)
class AgentIdentity:
    """Identity information for an agent.

    Attributes:
        name: Human-readable display name for the agent
        description: Brief description of the agent's capabilities
        slug: URL-safe identifier used in metrics and traces
        squad: Group identifier for the agent
        origin: Name of the service hosting the agent
        audience: Target audience for the agent
    """

    name: str
    description: str
    slug: str
    squad: str
    origin: str
    audience: Audience = Audience.INTERNAL

    @property
    def unique_id(self) -> str:
        """Generate a unique identifier from squad, origin, and slug."""
        return f"{self.squad}:{self.origin}:{self.slug}"
