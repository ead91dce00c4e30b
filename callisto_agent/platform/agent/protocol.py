"""Agent protocol definitions.

This module defines the framework-agnostic Agent protocol that all agent
implementations must satisfy, enabling interchangeable agent backends.
"""

from collections.abc import AsyncIterator, Sequence
from typing import Protocol

from callisto_agent.platform.agent.config import AgentIdentity
from callisto_agent.platform.agent.contract import Message, ToolDefinition
from callisto_agent.platform.agent.messages import ExecutionResult, StreamEvent


class Agent(Protocol):
    """Protocol for an agent."""

    @property
    def identity(self) -> AgentIdentity:
        """The identity of the agent."""
        ...

    @property
    def name(self) -> str:
        """The name of the agent."""
        ...

    @property
    def description(self) -> str:
        """The description of the agent."""
        ...

    @property
    def slug(self) -> str:
        """The slug of the agent."""
        ...

    async def run(
        self,
        messages: Sequence[Message],
        tool_definitions: Sequence[ToolDefinition],
        thread_id: str,
    ) -> ExecutionResult:
        """Run one decision cycle over the posted history.

        Args:
            messages: Full conversation history posted by the client
            tool_definitions: Tools the client can execute for this session
            thread_id: Identifier grouping the requests of one conversation
        """
        ...

    def run_stream(
        self,
        messages: Sequence[Message],
        tool_definitions: Sequence[ToolDefinition],
        thread_id: str,
    ) -> AsyncIterator[StreamEvent]:
        """Run one decision cycle and stream node updates.

        Args:
            messages: Full conversation history posted by the client
            tool_definitions: Tools the client can execute for this session
            thread_id: Identifier grouping the requests of one conversation
        Yields:
            StreamEvent objects, the last one of type "done"
        """
        ...
