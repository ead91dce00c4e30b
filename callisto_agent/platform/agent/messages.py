"""Framework-agnostic result types.

These types are used across all implementations and define the common
vocabulary for agent execution.
"""

from dataclasses import dataclass, field
from typing import Any

from callisto_agent.platform.agent.contract import Message


@dataclass(frozen=True)
class ExecutionResult:
    """Result of one agent decision cycle.

    Attributes:
        messages: Full updated history as contract messages; only the last one is new
        thread_id: Conversation thread identifier
        requires_user_input: Whether the cycle paused for a rendered form
        pending_tool_name: Tool whose arguments the form collects, if any
        metadata: Additional framework-specific metadata
    """

    messages: list[Message]
    thread_id: str
    requires_user_input: bool = False
    pending_tool_name: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def last_message(self) -> Message | None:
        """The message produced by this cycle."""
        return self.messages[-1] if self.messages else None


@dataclass(frozen=True)
class StreamEvent:
    """Streaming execution event.

    Attributes:
        event_type: Type of event (a message type, "state_update" or "done")
        data: Event-specific data payload
    """

    event_type: str
    data: dict[str, Any]
