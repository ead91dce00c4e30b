"""Shared fixtures for generative UI agent unit tests."""

from typing import Any

import pytest
from langchain_core.messages import AIMessage, HumanMessage

from callisto_agent.platform.agent.contract import ToolDefinition

SEARCH_FLIGHTS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "description": "Search for flights",
    "properties": {
        "departureCity": {"type": "string"},
        "arrivalCity": {"type": "string"},
        "departureDate": {"type": "string"},
    },
    "required": ["departureCity", "arrivalCity", "departureDate"],
}


@pytest.fixture
def search_flights() -> ToolDefinition:
    return ToolDefinition(
        name="searchFlights",
        description="Search for flights",
        schema=SEARCH_FLIGHTS_SCHEMA,
    )


@pytest.fixture
def make_state(search_flights: ToolDefinition):
    """Build agent states whose last message is a model response."""

    def _make_state(*tool_calls: dict[str, Any], content: str = "") -> dict[str, Any]:
        response = AIMessage(
            content=content,
            tool_calls=[
                {"name": name, "args": args, "id": f"call_{i}", "type": "tool_call"}
                for i, (name, args) in enumerate(tc for call in tool_calls for tc in call.items())
            ],
        )
        return {
            "messages": [HumanMessage(content="Find me a flight"), response],
            "tool_definitions": {search_flights.name: search_flights},
            "requires_user_input": False,
            "pending_tool_name": None,
            "thread_id": "thread-1",
            "agent_slug": "generative-ui",
            "input_tokens_by_model": {},
            "output_tokens_by_model": {},
        }

    return _make_state
