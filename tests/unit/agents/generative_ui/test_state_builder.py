"""Unit tests for the generative UI initial state."""

from langchain_core.messages import HumanMessage, SystemMessage, ToolMessage

from callisto_agent.agents.generative_ui.agent import GenerativeUIAgentBuilder
from callisto_agent.platform.agent.contract import TextMessage, ToolCallMessage


class TestBuildInitialState:
    """Tests for GenerativeUIAgentBuilder.build_initial_state."""

    def test_state_rebuilt_from_history(self, search_flights):
        """The state holds the system prompt, the converted history and the catalog."""
        state = GenerativeUIAgentBuilder.build_initial_state(
            messages=[TextMessage(content="Find me a flight")],
            tool_definitions=[search_flights],
            thread_id="thread-1",
        )

        assert isinstance(state["messages"][0], SystemMessage)
        assert isinstance(state["messages"][1], HumanMessage)
        assert state["messages"][1].content == "Find me a flight"
        assert state["tool_definitions"] == {"searchFlights": search_flights}
        assert state["requires_user_input"] is False
        assert state["pending_tool_name"] is None
        assert state["thread_id"] == "thread-1"
        assert state["agent_slug"] == GenerativeUIAgentBuilder.SLUG

    def test_no_synthetic_prompt_on_resume(self, search_flights):
        """Resuming after a pending tool call only adds the not-executed observation."""
        state = GenerativeUIAgentBuilder.build_initial_state(
            messages=[
                TextMessage(content="Find me a flight"),
                ToolCallMessage(name="searchFlights", params={}, tool_call_id="c1"),
            ],
            tool_definitions=[search_flights],
            thread_id="thread-1",
        )

        assert len(state["messages"]) == 4
        assert isinstance(state["messages"][-1], ToolMessage)
