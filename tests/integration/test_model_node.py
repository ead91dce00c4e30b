"""Integration tests for ModelNode.

Tests the model node __call__ method, which requires mocking the LLM chain
and trimmer pipeline, together with the routing decision it applies.
"""

import asyncio
from unittest.mock import AsyncMock, Mock, patch

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
from langchain_core.runnables import RunnableLambda
from langgraph.types import Command

from callisto_agent.agents.generative_ui.nodes import ModelNode
from callisto_agent.agents.generative_ui.nodes.model import MODEL_ERROR
from callisto_agent.platform.agent.config import AgentConfig
from callisto_agent.platform.agent.contract import ToolDefinition
from callisto_agent.platform.agent.langgraph import LangGraphMessageParser
from callisto_agent.platform.agent.llm_client import LlmClient

WEATHER = ToolDefinition(
    name="getWeather",
    description="Get the current weather",
    schema={"type": "object", "properties": {"city": {"type": "string"}}, "required": ["city"]},
)


def create_response(content: str = "", tool_calls: list | None = None) -> AIMessage:
    """Create an AIMessage with usage_metadata for token counts."""
    return AIMessage(
        content=content,
        tool_calls=tool_calls or [],
        usage_metadata={"input_tokens": 50, "output_tokens": 25, "total_tokens": 75},
    )


@pytest.fixture
def mock_llm():
    """Create a mock LLM."""
    llm = Mock()
    llm.model_name = "test-model"
    llm.extract_tokens = LlmClient.extract_tokens  # Use real static method
    return llm


@pytest.fixture
def mock_chain():
    chain = Mock()
    chain.ainvoke = AsyncMock()
    return chain


@pytest.fixture
def state() -> dict:
    return {
        "messages": [HumanMessage(content="Weather in Paris?")],
        "tool_definitions": {WEATHER.name: WEATHER},
        "requires_user_input": False,
        "pending_tool_name": None,
        "thread_id": "test",
        "agent_slug": "generative-ui",
        "input_tokens_by_model": {},
        "output_tokens_by_model": {},
    }


async def call_node(node: ModelNode, state: dict, chain: Mock) -> Command:
    with patch.object(node, "_trimmer") as mock_trimmer:
        mock_trimmer.__or__ = Mock(return_value=chain)
        return await node(state)  # type: ignore[arg-type]


class TestModelNodeCall:
    """Tests for ModelNode.__call__."""

    async def test_plain_answer_ends(self, mock_llm, mock_chain, state):
        """A response without tool calls is appended and the cycle ends."""
        mock_chain.ainvoke.return_value = create_response("Hello!")
        node = ModelNode(mock_llm, AgentConfig(), timeout_seconds=5)

        command = await call_node(node, state, mock_chain)

        assert command.goto == "__end__"
        assert [m.content for m in command.update["messages"]] == ["Hello!"]
        assert command.update["input_tokens_by_model"] == {"test-model": 50}
        assert command.update["output_tokens_by_model"] == {"test-model": 25}

    async def test_binds_client_catalog(self, mock_llm, mock_chain, state):
        """Tools are bound in OpenAI format from the state catalog."""
        mock_chain.ainvoke.return_value = create_response("Hello!")
        node = ModelNode(mock_llm, AgentConfig(), timeout_seconds=5)

        await call_node(node, state, mock_chain)

        mock_llm.bind_tools.assert_called_once_with([WEATHER.to_openai_tool()])
        mock_chain.ainvoke.assert_awaited_once_with(state["messages"])

    async def test_valid_tool_call_goes_to_executor(self, mock_llm, mock_chain, state):
        mock_chain.ainvoke.return_value = create_response(
            tool_calls=[{"name": "getWeather", "args": {"city": "Paris"}, "id": "c1", "type": "tool_call"}]
        )
        node = ModelNode(mock_llm, AgentConfig(), timeout_seconds=5)

        command = await call_node(node, state, mock_chain)

        assert command.goto == "tool_executor"
        assert command.update["requires_user_input"] is False
        assert len(command.update["messages"]) == 1

    async def test_missing_arguments_go_to_form(self, mock_llm, mock_chain, state):
        mock_chain.ainvoke.return_value = create_response(
            tool_calls=[{"name": "getWeather", "args": {}, "id": "c1", "type": "tool_call"}]
        )
        node = ModelNode(mock_llm, AgentConfig(), timeout_seconds=5)

        command = await call_node(node, state, mock_chain)

        assert command.goto == "human_in_the_loop"
        assert command.update["requires_user_input"] is True
        assert command.update["pending_tool_name"] == "getWeather"

    async def test_unknown_tool_appends_error(self, mock_llm, mock_chain, state):
        """The model response is kept and followed by the error message."""
        mock_chain.ainvoke.return_value = create_response(
            tool_calls=[{"name": "bookHotel", "args": {}, "id": "c1", "type": "tool_call"}]
        )
        node = ModelNode(mock_llm, AgentConfig(), timeout_seconds=5)

        command = await call_node(node, state, mock_chain)

        assert command.goto == "__end__"
        response, error = command.update["messages"]
        assert response.tool_calls[0]["name"] == "bookHotel"
        [contract_error] = LangGraphMessageParser().to_contract([error])
        assert contract_error.code == "unknown_tool"


class TestModelNodeFailures:
    """Model failures end the cycle with a model_error message."""

    async def test_model_exception(self, mock_llm, mock_chain, state, caplog):
        mock_chain.ainvoke.side_effect = RuntimeError("provider unavailable")
        node = ModelNode(mock_llm, AgentConfig(), timeout_seconds=5)

        command = await call_node(node, state, mock_chain)

        assert command.goto == "__end__"
        [error] = LangGraphMessageParser().to_contract(command.update["messages"])
        assert error.type == "error"
        assert error.code == MODEL_ERROR
        assert "provider unavailable" in caplog.text

    async def test_model_deadline(self, mock_llm, mock_chain, state):
        """A model call exceeding the deadline is reported like a failure."""

        async def slow(*args, **kwargs):
            await asyncio.sleep(5)

        mock_chain.ainvoke.side_effect = slow
        node = ModelNode(mock_llm, AgentConfig(), timeout_seconds=0.01)

        command = await call_node(node, state, mock_chain)

        [error] = LangGraphMessageParser().to_contract(command.update["messages"])
        assert error.code == MODEL_ERROR
        assert command.update["requires_user_input"] is False


class TestModelNodeContext:
    """The real trimmer passes the posted history through to the model."""

    @pytest.fixture
    def recorded(self, mock_llm) -> list:
        seen: list = []

        async def model(messages):
            seen.extend(messages)
            return create_response("Great, where to?")

        mock_llm.bind_tools.return_value = RunnableLambda(model)
        return seen

    async def test_leading_assistant_turn_reaches_model(self, mock_llm, recorded, state):
        history = [
            SystemMessage(content="You are a helpful assistant."),
            AIMessage(content="Hi! I can book flights."),
            HumanMessage(content="yes please"),
        ]
        node = ModelNode(mock_llm, AgentConfig(), timeout_seconds=5)

        await node({**state, "messages": history})  # type: ignore[arg-type]

        assert [m.content for m in recorded] == [
            "You are a helpful assistant.",
            "Hi! I can book flights.",
            "yes please",
        ]

    async def test_long_history_keeps_system_and_latest_turn(self, mock_llm, recorded, state):
        history = [
            SystemMessage(content="sys"),
            HumanMessage(content="a" * 200),
            AIMessage(content="b" * 200),
            HumanMessage(content="recent"),
        ]
        node = ModelNode(mock_llm, AgentConfig(max_context_tokens=60), timeout_seconds=5)

        await node({**state, "messages": history})  # type: ignore[arg-type]

        assert recorded[0].content == "sys"
        assert recorded[-1].content == "recent"
        assert "a" * 200 not in [m.content for m in recorded]
