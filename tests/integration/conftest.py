"""Integration test fixtures.

This module provides shared fixtures for integration tests including:
- Route/handler tests with a stubbed agent (shallow app setup)
- LangGraphAgent tests with stubbed graphs
- A fake LLM client for driving the real agent graph
"""

from collections.abc import AsyncIterator, Generator, Sequence
from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from langchain_core.language_models.fake_chat_models import FakeMessagesListChatModel
from langchain_core.messages import AIMessage

from callisto_agent.agents.generative_ui.agent import GenerativeUIAgentBuilder
from callisto_agent.agents.generative_ui.routes import chat_router
from callisto_agent.platform.agent.config import AgentIdentity, Audience
from callisto_agent.platform.agent.contract import (
    Message,
    TextMessage,
    ToolDefinition,
    dump_history,
)
from callisto_agent.platform.agent.llm_client import LlmClient
from callisto_agent.platform.agent.messages import ExecutionResult, StreamEvent
from callisto_agent.platform.server.health import HealthCheck
from callisto_agent.platform.server.middlewares import CorrelationIdMiddleware
from callisto_agent.platform.server.routes import root as root_router

# =============================================================================
# Agent Fixtures
# =============================================================================


@pytest.fixture
def stub_agent_identity() -> AgentIdentity:
    """Create a stub agent identity with canned test data."""
    return AgentIdentity(
        name="Test Agent",
        slug="test-agent",
        description="A test agent for integration tests",
        squad="test-squad",
        origin="test-origin",
        audience=Audience.INTERNAL,
    )


@pytest.fixture
def stub_identity(stub_agent_identity: AgentIdentity) -> AgentIdentity:
    """Alias for stub_agent_identity."""
    return stub_agent_identity


@pytest.fixture
def stub_answer() -> TextMessage:
    return TextMessage(content="This is a test response", role="assistant")


@pytest.fixture
def stub_agent(stub_agent_identity: AgentIdentity, stub_answer: TextMessage) -> Mock:
    """Create a stub agent that appends a canned answer to the posted history.

    This is a stub (not a mock) because it primarily provides predetermined
    return values rather than verifying interactions.
    """
    agent = Mock()
    agent.identity = stub_agent_identity
    agent.name = stub_agent_identity.name
    agent.description = stub_agent_identity.description
    agent.slug = stub_agent_identity.slug

    async def run(
        messages: Sequence[Message],
        tool_definitions: Sequence[ToolDefinition],
        thread_id: str,
    ) -> ExecutionResult:
        return ExecutionResult(messages=[*messages, stub_answer], thread_id=thread_id)

    agent.run = AsyncMock(side_effect=run)

    async def run_stream(
        messages: Sequence[Message],
        tool_definitions: Sequence[ToolDefinition],
        thread_id: str,
    ) -> AsyncIterator[StreamEvent]:
        yield StreamEvent(event_type="state_update", data={"nodes": ["agent"]})
        yield StreamEvent(
            event_type="text",
            data={"node": "agent", "messages": dump_history([stub_answer])},
        )
        yield StreamEvent(
            event_type="done",
            data={
                "messages": dump_history([*messages, stub_answer]),
                "requires_user_input": False,
                "pending_tool_name": None,
            },
        )

    agent.run_stream = run_stream

    return agent


# =============================================================================
# FastAPI App Fixtures (Shallow - no full lifespan)
# =============================================================================


@pytest.fixture
def test_app(stub_agent: Mock) -> FastAPI:
    """Create a minimal test FastAPI app for integration tests.

    This is intentionally SHALLOW - no full lifespan. Tests route handlers
    and their interaction with dependencies.
    """
    app = FastAPI()
    app.add_middleware(CorrelationIdMiddleware)

    # Register stub agent directly in app.state
    app.state.agents = {GenerativeUIAgentBuilder: stub_agent}

    app.include_router(root_router)
    app.include_router(chat_router)

    return app


@pytest.fixture
def client(test_app: FastAPI) -> TestClient:
    """Create a test client for the test app.

    No context manager needed since we're not using lifespan.
    """
    return TestClient(test_app)


@pytest.fixture
def client_with_health_enabled(test_app: FastAPI) -> Generator[TestClient]:
    """Create a test client with health checks enabled."""
    HealthCheck.enable()
    yield TestClient(test_app)
    HealthCheck.disable()


@pytest.fixture
def client_with_health_disabled(test_app: FastAPI) -> Generator[TestClient]:
    """Create a test client with health checks disabled."""
    HealthCheck.disable()
    yield TestClient(test_app)


# =============================================================================
# LLM Fixtures
# =============================================================================


@pytest.fixture
def fake_llm_client():
    """Create an LlmClient whose model replies with canned messages, in order.

    Tool binding returns the same fake model, so the graph sees the canned
    replies whether or not the client sent a tool catalog.
    """

    def _fake_llm_client(*responses: AIMessage) -> LlmClient:
        model = FakeMessagesListChatModel(responses=list(responses))
        llm: Any = Mock()
        llm.bind_tools = Mock(return_value=model)
        llm.ainvoke = model.ainvoke
        return LlmClient(
            agent_slug="generative-ui",
            model_name="test-model",
            api_key=None,
            api_base=None,
            temperature=0.0,
            llm=llm,
        )

    return _fake_llm_client
