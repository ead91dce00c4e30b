"""Unit tests for agent identity and constants.

This module tests identity-related functionality including:
- AgentIdentity integration with project constants
- LangGraphAgent identity delegation
- Service constants
"""

from unittest.mock import MagicMock, Mock

import pytest

from callisto_agent.agents.generative_ui.agent import GenerativeUIAgentBuilder
from callisto_agent.platform.agent.config import AgentIdentity, Audience
from callisto_agent.platform.agent.langgraph import LangGraphAgent
from callisto_agent.platform.constants import (
    SERVICE_NAME,
    SERVICE_VERSION,
    SQUAD_NAME,
    USER_AGENT,
)


class TestConstants:
    """Tests for service constants."""

    def test_service_name_format(self):
        """SERVICE_NAME is kebab case."""
        assert SERVICE_NAME == "callisto-agent"

    def test_service_version_format(self):
        """SERVICE_VERSION should follow semver format."""
        parts = SERVICE_VERSION.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)

    def test_user_agent_composition(self):
        """USER_AGENT should combine service name and version."""
        assert USER_AGENT == f"{SERVICE_NAME}/{SERVICE_VERSION}"


class TestDefaultIdentity:
    """Tests for the generative UI agent identity."""

    def test_default_identity_uses_constants(self):
        """unique_id combines squad, service and slug."""
        identity = GenerativeUIAgentBuilder.default_identity()
        assert identity.slug == GenerativeUIAgentBuilder.SLUG
        assert identity.unique_id == f"{SQUAD_NAME}:{SERVICE_NAME}:generative-ui"
        assert identity.audience == Audience.INTERNAL

    def test_identity_explicit_audience(self):
        """Explicit audience should override default."""
        identity = AgentIdentity(
            name="Public Agent",
            description="Public Description",
            slug="public-agent",
            squad=SQUAD_NAME,
            origin=SERVICE_NAME,
            audience=Audience.PUBLIC,
        )
        assert identity.audience == Audience.PUBLIC


class TestLangGraphAgentIdentity:
    """Tests for LangGraphAgent identity delegation."""

    @pytest.fixture
    def identity(self) -> AgentIdentity:
        return AgentIdentity(
            name="Delegation Test",
            description="Tests delegation",
            slug="delegation-test",
            squad="test-squad",
            origin="test-service",
            audience=Audience.CUSTOMER,
        )

    @pytest.fixture
    def agent(self, identity: AgentIdentity) -> LangGraphAgent:
        return LangGraphAgent(graph=MagicMock(), identity=identity, initial_state_builder=Mock())

    def test_agent_delegates_fields(self, agent: LangGraphAgent, identity: AgentIdentity):
        """name, description and slug delegate to identity."""
        assert agent.name == identity.name
        assert agent.description == identity.description
        assert agent.slug == identity.slug

    def test_agent_exposes_full_identity(self, agent: LangGraphAgent, identity: AgentIdentity):
        """Agent should expose the full identity object."""
        assert agent.identity is identity
        assert agent.identity.unique_id == "test-squad:test-service:delegation-test"
