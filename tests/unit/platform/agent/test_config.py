"""Unit tests for agent configuration dataclasses.

This module tests all configuration dataclasses in platform/agent/config.py.
"""

from dataclasses import FrozenInstanceError

import pytest

from callisto_agent.platform.agent.config import (
    AgentConfig,
    Audience,
    LlmConfig,
    RenderingConfig,
)


class TestAudience:
    """Tests for Audience enum."""

    def test_is_string_enum(self):
        """Audience values should be usable as strings."""
        assert str(Audience.CUSTOMER) == "customer"
        assert f"audience: {Audience.INTERNAL}" == "audience: internal"

    def test_invalid_value_raises(self):
        """Invalid audience string should raise ValueError."""
        with pytest.raises(ValueError):
            Audience("invalid")


class TestLlmConfig:
    """Tests for LlmConfig dataclass."""

    def test_default_values(self):
        """Optional fields should have correct defaults."""
        config = LlmConfig(model="gpt-4o")
        assert config.api_key is None
        assert config.base_url is None
        assert config.temperature == 0.0
        assert config.timeout_seconds == 60.0

    def test_frozen_immutability(self):
        """LlmConfig should be immutable (frozen)."""
        config = LlmConfig(model="gpt-4o")
        with pytest.raises(FrozenInstanceError):
            config.model = "gpt-3.5"  # type: ignore


class TestRenderingConfig:
    """Tests for RenderingConfig dataclass."""

    def test_default_values(self):
        """Only the URL is required."""
        config = RenderingConfig(url="http://localhost:4000/render")
        assert config.component == "agentic-dynamic-form"
        assert config.timeout_seconds == 10.0
        assert config.max_attempts == 2

    def test_frozen_immutability(self):
        """RenderingConfig should be immutable (frozen)."""
        config = RenderingConfig(url="http://localhost:4000/render")
        with pytest.raises(FrozenInstanceError):
            config.url = "http://other"  # type: ignore


class TestAgentConfig:
    """Tests for AgentConfig dataclass."""

    def test_default_values(self):
        """Defaults describe a single decision cycle."""
        config = AgentConfig()
        assert config.recursion_limit == 10
        assert config.max_context_tokens == 100000
        assert config.form_component_id == "dynamic-form"

    def test_custom_values(self):
        """All fields can be overridden."""
        config = AgentConfig(recursion_limit=5, max_context_tokens=1000, form_component_id="form")
        assert config.recursion_limit == 5
        assert config.max_context_tokens == 1000
        assert config.form_component_id == "form"
