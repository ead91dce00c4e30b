"""Application settings and configuration.

This module provides Pydantic settings classes for application configuration,
loaded from environment variables with support for nested configuration.
"""

import logging

import pydantic_settings
from pydantic import BaseModel, Field, field_validator


class AppHTTPSettings(BaseModel):
    host: str = Field("0.0.0.0")
    port: int = Field(3333)
    log_level: str = Field("INFO")
    log_json: bool | None = Field(
        None, description="Override log format: True=JSON, False=console, None=auto"
    )

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v):
        v_upper = v.upper()
        if v_upper not in logging._nameToLevel:
            raise ValueError(f'invalid value "{v}"')
        return v_upper


class OpenTelemetrySettings(BaseModel):
    host: str = Field("")
    port: int = Field(4317)
    enabled: bool = Field(False)
    excluded_urls: str = Field("metrics,health,info")


class BugsnagSettings(BaseModel):
    api_key: str = Field("")
    release_stage: str = Field("local")

    @field_validator("release_stage")
    @classmethod
    def _validate_bugsnag_release_stage(cls, v):
        if v not in ["development", "production", "local"]:
            raise ValueError(f'invalid bugsnag release stage "{v}"')
        return v


class LitellmSettings(BaseModel):
    """Model provider configuration.

    Attributes:
        proxy_api_base: Base URL of the LiteLLM proxy (or provider API)
        proxy_api_key: API key for the proxy
        model: Model identifier passed to LiteLLM
        temperature: Sampling temperature
        timeout_seconds: Deadline for a single model call
    """

    proxy_api_base: str | None = None
    proxy_api_key: str | None = None
    model: str = Field("gpt-4o")
    temperature: float = Field(0.0)
    timeout_seconds: float = Field(60.0)


class RenderingSettings(BaseModel):
    """Configuration for the component rendering service.

    Attributes:
        url: Full URL of the rendering endpoint
        component: Selector of the form component to render
        timeout_seconds: Request timeout in seconds
        max_attempts: Attempts made on transport failures before giving up
    """

    url: str = Field("http://localhost:4000/render")
    component: str = Field("agentic-dynamic-form")
    timeout_seconds: float = Field(10.0)
    max_attempts: int = Field(2, ge=1)


class CorsSettings(BaseModel):
    allow_origins: list[str] = Field(default_factory=lambda: ["http://localhost:4200"])


class Settings(pydantic_settings.BaseSettings):
    model_config = pydantic_settings.SettingsConfigDict(env_nested_delimiter="__")

    app_http: AppHTTPSettings = AppHTTPSettings()
    opentelemetry: OpenTelemetrySettings = OpenTelemetrySettings()
    bugsnag: BugsnagSettings = BugsnagSettings()

    # Model provider configuration
    litellm: LitellmSettings = LitellmSettings()

    # Rendering collaborator configuration
    rendering: RenderingSettings = RenderingSettings()

    cors: CorsSettings = CorsSettings()
