"""FastAPI application factory and server configuration.

This module creates and configures the FastAPI application with all middleware,
routes, and lifecycle management.
"""

import asyncio
import logging
import os
import signal
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from callisto_agent.agents.generative_ui.agent import GenerativeUIAgentBuilder
from callisto_agent.agents.generative_ui.routes import chat_router
from callisto_agent.platform.constants import USER_AGENT
from callisto_agent.platform.observability import errors as bugsnag
from callisto_agent.platform.observability.logging import configure_logging
from callisto_agent.platform.observability.metrics import prometheus_middleware
from callisto_agent.platform.observability.tracing import configure_tracing
from callisto_agent.platform.server.health import HealthCheck
from callisto_agent.platform.server.middlewares import REQUEST_ID_HEADER, CorrelationIdMiddleware
from callisto_agent.platform.server.routes import root as root_router
from callisto_agent.platform.settings import Settings

logger = logging.getLogger(__name__)


def lifespan_closure(settings: Settings):
    @asynccontextmanager
    async def lifespan(app):
        """
        Use this to initialize all of the singleton dependencies and shared
        objects.  i.e. http client, reporters, bugsnag, agents
        """
        if settings.bugsnag.release_stage in ["production", "development"]:
            signal_handler = SignalHandler(app)
            signal_handler.register_signal_handler()

        # Configure structured logging (JSON in prod/dev, console in local)
        if settings.app_http.log_json is not None:
            json_output = settings.app_http.log_json
        else:
            json_output = settings.bugsnag.release_stage != "local"
        configure_logging(settings.app_http.log_level, json_output=json_output)

        await bugsnag.initialize_bugsnag(
            settings.bugsnag.api_key,
            settings.bugsnag.release_stage,
        )

        app.state.settings = settings

        tracer_provider = None
        if settings.opentelemetry.enabled:
            tracer_provider = configure_tracing(
                host=settings.opentelemetry.host,
                port=settings.opentelemetry.port,
            )

        # Shared HTTP client for the rendering service
        app.state.http_client = httpx.AsyncClient(
            timeout=30.0,  # Default timeout, overridden per request
            limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
            headers={"user-agent": USER_AGENT},
        )

        builder = GenerativeUIAgentBuilder.default_builder(settings, http_client=app.state.http_client)
        app.state.agents = {GenerativeUIAgentBuilder: await builder.build()}
        logger.info(f"Agent {builder.identity.unique_id} ready (model {builder.llm_config.model})")

        HealthCheck.enable()
        try:
            yield
        finally:
            HealthCheck.disable()
            await app.state.http_client.aclose()
            if tracer_provider is not None:
                tracer_provider.shutdown()

    return lifespan


def create_app(settings: Settings):
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings instance

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(lifespan=lifespan_closure(settings))
    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.middleware("http")(prometheus_middleware)
    if settings.opentelemetry.enabled:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=settings.opentelemetry.excluded_urls)

    # Include platform routes (health, info, metrics)
    app.include_router(root_router)

    # Include agent routes
    app.include_router(chat_router)

    return app


class SignalHandler:
    def __init__(self, app: FastAPI):
        self.app = app

    async def handle_exit(self):
        """
        Handle the exit of the server
        Do NOT use FastAPI @app.on_event("shutdown") or lifespan
        The problem with this method is, it is invoked *after* server
        stops accepting request, so it does not give us any time to
        drain requests in progress and DNS cache to refresh
        """
        HealthCheck.disable()
        for _ in range(20):
            logging.info("Shutting down...")
            await asyncio.sleep(1)

        # stop service successfully
        os.kill(os.getpid(), signal.SIGUSR1)

    def signal_handler(self):
        """
        Signal handler function
        """
        asyncio.create_task(self.handle_exit())

    def register_signal_handler(self) -> None:
        """
        Register signal handlers for the server
        """
        loop = asyncio.get_running_loop()
        for sig in [signal.SIGINT, signal.SIGTERM]:
            loop.add_signal_handler(sig, self.signal_handler)
