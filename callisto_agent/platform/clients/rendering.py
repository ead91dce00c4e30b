"""HTTP client for the component rendering service.

The rendering service turns a component selector plus a JSON schema into a
server-rendered HTML string that the chat client hydrates.

Usage:
    client = RenderingClient(RenderingConfig(url="http://localhost:4000/render"))
    html = await client.render(schema, tool_name="searchFlights")
"""

import logging
from time import monotonic
from typing import Any

import httpx
from opentelemetry import trace
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from callisto_agent.platform.agent.config import RenderingConfig
from callisto_agent.platform.agent.metrics import RenderMetricsLabels, record_render_call
from callisto_agent.platform.constants import USER_AGENT

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class RenderingError(Exception):
    """Raised when the rendering service cannot produce HTML."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        status_info = f" (status: {status_code})" if status_code else ""
        super().__init__(f"Rendering failed{status_info}: {message}")


class RenderingClient:
    """Client for the rendering service ``/render`` endpoint.

    Transport failures are retried up to ``config.max_attempts`` times; HTTP
    error responses are not retried.
    """

    retry_wait = wait_fixed(0.5)

    def __init__(
        self,
        config: RenderingConfig,
        http_client: httpx.AsyncClient | None = None,
        agent_slug: str = "",
    ) -> None:
        """Initialize the client.

        Args:
            config: Rendering service configuration
            http_client: Optional shared HTTP client; a private one is created per call otherwise
            agent_slug: Slug of the calling agent, used as metrics label
        """
        self.config = config
        self._http_client = http_client
        self._agent_slug = agent_slug

    def __repr__(self) -> str:
        return f"RenderingClient(url={self.config.url!r}, component={self.config.component!r})"

    async def render(
        self,
        schema: dict[str, Any],
        tool_name: str,
        component: str | None = None,
    ) -> str:
        """Render a component for the given schema.

        Args:
            schema: JSON schema the rendered form is built from
            tool_name: Tool the form collects arguments for
            component: Component selector; defaults to the configured form component

        Returns:
            The rendered HTML string

        Raises:
            RenderingError: If the service is unreachable or answers with an error
        """
        component = component or self.config.component
        payload = {"component": component, "schema": schema, "toolName": tool_name}
        labels = RenderMetricsLabels(self._agent_slug, component)
        start_time = monotonic()

        with tracer.start_as_current_span("render_component") as span:
            span.set_attribute("render.component", component)
            span.set_attribute("render.tool_name", tool_name)
            try:
                html = await self._post_with_retry(payload)
            except RenderingError:
                record_render_call(labels, duration=monotonic() - start_time, error=True)
                raise

        record_render_call(labels, duration=monotonic() - start_time)
        return html

    async def _post_with_retry(self, payload: dict[str, Any]) -> str:
        retrying = AsyncRetrying(
            wait=self.retry_wait,
            stop=stop_after_attempt(self.config.max_attempts),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    response = await self._post(payload)
        except httpx.TransportError as e:
            raise RenderingError(f"{type(e).__name__}: {e}") from e
        return self._parse_response(response)

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        headers = {"user-agent": USER_AGENT}
        if self._http_client is not None:
            return await self._http_client.post(
                self.config.url, json=payload, headers=headers, timeout=self.config.timeout_seconds
            )
        async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
            return await client.post(self.config.url, json=payload, headers=headers)

    @staticmethod
    def _parse_response(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error:
            detail = body.get("error") if isinstance(body, dict) else None
            raise RenderingError(detail or response.reason_phrase, status_code=response.status_code)

        if not isinstance(body, dict) or not isinstance(body.get("html"), str):
            raise RenderingError("response body has no 'html' string", status_code=response.status_code)
        return body["html"]
