"""Client-side chat session.

Holds the authoritative display history, posts it to the agent together with
the tools the user may run, executes tool_call directives locally and resumes
the conversation with their results.
"""

import logging
import uuid
from collections.abc import Iterable
from typing import Any, Self

import httpx
from pydantic import ValidationError

from callisto_agent.platform.agent.contract import (
    ChatResponse,
    Message,
    TextMessage,
    ToolCallMessage,
    ToolResultMessage,
    UserInputResultMessage,
    dump_history,
    dump_message,
)
from callisto_agent.platform.clients.chat.exceptions import AgentRequestError
from callisto_agent.platform.clients.chat.registry import ToolRegistry
from callisto_agent.platform.constants import USER_AGENT

logger = logging.getLogger(__name__)


class ChatSession:
    """Conversation with the agent service from the client's point of view.

    Example:
        async with ChatSession("http://localhost:3333/api/chat", registry) as session:
            reply = await session.send("Find me a flight to Paris")
    """

    def __init__(
        self,
        agent_url: str,
        registry: ToolRegistry,
        permissions: Iterable[str] = (),
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 60.0,
        max_tool_rounds: int = 5,
        thread_id: str | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            agent_url: URL of the agent chat endpoint
            registry: Tools available to this client
            permissions: Permissions of the current user, used to project tools
            http_client: Optional pre-configured HTTP client
            timeout_seconds: Timeout for one agent request
            max_tool_rounds: Consecutive tool executions allowed before handing control back
            thread_id: Conversation identifier; generated when omitted
        """
        self._agent_url = agent_url
        self._registry = registry
        self._permissions = frozenset(permissions)
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._timeout_seconds = timeout_seconds
        self._max_tool_rounds = max_tool_rounds
        self.thread_id = thread_id or str(uuid.uuid4())
        self._messages: list[Message] = []
        self.is_loading = False

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None

    @property
    def messages(self) -> list[Message]:
        """A copy of the conversation history."""
        return list(self._messages)

    async def send(self, prompt: str) -> Message:
        """Send a user message and return the agent's reply."""
        self._messages.append(TextMessage(role="user", content=prompt))
        return await self._run_cycle()

    async def submit_form(self, tool_name: str, data: dict[str, Any]) -> Message:
        """Submit the data the user entered in a rendered form."""
        self._messages.append(UserInputResultMessage(tool_name=tool_name, data=data))
        return await self._run_cycle()

    async def _run_cycle(self) -> Message:
        self.is_loading = True
        try:
            last = await self._post()
            rounds = 0
            while isinstance(last, ToolCallMessage) and rounds < self._max_tool_rounds:
                rounds += 1
                self._messages.append(await self._execute_tool_call(last))
                last = await self._post()
            return last
        finally:
            self.is_loading = False

    async def _execute_tool_call(self, call: ToolCallMessage) -> ToolResultMessage:
        try:
            result = await self._registry.execute(call.name, call.params)
            message = ToolResultMessage(result=result, tool_call_id=call.tool_call_id, is_error=False)
            # the result travels as JSON in the next request
            dump_message(message)
        except Exception as e:
            logger.exception("Error executing tool %s", call.name)
            return ToolResultMessage(result=str(e), tool_call_id=call.tool_call_id, is_error=True)
        return message

    async def _post(self) -> Message:
        body = {
            "messages": dump_history(self._messages),
            "tool_definitions": [
                tool.model_dump(mode="json", by_alias=True)
                for tool in self._registry.project(self._permissions)
            ],
            "thread_id": self.thread_id,
        }
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self._timeout_seconds,
                headers={"user-agent": USER_AGENT},
            )

        try:
            response = await self._http_client.post(self._agent_url, json=body)
        except httpx.HTTPError as e:
            raise AgentRequestError(f"{type(e).__name__}: {e}") from e
        if response.is_error:
            raise AgentRequestError(response.text or response.reason_phrase, response.status_code)

        try:
            parsed = ChatResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise AgentRequestError(f"Malformed agent response: {e}") from e
        if not parsed.messages:
            raise AgentRequestError("Agent returned an empty history")

        self._messages = list(parsed.messages)
        return self._messages[-1]
