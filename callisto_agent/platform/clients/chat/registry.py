"""Client-side tool registry.

Tools are plain Python callables registered together with a JSON schema for
their parameters. Only the capability projection (name, description, schema)
is ever sent to the agent; execution stays local to the client.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from callisto_agent.platform.agent.contract import ToolDefinition
from callisto_agent.platform.clients.chat.exceptions import ToolNotFoundError, ToolValidationError

logger = logging.getLogger(__name__)

ToolFn: TypeAlias = Callable[[dict[str, Any]], Any | Awaitable[Any]]

DEFAULT_DESCRIPTION = "No description provided."


@dataclass(frozen=True)
class RegisteredTool:
    """A registered client tool.

    Attributes:
        definition: Server-visible projection (name, description, schema)
        fn: Callable executed with the validated parameters
        permissions: Permissions of which the caller must hold at least one; empty means public
    """

    definition: ToolDefinition
    fn: ToolFn
    permissions: frozenset[str] = field(default_factory=frozenset)

    @property
    def name(self) -> str:
        return self.definition.name

    def is_authorized(self, permissions: Iterable[str]) -> bool:
        """Check whether a caller holding ``permissions`` may see this tool."""
        return not self.permissions or not self.permissions.isdisjoint(permissions)


class ToolRegistry:
    """Registry of tools the agent may ask the client to execute."""

    def __init__(self) -> None:
        self._tools: dict[str, RegisteredTool] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def register(
        self,
        name: str,
        fn: ToolFn,
        schema: dict[str, Any],
        permissions: Iterable[str] = (),
        description: str | None = None,
    ) -> None:
        """Register a callable as a tool.

        Args:
            name: Unique tool name; re-registering a name overwrites the previous tool
            fn: Sync or async callable receiving the parameters dict
            schema: JSON schema of the parameters; its "description" is the default description
            permissions: Required permissions (e.g. ["admin"]); empty means public
            description: Explicit description overriding the schema's
        """
        if name in self._tools:
            logger.warning('Tool with name "%s" is already registered. Overwriting.', name)

        definition = ToolDefinition(
            name=name,
            description=description or schema.get("description") or DEFAULT_DESCRIPTION,
            schema=schema,
        )
        self._tools[name] = RegisteredTool(
            definition=definition,
            fn=fn,
            permissions=frozenset(permissions),
        )

    def project(self, permissions: Iterable[str] = ()) -> list[ToolDefinition]:
        """Return the definitions of the tools a caller is allowed to use.

        Args:
            permissions: Permissions held by the current user

        Returns:
            Definitions to send to the agent, in registration order
        """
        held = frozenset(permissions)
        return [tool.definition for tool in self._tools.values() if tool.is_authorized(held)]

    async def execute(self, name: str, params: dict[str, Any]) -> Any:
        """Validate the parameters and run a registered tool.

        Args:
            name: Name of the tool to execute
            params: Parameters requested by the agent

        Returns:
            Whatever the tool returns

        Raises:
            ToolNotFoundError: If no tool is registered under ``name``
            ToolValidationError: If ``params`` do not match the tool's schema
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)

        errors = tool.definition.validation_errors(params)
        if errors:
            logger.error("Rejected parameters for tool %s: %s", name, errors)
            raise ToolValidationError(name, errors)

        logger.info("Executing tool %s", name)
        result = tool.fn(params)
        if inspect.isawaitable(result):
            result = await result
        return result
