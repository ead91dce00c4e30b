"""Message contract shared by the chat client, the agent and the renderer.

Every payload that crosses a process boundary is one of a closed set of
tagged variants, discriminated by the ``type`` field. Unknown discriminants
and missing fields are rejected rather than read best-effort.
"""

from collections.abc import Iterable, Sequence
from typing import Annotated, Any, Literal

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator


class ContractError(ValueError):
    """Raised when a payload does not satisfy the message contract."""


class _ContractModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class TextMessage(_ContractModel):
    """Plain conversational turn."""

    type: Literal["text"] = "text"
    content: str
    role: Literal["user", "assistant"] = "user"


class RenderHtmlMessage(_ContractModel):
    """Server directive: render ``html`` and hydrate it against ``json_schema``."""

    type: Literal["render_html"] = "render_html"
    html: str
    component_id: str
    message: str | None = None
    json_schema: Any = Field(alias="schema")
    tool_name: str = Field(alias="toolName")


class UserInputResultMessage(_ContractModel):
    """Client directive: the user completed the rendered form."""

    type: Literal["user_input_result"] = "user_input_result"
    tool_name: str
    data: dict[str, Any]


class ToolCallMessage(_ContractModel):
    """Agent directive: the client must execute a registered tool."""

    type: Literal["tool_call"] = "tool_call"
    name: str
    params: dict[str, Any]
    tool_call_id: str


class ToolResultMessage(_ContractModel):
    """Client directive: outcome of a tool execution."""

    type: Literal["tool_result"] = "tool_result"
    result: Any = None
    tool_call_id: str
    is_error: bool


class ErrorMessage(_ContractModel):
    """Server report: the decision cycle ended on a failure."""

    type: Literal["error"] = "error"
    code: str
    message: str
    tool_name: str | None = None


Message = Annotated[
    TextMessage
    | RenderHtmlMessage
    | UserInputResultMessage
    | ToolCallMessage
    | ToolResultMessage
    | ErrorMessage,
    Field(discriminator="type"),
]

_message_adapter: TypeAdapter = TypeAdapter(Message)


class ToolDefinition(_ContractModel):
    """Server-visible projection of a client tool.

    Attributes:
        name: Unique tool name
        description: Human-readable description, also used in form prompts
        json_schema: JSON Schema (Draft 7) describing the tool parameters
    """

    name: str = Field(min_length=1)
    description: str
    json_schema: dict[str, Any] = Field(alias="schema")

    @field_validator("json_schema")
    @classmethod
    def _validate_json_schema(cls, v: dict[str, Any]) -> dict[str, Any]:
        try:
            Draft7Validator.check_schema(v)
        except SchemaError as e:
            raise ValueError(f"invalid parameter schema: {e.message}") from e
        return v

    def validation_errors(self, arguments: dict[str, Any]) -> list[str]:
        """Validate tool arguments against the parameter schema.

        Args:
            arguments: Arguments requested for the tool

        Returns:
            Human-readable validation errors, empty when the arguments are valid
        """
        validator = Draft7Validator(self.json_schema)
        errors = sorted(
            validator.iter_errors(arguments),
            key=lambda e: ".".join(str(p) for p in e.absolute_path),
        )
        return [
            f"{'.'.join(str(p) for p in error.absolute_path) or '<root>'}: {error.message}"
            for error in errors
        ]

    def to_openai_tool(self) -> dict[str, Any]:
        """Project the definition into OpenAI function-calling format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.json_schema,
            },
        }


class ChatRequest(BaseModel):
    """Body posted by the chat client to the agent.

    Attributes:
        messages: Full conversation history, oldest first
        tool_definitions: Tools the client is willing to execute for this session
        thread_id: Optional identifier used to group traces of one conversation
    """

    messages: list[Message] = Field(min_length=1)
    tool_definitions: list[ToolDefinition] = Field(default_factory=list)
    thread_id: str | None = None

    @field_validator("messages")
    @classmethod
    def _validate_pairing(cls, v: list[Message]) -> list[Message]:
        check_tool_call_pairing(v)
        return v

    @field_validator("tool_definitions")
    @classmethod
    def _validate_unique_names(cls, v: list[ToolDefinition]) -> list[ToolDefinition]:
        names = [tool.name for tool in v]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate tool names: {', '.join(duplicates)}")
        return v


class ChatResponse(BaseModel):
    """Body returned by the agent: the full updated history."""

    messages: list[Message]


def parse_message(payload: Any) -> Message:
    """Parse an untyped payload into one of the message variants.

    Raises:
        ContractError: If the discriminant is unknown or required fields are missing
    """
    try:
        return _message_adapter.validate_python(payload)
    except ValidationError as e:
        raise ContractError(f"Invalid message: {e}") from e


def parse_history(payloads: Iterable[Any]) -> list[Message]:
    """Parse a conversation history and check tool call pairing.

    Raises:
        ContractError: If any message is invalid or a tool result is unpaired
    """
    messages = [parse_message(payload) for payload in payloads]
    check_tool_call_pairing(messages)
    return messages


def check_tool_call_pairing(messages: Sequence[Message]) -> None:
    """Check that each tool_result answers exactly one earlier tool_call.

    A tool_call still waiting for its result is allowed. Each tool_call_id
    names exactly one tool_call.

    Raises:
        ContractError: If a tool_call_id is reused, or a tool_result is orphaned or duplicated
    """
    seen_calls: set[str] = set()
    open_calls: set[str] = set()
    answered: set[str] = set()
    for message in messages:
        if isinstance(message, ToolCallMessage):
            if message.tool_call_id in seen_calls:
                raise ContractError(f"Duplicate tool_call_id '{message.tool_call_id}'")
            seen_calls.add(message.tool_call_id)
            open_calls.add(message.tool_call_id)
        elif isinstance(message, ToolResultMessage):
            if message.tool_call_id in answered:
                raise ContractError(f"Duplicate tool_result for tool_call_id '{message.tool_call_id}'")
            if message.tool_call_id not in open_calls:
                raise ContractError(
                    f"tool_result references unknown tool_call_id '{message.tool_call_id}'"
                )
            open_calls.discard(message.tool_call_id)
            answered.add(message.tool_call_id)


def unmatched_tool_calls(messages: Sequence[Message]) -> list[ToolCallMessage]:
    """Return tool calls that have no tool_result yet, in history order."""
    answered = {m.tool_call_id for m in messages if isinstance(m, ToolResultMessage)}
    return [m for m in messages if isinstance(m, ToolCallMessage) and m.tool_call_id not in answered]


def dump_message(message: Message) -> dict[str, Any]:
    """Serialize a message to its wire representation."""
    return message.model_dump(mode="json", by_alias=True)


def dump_history(messages: Iterable[Message]) -> list[dict[str, Any]]:
    """Serialize a conversation history to its wire representation."""
    return [dump_message(message) for message in messages]
