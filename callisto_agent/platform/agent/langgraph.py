"""LangGraph integration components.

This module provides LangGraph-specific implementations including:
- LangGraphMessageParser: Converts between contract messages and LangChain messages
- LangGraphAgent: A runnable agent that implements the Agent protocol
"""

import json
import logging
from collections.abc import AsyncIterator, Sequence
from typing import Any, Protocol

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage, ToolMessage
from langgraph.graph.state import CompiledStateGraph
from openinference.instrumentation import using_session
from opentelemetry import trace

from callisto_agent.platform.agent.config import AgentIdentity
from callisto_agent.platform.agent.contract import (
    ErrorMessage,
    Message,
    RenderHtmlMessage,
    TextMessage,
    ToolCallMessage,
    ToolDefinition,
    ToolResultMessage,
    UserInputResultMessage,
    dump_history,
    dump_message,
    unmatched_tool_calls,
)
from callisto_agent.platform.agent.messages import ExecutionResult, StreamEvent
from callisto_agent.platform.agent.metrics import AgentMetricsLabels, collect_agent_metrics
from callisto_agent.platform.agent.protocol import Agent

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

# additional_kwargs key marking LangChain messages that carry a contract directive
DIRECTIVE_KEY = "callisto_type"
NOT_EXECUTED = "not_executed"


def directive_type(msg: BaseMessage) -> str | None:
    """Return the contract type a LangChain message was tagged with, if any."""
    return msg.additional_kwargs.get(DIRECTIVE_KEY)


class LangGraphMessageParser:
    """Parser that converts between contract messages and LangChain messages.

    Directives (render_html, tool_call, user_input_result, error) are carried
    through LangGraph as ordinary LangChain messages tagged in
    ``additional_kwargs`` so they survive a round-trip unchanged.
    """

    def to_langchain(self, messages: Sequence[Message]) -> list[BaseMessage]:
        """Convert a contract history into LangChain messages for the model.

        Tool calls that never received a result are followed by a synthetic
        error observation so the model-facing history stays well formed.

        Args:
            messages: Contract messages, oldest first

        Returns:
            LangChain messages in the same order
        """
        pending = {m.tool_call_id for m in unmatched_tool_calls(messages)}
        call_names: dict[str, str] = {}
        converted: list[BaseMessage] = []
        for message in messages:
            converted.append(self._message_to_langchain(message, call_names))
            if isinstance(message, ToolCallMessage) and message.tool_call_id in pending:
                converted.append(
                    ToolMessage(
                        content="The client did not execute this tool call.",
                        tool_call_id=message.tool_call_id,
                        name=message.name,
                        status="error",
                        additional_kwargs={DIRECTIVE_KEY: NOT_EXECUTED},
                    )
                )
        return converted

    def to_langchain_message(self, message: Message) -> BaseMessage:
        """Convert a single contract message produced by a graph node."""
        return self._message_to_langchain(message, {})

    def _message_to_langchain(self, message: Message, call_names: dict[str, str]) -> BaseMessage:
        match message:
            case TextMessage(role="user"):
                return HumanMessage(content=message.content)
            case TextMessage():
                return AIMessage(content=message.content)
            case RenderHtmlMessage():
                return AIMessage(
                    content=message.message or "",
                    additional_kwargs={
                        DIRECTIVE_KEY: message.type,
                        "directive": dump_message(message),
                    },
                )
            case UserInputResultMessage():
                return HumanMessage(
                    content=(
                        f"Here is the information requested for '{message.tool_name}':\n"
                        f"{json.dumps(message.data, default=str)}"
                    ),
                    additional_kwargs={
                        DIRECTIVE_KEY: message.type,
                        "tool_name": message.tool_name,
                        "data": message.data,
                    },
                )
            case ToolCallMessage():
                call_names[message.tool_call_id] = message.name
                return AIMessage(
                    content="",
                    tool_calls=[
                        {
                            "name": message.name,
                            "args": message.params,
                            "id": message.tool_call_id,
                            "type": "tool_call",
                        }
                    ],
                    additional_kwargs={DIRECTIVE_KEY: message.type},
                )
            case ToolResultMessage():
                content = (
                    message.result
                    if isinstance(message.result, str)
                    else json.dumps(message.result, default=str)
                )
                return ToolMessage(
                    content=content,
                    tool_call_id=message.tool_call_id,
                    name=call_names.get(message.tool_call_id),
                    status="error" if message.is_error else "success",
                    additional_kwargs={DIRECTIVE_KEY: message.type, "result": message.result},
                )
            case ErrorMessage():
                return AIMessage(
                    content=message.message,
                    additional_kwargs={
                        DIRECTIVE_KEY: message.type,
                        "code": message.code,
                        "tool_name": message.tool_name,
                    },
                )
        raise TypeError(f"Unsupported message type: {type(message).__name__}")

    def to_contract(self, messages: Sequence[BaseMessage]) -> list[Message]:
        """Convert LangChain messages back into contract messages.

        System prompts and synthetic observations are dropped. A model response
        that requested tools but was not dispatched as a tool_call directive
        only keeps its text, so the client never sees an invocation it must not run.

        Args:
            messages: LangChain messages from the graph state

        Returns:
            Contract messages in the same order
        """
        converted: list[Message] = []
        for msg in messages:
            converted.extend(self._message_to_contract(msg))
        return converted

    def _message_to_contract(self, msg: BaseMessage) -> list[Message]:
        kind = directive_type(msg)
        if isinstance(msg, SystemMessage) or kind == NOT_EXECUTED:
            return []

        if isinstance(msg, HumanMessage):
            if kind == "user_input_result":
                return [
                    UserInputResultMessage(
                        tool_name=msg.additional_kwargs["tool_name"],
                        data=msg.additional_kwargs.get("data") or {},
                    )
                ]
            return [TextMessage(role="user", content=self._extract_content(msg))]

        if isinstance(msg, ToolMessage):
            if kind == "tool_result":
                result = msg.additional_kwargs.get("result")
            else:
                result = self._parse_tool_content(self._extract_content(msg))
            return [
                ToolResultMessage(
                    result=result,
                    tool_call_id=msg.tool_call_id,
                    is_error=msg.status == "error",
                )
            ]

        if isinstance(msg, AIMessage):
            if kind == "render_html":
                return [RenderHtmlMessage.model_validate(msg.additional_kwargs["directive"])]
            if kind == "error":
                return [
                    ErrorMessage(
                        code=msg.additional_kwargs.get("code", "error"),
                        message=self._extract_content(msg),
                        tool_name=msg.additional_kwargs.get("tool_name"),
                    )
                ]
            content = self._extract_content(msg)
            converted: list[Message] = [TextMessage(role="assistant", content=content)] if content else []
            if kind == "tool_call" and msg.tool_calls:
                tool_call = msg.tool_calls[0]
                converted.append(
                    ToolCallMessage(
                        name=tool_call["name"],
                        params=tool_call.get("args") or {},
                        tool_call_id=tool_call["id"] or "",
                    )
                )
            return converted

        logger.warning("Dropping unsupported message type %s", type(msg).__name__)
        return []

    def to_execution_result(self, langgraph_result: dict[str, Any], thread_id: str) -> ExecutionResult:
        """Convert the final LangGraph state to an ExecutionResult.

        Args:
            langgraph_result: Final state dict from the compiled graph
            thread_id: The thread ID used

        Returns:
            Framework-agnostic ExecutionResult
        """
        return ExecutionResult(
            messages=self.to_contract(langgraph_result.get("messages", [])),
            thread_id=thread_id,
            requires_user_input=bool(langgraph_result.get("requires_user_input", False)),
            pending_tool_name=langgraph_result.get("pending_tool_name"),
            metadata={
                "framework": "langgraph",
                "input_tokens_by_model": langgraph_result.get("input_tokens_by_model", {}),
                "output_tokens_by_model": langgraph_result.get("output_tokens_by_model", {}),
            },
        )

    def to_stream_event(self, event: dict[str, Any]) -> StreamEvent:
        """Convert a LangGraph "updates" chunk to a StreamEvent.

        Args:
            event: Update keyed by node name: {'node_name': {'messages': [...], ...}}

        Returns:
            Framework-agnostic StreamEvent
        """
        for node_name, node_data in event.items():
            if not isinstance(node_data, dict):
                continue

            messages = self.to_contract(node_data.get("messages", []))
            if not messages:
                continue

            return StreamEvent(
                event_type=messages[-1].type,
                data={"node": node_name, "messages": dump_history(messages)},
            )

        return StreamEvent(event_type="state_update", data={"nodes": list(event)})

    @staticmethod
    def _parse_tool_content(content: str) -> Any:
        try:
            return json.loads(content)
        except json.JSONDecodeError:
            return content

    @staticmethod
    def _extract_content(msg: BaseMessage) -> str:
        """Extract string content from a message.

        Args:
            msg: LangChain message

        Returns:
            Message content as string
        """
        content = msg.content
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            text_parts = [p.get("text", "") if isinstance(p, dict) else str(p) for p in content]
            return " ".join(text_parts)
        return str(content)


class InitialStateBuilder(Protocol):
    """Protocol for building the initial state for an agent."""

    def __call__(
        self,
        messages: Sequence[Message],
        tool_definitions: Sequence[ToolDefinition],
        thread_id: str,
    ) -> dict[str, Any]:
        """Build the initial state for one decision cycle.

        Args:
            messages: Contract history posted by the client
            tool_definitions: Tools available for this request
            thread_id: Identifier grouping the requests of one conversation

        Returns:
            Initial state for the agent graph
        """
        ...


class LangGraphAgent(Agent):
    """A configured, runnable LangGraph agent instance."""

    def __init__(
        self,
        graph: CompiledStateGraph,
        identity: AgentIdentity,
        initial_state_builder: InitialStateBuilder,
        message_parser: LangGraphMessageParser | None = None,
    ) -> None:
        """Initialize the agent.

        Args:
            graph: Compiled LangGraph ready for execution
            identity: Agent identity information
            initial_state_builder: Initial state builder
            message_parser: Optional custom message parser
        """
        self._graph = graph
        self._identity = identity
        self._initial_state_builder = initial_state_builder
        self._message_parser = message_parser or LangGraphMessageParser()

    @property
    def identity(self) -> AgentIdentity:
        return self._identity

    @property
    def name(self) -> str:
        return self._identity.name

    @property
    def description(self) -> str:
        return self._identity.description

    @property
    def slug(self) -> str:
        return self._identity.slug

    async def run(
        self,
        messages: Sequence[Message],
        tool_definitions: Sequence[ToolDefinition],
        thread_id: str,
    ) -> ExecutionResult:
        """Run one decision cycle and return the updated history.

        Args:
            messages: Full conversation history posted by the client
            tool_definitions: Tools the client can execute for this session
            thread_id: Identifier grouping the requests of one conversation

        Returns:
            Framework-agnostic ExecutionResult
        """
        init_state = self._initial_state_builder(
            messages=messages,
            tool_definitions=tool_definitions,
            thread_id=thread_id,
        )

        with tracer.start_as_current_span(self.name):
            with using_session(thread_id):
                async with collect_agent_metrics(AgentMetricsLabels(self.slug)):
                    result = await self._graph.ainvoke(init_state)

        return self._message_parser.to_execution_result(langgraph_result=result, thread_id=thread_id)

    async def run_stream(
        self,
        messages: Sequence[Message],
        tool_definitions: Sequence[ToolDefinition],
        thread_id: str,
    ) -> AsyncIterator[StreamEvent]:
        """Run one decision cycle with streaming output.

        Node updates are yielded as they happen; the final event has type
        "done" and carries the full updated history.

        Args:
            messages: Full conversation history posted by the client
            tool_definitions: Tools the client can execute for this session
            thread_id: Identifier grouping the requests of one conversation

        Yields:
            Framework-agnostic StreamEvent
        """
        init_state = self._initial_state_builder(
            messages=messages,
            tool_definitions=tool_definitions,
            thread_id=thread_id,
        )
        final_state: dict[str, Any] = dict(init_state)

        with tracer.start_as_current_span(self.name):
            with using_session(session_id=thread_id):
                async with collect_agent_metrics(AgentMetricsLabels(self.slug)):
                    async for mode, chunk in self._graph.astream(
                        init_state,
                        stream_mode=["updates", "values"],
                    ):
                        if mode == "values":
                            final_state = chunk
                            continue
                        yield self._message_parser.to_stream_event(chunk)

        result = self._message_parser.to_execution_result(final_state, thread_id=thread_id)
        yield StreamEvent(
            event_type="done",
            data={
                "messages": dump_history(result.messages),
                "requires_user_input": result.requires_user_input,
                "pending_tool_name": result.pending_tool_name,
            },
        )
