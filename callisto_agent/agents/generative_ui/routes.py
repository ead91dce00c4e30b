"""Generative UI agent HTTP endpoints.

This module provides the chat endpoints the browser client posts its history
to, supporting both synchronous and streaming response modes.
"""

import json
import uuid

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from callisto_agent.agents.generative_ui.agent import GenerativeUIAgentBuilder
from callisto_agent.platform.agent.contract import ChatRequest, ChatResponse
from callisto_agent.platform.agent.protocol import Agent
from callisto_agent.platform.server.dependencies.agents import get_agent

chat_router = APIRouter(
    prefix="/api",
    tags=["agents"],
)


@chat_router.post("/chat", response_model=ChatResponse, response_model_by_alias=True)
async def chat_handler(
    payload: ChatRequest,
    agent: Agent = Depends(get_agent(GenerativeUIAgentBuilder)),
) -> ChatResponse:
    """Run one decision cycle over the posted history.

    Args:
        payload: Full history, the client's tool catalog and an optional thread_id
        agent: Cached agent instance (injected)

    Returns:
        The full updated history; only the last message is new
    """
    result = await agent.run(
        payload.messages,
        tool_definitions=payload.tool_definitions,
        thread_id=payload.thread_id or str(uuid.uuid4()),
    )
    return ChatResponse(messages=result.messages)


@chat_router.post("/chat/stream")
async def chat_stream_handler(
    payload: ChatRequest,
    agent: Agent = Depends(get_agent(GenerativeUIAgentBuilder)),
):
    """Run one decision cycle with Server-Sent Events streaming.

    Each graph node update is sent as an event named after the type of the
    message it produced; the final "done" event carries the full history.

    Args:
        payload: Full history, the client's tool catalog and an optional thread_id
        agent: Cached agent instance (injected)

    Returns:
        StreamingResponse with SSE events
    """
    stream_response = agent.run_stream(
        payload.messages,
        tool_definitions=payload.tool_definitions,
        thread_id=payload.thread_id or str(uuid.uuid4()),
    )

    async def stream_generator():
        async for event in stream_response:
            # Skip internal updates that produced no message
            if event.event_type == "state_update":
                continue
            yield f"event: {event.event_type}\ndata: {json.dumps(event.data, default=str)}\n\n"

    return StreamingResponse(
        stream_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable proxy buffering
        },
    )
