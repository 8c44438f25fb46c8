"""
Chat controller for the streaming pitch-deck assistant.

Validates the incoming message list, builds the agent prompt from the
conversation so far and relays the agent's text as server-sent events:
``data: {"content": ...}`` frames followed by ``data: [DONE]``.
"""

import json
import logging
from collections.abc import AsyncIterator

from fastapi import HTTPException
from fastapi.responses import StreamingResponse

from app.core.assistant_agent import AssistantDeps, PitchDeckAssistant
from app.schemas.chat import AgentMessage

logger = logging.getLogger(__name__)

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


# ---------------------------------------------------------------------------
# 1.  build_agent_prompt
# ---------------------------------------------------------------------------

def build_agent_prompt(messages: list[AgentMessage]) -> str:
    """Turn the message list into a single agent prompt.

    Raises 400 when there is no message or the final turn is not the
    user's; such requests are rejected rather than defaulted.
    """
    if not messages or messages[-1].role != "user":
        raise HTTPException(status_code=400, detail="Invalid message format")

    latest = messages[-1].content
    history = messages[:-1]
    if not history:
        return latest

    # Build a simple string history for the agent (no pydantic_ai message objects)
    history_text = "\n".join(f"{m.role}: {m.content}" for m in history)
    return f"Conversation so far:\n{history_text}\n\nUser message: {latest}"


def _frame(payload: dict) -> str:
    return f"data: {json.dumps(payload)}\n\n"


# ---------------------------------------------------------------------------
# 2.  stream_events
# ---------------------------------------------------------------------------

async def stream_events(
    assistant: PitchDeckAssistant,
    prompt: str,
    deps: AssistantDeps,
) -> AsyncIterator[str]:
    """Relay agent text chunks; a failure mid-stream ends with an error frame."""
    try:
        async for chunk in assistant.stream_reply(prompt, deps):
            if chunk:
                yield _frame({"content": chunk})
    except Exception:
        logger.exception("Streaming error for session %s", deps.session_id)
        yield _frame({"error": "Failed to process request with Pitch Deck Assistant"})
    yield "data: [DONE]\n\n"


# ---------------------------------------------------------------------------
# 3.  send_message  (main entry point)
# ---------------------------------------------------------------------------

async def send_message(
    messages: list[AgentMessage],
    assistant: PitchDeckAssistant,
    deps: AssistantDeps,
) -> StreamingResponse:
    prompt = build_agent_prompt(messages)
    logger.info("Assistant turn for session %s (%d messages)", deps.session_id, len(messages))
    return StreamingResponse(
        stream_events(assistant, prompt, deps),
        media_type="text/plain; charset=utf-8",
        headers=STREAM_HEADERS,
    )
