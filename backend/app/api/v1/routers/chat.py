"""Assistant chat router: thin HTTP layer, delegates all logic to chat_controller."""

from fastapi import APIRouter, Depends

from app.api.deps import get_assistant, get_assistant_deps
from app.controllers import chat_controller
from app.core.assistant_agent import AssistantDeps, PitchDeckAssistant
from app.schemas.chat import AssistantRequest

router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.post("/messages")
async def send_message(
    payload: AssistantRequest,
    assistant: PitchDeckAssistant = Depends(get_assistant),
    deps: AssistantDeps = Depends(get_assistant_deps),
):
    """Send the conversation and stream the assistant's reply as server-sent events."""
    return await chat_controller.send_message(payload.messages, assistant, deps)
