"""
Shared FastAPI dependencies: single source of truth for DI.

All routers should import the session, store and upstream-service
dependencies from HERE so tests can override them in one place.
"""

import uuid
from functools import lru_cache

from fastapi import Depends, Header, Request

from app.core.assistant_agent import AssistantDeps, PitchDeckAssistant
from app.core.config import settings
from app.core.conversation_state import ConversationStore
from app.core.language_model import LanguageModel, PydanticAILanguageModel
from app.core.retrieval import KnowledgeRetrievalService, VectorizeRetrievalService

__all__ = [
    "get_assistant",
    "get_assistant_deps",
    "get_conversation_store",
    "get_language_model",
    "get_retrieval",
    "get_session_id",
]

SESSION_KEY = "pitch_session_id"

# Process-lifetime conversation states; nothing survives a restart
conversation_store = ConversationStore(
    max_sessions=settings.SESSION_MAX_COUNT,
    idle_seconds=settings.SESSION_IDLE_SECONDS,
)


def get_conversation_store() -> ConversationStore:
    return conversation_store


def get_session_id(
    request: Request,
    x_session_id: str | None = Header(default=None),
) -> str:
    """Resolve the conversation session.

    An explicit ``X-Session-Id`` header wins; otherwise the id lives in the
    signed session cookie and is minted on first contact.
    """
    if x_session_id:
        return x_session_id
    session_id = request.session.get(SESSION_KEY)
    if not session_id:
        session_id = str(uuid.uuid4())
        request.session[SESSION_KEY] = session_id
    return session_id


@lru_cache
def get_language_model() -> LanguageModel:
    return PydanticAILanguageModel(settings.EXTRACTION_MODEL)


def get_retrieval(request: Request) -> KnowledgeRetrievalService:
    return VectorizeRetrievalService(
        request.app.state.http_client,
        base_url=settings.VECTORIZE_API_URL,
        org_id=settings.VECTORIZE_ORG_ID,
        pipeline_id=settings.VECTORIZE_PIPELINE_ID,
        access_token=settings.VECTORIZE_ACCESS_TOKEN,
        num_results=settings.RETRIEVAL_NUM_RESULTS,
        timeout=settings.RETRIEVAL_TIMEOUT_SECONDS,
    )


@lru_cache
def get_assistant() -> PitchDeckAssistant:
    return PitchDeckAssistant(settings.ASSISTANT_MODEL)


def get_assistant_deps(
    session_id: str = Depends(get_session_id),
    store: ConversationStore = Depends(get_conversation_store),
    language_model: LanguageModel = Depends(get_language_model),
    retrieval: KnowledgeRetrievalService = Depends(get_retrieval),
) -> AssistantDeps:
    return AssistantDeps(
        store=store,
        session_id=session_id,
        language_model=language_model,
        retrieval=retrieval,
    )
