"""Pitch-deck router: direct access to the synthesis engine without the chat agent."""

from fastapi import APIRouter, Depends

from app.api.deps import (
    get_conversation_store,
    get_language_model,
    get_retrieval,
    get_session_id,
)
from app.controllers import pitch_deck_controller
from app.core.conversation_state import ConversationStore
from app.core.language_model import LanguageModel
from app.core.retrieval import KnowledgeRetrievalService
from app.schemas.generation import (
    EvaluateResponseRequest,
    GenerateDeckRequest,
    PrinciplesSearchRequest,
    ShouldGenerateRequest,
)
from app.schemas.pitch_deck import (
    ConversationStateRead,
    DeckPayload,
    EvaluationResponse,
    PrinciplesSearchResponse,
    QuestionsResponse,
    ResetResponse,
    ShouldGenerateResponse,
)

router = APIRouter(prefix="/pitch-deck", tags=["pitch-deck"])


@router.get("/questions", response_model=QuestionsResponse)
async def get_questions():
    """All eight upfront pitch-deck questions."""
    return pitch_deck_controller.get_all_questions()


@router.get("/state", response_model=ConversationStateRead)
async def get_state(
    session_id: str = Depends(get_session_id),
    store: ConversationStore = Depends(get_conversation_store),
):
    """Current facts, covered topics and refinement areas for this session."""
    return pitch_deck_controller.get_conversation_state(store, session_id)


@router.post("/evaluate", response_model=EvaluationResponse)
async def evaluate_response(
    payload: EvaluateResponseRequest,
    session_id: str = Depends(get_session_id),
    store: ConversationStore = Depends(get_conversation_store),
    language_model: LanguageModel = Depends(get_language_model),
    retrieval: KnowledgeRetrievalService = Depends(get_retrieval),
):
    """Extract facts from a founder's answer and evaluate them against the rubric."""
    return await pitch_deck_controller.evaluate_comprehensive_response(
        store, session_id, payload.user_response, language_model, retrieval
    )


@router.post("/generate", response_model=DeckPayload)
async def generate_deck(
    payload: GenerateDeckRequest,
    session_id: str = Depends(get_session_id),
    store: ConversationStore = Depends(get_conversation_store),
    retrieval: KnowledgeRetrievalService = Depends(get_retrieval),
):
    """Render a deck from explicitly supplied startup details."""
    return await pitch_deck_controller.generate_pitch_deck(
        store, session_id, payload.company_name, payload.idea, retrieval
    )


@router.post("/generate-from-state", response_model=DeckPayload)
async def generate_deck_from_state(
    session_id: str = Depends(get_session_id),
    store: ConversationStore = Depends(get_conversation_store),
    retrieval: KnowledgeRetrievalService = Depends(get_retrieval),
):
    """Render a deck from everything collected in this session."""
    return await pitch_deck_controller.generate_pitch_deck_from_state(store, session_id, retrieval)


@router.post("/reset", response_model=ResetResponse)
async def reset(
    session_id: str = Depends(get_session_id),
    store: ConversationStore = Depends(get_conversation_store),
):
    """Reset this session to the empty state."""
    return await pitch_deck_controller.reset_conversation(store, session_id)


@router.post("/principles/search", response_model=PrinciplesSearchResponse)
async def search_principles(
    payload: PrinciplesSearchRequest,
    retrieval: KnowledgeRetrievalService = Depends(get_retrieval),
):
    """Look up startup fundraising guidance in the knowledge base."""
    return await pitch_deck_controller.search_startup_principles(payload.query, retrieval)


@router.post("/should-generate", response_model=ShouldGenerateResponse)
async def should_generate(payload: ShouldGenerateRequest):
    """Detect whether a message asks for the deck to be generated now."""
    return pitch_deck_controller.should_generate_pitch_deck(payload.user_message)
