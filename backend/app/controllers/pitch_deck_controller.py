"""
Pitch-deck session orchestration.

Sequences the engine for one session turn:

- **evaluate**: extract facts from the founder's answer, merge them into
  the session state, re-run the rubric evaluation and store the result.
- **generate**: render the 11-slide deck and its analysis from either the
  stored facts or explicitly supplied ones.

Every operation here is also exposed to the assistant agent as a tool, so
responses are the same models whether they come over HTTP or through chat.
"""

import logging

from app.core.config import settings
from app.core.conversation_state import ConversationState, ConversationStore
from app.core.deck_analyzer import analyze
from app.core.deck_renderer import render
from app.core.language_model import LanguageModel
from app.core.refinement_evaluator import evaluate, find_refinement_areas, search_guidance
from app.core.retrieval import KnowledgeRetrievalService
from app.core.rubric import RUBRIC, TOPIC_COUNT
from app.core.topic_extractor import extract
from app.schemas.generation import DEFAULT_COMPANY_NAME
from app.schemas.pitch_deck import (
    ConversationStateRead,
    DeckPayload,
    EvaluationResponse,
    PrinciplesSearchResponse,
    QuestionItem,
    QuestionsResponse,
    RefinementArea,
    ResetResponse,
    ShouldGenerateResponse,
    StartupIdea,
)

logger = logging.getLogger(__name__)

DECK_STRUCTURE_QUERY = "pitch deck structure slides problem solution market team traction"

GENERATE_KEYWORDS = ("generate", "create", "build", "make", "now", "pitch deck", "deck")


# ---------------------------------------------------------------------------
# 1.  Questions / reset / state
# ---------------------------------------------------------------------------

def get_all_questions() -> QuestionsResponse:
    """The eight upfront interview questions, one per rubric topic."""
    return QuestionsResponse(
        questions=[
            QuestionItem(topic=r.topic, question=r.question, priority=r.priority)
            for r in RUBRIC
        ],
        message="Here are all the questions needed for your pitch deck. Please answer them comprehensively:",
    )


async def reset_conversation(store: ConversationStore, session_id: str) -> ResetResponse:
    await store.reset(session_id)
    return ResetResponse(
        message="Conversation reset. Ready to start fresh!",
        questions_remaining=TOPIC_COUNT,
    )


def get_conversation_state(store: ConversationStore, session_id: str) -> ConversationStateRead:
    """Read-only: an unknown session reads as empty and is not created."""
    state = store.peek(session_id)
    if state is None:
        state = ConversationState()
    return state.to_read(session_id)


# ---------------------------------------------------------------------------
# 2.  evaluate_comprehensive_response
# ---------------------------------------------------------------------------

async def evaluate_comprehensive_response(
    store: ConversationStore,
    session_id: str,
    user_response: str,
    language_model: LanguageModel,
    retrieval: KnowledgeRetrievalService,
) -> EvaluationResponse:
    """Extract, merge and evaluate one founder answer.

    The whole pass holds the session lock so two turns on the same session
    cannot interleave their read-modify-write.
    """
    async with store.turn(session_id) as state:
        extraction = await extract(
            user_response,
            language_model,
            conversation=state.conversation_so_far(),
            timeout=settings.LLM_TIMEOUT_SECONDS,
        )
        state.merge_extraction(extraction.facts, extraction.covered_topics, answer=user_response)

        evaluation = await evaluate(
            state.facts,
            retrieval,
            timeout=settings.RETRIEVAL_TIMEOUT_SECONDS,
        )
        state.apply_evaluation(evaluation.refinement_areas, evaluation.applied_principles)

        logger.info(
            "Session %s: extracted %d topics via %s, %d refinement areas",
            session_id,
            len(extraction.covered_topics),
            extraction.source,
            len(evaluation.refinement_areas),
        )

        return EvaluationResponse(
            extracted_info=extraction.facts,
            topics_covered=extraction.covered_topics,
            refinement_areas=evaluation.refinement_areas,
            startup_principles=evaluation.applied_principles,
            questions_remaining=state.questions_remaining,
            message="Evaluation complete! Here are areas that need refinement:",
        )


# ---------------------------------------------------------------------------
# 3.  Principles / intent helpers
# ---------------------------------------------------------------------------

async def search_startup_principles(
    query: str,
    retrieval: KnowledgeRetrievalService,
) -> PrinciplesSearchResponse:
    guidance = await search_guidance(retrieval, query, timeout=settings.RETRIEVAL_TIMEOUT_SECONDS)
    return PrinciplesSearchResponse(
        query=query,
        principles=f"Startup Principles for {query}: {guidance}",
    )


def should_generate_pitch_deck(user_message: str) -> ShouldGenerateResponse:
    lowered = user_message.lower()
    wants_to_generate = any(keyword in lowered for keyword in GENERATE_KEYWORDS)
    return ShouldGenerateResponse(
        should_generate=wants_to_generate,
        message=(
            "User wants to generate pitch deck now. Use the information already collected."
            if wants_to_generate
            else "User does not want to generate pitch deck yet."
        ),
    )


# ---------------------------------------------------------------------------
# 4.  Deck generation
# ---------------------------------------------------------------------------

async def _build_deck(
    company_name: str,
    facts: StartupIdea,
    refinement_areas: list[RefinementArea],
    applied_principles: list[str],
    questions_remaining: int,
    retrieval: KnowledgeRetrievalService,
    message: str,
) -> DeckPayload:
    structure_guidance = await search_guidance(
        retrieval,
        DECK_STRUCTURE_QUERY,
        timeout=settings.RETRIEVAL_TIMEOUT_SECONDS,
    )
    principles = [*applied_principles, structure_guidance]

    pitch_deck = render(company_name, facts, refinement_areas)
    analysis = analyze(facts, refinement_areas, principles)

    return DeckPayload(
        pitch_deck=pitch_deck,
        analysis=analysis,
        refinement_areas=refinement_areas,
        questions_remaining=questions_remaining,
        message=message,
    )


async def generate_pitch_deck(
    store: ConversationStore,
    session_id: str,
    company_name: str,
    idea: StartupIdea,
    retrieval: KnowledgeRetrievalService,
) -> DeckPayload:
    """Render a deck from explicitly supplied facts.

    Refinement flags come from the sufficiency gate applied to *idea*
    itself; the session only contributes its applied principles.
    """
    async with store.turn(session_id) as state:
        applied_principles = list(state.applied_principles)
        questions_remaining = state.questions_remaining

    return await _build_deck(
        company_name or DEFAULT_COMPANY_NAME,
        idea,
        find_refinement_areas(idea),
        applied_principles,
        questions_remaining,
        retrieval,
        "Pitch deck generated successfully! Areas marked NEEDS-REFINEMENT require more detail.",
    )


async def generate_pitch_deck_from_state(
    store: ConversationStore,
    session_id: str,
    retrieval: KnowledgeRetrievalService,
    company_name: str = DEFAULT_COMPANY_NAME,
) -> DeckPayload:
    """Render a deck from everything the session has collected so far."""
    async with store.turn(session_id) as state:
        facts = state.facts.model_copy()
        if state.evaluated:
            refinement_areas = [a.model_copy(deep=True) for a in state.refinement_areas]
        else:
            refinement_areas = find_refinement_areas(facts)
        applied_principles = list(state.applied_principles)
        questions_remaining = state.questions_remaining

    return await _build_deck(
        company_name or DEFAULT_COMPANY_NAME,
        facts,
        refinement_areas,
        applied_principles,
        questions_remaining,
        retrieval,
        "Pitch deck generated successfully using your provided information! "
        "Areas marked NEEDS-REFINEMENT require more detail.",
    )
