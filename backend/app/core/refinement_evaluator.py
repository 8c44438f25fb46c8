"""
Refinement evaluation: score extracted facts against the rubric.

For every topic, in canonical order, retrieve guidance text and record it
as an applied principle; topics whose snippet is missing or shorter than
the rubric threshold become refinement areas.  A retrieval failure only
blanks the guidance for that one topic.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from app.core.retrieval import KnowledgeRetrievalService
from app.core.rubric import RUBRIC, TopicRubric
from app.schemas.pitch_deck import RefinementArea, StartupIdea

logger = logging.getLogger(__name__)

PRINCIPLE_EXCERPT_LENGTH = 100
NOT_PROVIDED = "Not provided"


@dataclass
class EvaluationResult:
    refinement_areas: list[RefinementArea] = field(default_factory=list)
    applied_principles: list[str] = field(default_factory=list)


def build_refinement_area(rubric: TopicRubric, snippet: str | None) -> RefinementArea:
    return RefinementArea(
        topic=rubric.display_name,
        current_understanding=snippet or NOT_PROVIDED,
        suggested_questions=list(rubric.suggested_questions),
        priority=rubric.priority,
    )


def find_refinement_areas(facts: StartupIdea) -> list[RefinementArea]:
    """The retrieval-free half of ``evaluate``: apply the sufficiency gate only."""
    return [
        build_refinement_area(rubric, facts.get(rubric.topic))
        for rubric in RUBRIC
        if not rubric.is_sufficient(facts.get(rubric.topic))
    ]


async def search_guidance(
    retrieval: KnowledgeRetrievalService,
    query: str,
    timeout: float | None = None,
) -> str:
    """Best-effort guidance lookup; a timeout or failure yields ``""``."""
    try:
        return await asyncio.wait_for(retrieval.search(query), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Guidance lookup for %r timed out after %ss", query, timeout)
    except Exception:
        logger.warning("Guidance lookup for %r failed", query, exc_info=True)
    return ""


async def evaluate(
    facts: StartupIdea,
    retrieval: KnowledgeRetrievalService,
    *,
    timeout: float | None = None,
) -> EvaluationResult:
    """Evaluate *facts* against every rubric topic.

    Lookups run concurrently; ``asyncio.gather`` keeps results in rubric
    order, which both output lists rely on.
    """
    guidance = await asyncio.gather(
        *[search_guidance(retrieval, rubric.guidance_query, timeout) for rubric in RUBRIC]
    )

    result = EvaluationResult()
    for rubric, text in zip(RUBRIC, guidance):
        result.applied_principles.append(
            f"{rubric.display_name}: {(text or '')[:PRINCIPLE_EXCERPT_LENGTH]}..."
        )
        snippet = facts.get(rubric.topic)
        if not rubric.is_sufficient(snippet):
            result.refinement_areas.append(build_refinement_area(rubric, snippet))

    logger.info(
        "Evaluation complete: %d/%d topics need refinement",
        len(result.refinement_areas),
        len(RUBRIC),
    )
    return result
