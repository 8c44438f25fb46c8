"""
Deterministic pitch-deck renderer.

Maps extracted facts and refinement flags onto a fixed 11-slide outline:

1. Company Name            7. Go-to-Market Strategy (static)
2. The Problem             8. Team
3. The Solution            9. Traction
4. Market Opportunity     10. Financial Projections (static)
5. Business Model         11. Funding Ask
6. Competitive Advantage

A fact-backed slide shows the founder's text verbatim, or a
``NEEDS-REFINEMENT`` marker when the fact is missing.  Its key points come
from the refinement list whenever the topic was flagged, even if a short
fact is present.
"""

from __future__ import annotations

import datetime

from app.core.rubric import RUBRIC, RubricTopic, RUBRIC_BY_TOPIC, TopicRubric
from app.schemas.pitch_deck import PitchDeck, RefinementArea, Slide, StartupIdea

SLIDE_COUNT = 11

REFINEMENT_MARKER_PREFIX = "NEEDS-REFINEMENT"

_GO_TO_MARKET = Slide(
    slide_number=7,
    title="Go-to-Market Strategy",
    content="How we'll reach and acquire customers",
    key_points=["Customer acquisition channels", "Partnerships", "Marketing strategy"],
)

_FINANCIAL_PROJECTIONS = Slide(
    slide_number=10,
    title="Financial Projections",
    content="3-5 year revenue and growth projections",
    key_points=["Revenue growth", "Key metrics", "Path to profitability"],
)


def refinement_marker(topic: RubricTopic) -> str:
    """Visible placeholder for a slide whose fact is missing."""
    return f"{REFINEMENT_MARKER_PREFIX}: {RUBRIC_BY_TOPIC[topic].display_name} requires more detail"


def refinement_key_points(topic: RubricTopic) -> list[str]:
    return [
        "Area needs refinement",
        "Consider the suggested questions",
        RUBRIC_BY_TOPIC[topic].refinement_hint,
    ]


def _render_topic_slide(rubric: TopicRubric, facts: StartupIdea, flagged: set[str]) -> Slide:
    snippet = facts.get(rubric.topic)
    if rubric.display_name in flagged:
        key_points = refinement_key_points(rubric.topic)
    else:
        key_points = list(rubric.strong_points)
    return Slide(
        slide_number=rubric.slide_number,
        title=rubric.slide_title,
        content=snippet or refinement_marker(rubric.topic),
        key_points=key_points,
    )


def _render_cover(company_name: str, facts: StartupIdea) -> Slide:
    problem = facts.problem or refinement_marker(RubricTopic.problem)
    return Slide(
        slide_number=1,
        title="Company Name",
        content=f"{company_name}\nA revolutionary solution to {problem}",
    )


def render(
    company_name: str,
    facts: StartupIdea,
    refinement_areas: list[RefinementArea],
    *,
    now: datetime.datetime | None = None,
) -> PitchDeck:
    """Render a new ``PitchDeck``; ``created_at`` is the only varying field."""
    flagged = {area.topic for area in refinement_areas}

    slides = [
        _render_cover(company_name, facts),
        _GO_TO_MARKET.model_copy(deep=True),
        _FINANCIAL_PROJECTIONS.model_copy(deep=True),
    ]
    slides.extend(_render_topic_slide(rubric, facts, flagged) for rubric in RUBRIC)
    slides.sort(key=lambda s: s.slide_number)

    return PitchDeck(
        company_name=company_name,
        slides=slides,
        created_at=now or datetime.datetime.now(datetime.timezone.utc),
    )
