"""
Pydantic models for the pitch-deck synthesis engine.

Fields are snake_case in Python and camelCase on the wire (``slideNumber``,
``keyPoints``, ``refinementAreas`` ...) so the JSON matches what deck
consumers already parse.  Rendered decks and analyses are frozen: a new
render always produces a new value.
"""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.core.rubric import RUBRIC, Priority, RubricTopic, RUBRIC_BY_TOPIC


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Extracted facts
# ---------------------------------------------------------------------------

class StartupIdea(CamelModel):
    """Topic -> extracted snippet.  ``None`` means not provided yet."""

    problem: str | None = None
    solution: str | None = None
    market: str | None = None
    business_model: str | None = None
    competitive_advantage: str | None = None
    team: str | None = None
    traction: str | None = None
    funding_ask: str | None = None

    def get(self, topic: RubricTopic) -> str | None:
        return getattr(self, RUBRIC_BY_TOPIC[topic].attr)

    def present_topics(self) -> list[RubricTopic]:
        return [r.topic for r in RUBRIC if getattr(self, r.attr)]

    def merged_with(self, other: StartupIdea) -> StartupIdea:
        """Return a copy where *other*'s non-empty snippets win.

        Empty or missing snippets in *other* never erase what is already
        known.
        """
        updates = {
            r.attr: getattr(other, r.attr)
            for r in RUBRIC
            if getattr(other, r.attr)
        }
        return self.model_copy(update=updates)


class RefinementArea(CamelModel):
    topic: str
    current_understanding: str
    suggested_questions: list[str]
    priority: Priority


# ---------------------------------------------------------------------------
# Rendered deck + analysis
# ---------------------------------------------------------------------------

class Slide(CamelModel):
    model_config = ConfigDict(frozen=True)

    slide_number: int
    title: str
    content: str
    key_points: list[str] | None = None


class PitchDeck(CamelModel):
    model_config = ConfigDict(frozen=True)

    company_name: str
    slides: list[Slide]
    created_at: datetime.datetime


class DeckAnalysis(CamelModel):
    model_config = ConfigDict(frozen=True)

    strengths: list[str]
    weaknesses: list[str]
    suggestions: list[str]
    startup_principles: list[str]


class DeckPayload(CamelModel):
    """The JSON object embedded in the assistant's deck reply."""

    pitch_deck: PitchDeck
    analysis: DeckAnalysis
    refinement_areas: list[RefinementArea]
    questions_remaining: int
    message: str | None = None


# ---------------------------------------------------------------------------
# Orchestrator responses
# ---------------------------------------------------------------------------

class QuestionItem(CamelModel):
    topic: RubricTopic
    question: str
    priority: Priority


class QuestionsResponse(CamelModel):
    questions: list[QuestionItem]
    message: str


class ResetResponse(CamelModel):
    message: str
    questions_remaining: int


class EvaluationResponse(CamelModel):
    extracted_info: StartupIdea
    topics_covered: list[RubricTopic]
    refinement_areas: list[RefinementArea]
    startup_principles: list[str]
    questions_remaining: int
    message: str


class ConversationStateRead(CamelModel):
    session_id: str
    phase: str
    facts: StartupIdea
    covered_topics: list[RubricTopic]
    refinement_areas: list[RefinementArea]
    questions_remaining: int


class PrinciplesSearchResponse(CamelModel):
    query: str
    principles: str


class ShouldGenerateResponse(CamelModel):
    should_generate: bool
    message: str
