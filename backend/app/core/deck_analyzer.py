"""
Qualitative deck analysis, independent of the rendered slide text.

Only problem, solution, market, team and traction get dedicated
strength/weakness checks; the remaining topics surface through the
per-refinement-area suggestions.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.core.rubric import RubricTopic, RUBRIC_BY_TOPIC
from app.schemas.pitch_deck import DeckAnalysis, RefinementArea, StartupIdea

MARKET_SIZE_WORDS = ("billion", "million")


@dataclass(frozen=True)
class _Check:
    topic: RubricTopic
    keyword: str
    principle: str
    strength: str
    weakness: str
    suggestion: str


_CHECKS: tuple[_Check, ...] = (
    _Check(
        RubricTopic.problem,
        "problem",
        "Focus on a clear, urgent problem",
        "Problem is well-articulated",
        "Problem statement needs refinement",
        "Make the problem more concrete with specific examples",
    ),
    _Check(
        RubricTopic.solution,
        "solution",
        "Simple, clear solution",
        "Solution is well-defined",
        "Solution needs more detail",
        "Explain how your solution works in simple terms",
    ),
    _Check(
        RubricTopic.market,
        "market",
        "Large market opportunity",
        "Market size is quantified",
        "Market size not clearly quantified",
        "Include specific market size numbers",
    ),
    _Check(
        RubricTopic.team,
        "team",
        "Strong founding team",
        "Team background is described",
        "Team section needs more detail",
        "Highlight relevant experience and achievements",
    ),
    _Check(
        RubricTopic.traction,
        "traction",
        "Show traction and progress",
        "Traction is demonstrated",
        "Traction metrics are missing",
        "Include specific growth metrics and milestones",
    ),
)


def _is_strength(topic: RubricTopic, snippet: str | None, flagged: set[str]) -> bool:
    rubric = RUBRIC_BY_TOPIC[topic]
    if rubric.display_name in flagged:
        return False
    if topic is RubricTopic.market:
        # Quantified size, not length, decides market strength
        return bool(snippet) and any(word in snippet.lower() for word in MARKET_SIZE_WORDS)
    return rubric.is_sufficient(snippet)


def analyze(
    facts: StartupIdea,
    refinement_areas: list[RefinementArea],
    applied_principles: list[str],
) -> DeckAnalysis:
    principles_text = " ".join(applied_principles).lower()
    flagged = {area.topic for area in refinement_areas}

    strengths: list[str] = []
    weaknesses: list[str] = []
    suggestions: list[str] = []
    principles: list[str] = []

    for check in _CHECKS:
        if check.keyword not in principles_text:
            continue
        principles.append(check.principle)
        if _is_strength(check.topic, facts.get(check.topic), flagged):
            strengths.append(check.strength)
        else:
            weaknesses.append(check.weakness)
            suggestions.append(check.suggestion)

    for area in refinement_areas:
        if area.suggested_questions:
            suggestions.append(f"{area.topic}: {area.suggested_questions[0]}")

    return DeckAnalysis(
        strengths=strengths,
        weaknesses=weaknesses,
        suggestions=suggestions,
        startup_principles=principles,
    )
