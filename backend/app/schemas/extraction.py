"""
Pydantic model for the topic-extraction completion.

The language model answers with one camelCase key per rubric topic plus a
``topicsCovered`` list.  Every topic is optional; null-like strings
("null", "n/a", "not mentioned" ...) and non-string values read as absent.
"""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from app.schemas.pitch_deck import CamelModel, StartupIdea

NULL_SENTINELS = frozenset({"", "null", "none", "n/a", "not mentioned"})


class ExtractionPayload(CamelModel):
    problem: str | None = None
    solution: str | None = None
    market: str | None = None
    business_model: str | None = None
    competitive_advantage: str | None = None
    team: str | None = None
    traction: str | None = None
    funding_ask: str | None = None
    topics_covered: list[str] = []

    @field_validator(
        "problem",
        "solution",
        "market",
        "business_model",
        "competitive_advantage",
        "team",
        "traction",
        "funding_ask",
        mode="before",
    )
    @classmethod
    def _null_sentinels_to_none(cls, value: Any) -> str | None:
        if not isinstance(value, str):
            return None
        stripped = value.strip()
        if stripped.lower() in NULL_SENTINELS:
            return None
        return stripped

    @field_validator("topics_covered", mode="before")
    @classmethod
    def _string_names_only(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [name for name in value if isinstance(name, str)]

    def to_startup_idea(self) -> StartupIdea:
        return StartupIdea(**self.model_dump(exclude={"topics_covered"}))
