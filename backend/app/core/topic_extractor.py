"""
Topic extraction: free text -> rubric-tagged snippets.

Primary path asks the language model for a JSON object with one key per
rubric topic.  The raw completion goes through ``decode_model_output``,
which yields either ``ParsedExtraction`` or ``MalformedOutput``; on
``MalformedOutput``, on any exception and on timeout the extractor falls
back to deterministic keyword matching.  ``extract`` never raises.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Literal

from pydantic import ValidationError

from app.core.language_model import LanguageModel
from app.core.rubric import RUBRIC, RubricTopic, topic_from_name
from app.schemas.extraction import ExtractionPayload
from app.schemas.pitch_deck import StartupIdea

logger = logging.getLogger(__name__)


_EXTRACTION_PROMPT = """\
Analyze the following startup description and extract relevant information \
for a pitch deck.

User's description: "{text}"

Extract information for the following categories.  For each category, \
provide the relevant text from the user's response, or null if it is not \
mentioned:

1. problem - What problem are they solving and who experiences it?
2. solution - How does their solution work and what makes it unique?
3. market - Who is their target market and how big is the opportunity?
4. businessModel - How do they plan to make money?
5. competitiveAdvantage - What makes them unique or hard to copy?
6. team - Information about the founding team and their experience
7. traction - Current progress, users, revenue, partnerships
8. fundingAsk - How much funding are they seeking and for what?

Respond with ONLY a valid JSON object like this (no markdown formatting, \
no code blocks):
{{
  "problem": "extracted text or null",
  "solution": "extracted text or null",
  "market": "extracted text or null",
  "businessModel": "extracted text or null",
  "competitiveAdvantage": "extracted text or null",
  "team": "extracted text or null",
  "traction": "extracted text or null",
  "fundingAsk": "extracted text or null",
  "topicsCovered": ["list", "of", "topics", "that", "were", "mentioned"]
}}
"""

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParsedExtraction:
    facts: StartupIdea
    covered_topics: list[RubricTopic]


@dataclass(frozen=True)
class MalformedOutput:
    reason: str
    raw: str = ""


@dataclass
class ExtractionResult:
    facts: StartupIdea = field(default_factory=StartupIdea)
    covered_topics: list[RubricTopic] = field(default_factory=list)
    source: Literal["model", "keywords"] = "keywords"


# ---------------------------------------------------------------------------
# Decode step
# ---------------------------------------------------------------------------

def build_extraction_prompt(text: str) -> str:
    return _EXTRACTION_PROMPT.format(text=text)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json / ``` fence, if any."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", cleaned))
    return cleaned.strip()


def _canonical(topics: set[RubricTopic]) -> list[RubricTopic]:
    return [r.topic for r in RUBRIC if r.topic in topics]


def decode_model_output(raw: str) -> ParsedExtraction | MalformedOutput:
    """Turn a raw completion into facts, or explain why it is unusable."""
    try:
        payload = ExtractionPayload.model_validate_json(strip_code_fences(raw))
    except ValidationError as e:
        return MalformedOutput(reason=f"invalid extraction JSON ({e.error_count()} errors)", raw=raw)

    facts = payload.to_startup_idea()
    covered = set(facts.present_topics())
    for name in payload.topics_covered:
        topic = topic_from_name(name)
        if topic is not None:
            covered.add(topic)

    return ParsedExtraction(facts=facts, covered_topics=_canonical(covered))


# ---------------------------------------------------------------------------
# Fallback
# ---------------------------------------------------------------------------

def keyword_extract(text: str) -> ExtractionResult:
    """Deterministic fallback: every topic whose triggers appear gets the whole text.

    One comprehensive answer routinely matches several topics at once.
    """
    lowered = text.lower()
    values: dict[str, str] = {}
    covered: list[RubricTopic] = []
    for rubric in RUBRIC:
        if any(trigger in lowered for trigger in rubric.triggers):
            values[rubric.attr] = text
            covered.append(rubric.topic)
    return ExtractionResult(facts=StartupIdea(**values), covered_topics=covered, source="keywords")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

async def extract(
    text: str,
    language_model: LanguageModel,
    *,
    conversation: str = "",
    timeout: float | None = None,
) -> ExtractionResult:
    """Extract rubric facts from *text*; degrade to keywords on any failure."""
    try:
        raw = await asyncio.wait_for(
            language_model.complete(build_extraction_prompt(text), conversation),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.warning("Topic extraction timed out after %ss, using keyword fallback", timeout)
        return keyword_extract(text)
    except Exception as e:
        logger.warning("Topic extraction failed, using keyword fallback: %s", e)
        return keyword_extract(text)

    decoded = decode_model_output(raw)
    if isinstance(decoded, MalformedOutput):
        logger.warning("Unusable extraction output (%s), using keyword fallback", decoded.reason)
        logger.debug("Raw extraction output: %s", decoded.raw)
        return keyword_extract(text)

    return ExtractionResult(
        facts=decoded.facts,
        covered_topics=decoded.covered_topics,
        source="model",
    )
