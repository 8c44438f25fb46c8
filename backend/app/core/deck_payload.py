"""
Deck consumer contract.

A generated deck travels as one JSON object with the keys ``pitchDeck``,
``analysis``, ``refinementAreas`` and ``questionsRemaining``, usually
embedded in the assistant's prose.  Consumers locate the first balanced
top-level ``{...}`` span and parse it on its own.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from app.schemas.pitch_deck import DeckPayload

logger = logging.getLogger(__name__)


def dump_deck_payload(payload: DeckPayload) -> str:
    return payload.model_dump_json(by_alias=True)


def find_payload_span(text: str) -> str | None:
    """Return the first balanced top-level ``{...}`` span in *text*.

    Braces inside JSON string literals (including escaped quotes) do not
    count toward the balance.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def parse_deck_payload(text: str) -> DeckPayload | None:
    """Parse the embedded deck payload, or ``None`` when there is none."""
    span = find_payload_span(text)
    if span is None:
        return None
    try:
        return DeckPayload.model_validate_json(span)
    except ValidationError as e:
        logger.warning("Could not parse deck payload from response: %s", e)
        return None
