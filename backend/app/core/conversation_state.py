"""
Per-session conversation state.

Each session owns one ``ConversationState``:

- ``EMPTY``          fresh or just reset
- ``FACTS_PARTIAL``  at least one extraction merged
- ``EVALUATED``      an evaluation pass replaced the refinement areas

Rendering only reads state.  ``ConversationStore`` keys states by session
id, serialises turns on the same session with a per-session lock so a
read-modify-write pass is never interleaved with another turn, and evicts
idle sessions.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field

from app.core.rubric import RUBRIC, RubricTopic, TOPIC_COUNT
from app.schemas.pitch_deck import ConversationStateRead, RefinementArea, StartupIdea

logger = logging.getLogger(__name__)


class ConversationPhase(str, Enum):
    EMPTY = "EMPTY"
    FACTS_PARTIAL = "FACTS_PARTIAL"
    EVALUATED = "EVALUATED"


class ConversationState(BaseModel):
    facts: StartupIdea = Field(default_factory=StartupIdea)
    covered_topics: set[RubricTopic] = Field(default_factory=set)
    refinement_areas: list[RefinementArea] = Field(default_factory=list)
    applied_principles: list[str] = Field(default_factory=list)
    answers: list[str] = Field(default_factory=list)
    turns: int = 0
    evaluated: bool = False

    @property
    def phase(self) -> ConversationPhase:
        if self.evaluated:
            return ConversationPhase.EVALUATED
        if self.turns:
            return ConversationPhase.FACTS_PARTIAL
        return ConversationPhase.EMPTY

    @property
    def questions_remaining(self) -> int:
        return TOPIC_COUNT - len(self.covered_topics)

    def ordered_covered_topics(self) -> list[RubricTopic]:
        return [r.topic for r in RUBRIC if r.topic in self.covered_topics]

    def conversation_so_far(self) -> str:
        return "\n".join(f"user: {answer}" for answer in self.answers)

    def merge_extraction(
        self,
        facts: StartupIdea,
        covered: list[RubricTopic],
        answer: str | None = None,
    ) -> None:
        """Fold one extraction in; existing snippets survive empty re-extractions."""
        self.facts = self.facts.merged_with(facts)
        if answer:
            self.answers.append(answer)
        self.covered_topics.update(covered)
        self.turns += 1

    def apply_evaluation(
        self,
        refinement_areas: list[RefinementArea],
        applied_principles: list[str],
    ) -> None:
        """Replace (never patch) the refinement areas from a fresh pass."""
        self.refinement_areas = list(refinement_areas)
        self.applied_principles = list(applied_principles)
        self.evaluated = True

    def reset(self) -> None:
        self.facts = StartupIdea()
        self.covered_topics = set()
        self.refinement_areas = []
        self.applied_principles = []
        self.answers = []
        self.turns = 0
        self.evaluated = False

    def to_read(self, session_id: str) -> ConversationStateRead:
        return ConversationStateRead(
            session_id=session_id,
            phase=self.phase.value,
            facts=self.facts.model_copy(),
            covered_topics=self.ordered_covered_topics(),
            refinement_areas=[a.model_copy(deep=True) for a in self.refinement_areas],
            questions_remaining=self.questions_remaining,
        )


@dataclass
class _Session:
    state: ConversationState = field(default_factory=ConversationState)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    touched: float = 0.0


class ConversationStore:
    """Process-lifetime mapping of session id -> ``ConversationState``.

    Nothing is persisted; a restart starts every session from ``EMPTY``.
    Sessions are kept in least-recently-used order.  Touching a session
    evicts those idle for longer than ``idle_seconds`` and, past
    ``max_sessions``, the least recently used ones.  A session whose turn
    is in progress is never evicted.
    """

    def __init__(
        self,
        max_sessions: int = 1000,
        idle_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_sessions = max_sessions
        self.idle_seconds = idle_seconds
        self._clock = clock
        self._sessions: OrderedDict[str, _Session] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def peek(self, session_id: str) -> ConversationState | None:
        """Return the session's state without creating or touching it."""
        entry = self._sessions.get(session_id)
        return entry.state if entry is not None else None

    def get(self, session_id: str) -> ConversationState:
        """Return the session's state, creating an empty one on first use."""
        return self._touch(session_id).state

    def _touch(self, session_id: str) -> _Session:
        now = self._clock()
        entry = self._sessions.get(session_id)
        if entry is None:
            entry = self._sessions[session_id] = _Session()
        else:
            self._sessions.move_to_end(session_id)
        entry.touched = now
        self._evict(now, keep=session_id)
        return entry

    def _evict(self, now: float, keep: str) -> None:
        for session_id, entry in list(self._sessions.items()):
            over_capacity = len(self._sessions) > self.max_sessions
            idle = now - entry.touched > self.idle_seconds
            if not (over_capacity or idle):
                # Oldest first: the rest were touched more recently
                break
            if session_id == keep or entry.lock.locked():
                continue
            del self._sessions[session_id]
            logger.debug("Evicted conversation state for session %s", session_id)

    @asynccontextmanager
    async def turn(self, session_id: str) -> AsyncIterator[ConversationState]:
        """Hold the session exclusively for one read-modify-write pass."""
        entry = self._touch(session_id)
        async with entry.lock:
            yield entry.state

    async def reset(self, session_id: str) -> ConversationState:
        async with self.turn(session_id) as state:
            state.reset()
            logger.info("Conversation state reset for session %s", session_id)
            return state
