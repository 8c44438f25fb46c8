"""
Language Model Facility adapter.

The engine only needs ``complete(prompt, conversation) -> str``.  The
production implementation wraps a pydantic-ai ``Agent`` with plain string
output; callers treat any exception, timeout or off-schema text as a
failure and fall back on their own.
"""

from typing import Protocol

from pydantic_ai import Agent
from pydantic_ai.models import Model


class LanguageModel(Protocol):
    async def complete(self, prompt: str, conversation: str = "") -> str:
        ...


_COMPLETION_SYSTEM_PROMPT = """\
You are a meticulous analyst helping founders structure their startup \
description for a pitch deck.  Follow the output format requested in each \
prompt exactly and never invent facts the founder did not state.
"""


class PydanticAILanguageModel:
    """``LanguageModel`` backed by a pydantic-ai agent returning free text."""

    def __init__(self, model: Model | str, system_prompt: str = _COMPLETION_SYSTEM_PROMPT):
        self.model = model
        self.system_prompt = system_prompt
        self._agent: Agent | None = None

    def _get_agent(self) -> Agent:
        # Built on first use so a missing provider key surfaces as a
        # completion failure rather than an import-time error.
        if self._agent is None:
            self._agent = Agent(
                model=self.model,
                output_type=str,
                system_prompt=self.system_prompt,
            )
        return self._agent

    async def complete(self, prompt: str, conversation: str = "") -> str:
        context = prompt
        if conversation:
            context = f"Conversation so far:\n{conversation}\n\n{prompt}"
        result = await self._get_agent().run(context)
        return result.output
