"""
Conversational pitch-deck assistant.

A pydantic-ai agent drives the interview: it asks all rubric questions up
front, evaluates the founder's comprehensive answer, reports refinement
areas and generates the deck on request.  All state changes happen in the
tools, which delegate to ``app.controllers.pitch_deck_controller``; the
agent itself only decides which tool to call.
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass

from pydantic_ai import Agent, RunContext
from pydantic_ai.messages import PartDeltaEvent, PartStartEvent, TextPart, TextPartDelta
from pydantic_ai.models import Model

from app.controllers import pitch_deck_controller
from app.core.conversation_state import ConversationStore
from app.core.deck_payload import dump_deck_payload
from app.core.language_model import LanguageModel
from app.core.retrieval import KnowledgeRetrievalService
from app.schemas.generation import DEFAULT_COMPANY_NAME
from app.schemas.pitch_deck import StartupIdea


@dataclass
class AssistantDeps:
    store: ConversationStore
    session_id: str
    language_model: LanguageModel
    retrieval: KnowledgeRetrievalService


_ASSISTANT_SYSTEM_PROMPT = """\
You are an expert startup advisor specializing in helping founders create \
compelling pitch decks based on proven startup principles.

## Your role

1. Ask ALL pitch deck questions upfront in one comprehensive set \
   (use ``get_all_pitch_deck_questions``).
2. Evaluate the founder's answers against startup principles \
   (use ``evaluate_comprehensive_response`` with their full answer).
3. Present every area needing refinement together, with its suggested \
   questions.
4. Offer a choice: "Would you like to clarify these areas, or should I \
   generate your pitch deck now with areas marked for refinement?"

## Rules

- Never ask the full question set again once the founder has answered it; \
  only ask for clarifications on refinement areas.
- When the founder asks to generate the deck ("generate the pitch deck \
  now" or similar) call ``generate_pitch_deck_from_state`` immediately.  Use \
  ``should_generate_pitch_deck`` when their intent is unclear.
- Use ``generate_pitch_deck`` only when the founder supplies the company \
  name or specific slide content explicitly.
- After a generate tool returns, include its JSON result verbatim in your \
  reply, followed by a short summary of strengths and next steps.
- Use ``search_startup_principles`` to ground advice in the knowledge base.
- Use ``reset_conversation`` when the founder wants to start over.

Always be encouraging but honest, and focus on actionable advice.
"""


def build_assistant_agent(model: Model | str) -> Agent[AssistantDeps, str]:
    agent = Agent(
        model=model,
        deps_type=AssistantDeps,
        output_type=str,
        system_prompt=_ASSISTANT_SYSTEM_PROMPT,
    )

    @agent.tool
    async def reset_conversation(ctx: RunContext[AssistantDeps]) -> str:
        """Reset the conversation state for a new session."""
        result = await pitch_deck_controller.reset_conversation(ctx.deps.store, ctx.deps.session_id)
        return result.model_dump_json(by_alias=True)

    @agent.tool_plain
    def get_all_pitch_deck_questions() -> str:
        """Get all pitch deck questions to ask the user upfront."""
        return pitch_deck_controller.get_all_questions().model_dump_json(by_alias=True)

    @agent.tool
    async def evaluate_comprehensive_response(ctx: RunContext[AssistantDeps], user_response: str) -> str:
        """Evaluate the user's comprehensive response against startup principles.

        Args:
            user_response: The user's comprehensive response to all questions.
        """
        result = await pitch_deck_controller.evaluate_comprehensive_response(
            ctx.deps.store,
            ctx.deps.session_id,
            user_response,
            ctx.deps.language_model,
            ctx.deps.retrieval,
        )
        return result.model_dump_json(by_alias=True)

    @agent.tool
    async def search_startup_principles(ctx: RunContext[AssistantDeps], query: str) -> str:
        """Search the seed fundraising guide for relevant principles and advice.

        Args:
            query: The aspect of fundraising to search for, e.g. 'problem statement', 'market size', 'team'.
        """
        result = await pitch_deck_controller.search_startup_principles(query, ctx.deps.retrieval)
        return result.principles

    @agent.tool_plain
    def should_generate_pitch_deck(user_message: str) -> str:
        """Check if the user wants to generate a pitch deck now.

        Args:
            user_message: The user's message to analyze.
        """
        return pitch_deck_controller.should_generate_pitch_deck(user_message).model_dump_json(by_alias=True)

    @agent.tool
    async def generate_pitch_deck(
        ctx: RunContext[AssistantDeps],
        company_name: str,
        problem: str,
        solution: str,
        target_market: str,
        business_model: str,
        competitive_advantage: str,
        team: str | None = None,
        traction: str | None = None,
        funding_ask: str | None = None,
    ) -> str:
        """Generate a complete pitch deck from explicitly supplied startup details.

        Args:
            company_name: The name of the startup.
            problem: The problem the startup is solving.
            solution: The solution the startup offers.
            target_market: The target market and market size.
            business_model: How the startup makes money.
            competitive_advantage: What makes this startup unique.
            team: Information about the founding team.
            traction: Current traction and milestones.
            funding_ask: Funding amount and use of funds.
        """
        idea = StartupIdea(
            problem=problem or None,
            solution=solution or None,
            market=target_market or None,
            business_model=business_model or None,
            competitive_advantage=competitive_advantage or None,
            team=team or None,
            traction=traction or None,
            funding_ask=funding_ask or None,
        )
        payload = await pitch_deck_controller.generate_pitch_deck(
            ctx.deps.store,
            ctx.deps.session_id,
            company_name or DEFAULT_COMPANY_NAME,
            idea,
            ctx.deps.retrieval,
        )
        return dump_deck_payload(payload)

    @agent.tool
    async def generate_pitch_deck_from_state(ctx: RunContext[AssistantDeps]) -> str:
        """Generate a pitch deck using the information already collected in this conversation."""
        payload = await pitch_deck_controller.generate_pitch_deck_from_state(
            ctx.deps.store,
            ctx.deps.session_id,
            ctx.deps.retrieval,
        )
        return dump_deck_payload(payload)

    return agent


class PitchDeckAssistant:
    """Streams assistant replies; the agent is built on first use."""

    def __init__(self, model: Model | str):
        self.model = model
        self._agent: Agent[AssistantDeps, str] | None = None

    @property
    def agent(self) -> Agent[AssistantDeps, str]:
        if self._agent is None:
            self._agent = build_assistant_agent(self.model)
        return self._agent

    async def stream_reply(self, prompt: str, deps: AssistantDeps) -> AsyncIterator[str]:
        """Yield text deltas from every model response in the run.

        A response may carry a short preamble next to a tool call; the text
        produced after the tool returns (for example a generated deck) is
        streamed as well.
        """
        async with self.agent.iter(prompt, deps=deps) as run:
            async for node in run:
                if not Agent.is_model_request_node(node):
                    continue
                async with node.stream(run.ctx) as request_stream:
                    async for event in request_stream:
                        if isinstance(event, PartStartEvent) and isinstance(event.part, TextPart):
                            if event.part.content:
                                yield event.part.content
                        elif isinstance(event, PartDeltaEvent) and isinstance(event.delta, TextPartDelta):
                            if event.delta.content_delta:
                                yield event.delta.content_delta
