"""pydantic-ai wiring, exercised offline with TestModel and FunctionModel."""

import asyncio

from pydantic_ai.messages import ModelMessage, ModelRequest, ToolReturnPart
from pydantic_ai.models.function import AgentInfo, DeltaToolCall, FunctionModel
from pydantic_ai.models.test import TestModel

from app.core.assistant_agent import AssistantDeps, PitchDeckAssistant
from app.core.conversation_state import ConversationPhase, ConversationStore
from app.core.deck_payload import parse_deck_payload
from app.core.language_model import PydanticAILanguageModel
from app.core.rubric import RubricTopic
from app.schemas.pitch_deck import StartupIdea
from fakes import FakeLanguageModel, FakeRetrieval


def _deps(store):
    return AssistantDeps(
        store=store,
        session_id="s1",
        language_model=FakeLanguageModel(error=ConnectionError("offline")),
        retrieval=FakeRetrieval(),
    )


def test_language_model_returns_agent_text():
    model = PydanticAILanguageModel(TestModel(custom_output_text='{"problem": null}'))

    output = asyncio.run(model.complete("Extract topics", conversation="user: hi"))

    assert output == '{"problem": null}'


def test_assistant_streams_text():
    assistant = PitchDeckAssistant(TestModel(call_tools=[], custom_output_text="Tell me about your startup."))

    async def collect():
        return [chunk async for chunk in assistant.stream_reply("Hi", _deps(ConversationStore()))]

    chunks = asyncio.run(collect())

    assert "".join(chunks) == "Tell me about your startup."


def test_assistant_tools_act_on_the_session():
    store = ConversationStore()
    store.get("s1").merge_extraction(StartupIdea(team="Solo founder"), [RubricTopic.team])
    assistant = PitchDeckAssistant(TestModel(call_tools=["reset_conversation"], custom_output_text="Done."))

    result = asyncio.run(assistant.agent.run("Start over", deps=_deps(store)))

    assert result.output == "Done."
    assert store.get("s1").phase is ConversationPhase.EMPTY



def _tool_return(messages):
    last = messages[-1]
    if isinstance(last, ModelRequest):
        return next((p for p in last.parts if isinstance(p, ToolReturnPart)), None)
    return None


def _preamble_then_tool(preamble, tool_name):
    """Stream a preamble plus a tool call, then echo the tool's result."""

    async def stream(messages: list[ModelMessage], info: AgentInfo):
        returned = _tool_return(messages)
        if returned is None:
            yield preamble
            yield {0: DeltaToolCall(name=tool_name, json_args="{}")}
        else:
            yield "Here you go:\n"
            yield str(returned.content)

    return FunctionModel(stream_function=stream)


def _stream(assistant, prompt, deps):
    async def collect():
        return [chunk async for chunk in assistant.stream_reply(prompt, deps)]

    return asyncio.run(collect())


def test_deck_after_preamble_reaches_the_stream():
    store = ConversationStore()
    store.get("s1").merge_extraction(StartupIdea(problem="Clinics drown in paperwork"), [RubricTopic.problem])
    assistant = PitchDeckAssistant(
        _preamble_then_tool("Generating your pitch deck now. ", "generate_pitch_deck_from_state")
    )

    chunks = _stream(assistant, "Generate the pitch deck now", _deps(store))
    text = "".join(chunks)

    assert text.startswith("Generating your pitch deck now. ")
    payload = parse_deck_payload(text)
    assert payload is not None
    assert len(payload.pitch_deck.slides) == 11
    assert payload.pitch_deck.slides[1].content == "Clinics drown in paperwork"


def test_reply_after_tool_call_is_streamed():
    store = ConversationStore()
    store.get("s1").merge_extraction(StartupIdea(team="Solo founder"), [RubricTopic.team])
    assistant = PitchDeckAssistant(_preamble_then_tool("Sure, resetting now. ", "reset_conversation"))

    text = "".join(_stream(assistant, "Start over", _deps(store)))

    assert text.startswith("Sure, resetting now. Here you go:\n")
    assert "questionsRemaining" in text
    assert store.get("s1").phase is ConversationPhase.EMPTY
