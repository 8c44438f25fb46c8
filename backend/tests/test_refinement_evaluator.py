"""Unit tests for the rubric sufficiency gate and guidance lookups."""

import asyncio

import pytest

from app.core.refinement_evaluator import NOT_PROVIDED, evaluate, find_refinement_areas, search_guidance
from app.core.rubric import RUBRIC, RUBRIC_BY_TOPIC, Priority, RubricTopic
from app.core.topic_extractor import keyword_extract
from app.schemas.pitch_deck import StartupIdea
from fakes import RESTAURANT_PITCH, FakeRetrieval

ALL_DISPLAY_NAMES = [r.display_name for r in RUBRIC]


def _run(facts, retrieval=None, **kwargs):
    return asyncio.run(evaluate(facts, retrieval or FakeRetrieval(), **kwargs))


class TestSufficiencyGate:

    def test_empty_facts_flag_every_topic_in_canonical_order(self):
        result = _run(StartupIdea())

        assert [a.topic for a in result.refinement_areas] == ALL_DISPLAY_NAMES
        assert all(a.current_understanding == NOT_PROVIDED for a in result.refinement_areas)

    @pytest.mark.parametrize("rubric", RUBRIC, ids=lambda r: r.topic.value)
    def test_threshold_boundary(self, rubric):
        just_short = StartupIdea(**{rubric.attr: "x" * (rubric.min_length - 1)})
        exact = StartupIdea(**{rubric.attr: "x" * rubric.min_length})

        short_topics = {a.topic for a in find_refinement_areas(just_short)}
        exact_topics = {a.topic for a in find_refinement_areas(exact)}

        assert rubric.display_name in short_topics
        assert rubric.display_name not in exact_topics

    def test_short_fact_is_kept_as_current_understanding(self):
        result = _run(StartupIdea(team="Two founders"))

        team_area = next(a for a in result.refinement_areas if a.topic == "Team")
        assert team_area.current_understanding == "Two founders"
        assert team_area.priority == Priority.medium
        assert team_area.suggested_questions == list(RUBRIC_BY_TOPIC[RubricTopic.team].suggested_questions)

    def test_restaurant_scenario_flags_missing_topics(self):
        facts = keyword_extract(RESTAURANT_PITCH).facts

        result = _run(facts)

        assert [a.topic for a in result.refinement_areas] == [
            "Competitive Advantage",
            "Team",
            "Traction",
            "Funding Ask",
        ]
        assert all(a.current_understanding == NOT_PROVIDED for a in result.refinement_areas)

    def test_gate_matches_evaluate(self):
        facts = StartupIdea(problem="short", market="m" * 45, traction="10k MAU growing 20% MoM")

        assert _run(facts).refinement_areas == find_refinement_areas(facts)


class TestAppliedPrinciples:

    def test_one_principle_per_topic_truncated_to_100_chars(self):
        long_guidance = "a" * 250
        retrieval = FakeRetrieval(guidance={r.guidance_query: long_guidance for r in RUBRIC})

        result = _run(StartupIdea(), retrieval)

        assert len(result.applied_principles) == len(RUBRIC)
        assert result.applied_principles[0] == "Problem Statement: " + "a" * 100 + "..."
        assert [p.split(":")[0] for p in result.applied_principles] == ALL_DISPLAY_NAMES

    def test_each_topic_queries_its_guidance(self):
        retrieval = FakeRetrieval()

        _run(StartupIdea(), retrieval)

        assert sorted(retrieval.queries) == sorted(r.guidance_query for r in RUBRIC)

    def test_market_retrieval_failure_is_isolated(self):
        market_query = RUBRIC_BY_TOPIC[RubricTopic.market].guidance_query
        facts = keyword_extract(RESTAURANT_PITCH).facts

        healthy = _run(facts, FakeRetrieval())
        degraded = _run(facts, FakeRetrieval(failing_queries=(market_query,)))

        assert degraded.refinement_areas == healthy.refinement_areas
        assert degraded.applied_principles[2] == "Market Opportunity: ..."
        assert degraded.applied_principles[:2] == healthy.applied_principles[:2]
        assert degraded.applied_principles[3:] == healthy.applied_principles[3:]

    def test_slow_retrieval_times_out_per_topic(self):
        class SlowRetrieval(FakeRetrieval):
            async def search(self, query):
                await asyncio.sleep(1.0)
                return "too late"

        result = _run(StartupIdea(), SlowRetrieval(), timeout=0.01)

        assert len(result.refinement_areas) == len(RUBRIC)
        assert all(p.endswith(": ...") for p in result.applied_principles)


def test_evaluation_is_idempotent():
    facts = keyword_extract(RESTAURANT_PITCH).facts
    retrieval = FakeRetrieval()

    first = _run(facts, retrieval)
    second = _run(facts, retrieval)

    assert first.refinement_areas == second.refinement_areas
    assert first.applied_principles == second.applied_principles


class TestSearchGuidance:

    def test_returns_retrieved_text(self):
        retrieval = FakeRetrieval(guidance={"team": "Hire slowly."})

        assert asyncio.run(search_guidance(retrieval, "team")) == "Hire slowly."

    def test_failure_yields_empty_text(self):
        retrieval = FakeRetrieval(failing_queries=("team",))

        assert asyncio.run(search_guidance(retrieval, "team")) == ""

    def test_timeout_yields_empty_text(self):
        class SlowRetrieval(FakeRetrieval):
            async def search(self, query):
                await asyncio.sleep(1.0)
                return "too late"

        assert asyncio.run(search_guidance(SlowRetrieval(), "team", timeout=0.01)) == ""
