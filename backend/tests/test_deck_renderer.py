import datetime

from app.core.deck_renderer import (
    REFINEMENT_MARKER_PREFIX,
    SLIDE_COUNT,
    refinement_key_points,
    refinement_marker,
    render,
)
from app.core.refinement_evaluator import find_refinement_areas
from app.core.rubric import RUBRIC_BY_TOPIC, RubricTopic
from app.core.topic_extractor import keyword_extract
from app.schemas.pitch_deck import StartupIdea
from fakes import RESTAURANT_PITCH

FIXED_NOW = datetime.datetime(2024, 5, 1, 12, 0, tzinfo=datetime.timezone.utc)

EXPECTED_TITLES = [
    "Company Name",
    "The Problem",
    "The Solution",
    "Market Opportunity",
    "Business Model",
    "Competitive Advantage",
    "Go-to-Market Strategy",
    "Team",
    "Traction",
    "Financial Projections",
    "Funding Ask",
]


def _slide(deck, number):
    return next(s for s in deck.slides if s.slide_number == number)


def _restaurant_deck(**kwargs):
    facts = keyword_extract(RESTAURANT_PITCH).facts
    return render("FoodBridge", facts, find_refinement_areas(facts), **kwargs)


class TestOutline:

    def test_eleven_slides_with_fixed_titles(self):
        deck = _restaurant_deck()

        assert len(deck.slides) == SLIDE_COUNT
        assert [s.slide_number for s in deck.slides] == list(range(1, 12))
        assert [s.title for s in deck.slides] == EXPECTED_TITLES

    def test_empty_facts_still_render_every_slide(self):
        deck = render("Acme", StartupIdea(), find_refinement_areas(StartupIdea()))

        assert [s.title for s in deck.slides] == EXPECTED_TITLES
        for number in (2, 3, 4, 5, 6, 8, 9, 11):
            assert _slide(deck, number).content.startswith(REFINEMENT_MARKER_PREFIX)

    def test_static_slides(self):
        deck = _restaurant_deck()

        assert _slide(deck, 7).content == "How we'll reach and acquire customers"
        assert _slide(deck, 7).key_points == ["Customer acquisition channels", "Partnerships", "Marketing strategy"]
        assert _slide(deck, 10).content == "3-5 year revenue and growth projections"
        assert _slide(deck, 10).key_points == ["Revenue growth", "Key metrics", "Path to profitability"]

    def test_static_slides_are_not_shared_between_decks(self):
        first = _restaurant_deck()
        second = _restaurant_deck()

        assert _slide(first, 7).key_points is not _slide(second, 7).key_points


class TestTopicSlides:

    def test_present_facts_render_verbatim(self):
        deck = _restaurant_deck()

        for number in (2, 3, 4, 5):
            assert _slide(deck, number).content == RESTAURANT_PITCH

    def test_missing_team_shows_marker_and_refinement_points(self):
        deck = _restaurant_deck()

        team = _slide(deck, 8)
        assert team.content == refinement_marker(RubricTopic.team)
        assert team.content == "NEEDS-REFINEMENT: Team requires more detail"
        assert team.key_points == refinement_key_points(RubricTopic.team)

    def test_sufficient_fact_uses_strong_points(self):
        deck = _restaurant_deck()

        market = _slide(deck, 4)
        assert market.key_points == list(RUBRIC_BY_TOPIC[RubricTopic.market].strong_points)

    def test_short_flagged_fact_keeps_text_but_shows_refinement_points(self):
        facts = StartupIdea(team="Two founders")

        deck = render("Acme", facts, find_refinement_areas(facts))

        team = _slide(deck, 8)
        assert team.content == "Two founders"
        assert team.key_points == [
            "Area needs refinement",
            "Consider the suggested questions",
            "Highlight relevant experience",
        ]

    def test_no_refinement_areas_means_no_refinement_points(self):
        facts = StartupIdea(team="Two founders")

        deck = render("Acme", facts, [])

        assert _slide(deck, 8).key_points == list(RUBRIC_BY_TOPIC[RubricTopic.team].strong_points)


class TestCover:

    def test_cover_names_company_and_problem(self):
        deck = render("Acme", StartupIdea(problem="Clinics drown in paperwork"), [])

        assert deck.company_name == "Acme"
        assert _slide(deck, 1).content == "Acme\nA revolutionary solution to Clinics drown in paperwork"
        assert _slide(deck, 1).key_points is None

    def test_cover_without_problem_uses_marker(self):
        deck = render("Acme", StartupIdea(), [])

        assert _slide(deck, 1).content.endswith(refinement_marker(RubricTopic.problem))


def test_render_is_deterministic_apart_from_timestamp():
    first = _restaurant_deck()
    second = _restaurant_deck()

    assert first.slides == second.slides
    assert first.company_name == second.company_name


def test_render_uses_given_timestamp():
    deck = _restaurant_deck(now=FIXED_NOW)

    assert deck.created_at == FIXED_NOW


def test_default_timestamp_is_utc():
    deck = _restaurant_deck()

    assert deck.created_at.tzinfo is not None
    assert deck.created_at.utcoffset() == datetime.timedelta(0)
