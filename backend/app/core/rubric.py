"""
Static rubric of the eight pitch-deck topics.

Every consumer (extractor, evaluator, renderer, analyzer, question list)
reads the same table, so thresholds, trigger keywords, questions and slide
copy live here and nowhere else.  The table is built from tuples of frozen
dataclasses and is never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RubricTopic(str, Enum):
    problem = "problem"
    solution = "solution"
    market = "market"
    businessModel = "businessModel"
    competitiveAdvantage = "competitiveAdvantage"
    team = "team"
    traction = "traction"
    fundingAsk = "fundingAsk"


class Priority(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


@dataclass(frozen=True)
class TopicRubric:
    topic: RubricTopic
    attr: str
    display_name: str
    min_length: int
    priority: Priority
    guidance_query: str
    question: str
    suggested_questions: tuple[str, str, str]
    triggers: tuple[str, ...]
    slide_number: int
    slide_title: str
    strong_points: tuple[str, str, str]
    refinement_hint: str

    def is_sufficient(self, snippet: str | None) -> bool:
        """A snippet passes when present and at least ``min_length`` long."""
        return bool(snippet) and len(snippet) >= self.min_length


RUBRIC: tuple[TopicRubric, ...] = (
    TopicRubric(
        topic=RubricTopic.problem,
        attr="problem",
        display_name="Problem Statement",
        min_length=50,
        priority=Priority.high,
        guidance_query="problem statement pitch deck clear urgent",
        question="What specific problem are you solving? Who experiences this pain point?",
        suggested_questions=(
            "What specific pain point are you addressing?",
            "How do people currently solve this problem?",
            "What makes this problem urgent and important?",
        ),
        triggers=(
            "problem", "solve", "pain", "waste", "hunger", "food", "issue",
            "challenge", "insecurity",
        ),
        slide_number=2,
        slide_title="The Problem",
        strong_points=(
            "Clear articulation of the pain point",
            "Market size and urgency",
            "Why existing solutions fail",
        ),
        refinement_hint="Make problem more specific",
    ),
    TopicRubric(
        topic=RubricTopic.solution,
        attr="solution",
        display_name="Solution",
        min_length=30,
        priority=Priority.high,
        guidance_query="solution simple clear pitch deck",
        question="How does your solution work? What makes it unique?",
        suggested_questions=(
            "How does your solution work in simple terms?",
            "What are the key features of your product?",
            "How does it solve the problem better than existing solutions?",
        ),
        triggers=(
            "solution", "platform", "app", "tool", "connect", "service",
            "system", "product", "win win",
        ),
        slide_number=3,
        slide_title="The Solution",
        strong_points=(
            "Simple, clear explanation",
            "Key features and benefits",
            "How it solves the problem",
        ),
        refinement_hint="Make solution more concrete",
    ),
    TopicRubric(
        topic=RubricTopic.market,
        attr="market",
        display_name="Market Opportunity",
        min_length=40,
        priority=Priority.high,
        guidance_query="market size opportunity TAM SAM",
        question="What's your target market? How big is this opportunity? (Include numbers if possible)",
        suggested_questions=(
            "Who are your target customers?",
            "What's the total addressable market size?",
            "How will you reach your customers?",
        ),
        triggers=(
            "market", "customer", "user", "billion", "million", "people",
            "restaurant", "business", "industry", "demographic", "audience",
            "big cities",
        ),
        slide_number=4,
        slide_title="Market Opportunity",
        strong_points=(
            "Total Addressable Market (TAM)",
            "Serviceable Addressable Market (SAM)",
            "Serviceable Obtainable Market (SOM)",
        ),
        refinement_hint="Include market size numbers",
    ),
    TopicRubric(
        topic=RubricTopic.businessModel,
        attr="business_model",
        display_name="Business Model",
        min_length=30,
        priority=Priority.medium,
        guidance_query="business model revenue monetization",
        question="How do you plan to make money? What's your revenue model?",
        suggested_questions=(
            "How do you generate revenue?",
            "What's your pricing strategy?",
            "What are your customer acquisition costs?",
        ),
        triggers=(
            "revenue", "subscription", "freemium", "saas", "money",
            "make money", "pricing", "fee", "commission", "charge",
            "advertise",
        ),
        slide_number=5,
        slide_title="Business Model",
        strong_points=(
            "Revenue streams",
            "Pricing strategy",
            "Customer acquisition cost",
        ),
        refinement_hint="Clarify revenue streams",
    ),
    TopicRubric(
        topic=RubricTopic.competitiveAdvantage,
        attr="competitive_advantage",
        display_name="Competitive Advantage",
        min_length=30,
        priority=Priority.medium,
        guidance_query="competitive advantage moat barrier",
        question="What's your competitive advantage? Why can't others easily copy this?",
        suggested_questions=(
            "What makes you unique?",
            "What barriers to entry do you have?",
            "How do you protect your competitive position?",
        ),
        # "ties" alone would fire inside words like "charities"
        triggers=(
            "unique", "advantage", "different", "patent", "special",
            "exclusive", "proprietary", "barrier", "owner", "nyc",
            "community", "restaurant owner",
        ),
        slide_number=6,
        slide_title="Competitive Advantage",
        strong_points=(
            "Unique technology or approach",
            "Network effects",
            "Barriers to entry",
        ),
        refinement_hint="Identify unique differentiators",
    ),
    TopicRubric(
        topic=RubricTopic.team,
        attr="team",
        display_name="Team",
        min_length=20,
        priority=Priority.medium,
        guidance_query="team founder experience background",
        question="Tell me about your team. What relevant experience do you have?",
        suggested_questions=(
            "What relevant experience do you have?",
            "Why is your team uniquely qualified?",
            "What key roles do you need to fill?",
        ),
        triggers=(
            "team", "founder", "experience", "background", "expertise",
            "skill", "cto", "myself",
        ),
        slide_number=8,
        slide_title="Team",
        strong_points=(
            "Founder backgrounds",
            "Relevant experience",
            "Why this team can execute",
        ),
        refinement_hint="Highlight relevant experience",
    ),
    TopicRubric(
        topic=RubricTopic.traction,
        attr="traction",
        display_name="Traction",
        min_length=20,
        priority=Priority.low,
        guidance_query="traction metrics growth validation",
        question="What traction do you have so far? Users, revenue, partnerships?",
        suggested_questions=(
            "What metrics demonstrate product-market fit?",
            "What's your growth rate?",
            "What partnerships or customers do you have?",
        ),
        triggers=(
            "traction", "users", "growth", "revenue", "customers",
            "partnership", "milestone", "metric", "1000", "$10,000",
            "$10000",
        ),
        slide_number=9,
        slide_title="Traction",
        strong_points=(
            "User growth metrics",
            "Revenue milestones",
            "Customer testimonials",
        ),
        refinement_hint="Include specific metrics",
    ),
    TopicRubric(
        topic=RubricTopic.fundingAsk,
        attr="funding_ask",
        display_name="Funding Ask",
        min_length=20,
        priority=Priority.low,
        guidance_query="funding ask amount use of funds",
        question="How much funding are you seeking and what will you use it for?",
        suggested_questions=(
            "How much funding are you seeking?",
            "What will you use the funds for?",
            "What's your valuation and terms?",
        ),
        # market size figures ("1 million restaurants") are not an ask
        triggers=(
            "funding", "raise", "investment", "dollar", "money", "capital",
            "seed", "series", "expand", "marketing",
        ),
        slide_number=11,
        slide_title="Funding Ask",
        strong_points=(
            "Amount being raised",
            "Use of funds",
            "Valuation and terms",
        ),
        refinement_hint="Specify amount and use of funds",
    ),
)

RUBRIC_BY_TOPIC: dict[RubricTopic, TopicRubric] = {r.topic: r for r in RUBRIC}

RUBRIC_BY_DISPLAY_NAME: dict[str, TopicRubric] = {r.display_name: r for r in RUBRIC}

TOPIC_COUNT = len(RUBRIC)


def topic_from_name(name: str) -> RubricTopic | None:
    """Resolve a topic id (``"businessModel"``) or display name, else ``None``."""
    try:
        return RubricTopic(name)
    except ValueError:
        rubric = RUBRIC_BY_DISPLAY_NAME.get(name)
        return rubric.topic if rubric else None
