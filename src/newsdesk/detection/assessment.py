"""Four-factor urgency assessment of gathered market research.

Combines a weighted factor score (breaking news, price volatility, economic
events, sentiment) with the event-level research score. The higher of the two
is the urgency score the decision engine acts on.
"""

import re

from newsdesk.core.constants import DEFAULT_URGENCY_THRESHOLD
from newsdesk.core.exceptions import EventDetectionError
from newsdesk.core.logging import get_logger
from newsdesk.detection.models import UrgencyAssessment, UrgencyFactors
from newsdesk.detection.urgency_scorer import UrgencyScorer
from newsdesk.research.models import MarketResearch

logger = get_logger(__name__)

BREAKING_KEYWORDS = [
    "breaking",
    "just announced",
    "unexpected",
    "emergency",
    "crisis",
    "crash",
    "surge",
    "record",
]

HIGH_IMPACT_ECONOMIC_EVENTS = [
    "central bank",
    "interest rate",
    "fed decision",
    "ecb meeting",
    "employment report",
    "gdp",
    "inflation report",
    "nfp",
    "fomc",
    "monetary policy",
    "rate hike",
    "rate cut",
]

POSITIVE_KEYWORDS = ["surge", "rally", "gain", "rise", "strengthen", "bullish", "optimism"]
NEGATIVE_KEYWORDS = ["crash", "plunge", "fall", "drop", "weaken", "bearish", "concern", "crisis"]

FACTOR_WEIGHTS = {
    "breaking_news": 0.35,
    "price_volatility": 0.30,
    "economic_events": 0.25,
    "market_sentiment": 0.10,
}

# (minimum score, recommendation), checked top down
RECOMMENDATIONS = [
    (9, "URGENT: Create and publish breaking news video immediately"),
    (7, "HIGH PRIORITY: Create time-sensitive content within 2 hours"),
    (5, "MODERATE: Consider creating relevant market update video"),
    (3, "LOW PRIORITY: Include in next scheduled educational content"),
]
DEFAULT_RECOMMENDATION = "NORMAL: Proceed with regular scheduled content"

_percentage = re.compile(r"(\d+\.?\d*)%")


def _count_present(text: str, keywords: list[str]) -> int:
    lower = text.lower()
    return sum(1 for kw in keywords if kw in lower)


def analyze_breaking_news(research: MarketResearch) -> float:
    """+2 per urgent event (max 6), +0.5 per breaking keyword present (max 2)."""
    events_score = min(len(research.summary.urgent_events) * 2, 6)
    keyword_hits = _count_present(research.text_for("breaking_news"), BREAKING_KEYWORDS)
    return min(events_score + min(keyword_hits * 0.5, 2), 10)


def analyze_price_volatility(research: MarketResearch) -> float:
    """Score the largest percentage move quoted in forex and commodities text."""
    text = research.text_for("forex", "commodities")
    moves = [abs(float(m)) for m in _percentage.findall(text)]
    max_move = max(moves, default=0.0)

    if max_move > 5:
        return 10
    if max_move > 3:
        return 7
    if max_move > 2:
        return 5
    if max_move > 1:
        return 3
    if max_move > 0.5:
        return 1
    return 0


def analyze_economic_events(research: MarketResearch) -> float:
    hits = _count_present(research.text_for("economic_indicators"), HIGH_IMPACT_ECONOMIC_EVENTS)
    return min(hits, 10)


def analyze_market_sentiment(research: MarketResearch) -> float:
    """Strong sentiment in either direction raises urgency."""
    text = research.text_for("forex", "commodities", "breaking_news", "economic_indicators")
    positive = _count_present(text, POSITIVE_KEYWORDS)
    negative = _count_present(text, NEGATIVE_KEYWORDS)
    return min(abs(positive - negative) * 1.5, 10)


def weighted_factor_score(factors: UrgencyFactors) -> float:
    score = sum(getattr(factors, name) * weight for name, weight in FACTOR_WEIGHTS.items())
    return min(max(score, 0.0), 10.0)


def get_recommendation(urgency_score: float) -> str:
    for minimum, text in RECOMMENDATIONS:
        if urgency_score >= minimum:
            return text
    return DEFAULT_RECOMMENDATION


def assess_urgency(
    research: MarketResearch | None,
    threshold: float = DEFAULT_URGENCY_THRESHOLD,
    scorer: UrgencyScorer | None = None,
) -> UrgencyAssessment:
    """Assess how urgent the gathered research is.

    Args:
        research: Output of the research stage
        threshold: Score at or above which the content is urgent
        scorer: Event-level scorer; one using ``threshold`` is created if omitted

    Raises:
        EventDetectionError: If research is missing (not retryable)
    """
    if research is None:
        raise EventDetectionError(
            "Market research is required for event detection", retryable=False
        )

    scorer = scorer or UrgencyScorer(threshold=threshold)

    factors = UrgencyFactors(
        breaking_news=analyze_breaking_news(research),
        price_volatility=analyze_price_volatility(research),
        economic_events=analyze_economic_events(research),
        market_sentiment=analyze_market_sentiment(research),
    )
    weighted = weighted_factor_score(factors)
    research_score = scorer.score_research(research.to_bundle(), research.market_context)

    urgency_score = min(max(weighted, float(research_score.max_score)), 10.0)
    is_urgent = urgency_score >= threshold

    assessment = UrgencyAssessment(
        urgency_score=urgency_score,
        is_urgent=is_urgent,
        threshold=threshold,
        factors=factors,
        research_score=research_score,
        recommendation=get_recommendation(urgency_score),
    )

    logger.info(
        "Urgency assessed",
        urgency_score=f"{urgency_score:.2f}",
        weighted=f"{weighted:.2f}",
        max_event_score=research_score.max_score,
        is_urgent=is_urgent,
        recommendation=assessment.recommendation,
    )
    return assessment
