"""Hybrid content decision: breaking news override or scheduled education.

A manual override always wins. Otherwise urgent research produces a breaking
news topic built around its dominant urgency factor, and everything else
follows the educational rotation and the weekly publish slots.
"""

import re
from datetime import datetime

from newsdesk.core.constants import (
    BREAKING_NEWS_DURATION_SECONDS,
    DEFAULT_PERSONA,
    EDUCATIONAL_DURATION_SECONDS,
    MAX_URGENCY_SCORE,
    UNSCHEDULED_TIME,
)
from newsdesk.core.exceptions import MissingResearchError
from newsdesk.core.logging import get_logger
from newsdesk.detection.models import UrgencyAssessment
from newsdesk.research.models import MarketResearch
from newsdesk.scheduling.calendar import ScheduleCatalog, generate_hashtags, generate_tags
from newsdesk.scheduling.models import (
    ContentType,
    Decision,
    ManualOverride,
    Topic,
    TopicMetadata,
)

logger = get_logger(__name__)

MANUAL_OVERRIDE_REASONING = "manual_override"
BREAKING_NEWS_CATEGORY = "breaking_news"
MANUAL_EDUCATIONAL_CATEGORY = "education"

# Dominant factor -> (title, angle, fallback focus)
BREAKING_TEMPLATES = {
    "forex": (
        "عاجل: تحركات حادة في سوق العملات",
        "Major currency movements and their impact on traders",
        "Major forex pairs analysis",
    ),
    "economic": (
        "عاجل: قرارات اقتصادية مهمة",
        "Critical economic decisions affecting markets",
        "Economic indicators update",
    ),
    "breaking": (
        "عاجل: آخر تطورات الأسواق المالية",
        "Breaking financial news and market reactions",
        "Latest market developments",
    ),
}
DEFAULT_BREAKING_TEMPLATE = (
    "تحديث عاجل: تحليل السوق",
    "Urgent market analysis and trading opportunities",
    "General market update based on recent developments",
)

_forex_mention = re.compile(r"eur|usd|gbp|jpy|chf|aud|cad|forex|currency|exchange", re.IGNORECASE)
_currency_pair = re.compile(r"\b[A-Z]{3}/[A-Z]{3}\b")
_sentence_split = re.compile(r"[.!?]+")

MIN_ECONOMIC_SENTENCE_LENGTH = 20


# =============================================================================
# Focus extraction
# =============================================================================


def extract_forex_focus(research: MarketResearch) -> str:
    points = [p for p in research.summary.key_points if _forex_mention.search(p)]
    if not points:
        pairs: list[str] = []
        for pair in _currency_pair.findall(research.text_for("forex")):
            if pair not in pairs:
                pairs.append(pair)
        points = pairs
    return "; ".join(points[:3])


def extract_economic_focus(research: MarketResearch) -> str:
    text = research.text_for("economic_indicators")
    sentences = [
        s.strip()
        for s in _sentence_split.split(text)
        if len(s.strip()) > MIN_ECONOMIC_SENTENCE_LENGTH
    ]
    return ". ".join(sentences[:2])


def extract_breaking_focus(research: MarketResearch, urgency: UrgencyAssessment) -> str:
    events = list(research.summary.urgent_events)
    if not events and urgency.research_score is not None:
        events = [e.text for e in urgency.research_score.scored_events]
    return "; ".join(events[:2])


def dominant_factor(urgency: UrgencyAssessment) -> str:
    """Highest scoring factor; the first one listed wins a tie."""
    factors = urgency.factors
    scores = {
        "forex": factors.price_volatility,
        "economic": factors.economic_events,
        "breaking": factors.breaking_news,
        "sentiment": factors.market_sentiment,
    }
    return max(scores, key=lambda name: scores[name])


def select_breaking_news_topic(research: MarketResearch, urgency: UrgencyAssessment) -> Topic:
    factor = dominant_factor(urgency)
    title, angle, fallback = BREAKING_TEMPLATES.get(factor, DEFAULT_BREAKING_TEMPLATE)

    try:
        if factor == "forex":
            focus = extract_forex_focus(research)
        elif factor == "economic":
            focus = extract_economic_focus(research)
        elif factor == "breaking":
            focus = extract_breaking_focus(research, urgency)
        else:
            focus = ""
    except Exception:
        logger.warning("Focus extraction failed, using fallback", factor=factor, exc_info=True)
        focus = ""

    return Topic(
        title=title,
        category=BREAKING_NEWS_CATEGORY,
        angle=angle,
        focus=focus or fallback,
        urgent_events=list(research.summary.urgent_events),
    )


def select_scheduled_topic(catalog: ScheduleCatalog, now: datetime) -> Topic:
    topic = catalog.topic_for(now)
    slot = catalog.slot_for(now)
    return topic.model_copy(
        update={
            "persona": slot.persona if slot else DEFAULT_PERSONA,
            "scheduled_time": slot.time if slot else UNSCHEDULED_TIME,
        }
    )


def build_metadata(topic: Topic, content_type: ContentType) -> TopicMetadata:
    breaking = content_type == ContentType.breaking_news
    return TopicMetadata(
        category=topic.category,
        tags=generate_tags(topic, content_type),
        hashtags=generate_hashtags(content_type),
        duration=BREAKING_NEWS_DURATION_SECONDS if breaking else EDUCATIONAL_DURATION_SECONDS,
        priority="high" if breaking else "normal",
        thumbnail_style="urgent" if breaking else "educational",
    )


# =============================================================================
# Decision
# =============================================================================


def decide(
    urgency: UrgencyAssessment | None,
    research: MarketResearch | None,
    catalog: ScheduleCatalog,
    manual_override: ManualOverride | None = None,
    now: datetime | None = None,
) -> Decision:
    """Decide what this run produces.

    Args:
        urgency: Output of the event-detection stage
        research: Output of the research stage
        catalog: Educational rotation and weekly publish slots
        manual_override: Operator topic; bypasses everything else
        now: Decision time, defaults to the current time in the catalog timezone

    Raises:
        MissingResearchError: If urgency or research is missing and no
            manual override was given
    """
    now = catalog.localize(now)

    if manual_override is not None:
        content_type = manual_override.content_type
        category = (
            BREAKING_NEWS_CATEGORY
            if content_type == ContentType.breaking_news
            else MANUAL_EDUCATIONAL_CATEGORY
        )
        topic = Topic(title=manual_override.topic, category=category)
        decision = Decision(
            topic=topic,
            content_type=content_type,
            urgency_score=MAX_URGENCY_SCORE,
            is_urgent=True,
            reasoning=MANUAL_OVERRIDE_REASONING,
            metadata=build_metadata(topic, content_type),
        )
        logger.info(
            "Topic decided by manual override",
            topic=topic.title,
            content_type=content_type.value,
        )
        return decision

    if urgency is None:
        raise MissingResearchError("Urgency assessment is required for the topic decision")
    if research is None:
        raise MissingResearchError("Market research is required for the topic decision")

    if urgency.is_urgent:
        content_type = ContentType.breaking_news
        topic = select_breaking_news_topic(research, urgency)
        reasoning = (
            f"Urgency score {urgency.urgency_score:.2f} exceeds threshold. "
            "Creating time-sensitive content."
        )
    else:
        content_type = ContentType.educational
        topic = select_scheduled_topic(catalog, now)
        reasoning = (
            f"Regular scheduled content. Urgency score {urgency.urgency_score:.2f} below threshold."
        )

    decision = Decision(
        topic=topic,
        content_type=content_type,
        urgency_score=urgency.urgency_score,
        is_urgent=urgency.is_urgent,
        reasoning=reasoning,
        metadata=build_metadata(topic, content_type),
    )

    logger.info(
        "Topic decided",
        content_type=content_type.value,
        topic=topic.title,
        urgency_score=f"{urgency.urgency_score:.2f}",
    )
    return decision


class DecisionEngine:
    """Binds a schedule catalog to ``decide``."""

    def __init__(self, catalog: ScheduleCatalog | None = None) -> None:
        self.catalog = catalog or ScheduleCatalog()

    def decide(
        self,
        urgency: UrgencyAssessment | None,
        research: MarketResearch | None,
        manual_override: ManualOverride | None = None,
        now: datetime | None = None,
    ) -> Decision:
        return decide(urgency, research, self.catalog, manual_override, now)
