"""Urgency scoring on a 1-10 scale.

Scores combine the event's keyword tier with market context (price move,
volume spike) and decay with the age of the event. Scores at or above the
threshold override the scheduled educational content.
"""

import math

from newsdesk.core.constants import (
    DEFAULT_URGENCY_THRESHOLD,
    MAX_URGENCY_SCORE,
    MIN_URGENCY_SCORE,
)
from newsdesk.core.logging import get_logger
from newsdesk.detection.event_detector import EventDetector
from newsdesk.detection.models import Event, EventCategory, ResearchScore, ScoredEvent
from newsdesk.research.models import MarketContext, ResearchBundle, VolumeContext

logger = get_logger(__name__)

CATEGORY_SCORES = {
    EventCategory.critical: 8,
    EventCategory.high: 6,
    EventCategory.medium: 4,
}
UNKNOWN_CATEGORY_SCORE = 2

MARKET_IMPACT_BONUS = 2
TIME_SENSITIVE_BONUS = 1
KEYWORD_BONUS = 0.5
MAX_BONUS_KEYWORDS = 3

# Hours since event -> multiplier. Highest threshold not above the age wins.
TIME_DECAY: dict[int, float] = {
    0: 1.0,
    1: 0.9,
    2: 0.8,
    3: 0.7,
    6: 0.5,
    12: 0.3,
    24: 0.1,
}

REPORT_MAX_EVENTS = 10
REPORT_TEXT_LENGTH = 100


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def get_category_score(event: Event) -> int:
    return CATEGORY_SCORES.get(event.category, UNKNOWN_CATEGORY_SCORE)


def get_price_change_modifier(price_change_percent: float) -> float:
    change = abs(price_change_percent)
    if change >= 10:
        return 3
    if change >= 5:
        return 2
    if change >= 3:
        return 1
    if change >= 1:
        return 0.5
    return 0


def get_volume_modifier(volume: VolumeContext | None) -> float:
    if volume is None or not volume.current or not volume.average:
        return 0

    ratio = volume.current / volume.average
    if ratio >= 3:
        return 2
    if ratio >= 2:
        return 1.5
    if ratio >= 1.5:
        return 1
    return 0


def get_time_decay(hours: float) -> float:
    for threshold in sorted(TIME_DECAY, reverse=True):
        if hours >= threshold:
            return TIME_DECAY[threshold]
    return 1.0


class UrgencyScorer:
    """Scores detected events and decides whether they override the schedule."""

    def __init__(
        self,
        threshold: float = DEFAULT_URGENCY_THRESHOLD,
        detector: EventDetector | None = None,
    ) -> None:
        self.threshold = threshold
        self.detector = detector or EventDetector()

    def calculate_score(self, event: Event, context: MarketContext | None = None) -> int:
        """Score one event in [1, 10]."""
        context = context or MarketContext()

        score: float = get_category_score(event)
        if event.market_impact:
            score += MARKET_IMPACT_BONUS
        if event.time_sensitive:
            score += TIME_SENSITIVE_BONUS
        score += min(len(event.keywords), MAX_BONUS_KEYWORDS) * KEYWORD_BONUS

        if context.price_change_percent:
            score += get_price_change_modifier(context.price_change_percent)
        score += get_volume_modifier(context.volume)

        if context.hours_since_event:
            score *= get_time_decay(context.hours_since_event)

        return max(MIN_URGENCY_SCORE, min(MAX_URGENCY_SCORE, round_half_up(score)))

    def should_override_content(self, score: float) -> bool:
        return score >= self.threshold

    def score_events(
        self,
        events: list[Event],
        context: MarketContext | None = None,
    ) -> list[ScoredEvent]:
        """Score events and sort them by score, highest first."""
        scored = []
        for event in events:
            score = self.calculate_score(event, context)
            scored.append(
                ScoredEvent(
                    **event.model_dump(),
                    score=score,
                    should_override=self.should_override_content(score),
                )
            )
        return sorted(scored, key=lambda e: e.score, reverse=True)

    def score_research(
        self,
        bundle: ResearchBundle | None,
        context: MarketContext | None = None,
    ) -> ResearchScore:
        """Detect and score every event in a research bundle."""
        report = self.detector.detect_breaking_news(bundle)
        scored = self.score_events(report.events, context)

        result = ResearchScore(
            events=report.events,
            scored_events=scored,
            critical_events=report.critical_events,
            has_breaking_news=report.has_breaking_news,
            max_urgency=report.max_urgency,
            max_score=scored[0].score if scored else 0,
            should_override=any(e.should_override for e in scored),
            critical_count=sum(1 for e in scored if e.score >= 9),
            high_count=sum(1 for e in scored if 7 <= e.score < 9),
            citations=report.citations,
            timestamp=report.timestamp,
        )

        logger.debug(
            "Research scored",
            events=len(scored),
            max_score=result.max_score,
            should_override=result.should_override,
        )
        return result

    def generate_report(self, scored_events: list[ScoredEvent]) -> str:
        """Human-readable urgency report for logs and the CLI."""
        if not scored_events:
            return "No urgent events detected"

        lines = ["=== URGENCY REPORT ===", ""]

        override_count = sum(1 for e in scored_events if e.should_override)
        if override_count:
            lines.append(f"{override_count} CRITICAL EVENT(S) - OVERRIDE RECOMMENDED")
            lines.append("")

        for event in scored_events[:REPORT_MAX_EVENTS]:
            level = "HIGH" if event.score >= 9 else "ELEVATED" if event.score >= 7 else "WATCH"
            text = event.text[:REPORT_TEXT_LENGTH]
            if len(event.text) > REPORT_TEXT_LENGTH:
                text += "..."
            lines.append(f"[{event.score}/10] {level:<8} {text}")

        return "\n".join(lines)

    def compare_urgency(
        self,
        a: Event | None,
        b: Event | None,
        context: MarketContext | None = None,
    ) -> Event | None:
        """Return the more urgent event; ties go to ``a``."""
        if a is None:
            return b
        if b is None:
            return a

        score_a = a.score if isinstance(a, ScoredEvent) else self.calculate_score(a, context)
        score_b = b.score if isinstance(b, ScoredEvent) else self.calculate_score(b, context)
        return a if score_a >= score_b else b
