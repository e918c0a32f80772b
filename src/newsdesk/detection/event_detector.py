"""Keyword and pattern based event detection.

Research text is split into sentences; a sentence becomes an Event when it
contains at least one tiered keyword. Market impact and time sensitivity
patterns raise the implied urgency used for ordering.
"""

import re

from newsdesk.core.constants import CRITICAL_EVENT_URGENCY, MIN_SENTENCE_LENGTH
from newsdesk.core.logging import get_logger
from newsdesk.detection.models import BreakingNewsReport, Event, EventBuckets, EventCategory
from newsdesk.research.models import ResearchBundle

logger = get_logger(__name__)

# Tiers are checked highest first; a sentence takes the highest tier it matches
URGENT_KEYWORDS: dict[EventCategory, list[str]] = {
    EventCategory.critical: [
        "fed decision",
        "interest rate",
        "rate hike",
        "rate cut",
        "central bank",
        "market crash",
        "flash crash",
        "circuit breaker",
        "trading halt",
        "black swan",
        "war",
        "military action",
        "nuclear",
        "terrorist attack",
        "coup",
        "default",
        "bankruptcy",
        "collapse",
    ],
    EventCategory.high: [
        "inflation",
        "cpi",
        "jobs report",
        "nonfarm payroll",
        "unemployment",
        "gdp",
        "recession",
        "bear market",
        "bull market",
        "sanctions",
        "trade war",
        "tariff",
        "opec",
        "production cut",
        "supply shock",
        "regulatory",
        "sec announcement",
        "ban",
        "fraud",
        "hack",
        "breach",
    ],
    EventCategory.medium: [
        "earnings",
        "forecast",
        "guidance",
        "outlook",
        "volatility",
        "rally",
        "selloff",
        "correction",
        "rebound",
        "support",
        "resistance",
        "breakout",
        "analyst upgrade",
        "analyst downgrade",
        "merger",
        "acquisition",
    ],
}

TIER_URGENCY = {
    EventCategory.critical: 9,
    EventCategory.high: 7,
    EventCategory.medium: 5,
}

MARKET_IMPACT_PATTERNS = [
    re.compile(r"(\d+)%\s+(surge|crash|drop|fall|rise|gain|rally)", re.IGNORECASE),
    re.compile(r"all-time (high|low)", re.IGNORECASE),
    re.compile(r"record (high|low)", re.IGNORECASE),
    re.compile(r"historical", re.IGNORECASE),
    re.compile(r"unprecedented", re.IGNORECASE),
    re.compile(r"emergency", re.IGNORECASE),
    re.compile(r"urgent", re.IGNORECASE),
    re.compile(r"breaking", re.IGNORECASE),
    re.compile(r"alert", re.IGNORECASE),
]

TIME_SENSITIVE_PATTERNS = [
    re.compile(r"just now", re.IGNORECASE),
    re.compile(r"moments ago", re.IGNORECASE),
    re.compile(r"breaking", re.IGNORECASE),
    re.compile(r"urgent", re.IGNORECASE),
    re.compile(r"developing", re.IGNORECASE),
    re.compile(r"live", re.IGNORECASE),
    re.compile(r"happening now", re.IGNORECASE),
    re.compile(r"minutes ago", re.IGNORECASE),
    re.compile(r"hours ago", re.IGNORECASE),
]

_percent = re.compile(r"(\d+(?:\.\d+)?)%")
_sentence_split = re.compile(r"[.!?]+")

MAX_URGENCY = 10


def split_into_sentences(text: str) -> list[str]:
    """Split on sentence punctuation, dropping fragments of 10 chars or fewer."""
    sentences = (s.strip() for s in _sentence_split.split(text))
    return [s for s in sentences if len(s) > MIN_SENTENCE_LENGTH]


class EventDetector:
    """Detects breaking news and market-moving events in free text."""

    def analyze_event(self, sentence: str) -> Event | None:
        """Classify a single sentence.

        Returns:
            The Event, or None when no tier keyword is present
        """
        lower = sentence.lower()

        category = EventCategory.unknown
        keywords: list[str] = []
        for tier, tier_keywords in URGENT_KEYWORDS.items():
            matched = [kw for kw in tier_keywords if kw in lower]
            if matched and category is EventCategory.unknown:
                category = tier
            keywords.extend(matched)

        if category is EventCategory.unknown:
            return None

        urgency = TIER_URGENCY[category]

        magnitude: float | None = None
        percent_match = _percent.search(sentence)
        if percent_match:
            magnitude = float(percent_match.group(1))

        market_impact = any(p.search(sentence) for p in MARKET_IMPACT_PATTERNS)
        if market_impact:
            urgency += 1
            if magnitude is not None:
                if magnitude >= 5:
                    urgency += 1
                if magnitude >= 10:
                    urgency += 1

        time_sensitive = any(p.search(sentence) for p in TIME_SENSITIVE_PATTERNS)
        if time_sensitive:
            urgency += 1

        return Event(
            text=sentence,
            category=category,
            keywords=keywords,
            market_impact=market_impact,
            time_sensitive=time_sensitive,
            urgency=min(urgency, MAX_URGENCY),
            magnitude_percent=magnitude,
        )

    def detect_events(self, text: str | None) -> list[Event]:
        """Detect events in text, most urgent first."""
        if not text:
            return []

        events = []
        for sentence in split_into_sentences(text):
            event = self.analyze_event(sentence)
            if event is not None:
                events.append(event)

        return sorted(events, key=lambda e: e.urgency, reverse=True)

    def detect_breaking_news(self, bundle: ResearchBundle | None) -> BreakingNewsReport:
        """Run detection over a research bundle."""
        if bundle is None or not bundle.content:
            return BreakingNewsReport()

        events = self.detect_events(bundle.content)
        critical = [e for e in events if e.urgency >= CRITICAL_EVENT_URGENCY]
        max_urgency = max((e.urgency for e in events), default=0)

        logger.debug(
            "Breaking news scan",
            events=len(events),
            critical=len(critical),
            max_urgency=max_urgency,
        )

        return BreakingNewsReport(
            has_breaking_news=len(critical) > 0,
            events=events,
            critical_events=critical,
            max_urgency=max_urgency,
            citations=list(bundle.citations),
            timestamp=bundle.timestamp,
        )

    def categorize_events(self, events: list[Event]) -> EventBuckets:
        buckets = EventBuckets()
        for event in events:
            if event.urgency >= 9:
                buckets.critical.append(event)
            elif event.urgency >= 7:
                buckets.high.append(event)
            elif event.urgency >= 5:
                buckets.medium.append(event)
            else:
                buckets.low.append(event)
        return buckets

    def generate_summary(self, events: list[Event]) -> str:
        """One-line summary, e.g. "Detected: 1 CRITICAL event(s), 2 high-priority event(s)"."""
        if not events:
            return "No significant events detected"

        buckets = self.categorize_events(events)
        parts = []
        if buckets.critical:
            parts.append(f"{len(buckets.critical)} CRITICAL event(s)")
        if buckets.high:
            parts.append(f"{len(buckets.high)} high-priority event(s)")
        if buckets.medium:
            parts.append(f"{len(buckets.medium)} medium-priority event(s)")

        return f"Detected: {', '.join(parts)}"
