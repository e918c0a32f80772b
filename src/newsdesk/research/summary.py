"""Rule-based research summary: key points, trending topics, urgent events."""

import re

from newsdesk.research.models import ResearchAnswer, ResearchSummary, TrendingTopic

MAX_KEY_POINTS = 10
MAX_KEY_POINTS_PER_PATTERN = 3
MAX_TRENDING_TOPICS = 3
MAX_URGENT_EVENTS = 5

KEY_POINT_PATTERNS = [
    # "EUR/USD rose 0.8%", "gold fell 2"
    re.compile(
        r"\w+\s*/?\w*\s+(?:rose|fell|increased|decreased|dropped|surged)\s+\d+\.?\d*%?",
        re.IGNORECASE,
    ),
    # "the Fed unexpectedly cut rates"
    re.compile(
        r"(?:central bank|fed|ecb|boe)\s+(?:\w+\s+){0,5}(?:raised|cut|maintained)\s+rates",
        re.IGNORECASE,
    ),
    # "gold prices climbed to $2,400"
    re.compile(r"(?:gold|oil|crude)\s+prices?\s+(?:\w+\s+){0,3}\$\d+", re.IGNORECASE),
]

TRENDING_TOPIC_PATTERNS = {
    "forex": re.compile(r"forex|currency|exchange rate", re.IGNORECASE),
    "gold": re.compile(r"gold|precious metals", re.IGNORECASE),
    "oil": re.compile(r"oil|crude|energy", re.IGNORECASE),
    "stocks": re.compile(r"stocks|equity|shares", re.IGNORECASE),
    "crypto": re.compile(r"crypto|bitcoin|ethereum", re.IGNORECASE),
}

URGENT_KEYWORDS = [
    "breaking",
    "urgent",
    "just announced",
    "sudden",
    "unexpected",
    "emergency",
    "crisis",
    "crash",
    "surge",
    "record high",
    "record low",
]

_sentence_split = re.compile(r"[.!?]+")


def extract_key_points(text: str) -> list[str]:
    key_points: list[str] = []
    for pattern in KEY_POINT_PATTERNS:
        matches = [m.group(0) for m in pattern.finditer(text)]
        key_points.extend(matches[:MAX_KEY_POINTS_PER_PATTERN])
    return key_points[:MAX_KEY_POINTS]


def identify_trending_topics(text: str) -> list[TrendingTopic]:
    counts = [
        TrendingTopic(topic=topic, mentions=len(pattern.findall(text)))
        for topic, pattern in TRENDING_TOPIC_PATTERNS.items()
    ]
    # sorted() is stable, so equal counts keep declaration order
    counts = sorted(counts, key=lambda t: t.mentions, reverse=True)
    return counts[:MAX_TRENDING_TOPICS]


def identify_urgent_events(text: str) -> list[str]:
    events = []
    for sentence in _sentence_split.split(text):
        lower = sentence.lower()
        if any(keyword in lower for keyword in URGENT_KEYWORDS):
            events.append(sentence.strip())
    return events[:MAX_URGENT_EVENTS]


def summarize(answers: list[ResearchAnswer]) -> ResearchSummary:
    """Build the research summary from all query answers."""
    text = "\n\n".join(a.answer for a in answers)
    return ResearchSummary(
        key_points=extract_key_points(text),
        trending_topics=identify_trending_topics(text),
        urgent_events=identify_urgent_events(text),
    )
