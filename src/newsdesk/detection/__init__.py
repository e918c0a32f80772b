"""Event detection, urgency scoring and urgency assessment."""

from newsdesk.detection.assessment import assess_urgency
from newsdesk.detection.event_detector import EventDetector
from newsdesk.detection.models import (
    BreakingNewsReport,
    Event,
    EventBuckets,
    EventCategory,
    ResearchScore,
    ScoredEvent,
    UrgencyAssessment,
    UrgencyFactors,
)
from newsdesk.detection.urgency_scorer import UrgencyScorer

__all__ = [
    "BreakingNewsReport",
    "Event",
    "EventBuckets",
    "EventCategory",
    "EventDetector",
    "ResearchScore",
    "ScoredEvent",
    "UrgencyAssessment",
    "UrgencyFactors",
    "UrgencyScorer",
    "assess_urgency",
]
