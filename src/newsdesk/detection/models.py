"""Event detection and urgency models.

These models define the data flowing from research text to the decision:
- Sentence-level events from the keyword detector
- Events scored on the 1-10 urgency scale
- The four-factor urgency assessment handed to the decision engine
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Events
# =============================================================================


class EventCategory(str, Enum):
    """Highest keyword tier matched by a sentence."""

    critical = "critical"  # Rate decisions, crashes, war, defaults
    high = "high"  # Macro releases, sanctions, regulation
    medium = "medium"  # Earnings, technical levels, M&A
    unknown = "unknown"


class Event(BaseModel):
    """One market-moving sentence."""

    model_config = ConfigDict(frozen=True)

    text: str
    category: EventCategory = EventCategory.unknown
    keywords: list[str] = Field(default_factory=list)
    market_impact: bool = False
    time_sensitive: bool = False

    # Detector's implied urgency (0-10), used for ordering and critical filtering
    urgency: int = Field(default=0, ge=0, le=10)
    # First explicit percentage in the sentence, e.g. 10.0 for "crashed 10%"
    magnitude_percent: float | None = None


class ScoredEvent(Event):
    """Event with its urgency score."""

    score: int = Field(ge=1, le=10)
    should_override: bool = False


class EventBuckets(BaseModel):
    """Events grouped by implied urgency."""

    critical: list[Event] = Field(default_factory=list)  # >= 9
    high: list[Event] = Field(default_factory=list)  # 7-8
    medium: list[Event] = Field(default_factory=list)  # 5-6
    low: list[Event] = Field(default_factory=list)  # < 5


class BreakingNewsReport(BaseModel):
    """Detector view of a research bundle."""

    has_breaking_news: bool = False
    events: list[Event] = Field(default_factory=list)
    critical_events: list[Event] = Field(default_factory=list)
    max_urgency: int = 0
    citations: list[str] = Field(default_factory=list)
    timestamp: datetime | None = None


class ResearchScore(BaseModel):
    """Detection and scoring of a research bundle in one result."""

    events: list[Event] = Field(default_factory=list)
    scored_events: list[ScoredEvent] = Field(default_factory=list)
    critical_events: list[Event] = Field(default_factory=list)
    has_breaking_news: bool = False
    max_urgency: int = 0
    max_score: int = 0
    should_override: bool = False
    critical_count: int = 0  # score >= 9
    high_count: int = 0  # 7 <= score < 9
    citations: list[str] = Field(default_factory=list)
    timestamp: datetime | None = None


# =============================================================================
# Urgency Assessment
# =============================================================================


class UrgencyFactors(BaseModel):
    """Per-factor scores on a 0-10 scale."""

    breaking_news: float = Field(default=0.0, ge=0, le=10)
    price_volatility: float = Field(default=0.0, ge=0, le=10)
    economic_events: float = Field(default=0.0, ge=0, le=10)
    market_sentiment: float = Field(default=0.0, ge=0, le=10)


class UrgencyAssessment(BaseModel):
    """Output of the event-detection stage, input to the decision engine."""

    model_config = ConfigDict(frozen=True)

    urgency_score: float = Field(ge=0, le=10)
    is_urgent: bool
    threshold: float
    factors: UrgencyFactors = Field(default_factory=UrgencyFactors)
    research_score: ResearchScore | None = None
    recommendation: str = ""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
