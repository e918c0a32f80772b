"""Content decision models."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from newsdesk.core.constants import DEFAULT_PERSONA, UNSCHEDULED_TIME


class ContentType(str, Enum):
    """What kind of video a run produces."""

    breaking_news = "breaking_news"
    educational = "educational"


class Weekday(str, Enum):
    monday = "monday"
    tuesday = "tuesday"
    wednesday = "wednesday"
    thursday = "thursday"
    friday = "friday"
    saturday = "saturday"
    sunday = "sunday"

    @classmethod
    def from_datetime(cls, dt: datetime) -> "Weekday":
        return list(cls)[dt.weekday()]

    @property
    def cron(self) -> str:
        """APScheduler day_of_week abbreviation (mon, tue, ...)."""
        return self.value[:3]


class Topic(BaseModel):
    """Video topic handed to the script writer."""

    title: str
    category: str
    angle: str = ""
    focus: str = ""
    target_audience: str | None = None

    # Educational topics: who presents and in which publish slot
    persona: str = DEFAULT_PERSONA
    scheduled_time: str = UNSCHEDULED_TIME

    # Breaking news topics: the urgent sentences behind the override
    urgent_events: list[str] = Field(default_factory=list)


class TopicMetadata(BaseModel):
    """Production and publishing hints derived from the content type."""

    category: str
    tags: list[str] = Field(default_factory=list)
    hashtags: list[str] = Field(default_factory=list)
    duration: int  # seconds
    priority: str  # "high" | "normal"
    thumbnail_style: str  # "urgent" | "educational"


class ManualOverride(BaseModel):
    """Operator supplied topic that bypasses detection and the schedule."""

    topic: str
    content_type: ContentType = ContentType.breaking_news


class Decision(BaseModel):
    """The content directive for one pipeline run."""

    model_config = ConfigDict(frozen=True)

    topic: Topic
    content_type: ContentType
    urgency_score: float = Field(ge=0, le=10)
    is_urgent: bool
    reasoning: str
    metadata: TopicMetadata
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_breaking_news(self) -> bool:
        return self.content_type == ContentType.breaking_news
