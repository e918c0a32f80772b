"""Weekly publishing calendar and the educational topic rotation."""

from datetime import datetime
from datetime import time as wall_time
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field, field_validator

from newsdesk.core.constants import DEFAULT_SCHEDULE_TIMEZONE, SLOT_HOUR_TOLERANCE
from newsdesk.scheduling.models import ContentType, Topic, Weekday


class PublishSlot(BaseModel):
    """A recurring weekly publish time and the persona who presents it."""

    day: Weekday
    time: str  # "HH:MM" in the catalog timezone
    persona: str

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        wall_time.fromisoformat(v)
        return v

    @property
    def hour(self) -> int:
        return wall_time.fromisoformat(self.time).hour

    @property
    def minute(self) -> int:
        return wall_time.fromisoformat(self.time).minute

    def matches(self, now: datetime) -> bool:
        """Same weekday and within an hour of the slot."""
        return (
            Weekday.from_datetime(now) == self.day
            and abs(self.hour - now.hour) <= SLOT_HOUR_TOLERANCE
        )


EDUCATIONAL_TOPICS = [
    Topic(
        title="أساسيات التداول للمبتدئين",
        category="trading_basics",
        angle="Introduction to forex trading fundamentals",
        focus="Basic concepts every new trader should know",
        target_audience="beginners",
    ),
    Topic(
        title="إدارة المخاطر في التداول",
        category="risk_management",
        angle="Protecting your capital through proper risk management",
        focus="Stop loss, position sizing, and risk-reward ratios",
        target_audience="intermediate",
    ),
    Topic(
        title="التحليل الفني: المؤشرات الأساسية",
        category="technical_analysis",
        angle="Understanding key technical indicators",
        focus="Moving averages, RSI, MACD, and support/resistance",
        target_audience="intermediate",
    ),
    Topic(
        title="علم النفس في التداول",
        category="trading_psychology",
        angle="Mastering emotions for successful trading",
        focus="Discipline, patience, and emotional control",
        target_audience="all_levels",
    ),
    Topic(
        title="فهم الرافعة المالية",
        category="trading_basics",
        angle="How leverage works in forex trading",
        focus="Benefits, risks, and proper leverage usage",
        target_audience="beginners",
    ),
    Topic(
        title="استراتيجيات التداول اليومي",
        category="technical_analysis",
        angle="Effective day trading strategies",
        focus="Scalping, momentum trading, and breakout strategies",
        target_audience="advanced",
    ),
]

PUBLISH_SLOTS = [
    PublishSlot(day=Weekday.monday, time="09:00", persona="maha"),
    PublishSlot(day=Weekday.monday, time="18:00", persona="omar"),
    PublishSlot(day=Weekday.wednesday, time="09:00", persona="omar"),
    PublishSlot(day=Weekday.wednesday, time="18:00", persona="maha"),
    PublishSlot(day=Weekday.friday, time="09:00", persona="maha"),
    PublishSlot(day=Weekday.friday, time="18:00", persona="omar"),
]

# ─────────────────────────────────────────────────────────────
# Tags and hashtags
# ─────────────────────────────────────────────────────────────
BASE_TAGS = ["Seekapa", "فوركس", "تداول", "Forex", "Trading"]

CONTENT_TYPE_TAGS = {
    ContentType.breaking_news: ["Breaking News", "Market Update", "أخبار عاجلة", "تحديث السوق"],
    ContentType.educational: ["Education", "Tutorial", "تعليم", "شرح"],
}

CATEGORY_TAGS = {
    "forex_analysis": ["Forex Analysis", "تحليل العملات"],
    "trading_basics": ["Trading Basics", "أساسيات التداول"],
    "risk_management": ["Risk Management", "إدارة المخاطر"],
    "technical_analysis": ["Technical Analysis", "التحليل الفني"],
    "trading_psychology": ["Trading Psychology", "علم نفس التداول"],
}

BASE_HASHTAGS = ["#Seekapa", "#فوركس", "#تداول", "#ForexTrading", "#TradingEducation"]

CONTENT_TYPE_HASHTAGS = {
    ContentType.breaking_news: ["#BreakingNews", "#MarketUpdate", "#عاجل"],
    ContentType.educational: ["#LearnTrading", "#تعلم_التداول"],
}


class ScheduleCatalog(BaseModel):
    """Educational topics in rotation order plus the weekly publish slots."""

    topics: list[Topic] = Field(default_factory=lambda: list(EDUCATIONAL_TOPICS), min_length=1)
    publish_slots: list[PublishSlot] = Field(default_factory=lambda: list(PUBLISH_SLOTS))
    timezone: str = DEFAULT_SCHEDULE_TIMEZONE

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def localize(self, now: datetime | None = None) -> datetime:
        """Current time (or ``now``) in the catalog timezone.

        Naive datetimes are taken to already be local.
        """
        if now is None:
            return datetime.now(self.tz)
        if now.tzinfo is None:
            return now
        return now.astimezone(self.tz)

    def topic_for(self, now: datetime) -> Topic:
        """Rotate by day of year (1 January is day 1)."""
        index = now.timetuple().tm_yday % len(self.topics)
        return self.topics[index]

    def slot_for(self, now: datetime) -> PublishSlot | None:
        for slot in self.publish_slots:
            if slot.matches(now):
                return slot
        return None


def generate_tags(topic: Topic, content_type: ContentType) -> list[str]:
    return [
        *BASE_TAGS,
        *CONTENT_TYPE_TAGS[content_type],
        *CATEGORY_TAGS.get(topic.category, []),
    ]


def generate_hashtags(content_type: ContentType) -> list[str]:
    return [*BASE_HASHTAGS, *CONTENT_TYPE_HASHTAGS[content_type]]
