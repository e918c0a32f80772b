"""Research models consumed by event detection and the decision engine.

Research itself is produced by an external provider (a search-backed LLM).
These models are the shape the rest of the pipeline relies on:
- One answer per research query
- The aggregated market research with a rule-based summary
- The flattened bundle the event detector scans
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class ResearchAnswer(BaseModel):
    """Answer to a single research query."""

    query: str
    answer: str = ""
    citations: list[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class TrendingTopic(BaseModel):
    topic: str
    mentions: int


class ResearchSummary(BaseModel):
    """Rule-based highlights extracted from all answers."""

    key_points: list[str] = Field(default_factory=list)
    trending_topics: list[TrendingTopic] = Field(default_factory=list)
    urgent_events: list[str] = Field(default_factory=list)


class VolumeContext(BaseModel):
    current: float
    average: float


class MarketContext(BaseModel):
    """Price/volume context that sharpens the urgency score.

    All fields are optional: research without market data scores on text alone.
    """

    price_change_percent: float | None = None
    volume: VolumeContext | None = None
    hours_since_event: float | None = None


class ResearchBundle(BaseModel):
    """Free text research plus citations, as scanned by the event detector."""

    model_config = ConfigDict(frozen=True)

    content: str
    citations: list[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class MarketResearch(BaseModel):
    """Aggregated output of the research stage."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    forex: ResearchAnswer | None = None
    commodities: ResearchAnswer | None = None
    breaking_news: ResearchAnswer | None = None
    economic_indicators: ResearchAnswer | None = None
    summary: ResearchSummary = Field(default_factory=ResearchSummary)
    market_context: MarketContext = Field(default_factory=MarketContext)

    @property
    def answers(self) -> list[ResearchAnswer]:
        return [
            a
            for a in (self.forex, self.commodities, self.breaking_news, self.economic_indicators)
            if a is not None
        ]

    def text_for(self, *sections: str) -> str:
        """Concatenate the answer text of the named sections (missing ones are skipped)."""
        parts = []
        for name in sections:
            answer: ResearchAnswer | None = getattr(self, name)
            if answer and answer.answer:
                parts.append(answer.answer)
        return " ".join(parts)

    def to_bundle(self) -> ResearchBundle:
        """Flatten every answer into one bundle for event detection."""
        citations: list[str] = []
        for answer in self.answers:
            for citation in answer.citations:
                if citation not in citations:
                    citations.append(citation)
        return ResearchBundle(
            content="\n\n".join(a.answer for a in self.answers if a.answer),
            citations=citations,
            timestamp=self.timestamp,
        )
