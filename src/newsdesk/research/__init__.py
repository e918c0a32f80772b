"""Market research models, aggregation and summary extraction."""

from newsdesk.research.aggregator import RESEARCH_QUERIES, gather_research
from newsdesk.research.models import (
    MarketContext,
    MarketResearch,
    ResearchAnswer,
    ResearchBundle,
    ResearchSummary,
    TrendingTopic,
    VolumeContext,
)
from newsdesk.research.summary import summarize

__all__ = [
    "RESEARCH_QUERIES",
    "MarketContext",
    "MarketResearch",
    "ResearchAnswer",
    "ResearchBundle",
    "ResearchSummary",
    "TrendingTopic",
    "VolumeContext",
    "gather_research",
    "summarize",
]
