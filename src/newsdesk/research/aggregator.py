"""Fan the market research queries out to the provider and aggregate the answers."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from newsdesk.core.logging import get_logger
from newsdesk.research.models import MarketContext, MarketResearch
from newsdesk.research.summary import summarize

if TYPE_CHECKING:
    from newsdesk.providers.base import MarketDataProvider, ResearchProvider

logger = get_logger(__name__)

# Section name -> query. Order is the order answers are concatenated in.
RESEARCH_QUERIES: dict[str, str] = {
    "forex": (
        "Latest forex market trends and major currency pair movements in the past 24 hours"
    ),
    "commodities": "Gold and oil price updates, key economic indicators affecting GCC markets",
    "breaking_news": "Breaking financial news relevant to forex traders in Middle East",
    "economic_indicators": "Central bank decisions and economic reports from major economies",
}


async def _no_context() -> MarketContext:
    return MarketContext()


async def gather_research(
    provider: ResearchProvider,
    queries: dict[str, str] | None = None,
    market_data: MarketDataProvider | None = None,
) -> MarketResearch:
    """Run all research queries concurrently and build the summary.

    When a market data provider is given, its price/volume context is fetched
    alongside the queries and attached as ``market_context``.

    Any provider failure propagates; the research stage decides whether
    it is worth retrying.
    """
    queries = queries if queries is not None else RESEARCH_QUERIES
    sections = list(queries)

    logger.info(
        "Gathering market research", queries=len(sections), market_data=market_data is not None
    )
    context, *answers = await asyncio.gather(
        market_data.get_context() if market_data is not None else _no_context(),
        *(provider.query(queries[name]) for name in sections),
    )

    by_section = dict(zip(sections, answers, strict=True))
    research = MarketResearch(
        timestamp=datetime.now(UTC),
        market_context=context,
        **{name: by_section.get(name) for name in RESEARCH_QUERIES},
    )
    research.summary = summarize(research.answers)

    logger.info(
        "Market research gathered",
        key_points=len(research.summary.key_points),
        urgent_events=len(research.summary.urgent_events),
        citations=len(research.to_bundle().citations),
        price_change_percent=context.price_change_percent,
    )
    return research
