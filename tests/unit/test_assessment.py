"""Tests for the four-factor urgency assessment."""

import pytest

from newsdesk.core.exceptions import EventDetectionError
from newsdesk.detection.assessment import (
    DEFAULT_RECOMMENDATION,
    analyze_breaking_news,
    analyze_economic_events,
    analyze_market_sentiment,
    analyze_price_volatility,
    assess_urgency,
    get_recommendation,
    weighted_factor_score,
)
from newsdesk.detection.models import UrgencyFactors
from newsdesk.research.models import MarketContext, MarketResearch, ResearchAnswer, ResearchSummary


def _answer(text: str) -> ResearchAnswer:
    return ResearchAnswer(query="q", answer=text)


def _calm() -> MarketResearch:
    return MarketResearch(
        forex=_answer("Markets were quiet"),
        commodities=_answer("Markets were quiet"),
        breaking_news=_answer("Markets were quiet"),
        economic_indicators=_answer("Markets were quiet"),
    )


class TestFactors:
    def test_breaking_news(self) -> None:
        research = MarketResearch(
            breaking_news=_answer("Breaking: emergency talks amid crisis"),
            summary=ResearchSummary(urgent_events=["a", "b"]),
        )
        assert analyze_breaking_news(research) == 5.5

    def test_breaking_news_caps(self) -> None:
        research = MarketResearch(
            breaking_news=_answer("Breaking crash, emergency crisis, record surge"),
            summary=ResearchSummary(urgent_events=["a", "b", "c", "d"]),
        )
        assert analyze_breaking_news(research) == 8

    @pytest.mark.parametrize(
        ("move", "expected"),
        [("0.4", 0), ("0.8", 1), ("1.5", 3), ("2.5", 5), ("4", 7), ("6", 10)],
    )
    def test_price_volatility(self, move: str, expected: float) -> None:
        research = MarketResearch(forex=_answer(f"EUR/USD moved {move}% this session"))
        assert analyze_price_volatility(research) == expected

    def test_price_volatility_uses_largest_move(self) -> None:
        research = MarketResearch(
            forex=_answer("EUR/USD moved 0.3% while GBP/USD moved 1.2%"),
            commodities=_answer("Gold moved 4.5%"),
        )
        assert analyze_price_volatility(research) == 7

    def test_economic_events(self) -> None:
        research = MarketResearch(
            economic_indicators=_answer(
                "The central bank signalled a rate hike after the FOMC meeting"
            )
        )
        assert analyze_economic_events(research) == 3

    def test_market_sentiment(self) -> None:
        research = MarketResearch(commodities=_answer("Gold rally and oil gain on bullish optimism"))
        assert analyze_market_sentiment(research) == 6.0

    def test_balanced_sentiment_is_zero(self) -> None:
        research = MarketResearch(forex=_answer("A rally then a drop"))
        assert analyze_market_sentiment(research) == 0


class TestWeighting:
    def test_weighted_score(self) -> None:
        factors = UrgencyFactors(
            breaking_news=8, price_volatility=7, economic_events=6, market_sentiment=5
        )
        assert weighted_factor_score(factors) == pytest.approx(6.9)

    @pytest.mark.parametrize(
        ("score", "prefix"),
        [(9, "URGENT"), (7.5, "HIGH PRIORITY"), (5, "MODERATE"), (3, "LOW PRIORITY")],
    )
    def test_recommendation(self, score: float, prefix: str) -> None:
        assert get_recommendation(score).startswith(prefix)

    def test_default_recommendation(self) -> None:
        assert get_recommendation(2.9) == DEFAULT_RECOMMENDATION


class TestAssessUrgency:
    def test_missing_research_is_not_retryable(self) -> None:
        with pytest.raises(EventDetectionError) as exc_info:
            assess_urgency(None)

        assert exc_info.value.retryable is False

    def test_calm_research(self) -> None:
        assessment = assess_urgency(_calm())

        assert assessment.urgency_score == 0
        assert assessment.is_urgent is False
        assert assessment.threshold == 7
        assert assessment.recommendation == DEFAULT_RECOMMENDATION

    def test_volatility_only(self) -> None:
        research = MarketResearch(forex=_answer("EUR/USD moved 8% this week"))
        assessment = assess_urgency(research)

        assert assessment.factors.price_volatility == 10
        assert assessment.urgency_score == pytest.approx(3.0)
        assert assessment.is_urgent is False
        assert assessment.recommendation.startswith("LOW PRIORITY")

    def test_critical_event_drives_score(self) -> None:
        research = MarketResearch(
            breaking_news=_answer(
                "Breaking: Federal Reserve announces emergency rate cut of 0.5%. "
                "Markets crashed 10% in the last hour."
            ),
            market_context=MarketContext(price_change_percent=-10),
        )
        assessment = assess_urgency(research)

        assert assessment.urgency_score == 10
        assert assessment.is_urgent is True
        assert assessment.research_score is not None
        assert assessment.research_score.max_score == 10
        assert assessment.recommendation.startswith("URGENT")

    def test_custom_threshold(self) -> None:
        research = MarketResearch(forex=_answer("EUR/USD moved 8% this week"))
        assessment = assess_urgency(research, threshold=3)

        assert assessment.is_urgent is True
        assert assessment.threshold == 3
