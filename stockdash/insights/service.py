"""Narrative-analysis gateway.

Each operation renders domain records into a prompt, calls the text
generation endpoint, decodes the reply and degrades to a fixed fallback
on any failure. No operation raises past its own boundary.
"""

import math

import structlog

from stockdash.insights import prompts
from stockdash.insights.schemas import (
    EventImpactPayload,
    RecommendationPayload,
    RiskAssessment,
    RiskPayload,
    SentimentTag,
    StockRecommendation,
)
from stockdash.llm.client import (
    EVENT_IMPACT_CONFIG,
    NARRATIVE_CONFIG,
    RECOMMENDATION_CONFIG,
    RISK_CONFIG,
    SENTIMENT_CONFIG,
    SHORT_NARRATIVE_CONFIG,
    SIMILAR_STOCKS_CONFIG,
    GenerationConfig,
    LLMClient,
)
from stockdash.llm.decoder import Decoded, DecodeFailure, decode
from stockdash.market.schemas import Company, MarketEvent, NewsArticle, Stock

logger = structlog.get_logger()

_VALID_SENTIMENTS = ("positive", "negative", "neutral")
_UNRESOLVED_REASONING = "Could not determine sentiment."
_SENTIMENT_ERROR_REASONING = "Error analyzing sentiment."
_EVENT_IMPACT_ERROR = "Error analyzing event impact. Please try again."
_MAX_TREND_ARTICLES = 5
_TREND_SUMMARY_CHARS = 100
_MAX_FALLBACK_SUGGESTIONS = 3
_DAYS_PER_YEAR = 365


def clamp(value: float, low: int, high: int) -> int:
    """Round to the nearest integer and pin into [low, high]."""
    if math.isnan(value):
        return low
    if math.isinf(value):
        return high if value > 0 else low
    return max(low, min(high, round(value)))


def _or_na(value: object) -> str:
    return str(value) if value not in (None, "") else "N/A"


def _week_range(stock: Stock) -> str:
    window = stock.historical_data[-_DAYS_PER_YEAR:]
    if not window:
        return "N/A"
    prices = [p.price for p in window]
    return f"{min(prices):.2f} - {max(prices):.2f}"


def fallback_recommendation() -> StockRecommendation:
    return StockRecommendation(
        recommendation="hold",
        confidence=1,
        reasoning="Error generating recommendation. Please consult a financial advisor.",
    )


def fallback_risk_assessment() -> RiskAssessment:
    return RiskAssessment(
        risk_level="medium",
        risk_factors=["Risk assessment unavailable"],
        risk_score=5,
        mitigation_strategies=["Consult financial advisor", "Conduct thorough research"],
    )


def same_sector_fallback(selected: Company, universe: list[Company]) -> list[Company]:
    return [
        c for c in universe
        if c.sector == selected.sector and c.symbol != selected.symbol
    ][:_MAX_FALLBACK_SUGGESTIONS]


class InsightsGateway:
    def __init__(self, client: LLMClient) -> None:
        self._client = client

    async def _generate_text(
        self, operation: str, prompt: str, config: GenerationConfig, **log_context: object
    ) -> str | None:
        """Free-text call; returns None on transport failure or an empty reply."""
        try:
            text = await self._client.generate(prompt, config)
        except Exception as exc:
            logger.error(f"{operation}_llm_error", error=str(exc), **log_context)
            return None

        text = text.strip()
        if not text:
            logger.error(f"{operation}_empty_response", **log_context)
            return None
        return text

    async def _generate_structured(
        self,
        operation: str,
        prompt: str,
        config: GenerationConfig,
        shape: object,
        **log_context: object,
    ) -> object | None:
        """Structured call; returns the validated value or None on any failure."""
        try:
            text = await self._client.generate(prompt, config)
        except Exception as exc:
            logger.error(f"{operation}_llm_error", error=str(exc), **log_context)
            return None

        match decode(text, shape):
            case Decoded(value=value):
                return value
            case DecodeFailure(reason=reason, raw=raw, processed=processed):
                logger.error(
                    f"{operation}_decode_failed",
                    reason=reason,
                    raw=raw,
                    processed=processed,
                    **log_context,
                )
                return None

    # -- sentiment ----------------------------------------------------------

    async def analyze_news_sentiment(self, articles: list[NewsArticle]) -> list[NewsArticle]:
        if not articles:
            logger.warning("sentiment_no_articles")
            return []

        rendered = prompts.NEWS_ARTICLE_SEPARATOR.join(
            prompts.NEWS_ARTICLE_BLOCK.format(id=a.id, title=a.title, summary=a.summary)
            for a in articles
        )
        prompt = prompts.NEWS_SENTIMENT_PROMPT.format(articles=rendered)

        tags = await self._generate_structured(
            "sentiment", prompt, SENTIMENT_CONFIG, list[SentimentTag], articles=len(articles)
        )
        if tags is None:
            return [
                a.model_copy(
                    update={
                        "sentiment": "neutral",
                        "sentiment_reasoning": _SENTIMENT_ERROR_REASONING,
                    }
                )
                for a in articles
            ]

        by_id: dict[str, SentimentTag] = {}
        for tag in tags:
            by_id.setdefault(tag.id, tag)

        return [self._apply_sentiment(a, by_id.get(a.id)) for a in articles]

    @staticmethod
    def _apply_sentiment(article: NewsArticle, tag: SentimentTag | None) -> NewsArticle:
        sentiment = (tag.sentiment or "").strip().lower() if tag else ""
        if sentiment not in _VALID_SENTIMENTS:
            return article.model_copy(
                update={"sentiment": "neutral", "sentiment_reasoning": _UNRESOLVED_REASONING}
            )
        return article.model_copy(
            update={
                "sentiment": sentiment,
                "sentiment_reasoning": tag.reasoning or _UNRESOLVED_REASONING,
            }
        )

    # -- narratives ---------------------------------------------------------

    async def get_market_trends_summary(
        self, company_name: str, recent_news: list[NewsArticle]
    ) -> str:
        if not company_name:
            logger.warning("market_trends_no_company")
            return "Company name is required for market trends analysis."

        news = "\n".join(
            f"- {n.title}: {n.summary[:_TREND_SUMMARY_CHARS]}..."
            for n in recent_news[:_MAX_TREND_ARTICLES]
        )
        prompt = prompts.MARKET_TRENDS_PROMPT.format(company_name=company_name, news=news)

        text = await self._generate_text(
            "market_trends", prompt, NARRATIVE_CONFIG, company=company_name
        )
        if text is None:
            return f"Could not fetch market trends for {company_name}. Please try again later."
        return text

    async def generate_stock_summary(self, stock: Stock | None) -> str:
        if stock is None:
            logger.warning("stock_summary_no_stock")
            return "Stock information is required for summary generation."

        prompt = prompts.STOCK_SUMMARY_PROMPT.format(
            name=stock.name,
            symbol=stock.symbol,
            sector=stock.sector,
            description=_or_na(stock.description),
            market_cap=_or_na(stock.market_cap),
            pe_ratio=_or_na(stock.pe_ratio),
            current_price=_or_na(stock.current_price),
            week_range=_week_range(stock),
        )

        text = await self._generate_text(
            "stock_summary", prompt, NARRATIVE_CONFIG, symbol=stock.symbol
        )
        if text is None:
            return f"Could not generate AI summary for {stock.name}. Please try again later."
        return text

    async def analyze_product_innovation_impact(
        self, company_name: str, innovation_title: str, innovation_description: str
    ) -> str:
        if not company_name or not innovation_title or not innovation_description:
            logger.warning("innovation_impact_incomplete_input", company=company_name)
            return "Complete innovation details are required for analysis."

        prompt = prompts.INNOVATION_IMPACT_PROMPT.format(
            company_name=company_name,
            title=innovation_title,
            description=innovation_description,
        )

        text = await self._generate_text(
            "innovation_impact",
            prompt,
            SHORT_NARRATIVE_CONFIG,
            company=company_name,
            title=innovation_title,
        )
        if text is None:
            return f"Could not analyze impact of {innovation_title}. Please try again later."
        return text

    async def analyze_sector_trends(self, sector: str, timeframe: str = "3 months") -> str:
        if not sector:
            logger.warning("sector_trends_no_sector")
            return "Sector name is required for sector trend analysis."

        prompt = prompts.SECTOR_TRENDS_PROMPT.format(sector=sector, timeframe=timeframe)

        text = await self._generate_text(
            "sector_trends", prompt, NARRATIVE_CONFIG, sector=sector, timeframe=timeframe
        )
        if text is None:
            return f"Could not analyze trends for {sector} sector. Please try again later."
        return text

    # -- structured ---------------------------------------------------------

    async def suggest_similar_stocks(
        self, selected: Company | None, universe: list[Company]
    ) -> list[Company]:
        if selected is None or not universe:
            logger.warning("similar_stocks_invalid_input")
            return []

        candidates = "; ".join(
            f"{c.name} ({c.symbol}), Sector: {c.sector}"
            for c in universe
            if c.symbol != selected.symbol
        )
        prompt = prompts.SIMILAR_STOCKS_PROMPT.format(
            name=selected.name,
            symbol=selected.symbol,
            sector=selected.sector,
            market_cap=_or_na(selected.market_cap),
            description=_or_na(selected.description),
            candidates=candidates,
        )

        symbols = await self._generate_structured(
            "similar_stocks", prompt, SIMILAR_STOCKS_CONFIG, list[str], symbol=selected.symbol
        )
        if symbols is None:
            return same_sector_fallback(selected, universe)

        suggested = {s.strip().upper() for s in symbols}
        return [
            c for c in universe
            if c.symbol in suggested and c.symbol != selected.symbol
        ]

    async def analyze_event_impact(
        self, event: MarketEvent | None, stock_symbol: str
    ) -> MarketEvent | None:
        if event is None:
            logger.warning("event_impact_no_event", symbol=stock_symbol)
            return None

        category = event.category or "General"
        if not stock_symbol:
            logger.warning("event_impact_no_symbol", event_id=event.id)
            return event.model_copy(
                update={
                    "category": category,
                    "impact_analysis": "Invalid input provided.",
                    "predicted_impact_score": 0,
                }
            )

        prompt = prompts.EVENT_IMPACT_PROMPT.format(
            symbol=stock_symbol,
            title=event.title,
            description=event.description,
            date=event.date,
            category=category,
        )

        payload = await self._generate_structured(
            "event_impact",
            prompt,
            EVENT_IMPACT_CONFIG,
            EventImpactPayload,
            event_id=event.id,
            symbol=stock_symbol,
        )
        if payload is None:
            return event.model_copy(
                update={
                    "category": category,
                    "impact_analysis": _EVENT_IMPACT_ERROR,
                    "predicted_impact_score": 0,
                }
            )

        return event.model_copy(
            update={
                "category": category,
                "impact_analysis": payload.impact_analysis,
                "predicted_impact_score": clamp(payload.predicted_impact_score, -10, 10),
            }
        )

    async def get_stock_recommendation(
        self, stock: Stock | None, market_conditions: str = "neutral"
    ) -> StockRecommendation:
        if stock is None:
            logger.warning("recommendation_no_stock")
            return fallback_recommendation()

        prompt = prompts.RECOMMENDATION_PROMPT.format(
            name=stock.name,
            symbol=stock.symbol,
            current_price=_or_na(stock.current_price),
            market_cap=_or_na(stock.market_cap),
            pe_ratio=_or_na(stock.pe_ratio),
            sector=stock.sector,
            week_range=_week_range(stock),
            market_conditions=market_conditions or "neutral",
        )

        payload = await self._generate_structured(
            "recommendation",
            prompt,
            RECOMMENDATION_CONFIG,
            RecommendationPayload,
            symbol=stock.symbol,
        )
        if payload is None:
            return fallback_recommendation()

        return StockRecommendation(
            recommendation=payload.recommendation,
            confidence=clamp(payload.confidence, 1, 10),
            reasoning=payload.reasoning or "Unable to provide detailed reasoning.",
        )

    async def assess_investment_risk(self, stock: Stock | None) -> RiskAssessment:
        if stock is None:
            logger.warning("risk_assessment_no_stock")
            return fallback_risk_assessment()

        prompt = prompts.RISK_ASSESSMENT_PROMPT.format(
            name=stock.name,
            symbol=stock.symbol,
            sector=stock.sector,
            market_cap=_or_na(stock.market_cap),
            pe_ratio=_or_na(stock.pe_ratio),
            description=_or_na(stock.description),
        )

        payload = await self._generate_structured(
            "risk_assessment", prompt, RISK_CONFIG, RiskPayload, symbol=stock.symbol
        )
        if payload is None:
            return fallback_risk_assessment()

        return RiskAssessment(
            risk_level=payload.risk_level,
            risk_factors=payload.risk_factors or ["Unable to assess risk factors"],
            risk_score=clamp(payload.risk_score, 1, 10),
            mitigation_strategies=(
                payload.mitigation_strategies or ["Diversify portfolio", "Regular monitoring"]
            ),
        )
