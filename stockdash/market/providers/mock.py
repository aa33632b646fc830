import asyncio
import random
from datetime import UTC, date, datetime, timedelta

from stockdash.catalog import StockCatalog
from stockdash.market.providers.base import MarketDataProvider
from stockdash.market.schemas import (
    ChartTimeRange,
    Company,
    MarketEvent,
    NewsArticle,
    ProductInnovation,
    Stock,
    StockDataPoint,
)

_BASE_PRICES = {
    "TSLA": 180.0,
    "GOOGL": 170.0,
    "MSFT": 430.0,
    "AAPL": 170.0,
    "AMZN": 180.0,
}
_DEFAULT_BASE_PRICE = 50.0


def generate_price_series(
    days: int, base_price: float, rng: random.Random, end: date | None = None
) -> list[StockDataPoint]:
    """Random walk of `days` daily points ending at `end` (today by default)."""
    end = end or datetime.now(UTC).date()
    current = end - timedelta(days=days)
    price = base_price
    points: list[StockDataPoint] = []

    for _ in range(days):
        price += (rng.random() - 0.49) * (base_price / 50)
        price = max(price, base_price / 5)
        points.append(
            StockDataPoint(
                date=current.isoformat(),
                price=round(price, 2),
                volume=rng.randrange(500_000, 1_500_000),
            )
        )
        current += timedelta(days=1)
    return points


class MockMarketDataProvider(MarketDataProvider):
    """Synthesizes price histories and canned news/innovations/events in-process."""

    def __init__(
        self,
        catalog: StockCatalog,
        rng: random.Random | None = None,
        latency: float = 0.0,
    ) -> None:
        self._catalog = catalog
        self._rng = rng or random.Random()
        self._latency = latency

    async def _simulate_latency(self) -> None:
        if self._latency > 0:
            await asyncio.sleep(self._latency)

    def _company_name(self, symbol: str) -> str:
        company = self._catalog.get(symbol)
        return company.name if company else symbol

    async def fetch_stock_data(
        self, symbol: str, time_range: ChartTimeRange = ChartTimeRange.one_year
    ) -> Stock | None:
        company = self._catalog.get(symbol)
        if company is None:
            return None

        base_price = _BASE_PRICES.get(company.symbol, _DEFAULT_BASE_PRICE)
        history = generate_price_series(time_range.days, base_price, self._rng)

        current_price = history[-1].price if history else base_price
        prev_price = history[-2].price if len(history) > 1 else current_price
        change_pct = ((current_price - prev_price) / prev_price) * 100 if prev_price else 0.0

        await self._simulate_latency()

        return Stock(
            **company.model_dump(),
            historical_data=history,
            current_price=current_price,
            price_change_percent=round(change_pct, 2),
        )

    async def fetch_company_details(self, symbol: str) -> Company | None:
        await self._simulate_latency()
        return self._catalog.get(symbol)

    async def fetch_news_for_stock(self, symbol: str) -> list[NewsArticle]:
        name = self._company_name(symbol)
        await self._simulate_latency()
        return [
            NewsArticle(
                id=f"{symbol}_news_1",
                title=f"{name} Announces Q3 Earnings Beat",
                source="Financial Times",
                date="2024-07-15",
                summary=(
                    "Positive results driven by strong cloud performance and AI initiatives. "
                    "Stock expected to react favorably."
                ),
                url="#",
            ),
            NewsArticle(
                id=f"{symbol}_news_2",
                title=f"New Product Launch from {name} Receives Mixed Reviews",
                source="TechCrunch",
                date="2024-07-10",
                summary=(
                    "Innovative features but concerns about pricing and market fit. "
                    "Analysts are divided on its long-term impact."
                ),
                url="#",
            ),
            NewsArticle(
                id=f"{symbol}_news_3",
                title=f"Regulatory Scrutiny Intensifies for {name} in Europe",
                source="Reuters",
                date="2024-07-05",
                summary=(
                    "Potential fines and operational changes could impact future "
                    "profitability. Investors are wary."
                ),
                url="#",
            ),
            NewsArticle(
                id=f"{symbol}_news_4",
                title=f"{name} partners with Acme Corp for strategic AI development",
                source="Bloomberg",
                date="2024-06-28",
                summary=(
                    "This partnership aims to accelerate AI research and product integration, "
                    f"potentially boosting {name}'s competitive edge."
                ),
                url="#",
            ),
            NewsArticle(
                id=f"{symbol}_news_5",
                title=f"Market Analysts Upgrade {name} Stock to 'Buy'",
                source="Wall Street Journal",
                date="2024-06-20",
                summary=(
                    "Upgraded based on strong growth prospects and innovation pipeline. "
                    "Price target increased by 15%."
                ),
                url="#",
            ),
        ]

    async def fetch_product_innovations(self, symbol: str) -> list[ProductInnovation]:
        name = self._company_name(symbol)
        await self._simulate_latency()
        return [
            ProductInnovation(
                id=f"{symbol}_innov_1",
                date="2024-05-15",
                title=f"Launch of Next-Gen AI Chip by {name}",
                description=(
                    "A new chip promising 2x performance for AI workloads, targeting data "
                    "centers and autonomous systems."
                ),
                impact_score=8,
            ),
            ProductInnovation(
                id=f"{symbol}_innov_2",
                date="2024-02-20",
                title=f'{name} Unveils "Synergy OS" for Seamless Device Integration',
                description=(
                    "A new operating system aiming to unify user experience across all "
                    "company devices."
                ),
                impact_score=7,
            ),
            ProductInnovation(
                id=f"{symbol}_innov_3",
                date="2023-11-01",
                title=f"Breakthrough in Quantum Computing Research by {name}",
                description=(
                    "Published research detailing significant progress towards a stable "
                    "quantum bit, potentially revolutionizing computing."
                ),
                impact_score=9,
            ),
        ]

    async def fetch_market_events(self) -> list[MarketEvent]:
        await self._simulate_latency()
        return [
            MarketEvent(
                id="event_1",
                date="2023-11-17",
                title="ChatGPT Launch Anniversary",
                description=(
                    "Marking one year since the public release of ChatGPT, significantly "
                    "impacting AI industry perception and investment."
                ),
                affected_stocks=["MSFT", "GOOGL", "OPENAI"],
            ),
            MarketEvent(
                id="event_2",
                date="2024-01-10",
                title="Major Tech Company Layoffs Announced",
                description=(
                    "Several large tech companies, including Google and Microsoft, announce "
                    "significant workforce reductions amidst economic uncertainty."
                ),
                affected_stocks=["GOOGL", "MSFT", "AMZN"],
            ),
            MarketEvent(
                id="event_3",
                date="2024-06-05",
                title="Apple Vision Pro Global Rollout Begins",
                description=(
                    "Apple starts the global rollout of its mixed-reality headset, setting a "
                    "new benchmark for spatial computing."
                ),
                affected_stocks=["AAPL", "MSFT"],
            ),
        ]

    async def search_stocks(self, query: str) -> list[Company]:
        results = self._catalog.search(query)
        await self._simulate_latency()
        return results
