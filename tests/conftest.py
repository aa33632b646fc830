import random

import pytest

from stockdash.catalog import StockCatalog
from stockdash.insights.service import InsightsGateway
from stockdash.llm.client import GenerationConfig
from stockdash.market.providers.mock import MockMarketDataProvider
from stockdash.market.schemas import (
    Company,
    MarketEvent,
    NewsArticle,
    Stock,
    StockDataPoint,
)
from stockdash.market.service import MarketService


class FakeLLMClient:
    """Stands in for LLMClient: replays canned replies and records every call.

    A reply that is an exception instance is raised instead of returned.
    """

    def __init__(self, *replies: str | Exception) -> None:
        self._replies = list(replies)
        self.calls: list[tuple[str, GenerationConfig]] = []

    @property
    def prompts(self) -> list[str]:
        return [prompt for prompt, _ in self.calls]

    async def generate(self, prompt: str, config: GenerationConfig) -> str:
        self.calls.append((prompt, config))
        if not self._replies:
            raise AssertionError("FakeLLMClient ran out of replies")
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def catalog() -> StockCatalog:
    return StockCatalog([
        Company(id="1", symbol="AAPL", name="Apple Inc.", sector="Technology",
                description="Consumer electronics.", market_cap="2.8T", pe_ratio=29.5),
        Company(id="2", symbol="MSFT", name="Microsoft Corporation", sector="Technology",
                description="Software and cloud.", market_cap="3.1T", pe_ratio=35.2),
        Company(id="3", symbol="NVDA", name="NVIDIA Corporation", sector="Technology",
                description="GPUs."),
        Company(id="4", symbol="ORCL", name="Oracle Corporation", sector="Technology",
                description="Databases."),
        Company(id="5", symbol="JPM", name="JPMorgan Chase & Co.", sector="Financials",
                description="Banking.", pe_ratio=12.0),
    ])


@pytest.fixture
def stock(catalog: StockCatalog) -> Stock:
    company = catalog.get("AAPL")
    return Stock(
        **company.model_dump(),
        historical_data=[
            StockDataPoint(date="2024-07-01", price=170.0, volume=900_000),
            StockDataPoint(date="2024-07-02", price=175.5, volume=800_000),
        ],
        current_price=175.5,
        price_change_percent=3.24,
    )


@pytest.fixture
def articles() -> list[NewsArticle]:
    return [
        NewsArticle(id="a1", title="Earnings beat", source="FT", date="2024-07-15",
                    summary="Strong quarter.", url="#"),
        NewsArticle(id="a2", title="Regulatory probe", source="Reuters", date="2024-07-05",
                    summary="Fines possible.", url="#"),
    ]


@pytest.fixture
def market_event() -> MarketEvent:
    return MarketEvent(
        id="event_x",
        date="2024-01-10",
        title="Layoffs announced",
        description="Large tech companies cut staff.",
        affected_stocks=["AAPL", "MSFT"],
    )


@pytest.fixture
def make_gateway():
    def _make(*replies: str | Exception) -> tuple[InsightsGateway, FakeLLMClient]:
        client = FakeLLMClient(*replies)
        return InsightsGateway(client), client  # type: ignore[arg-type]

    return _make


@pytest.fixture
def market_service(catalog: StockCatalog) -> MarketService:
    return MarketService(MockMarketDataProvider(catalog, rng=random.Random(7)))


@pytest.fixture
def fake_llm():
    return FakeLLMClient
