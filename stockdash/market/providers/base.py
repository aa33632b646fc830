from abc import ABC, abstractmethod

from stockdash.market.schemas import (
    ChartTimeRange,
    Company,
    MarketEvent,
    NewsArticle,
    ProductInnovation,
    Stock,
)


class MarketDataProvider(ABC):
    @abstractmethod
    async def fetch_stock_data(
        self, symbol: str, time_range: ChartTimeRange = ChartTimeRange.one_year
    ) -> Stock | None: ...

    @abstractmethod
    async def fetch_company_details(self, symbol: str) -> Company | None: ...

    @abstractmethod
    async def fetch_news_for_stock(self, symbol: str) -> list[NewsArticle]: ...

    @abstractmethod
    async def fetch_product_innovations(self, symbol: str) -> list[ProductInnovation]: ...

    @abstractmethod
    async def fetch_market_events(self) -> list[MarketEvent]: ...

    @abstractmethod
    async def search_stocks(self, query: str) -> list[Company]: ...
