import structlog

from stockdash.exceptions import NotFoundError, StockDataNotFoundError
from stockdash.market.providers.base import MarketDataProvider
from stockdash.market.schemas import (
    ChartTimeRange,
    Company,
    MarketEvent,
    NewsArticle,
    ProductInnovation,
    Stock,
)

logger = structlog.get_logger()


class MarketService:
    def __init__(self, provider: MarketDataProvider) -> None:
        self._provider = provider

    async def get_stock(
        self, symbol: str, time_range: ChartTimeRange = ChartTimeRange.one_year
    ) -> Stock:
        symbol = symbol.upper().strip()
        logger.info("market_get_stock", symbol=symbol, time_range=time_range.value)
        stock = await self._provider.fetch_stock_data(symbol, time_range)
        if stock is None:
            raise StockDataNotFoundError(symbol)
        return stock

    async def get_company(self, symbol: str) -> Company:
        symbol = symbol.upper().strip()
        company = await self._provider.fetch_company_details(symbol)
        if company is None:
            raise NotFoundError("Company", symbol)
        return company

    async def get_news(self, symbol: str) -> list[NewsArticle]:
        symbol = symbol.upper().strip()
        logger.info("market_get_news", symbol=symbol)
        return await self._provider.fetch_news_for_stock(symbol)

    async def get_innovations(self, symbol: str) -> list[ProductInnovation]:
        symbol = symbol.upper().strip()
        logger.info("market_get_innovations", symbol=symbol)
        return await self._provider.fetch_product_innovations(symbol)

    async def get_events(self) -> list[MarketEvent]:
        logger.info("market_get_events")
        return await self._provider.fetch_market_events()

    async def get_event(self, event_id: str) -> MarketEvent:
        events = await self._provider.fetch_market_events()
        for event in events:
            if event.id == event_id:
                return event
        raise NotFoundError("Market event", event_id)

    async def search(self, query: str) -> list[Company]:
        query = query.strip()
        logger.info("market_search", query=query)
        return await self._provider.search_stocks(query)
