from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from stockdash.catalog import DEFAULT_CATALOG, StockCatalog
from stockdash.config import settings
from stockdash.dashboard.repository import DashboardRepository
from stockdash.dashboard.service import DashboardService, PriceBook
from stockdash.database import KeyValueStore, get_db
from stockdash.insights.service import InsightsGateway
from stockdash.llm.client import LLMClient
from stockdash.llm.factory import LLMFactory
from stockdash.market.providers.base import MarketDataProvider
from stockdash.market.providers.mock import MockMarketDataProvider
from stockdash.market.service import MarketService
from stockdash.views.service import StockDetailsLoader, StockSearch, ViewRegistry


def get_catalog() -> StockCatalog:
    return DEFAULT_CATALOG


CatalogDep = Annotated[StockCatalog, Depends(get_catalog)]


def get_market_provider(catalog: CatalogDep) -> MarketDataProvider:
    return MockMarketDataProvider(catalog, latency=settings.mock_latency_seconds)


def get_market_service(
    provider: Annotated[MarketDataProvider, Depends(get_market_provider)],
) -> MarketService:
    return MarketService(provider)


MarketServiceDep = Annotated[MarketService, Depends(get_market_service)]


def get_llm_client() -> LLMClient:
    return LLMClient(LLMFactory.create())


def get_deferred_llm_client() -> LLMClient:
    return LLMClient()


def get_insights_gateway(
    client: Annotated[LLMClient, Depends(get_llm_client)],
) -> InsightsGateway:
    return InsightsGateway(client)


InsightsGatewayDep = Annotated[InsightsGateway, Depends(get_insights_gateway)]


def get_details_loader(
    market: MarketServiceDep, gateway: InsightsGatewayDep
) -> StockDetailsLoader:
    return StockDetailsLoader(market, gateway)


DetailsLoaderDep = Annotated[StockDetailsLoader, Depends(get_details_loader)]

_view_registry: ViewRegistry | None = None


def get_view_registry(
    market: MarketServiceDep,
    catalog: CatalogDep,
    client: Annotated[LLMClient, Depends(get_deferred_llm_client)],
) -> ViewRegistry:
    # Pane state lives for the whole process; the chat model is only built
    # once a pane actually loads a stock
    global _view_registry
    if _view_registry is None:
        loader = StockDetailsLoader(market, InsightsGateway(client))
        _view_registry = ViewRegistry(loader, StockSearch(market, list(catalog)))
    return _view_registry


ViewRegistryDep = Annotated[ViewRegistry, Depends(get_view_registry)]


@lru_cache
def get_price_book() -> PriceBook:
    return PriceBook(get_catalog())


def get_dashboard_service(
    catalog: CatalogDep,
    prices: Annotated[PriceBook, Depends(get_price_book)],
) -> DashboardService:
    return DashboardService(DashboardRepository(KeyValueStore(get_db())), catalog, prices)


DashboardServiceDep = Annotated[DashboardService, Depends(get_dashboard_service)]
