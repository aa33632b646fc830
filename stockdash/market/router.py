from fastapi import APIRouter

from stockdash.dependencies import MarketServiceDep
from stockdash.market.schemas import (
    ChartTimeRange,
    Company,
    MarketEvent,
    NewsArticle,
    ProductInnovation,
    Stock,
)

router = APIRouter()


@router.get("/stocks", response_model=list[Company])
async def search_stocks(service: MarketServiceDep, q: str = "") -> list[Company]:
    return await service.search(q)


@router.get("/stocks/{symbol}", response_model=Stock)
async def get_stock(
    symbol: str,
    service: MarketServiceDep,
    time_range: ChartTimeRange = ChartTimeRange.one_year,
) -> Stock:
    return await service.get_stock(symbol, time_range)


@router.get("/stocks/{symbol}/news", response_model=list[NewsArticle])
async def get_news(symbol: str, service: MarketServiceDep) -> list[NewsArticle]:
    return await service.get_news(symbol)


@router.get("/stocks/{symbol}/innovations", response_model=list[ProductInnovation])
async def get_innovations(symbol: str, service: MarketServiceDep) -> list[ProductInnovation]:
    return await service.get_innovations(symbol)


@router.get("/events", response_model=list[MarketEvent])
async def list_events(service: MarketServiceDep) -> list[MarketEvent]:
    return await service.get_events()
