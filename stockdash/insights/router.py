from fastapi import APIRouter

from stockdash.dependencies import (
    CatalogDep,
    DetailsLoaderDep,
    InsightsGatewayDep,
    MarketServiceDep,
)
from stockdash.insights.schemas import RiskAssessment, StockRecommendation, TextInsight
from stockdash.market.schemas import ChartTimeRange, Company, MarketEvent
from stockdash.views.schemas import StockDetails

router = APIRouter()


@router.get("/{symbol}/details", response_model=StockDetails)
async def get_stock_details(
    symbol: str,
    loader: DetailsLoaderDep,
    time_range: ChartTimeRange = ChartTimeRange.one_year,
) -> StockDetails:
    return await loader.load(symbol, time_range)


@router.get("/{symbol}/similar", response_model=list[Company])
async def get_similar_stocks(
    symbol: str,
    market: MarketServiceDep,
    gateway: InsightsGatewayDep,
    catalog: CatalogDep,
) -> list[Company]:
    stock = await market.get_stock(symbol)
    return await gateway.suggest_similar_stocks(stock, list(catalog))


@router.get("/{symbol}/recommendation", response_model=StockRecommendation)
async def get_recommendation(
    symbol: str,
    market: MarketServiceDep,
    gateway: InsightsGatewayDep,
    market_conditions: str = "neutral",
) -> StockRecommendation:
    stock = await market.get_stock(symbol)
    return await gateway.get_stock_recommendation(stock, market_conditions)


@router.get("/{symbol}/risk", response_model=RiskAssessment)
async def get_risk_assessment(
    symbol: str, market: MarketServiceDep, gateway: InsightsGatewayDep
) -> RiskAssessment:
    stock = await market.get_stock(symbol)
    return await gateway.assess_investment_risk(stock)


@router.get("/{symbol}/summary", response_model=TextInsight)
async def get_summary(
    symbol: str, market: MarketServiceDep, gateway: InsightsGatewayDep
) -> TextInsight:
    stock = await market.get_stock(symbol)
    text = await gateway.generate_stock_summary(stock)
    return TextInsight(subject=stock.symbol, text=text)


@router.get("/events/{event_id}/impact", response_model=MarketEvent)
async def get_event_impact(
    event_id: str,
    symbol: str,
    market: MarketServiceDep,
    gateway: InsightsGatewayDep,
) -> MarketEvent:
    event = await market.get_event(event_id)
    return await gateway.analyze_event_impact(event, symbol.upper().strip())


@router.get("/sectors/{sector}/trends", response_model=TextInsight)
async def get_sector_trends(
    sector: str, gateway: InsightsGatewayDep, timeframe: str = "3 months"
) -> TextInsight:
    text = await gateway.analyze_sector_trends(sector, timeframe)
    return TextInsight(subject=sector, text=text)
