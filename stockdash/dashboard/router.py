from fastapi import APIRouter

from stockdash.dashboard.schemas import (
    AlertCreate,
    AlertEvaluationRequest,
    PortfolioItem,
    PortfolioItemCreate,
    PortfolioValuation,
    UserAlert,
    WatchlistAdd,
)
from stockdash.dependencies import DashboardServiceDep
from stockdash.market.schemas import Company

router = APIRouter()


@router.get("/watchlist", response_model=list[Company])
async def list_watchlist(service: DashboardServiceDep) -> list[Company]:
    return await service.list_watchlist()


@router.get("/watchlist/available", response_model=list[Company])
async def list_watchlist_candidates(service: DashboardServiceDep) -> list[Company]:
    return await service.available_for_watchlist()


@router.post("/watchlist", response_model=list[Company])
async def add_to_watchlist(data: WatchlistAdd, service: DashboardServiceDep) -> list[Company]:
    return await service.add_to_watchlist(data.symbol)


@router.delete("/watchlist/{symbol}", response_model=list[Company])
async def remove_from_watchlist(symbol: str, service: DashboardServiceDep) -> list[Company]:
    return await service.remove_from_watchlist(symbol)


@router.get("/alerts", response_model=list[UserAlert])
async def list_alerts(service: DashboardServiceDep) -> list[UserAlert]:
    return await service.list_alerts()


@router.post("/alerts", status_code=201, response_model=UserAlert)
async def add_alert(data: AlertCreate, service: DashboardServiceDep) -> UserAlert:
    return await service.add_alert(data)


@router.post("/alerts/evaluate", response_model=list[UserAlert])
async def evaluate_alerts(
    data: AlertEvaluationRequest, service: DashboardServiceDep
) -> list[UserAlert]:
    return await service.evaluate_alerts(data.prices)


@router.post("/alerts/{alert_id}/toggle", response_model=UserAlert)
async def toggle_alert(alert_id: str, service: DashboardServiceDep) -> UserAlert:
    return await service.toggle_alert(alert_id)


@router.delete("/alerts/{alert_id}", status_code=204)
async def remove_alert(alert_id: str, service: DashboardServiceDep) -> None:
    await service.remove_alert(alert_id)


@router.get("/portfolio", response_model=list[PortfolioItem])
async def list_portfolio(service: DashboardServiceDep) -> list[PortfolioItem]:
    return await service.list_portfolio()


@router.post("/portfolio", status_code=201, response_model=PortfolioItem)
async def add_portfolio_item(
    data: PortfolioItemCreate, service: DashboardServiceDep
) -> PortfolioItem:
    return await service.add_portfolio_item(data)


@router.delete("/portfolio/{symbol}", status_code=204)
async def remove_portfolio_item(symbol: str, service: DashboardServiceDep) -> None:
    await service.remove_portfolio_item(symbol)


@router.get("/portfolio/valuation", response_model=PortfolioValuation)
async def value_portfolio(service: DashboardServiceDep) -> PortfolioValuation:
    return await service.value_portfolio()


@router.post("/portfolio/valuation/refresh", response_model=PortfolioValuation)
async def refresh_valuation(service: DashboardServiceDep) -> PortfolioValuation:
    service.refresh_prices()
    return await service.value_portfolio()
