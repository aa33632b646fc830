import random
import time
from datetime import UTC, datetime

import structlog

from stockdash.catalog import StockCatalog
from stockdash.dashboard.repository import (
    ALERTS_KEY,
    PORTFOLIO_KEY,
    WATCHLIST_KEY,
    DashboardRepository,
)
from stockdash.dashboard.schemas import (
    AlertCondition,
    AlertCreate,
    PortfolioItem,
    PortfolioItemCreate,
    PortfolioPosition,
    PortfolioValuation,
    UserAlert,
)
from stockdash.exceptions import NotFoundError, ValidationError
from stockdash.market.schemas import Company

logger = structlog.get_logger()

_PE_PRICE_MULTIPLIER = 7
_DRIFT_SPREAD = 0.2


class PriceBook:
    """Mock current prices, drawn once per snapshot and reused until refreshed."""

    def __init__(self, catalog: StockCatalog, rng: random.Random | None = None) -> None:
        self._catalog = catalog
        self._rng = rng or random.Random()
        self._drift: dict[str, float] = {}

    def refresh(self) -> None:
        self._drift.clear()

    def current_price(self, item: PortfolioItem) -> float:
        company = self._catalog.get(item.stock_symbol)
        if company is not None and company.pe_ratio:
            return round(company.pe_ratio * _PE_PRICE_MULTIPLIER, 2)

        drift = self._drift.get(item.stock_symbol)
        if drift is None:
            drift = 1 + (self._rng.random() - 0.5) * _DRIFT_SPREAD
            self._drift[item.stock_symbol] = drift
        return round(item.purchase_price * drift, 2)


def price_condition_met(alert: UserAlert, price: float) -> bool:
    if isinstance(alert.target_value, str):
        return False
    match alert.condition:
        case AlertCondition.price_above:
            return price > alert.target_value
        case AlertCondition.price_below:
            return price < alert.target_value
        case _:
            return False


class DashboardService:
    def __init__(
        self, repo: DashboardRepository, catalog: StockCatalog, prices: PriceBook
    ) -> None:
        self._repo = repo
        self._catalog = catalog
        self._prices = prices

    def _require_company(self, symbol: str) -> Company:
        company = self._catalog.get(symbol)
        if company is None:
            raise NotFoundError("Stock", symbol.upper().strip())
        return company

    # -- watchlist ----------------------------------------------------------

    async def list_watchlist(self) -> list[Company]:
        return await self._repo.get_watchlist()

    async def available_for_watchlist(self) -> list[Company]:
        watched = {c.symbol for c in await self._repo.get_watchlist()}
        return [c for c in self._catalog if c.symbol not in watched]

    async def add_to_watchlist(self, symbol: str) -> list[Company]:
        company = self._require_company(symbol)
        async with self._repo.locked(WATCHLIST_KEY):
            watched = await self._repo.get_watchlist()
            if all(c.symbol != company.symbol for c in watched):
                watched.append(company)
                await self._repo.save_watchlist(watched)
                logger.info("watchlist_added", symbol=company.symbol)
        return watched

    async def remove_from_watchlist(self, symbol: str) -> list[Company]:
        symbol = symbol.upper().strip()
        async with self._repo.locked(WATCHLIST_KEY):
            watched = await self._repo.get_watchlist()
            remaining = [c for c in watched if c.symbol != symbol]
            if len(remaining) != len(watched):
                await self._repo.save_watchlist(remaining)
                logger.info("watchlist_removed", symbol=symbol)
        return remaining

    # -- alerts -------------------------------------------------------------

    async def list_alerts(self) -> list[UserAlert]:
        return await self._repo.get_alerts()

    async def add_alert(self, data: AlertCreate) -> UserAlert:
        company = self._require_company(data.stock_symbol)
        target = data.target_value

        if data.condition in (AlertCondition.price_above, AlertCondition.price_below):
            if isinstance(target, str):
                try:
                    target = float(target)
                except ValueError as exc:
                    raise ValidationError(
                        f"Price alerts need a numeric target, got '{data.target_value}'"
                    ) from exc
        elif not isinstance(target, str):
            raise ValidationError("Sentiment alerts need a sentiment label as target")

        async with self._repo.locked(ALERTS_KEY):
            alerts = await self._repo.get_alerts()
            alert = UserAlert(
                id=self._next_alert_id({a.id for a in alerts}),
                stock_symbol=company.symbol,
                condition=data.condition,
                target_value=target,
                is_active=True,
            )
            alerts.append(alert)
            await self._repo.save_alerts(alerts)
        logger.info(
            "alert_added",
            alert_id=alert.id,
            symbol=alert.stock_symbol,
            condition=alert.condition.value,
        )
        return alert

    async def remove_alert(self, alert_id: str) -> None:
        async with self._repo.locked(ALERTS_KEY):
            alerts = await self._repo.get_alerts()
            remaining = [a for a in alerts if a.id != alert_id]
            if len(remaining) != len(alerts):
                await self._repo.save_alerts(remaining)
                logger.info("alert_removed", alert_id=alert_id)

    async def toggle_alert(self, alert_id: str) -> UserAlert:
        async with self._repo.locked(ALERTS_KEY):
            alerts = await self._repo.get_alerts()
            for idx, alert in enumerate(alerts):
                if alert.id == alert_id:
                    toggled = alert.model_copy(update={"is_active": not alert.is_active})
                    alerts[idx] = toggled
                    await self._repo.save_alerts(alerts)
                    logger.info("alert_toggled", alert_id=alert_id, is_active=toggled.is_active)
                    return toggled
        raise NotFoundError("Alert", alert_id)

    async def evaluate_alerts(self, prices: dict[str, float]) -> list[UserAlert]:
        """Active price alerts whose condition holds for the given prices."""
        quotes = {s.upper().strip(): p for s, p in prices.items()}
        triggered = [
            alert
            for alert in await self._repo.get_alerts()
            if alert.is_active
            and alert.stock_symbol in quotes
            and price_condition_met(alert, quotes[alert.stock_symbol])
        ]
        logger.info("alerts_evaluated", symbols=len(quotes), triggered=len(triggered))
        return triggered

    @staticmethod
    def _next_alert_id(existing: set[str]) -> str:
        candidate = int(time.time() * 1000)
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)

    # -- portfolio ----------------------------------------------------------

    async def list_portfolio(self) -> list[PortfolioItem]:
        return await self._repo.get_portfolio()

    async def add_portfolio_item(self, data: PortfolioItemCreate) -> PortfolioItem:
        company = self._require_company(data.stock_symbol)
        item = PortfolioItem(
            stock_symbol=company.symbol,
            shares=data.shares,
            purchase_price=data.purchase_price,
            purchase_date=datetime.now(UTC).isoformat(),
        )
        async with self._repo.locked(PORTFOLIO_KEY):
            items = await self._repo.get_portfolio()
            items.append(item)
            await self._repo.save_portfolio(items)
        logger.info("portfolio_item_added", symbol=item.stock_symbol, shares=item.shares)
        return item

    async def remove_portfolio_item(self, symbol: str) -> None:
        symbol = symbol.upper().strip()
        async with self._repo.locked(PORTFOLIO_KEY):
            items = await self._repo.get_portfolio()
            remaining = [i for i in items if i.stock_symbol != symbol]
            if len(remaining) != len(items):
                await self._repo.save_portfolio(remaining)
                logger.info("portfolio_item_removed", symbol=symbol)

    async def value_portfolio(self) -> PortfolioValuation:
        positions: list[PortfolioPosition] = []
        for item in await self._repo.get_portfolio():
            current = self._prices.current_price(item)
            value = item.shares * current
            cost = item.shares * item.purchase_price
            positions.append(
                PortfolioPosition(
                    stock_symbol=item.stock_symbol,
                    shares=item.shares,
                    purchase_price=item.purchase_price,
                    current_price=current,
                    value=round(value, 2),
                    gain_loss=round(value - cost, 2),
                )
            )

        total_value = round(sum(p.value for p in positions), 2)
        total_cost = round(sum(p.shares * p.purchase_price for p in positions), 2)
        return PortfolioValuation(
            positions=positions,
            total_value=total_value,
            total_cost=total_cost,
            total_gain_loss=round(total_value - total_cost, 2),
        )

    def refresh_prices(self) -> None:
        self._prices.refresh()
        logger.info("portfolio_prices_refreshed")
