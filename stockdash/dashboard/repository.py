import asyncio

import structlog
from pydantic import ValidationError as PydanticValidationError

from stockdash.dashboard.schemas import PortfolioItem, UserAlert
from stockdash.database import KeyValueStore
from stockdash.market.schemas import Company

logger = structlog.get_logger()

WATCHLIST_KEY = "stockAnalyzerWatchlist"
ALERTS_KEY = "stockAnalyzerAlerts"
PORTFOLIO_KEY = "stockAnalyzerPortfolio"


class DashboardRepository:
    """Three independently keyed lists; every write replaces the whole list.

    The watchlist holds full `Company` records, alerts hold `UserAlert`
    records and the portfolio holds one `PortfolioItem` per purchase lot.
    Callers that read, modify and save a list hold `locked(key)` throughout
    so concurrent requests cannot overwrite each other's changes.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def locked(self, key: str) -> asyncio.Lock:
        return self._store.lock(key)

    async def get_watchlist(self) -> list[Company]:
        return self._load_models(
            await self._store.get_list(WATCHLIST_KEY), Company, WATCHLIST_KEY
        )

    async def save_watchlist(self, companies: list[Company]) -> None:
        await self._store.put_list(WATCHLIST_KEY, [c.model_dump(mode="json") for c in companies])

    async def get_alerts(self) -> list[UserAlert]:
        return self._load_models(await self._store.get_list(ALERTS_KEY), UserAlert, ALERTS_KEY)

    async def save_alerts(self, alerts: list[UserAlert]) -> None:
        await self._store.put_list(ALERTS_KEY, [a.model_dump(mode="json") for a in alerts])

    async def get_portfolio(self) -> list[PortfolioItem]:
        return self._load_models(
            await self._store.get_list(PORTFOLIO_KEY), PortfolioItem, PORTFOLIO_KEY
        )

    async def save_portfolio(self, items: list[PortfolioItem]) -> None:
        await self._store.put_list(PORTFOLIO_KEY, [i.model_dump(mode="json") for i in items])

    @staticmethod
    def _load_models(raw: list, model: type, key: str) -> list:
        loaded = []
        for entry in raw:
            try:
                loaded.append(model.model_validate(entry))
            except PydanticValidationError as exc:
                logger.warning("dashboard_entry_skipped", key=key, error=str(exc))
        return loaded
