import asyncio
import itertools

import structlog

from stockdash.exceptions import ValidationError
from stockdash.insights.service import InsightsGateway
from stockdash.market.schemas import ChartTimeRange, Company, ProductInnovation
from stockdash.market.service import MarketService
from stockdash.views.schemas import SearchState, StockDetails, ViewState

logger = structlog.get_logger()

PANES = ("primary", "secondary")


class StockDetailsLoader:
    """Fetches a stock and enriches it through the gateway."""

    def __init__(self, market: MarketService, gateway: InsightsGateway) -> None:
        self._market = market
        self._gateway = gateway

    async def load(self, symbol: str, time_range: ChartTimeRange) -> StockDetails:
        stock = await self._market.get_stock(symbol, time_range)

        news, innovations = await asyncio.gather(
            self._market.get_news(stock.symbol),
            self._market.get_innovations(stock.symbol),
        )

        tagged_news = await self._gateway.analyze_news_sentiment(news)
        market_trends, ai_summary = await asyncio.gather(
            self._gateway.get_market_trends_summary(stock.name, tagged_news),
            self._gateway.generate_stock_summary(stock),
        )
        analyzed = await asyncio.gather(
            *(self._describe_innovation(stock.name, i) for i in innovations)
        )

        logger.info(
            "stock_details_loaded",
            symbol=stock.symbol,
            time_range=time_range.value,
            news=len(tagged_news),
            innovations=len(analyzed),
        )
        return StockDetails(
            **stock.model_dump(),
            news=tagged_news,
            innovations=list(analyzed),
            ai_summary=ai_summary,
            market_trends=market_trends,
        )

    async def _describe_innovation(
        self, company_name: str, innovation: ProductInnovation
    ) -> ProductInnovation:
        impact = await self._gateway.analyze_product_innovation_impact(
            company_name, innovation.title, innovation.description
        )
        # The impact narrative is shown in place of the original description
        return innovation.model_copy(update={"description": impact or innovation.description})


class StockDetailsView:
    """Per-pane stock detail state.

    Every fetch takes a fresh generation number; a completion only commits
    when its generation is still the latest one issued for this pane.
    """

    def __init__(
        self,
        loader: StockDetailsLoader,
        pane: str = "primary",
        time_range: ChartTimeRange = ChartTimeRange.one_year,
    ) -> None:
        self._loader = loader
        self.pane = pane
        self.time_range = time_range
        self.symbol: str | None = None
        self.stock: StockDetails | None = None
        self.error: str | None = None
        self._generations = itertools.count(1)
        self._latest = 0

    @property
    def is_loading(self) -> bool:
        return self._latest != 0

    def snapshot(self) -> ViewState:
        return ViewState(
            pane=self.pane,
            symbol=self.symbol,
            time_range=self.time_range,
            is_loading=self.is_loading,
            error=self.error,
            stock=self.stock,
        )

    async def select(self, symbol: str | None) -> ViewState:
        symbol = (symbol or "").upper().strip()
        if not symbol:
            # Generation 0 is never issued, so anything in flight is now stale
            self._latest = 0
            self.symbol = None
            self.stock = None
            self.error = None
            return self.snapshot()

        self.symbol = symbol
        return await self._fetch(symbol, self.time_range)

    async def set_time_range(self, time_range: ChartTimeRange) -> ViewState:
        self.time_range = time_range
        if self.symbol:
            return await self._fetch(self.symbol, time_range)
        return self.snapshot()

    async def refresh(self) -> ViewState:
        if not self.symbol:
            return self.snapshot()
        return await self._fetch(self.symbol, self.time_range)

    async def _fetch(self, symbol: str, time_range: ChartTimeRange) -> ViewState:
        generation = next(self._generations)
        self._latest = generation
        self.error = None

        try:
            stock = await self._loader.load(symbol, time_range)
        except Exception as exc:
            message = getattr(exc, "message", None) or str(exc) or "Failed to fetch stock details"
            if self._commit(generation, symbol):
                logger.error("stock_details_failed", pane=self.pane, symbol=symbol, error=message)
                self.stock = None
                self.error = message
            return self.snapshot()

        if self._commit(generation, symbol):
            self.stock = stock
            self.error = None
        return self.snapshot()

    def _commit(self, generation: int, symbol: str) -> bool:
        if generation != self._latest:
            logger.info(
                "stock_details_stale_result_dropped",
                pane=self.pane,
                symbol=symbol,
                generation=generation,
                latest=self._latest,
            )
            return False
        self._latest = 0
        return True


class StockSearch:
    """Search box state; only the most recent query may publish results."""

    def __init__(self, market: MarketService, catalog_companies: list[Company]) -> None:
        self._market = market
        self._all = list(catalog_companies)
        self.query = ""
        self.results: list[Company] = list(catalog_companies)
        self._generations = itertools.count(1)
        self._latest = 0

    @property
    def is_searching(self) -> bool:
        return self._latest != 0

    def snapshot(self) -> SearchState:
        return SearchState(query=self.query, is_searching=self.is_searching, results=self.results)

    async def search(self, query: str) -> SearchState:
        generation = next(self._generations)
        self._latest = generation
        self.query = query

        try:
            results = await self._market.search(query)
        except Exception:
            if generation == self._latest:
                self._latest = 0
            raise

        if generation != self._latest:
            logger.info(
                "stock_search_stale_result_dropped",
                query=query,
                generation=generation,
                latest=self._latest,
            )
            return self.snapshot()

        self._latest = 0
        self.results = results
        return self.snapshot()

    def clear(self) -> SearchState:
        self._latest = 0
        self.query = ""
        self.results = list(self._all)
        return self.snapshot()


class ViewRegistry:
    """Named detail panes (primary/secondary for comparison) plus the search box."""

    def __init__(self, loader: StockDetailsLoader, search: StockSearch) -> None:
        self._views = {pane: StockDetailsView(loader, pane=pane) for pane in PANES}
        self.search = search

    def get(self, pane: str) -> StockDetailsView:
        view = self._views.get(pane)
        if view is None:
            raise ValidationError(f"Unknown pane '{pane}'. Must be one of: {', '.join(PANES)}")
        return view
