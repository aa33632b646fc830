import asyncio

import pytest

from stockdash.exceptions import ValidationError
from stockdash.market.schemas import ChartTimeRange
from stockdash.views.service import StockDetailsLoader, StockDetailsView, StockSearch, ViewRegistry
from stockdash.views.schemas import StockDetails

SENTIMENT_REPLY = '[{"id": "AAPL_news_1", "sentiment": "positive", "sentimentReasoning": "Beat."}]'


class TestStockDetailsLoader:
    async def test_enriches_stock_with_gateway_output(self, market_service, make_gateway):
        gateway, client = make_gateway(SENTIMENT_REPLY, "narrative")
        loader = StockDetailsLoader(market_service, gateway)

        details = await loader.load("aapl", ChartTimeRange.one_month)

        assert details.symbol == "AAPL"
        assert len(details.historical_data) == 30
        assert details.news[0].sentiment == "positive"
        assert all(a.sentiment == "neutral" for a in details.news[1:])
        assert details.market_trends == "narrative"
        assert details.ai_summary == "narrative"
        assert [i.description for i in details.innovations] == ["narrative"] * 3
        # sentiment, trends, summary, then one call per innovation
        assert len(client.calls) == 6
        assert "Article ID: AAPL_news_1" in client.prompts[0]

    async def test_survives_gateway_failures(self, market_service, make_gateway):
        gateway, _ = make_gateway(RuntimeError("offline"))
        loader = StockDetailsLoader(market_service, gateway)

        details = await loader.load("MSFT", ChartTimeRange.one_month)

        assert {a.sentiment_reasoning for a in details.news} == {"Error analyzing sentiment."}
        assert details.ai_summary.startswith("Could not generate AI summary")
        assert details.innovations[0].description.startswith("Could not analyze impact of")

    async def test_unknown_symbol_raises(self, market_service, make_gateway):
        gateway, client = make_gateway("unused")
        loader = StockDetailsLoader(market_service, gateway)

        with pytest.raises(Exception, match="Stock data not found for ZZZZ"):
            await loader.load("ZZZZ", ChartTimeRange.one_year)
        assert client.calls == []


class ControlledLoader:
    """Loader whose completions are released manually, per symbol."""

    def __init__(self) -> None:
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[tuple[str, ChartTimeRange]] = []

    async def load(self, symbol: str, time_range: ChartTimeRange) -> StockDetails:
        self.calls.append((symbol, time_range))
        gate = self.gates.setdefault(symbol, asyncio.Event())
        await gate.wait()
        if symbol == "FAIL":
            raise RuntimeError("Stock data not found for FAIL")
        return StockDetails(
            id=symbol, symbol=symbol, name=symbol, sector="Technology",
            description="", current_price=1.0,
        )

    def release(self, symbol: str) -> None:
        self.gates.setdefault(symbol, asyncio.Event()).set()


class TestStockDetailsView:
    async def test_select_commits_result(self):
        loader = ControlledLoader()
        loader.release("AAPL")
        view = StockDetailsView(loader)  # type: ignore[arg-type]

        state = await view.select("aapl")

        assert state.symbol == "AAPL"
        assert state.stock.symbol == "AAPL"
        assert not state.is_loading
        assert state.error is None

    async def test_stale_completion_is_dropped(self):
        loader = ControlledLoader()
        view = StockDetailsView(loader)  # type: ignore[arg-type]

        first = asyncio.create_task(view.select("AAPL"))
        await asyncio.sleep(0)
        second = asyncio.create_task(view.select("MSFT"))
        await asyncio.sleep(0)
        assert view.is_loading

        loader.release("MSFT")
        await second
        loader.release("AAPL")
        await first

        assert view.stock.symbol == "MSFT"
        assert view.symbol == "MSFT"
        assert not view.is_loading

    async def test_stale_error_does_not_clobber_newer_stock(self):
        loader = ControlledLoader()
        view = StockDetailsView(loader)  # type: ignore[arg-type]

        failing = asyncio.create_task(view.select("FAIL"))
        await asyncio.sleep(0)
        loader.release("MSFT")
        await view.select("MSFT")
        loader.release("FAIL")
        await failing

        assert view.stock.symbol == "MSFT"
        assert view.error is None

    async def test_failure_sets_error_and_clears_stock(self):
        loader = ControlledLoader()
        loader.release("AAPL")
        loader.release("FAIL")
        view = StockDetailsView(loader)  # type: ignore[arg-type]
        await view.select("AAPL")

        state = await view.select("FAIL")

        assert state.stock is None
        assert state.error == "Stock data not found for FAIL"

    async def test_clearing_selection_discards_in_flight_fetch(self):
        loader = ControlledLoader()
        view = StockDetailsView(loader)  # type: ignore[arg-type]

        pending = asyncio.create_task(view.select("AAPL"))
        await asyncio.sleep(0)
        await view.select(None)
        loader.release("AAPL")
        await pending

        assert view.stock is None
        assert view.symbol is None
        assert not view.is_loading

    async def test_time_range_change_refetches_current_symbol(self):
        loader = ControlledLoader()
        loader.release("AAPL")
        view = StockDetailsView(loader)  # type: ignore[arg-type]
        await view.select("AAPL")

        state = await view.set_time_range(ChartTimeRange.five_years)

        assert state.time_range == ChartTimeRange.five_years
        assert loader.calls[-1] == ("AAPL", ChartTimeRange.five_years)

    async def test_time_range_without_selection_does_not_fetch(self):
        loader = ControlledLoader()
        view = StockDetailsView(loader)  # type: ignore[arg-type]

        await view.set_time_range(ChartTimeRange.one_month)
        await view.refresh()

        assert loader.calls == []


class GatedMarket:
    """Market whose search completions are released manually, per query."""

    def __init__(self, catalog) -> None:
        self._catalog = catalog
        self.gates: dict[str, asyncio.Event] = {}

    async def search(self, query: str):
        await self.gates.setdefault(query, asyncio.Event()).wait()
        return self._catalog.search(query)

    def release(self, query: str) -> None:
        self.gates.setdefault(query, asyncio.Event()).set()


class TestStockSearch:
    async def test_search_and_clear(self, market_service, catalog):
        search = StockSearch(market_service, list(catalog))

        state = await search.search("corp")
        assert [c.symbol for c in state.results] == ["MSFT", "NVDA", "ORCL"]
        assert not state.is_searching

        cleared = search.clear()
        assert len(cleared.results) == len(catalog)
        assert cleared.query == ""

    async def test_late_earlier_query_does_not_overwrite_newer_results(self, catalog):
        market = GatedMarket(catalog)
        search = StockSearch(market, list(catalog))  # type: ignore[arg-type]

        first = asyncio.create_task(search.search("o"))
        await asyncio.sleep(0)
        second = asyncio.create_task(search.search("oracle"))
        await asyncio.sleep(0)

        market.release("oracle")
        await second
        market.release("o")
        await first

        assert search.query == "oracle"
        assert [c.symbol for c in search.results] == ["ORCL"]
        assert not search.is_searching

    async def test_earlier_completion_keeps_searching_flag(self, catalog):
        market = GatedMarket(catalog)
        search = StockSearch(market, list(catalog))  # type: ignore[arg-type]

        first = asyncio.create_task(search.search("o"))
        await asyncio.sleep(0)
        second = asyncio.create_task(search.search("oracle"))
        await asyncio.sleep(0)

        market.release("o")
        await first
        assert search.is_searching
        assert len(search.results) == len(catalog)

        market.release("oracle")
        state = await second
        assert not state.is_searching
        assert [c.symbol for c in state.results] == ["ORCL"]

    async def test_clear_discards_in_flight_search(self, catalog):
        market = GatedMarket(catalog)
        search = StockSearch(market, list(catalog))  # type: ignore[arg-type]

        pending = asyncio.create_task(search.search("oracle"))
        await asyncio.sleep(0)
        search.clear()
        market.release("oracle")
        await pending

        assert search.query == ""
        assert len(search.results) == len(catalog)
        assert not search.is_searching


class TestViewRegistry:
    def test_panes_are_independent(self, market_service, catalog, make_gateway):
        gateway, _ = make_gateway("x")
        loader = StockDetailsLoader(market_service, gateway)
        registry = ViewRegistry(loader, StockSearch(market_service, list(catalog)))

        assert registry.get("primary") is not registry.get("secondary")
        assert registry.get("primary") is registry.get("primary")

    def test_unknown_pane(self, market_service, catalog, make_gateway):
        gateway, _ = make_gateway("x")
        registry = ViewRegistry(
            StockDetailsLoader(market_service, gateway),
            StockSearch(market_service, list(catalog)),
        )
        with pytest.raises(ValidationError):
            registry.get("tertiary")
