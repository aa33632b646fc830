import asyncio
import random

import pytest

from stockdash.dashboard.repository import ALERTS_KEY, WATCHLIST_KEY, DashboardRepository
from stockdash.dashboard.schemas import AlertCondition, AlertCreate, PortfolioItemCreate
from stockdash.dashboard.service import DashboardService, PriceBook
from stockdash.database import KeyValueStore, close_database, get_db, init_database
from stockdash.exceptions import NotFoundError, ValidationError


@pytest.fixture
async def store():
    await init_database(":memory:")
    yield KeyValueStore(get_db())
    await close_database()


@pytest.fixture
def price_book(catalog):
    return PriceBook(catalog, rng=random.Random(11))


@pytest.fixture
def service(store, catalog, price_book):
    return DashboardService(DashboardRepository(store), catalog, price_book)


class TestKeyValueStore:
    async def test_missing_key_is_empty(self, store):
        assert await store.get_list("nothing") == []

    async def test_put_replaces_whole_list(self, store):
        await store.put_list("k", [1, 2, 3])
        await store.put_list("k", ["a"])
        assert await store.get_list("k") == ["a"]

    async def test_malformed_entries_are_skipped(self, store):
        await store.put_list(ALERTS_KEY, [{"id": "1"}, {
            "id": "2", "stock_symbol": "AAPL", "condition": "price_above",
            "target_value": 10, "is_active": True,
        }])
        alerts = await DashboardRepository(store).get_alerts()
        assert [a.id for a in alerts] == ["2"]


class TestWatchlist:
    async def test_add_remove(self, service):
        await service.add_to_watchlist("aapl")
        await service.add_to_watchlist("MSFT")
        watched = await service.add_to_watchlist("AAPL")

        assert [c.symbol for c in watched] == ["AAPL", "MSFT"]

        remaining = await service.remove_from_watchlist("aapl")
        assert [c.symbol for c in remaining] == ["MSFT"]

    async def test_unknown_symbol(self, service):
        with pytest.raises(NotFoundError):
            await service.add_to_watchlist("TSLA")

    async def test_available_excludes_watched(self, service, catalog):
        await service.add_to_watchlist("JPM")
        available = await service.available_for_watchlist()
        assert "JPM" not in [c.symbol for c in available]
        assert len(available) == len(catalog) - 1

    async def test_stores_company_records(self, service, store):
        await service.add_to_watchlist("msft")

        stored = await store.get_list(WATCHLIST_KEY)

        assert stored[0]["symbol"] == "MSFT"
        assert stored[0]["name"] == "Microsoft Corporation"
        assert stored[0]["sector"] == "Technology"

    async def test_concurrent_adds_are_all_kept(self, service):
        await asyncio.gather(*(service.add_to_watchlist(s) for s in ("AAPL", "MSFT", "JPM")))

        watched = await service.list_watchlist()
        assert sorted(c.symbol for c in watched) == ["AAPL", "JPM", "MSFT"]


class TestAlerts:
    async def test_add_toggle_remove(self, service):
        alert = await service.add_alert(
            AlertCreate(stock_symbol="aapl", condition=AlertCondition.price_above, target_value=150)
        )
        assert alert.stock_symbol == "AAPL"
        assert alert.is_active
        assert alert.id.isdigit()

        toggled = await service.toggle_alert(alert.id)
        assert not toggled.is_active

        await service.remove_alert(alert.id)
        assert await service.list_alerts() == []

    async def test_ids_are_unique(self, service):
        create = AlertCreate(stock_symbol="AAPL", condition="price_below", target_value=100)
        first = await service.add_alert(create)
        second = await service.add_alert(create)
        assert first.id != second.id

    async def test_concurrent_adds_are_all_kept_with_distinct_ids(self, service):
        create = AlertCreate(stock_symbol="AAPL", condition="price_above", target_value=4)

        added = await asyncio.gather(*(service.add_alert(create) for _ in range(5)))

        stored = await service.list_alerts()
        assert len(stored) == 5
        assert len({a.id for a in stored}) == 5
        assert {a.id for a in added} == {a.id for a in stored}

    async def test_numeric_string_target_is_coerced(self, service):
        alert = await service.add_alert(
            AlertCreate(stock_symbol="AAPL", condition="price_above", target_value="150.5")
        )
        assert alert.target_value == 150.5

    async def test_price_alert_needs_number(self, service):
        with pytest.raises(ValidationError):
            await service.add_alert(
                AlertCreate(stock_symbol="AAPL", condition="price_above", target_value="high")
            )

    async def test_toggle_unknown(self, service):
        with pytest.raises(NotFoundError):
            await service.toggle_alert("missing")

    async def test_evaluate_price_alerts(self, service):
        above = await service.add_alert(
            AlertCreate(stock_symbol="AAPL", condition="price_above", target_value=150)
        )
        await service.add_alert(
            AlertCreate(stock_symbol="AAPL", condition="price_below", target_value=100)
        )
        inactive = await service.add_alert(
            AlertCreate(stock_symbol="MSFT", condition="price_above", target_value=1)
        )
        await service.toggle_alert(inactive.id)
        await service.add_alert(
            AlertCreate(stock_symbol="JPM", condition="sentiment_change", target_value="negative")
        )

        triggered = await service.evaluate_alerts({"aapl": 160.0, "MSFT": 500.0, "JPM": 1.0})

        assert [a.id for a in triggered] == [above.id]

    async def test_sentiment_alert_never_triggers(self, service):
        await service.add_alert(
            AlertCreate(stock_symbol="JPM", condition="sentiment_change", target_value="negative")
        )
        assert await service.evaluate_alerts({"JPM": 0.0}) == []


class TestPortfolio:
    async def test_add_and_remove_all_lots(self, service):
        await service.add_portfolio_item(
            PortfolioItemCreate(stock_symbol="NVDA", shares=2, purchase_price=100)
        )
        await service.add_portfolio_item(
            PortfolioItemCreate(stock_symbol="NVDA", shares=1, purchase_price=120)
        )
        items = await service.list_portfolio()
        assert len(items) == 2
        assert items[0].purchase_date

        await service.remove_portfolio_item("nvda")
        assert await service.list_portfolio() == []

    async def test_concurrent_lots_are_all_kept(self, service):
        await asyncio.gather(*(
            service.add_portfolio_item(
                PortfolioItemCreate(stock_symbol="NVDA", shares=1, purchase_price=price)
            )
            for price in (100, 110, 120)
        ))

        items = await service.list_portfolio()
        assert sorted(i.purchase_price for i in items) == [100, 110, 120]

    async def test_valuation_uses_pe_ratio_when_known(self, service):
        await service.add_portfolio_item(
            PortfolioItemCreate(stock_symbol="JPM", shares=10, purchase_price=50)
        )

        valuation = await service.value_portfolio()

        position = valuation.positions[0]
        assert position.current_price == 84.0
        assert position.value == 840.0
        assert position.gain_loss == 340.0
        assert valuation.total_gain_loss == 340.0

    async def test_valuation_is_stable_until_refresh(self, service):
        await service.add_portfolio_item(
            PortfolioItemCreate(stock_symbol="NVDA", shares=3, purchase_price=100)
        )

        first = await service.value_portfolio()
        second = await service.value_portfolio()
        assert first == second

        price = first.positions[0].current_price
        assert 90.0 <= price <= 110.0

        service.refresh_prices()
        third = await service.value_portfolio()
        assert third.positions[0].current_price != price
