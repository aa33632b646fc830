from fastapi import APIRouter

from stockdash.dependencies import ViewRegistryDep
from stockdash.views.schemas import SearchState, SelectRequest, TimeRangeRequest, ViewState

router = APIRouter()


@router.get("/search", response_model=SearchState)
async def search_stocks(registry: ViewRegistryDep, q: str = "") -> SearchState:
    return await registry.search.search(q)


@router.post("/search/clear", response_model=SearchState)
async def clear_search(registry: ViewRegistryDep) -> SearchState:
    return registry.search.clear()


@router.get("/{pane}", response_model=ViewState)
async def get_view(pane: str, registry: ViewRegistryDep) -> ViewState:
    return registry.get(pane).snapshot()


@router.post("/{pane}/select", response_model=ViewState)
async def select_stock(pane: str, data: SelectRequest, registry: ViewRegistryDep) -> ViewState:
    return await registry.get(pane).select(data.symbol)


@router.post("/{pane}/time-range", response_model=ViewState)
async def set_time_range(
    pane: str, data: TimeRangeRequest, registry: ViewRegistryDep
) -> ViewState:
    return await registry.get(pane).set_time_range(data.time_range)


@router.post("/{pane}/refresh", response_model=ViewState)
async def refresh_view(pane: str, registry: ViewRegistryDep) -> ViewState:
    return await registry.get(pane).refresh()
