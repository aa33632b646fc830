from pydantic import BaseModel, Field

from stockdash.market.schemas import (
    ChartTimeRange,
    Company,
    NewsArticle,
    ProductInnovation,
    Stock,
)


class StockDetails(Stock):
    """A stock plus everything the gateway attached to it in one fetch cycle."""

    news: list[NewsArticle] = Field(default_factory=list)
    innovations: list[ProductInnovation] = Field(default_factory=list)
    ai_summary: str | None = None
    market_trends: str | None = None


class ViewState(BaseModel):
    pane: str
    symbol: str | None = None
    time_range: ChartTimeRange
    is_loading: bool
    error: str | None = None
    stock: StockDetails | None = None


class SearchState(BaseModel):
    query: str
    is_searching: bool
    results: list[Company]


class SelectRequest(BaseModel):
    symbol: str | None = None


class TimeRangeRequest(BaseModel):
    time_range: ChartTimeRange
