from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field

Sentiment = Literal["positive", "negative", "neutral"]


class ChartTimeRange(StrEnum):
    one_month = "1M"
    three_months = "3M"
    six_months = "6M"
    one_year = "1Y"
    five_years = "5Y"
    max = "MAX"

    @property
    def days(self) -> int:
        return _RANGE_DAYS[self]


_RANGE_DAYS = {
    ChartTimeRange.one_month: 30,
    ChartTimeRange.three_months: 90,
    ChartTimeRange.six_months: 180,
    ChartTimeRange.one_year: 365,
    ChartTimeRange.five_years: 365 * 5,
    ChartTimeRange.max: 365 * 10,
}


class Company(BaseModel):
    model_config = {"frozen": True}

    id: str
    symbol: str
    name: str
    sector: str
    description: str
    market_cap: str | None = None
    pe_ratio: float | None = None
    revenue: str | None = None
    logo_url: str | None = None


class StockDataPoint(BaseModel):
    date: str  # YYYY-MM-DD
    price: float
    volume: int | None = None


class Stock(Company):
    model_config = {"frozen": False}

    historical_data: list[StockDataPoint] = Field(default_factory=list)
    current_price: float
    price_change_percent: float | None = None


class NewsArticle(BaseModel):
    id: str
    title: str
    source: str
    date: str
    summary: str
    url: str
    sentiment: Sentiment | None = None
    sentiment_reasoning: str | None = None


class ProductInnovation(BaseModel):
    id: str
    date: str
    title: str
    description: str
    impact_score: int | None = Field(default=None, ge=1, le=10)


class MarketEvent(BaseModel):
    id: str
    date: str
    title: str
    description: str
    affected_stocks: list[str] = Field(default_factory=list)
    category: str | None = None
    impact_analysis: str | None = None
    predicted_impact_score: int | None = Field(default=None, ge=-10, le=10)
