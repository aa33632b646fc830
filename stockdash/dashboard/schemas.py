from enum import StrEnum

from pydantic import BaseModel, Field


class AlertCondition(StrEnum):
    price_above = "price_above"
    price_below = "price_below"
    # Stored and listed, but no evaluator triggers it
    sentiment_change = "sentiment_change"


class UserAlert(BaseModel):
    id: str
    stock_symbol: str
    condition: AlertCondition
    target_value: float | str
    is_active: bool = True


class AlertCreate(BaseModel):
    stock_symbol: str
    condition: AlertCondition
    target_value: float | str


class AlertEvaluationRequest(BaseModel):
    prices: dict[str, float]


class PortfolioItem(BaseModel):
    stock_symbol: str
    shares: float
    purchase_price: float
    purchase_date: str


class PortfolioItemCreate(BaseModel):
    stock_symbol: str
    shares: float = Field(gt=0)
    purchase_price: float = Field(gt=0)


class PortfolioPosition(BaseModel):
    stock_symbol: str
    shares: float
    purchase_price: float
    current_price: float
    value: float
    gain_loss: float


class PortfolioValuation(BaseModel):
    positions: list[PortfolioPosition]
    total_value: float
    total_cost: float
    total_gain_loss: float


class WatchlistAdd(BaseModel):
    symbol: str
