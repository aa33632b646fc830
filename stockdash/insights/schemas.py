from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator

Recommendation = Literal["buy", "hold", "sell"]
RiskLevel = Literal["low", "medium", "high"]


def _lower(value: object) -> object:
    return value.strip().lower() if isinstance(value, str) else value


# ---------------------------------------------------------------------------
# Shapes expected back from the model
# ---------------------------------------------------------------------------


class SentimentTag(BaseModel):
    id: str
    sentiment: str | None = None
    reasoning: str | None = Field(
        default=None,
        validation_alias=AliasChoices("sentimentReasoning", "reasoning"),
    )


class EventImpactPayload(BaseModel):
    impact_analysis: str = Field(alias="impactAnalysis")
    predicted_impact_score: float = Field(alias="predictedImpactScore", allow_inf_nan=False)


class RecommendationPayload(BaseModel):
    recommendation: Recommendation
    confidence: float = Field(allow_inf_nan=False)
    reasoning: str

    @field_validator("recommendation", mode="before")
    @classmethod
    def normalize_recommendation(cls, value: object) -> object:
        return _lower(value)


class RiskPayload(BaseModel):
    risk_level: RiskLevel = Field(alias="riskLevel")
    risk_factors: list[str] = Field(alias="riskFactors")
    risk_score: float = Field(alias="riskScore", allow_inf_nan=False)
    mitigation_strategies: list[str] = Field(alias="mitigationStrategies")

    @field_validator("risk_level", mode="before")
    @classmethod
    def normalize_level(cls, value: object) -> object:
        return _lower(value)


# ---------------------------------------------------------------------------
# Results handed to callers
# ---------------------------------------------------------------------------


class StockRecommendation(BaseModel):
    recommendation: Recommendation
    confidence: int = Field(ge=1, le=10)
    reasoning: str


class RiskAssessment(BaseModel):
    risk_level: RiskLevel
    risk_factors: list[str]
    risk_score: int = Field(ge=1, le=10)
    mitigation_strategies: list[str]


class TextInsight(BaseModel):
    subject: str
    text: str
