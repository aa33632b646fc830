from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "SD_", "env_file": ".env", "env_file_encoding": "utf-8"}

    llm_provider: str = Field(default="openai", pattern=r"^(openai|anthropic)$")
    llm_model: str = Field(default="gpt-4o-mini")
    llm_timeout_seconds: float | None = Field(default=None, gt=0)
    openai_api_key: str = Field(default="")
    anthropic_api_key: str = Field(default="")
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)
    db_path: str = Field(default="stockdash.db")
    cors_origins: str = Field(default="http://localhost:3000")

    # Simulated network delay for the mock market data provider
    mock_latency_seconds: float = Field(default=0.0, ge=0.0)


settings = Settings()
