from dataclasses import dataclass

import structlog
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from stockdash.config import settings
from stockdash.llm.config import provider_supports_top_k
from stockdash.llm.factory import LLMFactory

logger = structlog.get_logger()

_JSON_DIRECTIVE = (
    "Respond with a single valid JSON value only. "
    "Do not wrap it in markdown and do not add any text before or after it."
)


@dataclass(frozen=True)
class GenerationConfig:
    temperature: float
    top_k: int
    top_p: float
    max_output_tokens: int
    json_response: bool = False


# Structured (JSON) calls sample conservatively; narrative calls get more room.
SENTIMENT_CONFIG = GenerationConfig(0.2, 30, 0.9, 2048, json_response=True)
SIMILAR_STOCKS_CONFIG = GenerationConfig(0.3, 20, 0.8, 512, json_response=True)
EVENT_IMPACT_CONFIG = GenerationConfig(0.3, 30, 0.85, 1024, json_response=True)
RECOMMENDATION_CONFIG = GenerationConfig(0.2, 20, 0.8, 512, json_response=True)
RISK_CONFIG = GenerationConfig(0.2, 25, 0.8, 1024, json_response=True)
NARRATIVE_CONFIG = GenerationConfig(0.4, 40, 0.9, 1024)
SHORT_NARRATIVE_CONFIG = GenerationConfig(0.4, 40, 0.9, 512)


def _content_text(content: object) -> str:
    """Flatten chat message content (plain string or list of parts) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return str(content)


class LLMClient:
    """Single entry point for text generation calls.

    Without an explicit model the chat model is built from settings on the
    first call, so configuration errors surface as call failures.
    """

    def __init__(self, llm: BaseChatModel | None = None, provider: str | None = None) -> None:
        self._llm = llm
        self._provider = provider or settings.llm_provider

    @property
    def llm(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = LLMFactory.create(provider=self._provider)
        return self._llm

    def _sampling_kwargs(self, config: GenerationConfig) -> dict[str, object]:
        kwargs: dict[str, object] = {
            "temperature": config.temperature,
            "top_p": config.top_p,
            "max_tokens": config.max_output_tokens,
        }
        if provider_supports_top_k(self._provider):
            kwargs["top_k"] = config.top_k
        return kwargs

    async def generate(self, prompt: str, config: GenerationConfig) -> str:
        messages: list = []
        if config.json_response:
            messages.append(SystemMessage(content=_JSON_DIRECTIVE))
        messages.append(HumanMessage(content=prompt))

        bound = self.llm.bind(**self._sampling_kwargs(config))
        response = await bound.ainvoke(messages)
        text = _content_text(response.content)
        logger.debug("llm_generate", provider=self._provider, chars=len(text))
        return text
