from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from stockdash.config import settings
from stockdash.exceptions import LLMConfigError
from stockdash.llm.config import LLMProvider


class LLMFactory:
    @staticmethod
    def create(
        provider: str | None = None,
        model: str | None = None,
        **kwargs: object,
    ) -> BaseChatModel:
        provider = provider or settings.llm_provider
        model = model or settings.llm_model
        if settings.llm_timeout_seconds is not None:
            kwargs.setdefault("timeout", settings.llm_timeout_seconds)

        match provider:
            case LLMProvider.OPENAI:
                api_key = settings.openai_api_key
                if not api_key:
                    raise LLMConfigError("OpenAI API key is not configured")
                return ChatOpenAI(model=model, api_key=api_key, **kwargs)  # type: ignore[arg-type]

            case LLMProvider.ANTHROPIC:
                api_key = settings.anthropic_api_key
                if not api_key:
                    raise LLMConfigError("Anthropic API key is not configured")
                return ChatAnthropic(model=model, api_key=api_key, **kwargs)  # type: ignore[arg-type]

            case _:
                raise LLMConfigError(f"Unknown LLM provider: '{provider}'")
