from enum import StrEnum


class LLMProvider(StrEnum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"

    @property
    def supports_top_k(self) -> bool:
        # OpenAI chat completions have no top_k
        return self is LLMProvider.ANTHROPIC


def provider_supports_top_k(provider: str) -> bool:
    try:
        return LLMProvider(provider).supports_top_k
    except ValueError:
        return False
