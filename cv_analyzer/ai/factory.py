from functools import lru_cache

from cv_analyzer.ai.config import AIConfig
from cv_analyzer.ai.providers.openai_provider import OpenAIProvider
from cv_analyzer.ai.types import AIClient


@lru_cache(maxsize=4)
def get_ai_client(cfg: AIConfig) -> AIClient:
    if not cfg.api_key:
        raise RuntimeError("GROQ_API_KEY is missing")

    return OpenAIProvider(
        model=cfg.model,
        api_key=cfg.api_key,
        base_url=cfg.base_url,
        timeout_s=cfg.timeout_s,
        temperature=cfg.temperature,
        max_tokens=cfg.max_tokens,
    )
