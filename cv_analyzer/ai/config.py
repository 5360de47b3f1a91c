import os
from dataclasses import dataclass

from cv_analyzer.core.config import _get_env, _get_env_float, _get_env_int

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "llama-3.3-70b-versatile"


@dataclass(frozen=True)
class AIConfig:
    api_key: str | None
    base_url: str
    model: str
    temperature: float
    max_tokens: int
    timeout_s: float


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def load_ai_config() -> AIConfig:
    api_key = (os.getenv("GROQ_API_KEY") or "").strip()
    if not api_key or _looks_like_placeholder(api_key):
        api_key = None
    return AIConfig(
        api_key=api_key,
        base_url=(_get_env("LLM_BASE_URL", GROQ_BASE_URL) or GROQ_BASE_URL).strip(),
        model=(_get_env("LLM_MODEL", DEFAULT_MODEL) or DEFAULT_MODEL).strip(),
        temperature=_get_env_float("LLM_TEMPERATURE", 0.7),
        max_tokens=_get_env_int("LLM_MAX_TOKENS", 2048),
        timeout_s=_get_env_float("LLM_TIMEOUT_S", 60.0),
    )
