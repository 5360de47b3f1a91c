from __future__ import annotations

import logging
from typing import Optional, Sequence

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from cv_analyzer.ai.types import ChatMessage
from cv_analyzer.core.errors import UpstreamError

logger = logging.getLogger(__name__)


class OpenAIProvider:
    """Chat completion client for any OpenAI-compatible endpoint (Groq by default)."""

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_s: float = 60.0,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ):
        if not (api_key or "").strip():
            raise RuntimeError("GROQ_API_KEY is missing")
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        # Failures go straight back to the caller; nothing is retried.
        self._client = AsyncOpenAI(
            api_key=api_key.strip(),
            base_url=base_url or None,
            timeout=timeout_s,
            max_retries=0,
        )

    @property
    def model(self) -> str:
        return self._model

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=payload,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except APIStatusError as exc:
            logger.warning("llm_upstream_status model=%s status=%s", self._model, exc.status_code)
            raise UpstreamError(str(exc), status_code=exc.status_code) from exc
        except APIConnectionError as exc:
            logger.warning("llm_upstream_unreachable model=%s: %s", self._model, exc)
            raise UpstreamError(str(exc)) from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
