from __future__ import annotations

import logging
import time

from fastapi import status

from cv_analyzer.ai.config import load_ai_config
from cv_analyzer.ai.factory import get_ai_client
from cv_analyzer.ai.prompt import build_analysis_messages
from cv_analyzer.core.errors import ApiError, UpstreamError, map_upstream_status
from cv_analyzer.schemas.analysis import AnalysisRequest, AnalysisResult

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "Server is not configured with GROQ_API_KEY"


async def analyze_cv(request: AnalysisRequest) -> AnalysisResult:
    """Send one CV to the upstream model and return its text verbatim.

    Raises ``ApiError`` for every failure; the caller renders it as ``{error, code}``.
    """
    cfg = load_ai_config()
    if not cfg.api_key:
        logger.error("analyze_rejected reason=missing_api_key")
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, MISSING_KEY_MESSAGE, code="missing_api_key")

    messages = build_analysis_messages(
        request.cv_text,
        position=request.position,
        job_requirements=request.job_requirements,
    )
    started = time.perf_counter()
    try:
        text = await get_ai_client(cfg).complete(messages)
    except UpstreamError as exc:
        logger.error("analyze_upstream_error status=%s: %s", exc.status_code, exc)
        raise map_upstream_status(exc.status_code) from exc
    except Exception as exc:  # noqa: BLE001 - surfaced as a generic 500
        logger.exception("analyze_unexpected_error")
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error while analyzing CV",
            code="internal_error",
        ) from exc

    logger.info(
        "analyze_completed model=%s cv_chars=%s output_chars=%s latency_ms=%s",
        cfg.model,
        len(request.cv_text),
        len(text),
        int((time.perf_counter() - started) * 1000),
    )
    return AnalysisResult(text=text)
