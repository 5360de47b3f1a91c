from __future__ import annotations

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Error surfaced to callers as an ``{error, code}`` JSON payload."""

    def __init__(self, status_code: int, message: str, *, code: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code


class UpstreamError(RuntimeError):
    """Failure reported by the LLM provider; ``status_code`` is None for transport failures."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def map_upstream_status(status_code: int | None) -> ApiError:
    if status_code == 429:
        return ApiError(
            status.HTTP_429_TOO_MANY_REQUESTS,
            "Rate limit exceeded. Please wait a moment and try again.",
            code="rate_limited",
        )
    if status_code in {401, 403}:
        return ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "The analysis service is not configured correctly. Please contact the site owner.",
            code="upstream_auth",
        )
    if status_code is None or status_code >= 500:
        return ApiError(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "The analysis service is temporarily unavailable. Please try again later.",
            code="upstream_unavailable",
        )
    return ApiError(status.HTTP_502_BAD_GATEWAY, "Analysis failed", code="analysis_failed")


def error_payload(message: str, code: str | None = None) -> dict[str, str]:
    payload = {"error": message}
    if code:
        payload["code"] = code
    return payload


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    _ = request
    return JSONResponse(status_code=exc.status_code, content=error_payload(exc.message, exc.code))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = {str(part) for err in exc.errors() for part in err.get("loc", ())}
    if request.url.path.endswith("/analyze") or "cvText" in fields:
        message = "Missing or invalid cvText in request body"
    else:
        message = "Invalid request body"
    logger.info("request_validation_failed path=%s fields=%s", request.url.path, sorted(fields))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_payload(message, "invalid_request"),
    )
