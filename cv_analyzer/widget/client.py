from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from cv_analyzer.schemas.analysis import AnalysisRequest, AnalysisResult, ErrorResponse

logger = logging.getLogger(__name__)

DEFAULT_RELAY_URL = "http://localhost:3000"
ANALYZE_PATH = "/api/analyze"


class RelayTransportError(RuntimeError):
    """Network failure or a response that is not a relay payload."""


class RelayResponseError(RuntimeError):
    def __init__(self, status_code: int, message: str, *, code: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code


class RelayClient:
    def __init__(
        self,
        base_url: str = DEFAULT_RELAY_URL,
        *,
        timeout_s: float | None = 120.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._client = httpx.Client(base_url=base_url, timeout=timeout_s, transport=transport)

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        body = request.model_dump(by_alias=True, exclude_none=True)
        try:
            response = self._client.post(ANALYZE_PATH, json=body)
        except httpx.HTTPError as exc:
            logger.warning("relay_request_failed url=%s: %s", self._client.base_url, exc)
            raise RelayTransportError(str(exc)) from exc

        logger.debug("relay_response status=%s", response.status_code)
        try:
            payload = response.json()
        except ValueError as exc:
            raise RelayTransportError(f"Malformed response from relay ({response.status_code})") from exc

        if response.is_success:
            try:
                return AnalysisResult.model_validate(payload)
            except ValidationError as exc:
                raise RelayTransportError("Malformed response from relay") from exc

        try:
            error = ErrorResponse.model_validate(payload)
        except ValidationError:
            error = ErrorResponse(error=f"Analysis failed ({response.status_code})")
        raise RelayResponseError(response.status_code, error.error, code=error.code)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RelayClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
