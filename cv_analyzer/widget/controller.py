from __future__ import annotations

import logging
from typing import Protocol

from cv_analyzer.formatting import format_analysis
from cv_analyzer.parsing.extract import ExtractionError, extract_text
from cv_analyzer.schemas.analysis import AnalysisRequest, AnalysisResult
from cv_analyzer.services.upload_validation import (
    UploadValidationError,
    validate_signature,
    validate_upload,
)

from .client import RelayResponseError, RelayTransportError
from .state import UploadedDocument, WidgetState

logger = logging.getLogger(__name__)

IDLE_LABEL = "Analyze CV"
EXTRACTING_LABEL = "Processing file..."
ANALYZING_LABEL = "Analyzing CV..."

NO_SELECTION_MESSAGE = "Please select a CV file first"
EXTRACTION_MESSAGE = "Could not extract text from the file"
CONNECTIVITY_MESSAGE = "Could not reach the analysis service. Check your connection and try again."


class Relay(Protocol):
    def analyze(self, request: AnalysisRequest) -> AnalysisResult: ...


class UploadController:
    """Drives one upload-and-analyze cycle against an explicit ``WidgetState``."""

    def __init__(self, relay: Relay, state: WidgetState | None = None):
        self.relay = relay
        self.state = state if state is not None else WidgetState()

    @property
    def can_analyze(self) -> bool:
        return self.state.selected is not None and not self.state.in_flight

    @property
    def has_pending_request(self) -> bool:
        return self.state.in_flight

    def select_file(self, document: UploadedDocument) -> bool:
        try:
            validate_upload(document.name, document.mime_type, document.size_bytes)
        except UploadValidationError as exc:
            logger.info("upload_rejected file=%s code=%s", document.name, exc.code)
            self.state.error = str(exc)
            return False
        self.state.selected = document
        self.state.error = None
        return True

    def set_position(self, position: str | None) -> None:
        self.state.position = (position or "").strip() or None

    def set_job_requirements(self, requirements: str | None) -> None:
        self.state.job_requirements = (requirements or "").strip() or None

    def reset(self) -> None:
        self.state.selected = None
        self.state.status_text = IDLE_LABEL
        self.state.clear_results()

    def analyze(self) -> bool:
        """Run one analysis; True when ``state.result_html`` holds a fresh result."""
        state = self.state
        if state.in_flight:
            return False
        if state.selected is None:
            state.error = NO_SELECTION_MESSAGE
            return False

        state.in_flight = True
        state.clear_results()
        try:
            state.status_text = EXTRACTING_LABEL
            cv_text = self._extract(state.selected)
            if cv_text is None:
                return False

            state.status_text = ANALYZING_LABEL
            try:
                result = self.relay.analyze(
                    AnalysisRequest(
                        cv_text=cv_text,
                        position=state.position,
                        job_requirements=state.job_requirements,
                    )
                )
            except RelayTransportError as exc:
                logger.warning("analysis_transport_error: %s", exc)
                state.error = CONNECTIVITY_MESSAGE
                return False
            except RelayResponseError as exc:
                logger.warning("analysis_failed status=%s code=%s", exc.status_code, exc.code)
                state.error = exc.message or f"Analysis failed ({exc.status_code})"
                return False

            state.result_text = result.text
            state.result_html = format_analysis(result.text)
            return True
        finally:
            state.in_flight = False
            state.status_text = IDLE_LABEL

    def _extract(self, document: UploadedDocument) -> str | None:
        try:
            validate_signature(document.name, document.mime_type, document.raw_bytes)
            return extract_text(document.name, document.mime_type, document.raw_bytes).text
        except (UploadValidationError, ExtractionError) as exc:
            logger.info("extraction_failed file=%s: %s", document.name, exc)
            self.state.error = EXTRACTION_MESSAGE
            return None
