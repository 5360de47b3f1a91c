from fastapi import APIRouter

from cv_analyzer.formatting import format_analysis
from cv_analyzer.schemas.analysis import (
    AnalysisRequest,
    AnalysisResult,
    ErrorResponse,
    FormatRequest,
    FormatResponse,
)
from cv_analyzer.services.analysis_service import analyze_cv

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or invalid cvText"},
    429: {"model": ErrorResponse, "description": "Upstream rate limit exceeded"},
    500: {"model": ErrorResponse, "description": "Server or upstream credential misconfiguration"},
    502: {"model": ErrorResponse, "description": "Upstream analysis failed"},
    503: {"model": ErrorResponse, "description": "Upstream temporarily unavailable"},
}


@router.post("/analyze", response_model=AnalysisResult, responses=ERROR_RESPONSES)
async def analyze(payload: AnalysisRequest):
    return await analyze_cv(payload)


@router.post("/format", response_model=FormatResponse)
async def format_text(payload: FormatRequest):
    return FormatResponse(html=format_analysis(payload.text))
