import logging

from fastapi import APIRouter, File, UploadFile, status

from cv_analyzer.core.errors import ApiError
from cv_analyzer.parsing.extract import ExtractionError, extract_text
from cv_analyzer.schemas.analysis import ErrorResponse, ExtractTextResponse
from cv_analyzer.services.upload_validation import (
    MAX_UPLOAD_BYTES,
    UploadValidationError,
    validate_signature,
    validate_upload,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_STATUS_BY_CODE = {
    "unsupported_type": status.HTTP_400_BAD_REQUEST,
    "empty_file": status.HTTP_400_BAD_REQUEST,
    "signature_mismatch": status.HTTP_400_BAD_REQUEST,
    "file_too_large": 413,
}


async def _read_limited(file: UploadFile) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > MAX_UPLOAD_BYTES:
            raise UploadValidationError("File size should be less than 10MB", code="file_too_large")
        chunks.append(chunk)
    return b"".join(chunks)


@router.post(
    "/extract-text",
    response_model=ExtractTextResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def extract_uploaded_text(file: UploadFile = File(...)):
    filename = file.filename or "uploaded-file"
    mime_type = file.content_type
    try:
        validate_upload(filename, mime_type, size_bytes=file.size if file.size is not None else 1)
        content = await _read_limited(file)
        validate_upload(filename, mime_type, size_bytes=len(content))
        validate_signature(filename, mime_type, content)
    except UploadValidationError as exc:
        logger.info("extract_text_rejected file=%s code=%s", filename, exc.code)
        raise ApiError(_STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST), str(exc), code=exc.code) from exc

    try:
        extracted = extract_text(filename, mime_type, content)
    except ExtractionError as exc:
        raise ApiError(422, str(exc), code=exc.code) from exc

    return ExtractTextResponse(**extracted.model_dump())
