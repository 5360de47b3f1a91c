from __future__ import annotations

import logging
from io import BytesIO

from docx import Document
from pypdf import PdfReader

from cv_analyzer.services.upload_validation import resolve_source_type

from .models import ExtractedText

logger = logging.getLogger(__name__)

EXTRACTION_FAILED_MESSAGE = "Could not extract text from this file."


class ExtractionError(ValueError):
    code = "extraction_failed"

    def __init__(self, message: str = EXTRACTION_FAILED_MESSAGE):
        super().__init__(message)


def _decode_text(content: bytes) -> tuple[str, str]:
    if content.startswith((b"\xff\xfe", b"\xfe\xff")):
        return content.decode("utf-16"), "utf-16"
    try:
        return content.decode("utf-8-sig"), "utf-8-sig"
    except UnicodeDecodeError:
        return content.decode("latin-1"), "latin-1"


def _extract_txt(content: bytes) -> tuple[str, int | None, list[str]]:
    text, encoding = _decode_text(content)
    warnings = [] if encoding == "utf-8-sig" else [f"Decoded as {encoding}."]
    return text, None, warnings


def _extract_pdf(content: bytes) -> tuple[str, int | None, list[str]]:
    reader = PdfReader(BytesIO(content))
    page_chunks: list[str] = []
    warnings: list[str] = []
    for index, page in enumerate(reader.pages, start=1):
        page_text = (page.extract_text() or "").strip()
        if page_text:
            page_chunks.append(page_text)
        else:
            warnings.append(f"No extractable text on page {index}.")
    return "\n".join(page_chunks), len(reader.pages), warnings


def _extract_docx(content: bytes) -> tuple[str, int | None, list[str]]:
    document = Document(BytesIO(content))
    paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text and cell.text.strip()]
            if cells:
                paragraphs.append(" | ".join(cells))
    return "\n".join(paragraphs), None, []


_EXTRACTORS = {
    "txt": _extract_txt,
    "pdf": _extract_pdf,
    "docx": _extract_docx,
}


def extract_text(filename: str, mime_type: str | None, content: bytes) -> ExtractedText:
    """Extract plain text from an accepted upload.

    Any parser failure, or a document without text, raises ``ExtractionError``.
    """
    source_type = resolve_source_type(filename, mime_type)
    try:
        text, pages, warnings = _EXTRACTORS[source_type](content)
    except Exception as exc:
        logger.warning("extract_text_failed file=%s source_type=%s: %s", filename, source_type, exc)
        raise ExtractionError() from exc

    text = text.strip()
    if not text:
        logger.info("extract_text_empty file=%s source_type=%s", filename, source_type)
        raise ExtractionError("No extractable text found in this file.")

    return ExtractedText(
        filename=filename,
        source_type=source_type,
        text=text,
        pages=pages,
        warnings=warnings,
    )
