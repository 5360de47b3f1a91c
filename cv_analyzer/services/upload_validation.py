from __future__ import annotations

from io import BytesIO
from zipfile import BadZipFile, ZipFile

MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MB

PDF_MIME = "application/pdf"
TEXT_MIME = "text/plain"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

ALLOWED_MIME_TYPES = frozenset({PDF_MIME, TEXT_MIME, DOCX_MIME})

PDF_MAGIC = b"%PDF-"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")


class UploadValidationError(ValueError):
    def __init__(self, message: str, *, code: str):
        super().__init__(message)
        self.code = code


def _base_mime(mime_type: str | None) -> str:
    return (mime_type or "").split(";")[0].strip().lower()


def extension_from_filename(filename: str) -> str:
    if "." not in (filename or ""):
        return ""
    return filename.rsplit(".", 1)[-1].strip().lower()


def is_allowed_type(filename: str, mime_type: str | None) -> bool:
    if _base_mime(mime_type) in ALLOWED_MIME_TYPES:
        return True
    return extension_from_filename(filename) == "txt"


def validate_upload(filename: str, mime_type: str | None, size_bytes: int) -> None:
    if not is_allowed_type(filename, mime_type):
        raise UploadValidationError("Please upload a PDF, TXT, or Word document", code="unsupported_type")
    if size_bytes > MAX_UPLOAD_BYTES:
        raise UploadValidationError("File size should be less than 10MB", code="file_too_large")
    if size_bytes <= 0:
        raise UploadValidationError("The selected file is empty", code="empty_file")


def resolve_source_type(filename: str, mime_type: str | None) -> str:
    """Map an accepted upload to ``pdf``, ``docx`` or ``txt``."""
    mime = _base_mime(mime_type)
    ext = extension_from_filename(filename)
    if mime == PDF_MIME or ext == "pdf":
        return "pdf"
    if mime == DOCX_MIME or ext == "docx":
        return "docx"
    return "txt"


def _is_zip_payload(content: bytes) -> bool:
    return any(content.startswith(prefix) for prefix in ZIP_MAGICS)


def _zip_has_paths(content: bytes, prefixes: tuple[str, ...]) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            names = archive.namelist()
    except (BadZipFile, ValueError):
        return False
    return any(any(name.startswith(prefix) for prefix in prefixes) for name in names)


def _is_probably_text_payload(content: bytes) -> bool:
    if not content:
        return False
    sample = content[:4096]
    if sample.startswith((b"\xff\xfe", b"\xfe\xff")):
        return True
    if b"\x00" in sample:
        return False
    try:
        sample.decode("utf-8")
        return True
    except UnicodeDecodeError as exc:
        # A multi-byte character cut off at the sample boundary is still text.
        if exc.start >= len(sample) - 3:
            return True
    printable = 0
    for byte in sample:
        if byte in (9, 10, 13) or 32 <= byte <= 126 or byte >= 160:
            printable += 1
    return (printable / len(sample)) >= 0.75


def validate_signature(filename: str, mime_type: str | None, content: bytes) -> None:
    source_type = resolve_source_type(filename, mime_type)
    if source_type == "pdf":
        if not content.startswith(PDF_MAGIC):
            raise UploadValidationError("File content does not look like a PDF document.", code="signature_mismatch")
        return
    if source_type == "docx":
        if not _is_zip_payload(content) or not _zip_has_paths(content, ("word/",)):
            raise UploadValidationError("File content does not look like a Word document.", code="signature_mismatch")
        return
    if not _is_probably_text_payload(content):
        raise UploadValidationError("File content does not look like plain text.", code="signature_mismatch")
