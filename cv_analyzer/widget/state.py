from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class UploadedDocument:
    name: str
    mime_type: str
    size_bytes: int
    raw_bytes: bytes

    @classmethod
    def from_path(cls, path: str | Path) -> "UploadedDocument":
        file_path = Path(path)
        raw = file_path.read_bytes()
        mime_type, _ = mimetypes.guess_type(file_path.name)
        return cls(
            name=file_path.name,
            mime_type=mime_type or "",
            size_bytes=len(raw),
            raw_bytes=raw,
        )

    @property
    def size_label(self) -> str:
        return f"{self.size_bytes / 1024:.2f} KB"


@dataclass
class WidgetState:
    selected: UploadedDocument | None = None
    position: str | None = None
    job_requirements: str | None = None
    in_flight: bool = False
    status_text: str = "Analyze CV"
    error: str | None = None
    result_text: str | None = None
    result_html: str | None = None

    def clear_results(self) -> None:
        self.error = None
        self.result_text = None
        self.result_html = None
