from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

SourceType = Literal["pdf", "docx", "txt"]


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cv_text: StrictStr = Field(alias="cvText", min_length=1)
    position: StrictStr | None = None
    job_requirements: StrictStr | None = Field(default=None, alias="jobRequirements")

    @field_validator("cv_text")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("cvText must not be blank")
        return value


class AnalysisResult(BaseModel):
    text: str


class ErrorResponse(BaseModel):
    error: str
    code: str | None = None


class FormatRequest(BaseModel):
    text: str = ""


class FormatResponse(BaseModel):
    html: str


class ExtractTextResponse(BaseModel):
    filename: str
    source_type: SourceType
    text: str
    pages: int | None = None
    warnings: list[str] = Field(default_factory=list)
