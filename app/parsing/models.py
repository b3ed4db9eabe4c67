from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

DOCUMENT_FORMATS = ("pdf", "docx", "text")


class DecodeResult(BaseModel):
    success: bool = True
    text: str
    format: str
    warnings: list[str] = Field(default_factory=list)
    details: dict[str, Any] = Field(default_factory=dict)

    @field_validator("format")
    @classmethod
    def _validate_format(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in DOCUMENT_FORMATS:
            raise ValueError(f"format must be one of: {', '.join(DOCUMENT_FORMATS)}")
        return normalized
