from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, model_validator

PORTALS = ("linkedin", "indeed", "naukri", "greenhouse", "lever", "generic")


class ExtractedSource(BaseModel):
    success: bool = True
    text: str
    title: str = ""
    company: str = ""
    location: str = ""
    portal: str = "generic"
    url: str = ""
    extracted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: dict[str, Any] = Field(default_factory=dict)


class ExtractPageRequest(BaseModel):
    url: str = Field(default="", max_length=2048)
    html: str | None = Field(default=None, max_length=2_000_000)

    @model_validator(mode="after")
    def _require_url_or_html(self) -> "ExtractPageRequest":
        if not self.url.strip() and not (self.html or "").strip():
            raise ValueError("Either url or html is required.")
        return self
