from __future__ import annotations

import re

from pydantic import BaseModel

_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
_PHONE_RE = re.compile(r"\+?\d[\d\s().-]{7,}\d")
_MAX_MESSAGE_CHARS = 300


class ScoringServiceError(RuntimeError):
    code = "service_error"
    status_code = 500

    def __init__(self, message: str, *, code: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class DecoderError(ScoringServiceError):
    """Raised when a binary document cannot be turned into plain text."""

    code = "decoder_error"
    status_code = 400


class ExtractionError(ScoringServiceError):
    """Raised when no usable requirement text can be pulled from a page."""

    code = "extraction_error"
    status_code = 422


class InvalidMessageError(ScoringServiceError):
    code = "invalid_message"
    status_code = 400


class ErrorInfo(BaseModel):
    code: str
    message: str


def sanitize_error_message(message: str) -> str:
    """Strip contact details out of error text before it leaves the service."""
    cleaned = _EMAIL_RE.sub("[email]", message or "")
    cleaned = _PHONE_RE.sub("[phone]", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > _MAX_MESSAGE_CHARS:
        cleaned = cleaned[: _MAX_MESSAGE_CHARS - 3].rstrip() + "..."
    return cleaned


def error_info_from_exception(exc: BaseException) -> ErrorInfo:
    if isinstance(exc, ScoringServiceError):
        code = exc.code
    elif isinstance(exc, ValueError):
        code = "invalid_input"
    else:
        code = "internal_error"
    return ErrorInfo(code=code, message=sanitize_error_message(str(exc)) or exc.__class__.__name__)
