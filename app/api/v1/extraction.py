from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile, status

from app.core.config import settings
from app.core.errors import DecoderError, ExtractionError, sanitize_error_message
from app.core.rate_limit import extraction_rate_limit
from app.parsing.models import DecodeResult
from app.parsing.parse import decode_document, detect_format
from app.schemas.extraction import ExtractedSource, ExtractPageRequest
from app.sources import PageContext, extract_from_page, fetch_page

router = APIRouter()

UPLOAD_CHUNK_BYTES = 1024 * 64


async def _read_upload(file: UploadFile) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {settings.max_upload_bytes // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/extract/document", response_model=DecodeResult)
@extraction_rate_limit()
async def extract_document(
    request: Request,
    file: UploadFile = File(...),
    format: str | None = Form(default=None),
):
    _ = request
    filename = file.filename or "uploaded-file"
    try:
        format_tag = format or detect_format(filename, file.content_type)
        payload = await _read_upload(file)
        result = decode_document(payload, format_tag)
    except DecoderError as exc:
        raise HTTPException(status_code=exc.status_code, detail=sanitize_error_message(str(exc))) from exc
    result.details["filename"] = filename
    return result


@router.post("/extract/page", response_model=ExtractedSource)
@extraction_rate_limit()
async def extract_page(request: Request, payload: ExtractPageRequest):
    _ = request
    try:
        if payload.html and payload.html.strip():
            page = PageContext(url=payload.url.strip(), html=payload.html)
        else:
            page = fetch_page(payload.url)
        return extract_from_page(page)
    except ExtractionError as exc:
        raise HTTPException(status_code=exc.status_code, detail=sanitize_error_message(str(exc))) from exc
