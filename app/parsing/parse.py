from __future__ import annotations

import codecs
import logging
import re
from io import BytesIO
from pathlib import Path
from typing import Any
from zipfile import BadZipFile, ZipFile

import defusedxml.ElementTree as ET
from docx import Document
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from app.core.errors import DecoderError

from .models import DecodeResult
from .signatures import CONTENT_TYPE_FORMAT_HINTS, EXTENSION_FORMATS, normalize_format_tag, validate_signature

logger = logging.getLogger(__name__)

_TEXT_ENCODINGS = ("utf-8", "latin-1")
_UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)


def _normalize_extracted_text(text: str) -> str:
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    normalized = re.sub(r"[ \t]{2,}", " ", normalized)
    normalized = re.sub(r"\n{3,}", "\n\n", normalized)
    return normalized.strip()


def _decode_text(content: bytes, details: dict[str, Any]) -> str:
    # utf-16 only with a BOM.
    encodings = ("utf-16",) if content.startswith(_UTF16_BOMS) else _TEXT_ENCODINGS
    for encoding in encodings:
        try:
            text = content.decode(encoding)
        except UnicodeDecodeError:
            continue
        details["encoding"] = encoding
        return text.lstrip("\ufeff")
    raise DecoderError("Unable to decode text file.")


def _decode_pdf(content: bytes, details: dict[str, Any], warnings: list[str]) -> str:
    try:
        reader = PdfReader(BytesIO(content))
        page_chunks: list[str] = []
        for index, page in enumerate(reader.pages, start=1):
            page_text = page.extract_text() or ""
            if page_text.strip():
                page_chunks.append(page_text)
            else:
                warnings.append(f"Page {index} has no extractable text.")
        details["pages"] = len(reader.pages)
    except (PdfReadError, ValueError, KeyError) as exc:
        raise DecoderError("Unable to extract text from this PDF file.") from exc
    return "\n\n".join(page_chunks)


def _extract_docx_text_fallback(content: bytes) -> tuple[str, int]:
    with ZipFile(BytesIO(content)) as archive:
        raw = archive.read("word/document.xml")
    root = ET.fromstring(raw)
    paragraphs: list[str] = []
    paragraph_count = 0
    for paragraph in root.iter():
        if not paragraph.tag.endswith("}p"):
            continue
        paragraph_count += 1
        texts = [node.text for node in paragraph.iter() if node.tag.endswith("}t") and node.text]
        joined = "".join(texts).strip()
        if joined:
            paragraphs.append(joined)
    return "\n".join(paragraphs), paragraph_count


def _decode_docx(content: bytes, details: dict[str, Any], warnings: list[str]) -> str:
    try:
        document = Document(BytesIO(content))
        paragraphs = [paragraph.text for paragraph in document.paragraphs if paragraph.text.strip()]
        details["paragraphs"] = len(document.paragraphs)
        details["tables"] = len(document.tables)
        details["parser"] = "python-docx"
        return "\n".join(paragraphs)
    except Exception as exc:
        logger.warning("docx_parser_fallback reason=%s", exc.__class__.__name__)
        warnings.append("Primary DOCX parser failed; used XML fallback.")

    try:
        text, paragraph_count = _extract_docx_text_fallback(content)
    except (BadZipFile, KeyError, ET.ParseError) as exc:
        raise DecoderError("Unable to extract text from this Word document.") from exc
    details["paragraphs"] = paragraph_count
    details["parser"] = "zipxml-fallback"
    return text


def decode_document(payload: bytes, format_tag: str | None) -> DecodeResult:
    """Turn an uploaded binary document into plain text.

    Raises DecoderError for unsupported formats, signature mismatches,
    undecodable payloads and documents without any extractable text.
    """
    document_format = normalize_format_tag(format_tag)
    if not payload:
        raise DecoderError("Uploaded file is empty.")
    validate_signature(payload, document_format)

    details: dict[str, Any] = {"bytes": len(payload)}
    warnings: list[str] = []
    if document_format == "pdf":
        raw_text = _decode_pdf(payload, details, warnings)
    elif document_format == "docx":
        raw_text = _decode_docx(payload, details, warnings)
    else:
        raw_text = _decode_text(payload, details)

    text = _normalize_extracted_text(raw_text)
    if not text:
        raise DecoderError("No extractable text was found in this file.")
    details["characters"] = len(text)
    details["words"] = len(text.split())
    logger.info("document_decoded format=%s chars=%d", document_format, len(text))
    return DecodeResult(success=True, text=text, format=document_format, warnings=warnings, details=details)


def detect_format(filename: str | None, content_type: str | None = None) -> str:
    """Resolve a document format from a filename, falling back to the content type."""
    name = (filename or "").strip()
    extension = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    if extension in EXTENSION_FORMATS:
        return EXTENSION_FORMATS[extension]
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type in CONTENT_TYPE_FORMAT_HINTS:
        return CONTENT_TYPE_FORMAT_HINTS[media_type]
    return normalize_format_tag(extension)


def parse_document(file_path: str | Path) -> DecodeResult:
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Input document not found: '{path}'")
    result = decode_document(path.read_bytes(), detect_format(path.name))
    result.details["filename"] = path.name
    return result
