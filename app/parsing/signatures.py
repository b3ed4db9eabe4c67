from __future__ import annotations

from io import BytesIO
from zipfile import BadZipFile, ZipFile

from app.core.errors import DecoderError

CONTENT_TYPE_FORMAT_HINTS = {
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "text/plain": "text",
    "text/markdown": "text",
}
EXTENSION_FORMATS = {
    "pdf": "pdf",
    "docx": "docx",
    "txt": "text",
    "text": "text",
    "md": "text",
}

PDF_MAGIC = b"%PDF-"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")


def _is_zip_payload(content: bytes) -> bool:
    return any(content.startswith(prefix) for prefix in ZIP_MAGICS)


def _zip_has_paths(content: bytes, prefixes: tuple[str, ...]) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            names = archive.namelist()
    except BadZipFile:
        return False
    return any(name.startswith(prefixes) for name in names)


def is_probably_text(content: bytes) -> bool:
    if not content:
        return False
    sample = content[:4096]
    if sample.startswith((b"\xff\xfe", b"\xfe\xff")):
        return True
    if b"\x00" in sample:
        return False
    printable = sum(1 for byte in sample if byte in (9, 10, 13) or byte >= 32)
    return (printable / len(sample)) >= 0.75


def normalize_format_tag(format_tag: str | None) -> str:
    tag = (format_tag or "").strip().lower().lstrip(".")
    resolved = EXTENSION_FORMATS.get(tag) or CONTENT_TYPE_FORMAT_HINTS.get(tag)
    if resolved is None:
        if tag == "doc":
            raise DecoderError("Legacy .doc is not supported. Convert to .docx.")
        raise DecoderError(f"Unsupported document format '{tag or 'unknown'}'. Use .pdf, .docx, or .txt files.")
    return resolved


def validate_signature(content: bytes, document_format: str) -> None:
    if document_format == "pdf":
        if not content.startswith(PDF_MAGIC):
            raise DecoderError("File signature does not match .pdf content.")
        return
    if document_format == "docx":
        if not _is_zip_payload(content) or not _zip_has_paths(content, ("word/",)):
            raise DecoderError("File signature does not match .docx content.")
        return
    if not is_probably_text(content):
        raise DecoderError("File signature does not match text content.")
