"""
Artifact: planner_service/study_planner/services/document_text_service.py
Purpose: Decodes uploaded documents, dispatches them to the matching extractor, and bounds text size.
Author: Study Planner Team
Created: 2026-10-19
Revised:
- 2026-10-19: Added inline pasted-text guard used by the generate-plan workflow. (Study Planner Team)
Preconditions:
- Request payload uses ParseDocumentRequest schema; files are base64 strings (data URLs accepted).
Inputs:
- Acceptable: PDF, DOCX, DOC, PPTX and plain-text family uploads up to MAX_UPLOAD_BYTES.
- Unacceptable: Missing file/fileName, invalid base64, oversize payloads, unsupported formats.
Postconditions:
- Returns ExtractedText whose content never exceeds the ceiling plus the truncation marker.
Returns:
- `ExtractedText` dataclass instances.
Errors/Exceptions:
- InvalidRequestError / UnsupportedDocumentError / BinaryContentError for client-correctable input.
"""

import base64
import binascii
import os
import re
from dataclasses import dataclass
from typing import Callable, Optional

from ..core.errors import BinaryContentError, InvalidRequestError, UnsupportedDocumentError
from ..core.logging import get_logger
from ..schemas.requests import ParseDocumentRequest
from .document_extractors import (
    WARNING_MARKER,
    extract_doc_text,
    extract_docx_text,
    extract_pdf_text,
    extract_plain_text,
    extract_pptx_text,
)

logger = get_logger("studyplanner.documents")

MAX_DOCUMENT_CHARS = 100_000
DOCUMENT_TRUNCATION_MARKER = "\n\n[... content truncated ...]"

MAX_INLINE_CHARS = 50_000
INLINE_TRUNCATION_MARKER = "\n\n[... content truncated for length ...]"

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
BINARY_SAMPLE_CHARS = 1000
_BINARY_CHAR_RE = re.compile(r"[\x00-\x08\x0E-\x1F\x7F-\x9F]")

FORMAT_PDF = "pdf"
FORMAT_DOCX = "docx"
FORMAT_DOC = "doc"
FORMAT_PPTX = "pptx"
FORMAT_TEXT = "text"

_MIME_FORMATS = {
    "application/pdf": FORMAT_PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": FORMAT_DOCX,
    "application/msword": FORMAT_DOC,
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": FORMAT_PPTX,
    "application/json": FORMAT_TEXT,
    "application/xml": FORMAT_TEXT,
}

_EXTENSION_FORMATS = {
    ".pdf": FORMAT_PDF,
    ".docx": FORMAT_DOCX,
    ".doc": FORMAT_DOC,
    ".pptx": FORMAT_PPTX,
    ".txt": FORMAT_TEXT,
    ".md": FORMAT_TEXT,
    ".csv": FORMAT_TEXT,
    ".json": FORMAT_TEXT,
    ".xml": FORMAT_TEXT,
    ".html": FORMAT_TEXT,
    ".htm": FORMAT_TEXT,
}

_EXTRACTORS: dict[str, Callable[[bytes], str]] = {
    FORMAT_PDF: extract_pdf_text,
    FORMAT_DOCX: extract_docx_text,
    FORMAT_DOC: extract_doc_text,
    FORMAT_PPTX: extract_pptx_text,
    FORMAT_TEXT: extract_plain_text,
}


@dataclass
class UploadedDocument:
    data: bytes
    declared_mime_type: str
    file_name: str


@dataclass
class ExtractedText:
    content: str
    truncated: bool = False
    warning: Optional[str] = None


def resolve_document_format(mime_type: Optional[str], file_name: Optional[str]) -> Optional[str]:
    """Pick a format from the declared MIME type first, then the file extension."""
    mime = (mime_type or "").split(";", 1)[0].strip().lower()
    if mime in _MIME_FORMATS:
        return _MIME_FORMATS[mime]
    if mime.startswith("text/"):
        return FORMAT_TEXT

    extension = os.path.splitext((file_name or "").strip().lower())[1]
    return _EXTENSION_FORMATS.get(extension)


def truncate_text(text: str, ceiling: int, marker: str) -> tuple[str, bool]:
    if len(text) <= ceiling:
        return text, False
    return text[:ceiling] + marker, True


def decode_upload(base64_data: str) -> bytes:
    """Decode raw base64 or data-URL style payloads."""
    data = (base64_data or "").strip()
    if "," in data and data.lower().startswith("data:"):
        data = data.split(",", 1)[1]
    data = re.sub(r"\s+", "", data)
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidRequestError("File content is not valid base64") from e


def extract_document_text(document: UploadedDocument) -> ExtractedText:
    """Run the matching extractor and apply the document character ceiling."""
    doc_format = resolve_document_format(document.declared_mime_type, document.file_name)
    if doc_format is None:
        raise UnsupportedDocumentError("File format is not supported for extraction")

    logger.debug(
        "Extracting %r as %s (%d bytes, declared type %r)",
        document.file_name,
        doc_format,
        len(document.data),
        document.declared_mime_type,
    )
    text = _EXTRACTORS[doc_format](document.data)

    warning = text if text.startswith(WARNING_MARKER) else None
    if warning:
        logger.warning("No usable text extracted from %r (%s)", document.file_name, doc_format)
        return ExtractedText(content=text, truncated=False, warning=warning)

    content, truncated = truncate_text(text, MAX_DOCUMENT_CHARS, DOCUMENT_TRUNCATION_MARKER)
    if truncated:
        logger.info("Document %r truncated from %d to %d chars", document.file_name, len(text), MAX_DOCUMENT_CHARS)
    return ExtractedText(content=content, truncated=truncated)


def parse_document_workflow(req: ParseDocumentRequest, route_path: str) -> ExtractedText:
    """Validate, decode, and extract a single uploaded document."""
    logger.info(
        "POST %s | fileName=%r | fileType=%r | payload_len=%d",
        route_path,
        req.fileName,
        req.fileType,
        len(req.file or ""),
    )

    if not req.file or not req.fileName:
        raise InvalidRequestError("File and file name are required")

    data = decode_upload(req.file)
    if len(data) > MAX_UPLOAD_BYTES:
        raise InvalidRequestError("File is too large. Maximum size is 10MB.")

    result = extract_document_text(
        UploadedDocument(data=data, declared_mime_type=req.fileType or "", file_name=req.fileName)
    )
    logger.info(
        "Extracted %d chars from %r | truncated=%s | warning=%s",
        len(result.content),
        req.fileName,
        result.truncated,
        bool(result.warning),
    )
    return result


def prepare_inline_text(text: Optional[str]) -> ExtractedText:
    """
    Bound pasted document text and reject binary data sent as text.

    The first BINARY_SAMPLE_CHARS characters are checked for control bytes that do not
    occur in real text (raw PDF/Office bytes pasted or read as a string).
    """
    content, truncated = truncate_text(text or "", MAX_INLINE_CHARS, INLINE_TRUNCATION_MARKER)
    if truncated:
        logger.info("Inline file content truncated from %d to %d chars", len(text or ""), MAX_INLINE_CHARS)

    if content and _BINARY_CHAR_RE.search(content[:BINARY_SAMPLE_CHARS]):
        raise BinaryContentError(
            "The file content looks like a PDF or other binary data. "
            "Please use a text file (.txt, .md, .csv) or paste the content into the prompt field."
        )
    return ExtractedText(content=content, truncated=truncated)
