"""
Artifact: planner_service/study_planner/services/document_extractors.py
Purpose: Converts raw uploaded document bytes (PDF, DOCX, DOC, PPTX, plain text) into best-effort plain text.
Author: Study Planner Team
Created: 2026-10-19
Revised:
- 2026-10-19: Added content-stream, OOXML package, and printable-run extraction paths. (Study Planner Team)
Preconditions:
- Input is the decoded byte buffer of a single uploaded file.
Inputs:
- Acceptable: Any byte buffer, including empty, truncated, or mislabelled files.
- Unacceptable: None; every buffer yields either text or an in-band warning string.
Postconditions:
- Returns readable text, or a warning string starting with WARNING_MARKER when nothing usable was found.
Returns:
- Plain text string (never None).
Errors/Exceptions:
- None raised. Library failures are logged and the next extraction strategy is tried.
"""

import html
import io
import re
import zipfile
import zlib
from xml.etree import ElementTree

import fitz  # pymupdf
from docx import Document as DocxDocument

from ..core.logging import get_logger

logger = get_logger("studyplanner.documents")

WARNING_MARKER = "⚠️"

PDF_WARNING = (
    f"{WARNING_MARKER} Could not extract readable text from this PDF. "
    "Please copy the content manually or use a text file (.txt, .md)."
)
DOCX_WARNING = f"{WARNING_MARKER} Could not extract text from this Word document. Please copy the content manually."
DOC_WARNING = (
    f"{WARNING_MARKER} Legacy .doc format. "
    "Please convert it to .docx or copy the content manually."
)
PPTX_WARNING = f"{WARNING_MARKER} Could not extract text from this presentation. Please copy the content manually."
TEXT_WARNING = f"{WARNING_MARKER} This file does not contain any text."

MIN_PDF_CHARS = 50
MIN_OOXML_CHARS = 20
MIN_DOC_CHARS = 20
PDF_PRINTABLE_RUN = 20
DOC_PRINTABLE_RUN = 15

# Latin letters (incl. Latin-1 accents), digits, whitespace and light punctuation.
_PRINTABLE_CLASS = r"[A-Za-zÀ-ÿ0-9\s.,;:!?()\-]"

_STREAM_RE = re.compile(rb"(?<!end)stream\r?\n(.*?)endstream", re.DOTALL)
_TEXT_BLOCK_RE = re.compile(r"\bBT\b(.*?)\bET\b", re.DOTALL)
_TEXT_OPERATOR_RE = re.compile(
    r"\(((?:\\.|[^\\)])*)\)\s*Tj"
    r"|\[((?:\\.|[^\]\\])*)\]\s*TJ",
    re.DOTALL,
)
_ARRAY_STRING_RE = re.compile(r"\(((?:\\.|[^\\)])*)\)", re.DOTALL)
_PDF_ESCAPE_RE = re.compile(r"\\([nrtbf()\\]|[0-7]{1,3}|\r\n|\n|\r)")
_PDF_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "(": "(",
    ")": ")",
    "\\": "\\",
}

_DOCX_RUN_RE = re.compile(r"<w:t(?:\s[^>]*)?>([^<]*)</w:t>")
_DOCX_PARAGRAPH_RE = re.compile(r"<w:p(?:\s[^>]*)?>(.*?)</w:p>", re.DOTALL)
_PPTX_RUN_RE = re.compile(r"<a:t(?:\s[^>]*)?>([^<]*)</a:t>")
_SLIDE_NAME_RE = re.compile(r"^ppt/slides/slide(\d+)\.xml$")
_DRAWINGML_TEXT_TAG = "{http://schemas.openxmlformats.org/drawingml/2006/main}t"


def _decode_tolerant(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _printable_runs(text: str, min_length: int) -> list[str]:
    """Return runs of readable characters at least `min_length` long (after trimming)."""
    pattern = re.compile(_PRINTABLE_CLASS + "{%d,}" % min_length)
    runs = []
    for match in pattern.findall(text or ""):
        run = match.strip()
        if len(run) >= min_length:
            runs.append(run)
    return runs


# ── PDF ───────────────────────────────────────────────────────────────────────


def _decode_pdf_string(raw: str) -> str:
    """Unescape a PDF literal string body (the part between the parentheses)."""

    def _replace(match: re.Match) -> str:
        token = match.group(1)
        if token in _PDF_ESCAPES:
            return _PDF_ESCAPES[token]
        if token[0] in "\r\n":
            return ""
        return chr(int(token, 8) & 0xFF)

    return _PDF_ESCAPE_RE.sub(_replace, raw)


def _pdf_content_sources(data: bytes) -> list[str]:
    """The raw file text plus every stream that inflates with zlib (FlateDecode)."""
    sources = [_decode_tolerant(data)]
    for match in _STREAM_RE.finditer(data):
        try:
            inflated = zlib.decompressobj().decompress(match.group(1))
        except zlib.error:
            continue
        if inflated:
            sources.append(inflated.decode("latin-1"))
    return sources


def _extract_text_operators(source: str) -> list[str]:
    """Collect Tj / TJ operands inside BT ... ET blocks, in drawing order."""
    lines = []
    for block in _TEXT_BLOCK_RE.findall(source):
        for single, array in _TEXT_OPERATOR_RE.findall(block):
            if array:
                text = "".join(_decode_pdf_string(part) for part in _ARRAY_STRING_RE.findall(array))
            else:
                text = _decode_pdf_string(single)
            if text.strip():
                lines.append(text)
    return lines


def _extract_pdf_with_pymupdf(data: bytes) -> str:
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            pages = [page.get_text("text") or "" for page in doc]
    except Exception as e:
        logger.debug("PyMuPDF could not read PDF (%d bytes): %s", len(data), e)
        return ""
    return "\n".join(page.strip() for page in pages if page.strip()).strip()


def extract_pdf_text(data: bytes) -> str:
    """
    Extract PDF text.

    Order of attempts:
      1. PyMuPDF page text.
      2. Tj/TJ operators inside BT/ET blocks of raw and inflated content streams.
      3. Printable-character runs of at least PDF_PRINTABLE_RUN characters.
    Fewer than MIN_PDF_CHARS characters yields PDF_WARNING.
    """
    text = _extract_pdf_with_pymupdf(data)
    if not text:
        parts = []
        for source in _pdf_content_sources(data):
            parts.extend(_extract_text_operators(source))
        if not parts:
            logger.info("No PDF text operators found; falling back to printable-run scan")
            parts = _printable_runs(_decode_tolerant(data), PDF_PRINTABLE_RUN)
        text = "\n".join(parts).strip()

    if len(text) < MIN_PDF_CHARS:
        return PDF_WARNING
    return text


# ── DOCX ──────────────────────────────────────────────────────────────────────


def _extract_docx_package(data: bytes) -> str:
    document = DocxDocument(io.BytesIO(data))
    parts = [p.text.strip() for p in document.paragraphs if p.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                parts.append(" | ".join(cells))
    return "\n\n".join(parts)


def _extract_docx_markup(text: str) -> str:
    """Scan raw WordprocessingML for paragraphs, falling back to flat text runs."""
    paragraphs = []
    for body in _DOCX_PARAGRAPH_RE.findall(text):
        para = "".join(_DOCX_RUN_RE.findall(body)).strip()
        if para:
            paragraphs.append(html.unescape(para))
    if paragraphs:
        return "\n\n".join(paragraphs)

    runs = [html.unescape(run) for run in _DOCX_RUN_RE.findall(text) if run.strip()]
    return " ".join(runs)


def extract_docx_text(data: bytes) -> str:
    try:
        result = _extract_docx_package(data)
    except Exception as e:
        logger.warning("python-docx could not open document; scanning raw markup: %s", e)
        result = _extract_docx_markup(_decode_tolerant(data))

    if len(result) < MIN_OOXML_CHARS:
        return DOCX_WARNING
    return result


# ── DOC (legacy binary) ───────────────────────────────────────────────────────


def extract_doc_text(data: bytes) -> str:
    runs = _printable_runs(_decode_tolerant(data), DOC_PRINTABLE_RUN)
    result = "\n".join(runs)
    if len(result) < MIN_DOC_CHARS:
        return DOC_WARNING
    return result


# ── PPTX ──────────────────────────────────────────────────────────────────────


def _extract_pptx_package(data: bytes) -> str:
    lines = []
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        slides = []
        for name in archive.namelist():
            match = _SLIDE_NAME_RE.match(name)
            if match:
                slides.append((int(match.group(1)), name))

        for _, name in sorted(slides):
            root = ElementTree.fromstring(archive.read(name))
            for node in root.iter(_DRAWINGML_TEXT_TAG):
                if node.text and node.text.strip():
                    lines.append(node.text)
    return "\n".join(lines)


def extract_pptx_text(data: bytes) -> str:
    try:
        result = _extract_pptx_package(data)
    except Exception as e:
        logger.warning("Could not open presentation package; scanning raw markup: %s", e)
        runs = _PPTX_RUN_RE.findall(_decode_tolerant(data))
        result = "\n".join(html.unescape(run) for run in runs if run.strip())

    if len(result) < MIN_OOXML_CHARS:
        return PPTX_WARNING
    return result


# ── Plain text family ─────────────────────────────────────────────────────────


def extract_plain_text(data: bytes) -> str:
    text = data.decode("utf-8-sig", errors="replace").replace("\r\n", "\n")
    if not text.strip():
        return TEXT_WARNING
    return text
