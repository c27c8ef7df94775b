"""Text extraction for uploaded files and legislation pages.

All patterns are pre-compiled.  Extraction is best-effort: the goal is text
good enough for keyword retrieval, not a faithful rendering.
"""

from __future__ import annotations

import html
import io
import logging
import re
import zipfile

import docx
import fitz
from docx.opc.exceptions import PackageNotFoundError

from thaina_juridico.domain.exceptions import ExtractionError

logger = logging.getLogger(__name__)

MAX_STORED_CHARS = 100_000
PREVIEW_CHARS = 200
LEGACY_WORD_PLACEHOLDER = "[Documento Word - extração automática limitada]"

# ── Compiled patterns ───────────────────────────────────────────────────────

_WHITESPACE_RE = re.compile(r"\s+")
_SCRIPT_RE = re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)
_STYLE_RE = re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


# ── Uploaded files ──────────────────────────────────────────────────────────


def _pdf_text(data: bytes) -> str:
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            return "\n\n".join(page.get_text() for page in doc)
    except (RuntimeError, ValueError) as exc:
        raise ExtractionError(f"Could not read PDF: {exc}") from exc


def _docx_text(data: bytes) -> str:
    try:
        document = docx.Document(io.BytesIO(data))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as exc:
        raise ExtractionError(f"Could not read DOCX: {exc}") from exc
    return "\n".join(p.text for p in document.paragraphs)


def extract_text(extension: str, data: bytes) -> str:
    """Return collapsed plain text for a file of the given extension.

    Unknown extensions yield an empty string.
    """
    extension = extension.lower()
    if extension == "pdf":
        raw = _pdf_text(data)
    elif extension in ("txt", "md"):
        raw = data.decode("utf-8", errors="replace")
    elif extension == "docx":
        raw = _docx_text(data)
    elif extension == "doc":
        return LEGACY_WORD_PLACEHOLDER
    else:
        logger.info("No extractor for .%s files", extension or "<none>")
        return ""
    return collapse_whitespace(raw)


# ── Legislation pages ───────────────────────────────────────────────────────


def clean_html(page: str) -> str:
    """Strip scripts, styles and tags, collapse whitespace, decode entities."""
    text = _SCRIPT_RE.sub("", page)
    text = _STYLE_RE.sub("", text)
    text = _TAG_RE.sub(" ", text)
    text = collapse_whitespace(text)
    # entities decode after collapsing, so &nbsp; still needs folding
    return html.unescape(text).replace("\xa0", " ")
