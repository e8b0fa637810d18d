"""PDF-to-text extraction and cleanup."""

from __future__ import annotations

import io
import re

from pypdf import PdfReader

from arxiv_mcp.errors import ExtractionError

_WS_RE = re.compile(r"\s+")
_EOL_RE = re.compile(r"\r\n|\n|\r")


def extract_text(data: bytes) -> str:
    """Return the text of every page of the PDF in *data*, joined by newlines.

    Raises:
        ExtractionError: the payload is not a readable PDF (corrupt, encrypted
            with a non-empty password, unsupported).
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted and not reader.decrypt(""):
            raise ExtractionError("Failed to extract text from PDF: document is encrypted")
        pages = [page.extract_text() or "" for page in reader.pages]
    except ExtractionError:
        raise
    except Exception as e:
        raise ExtractionError(f"Failed to extract text from PDF: {e}") from e
    return "\n".join(pages)


def clean_text(text: str) -> str:
    """Collapse whitespace runs to single spaces, normalize line breaks, trim.

    The first pass also flattens newlines, so paragraph breaks from the PDF
    do not survive.
    """
    flattened = _WS_RE.sub(" ", text)
    return _EOL_RE.sub("\n", flattened).strip()
