from __future__ import annotations

import io
import logging
import re

from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

MIN_CV_TEXT_CHARS = 50
PDF_MAGIC = b"%PDF"


class CVParseError(ValueError):
    """Raised when a CV cannot be turned into usable text."""


def _normalize(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    # collapse excessive spaces
    text = re.sub(r"[ \t]+", " ", text)
    # collapse 3+ newlines into 2
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def is_pdf(file_bytes: bytes) -> bool:
    return file_bytes[:1024].lstrip().startswith(PDF_MAGIC)


def extract_cv_text(file_bytes: bytes) -> str:
    """Extract normalized text from a PDF CV."""
    if not file_bytes or not is_pdf(file_bytes):
        raise CVParseError("CV must be a PDF file.")

    try:
        reader = PdfReader(io.BytesIO(file_bytes))
        pages = [p.extract_text() or "" for p in reader.pages]
    except (PdfReadError, ValueError) as e:
        logger.warning(f"Could not read PDF: {e}")
        raise CVParseError("Could not read the CV PDF.") from e

    text = _normalize("\n".join(pages))
    if len(text) < MIN_CV_TEXT_CHARS:
        # 50 chars is a sanity threshold; scanned PDFs usually land here
        raise CVParseError("Could not extract enough text from the CV.")
    return text
