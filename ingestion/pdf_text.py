"""
PDF Text Source

Extracts plain text from an uploaded judgment PDF, entirely in memory, and
enforces the minimum-content precondition before any completion call.
"""

from __future__ import annotations

import io
import logging

import pdfplumber

from shared.errors import ExtractionFailure, InsufficientContent

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 100


def extract_text_from_pdf(data: bytes) -> str:
    """
    Extract the text of every page of a PDF.

    Args:
        data: Raw PDF bytes

    Returns:
        Page texts joined with newlines (pages without text contribute "")

    Raises:
        ExtractionFailure: If the bytes are empty or cannot be parsed as a PDF
    """
    if not data:
        raise ExtractionFailure()

    try:
        pages = []
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            for page in pdf.pages:
                text = page.extract_text() or ""  # avoid None
                pages.append(text.strip())
    except Exception as e:
        logger.error(f"Error extracting text from PDF ({len(data)} bytes): {e}")
        raise ExtractionFailure() from e

    text = "\n".join(pages)
    logger.info(f"Extracted {len(text)} chars from {len(pages)} page(s)")
    return text


def ensure_sufficient_text(text: str, min_length: int = MIN_TEXT_LENGTH) -> str:
    """
    Check that extracted text is worth analysing.

    Raises:
        InsufficientContent: If the trimmed text is shorter than ``min_length``
    """
    if not text or len(text.strip()) < min_length:
        logger.warning(
            f"Insufficient text extracted: {len(text.strip()) if text else 0} chars "
            f"(minimum {min_length})"
        )
        raise InsufficientContent()
    return text
