"""
PETICAO4AI Ingestion

Turns uploaded judgment PDFs into plain text for analysis.
"""

from .pdf_text import MIN_TEXT_LENGTH, ensure_sufficient_text, extract_text_from_pdf

__all__ = ["MIN_TEXT_LENGTH", "ensure_sufficient_text", "extract_text_from_pdf"]
