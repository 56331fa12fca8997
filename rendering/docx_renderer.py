"""
DOCX Pleading Renderer

Renders the execution pleading of an AnalysisRecord into a Word document
ready for review and filing:

  - Header: centred bold title referencing art. 789 CLT
  - Body: one paragraph per line of the pleading, fixed spacing after each
  - Footer: centred italic disclaimer in a small muted font
  - Default style: Calibri 12pt for the whole document

The filename is derived from the process number and the current instant so
successive exports never collide.
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, RGBColor

from shared.models import PROCESS_NUMBER_FALLBACK, AnalysisRecord

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

HEADER_TITLE = "PETIÇÃO INICIAL DE EXECUÇÃO – art. 789 CLT"
DISCLAIMER_TEXT = (
    "Este documento foi gerado por IA – o conteúdo é preliminar e deve ser "
    "revisado pelo advogado antes do protocolo. O SaaS não constitui consultoria jurídica."
)

BODY_FONT_NAME = "Calibri"
BODY_FONT_SIZE = Pt(12)
PARAGRAPH_SPACING_AFTER = Pt(10)  # 200 twips
FOOTER_FONT_SIZE = Pt(8)
FOOTER_COLOR = RGBColor(0x80, 0x80, 0x80)

FILENAME_PREFIX = "PeticaoExecucao"
MISSING_PROCESS_TAG = "s-n"


@dataclass(frozen=True)
class RenderedDocument:
    """A rendered .docx artifact ready for download."""

    content: bytes
    filename: str
    media_type: str = DOCX_MEDIA_TYPE

    def save(self, directory: Union[str, Path] = ".") -> Path:
        """Write the document into ``directory`` under its generated filename."""
        path = Path(directory) / self.filename
        path.write_bytes(self.content)
        logger.info(f"Saved {path} ({len(self.content)} bytes)")
        return path


def process_tag(process_number: Optional[str]) -> str:
    """
    Digits of the process number, or 's-n' when it is absent or 'N/A'.

    A present number without digits yields an empty tag.
    """
    if not process_number or process_number == PROCESS_NUMBER_FALLBACK:
        return MISSING_PROCESS_TAG
    return re.sub(r"[^0-9]", "", process_number)


def filesystem_timestamp(now: Optional[datetime] = None) -> str:
    """
    UTC ISO-8601 instant (millisecond precision, 'Z' suffix) with ':' and '.'
    replaced by '-', e.g. 2024-03-05T14-07-09-123Z.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    iso = now.strftime("%Y-%m-%dT%H:%M:%S") + f".{now.microsecond // 1000:03d}Z"
    return re.sub(r"[:.]", "-", iso)


def build_filename(process_number: Optional[str], now: Optional[datetime] = None) -> str:
    return f"{FILENAME_PREFIX}_{process_tag(process_number)}_{filesystem_timestamp(now)}.docx"


class DocumentRenderer:
    """Builds the execution pleading document from an AnalysisRecord."""

    def build_document(self, record: AnalysisRecord):
        """Assemble the python-docx Document (not yet serialized)."""
        doc = Document()

        # Default style for the whole document
        style = doc.styles["Normal"]
        style.font.name = BODY_FONT_NAME
        style.font.size = BODY_FONT_SIZE

        section = doc.sections[0]

        # Header
        header_paragraph = section.header.paragraphs[0]
        header_paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = header_paragraph.add_run(HEADER_TITLE)
        run.bold = True

        # Body
        for text in record.pleading_paragraphs():
            paragraph = doc.add_paragraph(text)
            paragraph.paragraph_format.space_after = PARAGRAPH_SPACING_AFTER

        # Footer
        footer_paragraph = section.footer.paragraphs[0]
        footer_paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = footer_paragraph.add_run(DISCLAIMER_TEXT)
        run.italic = True
        run.font.size = FOOTER_FONT_SIZE
        run.font.color.rgb = FOOTER_COLOR

        return doc

    def render(self, record: AnalysisRecord, now: Optional[datetime] = None) -> RenderedDocument:
        """
        Render a record into a .docx artifact.

        Args:
            record: Analysis record whose pleading is rendered
            now: Instant used in the filename (current UTC time when None)

        Returns:
            RenderedDocument with bytes, filename and MIME type
        """
        doc = self.build_document(record)
        buffer = io.BytesIO()
        doc.save(buffer)

        filename = build_filename(record.process_number, now)
        logger.info(
            f"Rendered {filename}: {len(record.pleading_paragraphs())} paragraph(s), "
            f"{buffer.tell()} bytes"
        )
        return RenderedDocument(content=buffer.getvalue(), filename=filename)
