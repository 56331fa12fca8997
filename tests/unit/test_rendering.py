"""
Unit Tests for the DOCX Pleading Renderer

Rendered documents are re-opened with python-docx and inspected.
"""

import io
from datetime import datetime, timedelta, timezone

import docx
import pytest
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, RGBColor

from rendering import (
    DOCX_MEDIA_TYPE,
    DocumentRenderer,
    RenderedDocument,
    build_filename,
    filesystem_timestamp,
    process_tag,
)
from rendering.docx_renderer import DISCLAIMER_TEXT, HEADER_TITLE


FIXED_NOW = datetime(2024, 3, 5, 14, 7, 9, 123456, tzinfo=timezone.utc)


@pytest.fixture
def rendered(sample_record):
    return DocumentRenderer().render(sample_record, now=FIXED_NOW)


@pytest.fixture
def reopened(rendered):
    return docx.Document(io.BytesIO(rendered.content))


class TestFilename:
    """Tests for filename derivation."""

    def test_process_tag_keeps_digits(self):
        assert process_tag("1234567-89.2020.5.02.0001") == "12345678920205020001"

    @pytest.mark.parametrize("value", ["N/A", "", None])
    def test_process_tag_missing(self, value):
        assert process_tag(value) == "s-n"

    def test_process_tag_without_digits_is_empty(self):
        assert process_tag("sem número") == ""
        assert build_filename("sem número", FIXED_NOW) == (
            "PeticaoExecucao__2024-03-05T14-07-09-123Z.docx"
        )

    def test_timestamp_format(self):
        assert filesystem_timestamp(FIXED_NOW) == "2024-03-05T14-07-09-123Z"

    def test_timestamp_converted_to_utc(self):
        local = FIXED_NOW.astimezone(timezone(timedelta(hours=-3)))
        assert filesystem_timestamp(local) == "2024-03-05T14-07-09-123Z"

    def test_timestamp_defaults_to_now(self):
        stamp = filesystem_timestamp()
        assert stamp.endswith("Z")
        assert ":" not in stamp
        assert "." not in stamp

    def test_build_filename(self):
        assert build_filename("1234567-89.2020.5.02.0001", FIXED_NOW) == (
            "PeticaoExecucao_12345678920205020001_2024-03-05T14-07-09-123Z.docx"
        )

    def test_build_filename_without_process(self):
        assert build_filename("N/A", FIXED_NOW) == (
            "PeticaoExecucao_s-n_2024-03-05T14-07-09-123Z.docx"
        )


class TestDocumentRenderer:
    """Tests for the rendered document layout."""

    def test_rendered_artifact(self, rendered):
        assert isinstance(rendered, RenderedDocument)
        assert rendered.media_type == DOCX_MEDIA_TYPE
        assert rendered.filename == (
            "PeticaoExecucao_12345678920205020001_2024-03-05T14-07-09-123Z.docx"
        )
        assert rendered.content[:2] == b"PK"

    def test_one_paragraph_per_line(self, reopened, sample_record):
        texts = [p.text for p in reopened.paragraphs]
        assert texts == sample_record.next_pleading.split("\n")
        assert texts[1] == ""

    def test_paragraph_spacing(self, reopened):
        for paragraph in reopened.paragraphs:
            assert paragraph.paragraph_format.space_after == Pt(10)

    def test_default_font(self, reopened):
        font = reopened.styles["Normal"].font
        assert font.name == "Calibri"
        assert font.size == Pt(12)

    def test_header(self, reopened):
        paragraph = reopened.sections[0].header.paragraphs[0]
        assert paragraph.text == HEADER_TITLE
        assert paragraph.alignment == WD_ALIGN_PARAGRAPH.CENTER
        assert paragraph.runs[0].bold is True

    def test_footer(self, reopened):
        paragraph = reopened.sections[0].footer.paragraphs[0]
        assert paragraph.text == DISCLAIMER_TEXT
        assert paragraph.alignment == WD_ALIGN_PARAGRAPH.CENTER
        run = paragraph.runs[0]
        assert run.italic is True
        assert run.font.size == Pt(8)
        assert run.font.color.rgb == RGBColor(0x80, 0x80, 0x80)

    def test_fallback_pleading_renders(self, sample_analysis_payload):
        from shared.models import PLEADING_FALLBACK, AnalysisRecord

        sample_analysis_payload["nextPleading"] = PLEADING_FALLBACK
        sample_analysis_payload["processNumber"] = "N/A"
        record = AnalysisRecord.model_validate(sample_analysis_payload)

        document = DocumentRenderer().render(record, now=FIXED_NOW)
        reopened = docx.Document(io.BytesIO(document.content))

        assert [p.text for p in reopened.paragraphs] == [PLEADING_FALLBACK]
        assert "_s-n_" in document.filename

    def test_successive_exports_differ(self, sample_record):
        renderer = DocumentRenderer()
        first = renderer.render(sample_record, now=FIXED_NOW)
        second = renderer.render(sample_record, now=FIXED_NOW + timedelta(milliseconds=1))
        assert first.filename != second.filename

    def test_save(self, rendered, tmp_path):
        path = rendered.save(tmp_path)
        assert path.name == rendered.filename
        assert path.read_bytes() == rendered.content
