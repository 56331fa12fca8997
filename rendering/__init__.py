"""
PETICAO4AI Rendering

Turns an AnalysisRecord's pleading into a downloadable Word document.
"""

from .docx_renderer import (
    DOCX_MEDIA_TYPE,
    DocumentRenderer,
    RenderedDocument,
    build_filename,
    filesystem_timestamp,
    process_tag,
)

__all__ = [
    "DOCX_MEDIA_TYPE",
    "DocumentRenderer",
    "RenderedDocument",
    "build_filename",
    "filesystem_timestamp",
    "process_tag",
]
