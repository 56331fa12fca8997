"""
PETICAO4AI Error Taxonomy

Every failure that can stop a pipeline stage derives from PipelineError and
carries a fixed, user-facing message. The underlying cause is chained with
``raise ... from`` and logged where it happens; it is never shown to users.

  - ExtractionFailure: the PDF could not be turned into usable text
  - InsufficientContent: extracted text is too short to analyse
  - AnalysisFailure: the completion service call or its response failed
  - EnrichmentFailure: the asset suggestion round-trip failed

Missing or malformed individual fields in an otherwise parsable response are
NOT errors: they are repaired with fallback sentinels during normalization.
"""

from __future__ import annotations

from typing import Optional


EXTRACTION_FAILURE_MESSAGE = (
    "Não foi possível extrair o texto do PDF. "
    "O arquivo pode estar vazio, ser uma imagem ou estar corrompido."
)
INSUFFICIENT_CONTENT_MESSAGE = (
    "Não foi possível extrair texto suficiente do PDF. "
    "O arquivo pode estar vazio, ser uma imagem ou estar corrompido."
)
ANALYSIS_FAILURE_MESSAGE = (
    "A IA não conseguiu processar o documento. "
    "Tente novamente ou verifique o conteúdo do PDF."
)
ENRICHMENT_FAILURE_MESSAGE = "Não foi possível sugerir bens adicionais no momento."
UNKNOWN_ERROR_MESSAGE = "Ocorreu um erro desconhecido durante a análise."


class PipelineError(Exception):
    """Base class for failures that halt a pipeline stage."""

    default_message = UNKNOWN_ERROR_MESSAGE

    def __init__(self, user_message: Optional[str] = None):
        self.user_message = user_message or self.default_message
        super().__init__(self.user_message)


class ExtractionFailure(PipelineError):
    default_message = EXTRACTION_FAILURE_MESSAGE


class InsufficientContent(ExtractionFailure):
    """Extracted text is empty or shorter than the minimum length."""

    default_message = INSUFFICIENT_CONTENT_MESSAGE


class AnalysisFailure(PipelineError):
    default_message = ANALYSIS_FAILURE_MESSAGE


class EnrichmentFailure(PipelineError):
    default_message = ENRICHMENT_FAILURE_MESSAGE
