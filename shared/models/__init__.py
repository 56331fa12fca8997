"""
PETICAO4AI Shared Pydantic Models

This package contains the models and schema descriptors used across the
PETICAO4AI system:

  - schema.py: Tagged output schema descriptors and the shared validation pass
  - analysis.py: AnalysisRecord, AnalysisRequest, fallback sentinels, normalizer

Usage:
    from shared.models import (
        AnalysisRecord,
        ANALYSIS_SCHEMA,
        normalize_analysis,
    )
"""

# Schema descriptors
from .schema import (
    FieldKind,
    OutputSchema,
    SchemaField,
    SchemaRoot,
    SchemaShapeError,
)

# Analysis record and normalization
from .analysis import (
    ANALYSIS_SCHEMA,
    ASSETS_FALLBACK,
    ENRICHMENT_SCHEMA,
    FACTS_FALLBACK,
    GAPS_FALLBACK,
    PLEADING_FALLBACK,
    PROCESS_NUMBER_FALLBACK,
    AnalysisRecord,
    AnalysisRequest,
    dedupe_preserving_order,
    normalize_analysis,
)

__all__ = [
    # Schema
    "FieldKind",
    "OutputSchema",
    "SchemaField",
    "SchemaRoot",
    "SchemaShapeError",
    # Analysis
    "ANALYSIS_SCHEMA",
    "ASSETS_FALLBACK",
    "ENRICHMENT_SCHEMA",
    "FACTS_FALLBACK",
    "GAPS_FALLBACK",
    "PLEADING_FALLBACK",
    "PROCESS_NUMBER_FALLBACK",
    "AnalysisRecord",
    "AnalysisRequest",
    "dedupe_preserving_order",
    "normalize_analysis",
]
