"""
Pydantic Models for Judgment Analysis

This module defines the central record of PETICAO4AI - the AnalysisRecord
derived from a labour-court judgment - together with the schemas sent to the
completion service and the normalizer that turns a raw response into a record.

LIFECYCLE:
  - Created atomically by normalize_analysis() from a completion response
  - Held in memory by the caller (one per session)
  - Replaced as a whole when enrichment merges new assets
  - Discarded when a new document is selected or the session is reset

INVARIANTS:
  - Every field is present after normalization (string fields non-empty)
  - `assets` never contains two equal entries
  - `next_pleading` splits on "\\n" into its paragraphs 1:1
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.errors import AnalysisFailure
from .schema import FieldKind, OutputSchema, SchemaField, SchemaRoot

logger = logging.getLogger(__name__)


# =============================================================================
# Fallback sentinels
# =============================================================================

FACTS_FALLBACK = "Não foi possível extrair os fatos."
GAPS_FALLBACK = "Não foi possível identificar gaps."
PLEADING_FALLBACK = "Não foi possível gerar a petição."
ASSETS_FALLBACK = "Não foi possível sugerir bens."
PROCESS_NUMBER_FALLBACK = "N/A"


# =============================================================================
# Schemas
# =============================================================================

ANALYSIS_SCHEMA = OutputSchema(
    name="judgment_analysis",
    fields=(
        SchemaField(
            name="facts",
            kind=FieldKind.STRING,
            description=(
                "Resumo dos fatos principais: valor da causa, partes "
                "(reclamante e reclamado) e tribunal."
            ),
            fallback=FACTS_FALLBACK,
        ),
        SchemaField(
            name="gaps",
            kind=FieldKind.STRING_LIST,
            description="Uma lista de 2 a 3 lacunas ou violações processuais na execução.",
            fallback=(GAPS_FALLBACK,),
        ),
        SchemaField(
            name="nextPleading",
            kind=FieldKind.STRING,
            description=(
                "O texto completo da petição de execução, pronta para ser "
                "protocolada, formatada com quebras de linha."
            ),
            fallback=PLEADING_FALLBACK,
        ),
        SchemaField(
            name="assets",
            kind=FieldKind.STRING_LIST,
            description=(
                "Uma lista de bens sugeridos para penhora "
                "(contas bancárias, veículos, imóveis)."
            ),
            fallback=(ASSETS_FALLBACK,),
        ),
        SchemaField(
            name="processNumber",
            kind=FieldKind.STRING,
            description=(
                "O número do processo judicial identificado no documento. "
                "Formato: NNNNNNN-DD.AAAA.J.TR.OOOO. Se não encontrar, retorne 'N/A'."
            ),
            fallback=PROCESS_NUMBER_FALLBACK,
        ),
    ),
)

ENRICHMENT_SCHEMA = OutputSchema(
    name="additional_assets",
    root=SchemaRoot.STRING_LIST,
    description="Lista de bens adicionais específicos sugeridos para penhora.",
)


# =============================================================================
# Models
# =============================================================================

def dedupe_preserving_order(items: List[str]) -> List[str]:
    """Drop repeated entries (exact string equality), keeping first occurrences."""
    seen: set[str] = set()
    result: List[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


class AnalysisRecord(BaseModel):
    """
    Structured legal analysis of a labour-court judgment.

    Serialized with the camelCase names used on the wire
    (`nextPleading`, `processNumber`).
    """

    model_config = ConfigDict(populate_by_name=True)

    facts: str = Field(
        min_length=1,
        description="Prose summary of the judgment: award value, parties, court."
    )
    gaps: List[str] = Field(
        description="Procedural gaps that may hinder execution (2-3 expected)."
    )
    next_pleading: str = Field(
        alias="nextPleading",
        min_length=1,
        description="Full draft of the execution pleading, newline-delimited paragraphs."
    )
    assets: List[str] = Field(
        description="Suggested seizable assets, without duplicates."
    )
    process_number: str = Field(
        default=PROCESS_NUMBER_FALLBACK,
        alias="processNumber",
        description="Case identifier (NNNNNNN-DD.AAAA.J.TR.OOOO) or 'N/A'."
    )

    @field_validator("assets")
    @classmethod
    def drop_duplicate_assets(cls, v: List[str]) -> List[str]:
        return dedupe_preserving_order(v)

    def pleading_paragraphs(self) -> List[str]:
        """Paragraphs of the pleading, empty ones included."""
        return self.next_pleading.split("\n")

    def with_assets(self, assets: List[str]) -> AnalysisRecord:
        """Return a new validated record whose asset list is replaced."""
        data = self.to_wire()
        data["assets"] = assets
        return AnalysisRecord.model_validate(data)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class AnalysisRequest:
    """A single schema-constrained request to the completion service."""

    system_instruction: str
    content: str
    schema: OutputSchema
    temperature: float
    model: Optional[str] = None


# =============================================================================
# Normalization
# =============================================================================

def normalize_analysis(raw: str) -> AnalysisRecord:
    """
    Parse a raw completion payload into a fully-populated AnalysisRecord.

    Args:
        raw: Text returned by the completion service

    Returns:
        AnalysisRecord with every field present (fallbacks where needed)

    Raises:
        AnalysisFailure: If the payload cannot be parsed as a JSON object
    """
    try:
        data = json.loads(raw)
        fields = ANALYSIS_SCHEMA.validate(data)
    # JSONDecodeError and SchemaShapeError are ValueErrors; deep nesting is a RecursionError
    except (ValueError, RecursionError, TypeError) as e:
        logger.error(f"Unparsable analysis response: {e}")
        raise AnalysisFailure() from e

    return AnalysisRecord.model_validate(fields)
