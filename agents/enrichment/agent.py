"""
PETICAO4AI Enrichment Agent

This agent proposes additional, more specific seizable assets for an existing
AnalysisRecord and merges them into the record's asset list.

ENRICHMENT STRATEGY:
  - Narrow schema: a bare JSON array of strings
  - Higher temperature than the primary analysis (exploratory suggestions)
  - Specific assets (a registered property, a vehicle plate) rather than the
    generic categories already present
  - Atomic merge: the record is replaced as a whole or left untouched
"""

from __future__ import annotations

import json
from typing import List, Optional

from agents.base import AgentConfig, BaseAgent, StructuredCompletionClient
from shared.errors import AnalysisFailure, EnrichmentFailure
from shared.models import ENRICHMENT_SCHEMA, AnalysisRecord, AnalysisRequest


SYSTEM_INSTRUCTION = (
    "Você é um assistente de pesquisa para advogados, especializado em encontrar "
    "ativos de devedores. Use informações públicas simuladas para sugerir bens."
)

USER_PROMPT_TEMPLATE = """Com base nos fatos do processo a seguir, sugira bens adicionais para penhora. Finja pesquisar em fontes públicas como ERPs e Renajud.

Fatos: {facts}

Sugira 2-3 ativos específicos adicionais (ex: 'Imóvel registrado na matrícula X do 1º CRI de São Paulo', 'Veículo Fiat Argo placa XYZ-1234').
Retorne apenas uma lista de strings em formato JSON. Exemplo: ["Ativo 1", "Ativo 2"]."""


def build_enrichment_request(
    facts: str,
    *,
    temperature: float = 0.8,
    model: Optional[str] = None,
) -> AnalysisRequest:
    """
    Build the asset suggestion request for an existing record's facts.

    Raises:
        ValueError: If facts is empty
    """
    if not facts or not facts.strip():
        raise ValueError("Enrichment requires non-empty facts")
    return AnalysisRequest(
        system_instruction=SYSTEM_INSTRUCTION,
        content=USER_PROMPT_TEMPLATE.format(facts=facts),
        schema=ENRICHMENT_SCHEMA,
        temperature=temperature,
        model=model,
    )


def merge_assets(current: List[str], candidates: List[str]) -> List[str]:
    """
    Append the candidates not already present to the current asset list.

    The original order is kept as a prefix and the candidates keep their
    relative order. Merging the same candidates twice changes nothing.
    """
    merged = list(current)
    seen = set(merged)
    for candidate in candidates:
        if candidate not in seen:
            seen.add(candidate)
            merged.append(candidate)
    return merged


class EnrichmentAgent(BaseAgent[AnalysisRecord, List[str]]):
    """
    Enrichment Agent - optional stage after the primary analysis.

    Reuses the completion client with ENRICHMENT_SCHEMA and the enrichment
    model/temperature. Every failure surfaces as EnrichmentFailure.
    """

    def __init__(
        self,
        config: Optional[AgentConfig] = None,
        client: Optional[StructuredCompletionClient] = None,
    ):
        super().__init__(config, client)

    @property
    def name(self) -> str:
        return "enrichment"

    def _get_system_prompt(self) -> str:
        return SYSTEM_INSTRUCTION

    async def run(self, input_data: AnalysisRecord) -> List[str]:
        """
        Retrieve candidate assets for a record.

        Args:
            input_data: Record whose facts drive the suggestions

        Returns:
            Candidate asset descriptions (possibly empty)

        Raises:
            EnrichmentFailure: If the service call fails or the response is unparsable
        """
        self._start_trace(input_summary=f"Facts length: {len(input_data.facts)} chars")

        try:
            request = build_enrichment_request(
                input_data.facts,
                temperature=self.config.enrichment_temperature,
                model=self.config.enrichment_model,
            )
            raw = await self.client.complete(request)
            try:
                candidates = ENRICHMENT_SCHEMA.validate(json.loads(raw))
            except (ValueError, RecursionError, TypeError) as e:
                self.logger.error(f"Unparsable enrichment response: {e}")
                raise EnrichmentFailure() from e

            self._complete_trace(output_summary=f"Candidates: {len(candidates)}")
            return candidates

        except AnalysisFailure as e:
            self._complete_trace(error=str(e))
            raise EnrichmentFailure() from e
        except Exception as e:
            self._complete_trace(error=str(e))
            raise

    async def enrich(self, record: AnalysisRecord) -> AnalysisRecord:
        """
        Return a new record with the suggested assets merged in.

        The given record is never modified; on failure it remains the caller's
        current record.
        """
        candidates = await self.run(record)
        merged = merge_assets(record.assets, candidates)
        self.logger.info(
            f"Merged {len(merged) - len(record.assets)} new asset(s) "
            f"from {len(candidates)} candidate(s)"
        )
        return record.with_assets(merged)
