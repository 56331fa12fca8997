"""
PETICAO4AI Analysis Agent

This agent derives the structured AnalysisRecord from the extracted text of a
labour-court judgment. It asks the completion service for a schema-constrained
JSON object and normalizes the response.

ANALYSIS TASKS (given to the model):
  1. Facts: award value, parties (claimant and respondent), originating court
  2. Gaps: 2-3 issues that may hinder the execution phase
  3. Pleading: a complete execution petition ready for filing
  4. Assets: asset types that can be seized (SISBAJUD, RENAJUD, CNIB)
  5. Process number in the standard CNJ format, or 'N/A'

OUTPUT:
  - AnalysisRecord with every field populated (fallbacks where missing)
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from agents.base import AgentConfig, BaseAgent, StructuredCompletionClient
from shared.models import (
    ANALYSIS_SCHEMA,
    AnalysisRecord,
    AnalysisRequest,
    normalize_analysis,
)


SYSTEM_INSTRUCTION = (
    "Você é um advogado trabalhista brasileiro, altamente especializado em fase de "
    "execução, com profundo conhecimento do artigo 477 da CLT e das práticas de "
    "execução forçada. Sua tarefa é analisar sentenças trabalhistas e fornecer um "
    "relatório estruturado para auxiliar outros advogados."
)

INJUNCTION_CLAUSE = (
    "IMPORTANTE: Inclua um pedido de tutela de urgência antecipada para arresto de "
    "bens, justificando o periculum in mora e o fumus boni iuris com base nas "
    "lacunas encontradas."
)

USER_PROMPT_TEMPLATE = """Analise o texto da sentença trabalhista a seguir.

Texto do Documento:
---
{document_text}
---

Siga estas instruções rigorosamente:
1. **Identifique os Fatos:** Extraia o valor exato da condenação, o nome completo das partes (reclamante e reclamado) e o tribunal de origem. Sintetize em um parágrafo conciso.
2. **Detecte Lacunas na Execução:** Identifique 2 ou 3 possíveis problemas ou omissões que podem dificultar a execução. Exemplos: falta de provas de bens, prescrição intercorrente, citação inválida, ausência de cálculos atualizados. Liste-os como itens separados.
3. **Elabore a Petição de Execução:** Redija uma petição inicial de execução completa e pronta para protocolo, em português do Brasil. A petição deve ter um cabeçalho, a fundamentação jurídica baseada nos fatos e na CLT (art. 477, 789, 879) e um pedido claro para o início da execução forçada, incluindo a multa de 40% se aplicável.{injunction_clause}
4. **Liste Bens para Penhora:** Sugira uma lista de tipos de ativos que podem ser penhorados, como 'Contas bancárias via SISBAJUD', 'Veículos via RENAJUD', 'Imóveis via CNIB'.
5. **Extraia o Número do Processo:** Encontre e retorne o número do processo no formato padrão. Se não encontrar, retorne 'N/A'.

Retorne sua análise estritamente no formato JSON especificado."""


def build_analysis_request(
    document_text: str,
    include_injunction_request: bool,
    *,
    temperature: float = 0.2,
    model: Optional[str] = None,
) -> AnalysisRequest:
    """
    Build the primary analysis request.

    The document text is embedded verbatim. Length checks are the caller's
    responsibility.

    Args:
        document_text: Extracted judgment text
        include_injunction_request: Append the urgency injunction clause
        temperature: Sampling temperature
        model: Model override (client default when None)

    Returns:
        AnalysisRequest constrained by ANALYSIS_SCHEMA
    """
    clause = f" {INJUNCTION_CLAUSE}" if include_injunction_request else ""
    content = USER_PROMPT_TEMPLATE.format(
        document_text=document_text,
        injunction_clause=clause,
    )
    return AnalysisRequest(
        system_instruction=SYSTEM_INSTRUCTION,
        content=content,
        schema=ANALYSIS_SCHEMA,
        temperature=temperature,
        model=model,
    )


class AnalysisInput(BaseModel):
    """Input to the Analysis Agent."""

    document_text: str = Field(
        description="Plain text extracted from the judgment PDF."
    )
    include_injunction_request: bool = Field(
        default=False,
        description="Ask for an urgency injunction (tutela de urgência) section."
    )


class AnalysisAgent(BaseAgent[AnalysisInput, AnalysisRecord]):
    """
    Analysis Agent - primary stage of the pipeline.

    Builds the request, performs a single completion call at low temperature
    and normalizes the response into an AnalysisRecord. Unparsable responses
    raise AnalysisFailure; missing fields are silently defaulted.
    """

    def __init__(
        self,
        config: Optional[AgentConfig] = None,
        client: Optional[StructuredCompletionClient] = None,
    ):
        super().__init__(config, client)

    @property
    def name(self) -> str:
        return "analysis"

    def _get_system_prompt(self) -> str:
        return SYSTEM_INSTRUCTION

    def build_request(self, input_data: AnalysisInput) -> AnalysisRequest:
        return build_analysis_request(
            input_data.document_text,
            input_data.include_injunction_request,
            temperature=self.config.temperature,
            model=self.config.model,
        )

    async def run(self, input_data: AnalysisInput) -> AnalysisRecord:
        """
        Derive the AnalysisRecord from the judgment text.

        Args:
            input_data: Judgment text and options

        Returns:
            Fully-populated AnalysisRecord

        Raises:
            AnalysisFailure: If the service call fails or the response is unparsable
        """
        self._start_trace(
            input_summary=(
                f"Document length: {len(input_data.document_text)} chars, "
                f"injunction: {input_data.include_injunction_request}"
            )
        )

        try:
            request = self.build_request(input_data)
            raw = await self.client.complete(request)
            record = normalize_analysis(raw)

            self._complete_trace(
                output_summary=(
                    f"Process: {record.process_number}, gaps: {len(record.gaps)}, "
                    f"assets: {len(record.assets)}"
                )
            )
            return record

        except Exception as e:
            self._complete_trace(error=str(e))
            raise
