"""
PETICAO4AI Pipeline Orchestrator

This module orchestrates the sequential execution of the pipeline stages:
  1. Extraction - Turn the judgment PDF into plain text
  2. Analysis - Derive the AnalysisRecord through the completion service
  3. Enrichment (optional, on demand) - Merge additional asset suggestions
  4. Export (on demand) - Render the pleading into a .docx document

PIPELINE FLOW:
  PDF → Extraction → [length check] → Analysis → Record
  Record → Enrichment → Record' (atomic replace)
  Record → Export → .docx

Each stage is awaited before the next one starts. Every failure is caught at
this boundary and reported as a single user-facing message; no stage is
retried automatically. PDF parsing runs in a worker thread so the event
loop keeps serving other sessions meanwhile.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from agents.analysis import AnalysisAgent, AnalysisInput
from agents.base import AgentConfig, AgentTrace, StructuredCompletionClient
from agents.enrichment import EnrichmentAgent
from ingestion import ensure_sufficient_text, extract_text_from_pdf
from rendering import DocumentRenderer, RenderedDocument
from shared.errors import UNKNOWN_ERROR_MESSAGE, PipelineError
from shared.models import AnalysisRecord

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Result of a pipeline stage, as seen by the caller."""

    record: Optional[AnalysisRecord] = None
    traces: list[AgentTrace] = field(default_factory=list)
    total_duration_ms: float = 0.0
    success: bool = True
    error: Optional[str] = None


class Orchestrator:
    """
    PETICAO4AI Pipeline Orchestrator.

    Runs the judgment analysis pipeline and the follow-up stages on the
    record the caller holds.

    Usage:
        orchestrator = Orchestrator()
        result = await orchestrator.run(pdf_bytes, include_injunction_request=True)
        if result.success:
            result = await orchestrator.enrich(result.record)
            document = orchestrator.export(result.record)
    """

    def __init__(
        self,
        config: Optional[AgentConfig] = None,
        client: Optional[StructuredCompletionClient] = None,
        text_source: Optional[Callable[[bytes], str]] = None,
        renderer: Optional[DocumentRenderer] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Shared configuration for all agents
            client: Shared completion client for all agents
            text_source: PDF-to-text function (pdfplumber extraction by default)
            renderer: Document renderer used for exports
        """
        self.config = config or AgentConfig.from_env()
        self.client = client or StructuredCompletionClient(self.config)
        self.text_source = text_source or extract_text_from_pdf
        self.renderer = renderer or DocumentRenderer()

        # Initialize agents with shared config and client
        self.analysis_agent = AnalysisAgent(self.config, self.client)
        self.enrichment_agent = EnrichmentAgent(self.config, self.client)

        self.logger = logging.getLogger("peticao4ai.orchestrator")

    async def analyze_text(
        self,
        text: str,
        include_injunction_request: bool = False,
    ) -> AnalysisRecord:
        """
        Analyse already-extracted judgment text.

        Raises:
            InsufficientContent: If the trimmed text is below the minimum length
                (no completion call is made)
            AnalysisFailure: If the analysis call fails
        """
        ensure_sufficient_text(text, self.config.min_text_length)
        return await self.analysis_agent.run(
            AnalysisInput(
                document_text=text,
                include_injunction_request=include_injunction_request,
            )
        )

    async def run(
        self,
        document: bytes,
        include_injunction_request: bool = False,
        progress_callback: Optional[Callable[[str, str], None]] = None,
    ) -> PipelineResult:
        """
        Run extraction and analysis for an uploaded judgment.

        Args:
            document: Raw PDF bytes
            include_injunction_request: Ask for an urgency injunction section
            progress_callback: Optional callback(phase, message) called at each phase transition.
                               Phase is one of: "extracting", "analyzing", "complete"

        Returns:
            PipelineResult with the record, or with a user-facing error
        """
        start_time = datetime.now()
        traces: list[AgentTrace] = []

        async def notify_progress(phase: str, message: str = ""):
            """Notify progress callback if provided."""
            if progress_callback:
                try:
                    result = progress_callback(phase, message)
                    # Handle both sync and async callbacks
                    if hasattr(result, '__await__'):
                        await result
                except Exception as e:
                    self.logger.warning(f"Progress callback error: {e}")

        self.logger.info("Starting PETICAO4AI pipeline")

        try:
            # Stage 1: Extraction
            await notify_progress("extracting", "Extraindo texto do PDF...")
            text = await asyncio.to_thread(self.text_source, document)
            self.logger.info(f"Extracted {len(text)} chars")

            # Stage 2: Analysis
            await notify_progress(
                "analyzing",
                "Analisando o documento com IA... Isso pode levar um momento."
            )
            try:
                record = await self.analyze_text(text, include_injunction_request)
            finally:
                if trace := self.analysis_agent.get_last_trace():
                    traces.append(trace)

            await notify_progress("complete", "Análise concluída!")

            duration_ms = (datetime.now() - start_time).total_seconds() * 1000
            self.logger.info(f"Pipeline completed in {duration_ms:.1f}ms")

            return PipelineResult(
                record=record,
                traces=traces,
                total_duration_ms=duration_ms,
                success=True,
            )

        except PipelineError as e:
            self.logger.error(f"Pipeline failed: {type(e).__name__}")
            return self._failure(start_time, traces, e.user_message)
        except Exception as e:
            self.logger.exception(f"Pipeline failed unexpectedly: {e}")
            return self._failure(start_time, traces, UNKNOWN_ERROR_MESSAGE)

    async def enrich(self, record: AnalysisRecord) -> PipelineResult:
        """
        Merge additional asset suggestions into a record.

        The returned result carries the new record on success, and the
        untouched original record on failure.
        """
        start_time = datetime.now()
        traces: list[AgentTrace] = []

        try:
            try:
                enriched = await self.enrichment_agent.enrich(record)
            finally:
                if trace := self.enrichment_agent.get_last_trace():
                    traces.append(trace)
        except PipelineError as e:
            self.logger.error(f"Enrichment failed: {type(e).__name__}")
            return self._failure(start_time, traces, e.user_message, record)
        except Exception as e:
            self.logger.exception(f"Enrichment failed unexpectedly: {e}")
            return self._failure(start_time, traces, UNKNOWN_ERROR_MESSAGE, record)

        duration_ms = (datetime.now() - start_time).total_seconds() * 1000
        return PipelineResult(
            record=enriched,
            traces=traces,
            total_duration_ms=duration_ms,
            success=True,
        )

    def export(self, record: AnalysisRecord, now: Optional[datetime] = None) -> RenderedDocument:
        """Render the record's pleading into a .docx document."""
        return self.renderer.render(record, now)

    def _failure(
        self,
        start_time: datetime,
        traces: list[AgentTrace],
        message: str,
        record: Optional[AnalysisRecord] = None,
    ) -> PipelineResult:
        duration_ms = (datetime.now() - start_time).total_seconds() * 1000
        return PipelineResult(
            record=record,
            traces=traces,
            total_duration_ms=duration_ms,
            success=False,
            error=message,
        )
