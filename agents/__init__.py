"""
PETICAO4AI Agents

This package contains the completion-backed agents and the pipeline orchestrator:

  1. AnalysisAgent - Derive the AnalysisRecord from a judgment's text
  2. EnrichmentAgent - Suggest and merge additional seizable assets

The Orchestrator runs the full pipeline:
  PDF → Extraction → Analysis → Record → [Enrichment] → Export (.docx)

Usage:
    from agents import Orchestrator

    orchestrator = Orchestrator()
    result = await orchestrator.run(pdf_bytes)
    print(result.record.facts)
"""

from .base import AgentConfig, AgentTrace, BaseAgent, StructuredCompletionClient
from .analysis import AnalysisAgent, AnalysisInput, build_analysis_request
from .enrichment import EnrichmentAgent, build_enrichment_request, merge_assets
from .orchestrator import Orchestrator, PipelineResult

__all__ = [
    # Base
    "AgentConfig",
    "AgentTrace",
    "BaseAgent",
    "StructuredCompletionClient",
    # Analysis
    "AnalysisAgent",
    "AnalysisInput",
    "build_analysis_request",
    # Enrichment
    "EnrichmentAgent",
    "build_enrichment_request",
    "merge_assets",
    # Orchestrator
    "Orchestrator",
    "PipelineResult",
]
