"""
PETICAO4AI Enrichment Agent

Suggests additional seizable assets and merges them into an AnalysisRecord.
"""

from .agent import EnrichmentAgent, build_enrichment_request, merge_assets

__all__ = ["EnrichmentAgent", "build_enrichment_request", "merge_assets"]
