"""
PETICAO4AI Analysis Agent

Derives the structured AnalysisRecord from a labour-court judgment.
"""

from .agent import AnalysisAgent, AnalysisInput, build_analysis_request

__all__ = ["AnalysisAgent", "AnalysisInput", "build_analysis_request"]
