"""
Integration Tests for the PETICAO4AI Pipeline

Runs the analysis and enrichment stages against the real completion service.

Usage:
    pytest tests/integration/test_live_pipeline.py -v -m integration

Note: These tests require PETICAO4AI_API_KEY (or OPENAI_API_KEY) to be set;
they are skipped otherwise.
"""

import pytest

from agents.base import AgentConfig
from agents.orchestrator import Orchestrator
from shared.models import PROCESS_NUMBER_FALLBACK


@pytest.fixture
def orchestrator(skip_if_no_api_key):
    return Orchestrator(AgentConfig.from_env())


@pytest.mark.integration
@pytest.mark.slow
class TestLivePipeline:
    """End-to-end checks with real completion calls."""

    @pytest.mark.asyncio
    async def test_analysis_populates_every_field(self, orchestrator, sample_judgment_text):
        record = await orchestrator.analyze_text(sample_judgment_text)

        assert record.facts and record.next_pleading and record.process_number
        assert record.process_number != PROCESS_NUMBER_FALLBACK
        assert len(record.assets) == len(set(record.assets))

    @pytest.mark.asyncio
    async def test_injunction_request_mentioned(self, orchestrator, sample_judgment_text):
        record = await orchestrator.analyze_text(
            sample_judgment_text, include_injunction_request=True
        )
        assert "urgência" in record.next_pleading.lower()

    @pytest.mark.asyncio
    async def test_enrichment_and_export(self, orchestrator, sample_record):
        result = await orchestrator.enrich(sample_record)

        assert result.success, result.error
        assert result.record.assets[:len(sample_record.assets)] == sample_record.assets

        document = orchestrator.export(result.record)
        assert document.filename.startswith("PeticaoExecucao_12345678920205020001_")
