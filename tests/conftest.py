"""
PETICAO4AI Test Configuration

Shared pytest fixtures and configuration for all tests.
"""

import json
import os
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


# =============================================================================
# Environment Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (requires a live completion service)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow (long-running)"
    )


# =============================================================================
# Fixtures: Environment
# =============================================================================

@pytest.fixture(scope="session")
def project_root_path():
    """Return the project root path."""
    return project_root


@pytest.fixture(scope="session")
def dotenv_loaded():
    """Ensure .env file is loaded."""
    from dotenv import load_dotenv
    load_dotenv(project_root / ".env")
    return True


@pytest.fixture(scope="session")
def skip_if_no_api_key(dotenv_loaded):
    """Skip test if no completion service key is configured."""
    api_key = os.getenv("PETICAO4AI_API_KEY") or os.getenv("OPENAI_API_KEY")
    if not api_key or api_key.startswith("sk-your"):
        pytest.skip("Completion service API key not configured")
    return True


# =============================================================================
# Fixtures: Agents
# =============================================================================

@pytest.fixture
def agent_config():
    """Test configuration for agents."""
    from agents.base import AgentConfig

    return AgentConfig(
        api_key="test-key",
        model="gpt-4o",
        enrichment_model="gpt-4o-mini",
        temperature=0.2,
        enrichment_temperature=0.8,
        log_level="DEBUG",
    )


@pytest.fixture
def mock_completion_client():
    """Mock completion client; set `complete.return_value` per test."""
    from agents.base import StructuredCompletionClient

    client = MagicMock(spec=StructuredCompletionClient)
    client.get_call_log.return_value = []
    client.clear_call_log.return_value = None
    client.complete = AsyncMock()
    return client


# =============================================================================
# Fixtures: Test Data
# =============================================================================

@pytest.fixture
def sample_judgment_text():
    """Return a judgment excerpt long enough to be analysed."""
    return (
        "PODER JUDICIÁRIO - JUSTIÇA DO TRABALHO\n"
        "TRIBUNAL REGIONAL DO TRABALHO DA 2ª REGIÃO\n"
        "Processo nº 1234567-89.2020.5.02.0001\n"
        "RECLAMANTE: JOÃO DA SILVA\n"
        "RECLAMADA: COMÉRCIO DE ALIMENTOS LTDA\n"
        "SENTENÇA\n"
        "Julgo PROCEDENTES EM PARTE os pedidos para condenar a reclamada ao pagamento "
        "de verbas rescisórias, multa do art. 477 da CLT e FGTS acrescido de 40%, "
        "no valor total de R$ 45.320,17, conforme cálculos em anexo.\n"
    )


@pytest.fixture
def sample_analysis_payload():
    """Return a complete analysis payload as the service would send it."""
    return {
        "facts": (
            "Condenação de R$ 45.320,17 em favor de João da Silva contra Comércio de "
            "Alimentos Ltda, TRT da 2ª Região."
        ),
        "gaps": [
            "Ausência de cálculos atualizados",
            "Falta de provas de bens da reclamada",
        ],
        "nextPleading": (
            "EXCELENTÍSSIMO SENHOR DOUTOR JUIZ DA 1ª VARA DO TRABALHO DE SÃO PAULO\n"
            "\n"
            "JOÃO DA SILVA vem requerer o início da execução.\n"
            "Termos em que pede deferimento."
        ),
        "assets": [
            "Contas bancárias via SISBAJUD",
            "Veículos via RENAJUD",
            "Imóveis via CNIB",
        ],
        "processNumber": "1234567-89.2020.5.02.0001",
    }


@pytest.fixture
def sample_analysis_response(sample_analysis_payload):
    """Raw completion text for the sample payload."""
    return json.dumps(sample_analysis_payload, ensure_ascii=False)


@pytest.fixture
def sample_record(sample_analysis_payload):
    """Return a sample AnalysisRecord."""
    from shared.models import AnalysisRecord

    return AnalysisRecord.model_validate(sample_analysis_payload)
