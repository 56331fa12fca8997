"""
PETICAO4AI Web API Package

FastAPI-based web interface for PETICAO4AI.

Usage:
    # Start the server
    uvicorn api.main:app --reload

    # Or via entry point
    peticao4ai-api
"""

from api.main import app
from api.session_manager import SessionManager, session_manager
from api.models import (
    AnalyzeResponse,
    EnrichmentResponse,
    ProcessingPhase,
    RecordResponse,
    SessionStatus,
    SessionStatusResponse,
)

__all__ = [
    "app",
    "session_manager",
    "SessionManager",
    "AnalyzeResponse",
    "EnrichmentResponse",
    "ProcessingPhase",
    "RecordResponse",
    "SessionStatus",
    "SessionStatusResponse",
]
