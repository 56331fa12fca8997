"""
API Request/Response Models

Pydantic models for the FastAPI endpoints.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class SessionStatus(str, Enum):
    """Status of an analysis session"""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ProcessingPhase(str, Enum):
    """Current phase in the analysis pipeline"""
    QUEUED = "queued"
    EXTRACTING = "extracting"
    ANALYZING = "analyzing"
    COMPLETE = "complete"


class AnalyzeResponse(BaseModel):
    """Response model for POST /api/analyze"""

    session_id: str
    status: SessionStatus
    message: str


class SessionStatusResponse(BaseModel):
    """Response model for GET /api/status/{session_id}"""

    session_id: str
    status: SessionStatus
    phase: ProcessingPhase
    progress: float = Field(..., ge=0.0, le=100.0, description="Progress percentage 0-100")
    message: str = ""
    filename: Optional[str] = None
    include_injunction_request: bool = False
    enriching: bool = False
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None
    error: Optional[str] = None


class RecordResponse(BaseModel):
    """Response model carrying the session's AnalysisRecord (camelCase keys)"""

    session_id: str
    record: dict[str, Any]


class EnrichmentResponse(BaseModel):
    """Response model for POST /api/sessions/{session_id}/assets/suggest"""

    session_id: str
    added_assets: list[str] = Field(default_factory=list)
    record: dict[str, Any]
