"""
PETICAO4AI FastAPI Application

Main API server for the labour-court judgment analyser.
Provides endpoints for:
  - Uploading a judgment PDF and analysing it
  - Tracking analysis progress
  - Suggesting additional seizable assets
  - Exporting the execution pleading as .docx
  - Discarding a session
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import BackgroundTasks, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from api.models import (
    AnalyzeResponse,
    EnrichmentResponse,
    ProcessingPhase,
    RecordResponse,
    SessionStatus,
    SessionStatusResponse,
)
from api.session_manager import Session, session_manager
from rendering import DocumentRenderer
from shared.errors import ENRICHMENT_FAILURE_MESSAGE, UNKNOWN_ERROR_MESSAGE

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("peticao4ai.api")

MAX_UPLOAD_BYTES = 20 * 1024 * 1024
PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    logger.info("Starting PETICAO4AI API server")
    yield
    logger.info("Shutting down PETICAO4AI API server")


# Create FastAPI app
app = FastAPI(
    title="PETICAO4AI API",
    description="Analisador de Sentença Trabalhista - execution pleading assistant",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend (configurable via environment)
cors_origins = os.environ.get("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Pipeline Execution
# ============================================================================

async def run_pipeline(session_id: str, document: bytes, include_injunction_request: bool):
    """Run the PETICAO4AI pipeline as a background task"""
    try:
        # Import here to avoid circular imports and allow lazy loading
        from agents.orchestrator import Orchestrator

        logger.info(f"Starting pipeline for session {session_id}")

        orchestrator = Orchestrator()

        # Progress callback that updates the session manager
        async def progress_callback(phase: str, message: str = ""):
            phase_map = {
                "extracting": ProcessingPhase.EXTRACTING,
                "analyzing": ProcessingPhase.ANALYZING,
            }
            if phase in phase_map:
                await session_manager.update_phase(session_id, phase_map[phase])

        result = await orchestrator.run(
            document,
            include_injunction_request=include_injunction_request,
            progress_callback=progress_callback,
        )

        if result.success and result.record is not None:
            await session_manager.set_record(session_id, result.record)
            logger.info(f"Pipeline completed for session {session_id}")
        else:
            await session_manager.set_error(session_id, result.error or UNKNOWN_ERROR_MESSAGE)

    except Exception as e:
        logger.exception(f"Pipeline failed for session {session_id}: {e}")
        await session_manager.set_error(session_id, UNKNOWN_ERROR_MESSAGE)


async def _get_session_or_404(session_id: str) -> Session:
    session = await session_manager.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return session


def _require_record(session: Session):
    if session.status != SessionStatus.COMPLETED:
        raise HTTPException(
            status_code=400,
            detail=f"Analysis is not complete. Current status: {session.status.value}"
        )
    if session.record is None:
        raise HTTPException(status_code=500, detail="Analysis completed but no result available")
    return session.record


# ============================================================================
# API Endpoints
# ============================================================================

@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "name": "PETICAO4AI API",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.post("/api/analyze", response_model=AnalyzeResponse, status_code=202)
async def analyze(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    include_injunction_request: bool = Form(False),
):
    """
    Analyse an uploaded judgment PDF.

    Starts a session that runs through the pipeline:
      1. Extraction - Extract the PDF text
      2. Analysis - Derive facts, gaps, pleading, assets and process number

    Returns a session ID for tracking progress via GET /api/status/{session_id}
    """
    filename = file.filename or ""
    if not filename.lower().endswith(".pdf") and file.content_type not in PDF_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail="Por favor, selecione um arquivo PDF.")

    document = await file.read()
    if not document:
        raise HTTPException(status_code=400, detail="O arquivo enviado está vazio.")
    if len(document) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="O arquivo excede o tamanho máximo de 20 MB.")

    session_id = await session_manager.create_session(filename, include_injunction_request)

    # Start background processing
    background_tasks.add_task(run_pipeline, session_id, document, include_injunction_request)

    return AnalyzeResponse(
        session_id=session_id,
        status=SessionStatus.PENDING,
        message="Analysis session created. Poll /api/status/{session_id} for progress.",
    )


@app.get("/api/status/{session_id}", response_model=SessionStatusResponse)
async def get_status(session_id: str):
    """
    Get the status of an analysis session.

    Returns current phase, progress percentage (0-100), and status message.
    Poll this endpoint to update the progress bar in the UI.
    """
    session = await _get_session_or_404(session_id)

    return SessionStatusResponse(
        session_id=session.session_id,
        status=session.status,
        phase=session.phase,
        progress=session.progress,
        message=session.message,
        filename=session.filename,
        include_injunction_request=session.include_injunction_request,
        enriching=session.enriching,
        created_at=session.created_at,
        updated_at=session.updated_at,
        completed_at=session.completed_at,
        error=session.error,
    )


@app.get("/api/result/{session_id}", response_model=RecordResponse)
async def get_result(session_id: str):
    """
    Get the AnalysisRecord of a completed session.

    Only available after the session status is COMPLETED.
    """
    session = await _get_session_or_404(session_id)
    record = _require_record(session)
    return RecordResponse(session_id=session_id, record=record.to_wire())


@app.post("/api/sessions/{session_id}/assets/suggest", response_model=EnrichmentResponse)
async def suggest_assets(session_id: str):
    """
    Suggest additional seizable assets and merge them into the record.

    Only one suggestion request per session may be outstanding. On failure
    the record is left unchanged.
    """
    session = await _get_session_or_404(session_id)
    record = _require_record(session)

    if not await session_manager.try_begin_enrichment(session_id):
        raise HTTPException(
            status_code=409,
            detail="Uma busca de bens adicionais já está em andamento."
        )

    enriched = None
    try:
        from agents.orchestrator import Orchestrator

        result = await Orchestrator().enrich(record)
        if result.success:
            enriched = result.record
    except Exception as e:
        logger.exception(f"Enrichment failed for session {session_id}: {e}")
        result = None
    finally:
        await session_manager.end_enrichment(session_id, enriched)

    if enriched is None:
        detail = result.error if result is not None and result.error else ENRICHMENT_FAILURE_MESSAGE
        raise HTTPException(status_code=502, detail=detail)

    # Merged assets keep the original list as a prefix
    return EnrichmentResponse(
        session_id=session_id,
        added_assets=enriched.assets[len(record.assets):],
        record=enriched.to_wire(),
    )


@app.get("/api/export/{session_id}")
async def export_pleading(session_id: str):
    """
    Export the execution pleading as a Word (.docx) document.
    """
    session = await _get_session_or_404(session_id)
    record = _require_record(session)

    document = await run_in_threadpool(DocumentRenderer().render, record)
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{document.filename}"'
        },
    )


@app.delete("/api/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str):
    """
    Discard a session and everything derived from its document.
    """
    if not await session_manager.delete_session(session_id):
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return Response(status_code=204)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


# ============================================================================
# Entry Point
# ============================================================================

def main():
    """Run the API server"""
    import uvicorn

    host = os.environ.get("PETICAO4AI_HOST", "0.0.0.0")
    port = int(os.environ.get("PETICAO4AI_PORT", "8000"))

    uvicorn.run(
        "api.main:app",
        host=host,
        port=port,
        reload=True,
        log_level="info",
    )


if __name__ == "__main__":
    main()
