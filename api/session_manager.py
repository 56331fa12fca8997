"""
Session Manager for Async Processing

Manages analysis sessions for the PETICAO4AI pipeline. A session holds the
single AnalysisRecord derived from one uploaded judgment, tracks progress
through the pipeline phases and guards enrichment with a busy flag.

Sessions live in memory only and are discarded as a whole on reset.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import uuid4

from api.models import ProcessingPhase, SessionStatus
from shared.models import AnalysisRecord

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Represents one analysed document"""

    session_id: str
    status: SessionStatus = SessionStatus.PENDING
    phase: ProcessingPhase = ProcessingPhase.QUEUED
    progress: float = 0.0
    message: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    error: Optional[str] = None

    # Input
    filename: Optional[str] = None
    include_injunction_request: bool = False

    # Result
    record: Optional[AnalysisRecord] = None
    enriching: bool = False

    def update(
        self,
        status: Optional[SessionStatus] = None,
        phase: Optional[ProcessingPhase] = None,
        progress: Optional[float] = None,
        message: Optional[str] = None,
        error: Optional[str] = None,
    ):
        """Update session state"""
        if status is not None:
            self.status = status
        if phase is not None:
            self.phase = phase
        if progress is not None:
            self.progress = progress
        if message is not None:
            self.message = message
        if error is not None:
            self.error = error
        self.updated_at = datetime.now()

        if status == SessionStatus.COMPLETED or status == SessionStatus.FAILED:
            self.completed_at = datetime.now()


class SessionManager:
    """
    Manages in-memory analysis sessions.

    Provides progress tracking for the frontend and the busy flag that keeps
    a second enrichment from starting while one is outstanding.
    """

    # Progress percentages for each phase
    PHASE_PROGRESS = {
        ProcessingPhase.QUEUED: 0.0,
        ProcessingPhase.EXTRACTING: 25.0,
        ProcessingPhase.ANALYZING: 50.0,
        ProcessingPhase.COMPLETE: 100.0,
    }

    PHASE_MESSAGES = {
        ProcessingPhase.QUEUED: "Documento na fila para processamento...",
        ProcessingPhase.EXTRACTING: "Extraindo texto do PDF...",
        ProcessingPhase.ANALYZING: "Analisando o documento com IA... Isso pode levar um momento.",
        ProcessingPhase.COMPLETE: "Análise concluída!",
    }

    def __init__(self, max_sessions: int = 100):
        self.sessions: dict[str, Session] = {}
        self.max_sessions = max_sessions
        self._lock = asyncio.Lock()

    async def create_session(
        self,
        filename: Optional[str] = None,
        include_injunction_request: bool = False,
    ) -> str:
        """Create a new session and return its ID"""
        async with self._lock:
            # Clean up old finished sessions if we have too many
            if len(self.sessions) >= self.max_sessions:
                self._cleanup_old_sessions()

            session_id = str(uuid4())
            self.sessions[session_id] = Session(
                session_id=session_id,
                filename=filename,
                include_injunction_request=include_injunction_request,
                status=SessionStatus.PENDING,
                phase=ProcessingPhase.QUEUED,
                progress=0.0,
                message=self.PHASE_MESSAGES[ProcessingPhase.QUEUED],
            )

            logger.info(f"Created session {session_id}")
            return session_id

    async def get_session(self, session_id: str) -> Optional[Session]:
        """Get a session by ID"""
        async with self._lock:
            return self.sessions.get(session_id)

    async def update_phase(self, session_id: str, phase: ProcessingPhase):
        """Update session to a new phase with corresponding progress"""
        async with self._lock:
            session = self.sessions.get(session_id)
            if session:
                progress = self.PHASE_PROGRESS.get(phase, session.progress)
                message = self.PHASE_MESSAGES.get(phase, "")
                status = (
                    SessionStatus.RUNNING if phase != ProcessingPhase.COMPLETE
                    else SessionStatus.COMPLETED
                )
                session.update(
                    status=status,
                    phase=phase,
                    progress=progress,
                    message=message,
                )
                logger.debug(f"Session {session_id}: phase={phase.value}, progress={progress}%")
            else:
                logger.warning(f"Session {session_id} not found for phase update")

    async def set_record(self, session_id: str, record: AnalysisRecord):
        """Set the session record and mark it as completed"""
        async with self._lock:
            session = self.sessions.get(session_id)
            if session:
                session.record = record
                session.update(
                    status=SessionStatus.COMPLETED,
                    phase=ProcessingPhase.COMPLETE,
                    progress=100.0,
                    message=self.PHASE_MESSAGES[ProcessingPhase.COMPLETE],
                )
                logger.info(f"Session {session_id} completed")
            else:
                logger.warning(f"Session {session_id} not found for record update")

    async def set_error(self, session_id: str, error: str):
        """Mark session as failed with a user-facing error message"""
        async with self._lock:
            session = self.sessions.get(session_id)
            if session:
                session.update(
                    status=SessionStatus.FAILED,
                    error=error,
                    message=f"Erro: {error[:100]}",
                )
                logger.error(f"Session {session_id} failed: {error}")
            else:
                logger.warning(f"Session {session_id} not found for error update")

    async def try_begin_enrichment(self, session_id: str) -> bool:
        """Raise the busy flag; False if the session is missing or already enriching"""
        async with self._lock:
            session = self.sessions.get(session_id)
            if session is None or session.enriching:
                return False
            session.enriching = True
            session.updated_at = datetime.now()
            return True

    async def end_enrichment(
        self,
        session_id: str,
        record: Optional[AnalysisRecord] = None,
    ):
        """Clear the busy flag, replacing the record when one is given"""
        async with self._lock:
            session = self.sessions.get(session_id)
            if session:
                if record is not None:
                    session.record = record
                session.enriching = False
                session.updated_at = datetime.now()
            else:
                logger.warning(f"Session {session_id} not found for enrichment update")

    async def delete_session(self, session_id: str) -> bool:
        """Discard a session and its record entirely"""
        async with self._lock:
            session = self.sessions.pop(session_id, None)
            if session:
                logger.info(f"Discarded session {session_id}")
            return session is not None

    def _cleanup_old_sessions(self):
        """Remove oldest completed/failed sessions"""
        finished = [
            (session_id, session)
            for session_id, session in self.sessions.items()
            if session.status in (SessionStatus.COMPLETED, SessionStatus.FAILED)
            and not session.enriching
        ]
        # Sort by completion time
        finished.sort(key=lambda x: x[1].completed_at or x[1].created_at)

        # Remove oldest half
        for session_id, _ in finished[: max(1, len(finished) // 2)]:
            del self.sessions[session_id]
            logger.debug(f"Cleaned up old session {session_id}")


# Global session manager instance
session_manager = SessionManager()
