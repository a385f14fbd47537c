"""
Study Session API Router

Session CRUD plus the start/complete lifecycle.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status

from app.dependencies.auth import get_session_context
from app.schemas import study as schemas
from app.services.context import SessionContext
from app.services import study_sessions

router = APIRouter(prefix="/api/study-sessions", tags=["study-sessions"])


@router.get("", response_model=List[schemas.StudySession])
def list_sessions(ctx: SessionContext = Depends(get_session_context)):
    return study_sessions.list_study_sessions(ctx)


@router.post("", response_model=schemas.StudySession, status_code=status.HTTP_201_CREATED)
def create_session(payload: schemas.StudySessionCreate, ctx: SessionContext = Depends(get_session_context)):
    return study_sessions.create_study_session(ctx, payload)


@router.get("/timer")
def get_timer(ctx: SessionContext = Depends(get_session_context)) -> Dict[str, Any]:
    """Initial Pomodoro state for the caller's preferred focus and break lengths."""
    return study_sessions.session_timer(ctx)


@router.get("/{session_id}", response_model=schemas.StudySessionDetail)
def get_session(session_id: str, ctx: SessionContext = Depends(get_session_context)):
    """Session with its plan's title/subject and its materials."""
    return study_sessions.get_study_session(ctx, session_id)


@router.patch("/{session_id}", response_model=schemas.StudySession)
def update_session(session_id: str, updates: schemas.StudySessionUpdate, ctx: SessionContext = Depends(get_session_context)):
    return study_sessions.update_study_session(ctx, session_id, updates)


@router.delete("/{session_id}")
def delete_session(session_id: str, ctx: SessionContext = Depends(get_session_context)) -> Dict[str, Any]:
    study_sessions.delete_study_session(ctx, session_id)
    return {"id": session_id, "deleted": True}


@router.post("/{session_id}/start", response_model=schemas.StudySession)
def start_session(session_id: str, ctx: SessionContext = Depends(get_session_context)):
    return study_sessions.start_study_session(ctx, session_id)


@router.post("/{session_id}/complete", response_model=schemas.StudySession)
def complete_session(
    session_id: str,
    body: Optional[schemas.CompleteSessionRequest] = None,
    ctx: SessionContext = Depends(get_session_context),
):
    """Close the session; duration comes from its start time."""
    return study_sessions.complete_study_session(ctx, session_id, **(body.model_dump() if body else {}))
