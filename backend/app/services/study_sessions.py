"""
Study session data access, including the start/complete lifecycle.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import joinedload, selectinload

from app.models.models import StudySession
from app.schemas import study as schemas
from app.services.context import SessionContext
from app.services.data_access import (
    apply_changes,
    coerce_payload,
    commit,
    mutation,
    run_query,
    serialize,
)
from app.services.exceptions import DataAccessError, NotFound
from app.services.pomodoro import DEFAULT_DURATIONS, Phase, PomodoroTimer
from app.services.profiles import get_profile
from app.services.query_cache import query_cache
from app.services.streaks import update_user_streak

logger = logging.getLogger(__name__)


def _owned_session(ctx: SessionContext, session_id: str) -> StudySession:
    user_id = ctx.require_user()
    session = run_query(lambda: ctx.db.query(StudySession).filter(
        StudySession.id == session_id,
        StudySession.user_id == user_id
    ).first())
    if not session:
        raise NotFound("Study session", session_id)
    return session


def session_duration_minutes(start_time: Optional[datetime], end_time: datetime) -> Optional[int]:
    """Whole minutes between start and end, rounded. None when the session never started."""
    if start_time is None:
        return None
    return round((end_time - start_time).total_seconds() / 60)


def list_study_sessions(ctx: SessionContext) -> List[Dict[str, Any]]:
    """All of the caller's sessions, newest first."""
    user_id = ctx.require_user()

    def fetch():
        rows = ctx.db.query(StudySession).filter(
            StudySession.user_id == user_id
        ).order_by(StudySession.created_at.desc()).all()
        return [serialize(schemas.StudySession, row) for row in rows]

    return query_cache.get_or_fetch("study-sessions", user_id, (), lambda: run_query(fetch))


def get_study_session(ctx: SessionContext, session_id: Optional[str]) -> Optional[Dict[str, Any]]:
    """One session with its plan's title/subject and its materials."""
    if not session_id:
        return None
    user_id = ctx.require_user()

    def fetch():
        session = ctx.db.query(StudySession).options(
            joinedload(StudySession.study_plan),
            selectinload(StudySession.materials)
        ).filter(
            StudySession.id == session_id,
            StudySession.user_id == user_id
        ).first()
        if not session:
            raise NotFound("Study session", session_id)
        return serialize(schemas.StudySessionDetail, session)

    return query_cache.get_or_fetch("study-session", user_id, (session_id,), lambda: run_query(fetch))


@mutation(
    "study_session",
    success=("Study Session Created! 📚", "Your study session has been created successfully."),
    failure=("Creation Failed", "Failed to create study session"),
)
def create_study_session(ctx: SessionContext, payload) -> Dict[str, Any]:
    user_id = ctx.require_user()
    data = coerce_payload(schemas.StudySessionCreate, payload)

    session = StudySession(user_id=user_id, **data)
    ctx.db.add(session)
    commit(ctx.db)
    ctx.db.refresh(session)
    return serialize(schemas.StudySession, session)


@mutation(
    "study_session",
    success=("Session Updated", "Your study session has been updated."),
    failure=("Update Failed", "Failed to update study session"),
)
def update_study_session(ctx: SessionContext, session_id: str, updates) -> Dict[str, Any]:
    changes = coerce_payload(schemas.StudySessionUpdate, updates)
    session = _owned_session(ctx, session_id)

    apply_changes(session, changes)
    commit(ctx.db)
    ctx.db.refresh(session)
    return serialize(schemas.StudySession, session)


@mutation(
    "study_session",
    success=("Session Deleted", "Study session has been deleted successfully."),
    failure=("Deletion Failed", "Failed to delete study session"),
    invalidate_ids=lambda session_id: [session_id],
)
def delete_study_session(ctx: SessionContext, session_id: str) -> str:
    user_id = ctx.require_user()
    run_query(lambda: ctx.db.query(StudySession).filter(
        StudySession.id == session_id,
        StudySession.user_id == user_id
    ).delete(synchronize_session=False))
    commit(ctx.db)
    return session_id


@mutation(
    "study_session",
    success=("Study Session Started! 🚀", "Good luck with your learning!"),
    failure=("Start Failed", "Failed to start study session"),
)
def start_study_session(ctx: SessionContext, session_id: str) -> Dict[str, Any]:
    session = _owned_session(ctx, session_id)
    session.status = "active"
    session.start_time = datetime.utcnow()
    commit(ctx.db)
    ctx.db.refresh(session)
    return serialize(schemas.StudySession, session)


@mutation(
    "study_session",
    success=lambda session: (
        "Session Completed! 🎉",
        f"Great job! You studied for {session['duration_minutes'] or 0} minutes.",
    ),
    failure=("Completion Failed", "Failed to complete study session"),
)
def complete_study_session(
    ctx: SessionContext,
    session_id: str,
    notes: Optional[str] = None,
    confidence_rating: Optional[int] = None,
    focus_level: Optional[int] = None,
    effectiveness_rating: Optional[int] = None,
    completed_objectives: Optional[List[str]] = None,
    techniques_used: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Close a session: status completed, end time now, duration from the
    stored start time, plus whatever ratings and notes were given.

    Also counts today towards the caller's study streak.
    """
    session = _owned_session(ctx, session_id)
    now = datetime.utcnow()

    session.status = "completed"
    session.end_time = now
    session.duration_minutes = session_duration_minutes(session.start_time, now)

    # Fields left out of the request keep their stored values
    reported = {
        "notes": notes,
        "confidence_rating": confidence_rating,
        "focus_level": focus_level,
        "effectiveness_rating": effectiveness_rating,
        "completed_objectives": completed_objectives,
        "techniques_used": techniques_used,
    }
    apply_changes(session, {k: v for k, v in reported.items() if v is not None})

    commit(ctx.db)
    ctx.db.refresh(session)
    result = serialize(schemas.StudySession, session)

    try:
        update_user_streak(ctx, "study")
    except DataAccessError as e:
        logger.warning(f"Streak not updated after session {session_id}: {e}")
    logger.info(f"Session {session_id} completed ({result['duration_minutes']} min) for user={ctx.user_id}")
    return result


def session_timer(ctx: SessionContext) -> Dict[str, Any]:
    """
    A fresh Pomodoro timer sized from the caller's profile (session and break
    length in minutes). Callers without a profile get the 25/5/15 defaults.
    """
    durations = dict(DEFAULT_DURATIONS)
    try:
        profile = get_profile(ctx)
    except NotFound:
        profile = None

    if profile:
        if profile.get("session_length"):
            durations[Phase.FOCUS] = profile["session_length"] * 60
        if profile.get("break_length"):
            durations[Phase.SHORT_BREAK] = profile["break_length"] * 60

    timer = PomodoroTimer(durations)
    return {
        **timer.snapshot(),
        "durations": {phase.value: seconds for phase, seconds in timer.durations.items()},
    }
