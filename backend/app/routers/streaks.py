"""
Streaks Router
Current and longest activity streaks, with milestone info.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.dependencies.auth import get_session_context
from app.services.context import SessionContext
from app.services import streaks

router = APIRouter(prefix="/api/streaks", tags=["streaks"])


@router.get("/{streak_type}")
def get_streak(streak_type: str, ctx: SessionContext = Depends(get_session_context)) -> Dict[str, Any]:
    return streaks.get_user_streak(ctx, streak_type)


@router.post("/{streak_type}/activity")
def record_activity(streak_type: str, ctx: SessionContext = Depends(get_session_context)) -> Dict[str, Any]:
    """Count today towards the streak. Repeated calls on one day change nothing."""
    return streaks.update_user_streak(ctx, streak_type)
