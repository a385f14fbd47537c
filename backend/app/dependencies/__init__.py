"""
FastAPI Dependencies for StudyBuddy
"""

from app.dependencies.auth import (
    resolve_user_id,
    get_session_context,
    get_authenticated_context,
)

__all__ = [
    "resolve_user_id",
    "get_session_context",
    "get_authenticated_context",
]
