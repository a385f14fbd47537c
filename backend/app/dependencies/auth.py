"""
Authentication Dependencies

Resolves the caller from the bearer token and builds the explicit
SessionContext every data-access call receives.

Usage:
    @router.get("/protected")
    def protected_endpoint(ctx: SessionContext = Depends(get_session_context)):
        return list_study_plans(ctx)
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.auth import TokenError, get_user_id_from_token
from app.services.context import SessionContext

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def resolve_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """
    Return the caller id, or None when no valid token was sent.

    An unusable token is not an error here: the data-access layer raises
    Unauthenticated on first use, which keeps the failure in one place.
    """
    if not credentials:
        return None

    try:
        return get_user_id_from_token(credentials.credentials)
    except TokenError as e:
        logger.warning(f"Rejected bearer token: {e}")
        return None


def get_session_context(
    user_id: Optional[str] = Depends(resolve_user_id),
    db: Session = Depends(get_db),
) -> SessionContext:
    return SessionContext(db=db, user_id=user_id)


def get_authenticated_context(
    ctx: SessionContext = Depends(get_session_context),
) -> SessionContext:
    """Variant for routes that never make sense anonymously."""
    if not ctx.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return ctx
