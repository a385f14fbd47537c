"""
Toasts Router
Pending notifications raised by the caller's mutations. Reading drains them.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.dependencies.auth import get_authenticated_context
from app.services.context import SessionContext
from app.services.notifications import toaster

router = APIRouter(prefix="/api/toasts", tags=["toasts"])


@router.get("")
def drain_toasts(ctx: SessionContext = Depends(get_authenticated_context)) -> Dict[str, Any]:
    return {"toasts": toaster.drain(ctx.user_id)}
