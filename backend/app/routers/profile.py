"""
Profile Router
Handles the caller's profile, preferences and onboarding answers.
"""
from fastapi import APIRouter, Depends

from app.dependencies.auth import get_session_context
from app.schemas import profile as schemas
from app.services.context import SessionContext
from app.services import profiles

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("", response_model=schemas.Profile)
def get_profile(ctx: SessionContext = Depends(get_session_context)):
    """404 until onboarding has created the profile."""
    return profiles.get_profile(ctx)


@router.patch("", response_model=schemas.Profile)
def update_profile(updates: schemas.ProfileUpdate, ctx: SessionContext = Depends(get_session_context)):
    """Partial update: personal info, study preferences, AI and privacy settings."""
    return profiles.update_profile(ctx, updates)


@router.post("/onboarding", response_model=schemas.Profile)
def complete_onboarding(answers: schemas.OnboardingRequest, ctx: SessionContext = Depends(get_session_context)):
    return profiles.complete_onboarding(ctx, answers)
