"""
Profile data access. One profile row per caller, keyed by user_id.
"""
import logging
from typing import Any, Dict

from app.models.models import UserProfile
from app.schemas import profile as schemas
from app.services.context import SessionContext
from app.services.data_access import (
    apply_changes,
    coerce_payload,
    commit,
    mutation,
    run_query,
    serialize,
)
from app.services.exceptions import NotFound
from app.services.query_cache import query_cache

logger = logging.getLogger(__name__)


def _own_profile(ctx: SessionContext) -> UserProfile:
    user_id = ctx.require_user()
    profile = run_query(lambda: ctx.db.query(UserProfile).filter(
        UserProfile.user_id == user_id
    ).first())
    if not profile:
        raise NotFound("Profile", user_id)
    return profile


def get_profile(ctx: SessionContext) -> Dict[str, Any]:
    user_id = ctx.require_user()
    return query_cache.get_or_fetch(
        "profile", user_id, (),
        lambda: run_query(lambda: serialize(schemas.Profile, _own_profile(ctx)))
    )


@mutation(
    "profile",
    success=("Profile updated! ✅", "Your changes have been saved successfully."),
    failure=("Error updating profile", "Please try again."),
    invalidate_ids=lambda profile: [],
)
def update_profile(ctx: SessionContext, updates) -> Dict[str, Any]:
    """Partial update of the caller's profile. Missing profile -> NotFound."""
    changes = coerce_payload(schemas.ProfileUpdate, updates)
    profile = _own_profile(ctx)

    apply_changes(profile, changes)
    commit(ctx.db)
    ctx.db.refresh(profile)
    return serialize(schemas.Profile, profile)


@mutation(
    "profile",
    success=("Welcome aboard! 🎉", "Your study preferences are all set."),
    failure=("Onboarding Failed", "Failed to save your preferences"),
    invalidate_ids=lambda profile: [],
)
def complete_onboarding(ctx: SessionContext, answers) -> Dict[str, Any]:
    """Create the caller's profile if needed and store the onboarding answers."""
    user_id = ctx.require_user()
    changes = coerce_payload(schemas.OnboardingRequest, answers)

    profile = run_query(lambda: ctx.db.query(UserProfile).filter(
        UserProfile.user_id == user_id
    ).first())
    if not profile:
        profile = UserProfile(user_id=user_id)
        ctx.db.add(profile)
        logger.info(f"Creating profile for user={user_id}")

    apply_changes(profile, changes)
    profile.onboarding_completed = True
    commit(ctx.db)
    ctx.db.refresh(profile)
    return serialize(schemas.Profile, profile)
