"""
Study plan data access.

Reads are scoped to the caller and cached per caller; writes go through
`mutation`, which keeps the cache consistent and raises toasts.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import selectinload

from app.models.models import StudyPlan, StudyPlanWeek, StudyPlanDay
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
from app.services.exceptions import NotFound
from app.services.query_cache import query_cache

logger = logging.getLogger(__name__)


def _owned_plan(ctx: SessionContext, plan_id: str) -> StudyPlan:
    user_id = ctx.require_user()
    plan = run_query(lambda: ctx.db.query(StudyPlan).filter(
        StudyPlan.id == plan_id,
        StudyPlan.user_id == user_id
    ).first())
    if not plan:
        raise NotFound("Study plan", plan_id)
    return plan


def list_study_plans(ctx: SessionContext) -> List[Dict[str, Any]]:
    """All of the caller's plans, newest first."""
    user_id = ctx.require_user()

    def fetch():
        rows = ctx.db.query(StudyPlan).filter(
            StudyPlan.user_id == user_id
        ).order_by(StudyPlan.created_at.desc()).all()
        return [serialize(schemas.StudyPlan, row) for row in rows]

    return query_cache.get_or_fetch("study-plans", user_id, (), lambda: run_query(fetch))


def get_study_plan(ctx: SessionContext, plan_id: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    One plan with its weeks (by week number) and their days (by day number).

    Returns None without touching the store when no id is given.
    """
    if not plan_id:
        return None
    user_id = ctx.require_user()

    def fetch():
        plan = ctx.db.query(StudyPlan).options(
            selectinload(StudyPlan.weeks).selectinload(StudyPlanWeek.days)
        ).filter(
            StudyPlan.id == plan_id,
            StudyPlan.user_id == user_id
        ).first()
        if not plan:
            raise NotFound("Study plan", plan_id)
        return serialize(schemas.StudyPlanWithWeeks, plan)

    return query_cache.get_or_fetch("study-plan", user_id, (plan_id,), lambda: run_query(fetch))


@mutation(
    "study_plan",
    success=("Study Plan Created! 🎉", "Your new study plan has been created successfully."),
    failure=("Creation Failed", "Failed to create study plan"),
)
def create_study_plan(ctx: SessionContext, payload) -> Dict[str, Any]:
    user_id = ctx.require_user()
    data = coerce_payload(schemas.StudyPlanCreate, payload)

    plan = StudyPlan(user_id=user_id, **data)
    ctx.db.add(plan)
    commit(ctx.db)
    ctx.db.refresh(plan)

    logger.info(f"Created study plan {plan.id} for user={user_id}")
    return serialize(schemas.StudyPlan, plan)


@mutation(
    "study_plan",
    success=("Study Plan Updated", "Your study plan has been updated successfully."),
    failure=("Update Failed", "Failed to update study plan"),
)
def update_study_plan(ctx: SessionContext, plan_id: str, updates) -> Dict[str, Any]:
    changes = coerce_payload(schemas.StudyPlanUpdate, updates)
    plan = _owned_plan(ctx, plan_id)

    apply_changes(plan, changes)
    commit(ctx.db)
    ctx.db.refresh(plan)
    return serialize(schemas.StudyPlan, plan)


@mutation(
    "study_plan",
    success=("Study Plan Deleted", "Your study plan has been deleted successfully."),
    failure=("Deletion Failed", "Failed to delete study plan"),
    invalidate_ids=lambda plan_id: [plan_id],
)
def delete_study_plan(ctx: SessionContext, plan_id: str) -> str:
    user_id = ctx.require_user()
    run_query(lambda: ctx.db.query(StudyPlan).filter(
        StudyPlan.id == plan_id,
        StudyPlan.user_id == user_id
    ).delete(synchronize_session=False))
    commit(ctx.db)
    return plan_id


@mutation(
    "study_plan",
    failure=("Update Failed", "Failed to update study plan progress"),
)
def update_study_plan_progress(ctx: SessionContext, plan_id: str, progress: int) -> Dict[str, Any]:
    """Store a progress percentage as given. No bounds are enforced."""
    plan = _owned_plan(ctx, plan_id)
    plan.progress = progress
    commit(ctx.db)
    ctx.db.refresh(plan)
    return serialize(schemas.StudyPlan, plan)


def completed_day_percentage(ctx: SessionContext, plan_id: str) -> int:
    days = run_query(lambda: ctx.db.query(StudyPlanDay.completed).join(
        StudyPlanWeek, StudyPlanDay.week_id == StudyPlanWeek.id
    ).filter(StudyPlanWeek.study_plan_id == plan_id).all())
    if not days:
        return 0
    done = sum(1 for (completed,) in days if completed)
    return round(done / len(days) * 100)


def recalculate_plan_progress(ctx: SessionContext, plan_id: str) -> Dict[str, Any]:
    """Set a plan's progress to the rounded share of its completed days."""
    _owned_plan(ctx, plan_id)
    return update_study_plan_progress(ctx, plan_id, completed_day_percentage(ctx, plan_id))
