"""
Weeks and days of a study plan.

Neither table carries an owner column; access is scoped through the parent
plan's owner.
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


def _require_plan(ctx: SessionContext, plan_id: str) -> None:
    user_id = ctx.require_user()
    exists = run_query(lambda: ctx.db.query(StudyPlan.id).filter(
        StudyPlan.id == plan_id,
        StudyPlan.user_id == user_id
    ).first())
    if not exists:
        raise NotFound("Study plan", plan_id)


def _owned_week(ctx: SessionContext, week_id: str) -> StudyPlanWeek:
    user_id = ctx.require_user()
    week = run_query(lambda: ctx.db.query(StudyPlanWeek).join(
        StudyPlan, StudyPlanWeek.study_plan_id == StudyPlan.id
    ).filter(
        StudyPlanWeek.id == week_id,
        StudyPlan.user_id == user_id
    ).first())
    if not week:
        raise NotFound("Study plan week", week_id)
    return week


def _owned_day(ctx: SessionContext, day_id: str) -> StudyPlanDay:
    user_id = ctx.require_user()
    day = run_query(lambda: ctx.db.query(StudyPlanDay).join(
        StudyPlanWeek, StudyPlanDay.week_id == StudyPlanWeek.id
    ).join(
        StudyPlan, StudyPlanWeek.study_plan_id == StudyPlan.id
    ).filter(
        StudyPlanDay.id == day_id,
        StudyPlan.user_id == user_id
    ).first())
    if not day:
        raise NotFound("Study plan day", day_id)
    return day


def list_plan_weeks(ctx: SessionContext, plan_id: Optional[str]) -> Optional[List[Dict[str, Any]]]:
    """Weeks of a plan in week order, each with its days. Disabled without a plan id."""
    if not plan_id:
        return None
    user_id = ctx.require_user()

    def fetch():
        _require_plan(ctx, plan_id)
        weeks = ctx.db.query(StudyPlanWeek).options(
            selectinload(StudyPlanWeek.days)
        ).filter(
            StudyPlanWeek.study_plan_id == plan_id
        ).order_by(StudyPlanWeek.week_number.asc()).all()
        return [serialize(schemas.StudyPlanWeekWithDays, week) for week in weeks]

    return query_cache.get_or_fetch("study-plan-weeks", user_id, (plan_id,), lambda: run_query(fetch))


@mutation(
    "study_plan_week",
    success=lambda week: ("Week Added", f"Week {week['week_number']} has been added to your plan."),
    failure=("Failed to Add Week", "Failed to add study plan week"),
    invalidate_ids=lambda week: [week["study_plan_id"]],
)
def create_week(ctx: SessionContext, payload) -> Dict[str, Any]:
    data = coerce_payload(schemas.StudyPlanWeekCreate, payload)
    _require_plan(ctx, data["study_plan_id"])

    week = StudyPlanWeek(**data)
    ctx.db.add(week)
    commit(ctx.db)
    ctx.db.refresh(week)
    return serialize(schemas.StudyPlanWeek, week)


@mutation(
    "study_plan_week",
    success=("Week Updated", "Your study week has been updated."),
    failure=("Update Failed", "Failed to update study plan week"),
    invalidate_ids=lambda week: [week["study_plan_id"]],
)
def update_week(ctx: SessionContext, week_id: str, updates) -> Dict[str, Any]:
    changes = coerce_payload(schemas.StudyPlanWeekUpdate, updates)
    week = _owned_week(ctx, week_id)

    apply_changes(week, changes)
    commit(ctx.db)
    ctx.db.refresh(week)
    return serialize(schemas.StudyPlanWeek, week)


@mutation(
    "study_plan_day",
    success=lambda day: ("Day Added", f"Day {day['day_number']}: {day['topic']} has been scheduled."),
    failure=("Failed to Add Day", "Failed to add study plan day"),
)
def create_day(ctx: SessionContext, payload) -> Dict[str, Any]:
    data = coerce_payload(schemas.StudyPlanDayCreate, payload)
    _owned_week(ctx, data["week_id"])

    day = StudyPlanDay(**data)
    ctx.db.add(day)
    commit(ctx.db)
    ctx.db.refresh(day)
    return serialize(schemas.StudyPlanDay, day)


@mutation(
    "study_plan_day",
    success=("Day Updated", "Your study day has been updated."),
    failure=("Update Failed", "Failed to update study plan day"),
)
def update_day(ctx: SessionContext, day_id: str, updates) -> Dict[str, Any]:
    changes = coerce_payload(schemas.StudyPlanDayUpdate, updates)
    day = _owned_day(ctx, day_id)

    apply_changes(day, changes)
    commit(ctx.db)
    ctx.db.refresh(day)
    return serialize(schemas.StudyPlanDay, day)


@mutation(
    "study_plan_day",
    success=("Day Completed! 🎉", "Great job on completing today's study session!"),
    failure=("Update Failed", "Failed to mark day as completed"),
)
def mark_day_completed(ctx: SessionContext, day_id: str) -> Dict[str, Any]:
    day = _owned_day(ctx, day_id)
    day.completed = True
    commit(ctx.db)
    ctx.db.refresh(day)
    return serialize(schemas.StudyPlanDay, day)
