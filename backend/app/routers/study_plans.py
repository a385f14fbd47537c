"""
Study Plan API Router

Plans, their weeks and days. All data is scoped to the bearer token's user.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from app.dependencies.auth import get_session_context
from app.schemas import study as schemas
from app.services.context import SessionContext
from app.services import study_plans, study_plan_weeks

router = APIRouter(prefix="/api/study-plans", tags=["study-plans"])


class WeekCreateRequest(BaseModel):
    week_number: int = Field(..., ge=1)
    title: str = Field(..., min_length=1)
    description: Optional[str] = None


class DayCreateRequest(BaseModel):
    day_number: int = Field(..., ge=1)
    topic: str = Field(..., min_length=1)
    subtopic: Optional[str] = None
    study_method: Optional[str] = None
    difficulty: Optional[str] = None
    estimated_time_minutes: Optional[int] = None


# ==================== Plans ====================

@router.get("", response_model=List[schemas.StudyPlan])
def list_plans(ctx: SessionContext = Depends(get_session_context)):
    """All study plans, newest first."""
    return study_plans.list_study_plans(ctx)


@router.post("", response_model=schemas.StudyPlan, status_code=status.HTTP_201_CREATED)
def create_plan(payload: schemas.StudyPlanCreate, ctx: SessionContext = Depends(get_session_context)):
    return study_plans.create_study_plan(ctx, payload)


@router.get("/{plan_id}", response_model=schemas.StudyPlanWithWeeks)
def get_plan(plan_id: str, ctx: SessionContext = Depends(get_session_context)):
    """One plan with weeks and days in order."""
    return study_plans.get_study_plan(ctx, plan_id)


@router.patch("/{plan_id}", response_model=schemas.StudyPlan)
def update_plan(plan_id: str, updates: schemas.StudyPlanUpdate, ctx: SessionContext = Depends(get_session_context)):
    return study_plans.update_study_plan(ctx, plan_id, updates)


@router.delete("/{plan_id}")
def delete_plan(plan_id: str, ctx: SessionContext = Depends(get_session_context)) -> Dict[str, Any]:
    study_plans.delete_study_plan(ctx, plan_id)
    return {"id": plan_id, "deleted": True}


@router.put("/{plan_id}/progress", response_model=schemas.StudyPlan)
def set_progress(plan_id: str, body: schemas.StudyPlanProgressUpdate, ctx: SessionContext = Depends(get_session_context)):
    return study_plans.update_study_plan_progress(ctx, plan_id, body.progress)


@router.post("/{plan_id}/progress/recalculate", response_model=schemas.StudyPlan)
def recalculate_progress(plan_id: str, ctx: SessionContext = Depends(get_session_context)):
    """Progress = rounded share of completed days."""
    return study_plans.recalculate_plan_progress(ctx, plan_id)


# ==================== Weeks & days ====================

@router.get("/{plan_id}/weeks", response_model=List[schemas.StudyPlanWeekWithDays])
def list_weeks(plan_id: str, ctx: SessionContext = Depends(get_session_context)):
    return study_plan_weeks.list_plan_weeks(ctx, plan_id)


@router.post("/{plan_id}/weeks", response_model=schemas.StudyPlanWeek, status_code=status.HTTP_201_CREATED)
def create_week(plan_id: str, payload: WeekCreateRequest, ctx: SessionContext = Depends(get_session_context)):
    data = payload.model_dump(exclude_unset=True)
    data["study_plan_id"] = plan_id
    return study_plan_weeks.create_week(ctx, data)


@router.patch("/weeks/{week_id}", response_model=schemas.StudyPlanWeek)
def update_week(week_id: str, updates: schemas.StudyPlanWeekUpdate, ctx: SessionContext = Depends(get_session_context)):
    return study_plan_weeks.update_week(ctx, week_id, updates)


@router.post("/weeks/{week_id}/days", response_model=schemas.StudyPlanDay, status_code=status.HTTP_201_CREATED)
def create_day(week_id: str, payload: DayCreateRequest, ctx: SessionContext = Depends(get_session_context)):
    data = payload.model_dump(exclude_unset=True)
    data["week_id"] = week_id
    return study_plan_weeks.create_day(ctx, data)


@router.patch("/days/{day_id}", response_model=schemas.StudyPlanDay)
def update_day(day_id: str, updates: schemas.StudyPlanDayUpdate, ctx: SessionContext = Depends(get_session_context)):
    return study_plan_weeks.update_day(ctx, day_id, updates)


@router.post("/days/{day_id}/complete", response_model=schemas.StudyPlanDay)
def complete_day(day_id: str, ctx: SessionContext = Depends(get_session_context)):
    return study_plan_weeks.mark_day_completed(ctx, day_id)
