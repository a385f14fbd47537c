"""
Study plan, session and material schemas.

*Create / *Update models validate incoming payloads (the owner id is never
part of them); the plain models are the serialized records the data-access
layer returns and caches.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field


# =============================================================================
# STUDY PLANS
# =============================================================================

class StudyPlanCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    subject: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    difficulty: Optional[str] = None
    learning_style: Optional[str] = None
    daily_time_minutes: Optional[int] = Field(None, ge=0)
    target_date: Optional[date] = None
    status: Optional[str] = None
    progress: Optional[int] = None
    ai_generated: Optional[bool] = None
    metadata: Optional[Dict[str, Any]] = None
    estimated_time_hours: Optional[float] = None


class StudyPlanUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    subject: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    difficulty: Optional[str] = None
    learning_style: Optional[str] = None
    daily_time_minutes: Optional[int] = None
    target_date: Optional[date] = None
    status: Optional[str] = None
    progress: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None
    estimated_time_hours: Optional[float] = None
    time_invested_hours: Optional[float] = None


class StudyPlanDayCreate(BaseModel):
    week_id: str
    day_number: int = Field(..., ge=1)
    topic: str = Field(..., min_length=1)
    subtopic: Optional[str] = None
    study_method: Optional[str] = None
    difficulty: Optional[str] = None
    estimated_time_minutes: Optional[int] = None
    completed: Optional[bool] = None


class StudyPlanDayUpdate(BaseModel):
    day_number: Optional[int] = None
    topic: Optional[str] = None
    subtopic: Optional[str] = None
    study_method: Optional[str] = None
    difficulty: Optional[str] = None
    estimated_time_minutes: Optional[int] = None
    completed: Optional[bool] = None


class StudyPlanDay(BaseModel):
    id: str
    week_id: str
    day_number: int
    topic: str
    subtopic: Optional[str] = None
    study_method: Optional[str] = None
    difficulty: Optional[str] = None
    estimated_time_minutes: Optional[int] = None
    completed: Optional[bool] = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StudyPlanWeekCreate(BaseModel):
    study_plan_id: str
    week_number: int = Field(..., ge=1)
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    completed: Optional[bool] = None


class StudyPlanWeekUpdate(BaseModel):
    week_number: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None


class StudyPlanWeek(BaseModel):
    id: str
    study_plan_id: str
    week_number: int
    title: str
    description: Optional[str] = None
    completed: Optional[bool] = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StudyPlanWeekWithDays(StudyPlanWeek):
    days: List[StudyPlanDay] = []


class StudyPlan(BaseModel):
    id: str
    user_id: str
    title: str
    subject: str
    description: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    difficulty: Optional[str] = None
    learning_style: Optional[str] = None
    daily_time_minutes: Optional[int] = None
    target_date: Optional[date] = None
    status: Optional[str] = None
    progress: Optional[int] = 0
    ai_generated: Optional[bool] = False
    metadata: Optional[Dict[str, Any]] = Field(
        None, validation_alias=AliasChoices("extra_data", "metadata")
    )
    estimated_time_hours: Optional[float] = None
    time_invested_hours: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StudyPlanWithWeeks(StudyPlan):
    weeks: List[StudyPlanWeekWithDays] = []


class StudyPlanProgressUpdate(BaseModel):
    progress: int


# =============================================================================
# STUDY SESSIONS
# =============================================================================

class StudySessionCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    study_plan_id: Optional[str] = None
    day_id: Optional[str] = None
    topic: Optional[str] = None
    subtopic: Optional[str] = None
    session_type: Optional[str] = None
    study_method: Optional[str] = None
    status: Optional[str] = None
    objectives: Optional[List[str]] = None
    notes: Optional[str] = None


class StudySessionUpdate(BaseModel):
    title: Optional[str] = None
    study_plan_id: Optional[str] = None
    topic: Optional[str] = None
    subtopic: Optional[str] = None
    session_type: Optional[str] = None
    study_method: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    objectives: Optional[List[str]] = None
    completed_objectives: Optional[List[str]] = None
    techniques_used: Optional[List[str]] = None
    confidence_rating: Optional[int] = None
    focus_level: Optional[int] = None
    effectiveness_rating: Optional[int] = None
    energy_level: Optional[str] = None
    breaks_taken: Optional[int] = None
    distractions_count: Optional[int] = None
    progress: Optional[int] = None


class CompleteSessionRequest(BaseModel):
    notes: Optional[str] = None
    confidence_rating: Optional[int] = None
    focus_level: Optional[int] = None
    effectiveness_rating: Optional[int] = None
    completed_objectives: Optional[List[str]] = None
    techniques_used: Optional[List[str]] = None


class StudySession(BaseModel):
    id: str
    user_id: str
    study_plan_id: Optional[str] = None
    day_id: Optional[str] = None
    title: str
    topic: Optional[str] = None
    subtopic: Optional[str] = None
    session_type: Optional[str] = None
    study_method: Optional[str] = None
    status: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    confidence_rating: Optional[int] = None
    focus_level: Optional[int] = None
    effectiveness_rating: Optional[int] = None
    energy_level: Optional[str] = None
    notes: Optional[str] = None
    objectives: Optional[List[str]] = None
    completed_objectives: Optional[List[str]] = None
    techniques_used: Optional[List[str]] = None
    breaks_taken: Optional[int] = None
    distractions_count: Optional[int] = None
    progress: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# =============================================================================
# STUDY MATERIALS
# =============================================================================

class StudyMaterialCreate(BaseModel):
    title: str = Field(..., min_length=1)
    material_type: str = Field(..., min_length=1)
    study_plan_id: Optional[str] = None
    session_id: Optional[str] = None
    file_path: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    author: Optional[str] = None
    difficulty: Optional[str] = None
    duration_minutes: Optional[int] = None
    page_start: Optional[int] = None
    page_end: Optional[int] = None
    file_size: Optional[int] = None
    is_required: Optional[bool] = None
    tags: Optional[List[str]] = None
    order_index: Optional[int] = None


class StudyMaterialUpdate(BaseModel):
    title: Optional[str] = None
    material_type: Optional[str] = None
    file_path: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    author: Optional[str] = None
    difficulty: Optional[str] = None
    duration_minutes: Optional[int] = None
    page_start: Optional[int] = None
    page_end: Optional[int] = None
    is_required: Optional[bool] = None
    tags: Optional[List[str]] = None
    order_index: Optional[int] = None


class StudyMaterial(BaseModel):
    id: str
    user_id: str
    study_plan_id: Optional[str] = None
    session_id: Optional[str] = None
    title: str
    material_type: str
    file_path: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    author: Optional[str] = None
    difficulty: Optional[str] = None
    duration_minutes: Optional[int] = None
    page_start: Optional[int] = None
    page_end: Optional[int] = None
    file_size: Optional[int] = None
    is_required: Optional[bool] = False
    tags: Optional[List[str]] = None
    order_index: Optional[int] = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PlanSummary(BaseModel):
    title: str
    subject: str

    class Config:
        from_attributes = True


class StudySessionDetail(StudySession):
    study_plan: Optional[PlanSummary] = None
    materials: List[StudyMaterial] = []


class UploadedFile(BaseModel):
    path: str
    bucket: str
    public_url: str
