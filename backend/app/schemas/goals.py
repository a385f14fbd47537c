"""
Goal schemas: goals, their action items and notes, tracked events and the
analytics summary.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class GoalCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    progress: Optional[int] = None
    target_date: Optional[date] = None
    estimated_time_hours: Optional[float] = None
    time_invested_hours: Optional[float] = None
    success_metrics: Optional[str] = None
    related_study_plans: Optional[List[str]] = None


class GoalCreateRequest(GoalCreate):
    """Create body for the API; milestones become action items in order."""
    milestones: List[str] = []


class GoalUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    progress: Optional[int] = None
    target_date: Optional[date] = None
    estimated_time_hours: Optional[float] = None
    time_invested_hours: Optional[float] = None
    success_metrics: Optional[str] = None
    related_study_plans: Optional[List[str]] = None
    completed_at: Optional[datetime] = None


class Goal(BaseModel):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    category: str
    priority: str
    status: str
    progress: Optional[int] = 0
    target_date: Optional[date] = None
    estimated_time_hours: Optional[float] = None
    time_invested_hours: Optional[float] = 0
    success_metrics: Optional[str] = None
    related_study_plans: Optional[List[str]] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ActionItemCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    due_date: Optional[date] = None


class ActionItem(BaseModel):
    id: str
    goal_id: str
    title: str
    description: Optional[str] = None
    due_date: Optional[date] = None
    order_index: int = 0
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ActionItemToggle(BaseModel):
    completed: bool


class GoalNoteCreate(BaseModel):
    content: str = Field(..., min_length=1)
    note_type: str = "reflection"


class GoalNote(BaseModel):
    id: str
    goal_id: str
    user_id: str
    content: str
    note_type: Optional[str] = "reflection"
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GoalWithDetails(Goal):
    action_items: List[ActionItem] = []
    notes: List[GoalNote] = []


class GoalEventCreate(BaseModel):
    goal_id: Optional[str] = None
    event_type: str = Field(..., min_length=1)
    event_data: Optional[Dict[str, Any]] = None


class GoalEvent(BaseModel):
    id: str
    user_id: str
    goal_id: Optional[str] = None
    event_type: str
    event_data: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MonthlyProgress(BaseModel):
    month: str
    created: int
    completed: int


class GoalAnalytics(BaseModel):
    total_goals: int
    completed_goals: int
    active_goals: int
    total_time_invested: float
    average_progress: float
    completion_rate: float
    category_breakdown: Dict[str, int]
    priority_breakdown: Dict[str, int]
    monthly_progress: List[MonthlyProgress]
    success_patterns: List[str]
    failure_patterns: List[str]
    recommendations: List[str]
