"""
Goals API Router

Goals with milestones (action items), notes, tracked events, AI suggestion
acceptance and the analytics summary.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.dependencies.auth import get_session_context
from app.schemas import goals as schemas
from app.schemas.ai import GoalSuggestion
from app.services.context import SessionContext
from app.services import goals, goal_analytics

router = APIRouter(prefix="/api/goals", tags=["goals"])


@router.get("", response_model=List[schemas.Goal])
def list_goals(
    status_filter: Optional[str] = Query(None, alias="status"),
    ctx: SessionContext = Depends(get_session_context),
):
    """Goals newest first, optionally filtered by status ("active", "completed", ...)."""
    return goals.list_goals(ctx, status_filter)


@router.post("", response_model=schemas.Goal, status_code=status.HTTP_201_CREATED)
def create_goal(payload: schemas.GoalCreateRequest, ctx: SessionContext = Depends(get_session_context)):
    """Create a goal; each milestone becomes an action item, in order."""
    data = payload.model_dump(exclude_unset=True, exclude={"milestones"})
    return goals.create_goal(ctx, data, payload.milestones)


@router.get("/analytics", response_model=schemas.GoalAnalytics)
def get_analytics(ctx: SessionContext = Depends(get_session_context)):
    return goal_analytics.get_goal_analytics(ctx)


@router.post("/from-suggestion", response_model=schemas.Goal, status_code=status.HTTP_201_CREATED)
def create_from_suggestion(suggestion: GoalSuggestion, ctx: SessionContext = Depends(get_session_context)):
    """Accept an AI goal suggestion as a new goal."""
    return goals.create_goal_from_suggestion(ctx, suggestion)


@router.post("/events", response_model=schemas.GoalEvent, status_code=status.HTTP_201_CREATED)
def track_event(payload: schemas.GoalEventCreate, ctx: SessionContext = Depends(get_session_context)):
    return goals.track_goal_event(ctx, payload.event_type, payload.goal_id, payload.event_data)


@router.patch("/action-items/{item_id}", response_model=schemas.ActionItem)
def toggle_action_item(item_id: str, body: schemas.ActionItemToggle, ctx: SessionContext = Depends(get_session_context)):
    """Complete or reopen an action item; the goal's progress follows."""
    return goals.toggle_action_item(ctx, item_id, body.completed)


@router.get("/{goal_id}", response_model=schemas.GoalWithDetails)
def get_goal(goal_id: str, ctx: SessionContext = Depends(get_session_context)):
    return goals.get_goal(ctx, goal_id)


@router.patch("/{goal_id}", response_model=schemas.Goal)
def update_goal(goal_id: str, updates: schemas.GoalUpdate, ctx: SessionContext = Depends(get_session_context)):
    return goals.update_goal(ctx, goal_id, updates)


@router.delete("/{goal_id}")
def delete_goal(goal_id: str, ctx: SessionContext = Depends(get_session_context)) -> Dict[str, Any]:
    """Deletes the goal row only."""
    goals.delete_goal(ctx, goal_id)
    return {"id": goal_id, "deleted": True}


@router.post("/{goal_id}/action-items", response_model=schemas.ActionItem, status_code=status.HTTP_201_CREATED)
def add_action_item(goal_id: str, payload: schemas.ActionItemCreate, ctx: SessionContext = Depends(get_session_context)):
    return goals.add_action_item(ctx, goal_id, payload)


@router.post("/{goal_id}/notes", response_model=schemas.GoalNote, status_code=status.HTTP_201_CREATED)
def add_note(goal_id: str, payload: schemas.GoalNoteCreate, ctx: SessionContext = Depends(get_session_context)):
    return goals.add_goal_note(ctx, goal_id, payload)
