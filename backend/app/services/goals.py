"""
Goal data access: goals, action items, notes and tracked goal events.

A goal and its milestone action items are written in two separate commits.
If the second one fails the goal stays, without items. Deleting a goal
removes only the goal row; its action items, notes and events are left in
place.
"""
import calendar
import logging
import re
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.orm import selectinload

from app.models.models import Goal, GoalActionItem, GoalEvent, GoalNote
from app.schemas import goals as schemas
from app.schemas.ai import GoalSuggestion
from app.services.context import SessionContext
from app.services.data_access import (
    apply_changes,
    coerce_payload,
    commit,
    mutation,
    run_query,
    serialize,
)
from app.services.exceptions import DataAccessError, NotFound, RemoteError
from app.services.query_cache import query_cache

logger = logging.getLogger(__name__)

DEFAULT_TIMELINE_WEEKS = 4
DEFAULT_TIMELINE_MONTHS = 3


# =============================================================================
# HELPERS
# =============================================================================

def _owned_goal(ctx: SessionContext, goal_id: str) -> Goal:
    user_id = ctx.require_user()
    goal = run_query(lambda: ctx.db.query(Goal).filter(
        Goal.id == goal_id,
        Goal.user_id == user_id
    ).first())
    if not goal:
        raise NotFound("Goal", goal_id)
    return goal


def _owned_action_item(ctx: SessionContext, item_id: str) -> GoalActionItem:
    user_id = ctx.require_user()
    item = run_query(lambda: ctx.db.query(GoalActionItem).join(
        Goal, GoalActionItem.goal_id == Goal.id
    ).filter(
        GoalActionItem.id == item_id,
        Goal.user_id == user_id
    ).first())
    if not item:
        raise NotFound("Action item", item_id)
    return item


def add_months(start: date, months: int) -> date:
    """Same day-of-month `months` later, clamped to the end of shorter months."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def _leading_int(text: str) -> Optional[int]:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else None


def target_date_from_timeline(timeline: Optional[str], today: Optional[date] = None) -> date:
    """
    Turn a suggestion timeline ("6 weeks", "2 months", ...) into a date.

    Weeks: N*7 days (4 when no number leads the text). Months: N calendar
    months (3 by default). Anything else: 3 months.
    """
    today = today or datetime.utcnow().date()
    timeframe = (timeline or "").lower()

    if "week" in timeframe:
        weeks = _leading_int(timeframe) or DEFAULT_TIMELINE_WEEKS
        return today + timedelta(days=weeks * 7)
    if "month" in timeframe:
        months = _leading_int(timeframe) or DEFAULT_TIMELINE_MONTHS
        return add_months(today, months)
    return add_months(today, DEFAULT_TIMELINE_MONTHS)


def _insert_goal(ctx: SessionContext, data: Dict[str, Any]) -> Goal:
    goal = Goal(user_id=ctx.require_user(), **data)
    ctx.db.add(goal)
    commit(ctx.db)
    ctx.db.refresh(goal)
    return goal


def _insert_milestones(ctx: SessionContext, goal_id: str, milestones: Iterable[str]) -> None:
    items = [
        GoalActionItem(goal_id=goal_id, title=title, order_index=index)
        for index, title in enumerate(milestones)
    ]
    if not items:
        return
    ctx.db.add_all(items)
    commit(ctx.db)


def _insert_goal_with_milestones(ctx: SessionContext, data: Dict[str, Any], milestones: Iterable[str]) -> Goal:
    goal = _insert_goal(ctx, data)
    # The goal is committed and visible even if the milestones fail below
    query_cache.invalidate("goal", ctx.user_id, [goal.id])
    _insert_milestones(ctx, goal.id, milestones)
    return goal


def _goal_detail(ctx: SessionContext, goal_id: str) -> Dict[str, Any]:
    user_id = ctx.require_user()
    goal = ctx.db.query(Goal).options(
        selectinload(Goal.action_items),
        selectinload(Goal.notes)
    ).filter(
        Goal.id == goal_id,
        Goal.user_id == user_id
    ).first()
    if not goal:
        raise NotFound("Goal", goal_id)
    return serialize(schemas.GoalWithDetails, goal)


# =============================================================================
# READS
# =============================================================================

def list_goals(ctx: SessionContext, status: Optional[str] = None) -> List[Dict[str, Any]]:
    """Caller's goals, newest first, optionally only those with a given status."""
    user_id = ctx.require_user()

    def fetch():
        query = ctx.db.query(Goal).filter(Goal.user_id == user_id)
        if status:
            query = query.filter(Goal.status == status)
        rows = query.order_by(Goal.created_at.desc()).all()
        return [serialize(schemas.Goal, row) for row in rows]

    return query_cache.get_or_fetch("goals", user_id, (status,), lambda: run_query(fetch))


def get_goal(ctx: SessionContext, goal_id: Optional[str]) -> Optional[Dict[str, Any]]:
    """One goal with action items by order_index and notes newest first."""
    if not goal_id:
        return None
    user_id = ctx.require_user()
    return query_cache.get_or_fetch(
        "goal", user_id, (goal_id,), lambda: run_query(lambda: _goal_detail(ctx, goal_id))
    )


# =============================================================================
# WRITES
# =============================================================================

@mutation(
    "goal",
    success=lambda goal: ("Goal Created! 🎯", f'Goal "{goal["title"]}" created successfully!'),
    failure=("Creation Failed", "Failed to create goal"),
)
def create_goal(ctx: SessionContext, payload, milestones: Optional[List[str]] = None) -> Dict[str, Any]:
    """Insert a goal, then one action item per milestone (order_index 0..n-1)."""
    data = coerce_payload(schemas.GoalCreate, payload)
    goal = _insert_goal_with_milestones(ctx, data, milestones or [])
    logger.info(f"Created goal {goal.id} with {len(milestones or [])} milestones for user={ctx.user_id}")
    return serialize(schemas.Goal, goal)


@mutation(
    "goal",
    success=("Success", "Goal updated successfully"),
    failure=("Error", "Failed to update goal"),
)
def update_goal(ctx: SessionContext, goal_id: str, updates) -> Dict[str, Any]:
    changes = coerce_payload(schemas.GoalUpdate, updates)
    goal = _owned_goal(ctx, goal_id)

    if changes.get("status") == "completed" and goal.status != "completed":
        changes.setdefault("completed_at", datetime.utcnow())

    apply_changes(goal, changes)
    commit(ctx.db)
    ctx.db.refresh(goal)
    return serialize(schemas.Goal, goal)


@mutation(
    "goal",
    success=("Goal Deleted", "Your goal has been deleted."),
    failure=("Deletion Failed", "Failed to delete goal"),
    invalidate_ids=lambda goal_id: [goal_id],
)
def delete_goal(ctx: SessionContext, goal_id: str) -> str:
    user_id = ctx.require_user()
    run_query(lambda: ctx.db.query(Goal).filter(
        Goal.id == goal_id,
        Goal.user_id == user_id
    ).delete(synchronize_session=False))
    commit(ctx.db)
    return goal_id


@mutation(
    "goal_action_item",
    success=("Success", "Action item added"),
    failure=("Error", "Failed to add action item"),
    invalidate_ids=lambda item: [item["goal_id"]],
)
def add_action_item(ctx: SessionContext, goal_id: str, payload) -> Dict[str, Any]:
    """Append an action item after the goal's existing ones."""
    data = coerce_payload(schemas.ActionItemCreate, payload)
    _owned_goal(ctx, goal_id)

    count = run_query(lambda: ctx.db.query(func.count(GoalActionItem.id)).filter(
        GoalActionItem.goal_id == goal_id
    ).scalar())

    item = GoalActionItem(goal_id=goal_id, order_index=count or 0, **data)
    ctx.db.add(item)
    commit(ctx.db)
    ctx.db.refresh(item)
    return serialize(schemas.ActionItem, item)


@mutation(
    "goal_action_item",
    success=lambda item: (
        ("Action Item Completed ✅", item["title"]) if item["is_completed"]
        else ("Action Item Reopened", item["title"])
    ),
    failure=("Error", "Failed to update action item"),
    invalidate_ids=lambda item: [item["goal_id"]],
)
def toggle_action_item(ctx: SessionContext, item_id: str, completed: bool) -> Dict[str, Any]:
    """
    Mark an action item done or not done, then set the goal's progress to
    the rounded percentage of its completed items.
    """
    item = _owned_action_item(ctx, item_id)
    item.is_completed = completed
    item.completed_at = datetime.utcnow() if completed else None
    commit(ctx.db)
    ctx.db.refresh(item)

    states = run_query(lambda: ctx.db.query(GoalActionItem.is_completed).filter(
        GoalActionItem.goal_id == item.goal_id
    ).all())
    done = sum(1 for (is_completed,) in states if is_completed)
    progress = round(done / len(states) * 100) if states else 0

    goal = run_query(lambda: ctx.db.query(Goal).filter(Goal.id == item.goal_id).first())
    if goal:
        goal.progress = progress
        commit(ctx.db)

    return serialize(schemas.ActionItem, item)


@mutation(
    "goal_note",
    success=("Success", "Note added"),
    failure=("Error", "Failed to add note"),
    invalidate_ids=lambda note: [note["goal_id"]],
)
def add_goal_note(ctx: SessionContext, goal_id: str, payload) -> Dict[str, Any]:
    data = coerce_payload(schemas.GoalNoteCreate, payload)
    _owned_goal(ctx, goal_id)

    note = GoalNote(goal_id=goal_id, user_id=ctx.require_user(), **data)
    ctx.db.add(note)
    commit(ctx.db)
    ctx.db.refresh(note)
    return serialize(schemas.GoalNote, note)


def track_goal_event(
    ctx: SessionContext,
    event_type: str,
    goal_id: Optional[str] = None,
    event_data: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Append a goal analytics event for the caller. Silent: no toast, no cache change."""
    data = coerce_payload(schemas.GoalEventCreate, {
        "goal_id": goal_id,
        "event_type": event_type,
        "event_data": event_data,
    })
    event = GoalEvent(user_id=ctx.require_user(), **data)
    ctx.db.add(event)
    commit(ctx.db)
    ctx.db.refresh(event)
    return serialize(schemas.GoalEvent, event)


@mutation(
    "goal",
    success=lambda goal: ("Success", f'Goal "{goal["title"]}" created successfully!'),
    failure=("Error", "Failed to create goal. Please try again."),
)
def create_goal_from_suggestion(ctx: SessionContext, suggestion, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Accept an AI goal suggestion: create the goal with a target date derived
    from its timeline, its milestones as action items, and a "created" event.
    """
    if not isinstance(suggestion, GoalSuggestion):
        try:
            suggestion = GoalSuggestion.model_validate(suggestion)
        except ValidationError as e:
            raise RemoteError(str(e))

    data = coerce_payload(schemas.GoalCreate, {
        "title": suggestion.title,
        "description": suggestion.description,
        "category": suggestion.category,
        "priority": suggestion.priority,
        "target_date": target_date_from_timeline(suggestion.timeline, today),
        "success_metrics": suggestion.success_metrics,
        "estimated_time_hours": suggestion.estimated_time_hours,
    })
    goal = _insert_goal_with_milestones(ctx, data, suggestion.milestones)

    try:
        track_goal_event(
            ctx,
            event_type="created",
            goal_id=goal.id,
            event_data={"source": "ai_suggestion", "difficulty": suggestion.difficulty},
        )
    except DataAccessError as e:
        logger.warning(f"Could not track creation of goal {goal.id}: {e}")

    return serialize(schemas.Goal, goal)
