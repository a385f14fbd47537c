"""
Daily Streak Service.
Tracks consecutive activity days per streak type ("study", ...).

A streak counts calendar days (UTC) with at least one recorded activity.
It resets to 1 when a full day is missed.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, Optional

from app.models.models import UserStreak
from app.services.context import SessionContext
from app.services.data_access import commit, mutation, run_query
from app.services.query_cache import query_cache

logger = logging.getLogger(__name__)

STREAK_MILESTONES = [3, 7, 14, 30, 60, 100, 150, 200, 365]


def streak_milestones(current_streak: int) -> Dict[str, Any]:
    """Current and next milestone for a streak length."""
    current_milestone = None
    next_milestone = None

    for m in STREAK_MILESTONES:
        if current_streak >= m:
            current_milestone = m
        elif next_milestone is None:
            next_milestone = m

    days_to_next = next_milestone - current_streak if next_milestone else None

    return {
        "current": current_milestone,
        "next": next_milestone,
        "days_to_next": days_to_next
    }


def _streak_data(streak: Optional[UserStreak], streak_type: str) -> Dict[str, Any]:
    current = streak.current_streak if streak else 0
    milestones = streak_milestones(current)
    return {
        "streak_type": streak_type,
        "current_streak": current,
        "longest_streak": streak.longest_streak if streak else 0,
        "last_activity_date": (
            streak.last_activity_date.isoformat()
            if streak and streak.last_activity_date else None
        ),
        "current_milestone": milestones["current"],
        "next_milestone": milestones["next"],
        "days_to_next_milestone": milestones["days_to_next"],
    }


def _streak_toast(result: Dict[str, Any]):
    # Only milestone days are worth a notification
    if result.get("changed") and result["current_streak"] in STREAK_MILESTONES:
        return ("Streak Milestone! 🔥", f"Amazing! {result['current_streak']} day streak!")
    return None


def get_user_streak(ctx: SessionContext, streak_type: str = "study") -> Dict[str, Any]:
    """Streak data for the caller; zeros when nothing was recorded yet."""
    user_id = ctx.require_user()

    def fetch():
        streak = ctx.db.query(UserStreak).filter(
            UserStreak.user_id == user_id,
            UserStreak.streak_type == streak_type
        ).first()
        return _streak_data(streak, streak_type)

    return query_cache.get_or_fetch("user-streak", user_id, (streak_type,), lambda: run_query(fetch))


@mutation(
    "user_streak",
    success=_streak_toast,
    failure=("Streak Update Failed", "Failed to update streak"),
    invalidate_ids=lambda result: [],
)
def update_user_streak(ctx: SessionContext, streak_type: str = "study", today: Optional[date] = None) -> Dict[str, Any]:
    """
    Record activity for today.

    Same day as the last activity: no change. The following day: +1.
    Any longer gap, or no previous activity: back to 1. The longest streak
    is raised whenever the current one passes it.
    """
    user_id = ctx.require_user()
    today = today or datetime.utcnow().date()

    streak = run_query(lambda: ctx.db.query(UserStreak).filter(
        UserStreak.user_id == user_id,
        UserStreak.streak_type == streak_type
    ).first())

    if not streak:
        streak = UserStreak(
            user_id=user_id,
            streak_type=streak_type,
            current_streak=0,
            longest_streak=0
        )
        ctx.db.add(streak)

    changed = True
    if streak.last_activity_date is None:
        streak.current_streak = 1
    else:
        days_since_last = (today - streak.last_activity_date).days
        if days_since_last <= 0:
            # Already counted today
            changed = False
        elif days_since_last == 1:
            streak.current_streak += 1
        else:
            streak.current_streak = 1

    if changed:
        streak.last_activity_date = today
        if streak.current_streak > (streak.longest_streak or 0):
            streak.longest_streak = streak.current_streak

    commit(ctx.db)
    ctx.db.refresh(streak)

    result = _streak_data(streak, streak_type)
    result["changed"] = changed
    return result
