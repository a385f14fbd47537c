"""
Goal Analytics Service.

Summarizes the caller's goals: totals, breakdowns, a six-month created vs
completed series, and plain-language patterns and recommendations derived
from simple thresholds.
"""

import calendar
import logging
from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional

from app.models.models import Goal
from app.schemas import goals as schemas
from app.services.context import SessionContext
from app.services.data_access import run_query
from app.services.query_cache import query_cache

logger = logging.getLogger(__name__)

MONTHS_OF_HISTORY = 6
STALLED_AFTER_DAYS = 7
MAX_FOCUSED_GOALS = 5


def _best_key(counts: Counter) -> str:
    # Ties go to the key seen first
    return max(counts, key=lambda k: counts[k])


def _humanize(category: str) -> str:
    return (category or "").replace("-", " ", 1)


def _shift_month(year: int, month: int, delta: int):
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def monthly_progress(goals: List[Goal], now: datetime, months: int = MONTHS_OF_HISTORY) -> List[Dict[str, Any]]:
    """Goals created and completed per calendar month, oldest month first, ending with the current one."""
    series = []
    for offset in range(months - 1, -1, -1):
        year, month = _shift_month(now.year, now.month, -offset)
        created = sum(
            1 for g in goals
            if g.created_at and (g.created_at.year, g.created_at.month) == (year, month)
        )
        completed = sum(
            1 for g in goals
            if g.completed_at and (g.completed_at.year, g.completed_at.month) == (year, month)
        )
        series.append({
            "month": calendar.month_abbr[month],
            "created": created,
            "completed": completed,
        })
    return series


def success_patterns(goals: List[Goal]) -> List[str]:
    completed = [g for g in goals if g.status == "completed"]
    if not completed:
        return ["No completed goals yet to analyze patterns."]

    patterns = []
    best_category = _best_key(Counter(g.category for g in completed))
    patterns.append(f"Most successful with {_humanize(best_category)} goals")

    best_priority = _best_key(Counter(g.priority for g in completed))
    patterns.append(f"Higher completion rate with {best_priority} priority goals")

    durations = [
        (g.completed_at - g.created_at).total_seconds() / 86400
        for g in completed
        if g.completed_at and g.created_at
    ]
    if durations:
        average_days = sum(durations) / len(durations)
        if average_days > 0:
            patterns.append(f"Average {round(average_days)} days to complete goals")

    return patterns


def failure_patterns(goals: List[Goal], now: datetime) -> List[str]:
    incomplete = [g for g in goals if g.status == "active" and (g.progress or 0) < 50]
    if not incomplete:
        return ["No concerning patterns detected!"]

    patterns = []
    stalled = [
        g for g in incomplete
        if g.updated_at and (now - g.updated_at).total_seconds() / 86400 > STALLED_AFTER_DAYS
    ]
    if stalled:
        patterns.append(f"{len(stalled)} goals haven't been updated in over a week")

    overdue = [g for g in incomplete if g.target_date and g.target_date < now.date()]
    if overdue:
        patterns.append(f"{len(overdue)} goals are past their target date")

    ambitious = [
        g for g in incomplete
        if (g.estimated_time_hours or 0) > 100 and (g.progress or 0) < 25
    ]
    if ambitious:
        patterns.append("Large goals with low progress may need breaking down")

    return patterns


def recommendations(goals: List[Goal]) -> List[str]:
    active = [g for g in goals if g.status == "active"]
    if not active:
        return ["Consider creating some new goals to maintain momentum"]

    tips = []
    if len(active) > MAX_FOCUSED_GOALS:
        tips.append("Focus on fewer goals (3-5) for better success rate")

    undated = [g for g in active if not g.target_date]
    if undated:
        tips.append(f"Add target dates to {len(undated)} goals for better accountability")

    if any(not g.estimated_time_hours for g in active):
        tips.append("Estimate time investment for better planning")

    if len([g for g in active if (g.progress or 0) < 25]) > 2:
        tips.append("Break down large goals into smaller, actionable steps")

    completed = [g for g in goals if g.status == "completed"]
    if completed:
        best_category = _best_key(Counter(g.category for g in completed))
        tips.append(f"Consider more {_humanize(best_category)} goals - you excel at these!")

    return tips


def summarize_goals(goals: List[Goal], now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.utcnow()
    total = len(goals)
    completed = sum(1 for g in goals if g.status == "completed")

    summary = schemas.GoalAnalytics(
        total_goals=total,
        completed_goals=completed,
        active_goals=sum(1 for g in goals if g.status == "active"),
        total_time_invested=sum(g.time_invested_hours or 0 for g in goals),
        average_progress=sum(g.progress or 0 for g in goals) / total if total else 0,
        completion_rate=completed / total * 100 if total else 0,
        category_breakdown=dict(Counter(g.category for g in goals)),
        priority_breakdown=dict(Counter(g.priority for g in goals)),
        monthly_progress=monthly_progress(goals, now),
        success_patterns=success_patterns(goals),
        failure_patterns=failure_patterns(goals, now),
        recommendations=recommendations(goals),
    )
    return summary.model_dump(mode="json")


def get_goal_analytics(ctx: SessionContext) -> Dict[str, Any]:
    """Analytics over all of the caller's goals."""
    user_id = ctx.require_user()

    def fetch():
        goals = ctx.db.query(Goal).filter(Goal.user_id == user_id).all()
        return summarize_goals(goals)

    return query_cache.get_or_fetch("goal-analytics", user_id, (), lambda: run_query(fetch))
