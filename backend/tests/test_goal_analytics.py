"""
Tests for the goal analytics summary.
"""

import pytest
from datetime import date, datetime, timedelta

from app.models.models import Goal
from app.services.goal_analytics import (
    failure_patterns,
    monthly_progress,
    recommendations,
    success_patterns,
    summarize_goals,
)

NOW = datetime(2024, 6, 15, 12, 0, 0)


def make_goal(**overrides) -> Goal:
    fields = {
        "title": "Goal",
        "category": "short-term",
        "priority": "medium",
        "status": "active",
        "progress": 0,
        "created_at": NOW - timedelta(days=1),
        "updated_at": NOW - timedelta(days=1),
        "target_date": None,
        "estimated_time_hours": None,
        "time_invested_hours": 0,
        "completed_at": None,
    }
    fields.update(overrides)
    return Goal(**fields)


class TestMonthlyProgress:
    """Six calendar months ending with the current one"""

    @pytest.mark.unit
    def test_labels_and_counts(self):
        goals = [
            make_goal(created_at=datetime(2024, 1, 10)),
            make_goal(created_at=datetime(2024, 6, 1), completed_at=datetime(2024, 6, 10), status="completed"),
            make_goal(created_at=datetime(2023, 12, 31)),
        ]

        series = monthly_progress(goals, NOW)

        assert [m["month"] for m in series] == ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
        assert series[0] == {"month": "Jan", "created": 1, "completed": 0}
        assert series[-1] == {"month": "Jun", "created": 1, "completed": 1}

    @pytest.mark.unit
    def test_crosses_year_boundary(self):
        series = monthly_progress([], datetime(2024, 2, 1))
        assert [m["month"] for m in series] == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]


class TestPatterns:
    """Plain-language patterns from simple thresholds"""

    @pytest.mark.unit
    def test_no_completed_goals(self):
        assert success_patterns([make_goal()]) == ["No completed goals yet to analyze patterns."]

    @pytest.mark.unit
    def test_success_patterns(self):
        goals = [
            make_goal(status="completed", category="exam-preparation", priority="high",
                      created_at=NOW - timedelta(days=10), completed_at=NOW),
            make_goal(status="completed", category="exam-preparation", priority="high",
                      created_at=NOW - timedelta(days=20), completed_at=NOW),
        ]

        assert success_patterns(goals) == [
            "Most successful with exam preparation goals",
            "Higher completion rate with high priority goals",
            "Average 15 days to complete goals",
        ]

    @pytest.mark.unit
    def test_failure_patterns(self):
        goals = [
            make_goal(updated_at=NOW - timedelta(days=8)),
            make_goal(target_date=date(2024, 6, 1)),
            make_goal(estimated_time_hours=150, progress=10),
        ]

        assert failure_patterns(goals, NOW) == [
            "1 goals haven't been updated in over a week",
            "1 goals are past their target date",
            "Large goals with low progress may need breaking down",
        ]

    @pytest.mark.unit
    def test_no_concerning_patterns(self):
        assert failure_patterns([make_goal(progress=80)], NOW) == ["No concerning patterns detected!"]

    @pytest.mark.unit
    def test_recommendations(self):
        active = [make_goal(progress=0) for _ in range(6)]
        completed = [make_goal(status="completed", category="skill-development")]

        tips = recommendations(active + completed)

        assert tips == [
            "Focus on fewer goals (3-5) for better success rate",
            "Add target dates to 6 goals for better accountability",
            "Estimate time investment for better planning",
            "Break down large goals into smaller, actionable steps",
            "Consider more skill development goals - you excel at these!",
        ]

    @pytest.mark.unit
    def test_no_active_goals(self):
        assert recommendations([]) == ["Consider creating some new goals to maintain momentum"]


class TestSummary:
    """Totals and breakdowns"""

    @pytest.mark.unit
    def test_empty(self):
        summary = summarize_goals([], NOW)
        assert summary["total_goals"] == 0
        assert summary["completion_rate"] == 0
        assert summary["average_progress"] == 0

    @pytest.mark.unit
    def test_totals(self):
        goals = [
            make_goal(status="completed", progress=100, time_invested_hours=5, completed_at=NOW, priority="high"),
            make_goal(progress=50, time_invested_hours=2.5),
            make_goal(status="paused", progress=0, category="long-term"),
            make_goal(progress=10),
        ]

        summary = summarize_goals(goals, NOW)

        assert summary["total_goals"] == 4
        assert summary["completed_goals"] == 1
        assert summary["active_goals"] == 2
        assert summary["total_time_invested"] == 7.5
        assert summary["average_progress"] == 40
        assert summary["completion_rate"] == 25
        assert summary["category_breakdown"] == {"short-term": 3, "long-term": 1}
        assert summary["priority_breakdown"] == {"high": 1, "medium": 3}

    @pytest.mark.unit
    def test_endpoint(self, client, auth_headers, test_goal):
        response = client.get("/api/goals/analytics", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["total_goals"] == 1
        assert data["category_breakdown"] == {"exam-preparation": 1}
        assert len(data["monthly_progress"]) == 6
