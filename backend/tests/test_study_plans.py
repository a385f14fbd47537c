"""
Tests for study plans, their weeks and days.

Tests cover:
- Plan CRUD through the router
- Ordering of plans, weeks and days
- Ownership scoping through the parent plan
- Progress updates (explicit and recalculated)
"""

import pytest
from datetime import datetime, timedelta

from app.models.models import StudyPlan, StudyPlanWeek, StudyPlanDay
from app.services import study_plans, study_plan_weeks
from app.services.exceptions import NotFound, Unauthenticated
from app.services.notifications import toaster


class TestStudyPlanService:
    """Plan reads and writes called directly"""

    @pytest.mark.unit
    def test_list_newest_first(self, ctx, db, test_user_id):
        now = datetime.utcnow()
        db.add_all([
            StudyPlan(id="old", user_id=test_user_id, title="Old", subject="History", created_at=now - timedelta(days=2)),
            StudyPlan(id="new", user_id=test_user_id, title="New", subject="History", created_at=now),
            StudyPlan(id="theirs", user_id="someone-else", title="Theirs", subject="History", created_at=now),
        ])
        db.commit()

        plans = study_plans.list_study_plans(ctx)
        assert [p["id"] for p in plans] == ["new", "old"]

    @pytest.mark.unit
    def test_get_without_id_is_none(self, ctx):
        assert study_plans.get_study_plan(ctx, None) is None
        assert study_plans.get_study_plan(ctx, "") is None

    @pytest.mark.unit
    def test_get_includes_weeks_and_days_in_order(self, ctx, db, test_plan):
        week_two = StudyPlanWeek(id="test-week-2", study_plan_id=test_plan.id, week_number=2, title="Reactions")
        db.add(week_two)
        db.flush()
        db.add_all([
            StudyPlanDay(week_id=week_two.id, day_number=3, topic="Substitution"),
            StudyPlanDay(week_id=week_two.id, day_number=1, topic="Addition"),
        ])
        db.commit()

        plan = study_plans.get_study_plan(ctx, test_plan.id)

        assert [w["week_number"] for w in plan["weeks"]] == [1, 2]
        assert [d["day_number"] for d in plan["weeks"][1]["days"]] == [1, 3]

    @pytest.mark.unit
    def test_other_users_plan_is_not_found(self, db, test_plan):
        from app.services.context import SessionContext

        other = SessionContext(db=db, user_id="other-user-456")
        with pytest.raises(NotFound):
            study_plans.get_study_plan(other, test_plan.id)

    @pytest.mark.unit
    def test_anonymous_is_rejected(self, anonymous_ctx):
        with pytest.raises(Unauthenticated):
            study_plans.list_study_plans(anonymous_ctx)

    @pytest.mark.unit
    def test_create_sets_owner_and_ignores_protected_fields(self, ctx, test_user_id):
        plan = study_plans.create_study_plan(ctx, {
            "title": "Statistics",
            "subject": "Math",
            "user_id": "attacker",
            "id": "chosen-id",
            "metadata": {"aiPlan": {"title": "Statistics"}},
        })

        assert plan["user_id"] == test_user_id
        assert plan["id"] != "chosen-id"
        assert plan["metadata"] == {"aiPlan": {"title": "Statistics"}}

    @pytest.mark.unit
    def test_create_rejects_missing_title(self, ctx):
        from app.services.exceptions import RemoteError

        with pytest.raises(RemoteError):
            study_plans.create_study_plan(ctx, {"subject": "Math"})

    @pytest.mark.unit
    def test_progress_is_stored_as_given(self, ctx, test_plan, test_user_id):
        toaster.drain(test_user_id)
        plan = study_plans.update_study_plan_progress(ctx, test_plan.id, 140)

        assert plan["progress"] == 140
        # Progress updates are silent on success
        assert toaster.drain(test_user_id) == []

    @pytest.mark.unit
    def test_recalculate_progress(self, ctx, test_plan):
        plan = study_plans.recalculate_plan_progress(ctx, test_plan.id)
        assert plan["progress"] == 50

    @pytest.mark.unit
    def test_recalculate_without_days_is_zero(self, ctx, db, test_user_id):
        db.add(StudyPlan(id="empty-plan", user_id=test_user_id, title="Empty", subject="Art"))
        db.commit()
        assert study_plans.recalculate_plan_progress(ctx, "empty-plan")["progress"] == 0

    @pytest.mark.unit
    def test_delete(self, ctx, test_plan):
        plan_id = test_plan.id
        assert study_plans.delete_study_plan(ctx, plan_id) == plan_id
        assert study_plans.list_study_plans(ctx) == []


class TestWeeksAndDays:
    """Weeks and days scoped through the plan owner"""

    @pytest.mark.unit
    def test_list_weeks_without_plan_is_none(self, ctx):
        assert study_plan_weeks.list_plan_weeks(ctx, None) is None

    @pytest.mark.unit
    def test_create_week_invalidates_plan_detail(self, ctx, test_plan):
        before = study_plans.get_study_plan(ctx, test_plan.id)
        study_plan_weeks.create_week(ctx, {"study_plan_id": test_plan.id, "week_number": 2, "title": "Reactions"})
        after = study_plans.get_study_plan(ctx, test_plan.id)

        assert len(before["weeks"]) == 1
        assert len(after["weeks"]) == 2

    @pytest.mark.unit
    def test_create_week_on_foreign_plan_fails(self, db, test_plan):
        from app.services.context import SessionContext

        other = SessionContext(db=db, user_id="other-user-456")
        with pytest.raises(NotFound):
            study_plan_weeks.create_week(other, {"study_plan_id": test_plan.id, "week_number": 2, "title": "x"})

    @pytest.mark.unit
    def test_mark_day_completed(self, ctx, test_plan, test_user_id):
        day = study_plan_weeks.mark_day_completed(ctx, "test-day-2")

        assert day["completed"] is True
        assert toaster.drain(test_user_id)[-1]["title"] == "Day Completed! 🎉"

    @pytest.mark.unit
    def test_day_update_refreshes_weeks(self, ctx, test_plan):
        study_plan_weeks.list_plan_weeks(ctx, test_plan.id)
        study_plan_weeks.update_day(ctx, "test-day-2", {"topic": "Alkynes"})

        weeks = study_plan_weeks.list_plan_weeks(ctx, test_plan.id)
        assert [d["topic"] for d in weeks[0]["days"]] == ["Alkanes", "Alkynes"]

    @pytest.mark.unit
    def test_foreign_day_is_not_found(self, db, test_plan):
        from app.services.context import SessionContext

        other = SessionContext(db=db, user_id="other-user-456")
        with pytest.raises(NotFound):
            study_plan_weeks.mark_day_completed(other, "test-day-1")


class TestStudyPlanRouter:
    """HTTP surface of /api/study-plans"""

    @pytest.mark.unit
    def test_create_and_get(self, client, auth_headers):
        response = client.post(
            "/api/study-plans",
            json={"title": "Calculus", "subject": "Math", "daily_time_minutes": 45},
            headers=auth_headers
        )
        assert response.status_code == 201
        plan_id = response.json()["id"]

        detail = client.get(f"/api/study-plans/{plan_id}", headers=auth_headers)
        assert detail.status_code == 200
        assert detail.json()["title"] == "Calculus"
        assert detail.json()["weeks"] == []

    @pytest.mark.unit
    def test_weeks_and_days_flow(self, client, auth_headers, test_plan):
        week = client.post(
            f"/api/study-plans/{test_plan.id}/weeks",
            json={"week_number": 2, "title": "Reactions"},
            headers=auth_headers
        )
        assert week.status_code == 201
        week_id = week.json()["id"]

        day = client.post(
            f"/api/study-plans/weeks/{week_id}/days",
            json={"day_number": 1, "topic": "Substitution"},
            headers=auth_headers
        )
        assert day.status_code == 201

        completed = client.post(f"/api/study-plans/days/{day.json()['id']}/complete", headers=auth_headers)
        assert completed.json()["completed"] is True

        weeks = client.get(f"/api/study-plans/{test_plan.id}/weeks", headers=auth_headers).json()
        assert [w["week_number"] for w in weeks] == [1, 2]

    @pytest.mark.unit
    def test_set_progress(self, client, auth_headers, test_plan):
        response = client.put(
            f"/api/study-plans/{test_plan.id}/progress",
            json={"progress": 75},
            headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["progress"] == 75

    @pytest.mark.unit
    def test_delete(self, client, auth_headers, test_plan):
        response = client.delete("/api/study-plans/test-plan-123", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"id": "test-plan-123", "deleted": True}

    @pytest.mark.unit
    def test_other_user_gets_404(self, client, other_auth_headers, test_plan):
        response = client.get(f"/api/study-plans/{test_plan.id}", headers=other_auth_headers)
        assert response.status_code == 404

    @pytest.mark.unit
    def test_invalid_payload_is_422(self, client, auth_headers):
        response = client.post("/api/study-plans", json={"subject": "Math"}, headers=auth_headers)
        assert response.status_code == 422
