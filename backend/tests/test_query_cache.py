"""
Tests for the query cache, the invalidation table and the mutation toasts.
"""

import pytest
from unittest.mock import MagicMock

from app.services import goal_analytics, goals, study_plans, study_sessions
from app.services.notifications import Toaster, toaster
from app.services.query_cache import ALL, BY_ID, INVALIDATION_TABLE, QueryCache, families_for
from app.utils.cache import HybridCache, RedisStore


@pytest.fixture
def local_cache() -> QueryCache:
    return QueryCache(backend=HybridCache(maxsize=100, default_ttl=60))


class TestInvalidationTable:
    """Which query families each entity's writes make stale"""

    @pytest.mark.unit
    def test_every_scope_is_known(self):
        for entity, families in INVALIDATION_TABLE.items():
            assert families, entity
            assert set(families.values()) <= {ALL, BY_ID}

    @pytest.mark.unit
    def test_goal_writes_refresh_analytics(self):
        assert families_for("goal")["goal-analytics"] == ALL
        assert families_for("goal_action_item")["goal-analytics"] == ALL

    @pytest.mark.unit
    def test_material_writes_refresh_session_detail(self):
        assert "study-session" in families_for("study_material")

    @pytest.mark.unit
    def test_plan_writes_refresh_session_detail(self):
        assert families_for("study_plan")["study-session"] == ALL

    @pytest.mark.unit
    def test_unknown_entity_raises(self):
        with pytest.raises(KeyError):
            families_for("flashcard")


class TestQueryCache:
    """Keyed reads and scoped invalidation"""

    @pytest.mark.unit
    def test_fetch_runs_once(self, local_cache):
        calls = []

        def fetch():
            calls.append(1)
            return [{"id": "p1"}]

        first = local_cache.get_or_fetch("study-plans", "u1", (), fetch)
        second = local_cache.get_or_fetch("study-plans", "u1", (), fetch)

        assert first == second == [{"id": "p1"}]
        assert len(calls) == 1

    @pytest.mark.unit
    def test_keys_are_scoped_per_user(self, local_cache):
        local_cache.get_or_fetch("study-plans", "u1", (), lambda: ["mine"])
        theirs = local_cache.get_or_fetch("study-plans", "u2", (), lambda: ["theirs"])
        assert theirs == ["theirs"]

    @pytest.mark.unit
    def test_none_is_not_cached(self, local_cache):
        calls = []

        def fetch():
            calls.append(1)
            return None

        local_cache.get_or_fetch("study-plan", "u1", ("p1",), fetch)
        local_cache.get_or_fetch("study-plan", "u1", ("p1",), fetch)
        assert len(calls) == 2

    @pytest.mark.unit
    def test_by_id_keeps_other_entries(self, local_cache):
        local_cache.get_or_fetch("study-plan", "u1", ("p1",), lambda: {"id": "p1"})
        local_cache.get_or_fetch("study-plan", "u1", ("p2",), lambda: {"id": "p2"})
        local_cache.get_or_fetch("study-plans", "u1", (), lambda: [{"id": "p1"}, {"id": "p2"}])

        local_cache.invalidate("study_plan", "u1", ["p1"])

        assert local_cache.backend.get(local_cache.key("study-plan", "u1", "p1")) is None
        assert local_cache.backend.get(local_cache.key("study-plan", "u1", "p2")) == {"id": "p2"}
        # List family is ALL for plan writes
        assert local_cache.backend.get(local_cache.key("study-plans", "u1")) is None

    @pytest.mark.unit
    def test_by_id_without_ids_drops_family(self, local_cache):
        local_cache.get_or_fetch("study-plan", "u1", ("p1",), lambda: {"id": "p1"})
        local_cache.invalidate("study_plan", "u1", [None])
        assert local_cache.backend.get(local_cache.key("study-plan", "u1", "p1")) is None


class TestMutationConsistency:
    """Reads after a write never return the pre-write value"""

    @pytest.mark.unit
    def test_create_then_list_sees_new_plan(self, ctx):
        assert study_plans.list_study_plans(ctx) == []

        created = study_plans.create_study_plan(ctx, {"title": "Physics", "subject": "Physics"})
        listed = study_plans.list_study_plans(ctx)

        assert [p["id"] for p in listed] == [created["id"]]

    @pytest.mark.unit
    def test_update_refreshes_detail(self, ctx, test_plan):
        before = study_plans.get_study_plan(ctx, test_plan.id)
        study_plans.update_study_plan(ctx, test_plan.id, {"title": "Renamed"})
        after = study_plans.get_study_plan(ctx, test_plan.id)

        assert before["title"] == "Organic Chemistry"
        assert after["title"] == "Renamed"

    @pytest.mark.unit
    def test_plan_rename_refreshes_session_detail(self, ctx, test_session):
        before = study_sessions.get_study_session(ctx, "test-session-123")
        study_plans.update_study_plan(ctx, "test-plan-123", {"title": "Renamed plan"})
        after = study_sessions.get_study_session(ctx, "test-session-123")

        assert before["study_plan"]["title"] == "Organic Chemistry"
        assert after["study_plan"]["title"] == "Renamed plan"

    @pytest.mark.unit
    def test_plan_delete_refreshes_session_detail(self, ctx, test_session):
        assert study_sessions.get_study_session(ctx, "test-session-123")["study_plan"] is not None
        study_plans.delete_study_plan(ctx, "test-plan-123")

        assert study_sessions.get_study_session(ctx, "test-session-123")["study_plan"] is None

    @pytest.mark.unit
    def test_goal_create_refreshes_analytics(self, ctx):
        assert goal_analytics.get_goal_analytics(ctx)["total_goals"] == 0
        goals.create_goal(ctx, {"title": "Learn Spanish"})
        assert goal_analytics.get_goal_analytics(ctx)["total_goals"] == 1


class TestToasts:
    """Mutation outcomes are reported as toasts"""

    @pytest.mark.unit
    def test_success_toast(self, ctx, test_user_id):
        study_plans.create_study_plan(ctx, {"title": "Physics", "subject": "Physics"})

        pending = toaster.drain(test_user_id)
        assert pending[-1]["title"] == "Study Plan Created! 🎉"
        assert pending[-1]["variant"] == "default"
        assert toaster.drain(test_user_id) == []

    @pytest.mark.unit
    def test_failure_toast_carries_message(self, ctx, test_user_id):
        from app.services.exceptions import NotFound

        with pytest.raises(NotFound):
            study_plans.update_study_plan(ctx, "missing-plan", {"title": "x"})

        toast = toaster.drain(test_user_id)[-1]
        assert toast["variant"] == "destructive"
        assert toast["title"] == "Update Failed"
        assert toast["description"] == "Study plan missing-plan not found"

    @pytest.mark.unit
    def test_anonymous_toasts_are_not_stored(self):
        local = Toaster(backend=HybridCache(maxsize=10, default_ttl=60))
        toast = local.success(None, "Hi", "there")
        assert toast.title == "Hi"
        assert local.backend.get("toasts:None") is None

    @pytest.mark.unit
    def test_toasts_endpoint_drains(self, client, auth_headers):
        client.post("/api/study-plans", json={"title": "Biology", "subject": "Biology"}, headers=auth_headers)

        response = client.get("/api/toasts", headers=auth_headers)
        assert response.status_code == 200
        assert [t["title"] for t in response.json()["toasts"]] == ["Study Plan Created! 🎉"]

        again = client.get("/api/toasts", headers=auth_headers)
        assert again.json()["toasts"] == []

    @pytest.mark.unit
    def test_toasts_endpoint_requires_auth(self, client):
        assert client.get("/api/toasts").status_code == 401


class TestRedisStore:
    """Prefix scans against Redis"""

    @pytest.mark.unit
    def test_prefix_glob_characters_are_escaped(self):
        client = MagicMock()
        client.scan_iter.return_value = iter(["goal:user*[1]?:g1"])

        keys = RedisStore(client).keys("goal:user*[1]?:")

        client.scan_iter.assert_called_once_with(match="goal:user\\*\\[1\\]\\?:*")
        assert keys == ["goal:user*[1]?:g1"]

    @pytest.mark.unit
    def test_plain_prefix_is_unchanged(self):
        client = MagicMock()
        client.scan_iter.return_value = iter([])

        RedisStore(client).keys("study-plans:test-user-123:")

        client.scan_iter.assert_called_once_with(match="study-plans:test-user-123:*")
