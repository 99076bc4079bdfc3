"""
Integration tests for the /activities endpoints.
"""
from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from aurashift.core.clock import utcnow
from aurashift.core.security import create_access_token
from aurashift.models.activity import Activity, ActivityType
from aurashift.services.users import create_user

from conftest import add_activity, give_profile


def _post(client, headers, activity_type: str, **extra) -> dict:
    r = client.post("/activities", json={"type": activity_type, **extra}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["data"]


class TestCreateActivity:
    def test_create_returns_activity_and_score(self, client, auth_headers, user):
        data = _post(client, auth_headers, "gym_workout", metadata={"note": "legs", "duration": 45})
        assert data["newAuraScore"] == 5
        activity = data["activity"]
        assert activity["type"] == "gym_workout"
        assert activity["points"] == 5
        assert activity["userId"] == user.id
        assert activity["metadata"] == {"note": "legs", "duration": 45}
        assert activity["createdAt"]

    def test_client_points_ignored(self, client, auth_headers, db):
        data = _post(client, auth_headers, "cigarette_consumed", points=500)
        assert data["activity"]["points"] == -10
        stored = db.get(Activity, data["activity"]["id"])
        assert stored.points == -10

    def test_score_never_negative(self, client, auth_headers):
        for _ in range(5):
            data = _post(client, auth_headers, "cigarette_consumed")
        assert data["newAuraScore"] == 0

    def test_cigarette_sets_last_smoked(self, client, auth_headers, db, user):
        _post(client, auth_headers, "cigarette_consumed")
        db.refresh(user)
        assert user.last_smoked is not None

    def test_invalid_type_rejected(self, client, auth_headers):
        r = client.post("/activities", json={"type": "meditation"}, headers=auth_headers)
        assert r.status_code == 400
        body = r.json()
        assert body["success"] is False
        assert body["code"] == "VALIDATION_ERROR"

    def test_invalid_intensity_rejected(self, client, auth_headers):
        r = client.post(
            "/activities",
            json={"type": "gym_workout", "metadata": {"intensity": "extreme"}},
            headers=auth_headers,
        )
        assert r.status_code == 400

    def test_updates_savings_counters(self, client, auth_headers, db, user):
        give_profile(db, user, streak_start=utcnow() - timedelta(days=3, hours=1))
        _post(client, auth_headers, "cigarette_consumed")
        db.refresh(user)
        assert user.cigarettes_avoided == 59
        assert user.total_money_saved == Decimal("295.00")


class TestListActivities:
    def test_pagination_newest_first(self, client, auth_headers, db, user):
        now = utcnow()
        for i in range(5):
            add_activity(db, user, ActivityType.skin_care, now - timedelta(hours=i))

        r = client.get("/activities?page=1&limit=2", headers=auth_headers)
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["pagination"] == {"page": 1, "limit": 2, "total": 5, "pages": 3}
        first, second = data["activities"]
        assert first["createdAt"] > second["createdAt"]

        r = client.get("/activities?page=3&limit=2", headers=auth_headers)
        assert len(r.json()["data"]["activities"]) == 1

    def test_filter_by_type(self, client, auth_headers, db, user):
        now = utcnow()
        add_activity(db, user, ActivityType.gym_workout, now)
        add_activity(db, user, ActivityType.cigarette_consumed, now)
        r = client.get("/activities?type=cigarette_consumed", headers=auth_headers)
        items = r.json()["data"]["activities"]
        assert [a["type"] for a in items] == ["cigarette_consumed"]

    def test_filter_by_unknown_type(self, client, auth_headers):
        r = client.get("/activities?type=napping", headers=auth_headers)
        assert r.status_code == 400
        assert r.json()["code"] == "INVALID_ACTIVITY_TYPE"

    def test_filter_by_date_range(self, client, auth_headers, db, user):
        now = utcnow().replace(microsecond=0)
        add_activity(db, user, ActivityType.healthy_meal, now - timedelta(days=10))
        add_activity(db, user, ActivityType.healthy_meal, now - timedelta(days=2))
        start = (now - timedelta(days=5)).strftime("%Y-%m-%dT%H:%M:%SZ")
        r = client.get("/activities", params={"startDate": start}, headers=auth_headers)
        assert r.json()["data"]["pagination"]["total"] == 1

    def test_only_own_activities(self, client, auth_headers, db):
        other = create_user(db, email="list-other@example.com", display_name="Other")
        add_activity(db, other, ActivityType.gym_workout, utcnow())
        r = client.get("/activities", headers=auth_headers)
        assert r.json()["data"]["pagination"]["total"] == 0

    def test_limit_bounds(self, client, auth_headers):
        assert client.get("/activities?limit=0", headers=auth_headers).status_code == 400
        assert client.get("/activities?limit=101", headers=auth_headers).status_code == 400


class TestUpdateActivity:
    def test_type_swap_rederives_points(self, client, auth_headers):
        ids = [_post(client, auth_headers, "gym_workout")["activity"]["id"] for _ in range(4)]
        r = client.put(
            f"/activities/{ids[0]}", json={"type": "cigarette_consumed"}, headers=auth_headers
        )
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["activity"]["points"] == -10
        assert data["newAuraScore"] == 5

    def test_metadata_merges(self, client, auth_headers):
        created = _post(client, auth_headers, "healthy_meal", metadata={"note": "salad", "location": "home"})
        r = client.put(
            f"/activities/{created['activity']['id']}",
            json={"metadata": {"note": "soup"}},
            headers=auth_headers,
        )
        assert r.json()["data"]["activity"]["metadata"] == {"note": "soup", "location": "home"}
        assert r.json()["data"]["activity"]["points"] == 3

    def test_invalid_type_rejected(self, client, auth_headers):
        created = _post(client, auth_headers, "skin_care")
        r = client.put(
            f"/activities/{created['activity']['id']}", json={"type": "nap"}, headers=auth_headers
        )
        assert r.status_code == 400

    def test_other_users_activity_is_404(self, client, auth_headers, db):
        other = create_user(db, email="update-other@example.com", display_name="Other")
        foreign = add_activity(db, other, ActivityType.gym_workout, utcnow())
        r = client.put(
            f"/activities/{foreign.id}", json={"type": "skin_care"}, headers=auth_headers
        )
        assert r.status_code == 404
        assert r.json()["code"] == "ACTIVITY_NOT_FOUND"


class TestDeleteActivity:
    def test_delete_restores_score_and_savings(self, client, auth_headers, db, user):
        give_profile(db, user, streak_start=utcnow() - timedelta(days=3, hours=1))
        _post(client, auth_headers, "gym_workout")
        _post(client, auth_headers, "gym_workout")
        _post(client, auth_headers, "healthy_meal")
        cigarette = _post(client, auth_headers, "cigarette_consumed")
        assert cigarette["newAuraScore"] == 3
        db.refresh(user)
        avoided_before = user.cigarettes_avoided
        saved_before = user.total_money_saved

        r = client.delete(f"/activities/{cigarette['activity']['id']}", headers=auth_headers)
        assert r.status_code == 200
        data = r.json()["data"]
        assert data == {"deletedActivityId": cigarette["activity"]["id"], "newAuraScore": 13}

        db.refresh(user)
        assert user.cigarettes_avoided == avoided_before + 1 == 60
        assert user.total_money_saved == saved_before + Decimal("5") == Decimal("300.00")

    def test_delete_missing_is_404(self, client, auth_headers):
        r = client.delete("/activities/99999999", headers=auth_headers)
        assert r.status_code == 404


class TestGetActivity:
    def test_fetch_own(self, client, auth_headers):
        created = _post(client, auth_headers, "social_event")
        r = client.get(f"/activities/{created['activity']['id']}", headers=auth_headers)
        assert r.status_code == 200
        assert r.json()["data"]["activity"]["points"] == 1


class TestAuthentication:
    def test_missing_token(self, client):
        r = client.post("/activities", json={"type": "gym_workout"})
        assert r.status_code == 401
        assert r.json() == {
            "success": False,
            "error": "Access token is required",
            "code": "AUTHENTICATION_REQUIRED",
        }

    def test_garbage_token(self, client):
        r = client.get("/activities", headers={"Authorization": "Bearer not-a-jwt"})
        assert r.status_code == 401
        assert r.json()["code"] == "INVALID_TOKEN"

    def test_token_for_missing_user(self, client):
        token = create_access_token(987654)
        r = client.get("/activities", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 401

    def test_expired_token(self, client, user):
        token = create_access_token(user.id, expires_delta=timedelta(minutes=-5))
        r = client.get("/dashboard/stats", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 401
