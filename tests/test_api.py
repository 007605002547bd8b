"""
HTTP tests through FastAPI's TestClient.

Run with: pytest tests/test_api.py -v
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from app.core.exceptions import InfrastructureError
from main import create_app


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_storage_health(self, client):
        response = client.get("/api/health")
        assert response.json()["storage"] == "memory (namespace=enigma)"


class TestValidate:
    """Tests for GET /api/validate."""

    def test_admin(self, client, settings):
        body = client.get("/api/validate", params={"uuid": settings.admin_uuid}).json()
        assert body == {"success": True, "data": {"valid": True, "role": "admin"}, "error": None}

    def test_user_record_not_exposed(self, client, user_uuid):
        data = client.get("/api/validate", params={"uuid": user_uuid}).json()["data"]
        assert data == {"valid": True, "role": "user"}

    def test_unknown(self, client):
        data = client.get("/api/validate", params={"uuid": "not a uuid"}).json()["data"]
        assert data == {"valid": False, "role": "none"}


class TestPuzzleFlow:
    """Tests for the player endpoints."""

    def test_current_question(self, client, user_uuid):
        response = client.get("/api/question", params={"uuid": user_uuid})

        assert response.status_code == 200
        question = response.json()["data"]["question"]
        assert question["id"] == "q1"
        assert "answer" not in question
        assert "hint_password" not in question

    def test_unknown_player_forbidden(self, client):
        response = client.get("/api/question", params={"uuid": "user-unknown-0000"})

        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "Invalid user"}

    def test_malformed_uuid_rejected(self, client):
        response = client.get("/api/question", params={"uuid": "bad!"})

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_admin_is_not_a_player(self, client, settings):
        response = client.post(
            "/api/answer",
            json={"uuid": settings.admin_uuid, "question_id": "q1", "answer": "piano"},
        )
        assert response.status_code == 403

    def test_lockout_after_three_wrong_answers(self, client, user_uuid):
        payload = {"uuid": user_uuid, "question_id": "q1", "answer": "guitar"}
        for _ in range(2):
            assert client.post("/api/answer", json=payload).json()["data"]["locked"] is False

        data = client.post("/api/answer", json=payload).json()["data"]

        assert data["correct"] is False
        assert data["locked"] is True
        assert 599 <= data["remaining_seconds"] <= 600

        data = client.post("/api/answer", json={**payload, "answer": "piano"}).json()["data"]
        assert data["correct"] is False
        assert data["locked"] is True

    def test_correct_answer(self, client, user_uuid):
        response = client.post(
            "/api/answer",
            json={"uuid": user_uuid, "question_id": "q1", "answer": "Piano"},
        )

        data = response.json()["data"]
        assert data["correct"] is True
        assert data["next_question"]["id"] == "q2"
        assert data["progress"] == {"current": 2, "total": 3, "percentage": 33}

    def test_wrong_question_forbidden(self, client, user_uuid):
        response = client.post(
            "/api/answer",
            json={"uuid": user_uuid, "question_id": "q2", "answer": "candle"},
        )
        assert response.status_code == 403

    def test_missing_field_is_enveloped(self, client, user_uuid):
        response = client.post("/api/answer", json={"uuid": user_uuid, "question_id": "q1"})

        assert response.status_code == 422
        assert response.json()["success"] is False
        assert "answer" in response.json()["error"]

    def test_hints(self, client, user_uuid):
        ask = client.post("/api/hint", json={"uuid": user_uuid, "question_id": "q1"}).json()["data"]
        assert ask["requires_password"] is True
        assert ask["hints"] is None

        unlocked = client.post(
            "/api/hint",
            json={"uuid": user_uuid, "question_id": "q1", "password": "music123"},
        ).json()["data"]
        assert unlocked["hints"] == ["It makes music", "You press them to create sound"]

    def test_store_outage_is_503(self, client, user_uuid):
        store = client.app.state.services.store
        with patch.object(store, "get_user", AsyncMock(side_effect=InfrastructureError())):
            response = client.get("/api/question", params={"uuid": user_uuid})

        assert response.status_code == 503
        assert response.json()["success"] is False


class TestDashboardEndpoint:
    def test_dashboard_viewer(self, client, settings):
        response = client.get("/api/dashboard", params={"uuid": settings.dashboard_uuid})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total_users"] == 1
        assert data["users"][0]["uuid"] is None

    def test_player_forbidden(self, client, user_uuid):
        response = client.get("/api/dashboard", params={"uuid": user_uuid})
        assert response.status_code == 403


class TestAdminEndpoints:
    """Tests for the admin endpoints."""

    def test_dashboard_cannot_administer(self, client, settings):
        response = client.get("/api/admin/config", params={"uuid": settings.dashboard_uuid})

        assert response.status_code == 403
        assert response.json()["error"] == "Admin access required"

    def test_user_lifecycle(self, client, settings):
        admin = {"uuid": settings.admin_uuid}

        created = client.post("/api/admin/users", params=admin, json={"name": "Night Owls"})
        assert created.status_code == 201
        new_id = created.json()["data"]["id"]

        ids = [u["id"] for u in client.get("/api/admin/users", params=admin).json()["data"]]
        assert new_id in ids

        deleted = client.delete(f"/api/admin/users/{new_id}", params=admin)
        assert deleted.json()["data"] == {"deleted": True}
        assert client.delete(f"/api/admin/users/{new_id}", params=admin).status_code == 404

    def test_rate_limit_reset(self, client, settings, user_uuid):
        payload = {"uuid": user_uuid, "question_id": "q1", "answer": "nope"}
        for _ in range(3):
            client.post("/api/answer", json=payload)

        overview = client.get("/api/admin/rate-limits", params={"uuid": settings.admin_uuid}).json()["data"]
        assert overview[0]["answer"]["locked"] is True

        response = client.post(
            "/api/admin/rate-limits/reset",
            params={"uuid": settings.admin_uuid},
            json={"user_uuid": user_uuid, "channel": "answer"},
        )
        assert response.json()["data"] == {"success": True}

        data = client.post("/api/answer", json={**payload, "answer": "piano"}).json()["data"]
        assert data["correct"] is True

    def test_rate_limit_reset_errors(self, client, settings, user_uuid):
        url = "/api/admin/rate-limits/reset"

        forbidden = client.post(url, params={"uuid": settings.dashboard_uuid}, json={"user_uuid": user_uuid})
        assert forbidden.status_code == 403

        bad_channel = client.post(
            url, params={"uuid": settings.admin_uuid}, json={"user_uuid": user_uuid, "channel": "all"}
        )
        assert bad_channel.status_code == 400

        missing = client.post(url, params={"uuid": settings.admin_uuid}, json={"user_uuid": "user-gone-0000"})
        assert missing.status_code == 404

    def test_questions_replace(self, client, settings):
        admin = {"uuid": settings.admin_uuid}
        questions = [{"id": "only", "text": "One?", "answer": "yes", "order": 1}]

        response = client.post("/api/admin/questions", params=admin, json=questions)

        assert response.status_code == 200
        listed = client.get("/api/admin/questions", params=admin).json()["data"]
        assert [q["id"] for q in listed] == ["only"]
        assert listed[0]["answer"] == "yes"

    def test_config_and_game_state(self, client, settings):
        admin = {"uuid": settings.admin_uuid}
        assert client.get("/api/public/game-state").json()["data"] == {"game_state": "coming-soon"}

        response = client.put("/api/admin/config", params=admin, json={"game_state": "active"})

        assert response.json()["data"]["game_state"] == "active"
        assert client.get("/api/public/game-state").json()["data"] == {"game_state": "active"}

    def test_hint_routes(self, client, settings):
        admin = {"uuid": settings.admin_uuid}

        created = client.post("/api/admin/hint-routes", params=admin, json={"content": "Under the bridge"})
        route_id = created.json()["data"]["id"]

        public = client.get(f"/api/public/hint-route/{route_id}")
        assert public.json()["data"] == {"content": "Under the bridge"}

        assert client.get("/api/public/hint-route/user-abcdefgh").status_code == 400

        client.delete(f"/api/admin/hint-routes/{route_id}", params=admin)
        assert client.get(f"/api/public/hint-route/{route_id}").status_code == 404
