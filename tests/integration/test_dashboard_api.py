"""
Integration tests for the LifeOS dashboard API.

Exercises the HTTP surface end to end against temporary databases:
- Authentication and error mapping
- Momentum task list, append and toggle (streak side effect)
- Roadmap generation and adoption
- Resource search
- Vault upload, download and delete
- Profile, accounts and transaction import
"""

from unittest.mock import patch

import pytest

from lifeos.momentum import SEED_TASKS
from lifeos.pathfinder import NO_RESULTS_MESSAGE
from lifeos.pathfinder.models import Opportunity, SearchResult
from lifeos.roadmap.generator import fallback_roadmap
from lifeos.roadmap.models import RoadmapResult


# ─────────────────────────────────────────────────────────────────────────────
# Health & Auth
# ─────────────────────────────────────────────────────────────────────────────


class TestHealth:
    def test_health_is_public(self, test_client):
        response = test_client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["services"] == {"database": "healthy", "sessions": "healthy"}


class TestAuth:
    def test_protected_route_requires_session(self, test_client):
        response = test_client.get("/api/tasks")

        assert response.status_code == 401
        assert response.json()["code"] == "HTTP_401"

    def test_invalid_token_rejected(self, test_client):
        response = test_client.get("/api/tasks", headers={"Authorization": "Bearer bogus"})

        assert response.status_code == 401
        assert "token_not_found" in response.json()["error"]

    def test_login_sets_cookie(self, test_client, monkeypatch, mock_user_id):
        monkeypatch.setenv("LIFEOS_MASTER_KEY", "open-sesame")

        response = test_client.post(
            "/api/auth/login", json={"user_id": mock_user_id, "password": "open-sesame"}
        )

        assert response.status_code == 200
        assert "lifeos_session" in response.cookies
        check = test_client.get("/api/auth/check")
        assert check.json() == {"authenticated": True, "user_id": mock_user_id}

    def test_login_wrong_password(self, test_client, monkeypatch, mock_user_id):
        monkeypatch.setenv("LIFEOS_MASTER_KEY", "open-sesame")

        response = test_client.post(
            "/api/auth/login", json={"user_id": mock_user_id, "password": "guess"}
        )

        assert response.status_code == 401

    def test_login_not_configured(self, test_client, monkeypatch, mock_user_id):
        monkeypatch.delenv("LIFEOS_MASTER_KEY", raising=False)

        response = test_client.post("/api/auth/login", json={"user_id": mock_user_id, "password": "x"})

        assert response.status_code == 503

    def test_logout_revokes_session(self, test_client, auth_headers):
        assert test_client.post("/api/auth/logout", headers=auth_headers).status_code == 200
        assert test_client.get("/api/tasks", headers=auth_headers).status_code == 401


# ─────────────────────────────────────────────────────────────────────────────
# Momentum
# ─────────────────────────────────────────────────────────────────────────────


class TestTasks:
    def test_first_visit_returns_seed_tasks(self, test_client, auth_headers):
        response = test_client.get("/api/tasks", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert [t["title"] for t in data["tasks"]] == [title for title, _, _ in SEED_TASKS]
        assert data["streak"] == 0
        assert data["progress_percent"] == 0.0

    def test_complete_task_starts_streak(self, test_client, auth_headers):
        tasks = test_client.get("/api/tasks", headers=auth_headers).json()["tasks"]

        response = test_client.patch(
            f"/api/tasks/{tasks[0]['id']}", json={"completed": True}, headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["streak"] == 1
        assert data["completed_count"] == 1
        # Completed task moves to the end
        assert data["tasks"][-1]["id"] == tasks[0]["id"]
        assert data["tasks"][-1]["is_completed"] is True

    def test_uncomplete_keeps_streak(self, test_client, auth_headers):
        task_id = test_client.get("/api/tasks", headers=auth_headers).json()["tasks"][0]["id"]
        test_client.patch(f"/api/tasks/{task_id}", json={"completed": True}, headers=auth_headers)

        data = test_client.patch(
            f"/api/tasks/{task_id}", json={"completed": False}, headers=auth_headers
        ).json()

        assert data["streak"] == 1
        assert data["completed_count"] == 0

    def test_toggle_other_users_task_is_forbidden(
        self, test_client, auth_headers, other_auth_headers
    ):
        task_id = test_client.get("/api/tasks", headers=auth_headers).json()["tasks"][0]["id"]

        response = test_client.patch(
            f"/api/tasks/{task_id}", json={"completed": True}, headers=other_auth_headers
        )

        assert response.status_code == 403
        assert response.json()["code"] == "UNAUTHORIZED"
        owner_view = test_client.get("/api/tasks", headers=auth_headers).json()
        assert owner_view["completed_count"] == 0
        assert owner_view["streak"] == 0

    def test_toggle_unknown_task(self, test_client, auth_headers):
        response = test_client.patch(
            "/api/tasks/missing", json={"completed": True}, headers=auth_headers
        )

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_toggle_requires_completed_flag(self, test_client, auth_headers):
        response = test_client.patch("/api/tasks/anything", json={}, headers=auth_headers)
        assert response.status_code == 422

    def test_add_task(self, test_client, auth_headers):
        response = test_client.post(
            "/api/tasks",
            json={"title": "Call caseworker", "category": "admin", "is_urgent": True},
            headers=auth_headers,
        )

        assert response.status_code == 201
        tasks = test_client.get("/api/tasks", headers=auth_headers).json()["tasks"]
        assert tasks[-1]["title"] == "Call caseworker"

    def test_add_blank_task_rejected(self, test_client, auth_headers):
        response = test_client.post(
            "/api/tasks", json={"title": "   ", "category": "admin"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_REQUEST"


# ─────────────────────────────────────────────────────────────────────────────
# Roadmap & Pathfinder
# ─────────────────────────────────────────────────────────────────────────────


ROADMAP_BODY = {
    "one_year_goal": "Stable job",
    "current_worry": "Housing",
    "constraints": ["No ID"],
    "zip_code": "08096",
}


class TestRoadmap:
    def test_generate(self, test_client, auth_headers):
        result = RoadmapResult(success=True, data=fallback_roadmap("08096"), fallback=True)
        with patch(
            "lifeos.dashboard.backend.routes.roadmap.generate_roadmap", return_value=result
        ) as generate:
            response = test_client.post("/api/roadmap", json=ROADMAP_BODY, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["fallback"] is True
        assert generate.call_args.args[0].constraints == ["No ID"]

    def test_missing_key_is_server_error(self, test_client, auth_headers):
        result = RoadmapResult(success=False, error="Server Error: OPENAI_API_KEY is missing.")
        with patch("lifeos.dashboard.backend.routes.roadmap.generate_roadmap", return_value=result):
            response = test_client.post("/api/roadmap", json=ROADMAP_BODY, headers=auth_headers)

        assert response.status_code == 500
        assert "OPENAI_API_KEY" in response.json()["error"]

    def test_adopt_phase(self, test_client, auth_headers):
        roadmap = fallback_roadmap().model_dump()

        response = test_client.post(
            "/api/roadmap/adopt", json={"roadmap": roadmap, "phase_index": 1}, headers=auth_headers
        )

        assert response.status_code == 201
        assert [t["title"] for t in response.json()] == [
            t["title"] for t in roadmap["phases"][1]["tasks"]
        ]
        tasks = test_client.get("/api/tasks", headers=auth_headers).json()["tasks"]
        assert len(tasks) == len(SEED_TASKS) + len(roadmap["phases"][1]["tasks"])

    def test_adopt_missing_phase(self, test_client, auth_headers):
        response = test_client.post(
            "/api/roadmap/adopt",
            json={"roadmap": fallback_roadmap().model_dump(), "phase_index": 9},
            headers=auth_headers,
        )
        assert response.status_code == 400


class TestPathfinder:
    def test_search(self, test_client, auth_headers):
        result = SearchResult(
            results=[
                Opportunity(
                    title="Grant", url="https://example.org", match_reason="Fits", effort_level="Low"
                )
            ],
            answer="One match",
            ranked=True,
        )
        with patch(
            "lifeos.dashboard.backend.routes.pathfinder.search_resources", return_value=result
        ) as search:
            response = test_client.get(
                "/api/pathfinder/search",
                params={"query": "grants", "category": "Housing", "zip_code": "08096"},
                headers=auth_headers,
            )

        assert response.status_code == 200
        assert response.json()["results"][0]["title"] == "Grant"
        search.assert_called_once_with("grants", "Housing", "08096")

    def test_search_degrades_without_keys(self, test_client, auth_headers, monkeypatch):
        monkeypatch.delenv("TAVILY_API_KEY", raising=False)

        response = test_client.get(
            "/api/pathfinder/search", params={"query": "grants"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json() == {"results": [], "answer": NO_RESULTS_MESSAGE, "ranked": False}


# ─────────────────────────────────────────────────────────────────────────────
# Vault
# ─────────────────────────────────────────────────────────────────────────────


class TestVault:
    def _upload(self, client, headers, name="state_id.pdf", data=b"%PDF-1.4", category="ID"):
        return client.post(
            "/api/vault",
            files={"file": (name, data, "application/pdf")},
            data={"category": category},
            headers=headers,
        )

    def test_upload_list_download_delete(self, test_client, auth_headers):
        uploaded = self._upload(test_client, auth_headers)
        assert uploaded.status_code == 201
        item = uploaded.json()
        assert item["category"] == "ID"
        assert item["file_type"] == "application/pdf"

        listing = test_client.get("/api/vault", headers=auth_headers).json()
        assert [i["id"] for i in listing] == [item["id"]]

        download = test_client.get(f"/api/vault/{item['id']}/download", headers=auth_headers)
        assert download.status_code == 200
        assert download.content == b"%PDF-1.4"

        assert test_client.delete(f"/api/vault/{item['id']}", headers=auth_headers).status_code == 200
        assert test_client.get("/api/vault", headers=auth_headers).json() == []

    def test_empty_upload_rejected(self, test_client, auth_headers):
        response = self._upload(test_client, auth_headers, data=b"")
        assert response.status_code == 400

    def test_other_user_cannot_delete(self, test_client, auth_headers, other_auth_headers):
        item = self._upload(test_client, auth_headers).json()

        response = test_client.delete(f"/api/vault/{item['id']}", headers=other_auth_headers)

        assert response.status_code == 403
        assert len(test_client.get("/api/vault", headers=auth_headers).json()) == 1


# ─────────────────────────────────────────────────────────────────────────────
# Finance
# ─────────────────────────────────────────────────────────────────────────────


class TestFinance:
    def test_profile_then_account(self, test_client, auth_headers, mock_user_id):
        profile = test_client.put(
            "/api/profile",
            json={"name": "Sam", "currency": "EUR", "time_zone": "Europe/Dublin"},
            headers=auth_headers,
        )
        assert profile.status_code == 200
        assert profile.json()["id"] == mock_user_id
        assert profile.json()["currency"] == "EUR"

        account = test_client.post(
            "/api/accounts",
            json={"label": "Credit Union", "type": "savings", "starting_balance": "40"},
            headers=auth_headers,
        )
        assert account.status_code == 201
        assert account.json()["starting_balance"] == 40.0

        accounts = test_client.get("/api/accounts", headers=auth_headers).json()
        assert [a["label"] for a in accounts] == ["Credit Union"]

    def test_profile_creates_starter_tasks(self, test_client, auth_headers):
        test_client.put("/api/profile", json={"name": "Sam"}, headers=auth_headers)

        tasks = test_client.get("/api/tasks", headers=auth_headers).json()["tasks"]
        assert len(tasks) == len(SEED_TASKS)

    def test_invalid_currency(self, test_client, auth_headers):
        response = test_client.put("/api/profile", json={"currency": "BTC"}, headers=auth_headers)
        assert response.status_code == 422

    def test_account_requires_profile(self, test_client, auth_headers):
        response = test_client.post(
            "/api/accounts", json={"label": "Chime", "type": "checking"}, headers=auth_headers
        )
        assert response.status_code == 404

    def test_import_transactions(self, test_client, auth_headers):
        test_client.put("/api/profile", json={"name": "Sam"}, headers=auth_headers)

        response = test_client.post(
            "/api/transactions/import",
            json={
                "transactions": [
                    {"Date": "2024-03-01", "Description": "Groceries", "Amount": "-42.10"},
                    {"Date": "2024-03-02", "Description": "Paycheck", "Amount": "900"},
                ]
            },
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "count": 2}

    @pytest.mark.parametrize("body", [{}, {"transactions": []}])
    def test_import_nothing(self, test_client, auth_headers, body):
        response = test_client.post("/api/transactions/import", json=body, headers=auth_headers)
        assert response.json() == {"success": True, "count": 0}
