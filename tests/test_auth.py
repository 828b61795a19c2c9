from unittest.mock import Mock, patch

from fastapi.testclient import TestClient
from jose import jwt

from hoops_admin.auth.jwt_handler import create_refresh_token
from hoops_admin.auth.policy import ActingContext, Permission
from hoops_admin.config import config
from hoops_admin.models import UserRole


def google_response(status_code=200, email="coach@takeoverhoops.local"):
    return Mock(status_code=status_code, json=Mock(return_value={"email": email, "name": "Coach"}))


class TestGoogleLogin:

    @patch("hoops_admin.utils.google.requests.get")
    def test_known_user_gets_tokens(self, mock_get, client: TestClient, test_coach):
        mock_get.return_value = google_response()

        response = client.get("/auth/google", headers={"Authorization": "Bearer google-token"})

        assert response.status_code == 200
        payload = jwt.decode(response.json()["access_token"], config.JWT_SECRET_KEY,
                             algorithms=[config.JWT_ALGORITHM])
        assert payload["sub"] == test_coach.email
        assert payload["role"] == "COACH"

    @patch("hoops_admin.utils.google.requests.get")
    def test_unknown_user_is_rejected(self, mock_get, client: TestClient):
        mock_get.return_value = google_response(email="stranger@example.com")

        response = client.get("/auth/google", headers={"Authorization": "Bearer google-token"})

        assert response.status_code == 403

    @patch("hoops_admin.utils.google.requests.get")
    def test_invalid_google_token(self, mock_get, client: TestClient):
        mock_get.return_value = google_response(status_code=401)

        response = client.get("/auth/google", headers={"Authorization": "Bearer bad"})

        assert response.status_code == 401

    @patch("hoops_admin.utils.google.requests.get")
    def test_google_call_uses_its_own_timeout(self, mock_get, client: TestClient, test_coach):
        mock_get.return_value = google_response()

        client.get("/auth/google", headers={"Authorization": "Bearer google-token"})

        assert mock_get.call_args.kwargs["timeout"] == config.GOOGLE_TIMEOUT_SECONDS

    def test_refresh_token(self, client: TestClient, test_admin):
        refresh = create_refresh_token({"sub": test_admin.email, "id": test_admin.id, "role": "ADMIN"})

        response = client.post("/auth/refresh-token", json={"refresh_token": refresh})

        assert response.status_code == 200
        assert response.json()["refresh_token"] == refresh


class TestRolePolicy:

    def test_admin_holds_every_permission(self):
        context = ActingContext(user_id=1, role=UserRole.ADMIN)
        assert all(context.can(permission) for permission in Permission)
        assert context.is_admin

    def test_coach_permissions(self):
        context = ActingContext(user_id=2, role=UserRole.COACH)
        assert context.can(Permission.VIEW_RECORDS)
        assert context.can(Permission.CREATE_PLAYERS)
        assert context.can(Permission.MARK_ATTENDANCE)
        assert context.can(Permission.MANAGE_SESSIONS)
        assert not context.can(Permission.DELETE_PLAYERS)
        assert not context.can(Permission.SET_INITIAL_SESSIONS)
        assert not context.can(Permission.MANAGE_PAYMENTS)
        assert not context.is_admin
