from datetime import date, timedelta

from fastapi.testclient import TestClient


def session_payload(test_branch, coach, player_ids=(), start="17:00:00", end="18:00:00"):
    return {
        "date": (date.today() + timedelta(days=2)).isoformat(),
        "start_time": start,
        "end_time": end,
        "branch_id": test_branch.id,
        "coach_id": coach.id,
        "package_type": "Group 8",
        "player_ids": list(player_ids),
    }


class TestAttendanceEndpoints:

    def test_coach_marks_attendance(self, client: TestClient, coach_auth_headers: dict, test_attendance):
        response = client.patch(f"/attendance/{test_attendance.id}", headers=coach_auth_headers,
                                json={"status": "present"})
        assert response.status_code == 200
        body = response.json()
        assert body["record"]["status"] == "present"
        assert body["record"]["package_cycle"] == 1
        assert body["remaining_sessions"] == 7

    def test_toggle_back_restores(self, client: TestClient, auth_headers: dict, test_attendance):
        client.patch(f"/attendance/{test_attendance.id}", headers=auth_headers, json={"status": "present"})
        response = client.patch(f"/attendance/{test_attendance.id}", headers=auth_headers, json={"status": "absent"})
        assert response.json()["remaining_sessions"] == 8

    def test_invalid_status(self, client: TestClient, auth_headers: dict, test_attendance):
        response = client.patch(f"/attendance/{test_attendance.id}", headers=auth_headers, json={"status": "late"})
        assert response.status_code == 422

    def test_non_positive_duration(self, client: TestClient, auth_headers: dict, test_attendance):
        response = client.patch(f"/attendance/{test_attendance.id}", headers=auth_headers,
                                json={"status": "present", "session_duration": 0})
        assert response.status_code == 422

    def test_unknown_record(self, client: TestClient, auth_headers: dict):
        response = client.patch("/attendance/9999", headers=auth_headers, json={"status": "present"})
        assert response.status_code == 404

    def test_session_attendance(self, client: TestClient, auth_headers: dict, test_session, test_attendance):
        response = client.get(f"/attendance/session/{test_session.id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()[0]["session_date"] == test_session.date.isoformat()


class TestTrainingSessionEndpoints:

    def test_create_session_with_roster(self, client: TestClient, coach_auth_headers: dict, test_branch,
                                        test_coach, test_player):
        response = client.post("/sessions/", headers=coach_auth_headers,
                               json=session_payload(test_branch, test_coach, [test_player.id]))
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "scheduled"
        assert len(body["attendance_records"]) == 1
        assert body["attendance_records"][0]["status"] == "pending"

    def test_conflict_returns_409(self, client: TestClient, auth_headers: dict, test_branch, test_coach):
        client.post("/sessions/", headers=auth_headers, json=session_payload(test_branch, test_coach))
        response = client.post("/sessions/", headers=auth_headers,
                               json=session_payload(test_branch, test_coach, start="17:30:00", end="18:30:00"))
        assert response.status_code == 409

    def test_end_before_start(self, client: TestClient, auth_headers: dict, test_branch, test_coach):
        response = client.post("/sessions/", headers=auth_headers,
                               json=session_payload(test_branch, test_coach, start="18:00:00", end="17:00:00"))
        assert response.status_code == 422
        assert response.json()["detail"][0]["msg"] == "End time must be after start time"

    def test_list_sessions_by_coach(self, client: TestClient, auth_headers: dict, test_session, test_coach,
                                    test_second_coach):
        mine = client.get(f"/sessions/?coach_id={test_coach.id}", headers=auth_headers)
        other = client.get(f"/sessions/?coach_id={test_second_coach.id}", headers=auth_headers)
        assert [s["id"] for s in mine.json()] == [test_session.id]
        assert other.json() == []

    def test_update_session_notes(self, client: TestClient, auth_headers: dict, test_session):
        response = client.patch(f"/sessions/{test_session.id}", headers=auth_headers,
                                json={"notes": "bring water", "status": "completed"})
        assert response.status_code == 200
        assert response.json()["notes"] == "bring water"
        assert response.json()["status"] == "completed"

    def test_delete_session_releases_quota(self, client: TestClient, auth_headers: dict, test_session,
                                           test_attendance, test_player):
        client.patch(f"/attendance/{test_attendance.id}", headers=auth_headers, json={"status": "present"})

        response = client.delete(f"/sessions/{test_session.id}", headers=auth_headers)
        assert response.status_code == 204
        quota = client.get(f"/players/{test_player.id}/quota", headers=auth_headers)
        assert quota.json()["remaining_sessions"] == 8
        assert client.get(f"/players/{test_player.id}", headers=auth_headers).json()["remaining_sessions"] == 8

    def test_roster_add_and_remove(self, client: TestClient, auth_headers: dict, test_session,
                                   test_player, test_personal_player):
        added = client.post(f"/sessions/{test_session.id}/players", headers=auth_headers,
                            json={"player_ids": [test_personal_player.id]})
        assert added.status_code == 200
        assert [r["player_id"] for r in added.json()] == [test_personal_player.id]

        removed = client.delete(f"/sessions/{test_session.id}/players/{test_player.id}", headers=auth_headers)
        assert removed.status_code == 204
        missing = client.delete(f"/sessions/{test_session.id}/players/{test_player.id}", headers=auth_headers)
        assert missing.status_code == 400

    def test_unknown_session(self, client: TestClient, auth_headers: dict):
        assert client.get("/sessions/9999", headers=auth_headers).status_code == 404


class TestCatalogEndpoints:

    def test_branch_crud(self, client: TestClient, auth_headers: dict):
        created = client.post("/branches/", headers=auth_headers,
                              json={"name": "Uptown", "address": "2 High St", "city": "Cebu"})
        assert created.status_code == 201
        branch_id = created.json()["id"]

        updated = client.patch(f"/branches/{branch_id}", headers=auth_headers, json={"city": "Davao"})
        assert updated.json()["city"] == "Davao"

        assert client.delete(f"/branches/{branch_id}", headers=auth_headers).status_code == 204
        assert client.get(f"/branches/{branch_id}", headers=auth_headers).status_code == 404

    def test_branch_in_use_cannot_be_deleted(self, client: TestClient, auth_headers: dict, test_player, test_branch):
        assert client.delete(f"/branches/{test_branch.id}", headers=auth_headers).status_code == 409

    def test_coach_cannot_create_branch(self, client: TestClient, coach_auth_headers: dict):
        response = client.post("/branches/", headers=coach_auth_headers,
                               json={"name": "X", "address": "Y", "city": "Z"})
        assert response.status_code == 403

    def test_package_types(self, client: TestClient, auth_headers: dict, test_package_type):
        duplicate = client.post("/package-types/", headers=auth_headers, json={"name": test_package_type.name})
        assert duplicate.status_code == 400

        created = client.post("/package-types/", headers=auth_headers, json={"name": "Personal 10"})
        assert created.status_code == 201

        listed = client.get("/package-types/", headers=auth_headers)
        assert sorted(p["name"] for p in listed.json()) == ["Group 8", "Personal 10"]

    def test_create_coach(self, client: TestClient, auth_headers: dict):
        response = client.post("/coaches/", headers=auth_headers, json={"name": "New Coach", "email": "New@Coach.io"})
        assert response.status_code == 201
        assert response.json()["role"] == "COACH"
        assert response.json()["email"] == "new@coach.io"

    def test_coach_profile(self, client: TestClient, coach_auth_headers: dict, test_coach):
        response = client.get("/coaches/me", headers=coach_auth_headers)
        assert response.status_code == 200
        assert response.json()["id"] == test_coach.id

    def test_deactivate_coach(self, client: TestClient, auth_headers: dict, test_coach):
        response = client.patch(f"/coaches/{test_coach.id}", headers=auth_headers, json={"is_active": False})
        assert response.status_code == 200
        assert response.json()["is_active"] is False


class TestHealth:

    def test_healthz(self, client: TestClient):
        assert client.get("/healthz").json() == {"message": "Healthy!"}

    def test_health_checks_database(self, client: TestClient):
        assert client.get("/health").json() == {"status": "healthy", "database": "connected"}
