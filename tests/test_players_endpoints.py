from datetime import date, timedelta

from fastapi.testclient import TestClient

from hoops_admin.models import PackageHistory


def package_payload(sessions=10, **overrides):
    payload = {
        "package_type": "Group 10",
        "sessions": sessions,
        "enrollment_date": date.today().isoformat(),
        "expiration_date": (date.today() + timedelta(days=30)).isoformat(),
    }
    payload.update(overrides)
    return payload


class TestPlayerEndpoints:

    def test_list_players(self, client: TestClient, auth_headers: dict, test_player):
        response = client.get("/players/", headers=auth_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["total_count"] == 1
        assert body["page"] == 1
        assert body["data"][0]["id"] == test_player.id

    def test_requires_authentication(self, client: TestClient, test_player):
        response = client.get("/players/")
        assert response.status_code == 401

    def test_invalid_token(self, client: TestClient, test_player):
        response = client.get("/players/", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_admin_creates_player_with_sessions(self, client: TestClient, auth_headers: dict, test_branch):
        response = client.post("/players/", headers=auth_headers, json={
            "name": "Kobe",
            "email": "kobe@example.com",
            "branch_id": test_branch.id,
            "sessions": 16,
            "total_training_fee": 2000,
            "downpayment": 500,
        })
        assert response.status_code == 201
        body = response.json()
        assert body["sessions"] == 16
        assert body["remaining_sessions"] == 16
        assert body["remaining_balance"] == 1500

    def test_coach_creates_player_with_default_sessions(self, client: TestClient, coach_auth_headers: dict):
        response = client.post("/players/", headers=coach_auth_headers, json={
            "name": "Shaq",
            "email": "shaq@example.com",
            "sessions": 16,
        })
        assert response.status_code == 201
        assert response.json()["sessions"] == 8

    def test_create_player_validation_message(self, client: TestClient, auth_headers: dict):
        response = client.post("/players/", headers=auth_headers, json={"name": "X", "email": "no-at-sign"})
        assert response.status_code == 422
        assert response.json()["detail"][0]["msg"] == "Invalid email address"

    def test_duplicate_email(self, client: TestClient, auth_headers: dict, test_player):
        response = client.post("/players/", headers=auth_headers, json={"name": "Dup", "email": test_player.email})
        assert response.status_code == 400

    def test_get_unknown_player(self, client: TestClient, auth_headers: dict):
        assert client.get("/players/9999", headers=auth_headers).status_code == 404

    def test_coach_cannot_edit_player(self, client: TestClient, coach_auth_headers: dict, test_player):
        response = client.patch(f"/players/{test_player.id}", headers=coach_auth_headers, json={"sessions": 20})
        assert response.status_code == 403

    def test_update_player_sessions(self, client: TestClient, auth_headers: dict, test_player):
        response = client.patch(f"/players/{test_player.id}", headers=auth_headers, json={"sessions": 12})
        assert response.status_code == 200
        assert response.json()["remaining_sessions"] == 12

    def test_delete_player(self, client: TestClient, auth_headers: dict, test_player):
        response = client.delete(f"/players/{test_player.id}", headers=auth_headers)
        assert response.status_code == 204
        assert client.get(f"/players/{test_player.id}", headers=auth_headers).status_code == 404

    def test_coach_cannot_delete_player(self, client: TestClient, coach_auth_headers: dict, test_player):
        response = client.delete(f"/players/{test_player.id}", headers=coach_auth_headers)
        assert response.status_code == 403
        assert "DELETE_PLAYERS" in response.json()["detail"]

    def test_quota_summary(self, client: TestClient, coach_auth_headers: dict, test_player):
        response = client.get(f"/players/{test_player.id}/quota", headers=coach_auth_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["cycle_number"] == 1
        assert body["remaining_sessions"] == 8
        assert body["status"] == "ongoing"


class TestPackageEndpoints:

    def test_renew_and_history(self, client: TestClient, auth_headers: dict, test_player):
        response = client.post(f"/players/{test_player.id}/package/renew", headers=auth_headers,
                               json=package_payload(10))
        assert response.status_code == 200
        assert response.json()["remaining_sessions"] == 10

        history = client.get(f"/players/{test_player.id}/package/history", headers=auth_headers)
        assert history.status_code == 200
        cycles = history.json()
        assert [c["cycle_number"] for c in cycles] == [1, 2]
        assert [c["label"] for c in cycles] == ["initial package", "renewal"]
        assert cycles[0]["reason"] == "renewal - early"
        assert cycles[0]["status"] == "ended"
        assert cycles[1]["is_current"] is True

        snapshots = client.get(f"/players/{test_player.id}/package/snapshots", headers=auth_headers)
        assert len(snapshots.json()) == 1

    def test_coach_cannot_renew(self, client: TestClient, coach_auth_headers: dict, test_player):
        response = client.post(f"/players/{test_player.id}/package/renew", headers=coach_auth_headers,
                               json=package_payload())
        assert response.status_code == 403

    def test_renew_rejects_zero_sessions(self, client: TestClient, auth_headers: dict, test_player):
        response = client.post(f"/players/{test_player.id}/package/renew", headers=auth_headers,
                               json=package_payload(0))
        assert response.status_code == 422

    def test_renew_rejects_inverted_dates(self, client: TestClient, auth_headers: dict, test_player):
        payload = package_payload(expiration_date=(date.today() - timedelta(days=1)).isoformat())
        response = client.post(f"/players/{test_player.id}/package/renew", headers=auth_headers, json=payload)
        assert response.status_code == 400

    def test_renew_unknown_player(self, client: TestClient, auth_headers: dict):
        response = client.post("/players/9999/package/renew", headers=auth_headers, json=package_payload())
        assert response.status_code == 404

    def test_edit_package(self, client: TestClient, auth_headers: dict, test_player):
        response = client.patch(f"/players/{test_player.id}/package", headers=auth_headers,
                                json=package_payload(12))
        assert response.status_code == 200
        assert response.json()["sessions"] == 12
        assert response.json()["remaining_sessions"] == 12

    def test_expire_package(self, client: TestClient, auth_headers: dict, test_player):
        response = client.post(f"/players/{test_player.id}/package/expire", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["expiration_date"] == date.today().isoformat()
        assert response.json()["remaining_sessions"] == 0

    def test_retrieve_package(self, client: TestClient, auth_headers: dict, test_player):
        old_expiration = test_player.expiration_date
        response = client.post(f"/players/{test_player.id}/package/retrieve", headers=auth_headers,
                               json={"extend_days": 15})
        assert response.status_code == 200
        assert response.json()["expiration_date"] == (old_expiration + timedelta(days=15)).isoformat()

    def test_retrieve_rejects_non_positive_days(self, client: TestClient, auth_headers: dict, test_player):
        response = client.post(f"/players/{test_player.id}/package/retrieve", headers=auth_headers,
                               json={"extend_days": 0})
        assert response.status_code == 422
        assert response.json()["detail"][0]["msg"] == "extend_days must be a positive number"

    def test_delete_history_entry(self, client: TestClient, auth_headers: dict, db_session, test_player):
        entry = PackageHistory(player_id=test_player.id, sessions=8, remaining_sessions=0, reason="renewal - completed")
        db_session.add(entry)
        db_session.commit()

        response = client.delete(f"/players/{test_player.id}/package/history/{entry.id}", headers=auth_headers)
        assert response.status_code == 204
        assert db_session.query(PackageHistory).count() == 0

    def test_delete_history_entry_of_other_player(self, client: TestClient, auth_headers: dict, db_session,
                                                  test_player, test_personal_player):
        entry = PackageHistory(player_id=test_personal_player.id, sessions=8, remaining_sessions=0)
        db_session.add(entry)
        db_session.commit()

        response = client.delete(f"/players/{test_player.id}/package/history/{entry.id}", headers=auth_headers)
        assert response.status_code == 404

    def test_player_attendance_by_cycle(self, client: TestClient, auth_headers: dict, test_player, test_attendance):
        all_records = client.get(f"/players/{test_player.id}/attendance", headers=auth_headers)
        assert len(all_records.json()) == 1

        first_cycle = client.get(f"/players/{test_player.id}/attendance?cycle=1", headers=auth_headers)
        assert first_cycle.status_code == 200
        assert first_cycle.json()[0]["id"] == test_attendance.id

        missing = client.get(f"/players/{test_player.id}/attendance?cycle=5", headers=auth_headers)
        assert missing.status_code == 404


class TestPaymentEndpoints:

    def test_record_and_delete_payment(self, client: TestClient, auth_headers: dict, test_player):
        response = client.post(f"/players/{test_player.id}/payments", headers=auth_headers,
                               json={"payment_amount": 500, "notes": "GCash"})
        assert response.status_code == 201
        payment_id = response.json()["id"]

        balance = client.get(f"/players/{test_player.id}/balance", headers=auth_headers)
        assert balance.json()["remaining_balance"] == 3500
        assert balance.json()["total_paid"] == 500

        deleted = client.delete(f"/payments/{payment_id}", headers=auth_headers)
        assert deleted.status_code == 200
        assert deleted.json()["remaining_balance"] == 4000

    def test_payment_must_be_positive(self, client: TestClient, auth_headers: dict, test_player):
        response = client.post(f"/players/{test_player.id}/payments", headers=auth_headers,
                               json={"payment_amount": -5})
        assert response.status_code == 422

    def test_coach_cannot_see_payments(self, client: TestClient, coach_auth_headers: dict, test_player):
        response = client.get(f"/players/{test_player.id}/payments", headers=coach_auth_headers)
        assert response.status_code == 403

    def test_list_payments(self, client: TestClient, auth_headers: dict, test_player, test_payments):
        response = client.get(f"/players/{test_player.id}/payments", headers=auth_headers)
        assert response.status_code == 200
        assert len(response.json()) == 2

    def test_update_payment_info(self, client: TestClient, auth_headers: dict, test_player, test_payments):
        response = client.patch(f"/players/{test_player.id}/payment-info", headers=auth_headers,
                                json={"downpayment": 2000})
        assert response.status_code == 200
        assert response.json()["remaining_balance"] == 2000

    def test_recalculate_balance(self, client: TestClient, auth_headers: dict, test_player, test_payments):
        response = client.post(f"/players/{test_player.id}/balance/recalculate", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["remaining_balance"] == 3000

    def test_delete_unknown_payment(self, client: TestClient, auth_headers: dict):
        assert client.delete("/payments/9999", headers=auth_headers).status_code == 404
