"""
Plant Health API Tests
======================
End-to-end flows through the FastAPI application over the in-memory store.
"""

import json

import pytest

from app.shared.core.exceptions import TransportError
from app.shared.core.security import create_access_token

from .conftest import GOOD_DIAGNOSIS, text_body

IMAGE = "data:image/jpeg;base64,bGVhZg=="
QUESTIONNAIRE = {
    "lastWatered": "1 week ago",
    "recentChanges": "",
    "soilCondition": "Bone dry",
    "lightCondition": "Direct sunlight",
    "symptoms": ["Wilting"],
}


def sign_up(client, email="fern@example.com", password="leafy"):
    return client.post("/api/v1/auth/signup", json={"email": email, "password": password})


def auth_headers(response) -> dict:
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


@pytest.fixture()
def headers(client):
    return auth_headers(sign_up(client))


def save_plant(client, headers, name="Monstera"):
    return client.post(
        "/api/v1/plants",
        json={"name": name, "image": IMAGE, "questionnaire": QUESTIONNAIRE, "diagnosis": GOOD_DIAGNOSIS},
        headers=headers,
    )


class TestAuth:

    def test_signup_returns_token_and_session(self, client):
        response = sign_up(client)

        assert response.status_code == 201
        body = response.json()
        assert body["tokenType"] == "bearer"
        assert body["user"]["email"] == "fern@example.com"
        assert body["user"]["isPremium"] is False
        assert "passwordCredential" not in body["user"]

    def test_duplicate_signup_conflicts(self, client):
        sign_up(client)

        response = sign_up(client)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ALREADY_EXISTS"

    def test_short_password_rejected(self, client):
        response = sign_up(client, password="abc")

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["field"] == "password"
        assert "timestamp" in error

    def test_login_flow(self, client):
        sign_up(client)

        response = client.post("/api/v1/auth/login", json={"email": "FERN@example.com", "password": "leafy"})

        assert response.status_code == 200
        session = client.get("/api/v1/auth/session", headers=auth_headers(response))
        assert session.json()["user"]["email"] == "fern@example.com"

    def test_login_unknown_account(self, client):
        response = client.post("/api/v1/auth/login", json={"email": "ghost@example.com", "password": "leafy"})

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "User not found. Please sign up."

    def test_login_wrong_password(self, client):
        sign_up(client)

        response = client.post("/api/v1/auth/login", json={"email": "fern@example.com", "password": "wrong"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_CREDENTIAL"

    def test_missing_token(self, client):
        response = client.get("/api/v1/auth/session")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"

    def test_garbage_token(self, client):
        response = client.get("/api/v1/auth/session", headers={"Authorization": "Bearer not-a-token"})

        assert response.status_code == 401

    def test_token_for_unknown_account(self, client):
        token = create_access_token({"sub": "ghost@example.com"})

        response = client.get("/api/v1/auth/session", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_resume_and_logout(self, client, headers):
        resumed = client.get("/api/v1/auth/session/resume")
        assert resumed.json()["user"]["email"] == "fern@example.com"

        assert client.post("/api/v1/auth/logout", headers=headers).status_code == 200
        assert client.get("/api/v1/auth/session/resume").json() is None

    def test_upgrade_applies_to_existing_token(self, client, headers):
        response = client.post("/api/v1/auth/upgrade", headers=headers)

        assert response.status_code == 200
        assert response.json()["user"]["isPremium"] is True
        assert client.get("/api/v1/auth/session", headers=headers).json()["user"]["isPremium"] is True


class TestPlants:

    def test_save_and_fetch(self, client, headers):
        created = save_plant(client, headers)

        assert created.status_code == 201
        plant = created.json()
        assert plant["name"] == "Monstera"
        assert plant["progressPhotos"][0]["notes"] == "Initial"
        assert plant["daysUntilWatering"] == 3
        assert plant["wateringLabel"] == "In 3d"

        fetched = client.get(f"/api/v1/plants/{plant['id']}", headers=headers)
        assert fetched.json() == plant

    def test_list_newest_first(self, client, headers):
        save_plant(client, headers, name="First")
        save_plant(client, headers, name="Second")

        names = [p["name"] for p in client.get("/api/v1/plants", headers=headers).json()]

        assert names == ["Second", "First"]

    def test_plants_are_private(self, client, headers):
        plant_id = save_plant(client, headers).json()["id"]
        other = auth_headers(sign_up(client, email="ivy@example.com"))

        assert client.get(f"/api/v1/plants/{plant_id}", headers=other).status_code == 404
        assert client.get("/api/v1/plants", headers=other).json() == []

    def test_fourth_plant_requires_premium(self, client, headers):
        for name in ("A", "B", "C"):
            assert save_plant(client, headers, name=name).status_code == 201

        response = save_plant(client, headers, name="D")

        assert response.status_code == 402
        error = response.json()["error"]
        assert error["code"] == "QUOTA_EXCEEDED"
        assert error["details"] == {
            "feature": "plants",
            "required_plan": "premium",
            "limit": "plants",
            "current": 3,
            "maximum": 3,
        }

    def test_water_photo_and_delete(self, client, headers):
        plant_id = save_plant(client, headers).json()["id"]

        watered = client.post(f"/api/v1/plants/{plant_id}/water", headers=headers)
        assert watered.status_code == 200

        photo = client.post(
            f"/api/v1/plants/{plant_id}/photos", json={"image": IMAGE, "notes": "New leaf"}, headers=headers
        )
        assert photo.status_code == 201
        assert [p["notes"] for p in photo.json()["progressPhotos"]] == ["Initial", "New leaf"]

        assert client.delete(f"/api/v1/plants/{plant_id}", headers=headers).status_code == 200
        assert client.get(f"/api/v1/plants/{plant_id}", headers=headers).status_code == 404

    def test_delete_unknown_plant(self, client, headers):
        assert client.delete("/api/v1/plants/12345", headers=headers).status_code == 404

    def test_home_dashboard(self, client, headers):
        save_plant(client, headers)

        home = client.get("/api/v1/plants/home", headers=headers).json()

        assert len(home["plants"]) == 1
        assert home["overdue"] == []
        assert home["diagnosesThisMonth"] == 0
        assert home["diagnosesRemaining"] == 2
        assert home["plantsRemaining"] == 2
        assert home["isPremium"] is False

    def test_save_requires_image(self, client, headers):
        response = client.post(
            "/api/v1/plants",
            json={"name": "X", "questionnaire": QUESTIONNAIRE, "diagnosis": GOOD_DIAGNOSIS},
            headers=headers,
        )

        assert response.status_code == 422


class TestDiagnoses:

    def _diagnose(self, client, headers):
        return client.post(
            "/api/v1/diagnoses",
            json={"image": IMAGE, "plantName": "Monstera", "questionnaire": QUESTIONNAIRE},
            headers=headers,
        )

    def test_successful_diagnosis_counts(self, client, headers, transport):
        response = self._diagnose(client, headers)

        assert response.status_code == 200
        body = response.json()
        assert body["state"] == "succeeded"
        assert body["diagnosis"]["primaryDiagnosis"] == "Overwatering"
        assert body["errorCode"] is None
        assert transport.payloads[0]["messages"][0]["content"][0]["source"]["data"] == "bGVhZg=="

        home = client.get("/api/v1/plants/home", headers=headers).json()
        assert home["diagnosesThisMonth"] == 1

    def test_failed_diagnosis_returns_fallback(self, client, headers, transport):
        transport.error = TransportError("Diagnosis API key is not configured")

        body = self._diagnose(client, headers).json()

        assert body["state"] == "failed"
        assert body["errorCode"] == "TRANSPORT_ERROR"
        assert body["diagnosis"]["primaryDiagnosis"] == "Error"
        assert client.get("/api/v1/plants/home", headers=headers).json()["diagnosesThisMonth"] == 0

    def test_fenced_response(self, client, headers, transport):
        transport.body = text_body("```json\n" + json.dumps(GOOD_DIAGNOSIS) + "\n```")

        assert self._diagnose(client, headers).json()["state"] == "succeeded"

    def test_monthly_quota(self, client, headers):
        assert self._diagnose(client, headers).status_code == 200
        assert self._diagnose(client, headers).status_code == 200

        response = self._diagnose(client, headers)

        assert response.status_code == 402
        assert response.json()["error"]["details"]["limit"] == "diagnoses"

    def test_premium_is_unlimited(self, client, headers):
        client.post("/api/v1/auth/upgrade", headers=headers)

        for _ in range(4):
            assert self._diagnose(client, headers).json()["state"] == "succeeded"


class TestHealth:

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["checks"]["storage"]["backend"] == "memory"
        assert body["checks"]["diagnosis_api"]["configured"] is True

    def test_root(self, client):
        assert client.get("/").json()["api_base"] == "/api/v1"
