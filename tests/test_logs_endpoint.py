"""Tests for the log write endpoints."""

from fastapi.testclient import TestClient

from neurostack.api.app import create_app
from tests.conftest import log_payload

ALICE = {"Authorization": "Bearer token-alice"}
BOB = {"Authorization": "Bearer token-bob"}


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_log_stamps_verified_owner(container, log_repository) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/logs", json=log_payload(user_id="mallory"), headers=ALICE
    )

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == "alice"
    assert data["compounds"] == [{"name": "Caffeine", "dose": "100mg"}]
    assert log_repository.rows[data["id"]]["user_id"] == "alice"


def test_missing_or_bad_token_is_401(container, log_repository) -> None:
    client = TestClient(create_app(container))

    no_header = client.post("/api/logs", json=log_payload())
    bad_token = client.post(
        "/api/logs",
        json=log_payload(),
        headers={"Authorization": "Bearer expired"},
    )
    wrong_scheme = client.post(
        "/api/logs", json=log_payload(), headers={"Authorization": "token-alice"}
    )

    assert no_header.status_code == 401
    assert bad_token.status_code == 401
    assert wrong_scheme.status_code == 401
    assert log_repository.rows == {}


def test_invalid_entry_is_422_with_field_errors(container, log_repository) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/logs", json=log_payload(sentiment_score=6), headers=ALICE
    )

    assert response.status_code == 422
    errors = response.json()["errors"]
    assert errors[0]["field"] == "sentiment_score"
    assert errors[0]["message"]
    assert log_repository.rows == {}


def test_patch_updates_own_log(container) -> None:
    client = TestClient(create_app(container))
    created = client.post("/api/logs", json=log_payload(), headers=ALICE).json()

    response = client.patch(
        "/api/logs",
        json={"id": created["id"], "notes": "Felt great", "sentiment_score": 5},
        headers=ALICE,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == created["id"]
    assert data["notes"] == "Felt great"
    assert data["sentiment_score"] == 5
    assert data["compounds"] == created["compounds"]


def test_patch_requires_id(container) -> None:
    client = TestClient(create_app(container))

    response = client.patch("/api/logs", json={"notes": "x"}, headers=ALICE)

    assert response.status_code == 400


def test_patch_of_foreign_log_is_404(container, log_repository) -> None:
    client = TestClient(create_app(container))
    created = client.post("/api/logs", json=log_payload(), headers=ALICE).json()

    response = client.patch(
        "/api/logs", json={"id": created["id"], "notes": "mine now"}, headers=BOB
    )

    assert response.status_code == 404
    assert log_repository.rows[created["id"]]["notes"] == "Morning stack"


def test_invalid_patch_is_422(container) -> None:
    client = TestClient(create_app(container))
    created = client.post("/api/logs", json=log_payload(), headers=ALICE).json()

    response = client.patch(
        "/api/logs",
        json={"id": created["id"], "tags_mood": ["Bored"]},
        headers=ALICE,
    )

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"].startswith("tags_mood")


def test_patch_cannot_null_required_fields(container, log_repository) -> None:
    client = TestClient(create_app(container))
    created = client.post("/api/logs", json=log_payload(), headers=ALICE).json()
    before = dict(log_repository.rows[created["id"]])

    no_compounds = client.patch(
        "/api/logs", json={"id": created["id"], "compounds": None}, headers=ALICE
    )
    no_time = client.patch(
        "/api/logs", json={"id": created["id"], "occurred_at": None}, headers=ALICE
    )

    assert no_compounds.status_code == 422
    assert no_compounds.json()["errors"][0]["field"] == "compounds"
    assert no_time.status_code == 422
    assert no_time.json()["errors"][0]["field"] == "occurred_at"
    assert log_repository.rows[created["id"]] == before


def test_routes_without_supabase_refuse_requests(container) -> None:
    container.log_service = None
    container.identity_verifier = None
    client = TestClient(create_app(container))

    response = client.post("/api/logs", json=log_payload(), headers=ALICE)

    assert response.status_code == 401
