# tests/test_api.py
"""
Tests des routes HTTP (FastAPI TestClient + faux Supabase)
Exécuter: pytest tests/test_api.py -v
"""
import pytest
from fastapi.testclient import TestClient

from app.db import get_supabase
from main import app

STUDENT = {"X-User-Id": "student-1", "X-User-Role": "student"}
OTHER_STUDENT = {"X-User-Id": "student-2", "X-User-Role": "student"}
LANDLORD = {"X-User-Id": "landlord-1", "X-User-Role": "landlord"}


@pytest.fixture()
def client(fake_db):
    app.dependency_overrides[get_supabase] = lambda: fake_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def created(client, request_payload):
    response = client.post("/api/v1/applications/", json=request_payload, headers=STUDENT)
    assert response.status_code == 201
    return response.json()


def test_health(client, fake_db):
    assert client.get("/health").json() == {"status": "healthy", "store": "ok"}

    fake_db.fail_next("rooms", "select")
    assert client.get("/health").json() == {"status": "degraded", "store": "unreachable"}


def test_get_room(client, room):
    response = client.get(f"/api/v1/rooms/{room['id']}")
    assert response.status_code == 200
    assert response.json()["tenant_preferences"] == {"family_status": "Any", "allowed_gender": "Any"}

    assert client.get("/api/v1/rooms/unknown").status_code == 404


def test_eligibility_check(client, fake_db, request_payload):
    room = fake_db.add_room(family_status="Bachelors", allowed_gender="Female")
    request_payload["room_id"] = room["id"]

    response = client.post("/api/v1/applications/eligibility", json=request_payload)

    assert response.status_code == 200
    assert response.json() == {
        "valid": False,
        "code": "NoMalesAllowed",
        "message": "Sorry, no males allowed.",
    }
    assert fake_db.writes() == []


def test_submit_request(created):
    assert created["application"]["status"] == "pending"
    assert created["application"]["applicant_id"] == "student-1"
    assert created["conversation_id"]


def test_submit_requires_identity(client, request_payload):
    response = client.post("/api/v1/applications/", json=request_payload)
    assert response.status_code == 422


def test_submit_rejected_with_reason(client, fake_db, request_payload):
    room = fake_db.add_room(family_status="Family")
    request_payload["room_id"] = room["id"]

    response = client.post("/api/v1/applications/", json=request_payload, headers=STUDENT)

    assert response.status_code == 422
    assert response.json()["detail"] == {
        "code": "FamilyOnly",
        "message": "Sorry, this property is available for families only.",
    }
    assert fake_db.writes() == []


def test_submit_missing_fields(client, request_payload):
    del request_payload["check_in_date"]
    response = client.post("/api/v1/applications/", json=request_payload, headers=STUDENT)
    assert response.status_code == 422
    assert response.json()["detail"]["message"] == \
        "Please fill all required fields, including check-in and check-out dates."


def test_inquiry(client, fake_db, room):
    response = client.post(
        "/api/v1/applications/inquiry",
        json={"room_id": room["id"], "message": "Is parking available?"},
        headers=STUDENT
    )
    assert response.status_code == 201
    conversation_id = response.json()["conversation_id"]

    inbox = client.get("/api/v1/conversations/as-applicant?bucket=inquiries", headers=STUDENT).json()
    assert [c["id"] for c in inbox] == [conversation_id]


def test_approve_then_stale_cancel_flow(client, created):
    application_id = created["application"]["id"]

    response = client.patch(f"/api/v1/applications/{application_id}/approve", headers=LANDLORD)
    assert response.status_code == 200
    assert response.json()["status"] == "approved"

    response = client.patch(f"/api/v1/applications/{application_id}/approve", headers=LANDLORD)
    assert response.status_code == 409
    assert response.json()["detail"] == "This request is no longer in a state that allows this action."

    response = client.patch(f"/api/v1/applications/{application_id}/confirm-payment", headers=LANDLORD)
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"


def test_wrong_party_and_stranger(client, created):
    application_id = created["application"]["id"]

    response = client.patch(f"/api/v1/applications/{application_id}/approve", headers=STUDENT)
    assert response.status_code == 409

    response = client.patch(f"/api/v1/applications/{application_id}/cancel", headers=OTHER_STUDENT)
    assert response.status_code == 403
    assert response.json()["detail"] == "You are not allowed to perform this action."

    assert client.get(f"/api/v1/applications/{application_id}", headers=OTHER_STUDENT).status_code == 403
    assert client.get("/api/v1/applications/unknown", headers=OTHER_STUDENT).status_code == 403


def test_edit_application(client, created):
    application_id = created["application"]["id"]

    response = client.patch(
        f"/api/v1/applications/{application_id}",
        json={"message": "We can move in a week later."},
        headers=STUDENT
    )
    assert response.status_code == 200
    assert response.json()["is_updated"] is True

    assert client.patch(f"/api/v1/applications/{application_id}", json={}, headers=STUDENT).status_code == 400

    client.patch(f"/api/v1/applications/{application_id}/reject", headers=LANDLORD)
    response = client.patch(
        f"/api/v1/applications/{application_id}",
        json={"message": "Please reconsider"},
        headers=STUDENT
    )
    assert response.status_code == 409


def test_store_unavailable(client, fake_db, created):
    fake_db.fail_next("applications", "update")
    application_id = created["application"]["id"]

    response = client.patch(f"/api/v1/applications/{application_id}/reject", headers=LANDLORD)

    assert response.status_code == 503
    assert response.json()["detail"] == "Something went wrong, please try again."


def test_lists_and_statistics(client, created):
    mine = client.get("/api/v1/applications/applicant", headers=STUDENT).json()
    assert [a["id"] for a in mine] == [created["application"]["id"]]

    assert client.get("/api/v1/applications/applicant?status=approved", headers=STUDENT).json() == []

    received = client.get("/api/v1/applications/landlord", headers=LANDLORD).json()
    assert len(received) == 1

    stats = client.get("/api/v1/applications/applicant/statistics", headers=STUDENT).json()
    assert stats["total"] == 1
    assert stats["by_status"]["pending"] == 1


def test_messages_show_live_card_status(client, fake_db, created):
    """La carte est rendue avec le statut courant même si la copie stockée est en retard"""
    application_id = created["application"]["id"]
    conversation_id = created["conversation_id"]

    messages = client.get(f"/api/v1/conversations/{conversation_id}/messages", headers=LANDLORD).json()
    card = messages[0]["booking_request"]
    assert card["status"] == "pending"
    assert card["actions"] == ["approve", "reject"]
    assert card["duration"] == "3 Months"
    assert card["composition"] == "1 Male, 1 Female"

    # La propagation vers la carte échoue, la demande est quand même approuvée
    fake_db.fail_next("messages", "select")
    assert client.patch(f"/api/v1/applications/{application_id}/approve", headers=LANDLORD).status_code == 200

    messages = client.get(f"/api/v1/conversations/{conversation_id}/messages", headers=STUDENT).json()
    card = messages[0]["booking_request"]
    assert card["status"] == "approved"
    assert card["actions"] == ["cancel"]


def test_inbox_buckets(client, created):
    application_id = created["application"]["id"]
    conversation_id = created["conversation_id"]

    def bucket_ids(bucket, headers=LANDLORD):
        url = f"/api/v1/conversations/as-landlord?bucket={bucket}"
        return [c["id"] for c in client.get(url, headers=headers).json()]

    assert bucket_ids("requests") == [conversation_id]
    assert bucket_ids("upcoming") == []

    client.patch(f"/api/v1/applications/{application_id}/approve", headers=LANDLORD)
    assert bucket_ids("requests") == []
    assert bucket_ids("upcoming") == [conversation_id]

    client.patch(f"/api/v1/applications/{application_id}/cancel", headers=STUDENT)
    assert bucket_ids("archived") == [conversation_id]

    mine = client.get("/api/v1/conversations/as-applicant", headers=STUDENT).json()
    assert mine[0]["application_status"] == "cancelled"


def test_inbox_bucket_filter_applies_before_pagination(client, fake_db, created):
    """Un onglet paginé retrouve la demande en attente même derrière des prises de contact plus récentes"""
    request_conversation = created["conversation_id"]
    for landlord_id in ("landlord-2", "landlord-3"):
        room = fake_db.add_room(landlord_id=landlord_id)
        response = client.post(
            "/api/v1/applications/inquiry",
            json={"room_id": room["id"], "message": "Still available?"},
            headers=STUDENT
        )
        assert response.status_code == 201

    def page(bucket, skip=0, limit=2):
        url = f"/api/v1/conversations/as-applicant?bucket={bucket}&skip={skip}&limit={limit}"
        return [c["id"] for c in client.get(url, headers=STUDENT).json()]

    assert page("requests") == [request_conversation]
    assert len(page("inquiries", limit=1)) == 1
    assert len(page("inquiries", skip=1, limit=1)) == 1
    assert page("inquiries", skip=2, limit=1) == []
    assert len(page("all")) == 2


def test_conversation_members_only(client, created):
    conversation_id = created["conversation_id"]

    response = client.get(f"/api/v1/conversations/{conversation_id}/messages", headers=OTHER_STUDENT)
    assert response.status_code == 403

    response = client.post(
        f"/api/v1/conversations/{conversation_id}/messages",
        json={"text": "hello"},
        headers=OTHER_STUDENT
    )
    assert response.status_code == 403


def test_post_message_and_mark_read(client, created):
    conversation_id = created["conversation_id"]

    response = client.post(
        f"/api/v1/conversations/{conversation_id}/messages",
        json={"text": "Hi, when can I visit?"},
        headers=STUDENT
    )
    assert response.status_code == 201
    assert response.json()["read_by"] == ["student-1"]

    response = client.patch(f"/api/v1/conversations/{conversation_id}/read", headers=LANDLORD)
    assert response.json()["marked"] == 2

    response = client.patch(f"/api/v1/conversations/{conversation_id}/read", headers=LANDLORD)
    assert response.json()["marked"] == 0
