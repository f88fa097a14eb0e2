"""
Tests for trip and roster endpoints.
"""
from decimal import Decimal

from app.tests.conftest import OWNER_ID, MEMBER_ID


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_requires_token(client):
    """Requests without a bearer token are rejected."""
    response = client.get("/api/trips")
    assert response.status_code == 401


def test_rejects_bad_token(client):
    """Tokens not signed with the shared secret are rejected."""
    response = client.get("/api/trips", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_create_trip_makes_creator_owner(client, owner_headers):
    """The creator becomes the owner and the first participant."""
    response = client.post(
        "/api/trips",
        json={"name": "Kyoto", "base_currency": "jpy", "owner_name": "Alice"},
        headers=owner_headers
    )
    assert response.status_code == 201
    body = response.json()
    assert body["base_currency"] == "JPY"
    assert body["owner_user_id"] == OWNER_ID

    detail = client.get(f"/api/trips/{body['id']}", headers=owner_headers).json()
    assert len(detail["participants"]) == 1
    owner = detail["participants"][0]
    assert owner["name"] == "Alice"
    assert owner["is_owner"] is True
    assert Decimal(owner["balance"]) == 0


def test_create_trip_uses_default_currency(client, owner_headers):
    """Trips created without a currency get the configured default."""
    response = client.post("/api/trips", json={"name": "Oslo", "owner_name": "Alice"}, headers=owner_headers)
    assert response.json()["base_currency"] == "USD"


def test_list_trips_only_shows_own(client, trip, member_headers, outsider_headers):
    """A linked participant sees the trip, an outsider does not."""
    assert [t["id"] for t in client.get("/api/trips", headers=member_headers).json()] == [trip["id"]]
    assert client.get("/api/trips", headers=outsider_headers).json() == []


def test_outsider_cannot_read_trip(client, trip, outsider_headers):
    """Users not on the roster get 403."""
    response = client.get(f"/api/trips/{trip['id']}", headers=outsider_headers)
    assert response.status_code == 403


def test_missing_trip(client, owner_headers):
    """Unknown trips return 404."""
    response = client.get("/api/trips/999", headers=owner_headers)
    assert response.status_code == 404
    assert response.json()["detail"]["details"]["kind"] == "trip_not_found"


def test_roster_order_and_owner_flag(client, trip, owner_headers):
    """Participants come back in the order they joined, with one owner."""
    roster = client.get(f"/api/trips/{trip['id']}/participants", headers=owner_headers).json()
    assert [p["name"] for p in roster] == ["Alice", "Bob", "Carol"]
    assert [p["is_owner"] for p in roster] == [True, False, False]
    assert roster[1]["user_id"] == MEMBER_ID


def test_member_cannot_manage_roster(client, trip, member_headers):
    """Only the owner can add participants."""
    response = client.post(
        f"/api/trips/{trip['id']}/participants",
        json={"name": "Dave"},
        headers=member_headers
    )
    assert response.status_code == 403


def test_duplicate_email_rejected(client, trip, owner_headers):
    """A second participant with the same email is refused."""
    response = client.post(
        f"/api/trips/{trip['id']}/participants",
        json={"name": "Bobby", "email": "BOB@example.com"},
        headers=owner_headers
    )
    assert response.status_code == 409
    assert response.json()["detail"]["details"]["kind"] == "duplicate_participant"


def test_update_participant(client, trip, owner_headers):
    """The owner can rename a participant."""
    response = client.patch(
        f"/api/trips/{trip['id']}/participants/{trip['carol']}",
        json={"name": "Caroline"},
        headers=owner_headers
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Caroline"


def test_owner_cannot_be_removed(client, trip, owner_headers):
    """Removing the owner is refused."""
    response = client.delete(
        f"/api/trips/{trip['id']}/participants/{trip['alice']}",
        headers=owner_headers
    )
    assert response.status_code == 409
    assert response.json()["detail"]["details"]["kind"] == "owner_removal"


def test_remove_idle_participant(client, trip, owner_headers):
    """A participant with no activity can be removed."""
    response = client.delete(
        f"/api/trips/{trip['id']}/participants/{trip['carol']}",
        headers=owner_headers
    )
    assert response.status_code == 204

    roster = client.get(f"/api/trips/{trip['id']}/participants", headers=owner_headers).json()
    assert [p["name"] for p in roster] == ["Alice", "Bob"]


def test_unknown_participant(client, trip, owner_headers):
    """Unknown participant ids return 404."""
    response = client.get(f"/api/trips/{trip['id']}/participants/999", headers=owner_headers)
    assert response.status_code == 404
