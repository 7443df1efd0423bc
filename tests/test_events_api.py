from fastapi.testclient import TestClient


def test_create_event_and_attendees(client: TestClient):
    event = client.post("/api/events", json={"name": "Offsite"}).json()
    event_id = event["id"]
    assert event["name"] == "Offsite"

    for first, status in (("Ada", "accepted"), ("Alan", "invited"), ("Grace", "registered")):
        response = client.post(
            f"/api/events/{event_id}/attendees",
            json={
                "firstName": first,
                "lastName": first[::-1],
                "email": f"{first.lower()}@example.com",
                "status": status,
            },
        )
        assert response.status_code == 201
        assert response.json()["assigned"] is None

    eligible = client.get(f"/api/events/{event_id}/attendees").json()
    everyone = client.get(
        f"/api/events/{event_id}/attendees",
        params={"status": "invited,accepted,registered,email_verified"},
    ).json()
    searched = client.get(
        f"/api/events/{event_id}/attendees", params={"q": "grace@"}
    ).json()

    assert sorted(a["firstName"] for a in eligible) == ["Ada", "Grace"]
    assert len(everyone) == 3
    assert [a["firstName"] for a in searched] == ["Grace"]


def test_attendee_shows_current_room(client: TestClient):
    event_id = client.post("/api/events", json={"name": "Offsite"}).json()["id"]
    attendee_id = client.post(
        f"/api/events/{event_id}/attendees",
        json={"firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com", "status": "registered"},
    ).json()["id"]
    room = client.post(
        f"/api/events/{event_id}/rooms",
        json={"roomNo": "101", "category": "Suite", "maxGuests": 2},
    ).json()
    client.post(
        f"/api/events/{event_id}/rooms/assign",
        json={"roomId": room["id"], "slot": 2, "attendeeId": attendee_id},
    )

    attendees = client.get(f"/api/events/{event_id}/attendees").json()

    assert attendees[0]["assigned"] == {"roomId": room["id"], "roomNo": "101", "slot": 2}


def test_attendee_errors(client: TestClient):
    response = client.post(
        "/api/events/evt-missing/attendees",
        json={"firstName": "Ada", "email": "ada@example.com"},
    )
    assert response.status_code == 404
    assert client.get("/api/events/evt-missing/attendees").status_code == 404

    event_id = client.post("/api/events", json={"name": "Offsite"}).json()["id"]
    bad_status = client.get(
        f"/api/events/{event_id}/attendees", params={"status": "vip"}
    )
    assert bad_status.status_code == 422
