import pytest

from hoptrip.utils.jwt_helpers import encode_jwt_token


@pytest.fixture
def created(client, alice, auth_headers, paris_payload):
    response = client.post("/trip", json=paris_payload, headers=auth_headers(alice))
    assert response.status_code == 201
    return response.get_json()["trip"]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_create_trip_requires_token(client, paris_payload):
    response = client.post("/trip", json=paris_payload)
    body = response.get_json()
    assert response.status_code == 401
    assert body["error"] == "Unauthorized"
    assert body["resultMessage"]


def test_expired_token_is_reported(client, alice, config, paris_payload):
    token = encode_jwt_token({"userId": alice["_id"], "email": alice["email"]}, config.JWT_SECRET_KEY, -5)
    response = client.post("/trip", json=paris_payload, headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.get_json()["error"] == "TokenExpired"


def test_create_trip_envelope(created, alice):
    assert created["host"] == alice["_id"]
    assert len(created["itinerary"]) == 3


def test_create_trip_validation_error(client, alice, auth_headers, paris_payload):
    paris_payload["endDate"] = "2024-05-01"
    response = client.post("/trip", json=paris_payload, headers=auth_headers(alice))
    body = response.get_json()
    assert response.status_code == 400
    assert body["error"] == "ValidationError"
    assert body["details"]["errors"]


def test_operator_payload_is_rejected(client, alice, auth_headers, created):
    response = client.put(f"/trip/{created['_id']}", json={"$set": {"host": "x"}}, headers=auth_headers(alice))
    assert response.status_code == 400


def test_get_update_delete(client, alice, carol, auth_headers, created):
    trip_url = f"/trip/{created['_id']}"

    assert client.get(trip_url, headers=auth_headers(carol)).status_code == 403

    response = client.put(trip_url, json={"tripName": "Paris again"}, headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.get_json()["trip"]["tripName"] == "Paris again"
    assert response.get_json()["trip"]["host"]["name"] == "Alice"

    assert client.delete(trip_url, headers=auth_headers(carol)).status_code == 403
    response = client.delete(trip_url, headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.get_json()["resultCode"] == "20002"

    response = client.get(trip_url, headers=auth_headers(alice))
    assert response.status_code == 404
    assert response.get_json()["error"] == "NotFound"


def test_list_user_trips(client, alice, bob, auth_headers, created):
    response = client.get(f"/trips/{alice['_id']}?limit=5", headers=auth_headers(alice))
    body = response.get_json()
    assert response.status_code == 200
    assert [t["_id"] for t in body["trips"]] == [created["_id"]]
    assert body["pagination"]["total"] == 1

    assert client.get(f"/trips/user/{alice['_id']}", headers=auth_headers(bob)).status_code == 403
    assert client.get(f"/trips/{alice['_id']}?limit=abc", headers=auth_headers(alice)).status_code == 400


def test_travelers_itinerary_and_stats(client, alice, bob, auth_headers, created):
    trip_id = created["_id"]
    headers = auth_headers(alice)

    response = client.post(f"/trip/{trip_id}/traveler", json={"email": bob["email"]}, headers=headers)
    assert response.status_code == 200
    response = client.post(f"/trip/{trip_id}/traveler", json={"email": bob["email"]}, headers=headers)
    assert response.status_code == 409
    assert response.get_json()["error"] == "Conflict"

    response = client.post(f"/trips/{trip_id}/itinerary/2024-06-02", json={"name": "Louvre"},
                           headers=auth_headers(bob))
    assert response.status_code == 201
    activity = response.get_json()["itinerary"][1]["activities"][0]

    response = client.post(f"/trips/{trip_id}/itinerary/2024-09-09", json={"name": "Late"}, headers=headers)
    assert response.status_code == 404

    response = client.delete(f"/trips/{trip_id}/itinerary/2024-06-02/activity/{activity['_id']}", headers=headers)
    assert response.get_json()["itinerary"][1]["activities"] == []

    response = client.get(f"/trip/{trip_id}/stats", headers=headers)
    assert response.get_json()["stats"]["travelerCount"] == 2

    response = client.delete(f"/trip/{trip_id}/traveler/{bob['_id']}", headers=auth_headers(bob))
    assert [t["_id"] for t in response.get_json()["trip"]["travelers"]] == [alice["_id"]]


def test_places_budget_and_expenses(client, alice, auth_headers, created):
    trip_id = created["_id"]
    headers = auth_headers(alice)

    response = client.post(f"/trip/{trip_id}/addPlace", json={"placeId": "eiffel"}, headers=headers)
    assert response.status_code == 200
    place = response.get_json()["trip"]["placesToVisit"][0]

    response = client.post(f"/trip/{trip_id}/addPlace", json={"placeId": "nowhere"}, headers=headers)
    assert response.status_code == 502
    assert response.get_json()["error"] == "UpstreamError"

    assert len(client.get(f"/trips/{trip_id}/places", headers=headers).get_json()["placesToVisit"]) == 1
    response = client.delete(f"/trip/{trip_id}/place/{place['_id']}", headers=headers)
    assert response.get_json()["placesToVisit"] == []

    response = client.put(f"/setBudget/{trip_id}", json={"budget": 100}, headers=headers)
    assert response.get_json()["trip"]["budget"] == 100
    assert client.put(f"/setBudget/{trip_id}", json={"budget": -1}, headers=headers).status_code == 400

    expense = {"category": "Food", "price": 150, "paidBy": "Alice", "splitBy": "Alice"}
    response = client.post(f"/addExpense/{trip_id}", json=expense, headers=headers)
    expense_id = response.get_json()["trip"]["expenses"][0]["_id"]

    assert client.get(f"/trip/{trip_id}/stats", headers=headers).get_json()["stats"]["budgetRemaining"] == -50

    response = client.delete(f"/trip/{trip_id}/expense/{expense_id}", headers=headers)
    assert response.get_json()["expenses"] == []
    assert client.get(f"/getExpenses/{trip_id}", headers=headers).get_json()["expenses"] == []


def test_duplicate_and_archive(client, alice, auth_headers, created):
    headers = auth_headers(alice)
    response = client.post(f"/trips/{created['_id']}/duplicate", headers=headers)
    assert response.status_code == 201
    assert response.get_json()["trip"]["tripName"] == "Paris (Copy)"

    response = client.patch(f"/trips/{created['_id']}/archive", headers=headers)
    assert response.get_json()["trip"]["status"] == "completed"


def test_search_is_public(client, alice, auth_headers, created):
    client.put(f"/trip/{created['_id']}", json={"visibility": "public", "tags": ["food"]},
               headers=auth_headers(alice))

    response = client.get("/trips/search?query=par&tags=food,beach")
    trips = response.get_json()["trips"]
    assert response.status_code == 200
    assert [t["_id"] for t in trips] == [created["_id"]]
    assert "email" not in trips[0]["host"]


def test_unknown_route_keeps_envelope(client):
    response = client.get("/no/such/route")
    assert response.status_code == 404
    assert response.get_json()["resultCode"] == "HTTP404"


def test_user_routes(client, alice, bob, auth_headers, created):
    response = client.get(f"/user/{alice['_id']}", headers=auth_headers(bob))
    assert response.get_json()["user"]["email"] == "alice@example.com"

    assert client.put(f"/user/{alice['_id']}", json={"name": "X"}, headers=auth_headers(bob)).status_code == 403
    response = client.put(f"/user/{alice['_id']}", json={"name": "Alice L."}, headers=auth_headers(alice))
    assert response.get_json()["user"]["name"] == "Alice L."

    assert client.get(f"/users/{alice['_id']}/profile").get_json()["user"]["name"] == "Alice L."
    assert client.get("/users/search?query=bo").get_json()["users"][0]["_id"] == bob["_id"]
    assert client.get("/users/search?query=b").status_code == 400

    response = client.get(f"/user/{alice['_id']}/stats", headers=auth_headers(alice))
    assert response.get_json()["stats"]["hostedTrips"] == 1

    response = client.patch(f"/users/{alice['_id']}/preferences", json={"currency": "eur"},
                            headers=auth_headers(alice))
    assert response.get_json()["user"]["preferences"]["currency"] == "EUR"

    client.put(f"/trip/{created['_id']}", json={"visibility": "public"}, headers=auth_headers(alice))
    trips = client.get(f"/users/{alice['_id']}/trips/public").get_json()["trips"]
    assert [t["_id"] for t in trips] == [created["_id"]]

    response = client.patch(f"/users/{alice['_id']}/deactivate", headers=auth_headers(alice))
    assert response.status_code == 200
    response = client.get(f"/user/{alice['_id']}", headers=auth_headers(alice))
    assert response.status_code == 403


def test_google_login_route(app, client, user_repo):
    from hoptrip.core.di_container import DIContainer

    auth_service = DIContainer.get_instance().resolve("AuthService")
    auth_service.google_verifier = lambda token, client_id: {
        "sub": "g-9", "email": "gina@example.com", "name": "Gina",
    }

    response = client.post("/google-login", json={"idToken": "abc"})
    body = response.get_json()
    assert response.status_code == 200
    assert body["token"]
    assert body["user"]["email"] == "gina@example.com"
    assert "refreshToken" not in body["user"]

    assert client.post("/google-login", json={}).status_code == 401


def test_traveler_cannot_complete_trip(client, alice, bob, auth_headers, created):
    trip_url = f"/trip/{created['_id']}"
    client.post(f"{trip_url}/traveler", json={"email": bob["email"]}, headers=auth_headers(alice))

    assert client.patch(f"/trips/{created['_id']}/archive", headers=auth_headers(bob)).status_code == 403
    response = client.put(trip_url, json={"status": "completed"}, headers=auth_headers(bob))
    assert response.status_code == 403
    assert client.get(trip_url, headers=auth_headers(alice)).get_json()["trip"]["status"] == "planning"
