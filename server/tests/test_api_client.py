from unittest.mock import MagicMock

import pytest

from hoptrip.client import HopTripAPIError, HopTripClient


def _response(status_code, body):
    response = MagicMock()
    response.status_code = status_code
    response.reason = "Reason"
    response.json.return_value = body
    return response


@pytest.fixture
def session():
    session = MagicMock()
    session.headers = {}
    return session


def test_injects_bearer_token_and_timeout(session):
    session.request.return_value = _response(200, {"trip": {"_id": "t1"}})
    client = HopTripClient("http://api.test/", token="tok", timeout=5, session=session)

    assert client.get_trip("t1") == {"_id": "t1"}
    assert session.headers["Authorization"] == "Bearer tok"
    session.request.assert_called_once_with("GET", "http://api.test/trip/t1", json=None, params=None, timeout=5)


def test_non_2xx_raises_with_error_kind(session):
    session.request.return_value = _response(403, {"resultMessage": "You are not a member of this trip",
                                                   "error": "Forbidden"})
    client = HopTripClient("http://api.test", token="tok", session=session)

    with pytest.raises(HopTripAPIError) as exc:
        client.add_expense("t1", "Food", 40, "U1", "U1,U2")

    assert exc.value.status_code == 403
    assert exc.value.kind == "Forbidden"
    assert exc.value.message == "You are not a member of this trip"


def test_non_json_error_body(session):
    response = _response(502, None)
    response.json.side_effect = ValueError("no json")
    session.request.return_value = response

    with pytest.raises(HopTripAPIError) as exc:
        HopTripClient("http://api.test", session=session).join_trip("token")
    assert exc.value.status_code == 502
    assert exc.value.message == "Reason"


def test_google_login_keeps_session_token(session):
    session.request.return_value = _response(200, {"token": "session-tok", "user": {"_id": "u1"}})
    client = HopTripClient("http://api.test", session=session)

    client.google_login("google-id-token")

    assert session.headers["Authorization"] == "Bearer session-tok"
    assert session.request.call_args[1]["json"] == {"idToken": "google-id-token"}


def test_request_shapes(session):
    session.request.return_value = _response(200, {"itinerary": [], "trips": [], "expenses": [],
                                                   "placesToVisit": [], "trip": {}})
    client = HopTripClient("http://api.test", session=session)

    client.add_activity("t1", "2024-06-01", {"name": "Louvre"})
    assert session.request.call_args[0] == ("POST", "http://api.test/trips/t1/itinerary/2024-06-01")

    client.search_trips(query="paris", tags=["food", "museum"])
    assert session.request.call_args[1]["params"] == {"query": "paris", "tags": "food,museum"}

    client.set_budget("t1", 100)
    assert session.request.call_args[0] == ("PUT", "http://api.test/setBudget/t1")
    assert session.request.call_args[1]["json"] == {"budget": 100}

    client.remove_place("t1", "p1")
    assert session.request.call_args[0] == ("DELETE", "http://api.test/trip/t1/place/p1")
