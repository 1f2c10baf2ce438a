import smtplib
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

import pytest

from hoptrip import mail
from hoptrip.common.exceptions import ForbiddenError, InvalidTokenError, UpstreamError, ValidationError
from hoptrip.service.invitation_service import InvitationService
from hoptrip.utils.jwt_helpers import decode_invite_token, generate_access_token


@pytest.fixture
def trip(trip_service, alice, paris_payload):
    return trip_service.create(alice["_id"], paris_payload)


def _token_from(html):
    start = html.index("http://hoptrip.test/joinTrip?")
    link = html[start:html.index('"', start)]
    return parse_qs(urlparse(link).query)["token"][0]


def test_send_invite_emails_signed_link(client, alice, auth_headers, trip, config):
    with mail.record_messages() as outbox:
        response = client.post("/sendInviteEmail", json={"tripId": trip["_id"], "email": "Bob@Example.com"},
                               headers=auth_headers(alice))

    assert response.status_code == 200
    assert response.get_json()["email"] == "bob@example.com"
    assert len(outbox) == 1
    message = outbox[0]
    assert message.recipients == ["bob@example.com"]
    assert message.subject == "[HopTrip] Invitation to join the trip: Paris"
    assert "Alice has invited you" in message.html

    payload = decode_invite_token(_token_from(message.html), config)
    assert payload["tripId"] == trip["_id"]
    assert payload["email"] == "bob@example.com"


def test_send_invite_requires_member(client, carol, auth_headers, trip):
    with mail.record_messages() as outbox:
        response = client.post("/sendInviteEmail", json={"tripId": trip["_id"], "email": "x@example.com"},
                               headers=auth_headers(carol))
    assert response.status_code == 403
    assert outbox == []


def test_join_trip_enrolls_invited_user(client, trip_repo, bob, trip, config):
    link = InvitationService(None, mail, config).build_join_link(trip["_id"], bob["email"])
    token = parse_qs(urlparse(link).query)["token"][0]

    response = client.get("/joinTrip", query_string={"token": token})
    assert response.status_code == 200
    assert response.get_json()["tripName"] == "Paris"
    assert bob["_id"] in trip_repo.get_by_id(trip["_id"])["travelers"]

    again = client.get("/joinTrip", query_string={"token": token})
    assert again.status_code == 409


def test_join_trip_rejects_plain_or_foreign_tokens(client, alice, trip, config):
    assert client.get("/joinTrip").status_code == 400

    session_token = generate_access_token(alice["_id"], alice["email"], config)
    response = client.get("/joinTrip", query_string={"token": session_token})
    assert response.status_code == 401
    assert response.get_json()["error"] == "InvalidToken"

    response = client.get("/joinTrip", query_string={"tripId": trip["_id"], "email": alice["email"]})
    assert response.status_code == 400


def test_join_trip_for_unregistered_email(client, trip, config):
    link = InvitationService(None, mail, config).build_join_link(trip["_id"], "stranger@example.com")
    token = parse_qs(urlparse(link).query)["token"][0]
    assert client.get("/joinTrip", query_string={"token": token}).status_code == 404


def test_mail_failure_is_upstream_error(app, trip_service, alice, trip, config):
    failing_mail = MagicMock()
    failing_mail.send.side_effect = smtplib.SMTPException("relay refused")
    service = InvitationService(trip_service, failing_mail, config)

    with app.app_context():
        with pytest.raises(UpstreamError) as exc:
            service.send_invite(trip["_id"], "bob@example.com", alice)
    assert isinstance(exc.value.__cause__, smtplib.SMTPException)


def test_mail_not_configured(trip_service, alice, trip, config):
    config.MAIL_DEFAULT_SENDER = None
    service = InvitationService(trip_service, MagicMock(), config)
    with pytest.raises(UpstreamError):
        service.send_invite(trip["_id"], "bob@example.com", alice)


def test_send_invite_checks_input_before_membership(trip_service, carol, trip, config):
    service = InvitationService(trip_service, MagicMock(), config)
    with pytest.raises(ValidationError):
        service.send_invite(trip["_id"], "not-an-email", carol)
    with pytest.raises(ForbiddenError):
        service.send_invite(trip["_id"], "bob@example.com", carol)


def test_join_trip_with_tampered_token(trip_service, config):
    service = InvitationService(trip_service, MagicMock(), config)
    with pytest.raises(InvalidTokenError):
        service.join_trip("eyJhbGciOiJIUzI1NiJ9.e30.tampered")
