from unittest.mock import MagicMock

import jwt
import pytest

from hoptrip.common.exceptions import (
    ForbiddenError,
    InvalidTokenError,
    TokenExpiredError,
    UnauthorizedError,
    UpstreamError,
)
from hoptrip.service.auth_service import AuthService
from hoptrip.utils.jwt_helpers import encode_jwt_token, generate_invite_token


GOOGLE_PROFILE = {
    "sub": "google-123",
    "email": "Dana@Example.com",
    "name": "Dana Doe",
    "given_name": "Dana",
    "family_name": "Doe",
    "picture": "https://lh3.googleusercontent.com/dana",
}


def test_issued_token_authenticates(auth_service, alice, config):
    token = auth_service.issue_token(alice)

    payload = jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    assert payload["userId"] == alice["_id"]
    assert payload["email"] == alice["email"]
    assert auth_service.authenticate(token)["_id"] == alice["_id"]


def test_missing_token_is_unauthorized(auth_service):
    with pytest.raises(UnauthorizedError):
        auth_service.authenticate(None)


def test_expired_token_is_distinct_from_invalid(auth_service, alice, config):
    expired = encode_jwt_token({"userId": alice["_id"], "email": alice["email"]}, config.JWT_SECRET_KEY, -10)
    with pytest.raises(TokenExpiredError):
        auth_service.authenticate(expired)

    forged = encode_jwt_token({"userId": alice["_id"], "email": alice["email"]}, "other-secret", 60)
    with pytest.raises(InvalidTokenError):
        auth_service.authenticate(forged)

    with pytest.raises(InvalidTokenError):
        auth_service.authenticate("not.a.jwt")


def test_token_without_user_id_is_invalid(auth_service, config):
    token = generate_invite_token("trip-1", "x@example.com", config)
    with pytest.raises(InvalidTokenError):
        auth_service.authenticate(token)


def test_unknown_or_inactive_user_is_forbidden(auth_service, user_repo, config):
    ghost = {"_id": "0" * 24, "email": "ghost@example.com"}
    with pytest.raises(ForbiddenError):
        auth_service.authenticate(auth_service.issue_token(ghost))

    inactive = user_repo.add("erin@example.com", "Erin", is_active=False)
    with pytest.raises(ForbiddenError):
        auth_service.authenticate(auth_service.issue_token(inactive))


def test_optional_authenticate_swallows_failures(auth_service, alice):
    assert auth_service.optional_authenticate(None) is None
    assert auth_service.optional_authenticate("garbage") is None
    assert auth_service.optional_authenticate(auth_service.issue_token(alice))["_id"] == alice["_id"]


def test_google_login_upserts_user_and_issues_token(user_repo, config):
    verifier = MagicMock(return_value=GOOGLE_PROFILE)
    service = AuthService(user_repo, config, google_verifier=verifier)

    token, user = service.google_login("google-id-token")

    verifier.assert_called_once_with("google-id-token", config.GOOGLE_CLIENT_ID)
    assert user["email"] == "dana@example.com"
    assert user["googleId"] == "google-123"
    assert user["lastLogin"] is not None
    assert service.authenticate(token)["_id"] == user["_id"]

    _, again = service.google_login("google-id-token")
    assert again["_id"] == user["_id"]
    assert len(user_repo.users) == 1


def test_google_login_refuses_deactivated_user(user_repo, config):
    user_repo.add("dana@example.com", "Dana", google_id="google-123", is_active=False)
    service = AuthService(user_repo, config, google_verifier=MagicMock(return_value=GOOGLE_PROFILE))

    with pytest.raises(ForbiddenError):
        service.google_login("google-id-token")


def test_google_login_propagates_verifier_errors(user_repo, config):
    service = AuthService(user_repo, config,
                          google_verifier=MagicMock(side_effect=UpstreamError("down", provider="google_oauth")))
    with pytest.raises(UpstreamError):
        service.google_login("google-id-token")

    with pytest.raises(InvalidTokenError):
        service.google_login("")
