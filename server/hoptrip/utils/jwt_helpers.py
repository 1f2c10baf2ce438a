"""JWT token helper functions."""
from datetime import datetime, timezone, timedelta
import jwt
import logging

from ..common.exceptions import InvalidTokenError, TokenExpiredError

logger = logging.getLogger(__name__)

INVITE_PURPOSE = "trip_invite"


def encode_jwt_token(claims, secret, expires_in_seconds, algorithm="HS256"):
    """
    Encode a JWT token with the given claims and an expiration.

    Args:
        claims: Payload fields (userId/email, or tripId/email/purpose)
        secret: Server-held signing secret
        expires_in_seconds: Token expiration time in seconds
        algorithm: Signing algorithm

    Returns:
        str: Encoded JWT token
    """
    payload = dict(claims)
    payload["exp"] = datetime.now(tz=timezone.utc) + timedelta(seconds=expires_in_seconds)
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_jwt_token(token, secret, algorithm="HS256", required=()):
    """
    Decode and verify a JWT token.

    Args:
        token: JWT token string to decode
        secret: Server-held signing secret
        required: Claim names that must be present

    Returns:
        dict: Decoded payload

    Raises:
        TokenExpiredError: signature valid but exp has passed
        InvalidTokenError: bad signature, malformed token or missing claim
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError as e:
        logger.warning("JWT token expired")
        raise TokenExpiredError() from e
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid JWT token: {e}")
        raise InvalidTokenError() from e

    for claim in required:
        if not payload.get(claim):
            logger.warning(f"JWT token missing required field: {claim}")
            raise InvalidTokenError(f"Token missing claim: {claim}")
    return payload


def generate_access_token(user_id, email, config):
    """Session token embedding {userId, email}."""
    return encode_jwt_token(
        {"userId": user_id, "email": email},
        config.JWT_SECRET_KEY,
        config.ACCESS_TOKEN_EXPIRE_SEC,
        config.JWT_ALGORITHM
    )


def generate_invite_token(trip_id, email, config):
    """Signed join-link token for a trip invitation."""
    return encode_jwt_token(
        {"tripId": trip_id, "email": email, "purpose": INVITE_PURPOSE},
        config.JWT_SECRET_KEY,
        config.INVITE_TOKEN_EXPIRE_SEC,
        config.JWT_ALGORITHM
    )


def decode_invite_token(token, config):
    payload = decode_jwt_token(
        token, config.JWT_SECRET_KEY, config.JWT_ALGORITHM, required=("tripId", "email")
    )
    if payload.get("purpose") != INVITE_PURPOSE:
        raise InvalidTokenError("Token is not a trip invitation")
    return payload
