"""
Google OAuth helper functions for verifying ID tokens.
"""

import logging
from typing import Optional, Dict
from google.auth import exceptions as google_exceptions
from google.oauth2 import id_token
from google.auth.transport import requests

from ...common.exceptions import InvalidTokenError, UpstreamError

logger = logging.getLogger(__name__)

GOOGLE_ISSUERS = ('accounts.google.com', 'https://accounts.google.com')


def verify_google_token(token: str, client_id: Optional[str] = None) -> Dict:
    """
    Verify Google ID token and return user information.

    Args:
        token: Google ID token from client
        client_id: Expected audience; None skips the audience check

    Returns:
        {
            'sub': 'google_user_id',
            'email': 'user@gmail.com',
            'name': 'Full Name',
            'given_name': ..., 'family_name': ...,
            'picture': 'https://...'
        }

    Raises:
        InvalidTokenError: signature, audience, expiry or issuer check failed
        UpstreamError: Google's certificate endpoint could not be reached
    """
    try:
        idinfo = id_token.verify_oauth2_token(token, requests.Request(), client_id)
    except google_exceptions.TransportError as e:
        logger.error(f"Could not reach Google to verify token: {e}")
        raise UpstreamError("Identity provider unavailable", provider="google_oauth") from e
    except ValueError as e:
        logger.warning(f"Invalid Google token: {e}")
        raise InvalidTokenError("Invalid Google ID token") from e

    if idinfo.get('iss') not in GOOGLE_ISSUERS:
        logger.warning("Invalid issuer in Google token")
        raise InvalidTokenError("Invalid Google token issuer")

    if not idinfo.get('sub') or not idinfo.get('email'):
        raise InvalidTokenError("Google token missing subject or email")

    return {
        'sub': idinfo['sub'],
        'email': idinfo['email'],
        'name': idinfo.get('name') or idinfo['email'].split('@')[0],
        'given_name': idinfo.get('given_name'),
        'family_name': idinfo.get('family_name'),
        'picture': idinfo.get('picture'),
    }
