"""
Google OAuth Provider
=====================

Functions:
- verify_google_token: Verify Google ID token
"""

from .google_oauth_helper import verify_google_token

__all__ = [
    "verify_google_token",
]
