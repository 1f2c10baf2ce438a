"""
Authentication middleware for JWT token validation.
"""
from functools import wraps
from inspect import signature

from flask import request

from ..core.di_container import DIContainer


def _bearer_token():
    """Token from `Authorization: Bearer <token>`, or None."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    auth_header_parts = auth_header.split(" ")
    if len(auth_header_parts) != 2 or not auth_header_parts[1]:
        return None
    return auth_header_parts[1]


def _call_with_identity(f, user, args, kwargs):
    func_signature = signature(f)
    if "user_id" in func_signature.parameters:
        return f(user["_id"] if user else None, *args, **kwargs)
    elif "user" in func_signature.parameters:
        return f(user, *args, **kwargs)
    return f(*args, **kwargs)


def JWT_required(f):
    """
    Decorator to require JSON Web Token for API access.

    Rejections are raised (Unauthorized, TokenExpired, InvalidToken,
    Forbidden) and rendered by the app-level error handler.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_service = DIContainer.get_instance().resolve("AuthService")
        user = auth_service.authenticate(_bearer_token())
        return _call_with_identity(f, user, args, kwargs)

    return decorated_function


def JWT_optional(f):
    """Like JWT_required, but an absent or rejected token yields user=None."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_service = DIContainer.get_instance().resolve("AuthService")
        user = auth_service.optional_authenticate(_bearer_token())
        return _call_with_identity(f, user, args, kwargs)

    return decorated_function
