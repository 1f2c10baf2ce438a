"""
Middleware package for Flask request/response interceptors.
"""

from .auth_middleware import JWT_required, JWT_optional
from .validation_middleware import get_json_body, get_int_arg

__all__ = [
    'JWT_required',
    'JWT_optional',
    'get_json_body',
    'get_int_arg',
]
