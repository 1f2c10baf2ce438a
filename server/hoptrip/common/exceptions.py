"""
Custom Exception Hierarchy for HopTrip
======================================

Every failure a service can report maps onto one of these classes. The
app-level error handler turns them into the standard error envelope:

    {
        "resultMessage": "...",
        "resultCode": "NF001",
        "error": "NotFound",
        "details": {...}
    }

Usage:
    from hoptrip.common.exceptions import NotFoundError, ForbiddenError

    trip = trip_repo.get_by_id(trip_id)
    if not trip:
        raise NotFoundError("Trip", trip_id)
"""


class HopTripError(Exception):
    """
    Base exception for all HopTrip errors.

    Attributes:
        message: Human-readable error message
        code: Error code for API responses
        details: Additional error details
        kind: Machine-readable error kind
        status_code: HTTP status returned to the caller
    """

    kind = "Error"
    status_code = 500

    def __init__(self, message: str, code: str = "HT000", details: dict = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API response."""
        return {
            "error": self.kind,
            "message": self.message,
            "code": self.code,
            "details": self.details
        }


# ============================================
# Resource Exceptions
# ============================================

class NotFoundError(HopTripError):
    """Resource not found."""

    kind = "NotFound"
    status_code = 404

    def __init__(self, resource: str, identifier: str = None, details: dict = None):
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with id '{identifier}' not found"
        details = details or {}
        details["resource"] = resource
        if identifier:
            details["identifier"] = identifier
        super().__init__(message, code="NF001", details=details)


class ConflictError(HopTripError):
    """Resource conflict (duplicate traveler, duplicate email, etc.)."""

    kind = "Conflict"
    status_code = 409

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, code="CONF001", details=details)


# ============================================
# Validation Exceptions
# ============================================

class ValidationError(HopTripError):
    """Input validation failed."""

    kind = "ValidationError"
    status_code = 400

    def __init__(self, message: str, field: str = None, details: dict = None):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, code="VAL001", details=details)


# ============================================
# Authentication Exceptions
# ============================================

class UnauthorizedError(HopTripError):
    """No credentials were presented."""

    kind = "Unauthorized"
    status_code = 401

    def __init__(self, message: str = "Access token required", details: dict = None):
        super().__init__(message, code="AUTH001", details=details)


class InvalidTokenError(HopTripError):
    """Token signature, format or claims are invalid."""

    kind = "InvalidToken"
    status_code = 401

    def __init__(self, message: str = "Invalid token", details: dict = None):
        super().__init__(message, code="AUTH002", details=details)


class TokenExpiredError(HopTripError):
    """Token was valid but its expiry has passed."""

    kind = "TokenExpired"
    status_code = 401

    def __init__(self, message: str = "Token expired", details: dict = None):
        super().__init__(message, code="AUTH003", details=details)


class ForbiddenError(HopTripError):
    """Authenticated, but not allowed to perform this action."""

    kind = "Forbidden"
    status_code = 403

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, code="AUTH004", details=details)


# ============================================
# External API Exceptions
# ============================================

class UpstreamError(HopTripError):
    """
    External collaborator failed (place lookup, mail delivery, identity provider).

    Raise with ``from`` so the original cause stays attached for logging:

        except requests.exceptions.RequestException as e:
            raise UpstreamError("Place lookup failed", provider="google_places") from e
    """

    kind = "UpstreamError"
    status_code = 502

    def __init__(self, message: str, provider: str = None, details: dict = None):
        details = details or {}
        if provider:
            details["provider"] = provider
        super().__init__(message, code="API001", details=details)


# ============================================
# Database Exceptions
# ============================================

class DatabaseError(HopTripError):
    """Document store unavailable or operation failed."""

    kind = "DatabaseError"
    status_code = 503

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, code="DB001", details=details)
