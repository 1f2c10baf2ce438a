"""App-level error handler: every failure leaves the API in the standard envelope."""
import logging

from flask import current_app
from pymongo.errors import PyMongoError
from werkzeug.exceptions import HTTPException

from .exceptions import HopTripError, DatabaseError
from ..utils.response_helpers import build_error_response

logger = logging.getLogger(__name__)


def handle_exception(e):
    """
    Translate any exception raised by a view into a JSON error response.

    - HopTripError subclasses carry their own status, kind and code.
    - Werkzeug HTTP errors (unknown route, wrong method) keep their status.
    - Storage failures are reported as DatabaseError (503).
    - Anything else is a 500; the internal message is only exposed in debug mode.
    """
    if isinstance(e, HopTripError):
        if e.status_code >= 500:
            logger.error(f"[ERROR] {e.kind}: {e.message} (cause: {e.__cause__!r})")
        else:
            logger.warning(f"[WARN] {e.kind}: {e.message}")
        return build_error_response(e.message, e.code, e.status_code, kind=e.kind, details=e.details)

    if isinstance(e, HTTPException):
        return build_error_response(e.description, f"HTTP{e.code}", e.code, kind=e.name.replace(" ", ""))

    if isinstance(e, PyMongoError):
        logger.error(f"[ERROR] MongoDB operation failed: {e}")
        db_error = DatabaseError("Storage temporarily unavailable")
        return build_error_response(
            db_error.message, db_error.code, db_error.status_code, kind=db_error.kind
        )

    logger.exception(f"[ERROR] Unhandled error: {e}")
    details = {"exception": str(e)} if current_app.debug else None
    return build_error_response("Internal server error", "50000", 500, kind="InternalError", details=details)
