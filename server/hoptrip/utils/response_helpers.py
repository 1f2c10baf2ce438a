"""
Response helper functions.

Pure utility functions for building standardized API responses.
"""
from flask import jsonify


def build_error_response(message, result_code, status_code=400, kind=None, details=None):
    """
    Build standardized error response.

    Args:
        message: Human-readable error message
        result_code: Application result code
        status_code: HTTP status code (default 400)
        kind: Machine-readable error kind (NotFound, Forbidden, ...)
        details: Optional dict with extra context

    Returns:
        tuple: (json_response, status_code)

    Example:
        return build_error_response(
            "Trip not found",
            "NF001",
            404,
            kind="NotFound"
        )
    """
    body = {
        "resultMessage": message,
        "resultCode": result_code,
        "error": kind or "Error",
    }
    if details:
        body["details"] = details
    return jsonify(body), status_code


def build_success_response(message, result_code, data=None, status_code=200):
    """
    Build standardized success response.

    Args:
        message: Success message
        result_code: Application result code
        data: Optional dict merged into the response body
        status_code: HTTP status code (default 200)

    Returns:
        tuple: (json_response, status_code)

    Example:
        return build_success_response(
            "Trip created successfully.",
            "20001",
            {"trip": trip},
            201
        )
    """
    response = {
        "resultMessage": message,
        "resultCode": result_code
    }
    if data:
        response.update(data)
    return jsonify(response), status_code
