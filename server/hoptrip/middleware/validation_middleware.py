"""
Validation middleware for Flask request data validation.
"""
from ..common.exceptions import ValidationError
from ..utils.sanitization import contains_mongo_operators


def get_json_body(request, required=True):
    """
    Get the JSON object body of a request.

    Args:
        request: Flask request object
        required: when False an empty/missing body yields {}

    Returns:
        dict: request data

    Raises:
        ValidationError: body missing, not an object, or carrying MongoDB operators
    """
    data = request.get_json(silent=True)
    if data is None:
        if not required:
            return {}
        raise ValidationError("Invalid JSON data")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    if contains_mongo_operators(data):
        raise ValidationError("Invalid request payload (forbidden operators)")
    return data


def get_int_arg(request, name, default):
    """Integer query parameter; a non-integer value is a ValidationError."""
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValidationError(f"{name} must be an integer", field=name) from e
