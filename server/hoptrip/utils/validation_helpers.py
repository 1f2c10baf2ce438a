"""Validation helper functions shared by services and middleware."""
from pydantic import ValidationError as PydanticValidationError
from validate_email_address import validate_email as validate_email_address

from ..common.exceptions import ValidationError


def parse_model(model_cls, data):
    """
    Validate `data` against a pydantic model.

    Args:
        model_cls: Pydantic model class
        data: dict with request data

    Returns:
        Model instance

    Raises:
        ValidationError: with a per-field list in details.errors
    """
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            {
                "field": ".".join(str(part) for part in err["loc"]) or None,
                "message": err["msg"],
            }
            for err in e.errors()
        ]
        first = errors[0]
        message = f"{first['field']}: {first['message']}" if first["field"] else first["message"]
        raise ValidationError(message, details={"errors": errors}) from e


def normalize_email(email):
    """
    Lower-case and syntax-check an email address.

    Returns:
        str: normalized email

    Raises:
        ValidationError: missing or malformed address
    """
    if not isinstance(email, str) or not email.strip():
        raise ValidationError("Email is required", field="email")
    normalized = email.strip().lower()
    if not validate_email_address(normalized):
        raise ValidationError("Please provide a valid email address", field="email")
    return normalized
