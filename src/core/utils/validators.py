"""Request validation utilities."""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from core.utils.constants import MAX_FILES_PER_REQUEST
from core.utils.response import ResponseBuilder

ModelT = TypeVar("ModelT", bound=BaseModel)


def _friendly_message(err: dict[str, Any]) -> str:
    msg = str(err.get("msg", "Invalid value")).replace("Value error,", "").strip()
    msg_lower = msg.lower()
    error_type = err.get("type", "")

    if "base64" in msg_lower:
        return "File must be a valid Base64-encoded string"
    if error_type == "missing" or "field required" in msg_lower:
        return "This field is required"
    if error_type == "enum":
        return f"Unsupported value. {msg}"
    if error_type == "too_long" and err.get("loc", ("",))[0] == "files":
        return f"At most {MAX_FILES_PER_REQUEST} files can be sent per request"
    if error_type == "string_pattern_mismatch":
        return "Identifiers may only contain letters, digits, '_' and '-'"
    return msg


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for API responses.

    Only the field path and a readable message are kept; `input`, `ctx`
    and `url` may echo request data (base64 files) and are dropped.
    """
    return [
        {
            "field": ".".join(str(x) for x in err.get("loc", [])) or "body",
            "message": _friendly_message(err),
        }
        for err in errors
    ]


def validate_request(
    model: type[ModelT],
    data: dict[str, Any],
    *,
    request_id: str | None = None,
    cors_origin: str | None = None,
) -> tuple[bool, ModelT | dict[str, Any]]:
    """Validate request data against a Pydantic model.

    Args:
        model: Pydantic model class
        data: Input data to validate
        request_id: Optional request ID for tracing
        cors_origin: Optional CORS origin

    Returns:
        (True, validated_model) on success
        (False, error_response) on validation failure
    """
    try:
        return True, model.model_validate(data)

    except ValidationError as exc:
        return (
            False,
            ResponseBuilder.validation_error(
                message="Invalid request payload",
                details=sanitize_validation_errors(exc.errors()),
                request_id=request_id,
                cors_origin=cors_origin,
            ),
        )
