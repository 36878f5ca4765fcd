"""
Common decorators and helpers for API Gateway Lambda handlers.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger

from core.models.errors import GalleryServiceError, NotFoundError, ValidationError
from core.utils.constants import ERROR_CODE_INTERNAL_ERROR
from core.utils.response import ResponseBuilder

logger = Logger(UTC=True)

JsonDict = dict[str, Any]

OPAQUE_FAILURE_MESSAGE = "We're experiencing technical difficulties. Please try again in a few moments."


def _log_error(
    message: str,
    *,
    handler_name: str,
    request_id: str | None,
    exc: Exception,
    level: str = "warning",
) -> None:
    """
    Log error with consistent structure and full context.

    Args:
        message: Log message
        handler_name: Name of the handler function
        request_id: AWS request ID
        exc: Exception that was raised
        level: Log level ('warning' or 'exception')
    """
    log_extra = {
        "handler": handler_name,
        "request_id": request_id,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }

    if level == "exception":
        logger.exception(message, extra=log_extra)
    else:
        log_extra["traceback"] = traceback.format_exc()
        logger.warning(message, extra=log_extra)


def api_gateway_handler(
    func: Callable[..., JsonDict],
) -> Callable[..., JsonDict]:
    """
    Decorator for API Gateway Lambda handlers.

    Provides:
    - Automatic CORS preflight (OPTIONS) handling
    - Mapping of domain errors the handler did not translate itself
    - An opaque 500 for every other exception

    Only domain errors carry client-facing meaning. Built-in exceptions
    escaping a handler are server faults (bugs, misconfiguration) and are
    never reported as client errors.

    Example:
        @api_gateway_handler
        def lambda_handler(event, context):
            return {"statusCode": 200, "body": "Success"}
    """

    @wraps(func)
    def wrapper(
        event: Any,
        context: Any,
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        if event.get("httpMethod") == "OPTIONS":
            return ResponseBuilder.no_content(cors_origin=cors_origin)

        request_id = getattr(context, "aws_request_id", None)

        try:
            return func(event, context)

        except NotFoundError as exc:
            _log_error(
                "Unhandled not-found error",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
            )
            return ResponseBuilder.from_exception(
                exc,
                status=HTTPStatus.NOT_FOUND,
                request_id=request_id,
                cors_origin=cors_origin,
            )

        except ValidationError as exc:
            _log_error(
                "Unhandled validation error",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
            )
            return ResponseBuilder.from_exception(
                exc,
                status=HTTPStatus.UNPROCESSABLE_ENTITY,
                request_id=request_id,
                cors_origin=cors_origin,
            )

        except GalleryServiceError as exc:
            _log_error(
                "Unhandled service error",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
                level="exception",
            )
            return ResponseBuilder.internal_error(
                OPAQUE_FAILURE_MESSAGE,
                error=exc.error_code,
                request_id=request_id,
                cors_origin=cors_origin,
            )

        except Exception as exc:
            _log_error(
                "Unexpected error in handler",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
                level="exception",
            )
            return ResponseBuilder.internal_error(
                OPAQUE_FAILURE_MESSAGE,
                error=ERROR_CODE_INTERNAL_ERROR,
                request_id=request_id,
                cors_origin=cors_origin,
            )

    return wrapper
