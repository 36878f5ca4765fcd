"""
Lambda handler applying gallery mutations: upload, delete, setThumbnail, batchUpdate.
"""

from http import HTTPStatus
import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import (
    BatchUploadError,
    GalleryIndexError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from core.models.gallery import GalleryResponse
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import GalleryPathParams, ManageGalleryRequest
from .service import ManageGalleryService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle gallery mutation requests.

    Expected API Gateway event structure:
    {
        "pathParameters": {"vendor_id": "...", "product_id": "..."},
        "body": "{\"action\": \"upload\", \"files\": [{\"file\": \"<base64>\", \"file_name\": \"a.jpg\"}]}"
    }

    Every successful mutation answers with the refreshed gallery, thumbnail
    first. A partially failed upload answers 500 with the failed files and
    the gallery as it stands.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    request_id = getattr(context, "aws_request_id", None)

    logger.info(
        "Received gallery mutation request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "path_params": event.get("pathParameters"),
            "request_id": request_id,
            "function_name": getattr(context, "function_name", None),
            "remaining_time_ms": context.get_remaining_time_in_millis()
            if hasattr(context, "get_remaining_time_in_millis")
            else None,
        },
    )

    path_params = event.get("pathParameters") or {}

    is_valid, path_result = validate_request(
        GalleryPathParams,
        {
            "vendor_id": path_params.get("vendor_id"),
            "product_id": path_params.get("product_id"),
        },
        request_id=request_id,
    )
    if not is_valid:
        return path_result

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as exc:
        logger.exception("Invalid JSON body received", exc_info=exc)
        return ResponseBuilder.bad_request("Invalid JSON body", request_id=request_id)

    if not isinstance(body, dict):
        return ResponseBuilder.bad_request("Invalid JSON body", request_id=request_id)

    is_valid, body_result = validate_request(ManageGalleryRequest, body, request_id=request_id)
    if not is_valid:
        return body_result

    path: GalleryPathParams = path_result
    request: ManageGalleryRequest = body_result
    log_extra = {
        "vendor_id": path.vendor_id,
        "product_id": path.product_id,
        "action": request.action.value,
    }

    service = ManageGalleryService()

    try:
        urls = service.apply(
            vendor_id=path.vendor_id,
            product_id=path.product_id,
            request=request,
        )

    except ValidationError as exc:
        logger.warning("Gallery mutation rejected", extra=log_extra)
        return ResponseBuilder.from_exception(
            exc,
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            request_id=request_id,
        )

    except NotFoundError as exc:
        logger.info("Gallery mutation target not found", extra=log_extra)
        return ResponseBuilder.from_exception(
            exc,
            status=HTTPStatus.NOT_FOUND,
            request_id=request_id,
        )

    except BatchUploadError as exc:
        logger.exception("Upload batch partially failed", extra={**log_extra, **exc.details})
        metrics.add_metric(
            name="ImagesUploadFailed",
            unit=MetricUnit.Count,
            value=exc.details.get("failed_count", 0),
        )
        return ResponseBuilder.from_exception(
            exc,
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            request_id=request_id,
        )

    except (StoreError, GalleryIndexError) as exc:
        logger.exception("Gallery mutation failed", extra=log_extra)
        return ResponseBuilder.internal_error(
            "Unable to update gallery",
            error=exc.error_code,
            request_id=request_id,
        )

    for name, count in service.mutation_counts(request).items():
        if count:
            metrics.add_metric(name=name, unit=MetricUnit.Count, value=count)

    logger.info("Gallery mutation applied", extra={**log_extra, "image_count": len(urls)})

    return ResponseBuilder.ok(
        GalleryResponse.from_urls(urls).model_dump(),
        request_id=request_id,
    )
