"""
Lambda handler returning the ordered image gallery of a product.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.gallery.coordinator import GalleryCoordinator
from core.models.errors import GalleryIndexError, StoreError
from core.models.gallery import GalleryResponse
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import GetGalleryRequest

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle gallery read requests.

    The first URL of the returned list is the product thumbnail. A gallery
    without images answers with an empty list rather than 404.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    request_id = getattr(context, "aws_request_id", None)

    logger.info(
        "Received gallery read request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "path_params": event.get("pathParameters"),
            "request_id": request_id,
            "function_name": getattr(context, "function_name", None),
        },
    )

    path_params = event.get("pathParameters") or {}

    is_valid, result = validate_request(
        GetGalleryRequest,
        {
            "vendor_id": path_params.get("vendor_id"),
            "product_id": path_params.get("product_id"),
        },
        request_id=request_id,
    )
    if not is_valid:
        return result

    request: GetGalleryRequest = result
    coordinator = GalleryCoordinator()

    try:
        urls = coordinator.list_gallery(
            vendor_id=request.vendor_id,
            product_id=request.product_id,
        )
    except (StoreError, GalleryIndexError) as exc:
        logger.exception(
            "Failed to read gallery",
            extra={"vendor_id": request.vendor_id, "product_id": request.product_id},
        )
        return ResponseBuilder.internal_error(
            "Unable to load gallery",
            error=exc.error_code,
            request_id=request_id,
        )

    return ResponseBuilder.ok(
        GalleryResponse.from_urls(urls).model_dump(),
        request_id=request_id,
    )
