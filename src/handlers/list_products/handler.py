"""
Lambda handler listing a vendor's products with their gallery status.
"""

from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.gallery.coordinator import GalleryCoordinator
from core.models.errors import GalleryIndexError, StoreError, VendorNotFoundError
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import ListProductsRequest, ListProductsResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle vendor product listing requests.

    Every catalog product of the vendor is returned, in catalog order,
    with its image count and the signed URL of its thumbnail.
    """
    request_id = getattr(context, "aws_request_id", None)

    logger.info(
        "Received product listing request",
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
        ListProductsRequest,
        {"vendor_id": path_params.get("vendor_id")},
        request_id=request_id,
    )
    if not is_valid:
        return result

    request: ListProductsRequest = result
    coordinator = GalleryCoordinator()

    try:
        products = coordinator.list_products_with_status(vendor_id=request.vendor_id)

    except VendorNotFoundError as exc:
        logger.info("Vendor not found", extra={"vendor_id": request.vendor_id})
        return ResponseBuilder.from_exception(
            exc,
            status=HTTPStatus.NOT_FOUND,
            request_id=request_id,
        )

    except (StoreError, GalleryIndexError) as exc:
        logger.exception(
            "Failed to list products",
            extra={"vendor_id": request.vendor_id},
        )
        return ResponseBuilder.internal_error(
            "Unable to load products",
            error=exc.error_code,
            request_id=request_id,
        )

    response = ListProductsResponse(vendor_id=request.vendor_id, products=products)
    return ResponseBuilder.ok(response.model_dump(), request_id=request_id)
