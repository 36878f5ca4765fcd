import base64
import json
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest

from core.gallery.coordinator import GalleryCoordinator
from core.gallery.ingestion import ImageIngestionPipeline


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
        get_remaining_time_in_millis=lambda: 30000,
    )


@pytest.fixture
def memory_coordinator(memory_store, memory_index, test_catalog, passthrough_normalizer) -> GalleryCoordinator:
    return GalleryCoordinator(
        storage=memory_store,
        index=memory_index,
        catalog=test_catalog,
        pipeline=ImageIngestionPipeline(
            storage=memory_store,
            index=memory_index,
            normalizer=passthrough_normalizer,
        ),
    )


@pytest.fixture
def gallery_event() -> Callable[..., dict[str, Any]]:
    """
    Factory for gallery route events.

    Usage:
        event = gallery_event(body={"action": "delete", "image_key": "..."})
    """

    def _event(
        *,
        vendor_id: str | None = "vendor_123",
        product_id: str | None = "prod_1",
        method: str = "POST",
        body: Any = None,
    ) -> dict[str, Any]:
        return {
            "httpMethod": method,
            "path": f"/vendors/{vendor_id}/products/{product_id}/images",
            "pathParameters": {"vendor_id": vendor_id, "product_id": product_id},
            "headers": {"Content-Type": "application/json"},
            "body": body if body is None or isinstance(body, str) else json.dumps(body),
        }

    return _event


@pytest.fixture
def encode() -> Callable[[bytes], str]:
    return lambda data: base64.b64encode(data).decode("utf-8")


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    return json.loads(resp["body"]) if resp.get("body") else {}


@pytest.fixture
def body_of() -> Callable[[dict[str, Any]], dict[str, Any]]:
    return parse_body
