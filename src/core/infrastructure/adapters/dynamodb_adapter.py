"""Thin DynamoDB adapter wrapping boto3 table operations."""

import os
import threading
from typing import Any, Protocol, cast

import boto3

from core.utils.constants import (
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_GALLERY_INDEX_TABLE_NAME,
)


class DynamoDBTable(Protocol):
    """Minimal DynamoDB Table protocol."""

    def put_item(self, *, Item: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def delete_item(self, *, Key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def update_item(self, *, Key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def query(self, **kwargs: Any) -> dict[str, Any]: ...


class DynamoDBAdapterProtocol(Protocol):
    """Minimal DynamoDB adapter protocol (repository-facing)."""

    def put_item(self, *, item: dict[str, Any]) -> dict[str, Any]: ...
    def delete_item(self, *, key: dict[str, Any], return_old: bool = False) -> dict[str, Any]: ...
    def update_item(self, *, key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def query(self, **kwargs: Any) -> dict[str, Any]: ...


class DynamoDBAdapter:
    """Low-level DynamoDB operations (mechanical, no error handling).

    This adapter:
    - Wraps a boto3 DynamoDB resource, one per calling thread
      (boto3 resources must not be shared across threads)
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self) -> None:
        """Read table configuration from environment."""
        table_name = os.getenv(ENV_GALLERY_INDEX_TABLE_NAME)
        if not table_name:
            raise RuntimeError(
                f"{ENV_GALLERY_INDEX_TABLE_NAME} environment variable is not set"
            )

        self._table_name = table_name
        self._local = threading.local()

    @property
    def table(self) -> DynamoDBTable:
        table = getattr(self._local, "table", None)
        if table is None:
            dynamodb = boto3.Session().resource(
                "dynamodb",
                endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
                region_name=os.getenv(ENV_AWS_REGION),
            )
            table = cast(DynamoDBTable, dynamodb.Table(self._table_name))
            self._local.table = table
        return table

    def put_item(self, *, item: dict[str, Any]) -> dict[str, Any]:
        """Insert item into DynamoDB.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.put_item(Item=item)

    def delete_item(self, *, key: dict[str, Any], return_old: bool = False) -> dict[str, Any]:
        """Delete item by key, optionally returning the removed attributes.

        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs: dict[str, Any] = {"Key": key}

        if return_old:
            kwargs["ReturnValues"] = "ALL_OLD"

        return self.table.delete_item(**kwargs)

    def update_item(self, *, key: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        """Update item attributes.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.update_item(Key=key, **kwargs)

    def query(self, **kwargs: Any) -> dict[str, Any]:
        """Execute DynamoDB query.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.query(**kwargs)
