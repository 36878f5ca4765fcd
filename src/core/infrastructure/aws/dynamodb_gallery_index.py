"""DynamoDB-backed implementation of GalleryIndexRepository.

Table layout:
- partition key `gallery_id` = "{vendor_id}#{product_id}"
- sort key `image_key`
- local secondary index `gallery-recorded-index` sorted by `recorded_at`

The LSI allows strongly consistent reads, so a listing issued right after
a mutation sees that mutation.
"""

from typing import Any

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter, DynamoDBAdapterProtocol
from core.models.errors import GalleryIndexError
from core.models.gallery import GalleryEntry
from core.repositories.index_repository import GalleryIndexRepository
from core.utils.constants import (
    ERROR_CODE_INDEX_INSERT_FAILED,
    ERROR_CODE_INDEX_LIST_FAILED,
    ERROR_CODE_INDEX_REMOVE_FAILED,
    ERROR_CODE_INDEX_TOUCH_FAILED,
    GALLERY_RECORDED_INDEX,
)
from core.utils.keys import gallery_id
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)


class DynamoDBGalleryIndex(GalleryIndexRepository):
    """DynamoDB-backed gallery index with error handling.

    All boto3 errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        """Initialize with DynamoDB adapter."""
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter()

    def insert(self, *, entry: GalleryEntry) -> None:
        item: dict[str, Any] = {
            "gallery_id": gallery_id(entry.vendor_id, entry.product_id),
            **entry.model_dump(),
        }
        log_extra = {"gallery_id": item["gallery_id"], "image_key": entry.image_key}

        logger.debug("Inserting gallery entry", extra={**log_extra, "recorded_at": entry.recorded_at})

        try:
            self._db.put_item(item=item)
            logger.info("Gallery entry inserted", extra=log_extra)

        except ClientError as exc:
            logger.error("DynamoDB put_item failed", extra=log_extra)
            raise GalleryIndexError(
                message="Unable to save gallery entry at this time",
                error_code=ERROR_CODE_INDEX_INSERT_FAILED,
                details={"image_key": entry.image_key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error inserting gallery entry")
            raise GalleryIndexError(
                message="Unable to save gallery entry at this time",
                error_code=ERROR_CODE_INDEX_INSERT_FAILED,
                details={"image_key": entry.image_key},
            ) from exc

    def remove(self, *, vendor_id: str, product_id: str, image_key: str) -> int:
        key = {"gallery_id": gallery_id(vendor_id, product_id), "image_key": image_key}

        logger.debug("Removing gallery entry", extra=key)

        try:
            response = self._db.delete_item(key=key, return_old=True)

        except ClientError as exc:
            logger.error("DynamoDB delete_item failed", extra=key)
            raise GalleryIndexError(
                message="Unable to delete gallery entry",
                error_code=ERROR_CODE_INDEX_REMOVE_FAILED,
                details={"image_key": image_key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error removing gallery entry")
            raise GalleryIndexError(
                message="Unable to delete gallery entry",
                error_code=ERROR_CODE_INDEX_REMOVE_FAILED,
                details={"image_key": image_key},
            ) from exc

        removed = 1 if response.get("Attributes") else 0
        logger.info("Gallery entry removal finished", extra={**key, "removed": removed})
        return removed

    def touch(self, *, vendor_id: str, product_id: str, image_key: str) -> int:
        key = {"gallery_id": gallery_id(vendor_id, product_id), "image_key": image_key}
        recorded_at = utc_now_iso()

        logger.debug("Touching gallery entry", extra={**key, "recorded_at": recorded_at})

        try:
            self._db.update_item(
                key=key,
                UpdateExpression="SET recorded_at = :recorded_at",
                ConditionExpression="attribute_exists(image_key)",
                ExpressionAttributeValues={":recorded_at": recorded_at},
            )

        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                logger.info("Gallery entry to touch does not exist", extra=key)
                return 0

            logger.error("DynamoDB update_item failed", extra=key)
            raise GalleryIndexError(
                message="Unable to update gallery entry",
                error_code=ERROR_CODE_INDEX_TOUCH_FAILED,
                details={"image_key": image_key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error touching gallery entry")
            raise GalleryIndexError(
                message="Unable to update gallery entry",
                error_code=ERROR_CODE_INDEX_TOUCH_FAILED,
                details={"image_key": image_key},
            ) from exc

        logger.info("Gallery entry touched", extra={**key, "recorded_at": recorded_at})
        return 1

    def list_entries(self, *, vendor_id: str, product_id: str) -> list[GalleryEntry]:
        """List a gallery newest first.

        NOTE:
        - Ordering is done by DynamoDB on the LSI (ScanIndexForward=False).
        - recorded_at must be stored in fixed-width ISO-8601 UTC format.
        - All result pages are followed.
        """
        partition = gallery_id(vendor_id, product_id)

        query_kwargs: dict[str, Any] = {
            "IndexName": GALLERY_RECORDED_INDEX,
            "KeyConditionExpression": Key("gallery_id").eq(partition),
            "ScanIndexForward": False,
            "ConsistentRead": True,
        }

        items: list[dict[str, Any]] = []
        last_evaluated_key: dict[str, Any] | None = None

        try:
            while True:
                if last_evaluated_key:
                    query_kwargs["ExclusiveStartKey"] = last_evaluated_key

                response = self._db.query(**query_kwargs)
                page_items = response.get("Items", [])

                if not isinstance(page_items, list):
                    raise GalleryIndexError(
                        message="Invalid query response from DynamoDB",
                        error_code=ERROR_CODE_INDEX_LIST_FAILED,
                        details={"gallery_id": partition},
                    )

                items.extend(page_items)

                last_evaluated_key = response.get("LastEvaluatedKey")
                if not last_evaluated_key:
                    break

            entries = [GalleryEntry.from_item(item) for item in items]

        except ClientError as exc:
            logger.error("DynamoDB query failed", extra={"gallery_id": partition})
            raise GalleryIndexError(
                message="Unable to list gallery images",
                error_code=ERROR_CODE_INDEX_LIST_FAILED,
                details={"gallery_id": partition},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error listing gallery")
            raise GalleryIndexError(
                message="Unable to list gallery images",
                error_code=ERROR_CODE_INDEX_LIST_FAILED,
                details={"gallery_id": partition},
            ) from exc

        logger.info("Gallery listed", extra={"gallery_id": partition, "count": len(entries)})
        return entries
