"""Store adapter over the boto3 DynamoDB client.

Exposes the three calls the batch layer needs (batch write, describe schema,
scan), marshals between wire attribute maps and the typed models, and turns
botocore failures into StoreCallError / SchemaResolutionError.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from ddb_batch.models.items import (
    MAX_BATCH_SIZE,
    BatchOutcome,
    DeleteRequest,
    Key,
    PutRequest,
    Record,
    ScanPage,
    Schema,
    record_from_wire,
    record_to_wire,
    write_request_from_wire,
)
from ddb_batch.utils.errors import SchemaResolutionError, StoreCallError

logger = logging.getLogger(__name__)


def _error_code(error: Exception) -> str | None:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None


class StoreClient:
    """DynamoDB client wrapper with typed requests and responses."""

    def __init__(self, dynamodb: Any, verbose: bool = False) -> None:
        self._dynamodb = dynamodb
        self._verbose = verbose

    def batch_write(
        self,
        table: str,
        puts: Sequence[Record] = (),
        deletes: Sequence[Key] = (),
    ) -> BatchOutcome:
        """Issue one BatchWriteItem call.

        Raises:
            ValueError: If more than MAX_BATCH_SIZE requests are given.
            StoreCallError: If the call itself fails.
        """
        requests = [PutRequest(item=r).to_wire() for r in puts]
        requests += [DeleteRequest(key=k).to_wire() for k in deletes]
        if len(requests) > MAX_BATCH_SIZE:
            raise ValueError(
                f"Batch of {len(requests)} requests exceeds the limit of {MAX_BATCH_SIZE}"
            )

        if self._verbose:
            logger.info(f"BatchWriteItem {table}: {len(puts)} puts, {len(deletes)} deletes")

        response = self._call("batch_write_item", RequestItems={table: requests})

        unprocessed = [
            write_request_from_wire(w)
            for w in response.get("UnprocessedItems", {}).get(table, [])
        ]
        return BatchOutcome(table=table, submitted=len(requests), unprocessed=unprocessed)

    def describe_schema(self, table: str) -> Schema:
        """Resolve the partition (HASH) and sort (RANGE) key names of a table."""
        try:
            response = self._call("describe_table", TableName=table)
        except StoreCallError as e:
            raise SchemaResolutionError(f"Could not describe table {table}: {e}") from e

        partition_key = None
        sort_key = None
        for element in response.get("Table", {}).get("KeySchema") or []:
            if element.get("KeyType") == "HASH":
                partition_key = element.get("AttributeName")
            elif element.get("KeyType") == "RANGE":
                sort_key = element.get("AttributeName")

        if not partition_key:
            raise SchemaResolutionError(f"Table {table} has no partition (HASH) key in its key schema")
        return Schema(partition_key=partition_key, sort_key=sort_key)

    def scan(self, table: str, cursor: Key | None = None, limit: int = 10) -> ScanPage:
        """Fetch one scan page of at most ``limit`` records."""
        kwargs: dict[str, Any] = {"TableName": table, "Limit": limit}
        if cursor:
            kwargs["ExclusiveStartKey"] = record_to_wire(cursor)

        response = self._call("scan", **kwargs)

        last_key = response.get("LastEvaluatedKey")
        return ScanPage(
            records=[record_from_wire(item) for item in response.get("Items", [])],
            next_cursor=record_from_wire(last_key) if last_key else None,
        )

    def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        """Invoke a boto3 operation, mapping SDK failures to StoreCallError."""
        try:
            return getattr(self._dynamodb, operation)(**kwargs)
        except (ClientError, BotoCoreError) as e:
            code = _error_code(e)
            logger.error(f"{operation} failed: {e}")
            raise StoreCallError(f"Store call {operation} failed: {e}", store_code=code) from e
