"""Bulk save, bulk delete and truncate against a single table."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping, Sequence

from ddb_batch.client import StoreClient
from ddb_batch.config import Config
from ddb_batch.models.items import (
    DEFAULT_SCAN_LIMIT,
    BatchOutcome,
    DeleteRequest,
    PutRequest,
    Record,
    Schema,
)
from ddb_batch.services.reconstruction import coerce_record, project_key
from ddb_batch.services.retry import RetryCoordinator, RetryPolicy
from ddb_batch.services.submitter import BatchSubmitter
from ddb_batch.session import build_dynamodb_client
from ddb_batch.utils.cache import SchemaCache
from ddb_batch.utils.pagination import paginate

logger = logging.getLogger(__name__)


class DocumentTable:
    """Batch operations on one table with managed retry of unprocessed items.

    Every operation runs synchronously: chunks of at most 25 requests are
    submitted one after another, then unprocessed requests are rebuilt from
    the table's key schema and resubmitted with exponential backoff.

    The outcome lists returned by ``batch_save`` and ``batch_delete`` are
    cumulative: first-round outcomes (``attempt == 1``) come first, followed
    by the outcomes of each retry round.
    """

    def __init__(
        self,
        client: Any,
        table_name: str,
        retry_policy: RetryPolicy | None = None,
        schema_cache: SchemaCache | None = None,
        scan_limit: int = DEFAULT_SCAN_LIMIT,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self._table = table_name
        self._scan_limit = scan_limit
        self._schema_cache = schema_cache if schema_cache is not None else SchemaCache()
        self._submitter = BatchSubmitter(client)
        self._retry = RetryCoordinator(
            client, self._submitter, self._schema_cache, retry_policy, sleep=sleep
        )

    @classmethod
    def from_config(
        cls,
        config: Config,
        table_name: str,
        profile: str | None = None,
        verbose: bool = False,
    ) -> DocumentTable:
        """Build a table bound to a boto3 client described by the configuration."""
        dynamodb = build_dynamodb_client(config.store_config(profile))
        return cls(
            StoreClient(dynamodb, verbose=verbose),
            table_name,
            retry_policy=config.retry_policy(),
            schema_cache=SchemaCache(ttl=config.settings.schema_cache_ttl),
            scan_limit=config.settings.scan_limit,
        )

    @property
    def table_name(self) -> str:
        return self._table

    def describe_schema(self, refresh: bool = False) -> Schema:
        """Return the table's key schema, fetching it on a cache miss."""
        if refresh:
            self._schema_cache.invalidate(self._table)
        return self._schema_cache.get_or_fetch(self._table, self._client.describe_schema)

    def batch_save(self, records: Sequence[Mapping[str, Any]]) -> list[BatchOutcome]:
        """Put every record, retrying unprocessed ones until all are accepted.

        Raises:
            UnsupportedAttributeTypeError: If any value is not a string. Checked
                before anything is sent.
            StoreCallError: If a store call fails; pending chunks and retries
                are abandoned.
            RetryExhaustedError: If the retry bound is reached.
        """
        requests = [PutRequest(item=coerce_record(r)) for r in records]
        return self._write(requests)

    def save(self, *records: Mapping[str, Any]) -> list[BatchOutcome]:
        """Variadic form of ``batch_save``."""
        return self.batch_save(list(records))

    def batch_delete(self, keys: Sequence[Mapping[str, Any]]) -> list[BatchOutcome]:
        """Delete every key, retrying unprocessed ones until all are accepted.

        Each key is projected onto the table's key schema, so attributes
        other than the partition and sort key are never sent.

        Raises:
            UnsupportedAttributeTypeError: If any value is not a string.
            MissingKeyAttributeError: If a key lacks a schema key attribute.
        """
        coerced = [coerce_record(k) for k in keys]
        if not coerced:
            return []
        return self._delete(coerced, self.describe_schema())

    def truncate(self) -> int:
        """Delete every record in the table. Returns the number of keys deleted.

        The whole table is scanned into memory (``scan_limit`` records per page)
        before the first delete is sent.
        """
        schema = self.describe_schema()

        records = paginate(
            lambda cursor: self._client.scan(self._table, cursor=cursor, limit=self._scan_limit)
        )
        logger.info(f"Truncating {self._table}: {len(records)} records scanned")
        self._delete(records, schema)
        return len(records)

    def _delete(self, keys: list[Record], schema: Schema) -> list[BatchOutcome]:
        return self._write([DeleteRequest(key=project_key(k, schema)) for k in keys])

    def _write(self, requests: list[PutRequest | DeleteRequest]) -> list[BatchOutcome]:
        outcomes = self._submitter.submit_all(self._table, requests)
        if any(o.has_unprocessed for o in outcomes):
            outcomes.extend(self._retry.run(self._table, outcomes))
        return outcomes
