"""Bounded retry of unprocessed write requests."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Sequence

from pydantic import BaseModel, Field

from ddb_batch.models.items import BatchOutcome, DeleteRequest, PutRequest
from ddb_batch.services.reconstruction import split_unprocessed
from ddb_batch.services.submitter import BatchSubmitter, collect_unprocessed
from ddb_batch.utils.cache import SchemaCache
from ddb_batch.utils.errors import RetryExhaustedError

logger = logging.getLogger(__name__)


class RetryPolicy(BaseModel):
    """How many submission rounds to allow and how long to wait between them.

    ``max_attempts`` counts every round, the first submission included.
    """
    max_attempts: int = Field(default=8, ge=1)
    base_delay: float = Field(default=0.1, ge=0)
    max_delay: float = Field(default=5.0, ge=0)
    multiplier: float = Field(default=2.0, ge=1)

    def delay(self, retry: int) -> float:
        """Backoff before the ``retry``-th retry round (1-based)."""
        return min(self.base_delay * self.multiplier ** (retry - 1), self.max_delay)


class RetryCoordinator:
    """Resubmits unprocessed requests until none remain or the policy gives up."""

    def __init__(
        self,
        client: Any,
        submitter: BatchSubmitter,
        schema_cache: SchemaCache,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self._submitter = submitter
        self._schema_cache = schema_cache
        self._policy = policy or RetryPolicy()
        self._sleep = sleep

    def run(self, table: str, outcomes: Sequence[BatchOutcome]) -> list[BatchOutcome]:
        """Retry everything left unprocessed by ``outcomes``.

        Returns the outcomes of the retry rounds only, in submission order.

        Raises:
            RetryExhaustedError: If requests are still unprocessed after
                ``policy.max_attempts`` rounds.
        """
        pending = collect_unprocessed(outcomes)
        attempt = max((o.attempt for o in outcomes), default=1)
        retried: list[BatchOutcome] = []

        while pending:
            if attempt >= self._policy.max_attempts:
                raise RetryExhaustedError(
                    f"{len(pending)} requests on {table} still unprocessed after "
                    f"{attempt} rounds (retry bound {self._policy.max_attempts})",
                    remaining=pending,
                    outcomes=[*outcomes, *retried],
                )

            requests = self._rebuild(table, pending)
            wait = self._policy.delay(attempt)
            logger.warning(
                f"Retrying {len(requests)} unprocessed requests on {table} "
                f"(round {attempt + 1}/{self._policy.max_attempts}) in {wait:.2f}s"
            )
            self._sleep(wait)

            attempt += 1
            round_outcomes = self._submitter.submit_all(table, requests, attempt=attempt)
            retried.extend(round_outcomes)
            pending = collect_unprocessed(round_outcomes)

        return retried

    def _rebuild(
        self,
        table: str,
        pending: Sequence[PutRequest | DeleteRequest],
    ) -> list[PutRequest | DeleteRequest]:
        schema = self._schema_cache.get_or_fetch(table, self._client.describe_schema)
        records, keys = split_unprocessed(pending, schema)
        if records:
            logger.debug(f"Going to process {len(records)} unprocessed save records now")
        if keys:
            logger.debug(f"Going to process {len(keys)} unprocessed delete records now")
        return [PutRequest(item=r) for r in records] + [DeleteRequest(key=k) for k in keys]
