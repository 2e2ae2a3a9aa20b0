"""Chunked submission of write requests to the store."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from ddb_batch.models.items import (
    MAX_BATCH_SIZE,
    BatchOutcome,
    DeleteRequest,
    PutRequest,
)
from ddb_batch.utils.chunking import partition

logger = logging.getLogger(__name__)


def collect_unprocessed(outcomes: Sequence[BatchOutcome]) -> list[PutRequest | DeleteRequest]:
    """Concatenate unprocessed requests, keeping chunk order and within-chunk order."""
    pending: list[PutRequest | DeleteRequest] = []
    for outcome in outcomes:
        pending.extend(outcome.unprocessed)
    return pending


class BatchSubmitter:
    """Sends pre-sized chunks to the store, one call per chunk.

    Store-call failures propagate unchanged; nothing after a failing chunk
    is submitted.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    def submit(
        self,
        table: str,
        chunk: Sequence[PutRequest | DeleteRequest],
        attempt: int = 1,
    ) -> BatchOutcome:
        """Submit a single chunk of at most MAX_BATCH_SIZE requests."""
        if len(chunk) > MAX_BATCH_SIZE:
            raise ValueError(
                f"Chunk of {len(chunk)} requests exceeds the limit of {MAX_BATCH_SIZE}"
            )

        puts = [r.item for r in chunk if isinstance(r, PutRequest)]
        deletes = [r.key for r in chunk if isinstance(r, DeleteRequest)]

        logger.debug("Batch write starts...")
        outcome = self._client.batch_write(table, puts=puts, deletes=deletes)
        logger.debug("Batch write ends.")

        return outcome.model_copy(update={"attempt": attempt})

    def submit_all(
        self,
        table: str,
        requests: Sequence[PutRequest | DeleteRequest],
        attempt: int = 1,
    ) -> list[BatchOutcome]:
        """Partition requests and submit every chunk sequentially."""
        chunks = partition(requests, MAX_BATCH_SIZE)
        outcomes: list[BatchOutcome] = []

        for i, chunk in enumerate(chunks, 1):
            if len(chunks) > 1:
                logger.debug(f"Sending chunk {i}/{len(chunks)} to {table} (round {attempt})")
            outcomes.append(self.submit(table, chunk, attempt=attempt))

        unprocessed = sum(len(o.unprocessed) for o in outcomes)
        if unprocessed:
            logger.warning(
                f"There are [{unprocessed}] unprocessed items at the end of round {attempt} on {table}"
            )
        return outcomes
