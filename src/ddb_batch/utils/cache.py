"""In-memory TTL cache for table key schemas."""

from __future__ import annotations

import logging
import time
from typing import Callable

from ddb_batch.models.items import Schema

logger = logging.getLogger(__name__)


class SchemaCache:
    """In-memory TTL cache of key schemas, keyed by table name.

    A ttl of 0 or less keeps entries until they are invalidated explicitly.
    A disabled cache never stores anything, so every lookup hits the store.
    """

    def __init__(self, ttl: int = 300, enabled: bool = True) -> None:
        self._ttl = ttl
        self._enabled = enabled
        self._store: dict[str, tuple[float, Schema]] = {}

    @property
    def enabled(self) -> bool:
        return self._enabled

    def get(self, table: str) -> Schema | None:
        """Retrieve a cached schema if it exists and has not expired."""
        if not self._enabled:
            return None

        entry = self._store.get(table)
        if entry is None:
            return None

        timestamp, schema = entry
        if self._ttl > 0 and time.time() - timestamp > self._ttl:
            self._store.pop(table, None)
            return None

        return schema

    def put(self, table: str, schema: Schema) -> None:
        """Store a schema in the cache."""
        if not self._enabled:
            return
        self._store[table] = (time.time(), schema)

    def get_or_fetch(self, table: str, fetch_fn: Callable[[str], Schema]) -> Schema:
        """Return the cached schema, calling ``fetch_fn`` on a miss."""
        schema = self.get(table)
        if schema is not None:
            return schema

        logger.debug(f"Schema cache miss for table {table}")
        schema = fetch_fn(table)
        self.put(table, schema)
        return schema

    def invalidate(self, table: str) -> bool:
        """Drop the cached schema for one table. Returns True if one was cached."""
        return self._store.pop(table, None) is not None

    def invalidate_all(self) -> int:
        """Clear the entire cache."""
        count = len(self._store)
        self._store.clear()
        return count

    @property
    def size(self) -> int:
        """Number of entries currently in the cache."""
        return len(self._store)
