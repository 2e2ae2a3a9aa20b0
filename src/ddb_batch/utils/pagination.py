"""Cursor pagination helpers for table scans."""

from __future__ import annotations

import logging
from typing import Callable

from ddb_batch.models.items import Key, Record, ScanPage

logger = logging.getLogger(__name__)


def paginate(
    fetch_fn: Callable[[Key | None], ScanPage],
    cursor: Key | None = None,
) -> list[Record]:
    """Collect every record by following ``next_cursor`` until it is absent.

    Args:
        fetch_fn: A callable taking the cursor (None for the first page) and
                  returning a ScanPage.
        cursor: Optional cursor to resume from.

    Returns:
        All records concatenated across pages, in page order.
    """
    all_records: list[Record] = []
    pages = 0

    while True:
        page = fetch_fn(cursor)
        pages += 1
        all_records.extend(page.records)

        cursor = page.next_cursor
        if not cursor:
            break

    logger.debug(f"Paginated {pages} pages, {len(all_records)} records")
    return all_records
