"""Rendering command results as a rich table, JSON or CSV."""

from __future__ import annotations

import csv
import json
import sys
from enum import Enum
from typing import Any, Sequence

from rich.console import Console
from rich.table import Table

from ddb_batch.models.items import BatchOutcome

console = Console(stderr=True)

SUMMARY_COLUMNS = ["round", "chunks", "submitted", "accepted", "unprocessed"]


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def print_rows(
    rows: list[dict[str, Any]],
    fmt: OutputFormat = OutputFormat.TABLE,
    columns: list[str] | None = None,
    title: str | None = None,
) -> None:
    """Print result rows. JSON and CSV go to stdout, tables to the stderr console."""
    columns = columns or (list(rows[0]) if rows else [])

    if fmt == OutputFormat.JSON:
        json.dump([{c: row.get(c) for c in columns} for row in rows], sys.stdout, indent=2, default=str)
        sys.stdout.write("\n")
    elif fmt == OutputFormat.CSV:
        if not rows:
            return
        writer = csv.DictWriter(sys.stdout, fieldnames=columns, extrasaction="ignore", lineterminator="\n")
        writer.writeheader()
        writer.writerows(rows)
    elif not rows:
        console.print("[dim]No results.[/dim]")
    else:
        table = Table(title=title)
        for col in columns:
            table.add_column(col, overflow="fold")
        for row in rows:
            table.add_row(*[str(row.get(col, "")) for col in columns])
        console.print(table)


def summarize_outcomes(outcomes: Sequence[BatchOutcome]) -> list[dict[str, Any]]:
    """One summary row per submission round: chunks, requests sent, accepted, unprocessed."""
    rounds: dict[int, dict[str, Any]] = {}
    for o in outcomes:
        row = rounds.setdefault(o.attempt, dict.fromkeys(SUMMARY_COLUMNS, 0) | {"round": o.attempt})
        row["chunks"] += 1
        row["submitted"] += o.submitted
        row["accepted"] += o.processed_count
        row["unprocessed"] += len(o.unprocessed)
    return [rounds[k] for k in sorted(rounds)]
