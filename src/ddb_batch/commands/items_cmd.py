"""CLI commands for bulk item writes and deletes."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from ddb_batch.config import get_config
from ddb_batch.services.table import DocumentTable
from ddb_batch.utils.errors import handle_error
from ddb_batch.utils.output import SUMMARY_COLUMNS, OutputFormat, print_rows, summarize_outcomes
from ddb_batch.utils.records_io import load_records

console = Console(stderr=True)
app = typer.Typer(name="items", help="Bulk save and delete items with managed retry.")


def _build_table(table: str, profile: str | None, verbose: bool = False) -> DocumentTable:
    return DocumentTable.from_config(get_config(), table, profile=profile, verbose=verbose)


@app.command("save")
def save_items(
    table: Annotated[str, typer.Option("--table", "-t", help="Target table name")],
    file: Annotated[str, typer.Option("--file", "-f", help="JSON or CSV file of records")],
    profile: Annotated[str | None, typer.Option("--profile", "-p", help="Store profile from profiles.yaml")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Load and validate without writing")] = False,
    output: Annotated[OutputFormat, typer.Option("--output", "-o")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Put every record from FILE into TABLE, retrying unprocessed items.

    Attribute values are stored as strings.
    """
    try:
        records = load_records(file)
        if dry_run:
            console.print(f"[yellow]DRY RUN:[/yellow] Would save {len(records)} records to {table}")
            return

        doc_table = _build_table(table, profile, verbose)
        outcomes = doc_table.batch_save(records)
        console.print(f"Saved {len(records)} records to {table}")
        print_rows(summarize_outcomes(outcomes), output, columns=SUMMARY_COLUMNS, title=f"Batch Save ({table})")
    except (RuntimeError, FileNotFoundError, ValueError) as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command("delete")
def delete_items(
    table: Annotated[str, typer.Option("--table", "-t", help="Target table name")],
    file: Annotated[str, typer.Option("--file", "-f", help="JSON or CSV file of keys")],
    profile: Annotated[str | None, typer.Option("--profile", "-p", help="Store profile from profiles.yaml")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Load and validate without deleting")] = False,
    output: Annotated[OutputFormat, typer.Option("--output", "-o")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Delete every key listed in FILE from TABLE, retrying unprocessed items.

    Attributes other than the table's key attributes are ignored.
    """
    try:
        keys = load_records(file)
        if dry_run:
            console.print(f"[yellow]DRY RUN:[/yellow] Would delete {len(keys)} keys from {table}")
            return

        doc_table = _build_table(table, profile, verbose)
        outcomes = doc_table.batch_delete(keys)
        console.print(f"Deleted {len(keys)} keys from {table}")
        print_rows(summarize_outcomes(outcomes), output, columns=SUMMARY_COLUMNS, title=f"Batch Delete ({table})")
    except (RuntimeError, FileNotFoundError, ValueError) as e:
        handle_error(e)
        raise typer.Exit(1)
