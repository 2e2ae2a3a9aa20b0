"""CLI commands for table inspection and truncation."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from ddb_batch.config import get_config
from ddb_batch.services.table import DocumentTable
from ddb_batch.utils.errors import handle_error
from ddb_batch.utils.output import OutputFormat, print_rows

console = Console(stderr=True)
app = typer.Typer(name="tables", help="Inspect and truncate tables.")


def _build_table(table: str, profile: str | None, verbose: bool = False) -> DocumentTable:
    return DocumentTable.from_config(get_config(), table, profile=profile, verbose=verbose)


@app.command("describe")
def describe_table(
    table: Annotated[str, typer.Option("--table", "-t", help="Table name")],
    profile: Annotated[str | None, typer.Option("--profile", "-p", help="Store profile from profiles.yaml")] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Show the partition and sort key names of a table."""
    try:
        schema = _build_table(table, profile, verbose).describe_schema()
        row = {
            "table": table,
            "partitionKey": schema.partition_key,
            "sortKey": schema.sort_key or "",
        }
        print_rows([row], output, title="Key Schema")
    except (RuntimeError, FileNotFoundError, ValueError) as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command("truncate")
def truncate_table(
    table: Annotated[str, typer.Option("--table", "-t", help="Table to empty")],
    profile: Annotated[str | None, typer.Option("--profile", "-p", help="Store profile from profiles.yaml")] = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip the confirmation prompt")] = False,
    output: Annotated[OutputFormat, typer.Option("--output", "-o")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Delete every item in a table (scan, then batch delete).

    The full key set is held in memory before deletion starts.
    """
    if not yes:
        typer.confirm(f"Delete ALL items from {table}?", abort=True)

    try:
        deleted = _build_table(table, profile, verbose).truncate()
        print_rows([{"table": table, "deleted": deleted}], output, title="Truncate")
    except (RuntimeError, FileNotFoundError, ValueError) as e:
        handle_error(e)
        raise typer.Exit(1)
