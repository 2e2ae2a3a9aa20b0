"""ddb-batch CLI — entry point.

Bulk writes and deletes against DynamoDB tables, with unprocessed items
rebuilt and retried until every request is accepted.
"""

from __future__ import annotations

import logging

import typer

from ddb_batch.commands.items_cmd import app as items_app
from ddb_batch.commands.tables_cmd import app as tables_app

app = typer.Typer(
    name="ddb-batch",
    help="Bulk save, delete and truncate DynamoDB tables with managed retry.",
    no_args_is_help=True,
)

app.add_typer(items_app, name="items")
app.add_typer(tables_app, name="tables")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """ddb-batch — bulk writes with retry of unprocessed items."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


if __name__ == "__main__":
    app()
