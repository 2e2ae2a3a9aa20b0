"""CLI tests for the tables command group and the root app."""
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from ddb_batch.commands.tables_cmd import app
from ddb_batch.main import app as main_app
from ddb_batch.models.items import Schema
from ddb_batch.utils.errors import SchemaResolutionError

runner = CliRunner()


def _table():
    table = MagicMock()
    table.describe_schema.return_value = Schema(partition_key="id", sort_key="sort")
    table.truncate.return_value = 25
    return table


# ── describe ─────────────────────────────────────────────────────────

def test_describe():
    with patch("ddb_batch.commands.tables_cmd._build_table", return_value=_table()):
        result = runner.invoke(app, ["describe", "--table", "users", "--output", "json"])
    assert result.exit_code == 0
    assert '"partitionKey": "id"' in result.stdout
    assert '"sortKey": "sort"' in result.stdout


def test_describe_schema_error():
    table = _table()
    table.describe_schema.side_effect = SchemaResolutionError("Table users has no partition (HASH) key")
    with patch("ddb_batch.commands.tables_cmd._build_table", return_value=table):
        result = runner.invoke(app, ["describe", "--table", "users"])
    assert result.exit_code == 1
    assert "SCHEMA_ERROR" in result.stdout


# ── truncate ─────────────────────────────────────────────────────────

def test_truncate_with_yes():
    table = _table()
    with patch("ddb_batch.commands.tables_cmd._build_table", return_value=table):
        result = runner.invoke(app, ["truncate", "--table", "users", "--yes", "--output", "json"])
    assert result.exit_code == 0
    table.truncate.assert_called_once()
    assert '"deleted": 25' in result.stdout


def test_truncate_declined():
    table = _table()
    with patch("ddb_batch.commands.tables_cmd._build_table", return_value=table):
        result = runner.invoke(app, ["truncate", "--table", "users"], input="n\n")
    assert result.exit_code == 1
    table.truncate.assert_not_called()


def test_truncate_confirmed():
    table = _table()
    with patch("ddb_batch.commands.tables_cmd._build_table", return_value=table):
        result = runner.invoke(app, ["truncate", "--table", "users"], input="y\n")
    assert result.exit_code == 0
    table.truncate.assert_called_once()


# ── root app ─────────────────────────────────────────────────────────

def test_root_lists_groups():
    result = runner.invoke(main_app, ["--help"])
    assert result.exit_code == 0
    assert "items" in result.stdout
    assert "tables" in result.stdout
