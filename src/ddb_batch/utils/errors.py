"""Error taxonomy and structured error output for the batch layer."""

from __future__ import annotations

import json
import sys
from typing import Any

from rich.console import Console

console = Console(stderr=True)


class BatchWriteError(RuntimeError):
    """Base class for every failure raised by the batch layer."""

    code = "RUNTIME_ERROR"


class StoreCallError(BatchWriteError):
    """The store call itself failed (network or service error)."""

    code = "STORE_ERROR"

    def __init__(self, message: str, store_code: str | None = None) -> None:
        super().__init__(message)
        self.store_code = store_code


class SchemaResolutionError(BatchWriteError):
    """The table key schema could not be resolved."""

    code = "SCHEMA_ERROR"


class UnsupportedAttributeTypeError(BatchWriteError):
    """An attribute value is not a string (or has an unknown wire tag)."""

    code = "UNSUPPORTED_TYPE"


class MissingKeyAttributeError(BatchWriteError):
    """A record or key lacks an attribute the key schema requires."""

    code = "MISSING_KEY"


class RetryExhaustedError(BatchWriteError):
    """Unprocessed requests remain after the last allowed retry round."""

    code = "RETRY_EXHAUSTED"

    def __init__(self, message: str, remaining: list[Any], outcomes: list[Any]) -> None:
        super().__init__(message)
        self.remaining = remaining
        self.outcomes = outcomes


# Actionable hints keyed by error substring
_ERROR_HINTS: list[tuple[str, str]] = [
    ("ProvisionedThroughputExceeded", "Table is throttling — raise DDB_BATCH_MAX_ATTEMPTS or retry later"),
    ("throttl", "Table is throttling — raise DDB_BATCH_MAX_ATTEMPTS or retry later"),
    ("retry bound", "Table is throttling — raise DDB_BATCH_MAX_ATTEMPTS or retry later"),
    ("UnrecognizedClient", "Credentials rejected — check DDB_BATCH_ACCESS_KEY / credentials file"),
    ("security token", "Credentials rejected — check DDB_BATCH_ACCESS_KEY / credentials file"),
    ("credentials", "Credentials missing — set DDB_BATCH_ACCESS_KEY or a credentials file"),
    ("ResourceNotFound", "Table not found — verify the table name and region"),
    ("could not find profile", "Profile not configured — check config/profiles.yaml"),
    ("unknown profile", "Profile not configured — check config/profiles.yaml"),
    ("timeout", "Request timed out — try again or check network connectivity"),
    ("connect", "Connection error — check network connectivity and endpoint URL"),
    ("ValidationException", "Request rejected by the store — verify key attributes and types"),
]


def _get_hint(error_message: str) -> str | None:
    """Match an error message to an actionable hint."""
    lower = error_message.lower()
    for pattern, hint in _ERROR_HINTS:
        if pattern.lower() in lower:
            return hint
    return None


def _get_code(error: Exception) -> str:
    """Classify an error, preferring the exception type over its message."""
    if isinstance(error, BatchWriteError) and error.code != BatchWriteError.code:
        if isinstance(error, StoreCallError) and error.store_code:
            if "throughput" in error.store_code.lower() or "throttl" in error.store_code.lower():
                return "THROTTLED"
        return error.code

    message = str(error)
    lower = message.lower()
    if "throttl" in lower or "throughputexceeded" in lower:
        return "THROTTLED"
    if "unrecognizedclient" in lower or "security token" in lower:
        return "AUTH_ERROR"
    if "resourcenotfound" in lower:
        return "NOT_FOUND"
    if "timeout" in lower:
        return "TIMEOUT"
    if "connect" in lower:
        return "CONNECTION_ERROR"
    return "RUNTIME_ERROR"


def handle_error(error: Exception) -> None:
    """Handle an error with structured output to stdout and human-readable output to stderr.

    Outputs a JSON error object to stdout for scripted consumers:
    {"error": true, "code": "STORE_ERROR", "message": "...", "hint": "..."}

    Also prints a human-readable error to stderr.
    """
    message = str(error)
    hint = _get_hint(message)
    code = _get_code(error)

    error_obj: dict[str, object] = {
        "error": True,
        "code": code,
        "message": message,
    }
    if isinstance(error, RetryExhaustedError):
        error_obj["remaining"] = len(error.remaining)
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout)
    sys.stdout.write("\n")

    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
