"""Loading records and keys from JSON or CSV files."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any


def load_records(file_path: str) -> list[dict[str, str]]:
    """Load flat records from a JSON array or a CSV file with a header row.

    Every value is converted to a string; nested JSON values are rejected.
    Empty CSV cells load as empty strings, which the store accepts for
    non-key attributes.

    Args:
        file_path: Path to the ``.json`` or ``.csv`` file.

    Returns:
        List of attribute-name to string-value dicts.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Records file not found: {file_path}")

    ext = path.suffix.lower()
    if ext == ".json":
        with open(path) as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list):
            raise ValueError(f"{file_path} must contain a JSON object or array of objects")
        return [_stringify(row, i) for i, row in enumerate(data)]
    elif ext == ".csv":
        with open(path, newline="") as f:
            reader = csv.DictReader(f)
            # Short rows leave trailing columns unset (None); empty cells stay as ""
            return [{k: v for k, v in row.items() if k is not None and v is not None} for row in reader]
    else:
        raise ValueError(f"Unsupported file type: {ext}. Use .csv or .json")


def _stringify(row: Any, index: int) -> dict[str, str]:
    if not isinstance(row, dict):
        raise ValueError(f"Entry {index} is not an object")
    out: dict[str, str] = {}
    for name, value in row.items():
        if isinstance(value, (dict, list)) or value is None:
            raise ValueError(f"Entry {index}: attribute '{name}' must be a scalar value")
        out[name] = value if isinstance(value, str) else json.dumps(value)
    return out
