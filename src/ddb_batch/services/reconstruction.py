"""Rebuilding typed records and keys from unprocessed write requests."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from ddb_batch.models.items import (
    AttributeValue,
    DeleteRequest,
    Key,
    PutRequest,
    Record,
    Schema,
)
from ddb_batch.utils.errors import MissingKeyAttributeError, UnsupportedAttributeTypeError


def coerce_record(record: Mapping[str, Any]) -> Record:
    """Normalize caller input to a string-only record.

    Plain ``str`` values are wrapped; AttributeValue instances must be of the
    string kind. Anything else is rejected before it reaches the store.
    """
    out: Record = {}
    for name, value in record.items():
        if isinstance(value, AttributeValue):
            value.as_string(name)
            out[name] = value
        elif isinstance(value, str):
            out[name] = AttributeValue.string(value)
        else:
            raise UnsupportedAttributeTypeError(
                f"Attribute '{name}' is {type(value).__name__}; only string attributes are supported"
            )
    return out


def _key_value(attributes: Record, name: str) -> AttributeValue:
    if name not in attributes:
        raise MissingKeyAttributeError(f"Key attribute '{name}' is missing from {sorted(attributes)}")
    return AttributeValue.string(attributes[name].as_string(name))


def project_key(attributes: Record, schema: Schema) -> Key:
    """Project a record (or key) down to exactly the schema's key attributes."""
    return {name: _key_value(attributes, name) for name in schema.key_names}


def reconstruct_record(attributes: Record, schema: Schema) -> Record:
    """Rebuild a full record: key attributes first, then every other attribute verbatim."""
    record = project_key(attributes, schema)
    for name, value in attributes.items():
        if name in record:
            continue
        record[name] = AttributeValue.string(value.as_string(name))
    return record


def split_unprocessed(
    requests: Sequence[PutRequest | DeleteRequest],
    schema: Schema,
) -> tuple[list[Record], list[Key]]:
    """Separate unprocessed requests by kind and rebuild their payloads.

    Returns (records to save again, keys to delete again), each in the order
    the requests were given.
    """
    records: list[Record] = []
    keys: list[Key] = []
    for request in requests:
        if isinstance(request, PutRequest):
            records.append(reconstruct_record(request.item, schema))
        else:
            keys.append(project_key(request.key, schema))
    return records, keys
