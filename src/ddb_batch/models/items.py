"""Item, key and write-request models, plus DynamoDB wire marshaling."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from ddb_batch.utils.errors import UnsupportedAttributeTypeError

# Hard limit on write requests per BatchWriteItem call
MAX_BATCH_SIZE = 25

# Records per scan page during truncate
DEFAULT_SCAN_LIMIT = 10


class AttributeKind(str, Enum):
    """Attribute value kinds, valued by their DynamoDB wire tag."""
    STRING = "S"
    NUMBER = "N"
    BOOLEAN = "BOOL"
    BINARY = "B"
    LIST = "L"
    MAP = "M"
    STRING_SET = "SS"
    NUMBER_SET = "NS"
    BINARY_SET = "BS"
    NULL = "NULL"


class AttributeValue(BaseModel):
    """A single tagged attribute value."""
    kind: AttributeKind
    value: Any

    model_config = {"frozen": True}

    @classmethod
    def string(cls, value: str) -> AttributeValue:
        return cls(kind=AttributeKind.STRING, value=value)

    @property
    def is_string(self) -> bool:
        return self.kind == AttributeKind.STRING

    def as_string(self, name: str = "") -> str:
        """Return the string payload, failing fast for any other kind."""
        if not self.is_string:
            label = f"'{name}' " if name else ""
            raise UnsupportedAttributeTypeError(
                f"Attribute {label}has kind {self.kind.name}; only string attributes are supported"
            )
        return self.value

    @classmethod
    def from_wire(cls, wire: dict[str, Any]) -> AttributeValue:
        """Decode a DynamoDB attribute value such as ``{"S": "abc"}``."""
        if len(wire) != 1:
            raise UnsupportedAttributeTypeError(f"Malformed attribute value: {wire!r}")
        tag, raw = next(iter(wire.items()))
        try:
            kind = AttributeKind(tag)
        except ValueError:
            raise UnsupportedAttributeTypeError(f"Unsupported attribute type tag '{tag}'") from None

        if kind == AttributeKind.LIST:
            raw = [cls.from_wire(v) for v in raw]
        elif kind == AttributeKind.MAP:
            raw = {k: cls.from_wire(v) for k, v in raw.items()}
        return cls(kind=kind, value=raw)

    def to_wire(self) -> dict[str, Any]:
        if self.kind == AttributeKind.LIST:
            return {self.kind.value: [v.to_wire() for v in self.value]}
        if self.kind == AttributeKind.MAP:
            return {self.kind.value: {k: v.to_wire() for k, v in self.value.items()}}
        return {self.kind.value: self.value}


# A record maps attribute names to values; a key is a record projection
Record = dict[str, AttributeValue]
Key = dict[str, AttributeValue]


class Schema(BaseModel):
    """Key schema of a table."""
    partition_key: str
    sort_key: str | None = None

    @property
    def key_names(self) -> list[str]:
        if self.sort_key:
            return [self.partition_key, self.sort_key]
        return [self.partition_key]


class PutRequest(BaseModel):
    kind: Literal["put"] = "put"
    item: dict[str, AttributeValue]

    def to_wire(self) -> dict[str, Any]:
        return {"PutRequest": {"Item": record_to_wire(self.item)}}


class DeleteRequest(BaseModel):
    kind: Literal["delete"] = "delete"
    key: dict[str, AttributeValue]

    def to_wire(self) -> dict[str, Any]:
        return {"DeleteRequest": {"Key": record_to_wire(self.key)}}


WriteRequest = Annotated[Union[PutRequest, DeleteRequest], Field(discriminator="kind")]


class BatchOutcome(BaseModel):
    """Result of one BatchWriteItem call.

    Accepted requests are implicit: only the unprocessed ones come back.
    ``attempt`` is the round number, 1 for the first submission.
    """
    table: str
    submitted: int
    unprocessed: list[WriteRequest] = Field(default_factory=list)
    attempt: int = 1

    @property
    def processed_count(self) -> int:
        return self.submitted - len(self.unprocessed)

    @property
    def has_unprocessed(self) -> bool:
        return bool(self.unprocessed)


class ScanPage(BaseModel):
    """One page of a table scan."""
    records: list[dict[str, AttributeValue]] = Field(default_factory=list)
    next_cursor: dict[str, AttributeValue] | None = None


def record_to_wire(record: Record) -> dict[str, dict[str, Any]]:
    return {name: value.to_wire() for name, value in record.items()}


def record_from_wire(wire: dict[str, dict[str, Any]]) -> Record:
    return {name: AttributeValue.from_wire(value) for name, value in wire.items()}


def write_request_from_wire(wire: dict[str, Any]) -> PutRequest | DeleteRequest:
    """Decode one entry of ``UnprocessedItems[table]``."""
    if "PutRequest" in wire:
        return PutRequest(item=record_from_wire(wire["PutRequest"]["Item"]))
    if "DeleteRequest" in wire:
        return DeleteRequest(key=record_from_wire(wire["DeleteRequest"]["Key"]))
    raise ValueError(f"Unknown write request shape: {sorted(wire)}")


def string_record(mapping: dict[str, Any]) -> Record:
    """Build a record from plain values, storing each one as a string."""
    return {name: AttributeValue.string(str(value)) for name, value in mapping.items()}


def plain(record: Record) -> dict[str, Any]:
    """Flatten a record to plain Python values for output."""
    return {name: value.value for name, value in record.items()}
