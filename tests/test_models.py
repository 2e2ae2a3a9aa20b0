"""Tests for models/items.py — tagged attribute values and wire shapes."""
import pytest

from ddb_batch.models.items import (
    AttributeKind,
    AttributeValue,
    BatchOutcome,
    DeleteRequest,
    PutRequest,
    Schema,
    plain,
    record_from_wire,
    string_record,
    write_request_from_wire,
)
from ddb_batch.utils.errors import UnsupportedAttributeTypeError


# ── AttributeValue ───────────────────────────────────────────────────

def test_string_constructor():
    value = AttributeValue.string("abc")
    assert value.kind == AttributeKind.STRING
    assert value.is_string
    assert value.to_wire() == {"S": "abc"}


@pytest.mark.parametrize("wire,kind", [
    ({"S": "x"}, AttributeKind.STRING),
    ({"N": "12.5"}, AttributeKind.NUMBER),
    ({"BOOL": True}, AttributeKind.BOOLEAN),
    ({"B": b"\x01"}, AttributeKind.BINARY),
    ({"SS": ["a", "b"]}, AttributeKind.STRING_SET),
    ({"NS": ["1", "2"]}, AttributeKind.NUMBER_SET),
    ({"BS": [b"\x01"]}, AttributeKind.BINARY_SET),
    ({"NULL": True}, AttributeKind.NULL),
])
def test_from_wire_flat_kinds(wire, kind):
    assert AttributeValue.from_wire(wire).kind == kind


def test_from_wire_nested():
    value = AttributeValue.from_wire({"M": {"tags": {"L": [{"S": "a"}, {"N": "1"}]}}})
    assert value.kind == AttributeKind.MAP
    inner = value.value["tags"]
    assert inner.kind == AttributeKind.LIST
    assert inner.value[1] == AttributeValue(kind=AttributeKind.NUMBER, value="1")
    assert value.to_wire() == {"M": {"tags": {"L": [{"S": "a"}, {"N": "1"}]}}}


def test_from_wire_unknown_tag():
    with pytest.raises(UnsupportedAttributeTypeError, match="'XS'"):
        AttributeValue.from_wire({"XS": ["a", "b"]})


def test_from_wire_malformed():
    with pytest.raises(UnsupportedAttributeTypeError, match="Malformed"):
        AttributeValue.from_wire({"S": "a", "N": "1"})


def test_as_string_rejects_other_kinds():
    with pytest.raises(UnsupportedAttributeTypeError, match="'flag' has kind BOOLEAN"):
        AttributeValue(kind=AttributeKind.BOOLEAN, value=False).as_string("flag")


# ── Schema ───────────────────────────────────────────────────────────

def test_schema_key_names():
    assert Schema(partition_key="id", sort_key="sort").key_names == ["id", "sort"]
    assert Schema(partition_key="id").key_names == ["id"]


# ── Write requests ───────────────────────────────────────────────────

def test_put_request_wire():
    req = PutRequest(item=string_record({"id": "1", "color": "red"}))
    assert req.to_wire() == {"PutRequest": {"Item": {"id": {"S": "1"}, "color": {"S": "red"}}}}


def test_delete_request_wire():
    req = DeleteRequest(key=string_record({"id": "1"}))
    assert req.to_wire() == {"DeleteRequest": {"Key": {"id": {"S": "1"}}}}


def test_write_request_from_wire_put():
    req = write_request_from_wire({"PutRequest": {"Item": {"id": {"S": "1"}}}})
    assert isinstance(req, PutRequest)
    assert req.kind == "put"


def test_write_request_from_wire_unknown():
    with pytest.raises(ValueError, match="Unknown write request"):
        write_request_from_wire({"UpdateRequest": {}})


# ── BatchOutcome ─────────────────────────────────────────────────────

def test_batch_outcome_counts():
    outcome = BatchOutcome(
        table="t",
        submitted=25,
        unprocessed=[PutRequest(item=string_record({"id": "1"}))],
    )
    assert outcome.processed_count == 24
    assert outcome.has_unprocessed
    assert outcome.attempt == 1


def test_batch_outcome_discriminates_dicts():
    outcome = BatchOutcome(
        table="t",
        submitted=1,
        unprocessed=[{"kind": "delete", "key": {"id": {"kind": "S", "value": "1"}}}],
    )
    assert isinstance(outcome.unprocessed[0], DeleteRequest)


# ── helpers ──────────────────────────────────────────────────────────

def test_string_record_stringifies():
    assert string_record({"id": 7}) == {"id": AttributeValue.string("7")}


def test_plain_roundtrip():
    assert plain(record_from_wire({"id": {"S": "1"}, "n": {"N": "2"}})) == {"id": "1", "n": "2"}
