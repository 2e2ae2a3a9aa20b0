"""Shared fixtures for the ddb-batch test suite."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from ddb_batch.config import Config, Settings, StoreProfile
from ddb_batch.models.items import (
    BatchOutcome,
    DeleteRequest,
    PutRequest,
    ScanPage,
    Schema,
)
from ddb_batch.utils.errors import StoreCallError


class FakeStore:
    """In-memory stand-in for StoreClient.

    ``unprocessed_plan`` lists, per batch_write call, the fraction of the batch
    handed back as unprocessed (the tail of the batch). Calls past the end of
    the plan accept everything. ``fail_on_call`` makes the n-th call (1-based)
    raise StoreCallError.
    """

    def __init__(
        self,
        schema: Schema | None = None,
        unprocessed_plan: list[float] | None = None,
        fail_on_call: int | None = None,
        pages: list[ScanPage] | None = None,
    ) -> None:
        self.schema = schema or Schema(partition_key="id", sort_key="sort")
        self.items: dict[tuple, dict] = {}
        self.accepted: list[PutRequest | DeleteRequest] = []
        self.batch_calls: list[tuple[list, list]] = []
        self.describe_calls = 0
        self.scan_calls: list[tuple] = []
        self._plan = list(unprocessed_plan or [])
        self._fail_on_call = fail_on_call
        self._pages = list(pages or [])

    def _key(self, attrs: dict) -> tuple:
        return tuple(attrs[name].value for name in self.schema.key_names)

    def batch_write(self, table, puts=(), deletes=()):
        self.batch_calls.append((list(puts), list(deletes)))
        if self._fail_on_call == len(self.batch_calls):
            raise StoreCallError("Store call batch_write_item failed: boom", store_code="InternalServerError")

        requests = [PutRequest(item=p) for p in puts] + [DeleteRequest(key=d) for d in deletes]
        fraction = self._plan.pop(0) if self._plan else 0.0
        cut = len(requests) - int(len(requests) * fraction)

        for request in requests[:cut]:
            self.accepted.append(request)
            if isinstance(request, PutRequest):
                self.items[self._key(request.item)] = request.item
            else:
                self.items.pop(self._key(request.key), None)

        return BatchOutcome(table=table, submitted=len(requests), unprocessed=requests[cut:])

    def describe_schema(self, table):
        self.describe_calls += 1
        return self.schema

    def scan(self, table, cursor=None, limit=10):
        self.scan_calls.append((table, cursor, limit))
        return self._pages.pop(0) if self._pages else ScanPage()


class RecordingSleep:
    """Collects requested delays instead of sleeping."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def fake_settings() -> Settings:
    return Settings(
        access_key="test-access-key",
        secret_key="test-secret-key",
        credentials_file="",
        region="us-east-1",
        endpoint_url="",
        max_attempts=5,
        base_delay=0.0,
        max_delay=1.0,
        backoff_multiplier=3.0,
        scan_limit=10,
        schema_cache_ttl=300,
    )


@pytest.fixture
def fake_profiles() -> dict[str, StoreProfile]:
    return {
        "local": StoreProfile(region="us-east-1", endpoint_url="http://localhost:8000"),
        "prod": StoreProfile(region="ap-southeast-1"),
        "legacy": StoreProfile(credentials_file="/etc/ddb/awsCredentials.properties"),
    }


@pytest.fixture
def fake_config(fake_settings, fake_profiles) -> Config:
    return Config(settings=fake_settings, profiles=fake_profiles)


@pytest.fixture
def mock_dynamodb():
    """MagicMock standing in for the boto3 DynamoDB client."""
    dynamodb = MagicMock()
    dynamodb.batch_write_item.return_value = {"UnprocessedItems": {}}
    dynamodb.describe_table.return_value = {
        "Table": {
            "KeySchema": [
                {"AttributeName": "id", "KeyType": "HASH"},
                {"AttributeName": "sort", "KeyType": "RANGE"},
            ]
        }
    }
    dynamodb.scan.return_value = {"Items": []}
    return dynamodb
