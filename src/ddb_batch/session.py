"""Credential resolution and DynamoDB client construction."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError

from ddb_batch.config import StoreConfig
from ddb_batch.utils.errors import StoreCallError

logger = logging.getLogger(__name__)


def load_credentials_file(path: str) -> tuple[str, str]:
    """Read ``accessKey`` / ``secretKey`` from a properties-style file.

    Lines are ``name=value`` (or ``name: value``); lines starting with
    ``#`` or ``!`` are comments.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Credentials file not found: {path}")

    values: dict[str, str] = {}
    with open(file_path) as f:
        for line in f:
            line = line.strip()
            if not line or line[0] in "#!":
                continue
            sep = "=" if "=" in line else ":"
            name, _, value = line.partition(sep)
            values[name.strip()] = value.strip()

    access_key = values.get("accessKey")
    secret_key = values.get("secretKey")
    if not access_key or not secret_key:
        raise ValueError(f"Credentials file {path} must define both accessKey and secretKey")
    return access_key, secret_key


def build_dynamodb_client(store_config: StoreConfig) -> Any:
    """Return a DynamoDB low-level client for the given configuration.

    A pre-existing client is returned untouched. Otherwise the explicit key
    pair wins over the credentials file, which wins over the default boto3
    credential chain.
    """
    if store_config.client is not None:
        return store_config.client

    access_key, secret_key = store_config.access_key, store_config.secret_key
    if not (access_key and secret_key) and store_config.credentials_file:
        logger.info(f"Loading credentials from {store_config.credentials_file}")
        access_key, secret_key = load_credentials_file(store_config.credentials_file)

    session_kwargs: dict[str, Any] = {}
    if access_key and secret_key:
        session_kwargs["aws_access_key_id"] = access_key
        session_kwargs["aws_secret_access_key"] = secret_key
    if store_config.region:
        session_kwargs["region_name"] = store_config.region

    session = boto3.Session(**session_kwargs)

    client_kwargs: dict[str, Any] = {}
    if store_config.endpoint_url:
        client_kwargs["endpoint_url"] = store_config.endpoint_url

    try:
        return session.client("dynamodb", **client_kwargs)
    except BotoCoreError as e:
        raise StoreCallError(f"Could not create DynamoDB client: {e}") from e
