"""Configuration management for ddb-batch.

Loads credentials and retry settings from .env / environment and named store
profiles from profiles.yaml.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from dotenv import load_dotenv

from ddb_batch.models.items import DEFAULT_SCAN_LIMIT
from ddb_batch.services.retry import RetryPolicy


class StoreProfile(BaseModel):
    """A named store target (region, local endpoint, credentials file)."""
    region: str | None = None
    endpoint_url: str | None = None
    credentials_file: str | None = None


class StoreConfig(BaseModel):
    """Everything needed to build a DynamoDB client.

    Precedence: ``client`` > ``access_key``/``secret_key`` > ``credentials_file``
    > the default boto3 credential chain.
    """
    access_key: str | None = None
    secret_key: str | None = None
    credentials_file: str | None = None
    client: Any = None
    region: str | None = None
    endpoint_url: str | None = None


class Settings(BaseModel):
    """Application settings loaded from environment variables."""
    access_key: str = Field(default="", description="AWS access key id")
    secret_key: str = Field(default="", description="AWS secret access key")
    credentials_file: str = Field(default="", description="Properties file with accessKey/secretKey")
    region: str = Field(default="", description="AWS region name")
    endpoint_url: str = Field(default="", description="Override endpoint (e.g. DynamoDB Local)")
    max_attempts: int = Field(default=8, description="Maximum submission rounds per batch operation")
    base_delay: float = Field(default=0.1, description="Backoff before the first retry round, in seconds")
    max_delay: float = Field(default=5.0, description="Upper bound on backoff between rounds, in seconds")
    backoff_multiplier: float = Field(default=2.0, description="Growth factor of the backoff between rounds")
    scan_limit: int = Field(default=DEFAULT_SCAN_LIMIT, description="Records per scan page when truncating")
    schema_cache_ttl: int = Field(default=300, description="Key schema cache TTL in seconds")


class Config(BaseModel):
    """Full application configuration."""
    settings: Settings
    profiles: dict[str, StoreProfile] = Field(default_factory=dict)

    def get_profile(self, name: str) -> StoreProfile:
        """Get a store profile by name."""
        if name not in self.profiles:
            available = ", ".join(sorted(self.profiles.keys())) or "none"
            raise ValueError(f"Unknown profile '{name}'. Available: {available}")
        return self.profiles[name]

    def store_config(self, profile: str | None = None) -> StoreConfig:
        """Build the StoreConfig for a profile, falling back to settings."""
        s = self.settings
        prof = self.get_profile(profile) if profile else StoreProfile()
        return StoreConfig(
            access_key=s.access_key or None,
            secret_key=s.secret_key or None,
            credentials_file=prof.credentials_file or s.credentials_file or None,
            region=prof.region or s.region or None,
            endpoint_url=prof.endpoint_url or s.endpoint_url or None,
        )

    def retry_policy(self) -> RetryPolicy:
        s = self.settings
        return RetryPolicy(
            max_attempts=s.max_attempts,
            base_delay=s.base_delay,
            max_delay=s.max_delay,
            multiplier=s.backoff_multiplier,
        )

    @property
    def all_profiles(self) -> list[str]:
        """List all configured profile names."""
        return sorted(self.profiles.keys())


def _find_project_root() -> Path:
    """Walk up from the working directory to find the project root (where config/ lives)."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        if (parent / "config" / "profiles.yaml").exists():
            return parent
    return current


def _load_profiles(project_root: Path) -> dict[str, StoreProfile]:
    """Load store profiles from profiles.yaml. A missing file means no profiles."""
    profiles_path = project_root / "config" / "profiles.yaml"
    if not profiles_path.exists():
        return {}

    with open(profiles_path) as f:
        data = yaml.safe_load(f) or {}

    return {
        name: StoreProfile(**(profile_data or {}))
        for name, profile_data in data.get("profiles", {}).items()
    }


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _load_settings() -> Settings:
    """Load settings from environment variables.

    Supports DDB_BATCH_* names, the standard AWS_* names, and the legacy
    accessKey/secretKey names used by properties-style credential files.
    """
    return Settings(
        access_key=_env("DDB_BATCH_ACCESS_KEY", "AWS_ACCESS_KEY_ID", "accessKey"),
        secret_key=_env("DDB_BATCH_SECRET_KEY", "AWS_SECRET_ACCESS_KEY", "secretKey"),
        credentials_file=_env("DDB_BATCH_CREDENTIALS_FILE"),
        region=_env("DDB_BATCH_REGION", "AWS_REGION", "AWS_DEFAULT_REGION"),
        endpoint_url=_env("DDB_BATCH_ENDPOINT_URL"),
        max_attempts=int(_env("DDB_BATCH_MAX_ATTEMPTS", default="8")),
        base_delay=float(_env("DDB_BATCH_BASE_DELAY", default="0.1")),
        max_delay=float(_env("DDB_BATCH_MAX_DELAY", default="5.0")),
        backoff_multiplier=float(_env("DDB_BATCH_BACKOFF_MULTIPLIER", default="2.0")),
        scan_limit=int(_env("DDB_BATCH_SCAN_LIMIT", default=str(DEFAULT_SCAN_LIMIT))),
        schema_cache_ttl=int(_env("DDB_BATCH_SCHEMA_CACHE_TTL", default="300")),
    )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load and cache the full application configuration."""
    project_root = _find_project_root()

    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    settings = _load_settings()
    profiles = _load_profiles(project_root)

    return Config(settings=settings, profiles=profiles)
