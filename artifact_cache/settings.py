"""Runtime configuration for the artifact cache."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration values mapped from ``ARTIFACTORY_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ARTIFACTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Feature switches
    fetch: bool = Field(False, description="Try to use prebuilt artifacts")
    submit: bool = Field(False, description="Publish freshly built artifacts")
    always_build: str = Field("", description="Artifact ids that are always built locally")

    cache_dir: str = Field("artifactory", description="Cache root mirroring remote paths")

    # Transport selection
    transport: str = Field("cli", description="'cli' for the jfrog client, 'http' for the REST API")
    cli: str = Field("jfrog", description="Path to the jfrog executable")
    server_id: Optional[str] = Field(None, description="jfrog server id to use")
    url: Optional[str] = Field(None, description="Artifactory base URL for the http transport")
    username: Optional[str] = None
    password: Optional[str] = None
    access_token: Optional[str] = None
    timeout: float = Field(30.0, description="HTTP timeout in seconds")

    # Logging
    log_level: str = Field("INFO")
    log_file: Optional[str] = Field(None)

    @property
    def always_build_names(self) -> List[str]:
        return [name for name in re.split(r"[;,\s]+", self.always_build) if name]


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
