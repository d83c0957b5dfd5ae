"""
config/settings.py — Canonical configuration contract for the Livestatus checks.

Uses pydantic-settings to load, validate, and type-check all environment
variables. The query-service endpoints used to be hard-coded in each check;
they now live here so one deployment can point both checks at its own
Livestatus API hosts.

Two usage modes:
  Production / scripts:
      cfg = load_settings()                    # reads from .env + os.environ
      cfg = load_settings("/etc/nagios/livestatus.env")

  Tests (isolated — no env file, no os.environ bleed):
      cfg = Settings(LIVESTATUS_PARTITIONS="1,2", LIVESTATUS_MAX_WORKERS=1)
      # All values come exclusively from kwargs → clean, reproducible.
"""
from __future__ import annotations

import os
import re

from pydantic import field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

PARTITION_PLACEHOLDER = "{partition}"


class Settings(BaseSettings):
    # Settings() reads purely from kwargs. load_settings() is the explicit
    # production entry point that reads the env file and os.environ.
    model_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Only kwargs. load_settings() supplies env vars explicitly as kwargs.
        return (init_settings,)

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------
    LIVESTATUS_PARTITIONS: str = "1,2,3,4"
    LIVESTATUS_PARTITION_URL_TEMPLATE: str = "https://nagios{partition}.example.com/livestatus-api"
    LIVESTATUS_URL: str = "https://nagios.example.com/livestatus-api"

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------
    # false = legacy mode for internal endpoints with self-signed certificates
    LIVESTATUS_VERIFY_TLS: bool = True
    LIVESTATUS_TIMEOUT_SECONDS: float = 10.0
    # false keeps the historical rule: any status above 200 is a failure
    LIVESTATUS_ACCEPT_ANY_2XX: bool = False

    # -------------------------------------------------------------------------
    # Cluster fan-out
    # -------------------------------------------------------------------------
    LIVESTATUS_MAX_WORKERS: int = 4

    # -------------------------------------------------------------------------
    # Convenience properties
    # -------------------------------------------------------------------------

    @property
    def partition_ids(self) -> list[str]:
        """Partition identifiers in configured order, blanks dropped."""
        return [p.strip() for p in self.LIVESTATUS_PARTITIONS.split(",") if p.strip()]

    def partition_url(self, partition: str) -> str:
        return self.LIVESTATUS_PARTITION_URL_TEMPLATE.replace(PARTITION_PLACEHOLDER, partition)

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------

    @field_validator(
        "LIVESTATUS_PARTITIONS",
        "LIVESTATUS_PARTITION_URL_TEMPLATE",
        "LIVESTATUS_URL",
        mode="before",
    )
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip trailing whitespace left behind by shell-style env files."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("LIVESTATUS_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("LIVESTATUS_TIMEOUT_SECONDS must be > 0")
        return v

    @field_validator("LIVESTATUS_MAX_WORKERS")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("LIVESTATUS_MAX_WORKERS must be >= 1")
        return v

    @model_validator(mode="after")
    def validate_endpoints(self) -> Settings:
        """Enforce that the cluster check has somewhere to send its queries."""
        if not self.partition_ids:
            raise ValueError(
                "LIVESTATUS_PARTITIONS must list at least one partition id (e.g. 1,2,3,4)"
            )
        if PARTITION_PLACEHOLDER not in self.LIVESTATUS_PARTITION_URL_TEMPLATE:
            raise ValueError(
                f"LIVESTATUS_PARTITION_URL_TEMPLATE must contain {PARTITION_PLACEHOLDER}, "
                f"got '{self.LIVESTATUS_PARTITION_URL_TEMPLATE}'"
            )
        if not self.LIVESTATUS_URL:
            raise ValueError("LIVESTATUS_URL must not be empty")
        return self


def load_settings(env_file: str = ".env") -> Settings:
    """Load and validate settings from an env file + os.environ.

    Manually parses the env file and merges with os.environ (os.environ wins),
    then passes only known Settings fields as explicit kwargs. The
    pydantic-settings dotenv and env source chain is disabled so that
    Settings() stays a pure validation contract (no implicit env reads).

    A missing env file is not an error: every field has a default.

    Raises:
        ValidationError: if a value has the wrong type.
        ValueError: if an endpoint or transport value is unusable.
    """
    file_vals: dict[str, str] = {}
    try:
        with open(env_file, encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                k, _, v = line.partition("=")
                k = k.strip()
                # Strip inline comments: "false   # self-signed certs" → "false"
                v = re.sub(r"\s+#.*$", "", v.strip())
                if k:
                    file_vals[k] = v
    except FileNotFoundError:
        pass
    merged = {**file_vals, **os.environ}  # os.environ wins
    known = {k: v for k, v in merged.items() if k in Settings.model_fields}
    return Settings(**known)
