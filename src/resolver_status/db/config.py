"""Notion connection settings read from the environment."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

NOTION_API_URL = "https://api.notion.com/v1/"
NOTION_VERSION = "2022-06-28"
NOTION_TIMEOUT_SECONDS = 30.0

StatusPropertyKind = Literal["status", "select"]


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration values are absent or blank."""


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank."""
    missing: list[str] = []
    values: dict[str, str] = {}
    for name in names:
        value = os.getenv(name)
        if value is None or not value.strip():
            missing.append(name)
            continue
        values[name] = value.strip()

    if missing:
        raise MissingConfigurationError(f"Missing configuration for: {', '.join(sorted(missing))}")
    return values


@dataclass(frozen=True)
class NotionConfig:
    api_key: str
    database_id: str
    api_url: str = NOTION_API_URL
    notion_version: str = NOTION_VERSION
    status_property_kind: StatusPropertyKind = "status"
    timeout_seconds: float = NOTION_TIMEOUT_SECONDS


def get_notion_config() -> NotionConfig:
    values = require_env_vars(("NOTION_API_KEY", "NOTION_DATABASE_ID"))
    kind = os.getenv("NOTION_STATUS_PROPERTY_TYPE", "status").strip().lower()
    if kind not in ("status", "select"):
        raise ConfigurationError(f"NOTION_STATUS_PROPERTY_TYPE must be 'status' or 'select', got {kind!r}")
    return NotionConfig(
        api_key=values["NOTION_API_KEY"],
        database_id=values["NOTION_DATABASE_ID"],
        api_url=os.getenv("NOTION_API_URL", NOTION_API_URL),
        notion_version=os.getenv("NOTION_VERSION", NOTION_VERSION),
        status_property_kind="select" if kind == "select" else "status",
    )
