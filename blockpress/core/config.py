#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Application configuration.

All values can be overridden via environment variables or a .env file
(prefix ``BLOCKPRESS_``, e.g. ``BLOCKPRESS_NOTION_API_TOKEN``).
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from blockpress._version import __version__ as _pkg_version


# -----------------------------------------------------------------------------

# Hosts serving signed, expiring Notion file URLs.
DEFAULT_TEMPORARY_HOSTS = [
    "secure.notion-static.com",
    "www.notion.so",
    "prod-files-secure.s3.us-west-2.amazonaws.com",
    "prod-files-secure.s3.amazonaws.com",
]


# -----------------------------------------------------------------------------

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BLOCKPRESS_",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ────────────────────────────────────────────────────────

    app_name: str = "Blockpress"
    app_version: str = _pkg_version
    debug: bool = False
    environment: Literal["development", "testing", "production"] = "development"
    log_level: str = "INFO"

    # ── Notion API ─────────────────────────────────────────────────────────

    notion_api_token: str = ""
    notion_api_base: str = "https://api.notion.com/v1/"
    notion_version: str = "2022-06-28"
    notion_timeout: float = 30.0

    # ── Rendering ──────────────────────────────────────────────────────────

    temporary_hosts: list[str] = DEFAULT_TEMPORARY_HOSTS
    diagram_languages: list[str] = ["mermaid"]
    highlight_code: bool = False
    placeholder_prefix: str = "bp"

    # ── CORS ───────────────────────────────────────────────────────────────

    cors_origins: list[str] = [
        "http://localhost:8000",
        "http://localhost:3000",
    ]

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"

    @property
    def has_notion_token(self) -> bool:
        return bool(self.notion_api_token.strip())


# -----------------------------------------------------------------------------

@lru_cache
def get_settings() -> Settings:
    return Settings()


# -----------------------------------------------------------------------------
